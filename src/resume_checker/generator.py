# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Handles the generation of the ATS-optimized MS Word (DOCX) resume.

The generator writes two synchronized outputs: the paginated document and a
plain-text transcript of the same content, which callers re-score to show
the before/after effect of regeneration.
"""

import io
import logging
import math
import re
from dataclasses import dataclass
from typing import List, Tuple

from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Mm, Pt, RGBColor

from resume_checker.models import StructuredResume

logger = logging.getLogger(__name__)

PAGE_WIDTH = Mm(210)
PAGE_HEIGHT = Mm(297)
MARGIN = Mm(20)
# Headers never start in the last stretch of a page
HEADER_KEEP_SPACE = Mm(20).pt

BLACK = RGBColor(0, 0, 0)
GREY = RGBColor(100, 100, 100)

MONTHS = {
    'jan': '01', 'feb': '02', 'mar': '03', 'apr': '04', 'may': '05', 'jun': '06',
    'jul': '07', 'aug': '08', 'sep': '09', 'oct': '10', 'nov': '11', 'dec': '12',
}

NUMERIC_DATE = re.compile(r'\b(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4}|\d{2})\b')
# Free transcript text only rewrites D.M.Y / D-M-Y; slashes there are often scores like 8.5/10
TRANSCRIPT_DATE = re.compile(r'\b(\d{1,2})[.\-](\d{1,2})[.\-](\d{4}|\d{2})\b')
MONTH_YEAR_DATE = re.compile(
    r'\b(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+(?:\d{1,2},?\s+)?(\d{4})\b',
    re.IGNORECASE,
)

SUMMARY_TEMPLATE = (
    "Experienced professional with a strong background in {skills}. Skilled in problem-solving, "
    "collaboration, and delivering high-quality results. Demonstrated ability to work effectively "
    "in team environments and meet project deadlines. Seeking opportunities to leverage expertise "
    "and contribute to innovative projects."
)
DEFAULT_SUMMARY_SKILLS = 'technology and development'


def _expand_year(year: str) -> str:
    if len(year) == 2:
        return ('19' if int(year) > 50 else '20') + year
    return year


def _numeric_to_month_year(match: re.Match) -> str:
    first, second, year = match.group(1), match.group(2), match.group(3)
    # Day-first unless the middle field cannot be a month
    month = second if int(second) <= 12 or int(first) > 12 else first
    if not 1 <= int(month) <= 12:
        return match.group(0)
    return f"{int(month):02d}/{_expand_year(year)}"


def _month_name_to_month_year(match: re.Match) -> str:
    return f"{MONTHS[match.group(1).lower()[:3]]}/{match.group(2)}"


def format_date_for_ats(value: str) -> str:
    """
    Normalizes recognizable dates to MM/YYYY; anything else passes through.

    >>> format_date_for_ats("15.06.2021")
    '06/2021'
    >>> format_date_for_ats("Aug 2019 - Present")
    '08/2019 - Present'
    """
    if not value:
        return ''
    value = NUMERIC_DATE.sub(_numeric_to_month_year, value.strip())
    return MONTH_YEAR_DATE.sub(_month_name_to_month_year, value)


def enhance_description(description: str) -> str:
    """Trims a bullet and capitalizes its first letter. Wording is left alone."""
    text = description.strip()
    if text:
        text = text[0].upper() + text[1:]
    return text


def optimize_text_for_ats(text: str, data: StructuredResume) -> str:
    """
    Final clean-up of the transcript: normalized dates, at most one blank
    line in a row, uniform bullet markers, and a labelled email.
    """
    optimized = TRANSCRIPT_DATE.sub(_numeric_to_month_year, text)
    optimized = re.sub(r'\n{3,}', '\n\n', optimized)
    optimized = optimized.strip()
    optimized = re.sub(r'^[-*]\s+', '• ', optimized, flags=re.MULTILINE)

    email = data.personal_info.email
    if email and 'Email:' not in optimized:
        optimized = optimized.replace(email, f'Email: {email}')
    return optimized


def build_summary(data: StructuredResume) -> str:
    skills = [s.strip() for s in data.skills if s and s.strip()][:3]
    return SUMMARY_TEMPLATE.format(skills=', '.join(skills) if skills else DEFAULT_SUMMARY_SKILLS)


@dataclass
class GeneratedResume:
    """The downloadable artifact plus its plain-text transcript."""
    file_name: str
    content: bytes
    text: str
    page_count: int

    def save(self, path: str):
        with open(path, 'wb') as f:
            f.write(self.content)
        logger.info(f"Resume saved: {path}")


class ResumeGenerator:
    """
    Generates an ATS-friendly DOCX resume from StructuredResume data.
    """
    def __init__(self, font_name: str = 'Calibri'):
        self.font_name = font_name
        self.styles = {
            'name': 18,
            'h1': 14,
            'entry': 11,
            'body': 11,
            'detail': 10,
        }
        # Layout bookkeeping is done in points
        self.usable_height = PAGE_HEIGHT.pt - 2 * MARGIN.pt
        self.usable_width = PAGE_WIDTH.pt - 2 * MARGIN.pt
        self._reset()

    def _reset(self):
        self.document = Document()
        self.transcript: List[str] = []
        self.y = 0.0
        self.page_count = 1
        self._setup_page()
        self._setup_styles()

    def _setup_page(self):
        try:
            section = self.document.sections[0]
            section.page_width = PAGE_WIDTH
            section.page_height = PAGE_HEIGHT
            for side in ('left_margin', 'right_margin', 'top_margin', 'bottom_margin'):
                setattr(section, side, MARGIN)
        except (IndexError, AttributeError) as e:
            logger.warning(f"Warning configuring page layout: {e}")

    def _setup_styles(self):
        try:
            style = self.document.styles['Normal']
            font = style.font
            font.name = self.font_name
            font.size = Pt(self.styles['body'])
        except KeyError as e:
            logger.warning(f"Warning configuring base style: {e}")

    def _estimate_height(self, text: str, font_size: float) -> float:
        """Rough height in points of `text` once wrapped to the page width."""
        chars_per_line = max(1, int(self.usable_width / (font_size * 0.5)))
        lines = sum(max(1, math.ceil(len(part) / chars_per_line)) for part in text.split('\n'))
        return lines * font_size * 1.2 + font_size * 0.4

    def _ensure_room(self, needed: float, paragraph):
        """Starts a new page before `paragraph` if it would overflow the current one."""
        if self.y > 0 and self.y + needed > self.usable_height:
            paragraph.paragraph_format.page_break_before = True
            self.page_count += 1
            self.y = 0.0
        self.y += needed

    def _add_text(self, text: str, size: int, bold: bool = False, color: RGBColor = BLACK):
        if not text:
            return None
        p = self.document.add_paragraph()
        run = p.add_run(text)
        run.bold = bold
        run.font.size = Pt(size)
        run.font.color.rgb = color
        p.paragraph_format.space_after = Pt(size * 0.4)
        p.paragraph_format.widow_control = True
        self._ensure_room(self._estimate_height(text, size), p)
        return p

    def _add_rule(self, paragraph):
        """Draws a thin line under a section header."""
        p_pr = paragraph._p.get_or_add_pPr()
        border = OxmlElement('w:pBdr')
        bottom = OxmlElement('w:bottom')
        bottom.set(qn('w:val'), 'single')
        bottom.set(qn('w:sz'), '6')
        bottom.set(qn('w:space'), '1')
        bottom.set(qn('w:color'), '000000')
        border.append(bottom)
        p_pr.append(border)

    def _add_section_header(self, title: str):
        self.y += Mm(8).pt
        if self.y > self.usable_height - HEADER_KEEP_SPACE:
            self.y = self.usable_height
        self.transcript.append(f'\n\n{title}\n')
        p = self._add_text(title, self.styles['h1'], bold=True)
        p.paragraph_format.keep_with_next = True
        self._add_rule(p)

    def _write(self, line: str):
        self.transcript.append(line)

    def _add_contact_block(self, data: StructuredResume):
        info = data.personal_info
        if info.name:
            name = info.name.upper()
            self._write(f'{name}\n')
            self._write('CONTACT INFORMATION\n')
            self._add_text(name, self.styles['name'], bold=True)

        contact = []
        for label, value in (('Email', info.email), ('Phone', info.phone), ('LinkedIn', info.linkedin),
                             ('Website', info.website), ('Address', info.address)):
            if value:
                contact.append(value)
                self._write(f'{label}: {value}\n')
        if contact:
            self._add_text(' | '.join(contact), self.styles['detail'], color=GREY)
            self._write('\n')
        self.y += Mm(8).pt

    def _add_summary(self, data: StructuredResume):
        summary = data.summary.strip() if data.summary else ''
        if not summary:
            summary = build_summary(data)
        self._add_section_header('PROFESSIONAL SUMMARY')
        self._write(f'{summary}\n')
        self._add_text(summary, self.styles['body'])

    def _add_detail_line(self, parts: List[str]):
        if parts:
            self._add_text(' | '.join(parts), self.styles['detail'], color=GREY)

    def _add_education(self, data: StructuredResume):
        if not data.education or not data.education[0].degree:
            return
        self._add_section_header('EDUCATION')
        for edu in data.education:
            if not edu.degree:
                continue
            line = ' | '.join(p for p in (edu.degree, edu.institution, edu.location) if p)
            self._write(f'{line}\n')
            self._add_text(line, self.styles['entry'], bold=True).paragraph_format.keep_with_next = True

            details = []
            if edu.date:
                date = format_date_for_ats(edu.date)
                details.append(date)
                self._write(f'{date}\n')
            if edu.gpa:
                details.append(f'GPA: {edu.gpa}')
                self._write(f'GPA: {edu.gpa}\n')
            self._add_detail_line(details)
            self._write('\n')

    def _add_experience(self, data: StructuredResume):
        if not data.experience or not data.experience[0].title:
            return
        self._add_section_header('PROFESSIONAL EXPERIENCE')
        for job in data.experience:
            if not job.title:
                continue
            line = ' | '.join(p for p in (job.title, job.company, job.location) if p)
            self._write(f'{line}\n')
            self._add_text(line, self.styles['entry'], bold=True).paragraph_format.keep_with_next = True

            if job.date:
                date = format_date_for_ats(job.date)
                self._write(f'{date}\n')
                self._add_text(date, self.styles['detail'], color=GREY)

            for item in job.description or []:
                if item and item.strip():
                    bullet = f'• {enhance_description(item)}'
                    self._write(f'{bullet}\n')
                    self._add_text(bullet, self.styles['detail'])
            self._write('\n')

    def _add_skills(self, data: StructuredResume):
        if not data.skills or not data.skills[0]:
            return
        self._add_section_header('SKILLS')
        skills = [s.strip() for s in data.skills if s and s.strip()]
        if skills:
            line = ', '.join(skills)
            self._write(f'{line}\n')
            self._add_text(line, self.styles['body'])

    def _add_projects(self, data: StructuredResume):
        if not data.projects or not data.projects[0].name:
            return
        self._add_section_header('PROJECTS')
        for project in data.projects:
            if not project.name:
                continue
            line = ' | '.join(p for p in (project.name, project.technologies) if p)
            self._write(f'{line}\n')
            self._add_text(line, self.styles['entry'], bold=True).paragraph_format.keep_with_next = True

            if project.date:
                date = format_date_for_ats(project.date)
                self._write(f'{date}\n')
                self._add_text(date, self.styles['detail'], color=GREY)
            if project.description:
                self._write(f'{project.description}\n')
                self._add_text(project.description, self.styles['detail'])
            self._write('\n')

    def _add_certifications(self, data: StructuredResume):
        if not data.certifications or not data.certifications[0].name:
            return
        self._add_section_header('CERTIFICATIONS')
        for cert in data.certifications:
            if not cert.name:
                continue
            line = ' | '.join(p for p in (cert.name, cert.issuer) if p)
            self._write(f'{line}\n')
            self._add_text(line, self.styles['entry'], bold=True).paragraph_format.keep_with_next = True

            details = []
            if cert.date:
                date = format_date_for_ats(cert.date)
                details.append(date)
                self._write(f'{date}\n')
            if cert.credential_id:
                details.append(f'Credential ID: {cert.credential_id}')
                self._write(f'Credential ID: {cert.credential_id}\n')
            self._add_detail_line(details)
            self._write('\n')

    def _add_achievements(self, data: StructuredResume):
        if not data.achievements or not data.achievements[0].description:
            return
        self._add_section_header('ACHIEVEMENTS')
        for achievement in data.achievements:
            if achievement.description:
                bullet = f'• {achievement.description}'
                self._write(f'{bullet}\n')
                self._add_text(bullet, self.styles['detail'])
        self._write('\n')

    def generate(self, data: StructuredResume, file_name: str) -> GeneratedResume:
        """
        Main entry point to generate the document.

        Args:
            data (StructuredResume): Snapshot of the edited resume fields.
            file_name (str): Name the caller will offer the artifact under.

        Returns:
            GeneratedResume: DOCX bytes and the ATS-optimized transcript.
        """
        self._reset()

        self._add_contact_block(data)
        self._add_summary(data)
        self._add_education(data)
        self._add_experience(data)
        self._add_skills(data)
        self._add_projects(data)
        self._add_certifications(data)
        self._add_achievements(data)

        text = optimize_text_for_ats(''.join(self.transcript), data)

        buffer = io.BytesIO()
        self.document.save(buffer)
        logger.info(f"Resume generated successfully: {file_name} ({self.page_count} page(s))")
        return GeneratedResume(
            file_name=file_name,
            content=buffer.getvalue(),
            text=text,
            page_count=self.page_count,
        )


def generate_resume(data: StructuredResume, file_name: str) -> Tuple[GeneratedResume, str]:
    """Convenience wrapper returning (artifact, transcript)."""
    result = ResumeGenerator().generate(data, file_name)
    return result, result.text
