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
Heuristic parser turning plain resume text back into structured fields.

Best-effort only: unusual layouts produce partially blank or misfiled data,
never an exception. Every list in the result holds at least one row.
"""

import logging
import re
from typing import List

from resume_checker.models import (
    AchievementEntry,
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ProjectEntry,
    StructuredResume,
)
from resume_checker.scorer import EMAIL_PATTERN, LINKEDIN_PATTERN, PHONE_PATTERN

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(
    r'\b(?:https?://|www\.)[\w.-]+(?:/[\w./%#?=&-]*)?'
    r'|\b(?:[a-z0-9-]+\.)+(?:com|org|net|io|dev|me|edu|co|ai|app|info|in|us|uk)\b(?:/[\w./%#?=&-]*)?'
)
ADDRESS_PATTERN = re.compile(
    r'\d+\s+[A-Za-z][A-Za-z ]{0,40}?\b'
    r'(?:street|st|avenue|ave|road|rd|drive|dr|lane|ln|boulevard|blvd|city|state|zip|country)\b',
    re.IGNORECASE,
)
DATE_PATTERN = re.compile(
    r'\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}'
    r'|\b(?:0?[1-9]|1[0-2])/\d{4}\b'
    r'|\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+(?:\d{1,2},?\s+)?\d{4}'
    r'(?:\s*[-–]\s*(?:(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+\d{4}|present|current))?'
    r'|\b(?:19|20)\d{2}\s*[-–]\s*(?:(?:19|20)\d{2}|present|current)\b',
    re.IGNORECASE,
)
DEGREE_PATTERN = re.compile(
    r'\b(?:bachelor|master|phd|ph\.d|doctorate|diploma|degree|b\.?tech|m\.?tech'
    r'|b\.e|m\.e|b\.?sc|m\.?sc|mba|bca|mca|b\.?com|m\.?com)(?!\w)',
    re.IGNORECASE,
)
JOB_TITLE_PATTERN = re.compile(
    r'\b(?:developer|engineer|intern|manager|analyst|designer|consultant|specialist'
    r'|assistant|lead|senior|junior)\b',
    re.IGNORECASE,
)
GPA_PATTERN = re.compile(r'\b(?:gpa|cgpa|grade)\s*:?\s*([\d.]+(?:\s*/\s*[\d.]+)?)', re.IGNORECASE)
BULLET_PREFIX = re.compile(r'^\s*(?:[•\-*▪●]|\d+\.(?!\d))\s*')
TECHNOLOGIES_PREFIX = re.compile(r'^\s*(?:tech(?:nologies)?|tech stack|tools|built with)\s*:\s*', re.IGNORECASE)

EDUCATION_HEADERS = ['education', 'academic background', 'educational background']
EXPERIENCE_HEADERS = ['experience', 'work experience', 'employment', 'professional experience', 'career']
SKILLS_HEADERS = ['skills', 'technical skills', 'core competencies', 'competencies']
PROJECT_HEADERS = ['projects', 'project experience', 'project']
CERTIFICATION_HEADERS = ['certifications', 'certificates', 'certificate']
ACHIEVEMENT_HEADERS = ['achievements', 'accomplishments', 'awards', 'honors']
SUMMARY_HEADERS = ['objective', 'summary', 'professional summary', 'profile', 'about']

# Any of these on a short line closes the section currently being read
SECTION_END_KEYWORDS = [
    'education', 'experience', 'skills', 'projects', 'certifications',
    'achievements', 'awards', 'objective', 'summary',
]

COMMON_SKILLS = ['javascript', 'python', 'java', 'react', 'node', 'sql', 'html', 'css', 'mongodb', 'express']

MAX_HEADER_LENGTH = 50


def _is_bullet(line: str) -> bool:
    return bool(BULLET_PREFIX.match(line)) and not DATE_PATTERN.match(line.strip())


def _strip_bullet(line: str) -> str:
    return BULLET_PREFIX.sub('', line, count=1).strip()


def _non_empty_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split('\n') if line.strip()]


def extract_section(text: str, keywords: List[str]) -> str:
    """
    Returns the lines between the first short line mentioning one of
    `keywords` and the next short line mentioning any section keyword.
    Returns '' when no header line is found.
    """
    lines = text.split('\n')
    start = -1
    for i, line in enumerate(lines):
        lower = line.lower().strip()
        if len(lower) < MAX_HEADER_LENGTH and any(k in lower for k in keywords):
            start = i + 1
            break
    if start == -1:
        return ''

    end = len(lines)
    for i in range(start, len(lines)):
        lower = lines[i].lower().strip()
        if len(lower) < MAX_HEADER_LENGTH and any(k in lower for k in SECTION_END_KEYWORDS):
            end = i
            break
    return '\n'.join(lines[start:end])


def parse_name(text: str) -> str:
    """
    First non-empty line, accepted only if it is short and, once non-letters
    are stripped, still has letters in it.
    """
    lines = _non_empty_lines(text)
    if not lines:
        return ''
    first = lines[0]
    letters = re.sub(r'[^A-Za-z\s.]', '', first)
    if len(first) < MAX_HEADER_LENGTH and re.search(r'[A-Za-z]', letters):
        return first
    return ''


def parse_website(text: str) -> str:
    """First URL that is neither a LinkedIn profile nor part of an email address."""
    without_emails = EMAIL_PATTERN.sub(' ', text)
    for match in URL_PATTERN.finditer(without_emails):
        url = match.group(0).rstrip('.')
        if 'linkedin' not in url.lower():
            return url
    return ''


def parse_address(text: str) -> str:
    match = ADDRESS_PATTERN.search(text)
    return match.group(0).strip() if match else ''


def parse_personal_info(text: str) -> PersonalInfo:
    email = EMAIL_PATTERN.search(text)
    phone = PHONE_PATTERN.search(text)
    linkedin = LINKEDIN_PATTERN.search(text)
    return PersonalInfo(
        name=parse_name(text),
        email=email.group(0) if email else '',
        phone=phone.group(0).strip() if phone else '',
        linkedin=linkedin.group(0) if linkedin else '',
        website=parse_website(text),
        address=parse_address(text),
    )


def parse_summary(section_text: str) -> str:
    return ' '.join(_non_empty_lines(section_text)[:3]).strip()


def parse_education(section_text: str) -> List[EducationEntry]:
    """Each line naming a degree opens an entry; following lines fill it in."""
    entries: List[EducationEntry] = []
    current = None
    for line in _non_empty_lines(section_text):
        if DEGREE_PATTERN.search(line):
            current = EducationEntry(degree=line)
            entries.append(current)
            date = DATE_PATTERN.search(line)
            if date:
                current.date = date.group(0)
            continue
        if current is None:
            continue

        gpa = GPA_PATTERN.search(line)
        date = DATE_PATTERN.search(line)
        if gpa and not current.gpa:
            current.gpa = gpa.group(1)
        elif date and not current.date and len(line) - len(date.group(0)) < 10:
            current.date = date.group(0)
        elif not current.institution and len(line) > 5:
            current.institution = line
            if date and not current.date:
                current.date = date.group(0)

    return entries or [EducationEntry()]


def parse_experience(section_text: str) -> List[ExperienceEntry]:
    """
    Lines with a job-title keyword open an entry. Bulleted lines become
    description items; the first plain line after the title is the company.
    """
    entries: List[ExperienceEntry] = []
    current = None
    for line in _non_empty_lines(section_text):
        if not _is_bullet(line) and JOB_TITLE_PATTERN.search(line) and len(line) < 100:
            current = ExperienceEntry(title=line, description=[])
            entries.append(current)
            continue
        if current is None:
            continue

        date = DATE_PATTERN.search(line)
        if _is_bullet(line):
            item = _strip_bullet(line)
            if item:
                current.description.append(item)
        elif date and not current.date and len(line) - len(date.group(0)) < 10:
            current.date = date.group(0)
        elif not current.company and 3 < len(line) < 100:
            current.company = line
            if date and not current.date:
                current.date = date.group(0)

    for entry in entries:
        if not entry.description:
            entry.description = ['']
    return entries or [ExperienceEntry()]


def parse_skills(section_text: str, full_text: str) -> List[str]:
    """
    Splits the skills section on commas, bullets, newlines and hyphens. With no
    skills section, falls back to spotting common technologies anywhere.
    """
    if section_text:
        skills = [s.strip() for s in re.split(r'[,•\n\-]', section_text)]
        skills = [s for s in skills if 0 < len(s) < MAX_HEADER_LENGTH]
        return skills or ['']

    lower = full_text.lower()
    found = [skill for skill in COMMON_SKILLS if skill in lower]
    return found or ['']


def parse_projects(section_text: str) -> List[ProjectEntry]:
    entries: List[ProjectEntry] = []
    current = None
    for line in _non_empty_lines(section_text):
        date = DATE_PATTERN.search(line)
        if current is not None:
            if _is_bullet(line):
                item = _strip_bullet(line)
                current.description = f"{current.description} {item}".strip()
                continue
            if TECHNOLOGIES_PREFIX.match(line):
                current.technologies = TECHNOLOGIES_PREFIX.sub('', line).strip()
                continue
            if date and len(line) - len(date.group(0)) < 10:
                if not current.date:
                    current.date = date.group(0)
                continue
        if 5 < len(line) < 100 and not _is_bullet(line):
            current = ProjectEntry(name=line)
            entries.append(current)
            if date:
                current.date = date.group(0)
    return entries or [ProjectEntry()]


def parse_certifications(section_text: str) -> List[CertificationEntry]:
    """One certification per line; `Name | Issuer` or `Name - Issuer` are split."""
    entries: List[CertificationEntry] = []
    for line in _non_empty_lines(section_text):
        line = _strip_bullet(line) if _is_bullet(line) else line
        if len(line) <= 5:
            continue
        entry = CertificationEntry()
        date = DATE_PATTERN.search(line)
        if date:
            entry.date = date.group(0)
            line = line.replace(date.group(0), '').strip(' ,|()-–')
        parts = re.split(r'\s+[|–]\s+|\s+-\s+', line, maxsplit=1)
        entry.name = parts[0].strip()
        if len(parts) > 1:
            entry.issuer = parts[1].strip()
        if entry.name:
            entries.append(entry)
    return entries or [CertificationEntry()]


def parse_achievements(section_text: str) -> List[AchievementEntry]:
    entries = []
    for line in _non_empty_lines(section_text):
        for piece in line.split('•'):
            description = _strip_bullet(piece)
            if description:
                entries.append(AchievementEntry(description))
    return entries or [AchievementEntry()]


def get_empty_resume() -> StructuredResume:
    return StructuredResume()


def parse_resume(text: str) -> StructuredResume:
    """
    Segments resume text into structured fields.

    Args:
        text (str): Plain resume text as produced by the extractor.

    Returns:
        StructuredResume: Best-effort fields; all-blank for empty input.
    """
    if not text or not text.strip():
        return get_empty_resume()

    resume = StructuredResume(
        personal_info=parse_personal_info(text),
        summary=parse_summary(extract_section(text, SUMMARY_HEADERS)),
        education=parse_education(extract_section(text, EDUCATION_HEADERS)),
        experience=parse_experience(extract_section(text, EXPERIENCE_HEADERS)),
        skills=parse_skills(extract_section(text, SKILLS_HEADERS), text),
        projects=parse_projects(extract_section(text, PROJECT_HEADERS)),
        certifications=parse_certifications(extract_section(text, CERTIFICATION_HEADERS)),
        achievements=parse_achievements(extract_section(text, ACHIEVEMENT_HEADERS)),
    )
    logger.debug(
        f"Parsed resume: {len(resume.education)} education, {len(resume.experience)} experience, "
        f"{len([s for s in resume.skills if s])} skills"
    )
    return resume
