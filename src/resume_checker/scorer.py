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
ATS (Applicant Tracking System) compatibility scorer.

The rubric is a fixed, ordered table of ten dimensions. Each dimension owns a
constant point allocation and a pure evaluation function over
(text, filename, word_count); the maxima add up to 100.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from resume_checker.models import DimensionScore, ScoreReport, ScoreStats

logger = logging.getLogger(__name__)

# Common ATS-friendly section headers
STANDARD_SECTIONS = [
    'contact', 'contact information', 'personal information',
    'education', 'educational background', 'academic background',
    'experience', 'work experience', 'employment', 'professional experience',
    'skills', 'technical skills', 'core competencies',
    'projects', 'project experience',
    'certifications', 'certificates',
    'achievements', 'accomplishments', 'awards',
    'objective', 'summary', 'professional summary', 'profile',
]

# Words that hint at layout an ATS cannot parse
UNFRIENDLY_ELEMENTS = [
    'table', 'chart', 'graph', 'image', 'photo', 'picture',
    'header', 'footer', 'text box', 'textbox', 'column',
    'multi-column', 'graphic', 'design element',
]

ACTION_VERBS = [
    'achieved', 'developed', 'created', 'implemented', 'managed', 'led',
    'improved', 'increased', 'reduced', 'optimized', 'designed', 'built',
    'launched', 'executed', 'delivered', 'established', 'generated', 'produced',
    'coordinated', 'collaborated', 'analyzed', 'resolved', 'streamlined', 'enhanced',
]

COMMON_KEYWORDS = [
    'experience', 'skills', 'education', 'project', 'certification',
    'achievement', 'responsibility', 'leadership', 'team', 'communication',
]

EMAIL_PATTERN = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')
PHONE_PATTERN = re.compile(r'(\+?\d{1,3}[\s\-.]?)?\(?\d{3}\)?[\s\-.]?\d{3}[\s\-.]?\d{4}')
LINKEDIN_PATTERN = re.compile(r'linkedin\.com/in/[a-zA-Z0-9-]+', re.IGNORECASE)

DATE_PATTERNS = [
    # 12/31/2020, 31-12-20, 31.12.2020 and the MM/YYYY form the generator emits
    re.compile(r'\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}|\b(?:0?[1-9]|1[0-2])/\d{4}\b'),
    re.compile(r'(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s+\d{1,2},?\s+\d{4}', re.IGNORECASE),
    re.compile(r'(January|February|March|April|May|June|July|August|September|October|November|December)'
               r'\s+\d{1,2},?\s+\d{4}', re.IGNORECASE),
]

QUANTIFIER_PATTERN = re.compile(
    r'\d+\s*(percent|%|years?|months?|times?|people|users?|projects?|clients?|increase|decrease|improve)',
    re.IGNORECASE,
)
PERCENT_PATTERN = re.compile(r'%\s*\d+|\d+\s*%')
DIGIT_PATTERN = re.compile(r'\d')
PARAGRAPH_BREAK_PATTERN = re.compile(r'\n\s*\n')
BULLET_PATTERN = re.compile(r'^\s*(?:[•\-*▪●]\s+|\d{1,2}[.)]\s+)', re.MULTILINE)
CAPS_HEADER_PATTERN = re.compile(r'^[A-Z][A-Z \t&/]+$', re.MULTILINE)

# Overall status cut-offs, checked top-down
STATUS_THRESHOLDS = [
    (80, 'excellent'),
    (70, 'good'),
    (60, 'needs-improvement'),
]

# Word-count bands for the length dimension: (low, high, points)
LENGTH_BANDS = [
    (400, 800, 10),
    (300, 1000, 7),
    (200, 1200, 5),
]
LENGTH_FALLBACK_POINTS = 3
MIN_WORDS = 300
MAX_WORDS = 1000

MIN_PARAGRAPH_BREAKS = 3
MIN_CAPS_HEADERS = 2


@dataclass
class Evaluation:
    """What a dimension returns: its points, status and any messages it raised."""
    score: int
    status: str
    extra: Dict[str, object] = field(default_factory=dict)
    issues: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RubricDimension:
    name: str
    max: int
    evaluate: Callable[[str, str, int], Evaluation]


def _contains_any(text_lower: str, needles: List[str]) -> List[str]:
    return [needle for needle in needles if needle in text_lower]


def canonical_sections(text: str) -> List[str]:
    """
    Maps every standard header synonym present in the text onto a category.
    Returns the de-duplicated categories in first-seen order.
    """
    found = _contains_any(text.lower(), STANDARD_SECTIONS)
    categories = []
    for section in found:
        if 'experience' in section:
            category = 'experience'
        elif 'education' in section:
            category = 'education'
        elif 'skill' in section:
            category = 'skills'
        elif 'contact' in section:
            category = 'contact'
        else:
            category = section
        if category not in categories:
            categories.append(category)
    return categories


def evaluate_file_format(text: str, filename: str, word_count: int) -> Evaluation:
    if filename.lower().endswith(('.pdf', '.docx')):
        return Evaluation(10, 'good')
    return Evaluation(0, 'poor', issues=['File format not ideal. Use PDF or DOCX.'])


def evaluate_contact_info(text: str, filename: str, word_count: int) -> Evaluation:
    has_email = bool(EMAIL_PATTERN.search(text))
    has_phone = bool(PHONE_PATTERN.search(text))
    has_linkedin = bool(LINKEDIN_PATTERN.search(text))
    score = 5 * (has_email + has_phone + has_linkedin)

    result = Evaluation(score, 'good' if score >= 10 else 'needs-improvement')
    if not has_email:
        result.issues.append('Missing email address')
        result.suggestions.append('Add your email address in the contact section')
    if not has_phone:
        result.issues.append('Missing phone number')
        result.suggestions.append('Add your phone number')
    if not has_linkedin:
        result.suggestions.append('Consider adding your LinkedIn profile URL')
    return result


def evaluate_section_headers(text: str, filename: str, word_count: int) -> Evaluation:
    categories = canonical_sections(text)
    score = min(15, len(categories) * 3)
    if score >= 12:
        status = 'good'
    elif score >= 9:
        status = 'needs-improvement'
    else:
        status = 'poor'

    result = Evaluation(score, status, extra={'foundSections': categories})
    lower = text.lower()
    if 'education' not in lower:
        result.issues.append('Missing Education section')
        result.suggestions.append('Add an Education section with your academic background')
    if 'experience' not in lower and 'employment' not in lower:
        result.issues.append('Missing Work Experience section')
        result.suggestions.append('Add a Work Experience section')
    if 'skill' not in lower:
        result.issues.append('Missing Skills section')
        result.suggestions.append('Add a Skills section listing your technical and soft skills')
    return result


def evaluate_resume_length(text: str, filename: str, word_count: int) -> Evaluation:
    score = LENGTH_FALLBACK_POINTS
    for low, high, points in LENGTH_BANDS:
        if low <= word_count <= high:
            score = points
            break

    result = Evaluation(score, 'good' if score >= 7 else 'needs-improvement',
                        extra={'wordCount': word_count})
    if word_count < MIN_WORDS:
        result.issues.append('Resume is too short')
        result.suggestions.append(
            'Expand your resume with more details about your experience and achievements')
    if word_count > MAX_WORDS:
        result.issues.append('Resume is too long')
        result.suggestions.append(
            'Consider condensing your resume to 1-2 pages for better ATS compatibility')
    return result


def evaluate_date_formats(text: str, filename: str, word_count: int) -> Evaluation:
    if any(pattern.search(text) for pattern in DATE_PATTERNS):
        return Evaluation(10, 'good')
    return Evaluation(
        0, 'poor',
        issues=['No dates found in standard formats'],
        suggestions=['Add dates to your education and work experience (e.g., MM/YYYY or Month YYYY)'],
    )


def evaluate_action_verbs(text: str, filename: str, word_count: int) -> Evaluation:
    found = _contains_any(text.lower(), ACTION_VERBS)
    score = min(10, len(found) * 2)
    result = Evaluation(score, 'good' if score >= 6 else 'needs-improvement',
                        extra={'foundVerbs': len(found)})
    if len(found) < 3:
        result.suggestions.append(
            'Use more action verbs to describe your achievements (e.g., developed, created, implemented)')
    return result


def evaluate_quantifiable_achievements(text: str, filename: str, word_count: int) -> Evaluation:
    has_numbers = bool(DIGIT_PATTERN.search(text))
    if QUANTIFIER_PATTERN.search(text):
        score = 10
    elif PERCENT_PATTERN.search(text) or (has_numbers and word_count > 200):
        score = 6
    elif has_numbers:
        score = 3
    else:
        score = 0

    result = Evaluation(score, 'good' if score >= 6 else 'needs-improvement')
    if score < 6:
        result.suggestions.append(
            'Add quantifiable achievements with numbers, percentages, or metrics '
            '(e.g., "Increased sales by 25%")')
    return result


def evaluate_keyword_density(text: str, filename: str, word_count: int) -> Evaluation:
    matches = _contains_any(text.lower(), COMMON_KEYWORDS)
    score = min(10, 10 * len(matches) // len(COMMON_KEYWORDS))
    return Evaluation(score, 'good' if score >= 7 else 'needs-improvement')


def evaluate_unfriendly_elements(text: str, filename: str, word_count: int) -> Evaluation:
    if _contains_any(text.lower(), UNFRIENDLY_ELEMENTS):
        return Evaluation(
            5, 'poor',
            issues=['Resume may contain ATS-unfriendly elements (tables, images, etc.)'],
            suggestions=['Avoid using tables, images, graphics, or complex formatting '
                         'that ATS systems cannot parse'],
        )
    return Evaluation(10, 'good')


def evaluate_structure(text: str, filename: str, word_count: int) -> Evaluation:
    has_paragraphs = len(PARAGRAPH_BREAK_PATTERN.findall(text)) >= MIN_PARAGRAPH_BREAKS
    has_bullets = bool(BULLET_PATTERN.search(text))
    has_sections = len(CAPS_HEADER_PATTERN.findall(text)) >= MIN_CAPS_HEADERS

    if has_sections and has_bullets:
        score = 10
    elif has_sections or has_bullets:
        score = 7
    elif has_paragraphs:
        score = 5
    else:
        score = 3

    result = Evaluation(score, 'good' if score >= 7 else 'needs-improvement')
    if not has_bullets:
        result.suggestions.append('Use bullet points to organize your experience and achievements')
    if not has_sections:
        result.suggestions.append('Use clear section headers (e.g., EDUCATION, EXPERIENCE, SKILLS)')
    return result


RUBRIC: Tuple[RubricDimension, ...] = (
    RubricDimension('fileFormat', 10, evaluate_file_format),
    RubricDimension('contactInfo', 15, evaluate_contact_info),
    RubricDimension('sectionHeaders', 15, evaluate_section_headers),
    RubricDimension('resumeLength', 10, evaluate_resume_length),
    RubricDimension('dateFormats', 10, evaluate_date_formats),
    RubricDimension('actionVerbs', 10, evaluate_action_verbs),
    RubricDimension('quantifiableAchievements', 10, evaluate_quantifiable_achievements),
    RubricDimension('keywordDensity', 10, evaluate_keyword_density),
    RubricDimension('unfriendlyElements', 10, evaluate_unfriendly_elements),
    RubricDimension('structure', 10, evaluate_structure),
)


def status_for_score(score: int) -> str:
    for threshold, status in STATUS_THRESHOLDS:
        if score >= threshold:
            return status
    return 'poor'


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_resume(text: str, filename: str) -> ScoreReport:
    """
    Scores resume text against the ATS rubric.

    Args:
        text (str): Plain resume text.
        filename (str): The original upload name (only its extension matters).

    Returns:
        ScoreReport: A fresh report. Empty text short-circuits to a zero score.
    """
    if not text or not text.strip():
        return ScoreReport(
            overall_score=0,
            overall_status='poor',
            breakdown={},
            issues=['Resume text is empty'],
            suggestions=[],
            stats=ScoreStats(character_count=len(text or '')),
        )

    word_count = len(text.split())
    score = 0
    max_score = 0
    breakdown: Dict[str, DimensionScore] = {}
    issues: List[str] = []
    suggestions: List[str] = []

    for dimension in RUBRIC:
        result = dimension.evaluate(text, filename, word_count)
        points = max(0, min(dimension.max, result.score))
        breakdown[dimension.name] = DimensionScore(points, dimension.max, result.status, dict(result.extra))
        issues.extend(result.issues)
        suggestions.extend(result.suggestions)
        score += points
        max_score += dimension.max

    overall = _round_half_up(100 * score / max_score)
    logger.debug(f"Scored {filename}: {score}/{max_score} -> {overall}")

    return ScoreReport(
        overall_score=overall,
        overall_status=status_for_score(overall),
        breakdown=breakdown,
        issues=issues,
        suggestions=suggestions,
        stats=ScoreStats(
            word_count=word_count,
            character_count=len(text),
            sections_found=len(breakdown['sectionHeaders'].extra['foundSections']),
            action_verbs_found=breakdown['actionVerbs'].extra['foundVerbs'],
        ),
    )
