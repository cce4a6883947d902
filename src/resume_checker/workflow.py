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
Orchestrates one resume analysis session:
extract -> score -> parse -> edit -> generate -> re-score.
"""

import copy
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from resume_checker import config
from resume_checker.generator import GeneratedResume, ResumeGenerator
from resume_checker.ingest import ExtractionError, extract_text_with_timeout, validate_upload
from resume_checker.models import (
    ENTRY_TYPES,
    PersonalInfo,
    ResumeUpload,
    ScoreReport,
    StructuredResume,
    StudentProfile,
)
from resume_checker.resume_parser import parse_resume
from resume_checker.scorer import score_resume

logger = logging.getLogger(__name__)

MISSING_IDENTITY_MESSAGE = 'Please fill in at least Name and Email in Personal Information section.'


class SessionState(Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    SCORED = "scored"
    EDITING = "editing"
    REGENERATED = "regenerated"


class SessionError(Exception):
    """Base class for misuse of a resume checker session."""


class InvalidTransition(SessionError):
    """An operation was requested in a state that does not allow it."""


@dataclass(frozen=True)
class ScoreComparison:
    """Before/after view of an original resume and its regenerated version."""
    before: ScoreReport
    after: ScoreReport

    @property
    def improvement(self) -> int:
        return self.after.overall_score - self.before.overall_score

    def dimension_deltas(self) -> Dict[str, int]:
        deltas = {}
        for name, after in self.after.breakdown.items():
            before = self.before.breakdown.get(name)
            deltas[name] = after.score - (before.score if before else 0)
        return deltas


def build_output_filename(name: str) -> str:
    """`<name>_ATS_Resume.docx` with anything non-alphanumeric in the stem replaced."""
    stem = re.sub(r'[^a-z0-9]', '_', f"{name or 'resume'}_ATS_Resume", flags=re.IGNORECASE)
    return f"{stem}.docx"


def merge_profile(resume: StructuredResume, profile: Optional[StudentProfile]) -> StructuredResume:
    """
    Fills blank contact fields from the student's profile and adds profile
    skills. Values the parser found are never overwritten.
    """
    if profile is None:
        return resume
    info = resume.personal_info
    if not info.name and profile.name:
        info.name = profile.name
    if not info.email and profile.email:
        info.email = profile.email
    if not info.phone and profile.phone_number:
        info.phone = profile.phone_number

    if profile.skills:
        merged = []
        for skill in [s for s in resume.skills if s] + profile.skills:
            if skill not in merged:
                merged.append(skill)
        resume.skills = merged or ['']
    return resume


class ResumeCheckerSession:
    """
    Holds the state of a single resume analysis. One resume at a time:
    analyzing a new upload discards whatever the session held before.
    """
    def __init__(self, max_upload_bytes: Optional[int] = None, extract_timeout: Optional[float] = None,
                 generator: Optional[ResumeGenerator] = None):
        self.max_upload_bytes = max_upload_bytes or config.get_max_upload_bytes()
        self.extract_timeout = extract_timeout or config.get_extract_timeout()
        self.generator = generator or ResumeGenerator()
        self._clear()

    def _clear(self):
        self.state = SessionState.IDLE
        self.upload: Optional[ResumeUpload] = None
        self.error = ''
        self.resume_text = ''
        self.report: Optional[ScoreReport] = None
        self.resume: Optional[StructuredResume] = None
        self.generated: Optional[GeneratedResume] = None
        self.generated_report: Optional[ScoreReport] = None

    def _require(self, *states: SessionState):
        if self.state not in states:
            allowed = ', '.join(s.value for s in states)
            raise InvalidTransition(f"Cannot do that while {self.state.value}; expected one of: {allowed}")

    def reset(self):
        """'Analyze Another Resume': back to idle with nothing held."""
        logger.debug("Session reset")
        self._clear()

    def analyze(self, upload: ResumeUpload) -> Optional[ScoreReport]:
        """
        Validates, extracts and scores an upload.

        Returns:
            ScoreReport on success. None when the upload was rejected or could
            not be read; `self.error` then holds the message and the session is idle.
        """
        self._require(SessionState.IDLE, SessionState.SCORED, SessionState.EDITING, SessionState.REGENERATED)
        self._clear()

        message = validate_upload(upload, self.max_upload_bytes)
        if message:
            logger.warning(f"Rejected upload {upload.name}: {message}")
            self.error = message
            return None

        self.upload = upload
        self.state = SessionState.EXTRACTING
        logger.info(f"Extracting text from {upload.name} ({upload.size} bytes)")
        try:
            text = extract_text_with_timeout(upload, self.extract_timeout)
        except ExtractionError as e:
            logger.error(f"Error analyzing resume {upload.name}: {e}")
            self._clear()
            self.error = str(e) or 'Failed to analyze resume. Please try again.'
            return None

        self.resume_text = text
        self.report = score_resume(text, upload.name)
        self.state = SessionState.SCORED
        logger.info(f"ATS score for {upload.name}: {self.report.overall_score} ({self.report.overall_status})")
        return self.report

    def start_editing(self, profile: Optional[StudentProfile] = None) -> StructuredResume:
        """'Generate ATS-Friendly Resume': parse the held text into editable fields."""
        self._require(SessionState.SCORED, SessionState.REGENERATED)
        if not self.resume_text:
            raise SessionError('No resume text available. Please analyze a resume first.')
        self.resume = merge_profile(parse_resume(self.resume_text), profile)
        self.state = SessionState.EDITING
        return self.resume

    def update_personal_info(self, field_name: str, value: str):
        self._require(SessionState.EDITING)
        if field_name not in PersonalInfo.__dataclass_fields__:
            raise SessionError(f"Unknown personal info field: {field_name}")
        setattr(self.resume.personal_info, field_name, value)

    def update_skill(self, index: int, value: str):
        self._require(SessionState.EDITING)
        self.resume.skills[index] = value

    def update_entry(self, section: str, index: int, field_name: str, value):
        """Sets one field of a list row. Skills rows are plain strings, so `field_name` is ignored there."""
        if section == 'skills':
            self.update_skill(index, value)
            return
        self._require(SessionState.EDITING)
        entry = self._entries(section)[index]
        if field_name not in type(entry).__dataclass_fields__:
            raise SessionError(f"Unknown {section} field: {field_name}")
        setattr(entry, field_name, value)

    def add_entry(self, section: str):
        """Appends a blank row to a list section (skills included)."""
        self._require(SessionState.EDITING)
        if section == 'skills':
            self.resume.skills.append('')
            return ''
        entries = self._entries(section)
        entry = ENTRY_TYPES[section]()
        entries.append(entry)
        return entry

    def remove_entry(self, section: str, index: int):
        """Removes a row; removing the last row leaves a blank one behind."""
        self._require(SessionState.EDITING)
        entries = self.resume.skills if section == 'skills' else self._entries(section)
        del entries[index]
        self.resume.ensure_rows()

    def _entries(self, section: str):
        if section not in ENTRY_TYPES:
            raise SessionError(f"Unknown section: {section}")
        return getattr(self.resume, section)

    def generate(self) -> Optional[ScoreComparison]:
        """
        Builds the optimized resume from the edited fields and re-scores it.

        Returns:
            ScoreComparison, or None when name/email are missing (the session
            stays in editing with `self.error` set).
        """
        self._require(SessionState.EDITING)
        info = self.resume.personal_info
        if not info.name.strip() or not info.email.strip():
            self.error = MISSING_IDENTITY_MESSAGE
            return None

        self.error = ''
        snapshot = copy.deepcopy(self.resume)
        self.generated = self.generator.generate(snapshot, build_output_filename(info.name))
        self.generated_report = score_resume(self.generated.text, self.generated.file_name)
        self.state = SessionState.REGENERATED
        logger.info(
            f"Regenerated resume scored {self.generated_report.overall_score} "
            f"(was {self.report.overall_score})"
        )
        return self.comparison

    @property
    def comparison(self) -> Optional[ScoreComparison]:
        if self.report is None or self.generated_report is None:
            return None
        return ScoreComparison(before=self.report, after=self.generated_report)

    def download(self) -> GeneratedResume:
        """Re-runs the generator on the same fields for the download button."""
        self._require(SessionState.REGENERATED)
        return self.generator.generate(copy.deepcopy(self.resume), self.generated.file_name)

    def back_to_editing(self) -> StructuredResume:
        self._require(SessionState.REGENERATED)
        self.state = SessionState.EDITING
        return self.resume
