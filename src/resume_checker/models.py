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
Data models for the Resume Checker application.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class ResumeUpload:
    """A file handed over by the file picker: original name plus raw bytes."""
    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class PersonalInfo:
    """Contact block. Empty string means the field is absent."""
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    website: str = ""
    address: str = ""


@dataclass
class EducationEntry:
    degree: str = ""
    institution: str = ""
    location: str = ""
    date: str = ""
    gpa: str = ""


@dataclass
class ExperienceEntry:
    title: str = ""
    company: str = ""
    location: str = ""
    date: str = ""
    description: List[str] = field(default_factory=lambda: [""])


@dataclass
class ProjectEntry:
    name: str = ""
    description: str = ""
    technologies: str = ""
    date: str = ""


@dataclass
class CertificationEntry:
    name: str = ""
    issuer: str = ""
    date: str = ""
    credential_id: str = ""


@dataclass
class AchievementEntry:
    description: str = ""


# Section name -> entry type, used by the editor helpers to add blank rows.
ENTRY_TYPES = {
    'education': EducationEntry,
    'experience': ExperienceEntry,
    'projects': ProjectEntry,
    'certifications': CertificationEntry,
    'achievements': AchievementEntry,
}


@dataclass
class StructuredResume:
    """
    Structured resume fields as produced by the parser and edited by the user.
    Every list holds at least one (possibly blank) row so an edit form always
    has something to populate.
    """
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    summary: str = ""
    education: List[EducationEntry] = field(default_factory=lambda: [EducationEntry()])
    experience: List[ExperienceEntry] = field(default_factory=lambda: [ExperienceEntry()])
    skills: List[str] = field(default_factory=lambda: [""])
    projects: List[ProjectEntry] = field(default_factory=lambda: [ProjectEntry()])
    certifications: List[CertificationEntry] = field(default_factory=lambda: [CertificationEntry()])
    achievements: List[AchievementEntry] = field(default_factory=lambda: [AchievementEntry()])

    def to_dict(self) -> Dict[str, Any]:
        """Returns the camelCase JSON shape used by the surrounding application."""
        info = self.personal_info
        return {
            'personalInfo': {
                'name': info.name,
                'email': info.email,
                'phone': info.phone,
                'linkedIn': info.linkedin,
                'website': info.website,
                'address': info.address,
            },
            'summary': self.summary,
            'education': [
                {'degree': e.degree, 'institution': e.institution, 'location': e.location,
                 'date': e.date, 'gpa': e.gpa}
                for e in self.education
            ],
            'experience': [
                {'title': e.title, 'company': e.company, 'location': e.location,
                 'date': e.date, 'description': list(e.description)}
                for e in self.experience
            ],
            'skills': list(self.skills),
            'projects': [
                {'name': p.name, 'description': p.description,
                 'technologies': p.technologies, 'date': p.date}
                for p in self.projects
            ],
            'certifications': [
                {'name': c.name, 'issuer': c.issuer, 'date': c.date,
                 'credentialId': c.credential_id}
                for c in self.certifications
            ],
            'achievements': [{'description': a.description} for a in self.achievements],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StructuredResume":
        """Builds a resume from the camelCase JSON shape. Missing lists get a blank row."""
        info = data.get('personalInfo') or {}
        resume = cls(
            personal_info=PersonalInfo(
                name=info.get('name') or '',
                email=info.get('email') or '',
                phone=info.get('phone') or '',
                linkedin=info.get('linkedIn') or '',
                website=info.get('website') or '',
                address=info.get('address') or '',
            ),
            summary=data.get('summary') or '',
            education=[EducationEntry(**_pick(e, EducationEntry)) for e in data.get('education') or []],
            experience=[
                ExperienceEntry(
                    title=e.get('title') or '',
                    company=e.get('company') or '',
                    location=e.get('location') or '',
                    date=e.get('date') or '',
                    description=list(e.get('description') or [""]),
                )
                for e in data.get('experience') or []
            ],
            skills=[s or '' for s in data.get('skills') or [""]],
            projects=[ProjectEntry(**_pick(p, ProjectEntry)) for p in data.get('projects') or []],
            certifications=[
                CertificationEntry(
                    name=c.get('name') or '',
                    issuer=c.get('issuer') or '',
                    date=c.get('date') or '',
                    credential_id=c.get('credentialId') or '',
                )
                for c in data.get('certifications') or []
            ],
            achievements=[AchievementEntry(a.get('description') or '') for a in data.get('achievements') or []],
        )
        resume.ensure_rows()
        return resume

    def ensure_rows(self):
        """Restores the blank sentinel row on any list that ended up empty."""
        for section, entry_type in ENTRY_TYPES.items():
            if not getattr(self, section):
                setattr(self, section, [entry_type()])
        if not self.skills:
            self.skills = [""]


def _pick(data: Dict[str, Any], entry_type) -> Dict[str, str]:
    names = entry_type.__dataclass_fields__.keys()
    return {k: data.get(k) or '' for k in names}


@dataclass
class DimensionScore:
    """Result of one rubric dimension."""
    score: int
    max: int
    status: str
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {'score': self.score, 'max': self.max, 'status': self.status}
        result.update(self.extra)
        return result


@dataclass
class ScoreStats:
    word_count: int = 0
    character_count: int = 0
    sections_found: int = 0
    action_verbs_found: int = 0


@dataclass(frozen=True)
class ScoreReport:
    """
    Output of the ATS scorer. Created fresh on every call and never updated.
    """
    overall_score: int
    overall_status: str
    breakdown: Dict[str, DimensionScore]
    issues: List[str]
    suggestions: List[str]
    stats: ScoreStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            'overallScore': self.overall_score,
            'overallStatus': self.overall_status,
            'breakdown': {name: dim.to_dict() for name, dim in self.breakdown.items()},
            'issues': list(self.issues),
            'suggestions': list(self.suggestions),
            'stats': {
                'wordCount': self.stats.word_count,
                'characterCount': self.stats.character_count,
                'sectionsFound': self.stats.sections_found,
                'actionVerbsFound': self.stats.action_verbs_found,
            },
        }


@dataclass
class StudentProfile:
    """Profile fields known to the placement portal, used to fill resume blanks."""
    name: str = ""
    email: str = ""
    phone_number: str = ""
    skills: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudentProfile":
        skills: Optional[Union[str, List[str]]] = data.get('skills')
        if isinstance(skills, str):
            skills = [s.strip() for s in skills.split(',')]
        return cls(
            name=data.get('name', '') or '',
            email=data.get('email', '') or '',
            phone_number=data.get('phoneNumber', '') or '',
            skills=[s for s in (skills or []) if s],
        )
