"""
Typed shapes for the JSON documents stored in text columns.

Project.technologies holds a JSON array of strings and Resume.data holds a
versioned resume document. Both are validated before they are written;
everything here raises ``ValueError`` (pydantic's ``ValidationError`` is one)
when the input does not fit.
"""
import json
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel

RESUME_SCHEMA_VERSION = 1

_technologies = TypeAdapter(List[str])


def encode_technologies(values):
    return json.dumps(_technologies.validate_python(values))


def decode_technologies(raw):
    if not raw:
        return []
    return _technologies.validate_json(raw)


class ResumeModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='allow')


class PersonalInfo(ResumeModel):
    name: str
    title: str = ''
    email: str = ''
    phone: str = ''
    location: str = ''
    website: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None


class Experience(ResumeModel):
    company: str
    position: str
    start_date: str = ''
    end_date: str = ''
    location: str = ''
    responsibilities: List[str] = []


class Education(ResumeModel):
    school: str
    degree: str
    start_date: str = ''
    end_date: str = ''
    location: str = ''
    description: str = ''


class ResumeProject(ResumeModel):
    name: str
    description: str = ''
    technologies: List[str] = []
    url: Optional[str] = None


class Certification(ResumeModel):
    name: str
    issuer: str = ''
    date: str = ''
    url: Optional[str] = None


class Language(ResumeModel):
    language: str
    level: str = ''


class ResumeDocument(ResumeModel):
    schema_version: Literal[1] = RESUME_SCHEMA_VERSION
    personal_info: PersonalInfo
    summary: str = ''
    experience: List[Experience] = []
    education: List[Education] = []
    skills: Dict[str, List[str]] = {}
    projects: List[ResumeProject] = []
    certifications: List[Certification] = []
    languages: List[Language] = []

    def to_json(self):
        return self.model_dump_json(by_alias=True, exclude_none=True)


def parse_resume_document(raw):
    return ResumeDocument.model_validate_json(raw)


def _section(raw, default):
    if raw is None or raw == '':
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError('Section is not valid JSON: %s' % exc) from exc


def build_resume_document(sections):
    """Build a document from the per-section JSON strings the admin form sends."""
    summary = sections.get('summary') or ''
    try:
        decoded = json.loads(summary)
        if isinstance(decoded, str):
            summary = decoded
    except json.JSONDecodeError:
        pass
    return ResumeDocument.model_validate({
        'personalInfo': _section(sections.get('personal_info'), {}),
        'summary': summary,
        'experience': _section(sections.get('experience'), []),
        'education': _section(sections.get('education'), []),
        'skills': _section(sections.get('skills'), {}),
        'projects': _section(sections.get('projects'), []),
        'certifications': _section(sections.get('certifications'), []),
        'languages': _section(sections.get('languages'), []),
    })
