"""
Generated resume records, the career-stage strategy, and the persisted resume record.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from jobassist.models.profile import (
    AwardEntry,
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    LanguageEntry,
    NormalizedProfile,
    ProjectEntry,
    PublicationEntry,
    VolunteerEntry,
)

FRESHER = "fresher"
EXPERIENCED = "experienced"

ENTRY_LEVEL = "entry-level"
MID_LEVEL = "mid-level"
SENIOR = "senior"

# Section status values for GeneratedResume.section_status
SECTION_PARSED = "parsed"
SECTION_ABSENT = "absent"
SECTION_UNPARSED = "unparsed"

# Collection sections in GeneratedResume, keyed by their document name
COLLECTION_SECTIONS = (
    "experience",
    "education",
    "projects",
    "certifications",
    "languages",
    "volunteerWork",
    "publications",
    "awards",
)


@dataclass(frozen=True)
class ResumeStrategy:
    type: str
    years: int
    requirement_level: str
    recommendation: str

    @property
    def is_fresher(self) -> bool:
        return self.type == FRESHER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "years": self.years,
            "requirementLevel": self.requirement_level,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class ResumeHeader:
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio_url: str = ""
    location: str = ""

    def contact_parts(self) -> List[str]:
        return [p for p in (self.email, self.phone, self.location,
                            self.linkedin, self.github, self.portfolio_url) if p]

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "linkedin": self.linkedin,
            "github": self.github,
            "portfolioURL": self.portfolio_url,
            "location": self.location,
        }

    @classmethod
    def from_profile(cls, profile: NormalizedProfile, fallback_location: str = "") -> "ResumeHeader":
        return cls(
            name=profile.name,
            email=profile.email,
            phone=profile.phone,
            linkedin=profile.linkedin,
            github=profile.github,
            portfolio_url=profile.portfolio_url,
            location=profile.display_location or fallback_location,
        )


@dataclass(frozen=True)
class GeneratedResume:
    """Structured resume recovered from the model's output."""
    header: ResumeHeader = field(default_factory=ResumeHeader)
    summary: str = ""
    skills: str = ""
    technical_tools: str = ""
    experience: Tuple[ExperienceEntry, ...] = ()
    education: Tuple[EducationEntry, ...] = ()
    projects: Tuple[ProjectEntry, ...] = ()
    certifications: Tuple[CertificationEntry, ...] = ()
    languages: Tuple[LanguageEntry, ...] = ()
    volunteer_work: Tuple[VolunteerEntry, ...] = ()
    publications: Tuple[PublicationEntry, ...] = ()
    awards: Tuple[AwardEntry, ...] = ()
    interests: str = ""
    latex_code: str = ""
    section_status: Dict[str, str] = field(default_factory=dict)

    @property
    def degraded_sections(self) -> List[str]:
        """Sections the model returned content for that did not match the expected convention."""
        return [name for name in COLLECTION_SECTIONS
                if self.section_status.get(name) == SECTION_UNPARSED]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": self.header.to_dict(),
            "summary": self.summary,
            "skills": self.skills,
            "technicalTools": self.technical_tools,
            "experience": [e.to_dict() for e in self.experience],
            "education": [e.to_dict() for e in self.education],
            "projects": [p.to_dict() for p in self.projects],
            "certifications": [c.to_dict() for c in self.certifications],
            "languages": [lang.to_dict() for lang in self.languages],
            "volunteerWork": [v.to_dict() for v in self.volunteer_work],
            "publications": [p.to_dict() for p in self.publications],
            "awards": [a.to_dict() for a in self.awards],
            "interests": self.interests,
            "latexCode": self.latex_code,
            "sectionStatus": dict(self.section_status),
        }


# ============================================================================
# PERSISTED RESUME RECORD
# ============================================================================

def remove_undefined_values(value: Any) -> Any:
    """Recursively drop None values so Firestore never stores nulls for missing data."""
    if isinstance(value, dict):
        return {k: remove_undefined_values(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [remove_undefined_values(v) for v in value if v is not None]
    return value


def build_generation_metadata(
    profile: NormalizedProfile,
    strategy: ResumeStrategy,
    target_role: str,
    model: Optional[str] = None,
    provider: Optional[str] = None,
    resume: Optional[GeneratedResume] = None,
    warnings: Optional[List[str]] = None,
    fallback: bool = False,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        "generatedAt": generated_at.isoformat(),
        "targetRole": target_role,
        "profileName": profile.name or None,
        "resumeType": strategy.type,
        "yearsOfExperience": strategy.years,
        "careerLevel": strategy.requirement_level,
        "model": model,
        "provider": provider,
        "hasExtraRequirements": bool(profile.extra_requirements),
        "dataFieldsCount": profile.filled_field_count(),
        "degradedSections": resume.degraded_sections if resume else [],
        "validationWarnings": list(warnings or []),
        "fallback": fallback,
    }


def build_resume_record(
    user_id: str,
    resume: GeneratedResume,
    profile: NormalizedProfile,
    strategy: ResumeStrategy,
    target_role: str,
    metadata: Dict[str, Any],
    created_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Assemble the document stored under users/{uid}/resumes.

    The record embeds the generated resume, the strategy, generation metadata,
    and a denormalized copy of the source profile for audit.
    """
    created_at = created_at or datetime.now(timezone.utc)
    record = {
        "content": resume.to_dict(),
        "role": target_role,
        "createdAt": created_at.isoformat(),
        "userId": user_id,
        "extraRequirements": profile.extra_requirements or None,
        "extraInfo": profile.extra_info or None,
        "profileData": profile.to_dict(),
        "strategy": strategy.to_dict(),
        "generationMetadata": metadata,
        "interviewHistory": [],
        "isPaid": False,
    }
    return remove_undefined_values(record)
