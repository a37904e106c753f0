"""
Records for the fixed 10-section ATS "standard format" resume.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class StandardHeader:
    full_name: str = ""
    mobile_number: str = ""
    professional_email: str = ""
    city: str = ""
    linkedin_url: str = ""
    github_url: str = ""
    portfolio_url: str = ""


@dataclass(frozen=True)
class StandardExperience:
    organization_name: str
    role: str
    duration: str = ""
    responsibilities: Tuple[str, ...] = ()
    tools_used: Tuple[str, ...] = ()


@dataclass(frozen=True)
class StandardEducation:
    degree: str
    college_university: str = ""
    branch: str = ""
    year: str = ""


@dataclass(frozen=True)
class StandardCertification:
    course_name: str
    platform_organization: str = ""
    year: str = ""


@dataclass(frozen=True)
class StandardAchievement:
    title: str
    type: str = "award"  # award, publication, leadership
    date: str = ""


@dataclass(frozen=True)
class KeySkills:
    programming_languages: Tuple[str, ...] = ()
    web_frameworks: Tuple[str, ...] = ()
    databases: Tuple[str, ...] = ()
    tools_and_technologies: Tuple[str, ...] = ()
    operating_systems: Tuple[str, ...] = ()
    other: Tuple[str, ...] = ()

    # (attribute, display label) in rendering order
    LABELS = (
        ("programming_languages", "Programming Languages"),
        ("web_frameworks", "Web / Frameworks"),
        ("databases", "Databases"),
        ("tools_and_technologies", "Tools & Technologies"),
        ("operating_systems", "Operating Systems"),
        ("other", "Other"),
    )

    def categories(self):
        """Yield (label, skills) for each non-empty category."""
        for attr, label in self.LABELS:
            values = getattr(self, attr)
            if values:
                yield label, values

    def is_empty(self) -> bool:
        return not any(values for _, values in self.categories())


@dataclass(frozen=True)
class AdditionalInfo:
    languages_known: Tuple[str, ...] = ()
    availability: str = ""

    def is_empty(self) -> bool:
        return not self.languages_known and not self.availability


@dataclass(frozen=True)
class StandardResume:
    header: StandardHeader
    profile_summary: str = ""
    key_skills: KeySkills = field(default_factory=KeySkills)
    professional_experience: Tuple[StandardExperience, ...] = ()
    education: Tuple[StandardEducation, ...] = ()
    certifications: Tuple[StandardCertification, ...] = ()
    achievements: Tuple[StandardAchievement, ...] = ()
    soft_skills: Tuple[str, ...] = ()
    additional_info: AdditionalInfo = field(default_factory=AdditionalInfo)
    declaration: str = ""
    resume_type: str = "fresher"
    target_role: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
