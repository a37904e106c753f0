"""
Canonical profile records produced by the profile normalizer.

Every record is frozen and every collection is a tuple, so a NormalizedProfile
cannot change after it is built. `to_dict()` emits the camelCase document shape
used in Firestore; feeding that back through `normalize()` yields an equal profile.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ExperienceEntry:
    company: str = ""
    role: str = ""
    duration: str = ""
    description: str = ""

    IDENTIFYING = ("company", "role")

    def to_dict(self) -> Dict[str, str]:
        return {
            "company": self.company,
            "role": self.role,
            "duration": self.duration,
            "description": self.description,
        }


@dataclass(frozen=True)
class EducationEntry:
    degree: str = ""
    university: str = ""
    year: str = ""
    duration: str = ""

    IDENTIFYING = ("degree", "university")

    def to_dict(self) -> Dict[str, str]:
        return {
            "degree": self.degree,
            "university": self.university,
            "year": self.year,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class ProjectEntry:
    title: str = ""
    tech: str = ""
    description: str = ""

    IDENTIFYING = ("title",)

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "tech": self.tech, "description": self.description}


@dataclass(frozen=True)
class CertificationEntry:
    title: str = ""
    issuer: str = ""

    IDENTIFYING = ("title",)

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "issuer": self.issuer}


@dataclass(frozen=True)
class LanguageEntry:
    language: str = ""
    proficiency: str = ""

    IDENTIFYING = ("language",)

    def to_dict(self) -> Dict[str, str]:
        return {"language": self.language, "proficiency": self.proficiency}


@dataclass(frozen=True)
class VolunteerEntry:
    role: str = ""
    organization: str = ""
    duration: str = ""
    description: str = ""

    IDENTIFYING = ("role", "organization")

    def to_dict(self) -> Dict[str, str]:
        return {
            "role": self.role,
            "organization": self.organization,
            "duration": self.duration,
            "description": self.description,
        }


@dataclass(frozen=True)
class PublicationEntry:
    title: str = ""
    publication: str = ""
    date: str = ""

    IDENTIFYING = ("title",)

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "publication": self.publication, "date": self.date}


@dataclass(frozen=True)
class AwardEntry:
    title: str = ""
    organization: str = ""
    date: str = ""

    IDENTIFYING = ("title",)

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "organization": self.organization, "date": self.date}


def is_identified(entry) -> bool:
    """True when at least one identifying field of a record is non-empty."""
    return any(getattr(entry, name, "") for name in entry.IDENTIFYING)


def bullet_lines(description: str) -> Tuple[str, ...]:
    """Split a stored description into display bullets."""
    if not description:
        return ()
    lines = []
    for line in description.split("\n"):
        line = line.strip().lstrip("•").strip()
        if line.startswith("- ") or line.startswith("* "):
            line = line[2:].strip()
        if line:
            lines.append(line)
    return tuple(lines)


@dataclass(frozen=True)
class NormalizedProfile:
    """Array-safe, immutable view of a user's career data."""
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio_url: str = ""
    address: str = ""
    location: str = ""
    gender: str = ""
    date_of_birth: str = ""
    citizenship: str = ""
    total_experience: str = ""
    visa_status: str = ""
    sponsorship: str = ""

    experience: Tuple[ExperienceEntry, ...] = ()
    education: Tuple[EducationEntry, ...] = ()
    projects: Tuple[ProjectEntry, ...] = ()
    certifications: Tuple[CertificationEntry, ...] = ()
    languages: Tuple[LanguageEntry, ...] = ()
    technical_tools: Tuple[str, ...] = ()
    volunteer_work: Tuple[VolunteerEntry, ...] = ()
    publications: Tuple[PublicationEntry, ...] = ()
    awards: Tuple[AwardEntry, ...] = ()
    skills: Tuple[str, ...] = ()
    desired_roles: Tuple[str, ...] = ()

    interests: str = ""
    extra_requirements: str = ""
    extra_info: str = ""

    @property
    def display_location(self) -> str:
        return self.location or self.address

    def collection_counts(self) -> Dict[str, int]:
        return {
            "experience": len(self.experience),
            "education": len(self.education),
            "projects": len(self.projects),
            "certifications": len(self.certifications),
            "languages": len(self.languages),
            "technicalTools": len(self.technical_tools),
            "volunteerWork": len(self.volunteer_work),
            "publications": len(self.publications),
            "awards": len(self.awards),
            "skills": len(self.skills),
        }

    def filled_field_count(self) -> int:
        """Number of non-empty top-level fields, scalars and collections alike."""
        return sum(1 for f in fields(self) if getattr(self, f.name))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "linkedin": self.linkedin,
            "github": self.github,
            "portfolioURL": self.portfolio_url,
            "address": self.address,
            "location": self.location,
            "gender": self.gender,
            "dateOfBirth": self.date_of_birth,
            "citizenship": self.citizenship,
            "totalExperience": self.total_experience,
            "visaStatus": self.visa_status,
            "sponsorship": self.sponsorship,
            "experience": [e.to_dict() for e in self.experience],
            "education": [e.to_dict() for e in self.education],
            "projects": [p.to_dict() for p in self.projects],
            "certifications": [c.to_dict() for c in self.certifications],
            "languages": [lang.to_dict() for lang in self.languages],
            "technicalTools": list(self.technical_tools),
            "volunteerWork": [v.to_dict() for v in self.volunteer_work],
            "publications": [p.to_dict() for p in self.publications],
            "awards": [a.to_dict() for a in self.awards],
            "skills": list(self.skills),
            "desiredRoles": list(self.desired_roles),
            "interests": self.interests,
            "extraRequirements": self.extra_requirements,
            "extraInfo": self.extra_info,
        }
