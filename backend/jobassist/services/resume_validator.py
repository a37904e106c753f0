"""
Resume content validation and data-accuracy fixes applied after parsing.

The model is told not to invent anything; these checks catch the cases where
it did anyway and restore profile data the model dropped.
"""
import json
import logging
import re
from dataclasses import dataclass, field, replace
from typing import List

from jobassist.models.profile import NormalizedProfile
from jobassist.models.resume import (
    COLLECTION_SECTIONS,
    SECTION_ABSENT,
    SECTION_PARSED,
    GeneratedResume,
    ResumeHeader,
    ResumeStrategy,
)
from jobassist.services.profile_normalizer import generate_professional_summary

logger = logging.getLogger(__name__)

METRIC_PATTERNS = [
    re.compile(r"\d+%"),
    re.compile(r"\$\d+"),
    re.compile(r"increased by \d+", re.IGNORECASE),
    re.compile(r"reduced by \d+", re.IGNORECASE),
    re.compile(r"improved by \d+", re.IGNORECASE),
    re.compile(r"saved \$\d+", re.IGNORECASE),
    re.compile(r"grew by \d+", re.IGNORECASE),
]

# A sentence claiming a number of years, e.g. "with 3+ years of experience"
YEARS_CLAIM_RE = re.compile(r"\d+\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)
SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")

MIN_SKILLS_LENGTH = 5


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def issues(self) -> List[str]:
        return self.errors + self.warnings


def _resume_text(resume: GeneratedResume) -> str:
    parts = [resume.summary]
    parts.extend(f"{e.role} {e.company} {e.description}" for e in resume.experience)
    parts.extend(f"{p.title} {p.tech} {p.description}" for p in resume.projects)
    return " ".join(p for p in parts if p)


def validate_resume_content(resume: GeneratedResume, profile: NormalizedProfile) -> ValidationResult:
    """Compare generated content against the profile it came from."""
    result = ValidationResult()

    if profile.name and resume.header.name:
        if resume.header.name.strip().lower() != profile.name.strip().lower():
            result.errors.append(f'Name mismatch: "{resume.header.name}" vs "{profile.name}"')

    experience_text = " ".join(f"{e.role} {e.company} {e.description}" for e in resume.experience).lower()
    if resume.experience:
        for company in {e.company.strip().lower() for e in profile.experience if e.company.strip()}:
            if company not in experience_text:
                result.warnings.append(f'Company "{company}" might be missing from experience')

    if resume.skills:
        generated_skills = resume.skills.lower()
        for skill in profile.skills:
            if skill.strip().lower() not in generated_skills:
                result.warnings.append(f'Skill "{skill}" might be missing')

    source_text = json.dumps(profile.to_dict(), ensure_ascii=False)
    text = _resume_text(resume)
    for pattern in METRIC_PATTERNS:
        for metric in pattern.findall(text):
            digits = re.sub(r"\D", "", metric)
            if digits and digits not in source_text:
                result.warnings.append(f'Possible invented metric: "{metric}"')

    if result.errors or result.warnings:
        logger.warning("[ResumeValidator] Resume validation issues found",
                       extra={"errors": len(result.errors), "warnings": len(result.warnings)})
    return result


def strip_years_claims(summary: str) -> str:
    """Remove sentences that state a number of years of experience."""
    sentences = SENTENCE_SPLIT_RE.split(summary.strip())
    kept = [s for s in sentences if not YEARS_CLAIM_RE.search(s)]
    return " ".join(kept).strip()


def _mark_parsed(status: dict, section: str) -> dict:
    updated = dict(status)
    updated[section] = SECTION_PARSED
    return updated


def apply_resume_fixes(resume: GeneratedResume, profile: NormalizedProfile,
                       strategy: ResumeStrategy) -> GeneratedResume:
    """
    Return a copy of resume with data-accuracy fixes applied.

    - the header always comes from the profile
    - skills, education and experience the model left empty are restored from the profile
    - a fresher summary may not claim years of experience the profile doesn't have
    """
    status = dict(resume.section_status)
    changes = {"header": ResumeHeader.from_profile(profile, fallback_location=resume.header.location)}

    if len(resume.skills.strip()) < MIN_SKILLS_LENGTH and profile.skills:
        changes["skills"] = ", ".join(profile.skills)

    if not resume.education and profile.education:
        changes["education"] = profile.education
        status = _mark_parsed(status, "education")

    if not resume.experience and profile.experience:
        changes["experience"] = profile.experience
        status = _mark_parsed(status, "experience")

    if strategy.is_fresher and not profile.experience and YEARS_CLAIM_RE.search(resume.summary):
        logger.info("[ResumeValidator] Removing years-of-experience claim from fresher summary")
        changes["summary"] = strip_years_claims(resume.summary)

    changes["section_status"] = status
    return replace(resume, **changes)


def build_fallback_resume(profile: NormalizedProfile, role: str) -> GeneratedResume:
    """Deterministic resume built only from profile data, used when generation fails."""
    logger.info("[ResumeValidator] Generating fallback resume")
    collections = {
        "experience": profile.experience,
        "education": profile.education,
        "projects": profile.projects,
        "certifications": profile.certifications,
        "languages": profile.languages,
        "volunteer_work": profile.volunteer_work,
        "publications": profile.publications,
        "awards": profile.awards,
    }
    status = {}
    for section, attr in zip(COLLECTION_SECTIONS, collections):
        status[section] = SECTION_PARSED if collections[attr] else SECTION_ABSENT
    return GeneratedResume(
        header=ResumeHeader.from_profile(profile),
        summary=generate_professional_summary(profile, role),
        skills=", ".join(profile.skills),
        technical_tools=", ".join(profile.technical_tools),
        interests=profile.interests,
        section_status=status,
        **collections,
    )
