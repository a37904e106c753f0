"""
Generation Request Builder - serialize a normalized profile into the prompt contract.
"""
import json
import logging
from typing import Dict, List

from jobassist.models.profile import NormalizedProfile
from jobassist.models.resume import ResumeStrategy
from jobassist.services.resume_prompts import (
    ATS_OPTIMIZATION_INSTRUCTIONS,
    CRITICAL_RULES,
    PROJECT_PROMPT,
    SECTION_FORMATS,
    SKILLS_PROMPT,
    SUMMARY_PROMPT,
    WORK_EXPERIENCE_PROMPT,
)
from jobassist.services.resume_strategy import section_priority_order, type_specific_instructions
from jobassist.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

NOT_PROVIDED = "Not provided"


def _or_not_provided(value: str) -> str:
    return value or NOT_PROVIDED


def _list_block(lines: List[str], label: str) -> str:
    """Render a collection as '- ' lines, or the explicit no-data sentinel."""
    if not lines:
        return f"No {label} data provided"
    return "\n".join(f"- {line}" for line in lines)


def _join_fields(*values: str) -> str:
    return " | ".join(v if v else "" for v in values).rstrip(" |")


def profile_sections(profile: NormalizedProfile) -> Dict[str, str]:
    """Labeled text for every profile field, in prompt order."""
    return {
        "CONTACT INFORMATION": "\n".join([
            f"Name: {_or_not_provided(profile.name)}",
            f"Email: {_or_not_provided(profile.email)}",
            f"Phone: {_or_not_provided(profile.phone)}",
            f"LinkedIn: {_or_not_provided(profile.linkedin)}",
            f"GitHub: {_or_not_provided(profile.github)}",
            f"Portfolio: {_or_not_provided(profile.portfolio_url)}",
            f"Location: {_or_not_provided(profile.display_location)}",
        ]),
        "PERSONAL DETAILS": "\n".join([
            f"Gender: {_or_not_provided(profile.gender)}",
            f"Date of Birth: {_or_not_provided(profile.date_of_birth)}",
            f"Citizenship: {_or_not_provided(profile.citizenship)}",
            f"Visa Status: {_or_not_provided(profile.visa_status)}",
            f"Sponsorship: {_or_not_provided(profile.sponsorship)}",
            f"Total Experience: {_or_not_provided(profile.total_experience)}",
        ]),
        "EDUCATION": _list_block(
            [_join_fields(e.degree, e.university, e.year or e.duration) for e in profile.education],
            "education"),
        "WORK EXPERIENCE": _list_block(
            [_join_fields(e.role, e.company, e.duration, e.description.replace("\n", "; ") or "No description")
             for e in profile.experience],
            "experience"),
        "SKILLS": _list_block(list(profile.skills), "skills"),
        "TECHNICAL TOOLS & PLATFORMS": _list_block(list(profile.technical_tools), "tools"),
        "PROJECTS": _list_block(
            [_join_fields(p.title, p.tech, p.description.replace("\n", "; ")
                          or "No description provided - describe based on title")
             for p in profile.projects],
            "projects"),
        "CERTIFICATIONS & LICENSES": _list_block(
            [_join_fields(c.title, c.issuer) for c in profile.certifications], "certifications"),
        "LANGUAGES": _list_block(
            [_join_fields(lang.language, lang.proficiency or "Not specified") for lang in profile.languages],
            "languages"),
        "VOLUNTEER WORK": _list_block(
            [_join_fields(v.role, v.organization, v.duration, v.description.replace("\n", "; "))
             for v in profile.volunteer_work],
            "volunteer work"),
        "PUBLICATIONS": _list_block(
            [_join_fields(p.title, p.publication, p.date) for p in profile.publications], "publications"),
        "AWARDS & HONORS": _list_block(
            [_join_fields(a.title, a.organization, a.date) for a in profile.awards], "awards"),
        "INTERESTS": profile.interests or "No interests provided",
    }


def output_contract(profile: NormalizedProfile, strategy: ResumeStrategy) -> str:
    """The JSON shape the model must return, with the header pre-filled from the profile."""
    summary_key = "objective" if strategy.is_fresher else "summary"
    summary_hint = ("2-3 lines focusing on skills and potential" if strategy.is_fresher
                    else "3-4 lines highlighting experience and achievements")
    contract = {
        "header": {
            "name": profile.name,
            "email": profile.email,
            "phone": profile.phone,
            "linkedin": profile.linkedin,
            "github": profile.github,
            "portfolioURL": profile.portfolio_url,
            "location": profile.display_location,
        },
        summary_key: summary_hint,
        "skills": "Skills organized by category, prioritized by target role",
        "technicalTools": "Technical tools and platforms, comma-separated",
    }
    for section, convention in SECTION_FORMATS.items():
        contract[section] = f"Records formatted as {convention}, or empty string"
    contract["interests"] = "Interests and hobbies or empty string"
    contract["latexCode"] = ""
    return json.dumps(contract, indent=2, ensure_ascii=False)


def build_prompt(profile: NormalizedProfile, strategy: ResumeStrategy, role: str) -> str:
    """
    Build the single prompt string sent to the generation backend.

    Every profile field is written out; empty collections get an explicit
    "No X data provided" line so absence is never ambiguous. Deterministic for
    a given (profile, strategy, role).
    """
    role = (role or "").strip()
    if not role:
        raise ValidationError("Target role is required", field="targetRole")

    guidelines = PROJECT_PROMPT if strategy.is_fresher else WORK_EXPERIENCE_PROMPT
    sections = profile_sections(profile)
    profile_text = "\n\n".join(f"{label}:\n{body}" for label, body in sections.items())

    logger.debug(
        "[PromptBuilder] Building prompt",
        extra={
            "resume_type": strategy.type,
            "years": strategy.years,
            "experience_count": len(profile.experience),
            "education_count": len(profile.education),
        },
    )

    parts = [
        "=== RESUME GENERATION INSTRUCTIONS ===",
        "You are an expert resume writer creating ATS-optimized resumes.",
        "",
        f"RESUME TYPE: {strategy.type.upper()}",
        f"Years of Experience: {strategy.years}",
        f"Career Level: {strategy.requirement_level}",
        f"Section Order: {', '.join(section_priority_order(strategy.type))}",
        "",
        strategy.recommendation,
        "",
        type_specific_instructions(strategy),
        "",
        "=== PROFESSIONAL WRITING GUIDELINES ===",
        guidelines,
        "",
        SUMMARY_PROMPT,
        "",
        SKILLS_PROMPT,
        "",
        ATS_OPTIMIZATION_INSTRUCTIONS,
        "",
        CRITICAL_RULES,
        "",
        "=== PROFILE DATA (USE ALL DATA PROVIDED BELOW) ===",
        profile_text,
        "",
        f"TARGET ROLE: {role}",
        "",
        "JOB DESCRIPTION / REQUIREMENTS:",
        profile.extra_requirements or "No job description provided",
        "",
        "ADDITIONAL INFORMATION:",
        profile.extra_info or "No additional information provided",
        "",
        "=== OUTPUT FORMAT ===",
        "Return ONLY valid JSON with this exact structure:",
        output_contract(profile, strategy),
        "",
        "Generate the resume now:",
    ]
    return "\n".join(parts)
