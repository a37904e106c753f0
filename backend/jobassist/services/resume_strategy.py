"""
Resume Strategy Selector - classify a profile as fresher or experienced.

Years of experience come from the profile's totalExperience text when it
states a number of years, otherwise from the number of experience entries
(one year per entry as a rough proxy).
"""
import re
from typing import Any, Dict, List, Mapping, Union

from jobassist.models.profile import NormalizedProfile
from jobassist.models.resume import (
    ENTRY_LEVEL,
    EXPERIENCED,
    FRESHER,
    MID_LEVEL,
    SENIOR,
    ResumeStrategy,
)

YEARS_RE = re.compile(r"(\d+)\+?\s*year", re.IGNORECASE)
NUMERIC_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*\+?\s*$")

FRESHER_THRESHOLD = 2
SENIOR_THRESHOLD = 5

FRESHER_RECOMMENDATION = """
FRESHER RESUME FORMAT:
- Focus on academic projects and what was learned building them
- Highlight core skills and fundamentals
- Include internships and training
- Keep to 1 page maximum
- Section order: Header, Objective, Education, Skills, Projects, Certifications
""".strip()

EXPERIENCED_RECOMMENDATION = """
EXPERIENCED RESUME FORMAT:
- Highlight achievements and business impact
- Show career progression and results
- Prioritize work experience; keep education brief (degree and university only)
- Keep to 1-2 pages
- Section order: Header, Summary, Experience, Skills, Education, Projects, Certifications
""".strip()

FRESHER_INSTRUCTIONS = """
=== FRESHER RESUME FORMAT ===

CAREER OBJECTIVE (instead of Summary):
- 2-3 lines maximum, focused on skills, learning and the target role
- DO NOT state a number of years of experience
- DO NOT claim expertise that the profile does not show

EDUCATION (VERY IMPORTANT):
- Degree, college or university, and year of completion
- Format: **Degree** | University | Year

SKILLS (ORGANIZE BY CATEGORY):
- Languages, Web, Database, Tools

PROJECTS (MOST IMPORTANT):
- Academic, mini or personal projects
- Format: **Project Title** | Technologies: Tech1, Tech2
  • What was built
  • Key learning or result

EXPERIENCE / INTERNSHIPS (only if present in the profile):
- Format: **Role Title** | Company | Duration
  • Task or responsibility

CERTIFICATIONS:
- Format: **Certification Name** | Issuing Organization

SKIP FOR FRESHERS:
- Volunteer work, publications and awards unless clearly relevant
- Never fabricate experience or achievements
""".strip()

EXPERIENCED_INSTRUCTIONS = """
=== EXPERIENCED RESUME FORMAT ===

PROFESSIONAL SUMMARY (instead of Objective):
- 3-4 lines: years of experience, key skills, major achievements

WORK EXPERIENCE (MOST IMPORTANT):
- Reverse chronological order
- Format: **Job Title** | Company Name | Duration
  • Achievement with business impact
  • Achievement showing responsibility
  • Achievement showing technical skill
- At most 4-5 bullets per role
- Only use metrics that appear in the profile data

SKILLS (PROVEN SKILLS ONLY):
- Group by category: Programming Languages, Frameworks, Databases, Cloud, Tools

EDUCATION (BRIEF):
- Format: **Degree** | University | Year

CERTIFICATIONS & AWARDS:
- Certifications: **Certification Name** | Issuing Organization
- Awards: **Award Title** | Organization | Date

PROJECTS (MAJOR WORK ONLY):
- Format: **Project Title** | Technologies: Tech1, Tech2

ALSO INCLUDE WHEN PRESENT:
- Volunteer work: **Role** | Organization | Duration
- Publications: **Title** | Publication | Date
""".strip()

FRESHER_SECTION_ORDER = [
    "header", "objective", "education", "skills", "projects", "experience",
    "certifications", "languages", "interests", "awards", "publications", "volunteerWork",
]

EXPERIENCED_SECTION_ORDER = [
    "header", "summary", "experience", "skills", "education", "certifications",
    "projects", "languages", "awards", "publications", "volunteerWork", "interests",
]


def _years_from_total(value: Any):
    """Return whole years stated by a totalExperience value, or None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return max(0, int(value))
    if isinstance(value, str):
        match = YEARS_RE.search(value)
        if match:
            return int(match.group(1))
        numeric = NUMERIC_RE.match(value)
        if numeric:
            return max(0, int(float(numeric.group(1))))
    return None


def extract_years(profile: Union[NormalizedProfile, Mapping]) -> int:
    if isinstance(profile, NormalizedProfile):
        total, experience = profile.total_experience, profile.experience
    elif isinstance(profile, Mapping):
        total, experience = profile.get("totalExperience"), profile.get("experience")
    else:
        return 0

    years = _years_from_total(total)
    if years is not None:
        return years
    if isinstance(experience, (list, tuple)):
        return len(experience)
    return 0


def requirement_level_for(years: int) -> str:
    if years >= SENIOR_THRESHOLD:
        return SENIOR
    if years >= FRESHER_THRESHOLD:
        return MID_LEVEL
    return ENTRY_LEVEL


def select_strategy(profile: Union[NormalizedProfile, Mapping]) -> ResumeStrategy:
    """Classify a profile into a fresher or experienced strategy. Pure."""
    years = extract_years(profile)
    resume_type = FRESHER if years < FRESHER_THRESHOLD else EXPERIENCED
    return ResumeStrategy(
        type=resume_type,
        years=years,
        requirement_level=requirement_level_for(years),
        recommendation=FRESHER_RECOMMENDATION if resume_type == FRESHER else EXPERIENCED_RECOMMENDATION,
    )


def type_specific_instructions(strategy: ResumeStrategy) -> str:
    return FRESHER_INSTRUCTIONS if strategy.type == FRESHER else EXPERIENCED_INSTRUCTIONS


def section_priority_order(resume_type: str) -> List[str]:
    if resume_type == FRESHER:
        return list(FRESHER_SECTION_ORDER)
    return list(EXPERIENCED_SECTION_ORDER)


def font_sizes(resume_type: str) -> Dict[str, str]:
    """Point sizes for name, section headings, body and contact line."""
    if resume_type == FRESHER:
        return {"name": "16pt", "section": "11pt", "body": "10pt", "contact": "10pt"}
    return {"name": "18pt", "section": "12pt", "body": "11pt", "contact": "11pt"}
