"""
Standard Resume Format - the fixed 10-section ATS template.

Sections, in order:
 1. Header                      6. Certifications & Training
 2. Profile Summary             7. Achievements & Activities
 3. Key Skills (by category)    8. Soft Skills
 4. Professional Experience     9. Additional Information
 5. Education                  10. Declaration

Any section without backing data is left out of the text and HTML output.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional

from jobassist.models.profile import NormalizedProfile, bullet_lines
from jobassist.models.resume import FRESHER, GeneratedResume, ResumeStrategy
from jobassist.models.standard_resume import (
    AdditionalInfo,
    KeySkills,
    StandardAchievement,
    StandardCertification,
    StandardEducation,
    StandardExperience,
    StandardHeader,
    StandardResume,
)
from jobassist.services.formatters.html_formatter import escape_html, inline
from jobassist.services.formatters.links import format_url
from jobassist.services.skills_taxonomy import group_skills

RULE = "-" * 50
SKILL_SPLIT_RE = re.compile(r"[\n,;]")
CATEGORY_PREFIX_RE = re.compile(r"^[^:]{1,40}:\s*")
BRANCH_RE = re.compile(r"^(.+?)\s+(?:in|of)\s+(.+)$", re.IGNORECASE)
YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")
SPECIAL_SYMBOLS_RE = re.compile(r"[®™©§†‡]")

TOTAL_SECTIONS = 10
MIN_SUMMARY_LENGTH = 50
MAX_SUMMARY_LENGTH = 500


# ============================================================================
# BUILD
# ============================================================================

def _skills_from_display(text: str) -> List[str]:
    """Split a display skills string ('Languages: Python, Go') into skill names."""
    items = []
    for line in text.replace("**", "").split("\n"):
        line = CATEGORY_PREFIX_RE.sub("", line.strip())
        items.extend(item.strip() for item in SKILL_SPLIT_RE.split(line) if item.strip())
    return items


def _split_degree(degree: str):
    match = BRANCH_RE.match(degree)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return degree, ""


def _split_tech(tech: str):
    return tuple(item.strip() for item in SKILL_SPLIT_RE.split(tech or "") if item.strip())


def build_standard_resume(resume: GeneratedResume, profile: NormalizedProfile,
                          strategy: ResumeStrategy, role: str,
                          declaration: Optional[str] = None) -> StandardResume:
    """Map a generated resume (and its source profile) onto the 10-section template."""
    header = StandardHeader(
        full_name=resume.header.name or profile.name,
        mobile_number=resume.header.phone or profile.phone,
        professional_email=resume.header.email or profile.email,
        city=resume.header.location or profile.display_location,
        linkedin_url=resume.header.linkedin or profile.linkedin,
        github_url=resume.header.github or profile.github,
        portfolio_url=resume.header.portfolio_url or profile.portfolio_url,
    )

    skill_names = list(profile.skills) + list(profile.technical_tools)
    if not skill_names:
        skill_names = _skills_from_display(resume.skills) + _skills_from_display(resume.technical_tools)
    groups, soft_skills = group_skills(skill_names)
    key_skills = KeySkills(**{name: tuple(values) for name, values in groups.items()})

    experience = [
        StandardExperience(
            organization_name=e.company,
            role=e.role,
            duration=e.duration,
            responsibilities=bullet_lines(e.description),
        )
        for e in resume.experience
    ]
    if strategy.type == FRESHER:
        experience.extend(
            StandardExperience(
                organization_name=p.title,
                role="Project",
                responsibilities=bullet_lines(p.description),
                tools_used=_split_tech(p.tech),
            )
            for p in resume.projects
        )

    education = []
    for e in resume.education:
        degree, branch = _split_degree(e.degree)
        education.append(StandardEducation(degree=degree, branch=branch,
                                           college_university=e.university, year=e.year or e.duration))

    certifications = []
    for c in resume.certifications:
        year = YEAR_RE.search(c.title)
        certifications.append(StandardCertification(course_name=c.title, platform_organization=c.issuer,
                                                    year=year.group(1) if year else ""))

    achievements = [StandardAchievement(title=a.title, type="award", date=a.date) for a in resume.awards]
    achievements += [StandardAchievement(title=p.title, type="publication", date=p.date)
                     for p in resume.publications]
    achievements += [StandardAchievement(title=f"{v.role}, {v.organization}".strip(", "), type="leadership",
                                         date=v.duration)
                     for v in resume.volunteer_work]

    languages = tuple(
        f"{lang.language} ({lang.proficiency})" if lang.proficiency else lang.language
        for lang in (resume.languages or profile.languages)
    )

    return StandardResume(
        header=header,
        profile_summary=resume.summary.strip(),
        key_skills=key_skills,
        professional_experience=tuple(experience),
        education=tuple(education),
        certifications=tuple(certifications),
        achievements=tuple(achievements),
        soft_skills=tuple(soft_skills),
        additional_info=AdditionalInfo(languages_known=languages),
        declaration=declaration or "",
        resume_type=strategy.type,
        target_role=role,
    )


# ============================================================================
# PLAIN TEXT
# ============================================================================

def _text_section(title: str, lines: List[str]) -> str:
    return "\n".join([title.upper(), RULE] + lines)


def to_standard_text(resume: StandardResume) -> str:
    sections = []

    header = resume.header
    header_lines = []
    if header.full_name:
        header_lines.append(header.full_name.upper())
    contact = [p for p in (f"Mobile: {header.mobile_number}" if header.mobile_number else "",
                           f"Email: {header.professional_email}" if header.professional_email else "") if p]
    if contact:
        header_lines.append(" | ".join(contact))
    if header.city:
        header_lines.append(f"Location: {header.city}")
    links = [f"{label}: {url}" for label, url in (("LinkedIn", header.linkedin_url), ("GitHub", header.github_url),
                                                   ("Portfolio", header.portfolio_url)) if url]
    if links:
        header_lines.append(" | ".join(links))
    if header_lines:
        sections.append("\n".join(header_lines))

    if resume.profile_summary:
        sections.append(_text_section("Profile Summary", [resume.profile_summary.replace("**", "")]))

    if not resume.key_skills.is_empty():
        sections.append(_text_section("Key Skills", [
            f"{label}: {', '.join(values)}" for label, values in resume.key_skills.categories()]))

    if resume.professional_experience:
        lines = []
        for exp in resume.professional_experience:
            lines.append(exp.organization_name)
            lines.append(" | ".join(p for p in (exp.role, exp.duration) if p))
            lines.extend(f"  • {item.replace('**', '')}" for item in exp.responsibilities)
            if exp.tools_used:
                lines.append(f"Tools & Technologies: {', '.join(exp.tools_used)}")
            lines.append("")
        sections.append(_text_section("Professional Experience", lines[:-1]))

    if resume.education:
        lines = []
        for edu in resume.education:
            lines.append(f"{edu.degree} – {edu.branch}" if edu.branch else edu.degree)
            lines.append(" | ".join(p for p in (edu.college_university, edu.year) if p))
        sections.append(_text_section("Education", lines))

    if resume.certifications:
        sections.append(_text_section("Certifications & Training", [
            " – ".join(p for p in (c.course_name, c.platform_organization) if p)
            + (f" ({c.year})" if c.year else "")
            for c in resume.certifications]))

    if resume.achievements:
        sections.append(_text_section("Achievements & Activities", [
            f"• {a.title}" + (f" ({a.date})" if a.date else "") for a in resume.achievements]))

    if resume.soft_skills:
        sections.append(_text_section("Soft Skills", [", ".join(resume.soft_skills)]))

    info = resume.additional_info
    if not info.is_empty():
        lines = []
        if info.languages_known:
            lines.append(f"Languages Known: {', '.join(info.languages_known)}")
        if info.availability:
            lines.append(f"Availability: {info.availability}")
        sections.append(_text_section("Additional Information", lines))

    if resume.declaration:
        sections.append(_text_section("Declaration", [resume.declaration]))

    return "\n\n".join(sections) + "\n"


# ============================================================================
# HTML
# ============================================================================

STANDARD_STYLES = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: 'Calibri', 'Arial', 'Times New Roman', serif;
      font-size: 11pt;
      line-height: 1.4;
      color: #000;
      background: #fff;
      padding: 0.5in;
    }
    .header { text-align: center; margin-bottom: 0.2in; padding-bottom: 0.15in; border-bottom: 2px solid #000; }
    .name { font-weight: bold; font-size: 14pt; letter-spacing: 1px; margin-bottom: 0.05in; }
    .contact-info { font-size: 10.5pt; margin: 0.02in 0; }
    .section-header {
      font-weight: bold;
      font-size: 11pt;
      text-transform: uppercase;
      margin-top: 0.15in;
      margin-bottom: 0.08in;
      border-bottom: 1px solid #000;
      padding-bottom: 0.05in;
    }
    .section-content { font-size: 10.5pt; line-height: 1.3; }
    .entry { margin-bottom: 0.1in; }
    .entry-header { font-weight: bold; }
    .bullet-list { margin-left: 0.2in; }
"""


def _html_section(title: str, content: str) -> str:
    return (f'<div class="section"><div class="section-header">{escape_html(title)}</div>'
            f'<div class="section-content">{content}</div></div>')


def _html_header(header: StandardHeader) -> str:
    lines = []
    if header.full_name:
        lines.append(f'<div class="name">{escape_html(header.full_name.upper())}</div>')
    contact = [escape_html(p) for p in (header.mobile_number, header.professional_email, header.city) if p]
    if contact:
        lines.append(f'<div class="contact-info">{" | ".join(contact)}</div>')
    links = [f'<a href="{escape_html(format_url(url))}">{label}</a>'
             for label, url in (("LinkedIn", header.linkedin_url), ("GitHub", header.github_url),
                                ("Portfolio", header.portfolio_url)) if url]
    if links:
        lines.append(f'<div class="contact-info">{" | ".join(links)}</div>')
    return f'<div class="header">{"".join(lines)}</div>' if lines else ""


def to_standard_html(resume: StandardResume) -> str:
    sections = [_html_header(resume.header)]

    if resume.profile_summary:
        sections.append(_html_section("Profile Summary", inline(resume.profile_summary)))

    if not resume.key_skills.is_empty():
        sections.append(_html_section("Key Skills", "".join(
            f"<div><strong>{escape_html(label)}:</strong> {escape_html(', '.join(values))}</div>"
            for label, values in resume.key_skills.categories())))

    if resume.professional_experience:
        entries = []
        for exp in resume.professional_experience:
            bullets = "".join(f"<li>{inline(item)}</li>" for item in exp.responsibilities)
            tools = (f"<div><strong>Tools &amp; Technologies:</strong> {escape_html(', '.join(exp.tools_used))}</div>"
                     if exp.tools_used else "")
            subheader = escape_html(" | ".join(p for p in (exp.role, exp.duration) if p))
            entries.append(
                f'<div class="entry"><div class="entry-header">{escape_html(exp.organization_name)}</div>'
                f'<div>{subheader}</div>'
                f'{f"<ul class=bullet-list>{bullets}</ul>" if bullets else ""}{tools}</div>')
        sections.append(_html_section("Professional Experience", "".join(entries)))

    if resume.education:
        sections.append(_html_section("Education", "".join(
            f'<div class="entry"><div class="entry-header">'
            f'{escape_html(f"{e.degree} – {e.branch}" if e.branch else e.degree)}</div>'
            f'<div>{escape_html(" | ".join(p for p in (e.college_university, e.year) if p))}</div></div>'
            for e in resume.education)))

    if resume.certifications:
        sections.append(_html_section("Certifications & Training", "".join(
            f'<div class="entry">{escape_html(" – ".join(p for p in (c.course_name, c.platform_organization) if p))}'
            f'{escape_html(f" ({c.year})") if c.year else ""}</div>'
            for c in resume.certifications)))

    if resume.achievements:
        sections.append(_html_section("Achievements & Activities", "".join(
            f'<div>• {escape_html(a.title)}{escape_html(f" ({a.date})") if a.date else ""}</div>'
            for a in resume.achievements)))

    if resume.soft_skills:
        sections.append(_html_section("Soft Skills", escape_html(", ".join(resume.soft_skills))))

    info = resume.additional_info
    if not info.is_empty():
        parts = []
        if info.languages_known:
            parts.append(f"<div><strong>Languages Known:</strong> {escape_html(', '.join(info.languages_known))}</div>")
        if info.availability:
            parts.append(f"<div><strong>Availability:</strong> {escape_html(info.availability)}</div>")
        sections.append(_html_section("Additional Information", "".join(parts)))

    if resume.declaration:
        sections.append(_html_section("Declaration", escape_html(resume.declaration)))

    title = escape_html(" - ".join(p for p in (resume.header.full_name or "Resume", resume.target_role) if p))
    body = "\n".join(s for s in sections if s)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <style>{STANDARD_STYLES}</style>
</head>
<body>
{body}
</body>
</html>
"""


# ============================================================================
# VALIDATION
# ============================================================================

@dataclass
class StandardValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    completeness_score: int = 0
    ats_compliance: bool = True

    def to_dict(self):
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "completenessScore": self.completeness_score,
            "atsCompliance": self.ats_compliance,
        }


def _ats_warnings(resume: StandardResume, text: str) -> List[str]:
    warnings = []
    if SPECIAL_SYMBOLS_RE.search(text):
        warnings.append("ATS: Contains special symbols that may not parse correctly")
    if len(resume.profile_summary) > MAX_SUMMARY_LENGTH:
        warnings.append("ATS: Profile summary is quite long (may be truncated by some ATS)")
    return warnings


def validate_standard_resume(resume: StandardResume) -> StandardValidationResult:
    """Check mandatory sections and score completeness as the share of the 10 sections present."""
    errors: List[str] = []
    warnings: List[str] = []
    present = 0

    if resume.header.full_name:
        present += 1
    else:
        errors.append("Header: Full name is required")

    if not resume.profile_summary:
        errors.append("Profile Summary is mandatory")
    elif len(resume.profile_summary) < MIN_SUMMARY_LENGTH:
        warnings.append(f"Profile Summary is too short (min {MIN_SUMMARY_LENGTH} chars)")
    else:
        present += 1

    if resume.key_skills.is_empty():
        warnings.append("Key Skills: No skills categories filled")
    else:
        present += 1

    if not resume.professional_experience:
        warnings.append("Professional Experience: No entries (optional for some freshers)")
    else:
        experience_ok = True
        for i, exp in enumerate(resume.professional_experience):
            if not exp.organization_name:
                errors.append(f"Experience [{i}]: Organization name is required")
                experience_ok = False
            if not exp.role:
                errors.append(f"Experience [{i}]: Role is required")
                experience_ok = False
        if experience_ok:
            present += 1

    if not resume.education:
        errors.append("Education is mandatory")
    else:
        education_ok = True
        for i, edu in enumerate(resume.education):
            if not edu.degree:
                errors.append(f"Education [{i}]: Degree is required")
                education_ok = False
            if not edu.college_university:
                errors.append(f"Education [{i}]: College/University is required")
                education_ok = False
            if not edu.year:
                warnings.append(f"Education [{i}]: Year is recommended")
        if education_ok:
            present += 1

    for i, cert in enumerate(resume.certifications):
        if not cert.course_name:
            warnings.append(f"Certification [{i}]: Course name should be specified")
    present += sum(1 for section in (resume.certifications, resume.achievements, resume.soft_skills) if section)
    if not resume.soft_skills:
        warnings.append("Soft Skills section is recommended")
    if not resume.additional_info.is_empty():
        present += 1
    if resume.declaration:
        present += 1

    if resume.resume_type not in ("fresher", "experienced"):
        errors.append('Resume type must be "fresher" or "experienced"')
    if not resume.target_role:
        errors.append("Target role is required")

    ats = _ats_warnings(resume, to_standard_text(resume))
    warnings.extend(ats)

    return StandardValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        completeness_score=round(present / TOTAL_SECTIONS * 100),
        ats_compliance=not ats,
    )
