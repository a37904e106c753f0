"""
Plain-text resume formatter.
"""
from typing import List

from jobassist.models.profile import bullet_lines
from jobassist.models.resume import GeneratedResume

RULE_WIDTH = 60


def strip_bold(text: str) -> str:
    return (text or "").replace("**", "")


def _heading(title: str) -> str:
    return f"{title.upper()}\n{'-' * RULE_WIDTH}"


def _entry(title: str, *rest: str, description: str = "") -> List[str]:
    header = " | ".join(strip_bold(p) for p in (title,) + rest if p)
    return [header] + [f"  • {strip_bold(line)}" for line in bullet_lines(description)]


def _block(title: str, lines: List[str]) -> str:
    return _heading(title) + "\n" + "\n".join(lines)


def to_plain_text(resume: GeneratedResume) -> str:
    """Render a GeneratedResume as plain text in display order, omitting empty sections."""
    blocks = []
    header = resume.header
    if header.name:
        blocks.append(f"{'=' * RULE_WIDTH}\n{header.name.upper()}\n{'=' * RULE_WIDTH}")
    contact = header.contact_parts()
    if contact:
        blocks.append(" | ".join(contact))

    if resume.summary.strip():
        blocks.append(_block("Professional Summary", [strip_bold(resume.summary.strip())]))
    if resume.skills.strip():
        blocks.append(_block("Skills", [strip_bold(resume.skills.strip())]))
    if resume.experience:
        lines = []
        for e in resume.experience:
            lines.extend(_entry(e.role, e.company, e.duration, description=e.description))
        blocks.append(_block("Work Experience", lines))
    if resume.education:
        blocks.append(_block("Education", [
            " | ".join(p for p in (e.degree, e.university, e.year or e.duration) if p)
            for e in resume.education]))
    if resume.projects:
        lines = []
        for p in resume.projects:
            lines.extend(_entry(p.title, p.tech, description=p.description))
        blocks.append(_block("Projects", lines))
    if resume.certifications:
        blocks.append(_block("Certifications", [
            " | ".join(p for p in (c.title, c.issuer) if p) for c in resume.certifications]))
    if resume.languages:
        blocks.append(_block("Languages", [
            f"{lang.language} ({lang.proficiency})" if lang.proficiency else lang.language
            for lang in resume.languages]))
    if resume.technical_tools.strip():
        blocks.append(_block("Technical Tools", [strip_bold(resume.technical_tools.strip())]))
    if resume.volunteer_work:
        lines = []
        for v in resume.volunteer_work:
            lines.extend(_entry(v.role, v.organization, v.duration, description=v.description))
        blocks.append(_block("Volunteer Work", lines))
    if resume.publications:
        blocks.append(_block("Publications", [
            " | ".join(x for x in (p.title, p.publication, p.date) if x) for p in resume.publications]))
    if resume.awards:
        blocks.append(_block("Awards & Honors", [
            " | ".join(x for x in (a.title, a.organization, a.date) if x) for a in resume.awards]))
    if resume.interests.strip():
        blocks.append(_block("Interests", [strip_bold(resume.interests.strip())]))

    return "\n\n".join(blocks) + "\n"
