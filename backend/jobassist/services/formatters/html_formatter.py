"""
HTML resume formatter - self-contained A4 document for preview and PDF rendering.

All user-supplied text goes through escape_html() before it is placed in the
markup. Bold spans (**text**) are converted to <strong> after escaping, so no
markup from the resume content ever reaches the page.
"""
import html
import re
from typing import List, Optional

from jobassist.models.profile import bullet_lines
from jobassist.models.resume import EXPERIENCED, FRESHER, GeneratedResume
from jobassist.services.formatters.links import format_url, mailto_url
from jobassist.services.resume_strategy import font_sizes

BOLD_RE = re.compile(r"\*\*(.+?)\*\*")

BASE_STYLES = """
    @page {{ size: A4; margin: 0; }}
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{
      font-family: 'Calibri', 'Arial', sans-serif;
      font-size: {body};
      line-height: 1.4;
      color: #1a1a1a;
      background: #ffffff;
    }}
    .resume {{ width: 210mm; min-height: 297mm; padding: 0.5in; }}
    .header {{ text-align: center; padding-bottom: 8px; margin-bottom: 10px; border-bottom: 2px solid #333; }}
    .header h1 {{ font-size: {name}; font-weight: bold; margin-bottom: 4px; }}
    .contact-info {{ font-size: {contact}; color: #444; }}
    .section {{ margin-bottom: 12px; }}
    .section h2 {{
      font-size: {section};
      text-transform: uppercase;
      border-bottom: 1px solid #333;
      padding-bottom: 2px;
      margin-bottom: 6px;
    }}
    .entry {{ margin-bottom: 8px; page-break-inside: avoid; }}
    .entry-header {{ display: flex; justify-content: space-between; }}
    .entry-date {{ color: #555; white-space: nowrap; margin-left: 12px; }}
    .entry-sub {{ color: #333; font-style: italic; }}
    ul {{ margin: 3px 0 0 18px; }}
    li {{ margin-bottom: 2px; }}
    p {{ margin-bottom: 3px; }}
"""


def escape_html(text) -> str:
    return html.escape(str(text or ""), quote=True)


def inline(text) -> str:
    """Escape text, then turn **bold** spans into <strong>."""
    return BOLD_RE.sub(r"<strong>\1</strong>", escape_html(text))


def _section(title: str, body: str, css_class: str) -> str:
    return (f'<section class="section {css_class}">\n'
            f'  <h2>{escape_html(title)}</h2>\n'
            f'  {body}\n'
            f'</section>')


def _bullets(description: str) -> str:
    items = bullet_lines(description)
    if not items:
        return ""
    return "<ul>" + "".join(f"<li>{inline(item)}</li>" for item in items) + "</ul>"


def _entry(title: str, subtitle: str = "", date: str = "", description: str = "") -> str:
    heading = f"<strong>{inline(title)}</strong>" if title else ""
    if subtitle:
        heading += f' <span class="entry-sub">{"| " if title else ""}{inline(subtitle)}</span>'
    date_html = f'<span class="entry-date">{escape_html(date)}</span>' if date else ""
    return (f'<div class="entry"><div class="entry-header"><div>{heading}</div>{date_html}</div>'
            f'{_bullets(description)}</div>')


def _lines(text: str) -> str:
    return "".join(f"<p>{inline(line)}</p>" for line in text.split("\n") if line.strip())


def _header(resume: GeneratedResume) -> str:
    header = resume.header
    parts = []
    if header.email:
        parts.append(f'<a href="{escape_html(mailto_url(header.email))}">{escape_html(header.email)}</a>')
    if header.phone:
        parts.append(f"<span>{escape_html(header.phone)}</span>")
    if header.location:
        parts.append(f"<span>{escape_html(header.location)}</span>")
    for url, label in ((header.linkedin, "LinkedIn"), (header.github, "GitHub"),
                       (header.portfolio_url, "Portfolio")):
        if url:
            parts.append(f'<a href="{escape_html(format_url(url))}">{label}</a>')
    if not header.name and not parts:
        return ""
    name = f"<h1>{escape_html(header.name)}</h1>" if header.name else ""
    contact = f'<div class="contact-info">{" | ".join(parts)}</div>' if parts else ""
    return f'<header class="header">{name}{contact}</header>'


def render_sections(resume: GeneratedResume, resume_type: Optional[str] = None) -> List[str]:
    """Non-empty sections in display order."""
    summary_title = "Career Objective" if resume_type == FRESHER else "Professional Summary"
    sections = []
    if resume.summary.strip():
        sections.append(_section(summary_title, _lines(resume.summary), "summary"))
    if resume.skills.strip():
        sections.append(_section("Skills", _lines(resume.skills), "skills"))
    if resume.experience:
        sections.append(_section("Work Experience", "".join(
            _entry(e.role, e.company, e.duration, e.description) for e in resume.experience), "experience"))
    if resume.education:
        sections.append(_section("Education", "".join(
            _entry(e.degree, e.university, e.year or e.duration) for e in resume.education), "education"))
    if resume.projects:
        sections.append(_section("Projects", "".join(
            _entry(p.title, p.tech, "", p.description) for p in resume.projects), "projects"))
    if resume.certifications:
        sections.append(_section("Certifications", "".join(
            _entry(c.title, c.issuer) for c in resume.certifications), "certifications"))
    if resume.languages:
        languages = ", ".join(
            f"{escape_html(lang.language)} ({escape_html(lang.proficiency)})" if lang.proficiency
            else escape_html(lang.language)
            for lang in resume.languages)
        sections.append(_section("Languages", f"<p>{languages}</p>", "languages"))
    if resume.technical_tools.strip():
        sections.append(_section("Technical Tools", _lines(resume.technical_tools), "tools"))
    if resume.volunteer_work:
        sections.append(_section("Volunteer Work", "".join(
            _entry(v.role, v.organization, v.duration, v.description) for v in resume.volunteer_work),
            "volunteer"))
    if resume.publications:
        sections.append(_section("Publications", "".join(
            _entry(p.title, p.publication, p.date) for p in resume.publications), "publications"))
    if resume.awards:
        sections.append(_section("Awards & Honors", "".join(
            _entry(a.title, a.organization, a.date) for a in resume.awards), "awards"))
    if resume.interests.strip():
        sections.append(_section("Interests", _lines(resume.interests), "interests"))
    return sections


def to_html(resume: GeneratedResume, resume_type: Optional[str] = None) -> str:
    """Render a GeneratedResume as a complete HTML document. Pure."""
    styles = BASE_STYLES.format(**font_sizes(resume_type or EXPERIENCED))
    title = escape_html(f"{resume.header.name} - Resume" if resume.header.name else "Resume")
    body = "\n".join([_header(resume)] + render_sections(resume, resume_type))
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>{styles}</style>
</head>
<body>
  <main class="resume">
{body}
  </main>
</body>
</html>
"""
