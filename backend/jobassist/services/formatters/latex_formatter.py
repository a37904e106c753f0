"""
LaTeX resume formatter - an article/a4paper source document for the resume.
"""
import re
from typing import List, Optional

from jobassist.models.profile import NormalizedProfile, bullet_lines
from jobassist.models.resume import GeneratedResume
from jobassist.services.formatters.links import format_url, mailto_url

BOLD_RE = re.compile(r"\*\*(.+?)\*\*")

_LATEX_SPECIAL = re.compile(r"[\\{}$&#^_~%]")
_LATEX_REPLACEMENTS = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "$": r"\$",
    "&": r"\&",
    "#": r"\#",
    "^": r"\textasciicircum{}",
    "_": r"\_",
    "~": r"\textasciitilde{}",
    "%": r"\%",
}

PREAMBLE = r"""\documentclass[11pt,a4paper]{article}
\usepackage[margin=0.75in]{geometry}
\usepackage[hidelinks]{hyperref}
\usepackage{enumitem}
\usepackage{titlesec}
\setlength{\parindent}{0pt}
\setlist[itemize]{leftmargin=*,nosep}
\titleformat{\section}{\large\bfseries\uppercase}{}{0em}{}[\titlerule]
\pagestyle{empty}
"""


def _escape_chars(text: str) -> str:
    # One pass, so the braces of \textbackslash{} are never re-escaped
    return _LATEX_SPECIAL.sub(lambda m: _LATEX_REPLACEMENTS[m.group(0)], text)


def escape_latex(text) -> str:
    """
    Escape LaTeX metacharacters, turning **bold** spans into \\textbf{}.

    Bold spans are found on the raw text first; each piece is escaped afterwards.
    """
    text = str(text or "")
    parts = []
    position = 0
    for match in BOLD_RE.finditer(text):
        parts.append(_escape_chars(text[position:match.start()]))
        parts.append(r"\textbf{" + _escape_chars(match.group(1)) + "}")
        position = match.end()
    parts.append(_escape_chars(text[position:]))
    return "".join(parts)


def _href_target(url: str) -> str:
    # Braces and backslashes are already percent-encoded by links
    return url.replace("%", r"\%").replace("#", r"\#")


def _url(value: str) -> str:
    return _href_target(format_url(value))


def _contact_line(resume: GeneratedResume, profile: Optional[NormalizedProfile]) -> str:
    header = resume.header
    email = header.email or (profile.email if profile else "")
    items = []
    if email:
        items.append(rf"\href{{{_href_target(mailto_url(email))}}}{{{escape_latex(email)}}}")
    if header.phone:
        items.append(escape_latex(header.phone))
    if header.location:
        items.append(escape_latex(header.location))
    for url, label in ((header.linkedin, "LinkedIn"), (header.github, "GitHub"),
                       (header.portfolio_url, "Portfolio")):
        if url:
            items.append(rf"\href{{{_url(url)}}}{{{label}}}")
    return r" \textbullet{} ".join(items)


def _itemize(description: str) -> List[str]:
    items = bullet_lines(description)
    if not items:
        return []
    return [r"\begin{itemize}"] + [rf"  \item {escape_latex(item)}" for item in items] + [r"\end{itemize}"]


def _entry(title: str, subtitle: str = "", date: str = "", description: str = "") -> List[str]:
    line = rf"\textbf{{{escape_latex(title)}}}"
    if subtitle:
        line += rf" $|$ {escape_latex(subtitle)}"
    if date:
        line += rf" \hfill \textit{{{escape_latex(date)}}}"
    return [line + r" \\"] + _itemize(description)


def _section(title: str, body: List[str]) -> List[str]:
    return [rf"\section*{{{title}}}"] + body + [""]


def _text_lines(text: str) -> List[str]:
    return [escape_latex(line) + r" \\" for line in text.split("\n") if line.strip()]


def to_latex(resume: GeneratedResume, profile: Optional[NormalizedProfile] = None) -> str:
    """Render a GeneratedResume as a LaTeX document. Empty sections are omitted."""
    name = resume.header.name or (profile.name if profile else "")
    lines = [PREAMBLE, r"\begin{document}", ""]
    lines.append(r"\begin{center}")
    if name:
        lines.append(rf"{{\fontsize{{16pt}}{{19pt}}\selectfont\textbf{{{escape_latex(name)}}}}} \\[4pt]")
    contact = _contact_line(resume, profile)
    if contact:
        lines.append(contact)
    lines.extend([r"\end{center}", ""])

    if resume.summary.strip():
        lines += _section("Professional Summary", [escape_latex(resume.summary.strip())])
    if resume.skills.strip():
        lines += _section("Skills", _text_lines(resume.skills))
    if resume.experience:
        body = []
        for e in resume.experience:
            body += _entry(e.role, e.company, e.duration, e.description)
        lines += _section("Work Experience", body)
    if resume.education:
        body = []
        for e in resume.education:
            body += _entry(e.degree, e.university, e.year or e.duration)
        lines += _section("Education", body)
    if resume.projects:
        body = []
        for p in resume.projects:
            body += _entry(p.title, p.tech, "", p.description)
        lines += _section("Projects", body)
    if resume.certifications:
        body = []
        for c in resume.certifications:
            body += _entry(c.title, c.issuer)
        lines += _section("Certifications", body)
    if resume.languages:
        languages = ", ".join(
            escape_latex(f"{lang.language} ({lang.proficiency})" if lang.proficiency else lang.language)
            for lang in resume.languages)
        lines += _section("Languages", [languages])
    if resume.technical_tools.strip():
        lines += _section("Technical Tools", _text_lines(resume.technical_tools))
    if resume.volunteer_work:
        body = []
        for v in resume.volunteer_work:
            body += _entry(v.role, v.organization, v.duration, v.description)
        lines += _section("Volunteer Work", body)
    if resume.publications:
        body = []
        for p in resume.publications:
            body += _entry(p.title, p.publication, p.date)
        lines += _section("Publications", body)
    if resume.awards:
        body = []
        for a in resume.awards:
            body += _entry(a.title, a.organization, a.date)
        lines += _section("Awards \\& Honors", body)
    if resume.interests.strip():
        lines += _section("Interests", [escape_latex(resume.interests.strip())])

    lines.append(r"\end{document}")
    return "\n".join(lines) + "\n"
