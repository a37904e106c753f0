"""
DOCX export - builds an editable Word resume with python-docx.
"""
import logging
import re
from io import BytesIO

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from jobassist.models.profile import bullet_lines
from jobassist.models.resume import GeneratedResume

logger = logging.getLogger(__name__)

BOLD_SPLIT_RE = re.compile(r"(\*\*.+?\*\*)")


def _add_runs(paragraph, text: str):
    """Add text to a paragraph, one run per **bold** span so formatting survives."""
    for piece in BOLD_SPLIT_RE.split(text or ""):
        if not piece:
            continue
        if piece.startswith("**") and piece.endswith("**") and len(piece) > 4:
            paragraph.add_run(piece[2:-2]).bold = True
        else:
            paragraph.add_run(piece)
    return paragraph


def _heading(doc, title: str):
    paragraph = doc.add_paragraph()
    run = paragraph.add_run(title.upper())
    run.bold = True
    run.font.size = Pt(12)
    paragraph.paragraph_format.space_before = Pt(10)
    paragraph.paragraph_format.space_after = Pt(4)
    return paragraph


def _entry(doc, parts, description: str = ""):
    header = " | ".join(p for p in parts if p)
    if header:
        paragraph = doc.add_paragraph()
        run = paragraph.add_run(header.replace("**", ""))
        run.bold = True
    for line in bullet_lines(description):
        _add_runs(doc.add_paragraph(style="List Bullet"), line)


def _lines(doc, text: str):
    for line in text.split("\n"):
        if line.strip():
            _add_runs(doc.add_paragraph(), line.strip())


def render_docx(resume: GeneratedResume) -> bytes:
    """Render a GeneratedResume as a .docx document. Empty sections are omitted."""
    doc = Document()
    for section in doc.sections:
        section.top_margin = section.bottom_margin = Inches(0.5)
        section.left_margin = section.right_margin = Inches(0.5)

    normal = doc.styles["Normal"]
    normal.font.name = "Calibri"
    normal.font.size = Pt(10.5)

    header = resume.header
    if header.name:
        title = doc.add_paragraph()
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = title.add_run(header.name)
        run.bold = True
        run.font.size = Pt(18)
    contact = header.contact_parts()
    if contact:
        line = doc.add_paragraph(" | ".join(contact))
        line.alignment = WD_ALIGN_PARAGRAPH.CENTER

    if resume.summary.strip():
        _heading(doc, "Professional Summary")
        _lines(doc, resume.summary)
    if resume.skills.strip():
        _heading(doc, "Skills")
        _lines(doc, resume.skills)
    if resume.experience:
        _heading(doc, "Work Experience")
        for e in resume.experience:
            _entry(doc, (e.role, e.company, e.duration), e.description)
    if resume.education:
        _heading(doc, "Education")
        for e in resume.education:
            _entry(doc, (e.degree, e.university, e.year or e.duration))
    if resume.projects:
        _heading(doc, "Projects")
        for p in resume.projects:
            _entry(doc, (p.title, p.tech), p.description)
    if resume.certifications:
        _heading(doc, "Certifications")
        for c in resume.certifications:
            _entry(doc, (c.title, c.issuer))
    if resume.languages:
        _heading(doc, "Languages")
        doc.add_paragraph(", ".join(
            f"{lang.language} ({lang.proficiency})" if lang.proficiency else lang.language
            for lang in resume.languages))
    if resume.technical_tools.strip():
        _heading(doc, "Technical Tools")
        _lines(doc, resume.technical_tools)
    if resume.volunteer_work:
        _heading(doc, "Volunteer Work")
        for v in resume.volunteer_work:
            _entry(doc, (v.role, v.organization, v.duration), v.description)
    if resume.publications:
        _heading(doc, "Publications")
        for p in resume.publications:
            _entry(doc, (p.title, p.publication, p.date))
    if resume.awards:
        _heading(doc, "Awards & Honors")
        for a in resume.awards:
            _entry(doc, (a.title, a.organization, a.date))
    if resume.interests.strip():
        _heading(doc, "Interests")
        _lines(doc, resume.interests)

    buffer = BytesIO()
    doc.save(buffer)
    data = buffer.getvalue()
    logger.info("[DOCX] Resume document built", extra={"bytes": len(data)})
    return data
