"""
Basic PDF export - a clean, ATS-friendly resume PDF drawn with reportlab.

Needs no browser, so it stays available when the headless renderer is not.
"""
import logging
import re
from io import BytesIO
from typing import List

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from jobassist.models.profile import bullet_lines
from jobassist.models.resume import GeneratedResume
from jobassist.utils.exceptions import RenderFailed

logger = logging.getLogger(__name__)

BOLD_RE = re.compile(r"\*\*(.+?)\*\*")


def _markup(text: str) -> str:
    """Escape reportlab's mini-HTML, keep **bold** as <b>, and turn newlines into breaks."""
    text = str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    text = BOLD_RE.sub(r"<b>\1</b>", text)
    return text.replace("\n", "<br/>")


def _safe_paragraph(text: str, style: ParagraphStyle):
    if not text:
        return Spacer(1, 0)
    return Paragraph(_markup(text), style)


def _build_styles():
    styles = getSampleStyleSheet()
    body = ParagraphStyle(
        "BodyStyle",
        parent=styles["BodyText"],
        fontSize=10,
        leading=12,
        alignment=TA_LEFT,
        spaceAfter=4,
        textColor=HexColor("#000000"),
    )
    return {
        "name": ParagraphStyle(
            "NameStyle",
            parent=styles["Heading1"],
            fontSize=20,
            textColor=HexColor("#000000"),
            spaceAfter=6,
            alignment=TA_CENTER,
            fontName="Helvetica-Bold",
        ),
        "contact": ParagraphStyle(
            "ContactStyle",
            parent=styles["BodyText"],
            fontSize=10,
            alignment=TA_CENTER,
            spaceAfter=12,
            textColor=HexColor("#333333"),
        ),
        "section": ParagraphStyle(
            "SectionTitle",
            parent=styles["Heading2"],
            fontSize=12,
            textColor=HexColor("#000000"),
            spaceAfter=8,
            spaceBefore=14,
            fontName="Helvetica-Bold",
        ),
        "body": body,
        "entry": ParagraphStyle(
            "EntryHeader",
            parent=body,
            fontName="Helvetica-Bold",
            spaceAfter=2,
            spaceBefore=6,
        ),
        "bullet": ParagraphStyle(
            "BulletStyle",
            parent=body,
            leftIndent=18,
            bulletIndent=8,
            spaceAfter=3,
        ),
    }


def _entry(story: List, styles, header_parts, description: str = ""):
    header = " | ".join(p for p in header_parts if p)
    if header:
        story.append(_safe_paragraph(header, styles["entry"]))
    for line in bullet_lines(description):
        story.append(_safe_paragraph(f"• {line}", styles["bullet"]))


def _story(resume: GeneratedResume) -> List:
    styles = _build_styles()
    story = []

    header = resume.header
    if header.name:
        story.append(_safe_paragraph(header.name.upper(), styles["name"]))
    contact = header.contact_parts()
    if contact:
        story.append(_safe_paragraph(" | ".join(contact), styles["contact"]))
    story.append(Spacer(1, 0.15 * inch))

    def section(title):
        story.append(_safe_paragraph(title, styles["section"]))

    if resume.summary.strip():
        section("PROFESSIONAL SUMMARY")
        story.append(_safe_paragraph(resume.summary.strip(), styles["body"]))

    if resume.skills.strip():
        section("SKILLS")
        story.append(_safe_paragraph(resume.skills.strip(), styles["body"]))

    if resume.experience:
        section("EXPERIENCE")
        for e in resume.experience:
            _entry(story, styles, (e.company, e.role, e.duration), e.description)
            story.append(Spacer(1, 0.1 * inch))

    if resume.education:
        section("EDUCATION")
        for e in resume.education:
            _entry(story, styles, (e.degree, e.university, e.year or e.duration))

    if resume.projects:
        section("PROJECTS")
        for p in resume.projects:
            _entry(story, styles, (p.title, p.tech), p.description)
            story.append(Spacer(1, 0.1 * inch))

    if resume.certifications:
        section("CERTIFICATIONS")
        for c in resume.certifications:
            story.append(_safe_paragraph(
                "• " + " | ".join(p for p in (c.title, c.issuer) if p), styles["bullet"]))

    if resume.languages:
        section("LANGUAGES")
        story.append(_safe_paragraph(", ".join(
            f"{lang.language} ({lang.proficiency})" if lang.proficiency else lang.language
            for lang in resume.languages), styles["body"]))

    if resume.technical_tools.strip():
        section("TECHNICAL TOOLS")
        story.append(_safe_paragraph(resume.technical_tools.strip(), styles["body"]))

    if resume.volunteer_work:
        section("VOLUNTEER WORK")
        for v in resume.volunteer_work:
            _entry(story, styles, (v.role, v.organization, v.duration), v.description)

    if resume.publications:
        section("PUBLICATIONS")
        for p in resume.publications:
            _entry(story, styles, (p.title, p.publication, p.date))

    if resume.awards:
        section("AWARDS & HONORS")
        for a in resume.awards:
            _entry(story, styles, (a.title, a.organization, a.date))

    if resume.interests.strip():
        section("INTERESTS")
        story.append(_safe_paragraph(resume.interests.strip(), styles["body"]))

    return story


def render_basic_pdf(resume: GeneratedResume) -> bytes:
    """
    Draw a GeneratedResume as an A4 PDF with reportlab.

    Returns:
        PDF bytes

    Raises:
        RenderFailed: stage "pdf" if reportlab cannot build the document
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        title=f"{resume.header.name} - Resume" if resume.header.name else "Resume",
    )
    try:
        doc.build(_story(resume))
    except Exception as exc:
        logger.error(f"[ResumeTemplate] PDF build failed: {exc}")
        raise RenderFailed("pdf", f"Basic PDF generation failed: {exc}") from exc

    pdf_bytes = buffer.getvalue()
    logger.info("[ResumeTemplate] Basic PDF built", extra={"bytes": len(pdf_bytes)})
    return pdf_bytes
