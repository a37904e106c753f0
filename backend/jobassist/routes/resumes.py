"""
Resume API endpoints - generation, preview, PDF rendering and stored-resume downloads.
"""
import logging
import re
from io import BytesIO
from typing import Any, Dict

from flask import Blueprint, Response, jsonify, request, send_file, url_for

from jobassist.extensions import get_services, get_store, limiter
from jobassist.models.resume import build_resume_record
from jobassist.services.docx_service import render_docx
from jobassist.services.formatters.html_formatter import to_html
from jobassist.services.formatters.latex_formatter import to_latex
from jobassist.services.formatters.standard_format import (
    build_standard_resume,
    to_standard_html,
    validate_standard_resume,
)
from jobassist.services.formatters.text_formatter import to_plain_text
from jobassist.services.profile_normalizer import normalize
from jobassist.services.response_parser import parse
from jobassist.services.resume_generation import generate_resume, render_resume_pdf
from jobassist.services.resume_strategy import select_strategy
from jobassist.services.resume_template import render_basic_pdf
from jobassist.utils.async_runner import run_async
from jobassist.utils.deadline import Deadline
from jobassist.utils.exceptions import RenderFailed, status_for
from jobassist.utils.validation import (
    DownloadQuery,
    GenerateResumeRequest,
    PreviewRequest,
    RenderPdfRequest,
    validate_request,
)

logger = logging.getLogger(__name__)

resumes_bp = Blueprint("resumes", __name__, url_prefix="/api/resumes")

MAX_LIST_LIMIT = 100
FILENAME_RE = re.compile(r"[^A-Za-z0-9]+")

DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _generate_rate_limit() -> str:
    return get_services().settings.generate_rate_limit


def _failure_response(result: Dict[str, Any]):
    body = {
        "success": False,
        "error": result["error"],
        "error_code": result["error_code"],
        "details": result.get("details", {}),
    }
    return jsonify(body), status_for(result["error_code"])


def _file_stem(name: str, role: str) -> str:
    stem = FILENAME_RE.sub("_", f"{name} {role}".strip()).strip("_")
    return stem or "resume"


def _bytes_response(data: bytes, mimetype: str, filename: str):
    return send_file(BytesIO(data), mimetype=mimetype, as_attachment=True, download_name=filename)


def _text_response(text: str, mimetype: str, filename: str):
    return Response(text, mimetype=mimetype,
                    headers={"Content-Disposition": f'attachment; filename="{filename}"'})


# ============================================================================
# ROUTES
# ============================================================================

@resumes_bp.route("/generate", methods=["POST"])
@limiter.limit(_generate_rate_limit)
def generate():
    """Generate a resume from an inline profile or the user's stored profile."""
    payload = validate_request(GenerateResumeRequest, request.get_json(silent=True))
    services = get_services()
    settings = services.settings

    user_id = payload.get("userId")
    profile_document = payload.get("profile")
    if profile_document is None:
        profile_document = get_store().get_user_profile(user_id)

    logger.info(f"[Resumes] Generating resume for {payload['targetRole']}",
                extra={"user_id": user_id or "-", "save": payload["save"]})

    deadline = Deadline(settings.pipeline_timeout)
    result = run_async(
        generate_resume(
            services,
            profile_document,
            payload["targetRole"],
            extra_requirements=payload.get("extraRequirements"),
            extra_info=payload.get("extraInfo"),
            deadline=deadline,
        ),
        timeout=settings.pipeline_timeout,
        step="resume generation",
    )
    if not result["success"]:
        return _failure_response(result)

    resume = result["resume"]
    strategy = result["strategy"]
    body = {
        "success": True,
        "resume": resume.to_dict(),
        "html": result["html"],
        "strategy": strategy.to_dict(),
        "metadata": result["metadata"],
    }

    if payload["save"]:
        record = build_resume_record(user_id, resume, result["profile"], strategy,
                                     payload["targetRole"], result["metadata"])
        body["resumeId"] = get_store().save_resume(user_id, record)

    return jsonify(body)


@resumes_bp.route("/preview", methods=["POST"])
def preview():
    """Render resume content as HTML without touching the browser."""
    payload = validate_request(PreviewRequest, request.get_json(silent=True))
    resume = parse(payload["resume"])
    return Response(to_html(resume, payload.get("resumeType")), mimetype="text/html")


@resumes_bp.route("/render-pdf", methods=["POST"])
def render_pdf_route():
    """Render a complete HTML document to PDF."""
    payload = validate_request(RenderPdfRequest, request.get_json(silent=True))
    services = get_services()
    timeout = services.settings.render_timeout
    pdf_bytes = run_async(services.renderer.render(payload["html"], deadline=Deadline(timeout)),
                          timeout=timeout, step="render")
    return _bytes_response(pdf_bytes, "application/pdf", "resume.pdf")


@resumes_bp.route("/<user_id>", methods=["GET"])
def list_resumes(user_id: str):
    """Newest-first list of stored resume summaries."""
    limit = min(max(request.args.get("limit", 50, type=int) or 50, 1), MAX_LIST_LIMIT)
    resumes = get_store().list_resumes(user_id, limit=limit)
    return jsonify({"success": True, "resumes": resumes})


@resumes_bp.route("/<user_id>/<resume_id>/download", methods=["GET"])
def download(user_id: str, resume_id: str):
    """Render a stored resume in the requested format."""
    query = validate_request(DownloadQuery, request.args.to_dict())
    output_format = query["format"]

    record = get_store().get_resume(user_id, resume_id)
    resume = parse(record.get("content") or {})
    profile = normalize(record.get("profileData") or {})
    strategy = select_strategy(profile)
    role = record.get("role", "")
    stem = _file_stem(resume.header.name or profile.name, role)

    if output_format == "pdf":
        services = get_services()
        timeout = services.settings.render_timeout
        result = run_async(render_resume_pdf(services, resume, strategy.type, deadline=Deadline(timeout)),
                           timeout=timeout, step="render")
        if result["success"]:
            return _bytes_response(result["pdf"], "application/pdf", f"{stem}.pdf")
        if result["error_code"] == RenderFailed.error_code:
            # The HTML export does not need the browser
            result["details"] = {
                **result.get("details", {}),
                "fallback": url_for("resumes.download", user_id=user_id, resume_id=resume_id, format="html"),
            }
        return _failure_response(result)

    if output_format == "docx":
        return _bytes_response(render_docx(resume), DOCX_MIMETYPE, f"{stem}.docx")
    if output_format == "basic-pdf":
        return _bytes_response(render_basic_pdf(resume), "application/pdf", f"{stem}.pdf")
    if output_format == "txt":
        return _text_response(to_plain_text(resume), "text/plain", f"{stem}.txt")
    if output_format == "tex":
        return _text_response(resume.latex_code or to_latex(resume, profile), "application/x-tex", f"{stem}.tex")
    if output_format == "standard":
        standard = build_standard_resume(resume, profile, strategy, role)
        report = validate_standard_resume(standard)
        logger.info("[Resumes] Standard format built", extra={
            "completeness": report.completeness_score,
            "ats": report.ats_compliance,
        })
        return _text_response(to_standard_html(standard), "text/html", f"{stem}_standard.html")
    return _text_response(to_html(resume, strategy.type), "text/html", f"{stem}.html")
