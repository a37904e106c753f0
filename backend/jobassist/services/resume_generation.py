"""
Resume generation pipeline - stored profile document in, structured resume and HTML out.

normalize -> strategy -> prompt -> availability probe -> generate -> parse
-> content validation -> data-accuracy fixes -> LaTeX + HTML

Both entry points are coroutines that never raise. They return
{"success": True, ...} or {"success": False, "error", "error_code", "details"}.
"""
import logging
import time
from dataclasses import replace
from typing import Any, Dict, Optional

from jobassist.models.resume import GeneratedResume, build_generation_metadata
from jobassist.services.formatters.html_formatter import to_html
from jobassist.services.formatters.latex_formatter import to_latex
from jobassist.services.profile_normalizer import log_profile_summary, normalize
from jobassist.services.prompt_builder import build_prompt
from jobassist.services.response_parser import extract_json_object, parse
from jobassist.services.resume_strategy import select_strategy
from jobassist.services.resume_validator import (
    apply_resume_fixes,
    build_fallback_resume,
    validate_resume_content,
)
from jobassist.utils.deadline import Deadline
from jobassist.utils.exceptions import GenerationFailed, JobAssistError, ValidationError

logger = logging.getLogger(__name__)


def failure(error: JobAssistError) -> Dict[str, Any]:
    return {
        "success": False,
        "error": error.message,
        "error_code": error.error_code,
        "details": error.details,
    }


def _internal_failure(exc: Exception) -> Dict[str, Any]:
    return {
        "success": False,
        "error": f"Unexpected error: {exc}",
        "error_code": JobAssistError.error_code,
        "details": {"type": type(exc).__name__},
    }


async def generate_resume(
    context,
    profile_document: Any,
    target_role: Optional[str],
    extra_requirements: Optional[str] = None,
    extra_info: Optional[str] = None,
    deadline: Optional[Deadline] = None,
) -> Dict[str, Any]:
    """
    Generate a tailored resume for target_role from a stored profile document.

    Args:
        context: ServiceContext carrying settings and the generation client
        profile_document: Raw profile document as read from the store
        target_role: Role the resume is tailored to
        extra_requirements: Job description or requirements, overrides the profile's
        extra_info: Extra candidate information, overrides the profile's
        deadline: Time budget shared by the probe and generate steps

    Returns:
        Discriminated result dict; never raises
    """
    start = time.time()
    settings = context.settings
    client = context.generation_client
    if deadline is None:
        deadline = Deadline.optional(settings.pipeline_timeout)

    try:
        if profile_document is None:
            raise ValidationError("Profile document is required", field="profile")
        if not target_role or not str(target_role).strip():
            raise ValidationError("Target role is required", field="targetRole")
        target_role = str(target_role).strip()

        profile = normalize(profile_document)
        overrides = {}
        if extra_requirements:
            overrides["extra_requirements"] = extra_requirements.strip()
        if extra_info:
            overrides["extra_info"] = extra_info.strip()
        if overrides:
            profile = replace(profile, **overrides)
        log_profile_summary(profile, f"for {target_role}")

        strategy = select_strategy(profile)
        logger.info(f"[ResumeGeneration] Strategy: {strategy.type}",
                    extra={"years": strategy.years, "level": strategy.requirement_level})

        prompt = build_prompt(profile, strategy, target_role)

        # Fail fast instead of waiting out the generation timeout
        await client.ensure_available(deadline)

        fallback = False
        try:
            raw = await client.generate(prompt, deadline=deadline)
            resume = parse(extract_json_object(raw))
        except GenerationFailed as e:
            if not settings.fallback_enabled:
                raise
            logger.warning(f"[ResumeGeneration] {e.message}; using fallback resume")
            resume = build_fallback_resume(profile, target_role)
            fallback = True

        validation = validate_resume_content(resume, profile)
        resume = apply_resume_fixes(resume, profile, strategy)
        resume = replace(resume, latex_code=to_latex(resume, profile))
        html = to_html(resume, strategy.type)

        metadata = build_generation_metadata(
            profile,
            strategy,
            target_role,
            model=client.model,
            provider=client.provider,
            resume=resume,
            warnings=validation.issues,
            fallback=fallback,
        )
        logger.info("[ResumeGeneration] Resume generated", extra={
            "role": target_role,
            "fallback": fallback,
            "degraded": len(resume.degraded_sections),
            "elapsed_ms": int((time.time() - start) * 1000),
        })
        return {
            "success": True,
            "resume": resume,
            "html": html,
            "strategy": strategy,
            "profile": profile,
            "metadata": metadata,
        }

    except JobAssistError as e:
        logger.warning(f"[ResumeGeneration] Failed: {e.message}", extra={"error_code": e.error_code})
        return failure(e)
    except Exception as e:
        logger.exception(f"[ResumeGeneration] Unexpected error: {e}")
        return _internal_failure(e)


async def render_resume_pdf(context, resume: GeneratedResume, resume_type: Optional[str] = None,
                            deadline: Optional[Deadline] = None) -> Dict[str, Any]:
    """
    Render a resume to PDF through the context's renderer.

    On failure the result still carries the HTML so callers can offer it as
    the degraded download.
    """
    html = to_html(resume, resume_type)
    try:
        pdf_bytes = await context.renderer.render(html, deadline=deadline)
    except JobAssistError as e:
        logger.warning(f"[ResumeGeneration] PDF render failed: {e.message}")
        result = failure(e)
        result["html"] = html
        return result
    except Exception as e:
        logger.exception(f"[ResumeGeneration] Unexpected render error: {e}")
        result = _internal_failure(e)
        result["html"] = html
        return result
    return {"success": True, "pdf": pdf_bytes, "html": html}
