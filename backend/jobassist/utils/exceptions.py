"""
Custom exception classes for consistent error handling
"""
from typing import Optional

from flask import jsonify

EXCERPT_LENGTH = 200


def excerpt(text, limit: int = EXCERPT_LENGTH) -> str:
    """Shorten raw backend output for error details and logs."""
    if text is None:
        return ""
    text = str(text).strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class JobAssistError(Exception):
    """Base exception for all JobAssist errors"""
    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        self.message = message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        return {
            'error': self.message,
            'error_code': self.error_code,
            'details': self.details
        }

    def to_response(self):
        return jsonify(self.to_dict()), self.status_code


class ValidationError(JobAssistError):
    """Input validation error"""
    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str = None, details: dict = None):
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, self.error_code, details)


class NotFoundError(JobAssistError):
    """Resource not found error"""
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", details: dict = None):
        message = f"{resource} not found"
        super().__init__(message, self.error_code, details)


class BackendUnavailable(JobAssistError):
    """The generation backend failed its liveness probe; generation was not attempted."""
    status_code = 503
    error_code = "BACKEND_UNAVAILABLE"

    def __init__(self, reason: str, details: dict = None):
        self.reason = reason
        message = f"Generation backend is not available: {reason}"
        super().__init__(message, self.error_code, {
            'reason': reason,
            **(details or {})
        })


class GenerationFailed(JobAssistError):
    """Backend reachable but returned a non-2xx status, malformed JSON, or no content."""
    status_code = 502
    error_code = "GENERATION_FAILED"

    def __init__(self, reason: str, raw_output: Optional[str] = None, details: dict = None):
        self.reason = reason
        error_details = {'reason': reason, **(details or {})}
        if raw_output is not None:
            error_details['excerpt'] = excerpt(raw_output)
        super().__init__(f"Resume generation failed: {reason}", self.error_code, error_details)


class RenderFailed(JobAssistError):
    """Headless browser launch, page load, or PDF emission error."""
    status_code = 502
    error_code = "RENDER_FAILED"

    def __init__(self, stage: str, message: str = None, details: dict = None):
        self.stage = stage
        if not message:
            message = f"PDF rendering failed during {stage}"
        super().__init__(message, self.error_code, {
            'stage': stage,
            **(details or {})
        })


class DeadlineExceeded(JobAssistError):
    """The request's overall time budget ran out before a step could finish."""
    status_code = 504
    error_code = "DEADLINE_EXCEEDED"

    def __init__(self, step: str, details: dict = None):
        self.step = step
        super().__init__(f"Deadline exceeded before {step} completed", self.error_code, {
            'step': step,
            **(details or {})
        })


def handle_jobassist_exception(e: JobAssistError):
    """Flask error handler for JobAssist exceptions"""
    return e.to_response()


def register_error_handlers(app):
    """Register error handlers with Flask app"""
    app.register_error_handler(JobAssistError, handle_jobassist_exception)

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({
            'error': 'Bad request',
            'error_code': 'BAD_REQUEST',
            'details': {'message': str(e)}
        }), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({
            'error': 'Resource not found',
            'error_code': 'NOT_FOUND',
            'details': {}
        }), 404

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({
            'error': 'Rate limit exceeded. Please try again later.',
            'error_code': 'RATE_LIMIT_EXCEEDED',
            'details': {'limit': str(getattr(e, 'description', ''))}
        }), 429

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({
            'error': 'An unexpected error occurred. Please try again later.',
            'error_code': 'INTERNAL_ERROR',
            'details': {}
        }), 500


def status_for(error_code: str) -> int:
    """HTTP status for an error_code carried in a pipeline failure result."""
    for cls in (ValidationError, NotFoundError, BackendUnavailable, GenerationFailed,
                RenderFailed, DeadlineExceeded):
        if cls.error_code == error_code:
            return cls.status_code
    return JobAssistError.status_code
