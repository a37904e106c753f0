"""
Tests for custom exception classes
"""
from flask import Flask

from jobassist.utils.exceptions import (
    BackendUnavailable,
    DeadlineExceeded,
    GenerationFailed,
    JobAssistError,
    NotFoundError,
    RenderFailed,
    ValidationError,
    excerpt,
    status_for,
)


class TestJobAssistError:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        exc = JobAssistError("Test error")
        assert exc.message == "Test error"
        assert exc.status_code == 500
        assert exc.error_code == "INTERNAL_ERROR"

    def test_exception_to_dict(self):
        """Test exception serialization"""
        exc = JobAssistError("Test error", details={"key": "value"})
        result = exc.to_dict()
        assert result["error"] == "Test error"
        assert result["error_code"] == "INTERNAL_ERROR"
        assert result["details"] == {"key": "value"}

    def test_exception_to_response(self):
        """Test exception to Flask response"""
        with Flask(__name__).app_context():
            response, status = JobAssistError("Test error").to_response()
        assert status == 500
        assert response.get_json()["error"] == "Test error"


class TestValidationError:
    """Test validation error"""

    def test_validation_error(self):
        """Test validation error creation"""
        exc = ValidationError("Invalid input", field="email")
        assert exc.message == "Validation error for field 'email': Invalid input"
        assert exc.status_code == 400
        assert exc.error_code == "VALIDATION_ERROR"


class TestNotFoundError:
    """Test not found error"""

    def test_not_found(self):
        """Test resource name in message"""
        exc = NotFoundError("Resume")
        assert exc.message == "Resume not found"
        assert exc.status_code == 404


class TestPipelineErrors:
    """Test generation and rendering errors"""

    def test_backend_unavailable(self):
        """Test the reason is kept in details"""
        exc = BackendUnavailable("Cannot connect: refused", details={"provider": "ollama"})
        assert exc.status_code == 503
        assert "not available" in exc.message
        assert exc.details == {"reason": "Cannot connect: refused", "provider": "ollama"}

    def test_generation_failed_excerpt(self):
        """Test raw output is shortened into an excerpt"""
        exc = GenerationFailed("model output is not a JSON object", raw_output="y" * 500)
        assert exc.status_code == 502
        assert exc.details["excerpt"] == "y" * 200 + "..."

    def test_generation_failed_without_output(self):
        """Test no excerpt key when there is no raw output"""
        assert "excerpt" not in GenerationFailed("HTTP 500").details

    def test_render_failed_stage(self):
        """Test the stage is exposed"""
        exc = RenderFailed("load")
        assert exc.stage == "load"
        assert exc.message == "PDF rendering failed during load"
        assert exc.details["stage"] == "load"

    def test_deadline_exceeded(self):
        """Test the step is named"""
        exc = DeadlineExceeded("generation")
        assert exc.status_code == 504
        assert "generation" in exc.message


class TestHelpers:
    """Test module helpers"""

    def test_excerpt(self):
        """Test excerpt trimming"""
        assert excerpt(None) == ""
        assert excerpt("  short  ") == "short"
        assert excerpt("abcdef", limit=3) == "abc..."

    def test_status_for(self):
        """Test error codes map to statuses"""
        assert status_for("BACKEND_UNAVAILABLE") == 503
        assert status_for("RENDER_FAILED") == 502
        assert status_for("VALIDATION_ERROR") == 400
        assert status_for("SOMETHING_ELSE") == 500
