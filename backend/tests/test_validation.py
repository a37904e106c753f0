"""
Tests for input validation
"""
import pytest

from jobassist.utils.exceptions import ValidationError
from jobassist.utils.validation import (
    DownloadQuery,
    GenerateResumeRequest,
    PreviewRequest,
    RenderPdfRequest,
    validate_request,
)


class TestGenerateResumeValidation:
    """Test resume generation request validation"""

    def test_valid_inline_profile(self):
        """Test inline profile request"""
        data = {"profile": {"name": "Asha"}, "targetRole": "  Data Analyst  "}
        result = validate_request(GenerateResumeRequest, data)
        assert result["targetRole"] == "Data Analyst"
        assert result["profile"] == {"name": "Asha"}
        assert result["save"] is False
        assert "userId" not in result

    def test_valid_stored_profile(self):
        """Test userId request with save"""
        result = validate_request(GenerateResumeRequest, {"userId": "u1", "targetRole": "SRE", "save": True})
        assert result["userId"] == "u1"
        assert result["save"] is True

    def test_missing_role(self):
        """Test missing target role"""
        with pytest.raises(ValidationError):
            validate_request(GenerateResumeRequest, {"profile": {}})

    def test_blank_role(self):
        """Test whitespace-only target role"""
        with pytest.raises(ValidationError) as exc_info:
            validate_request(GenerateResumeRequest, {"profile": {}, "targetRole": "   "})
        assert "Target role is required" in exc_info.value.message

    def test_no_profile_source(self):
        """Test that a profile or userId is needed"""
        with pytest.raises(ValidationError) as exc_info:
            validate_request(GenerateResumeRequest, {"targetRole": "SRE"})
        assert "Either profile or userId is required" in exc_info.value.message

    def test_save_requires_user(self):
        """Test save without userId"""
        with pytest.raises(ValidationError):
            validate_request(GenerateResumeRequest, {"profile": {}, "targetRole": "SRE", "save": True})

    def test_non_dict_body(self):
        """Test non-object JSON bodies"""
        with pytest.raises(ValidationError) as exc_info:
            validate_request(GenerateResumeRequest, ["not", "a", "dict"])
        assert exc_info.value.message == "Request body must be a JSON object"


class TestPreviewValidation:
    """Test preview request validation"""

    def test_valid(self):
        """Test resume with a resume type"""
        result = validate_request(PreviewRequest, {"resume": {"summary": "x"}, "resumeType": "fresher"})
        assert result["resumeType"] == "fresher"

    def test_bad_resume_type(self):
        """Test unknown resume type"""
        with pytest.raises(ValidationError):
            validate_request(PreviewRequest, {"resume": {}, "resumeType": "intern"})


class TestRenderPdfValidation:
    """Test render-pdf request validation"""

    def test_blank_html(self):
        """Test whitespace-only HTML"""
        with pytest.raises(ValidationError):
            validate_request(RenderPdfRequest, {"html": "   "})


class TestDownloadQuery:
    """Test download format validation"""

    @pytest.mark.parametrize("value, expected", [("PDF", "pdf"), (" docx ", "docx"), ("basic-pdf", "basic-pdf")])
    def test_formats(self, value, expected):
        """Test format normalization"""
        assert validate_request(DownloadQuery, {"format": value})["format"] == expected

    def test_default(self):
        """Test pdf is the default"""
        assert validate_request(DownloadQuery, {})["format"] == "pdf"

    def test_unknown_format(self):
        """Test unsupported formats"""
        is_valid, data, errors = validate_request(DownloadQuery, {"format": "rtf"}, raise_on_error=False)
        assert is_valid is False
        assert data == {}
        assert errors
