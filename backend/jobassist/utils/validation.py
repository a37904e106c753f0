"""
Input validation schemas using Pydantic
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from jobassist.utils.exceptions import ValidationError

DOWNLOAD_FORMATS = ("pdf", "docx", "html", "txt", "tex", "standard", "basic-pdf")


class GenerateResumeRequest(BaseModel):
    """Validation schema for resume generation requests"""
    userId: Optional[str] = Field(None, min_length=1, max_length=128, description="Stored profile owner")
    profile: Optional[Dict[str, Any]] = Field(None, description="Inline profile document")
    targetRole: str = Field(..., min_length=1, max_length=200, description="Role to tailor the resume to")
    extraRequirements: Optional[str] = Field(None, max_length=10000, description="Job description or requirements")
    extraInfo: Optional[str] = Field(None, max_length=5000, description="Additional candidate information")
    save: bool = Field(False, description="Persist the result under users/{userId}/resumes")

    @field_validator('targetRole')
    @classmethod
    def validate_target_role(cls, v):
        if not v or not v.strip():
            raise ValueError('Target role is required')
        return v.strip()

    @model_validator(mode='after')
    def validate_profile_source(self):
        if self.profile is None and not self.userId:
            raise ValueError('Either profile or userId is required')
        if self.save and not self.userId:
            raise ValueError('userId is required to save a resume')
        return self


class PreviewRequest(BaseModel):
    """Validation schema for HTML preview requests"""
    resume: Dict[str, Any] = Field(..., description="Generated resume content")
    resumeType: Optional[str] = Field(None, pattern=r'^(fresher|experienced)$')


class RenderPdfRequest(BaseModel):
    """Validation schema for direct HTML-to-PDF requests"""
    html: str = Field(..., min_length=1, max_length=2_000_000, description="Complete HTML document")

    @field_validator('html')
    @classmethod
    def validate_html(cls, v):
        if not v.strip():
            raise ValueError('HTML content cannot be empty')
        return v


class DownloadQuery(BaseModel):
    """Validation schema for stored-resume download query parameters"""
    format: str = Field('pdf', description="Output format")

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        v = (v or 'pdf').strip().lower()
        if v not in DOWNLOAD_FORMATS:
            raise ValueError(f"Format must be one of: {', '.join(DOWNLOAD_FORMATS)}")
        return v


def validate_request(schema_class: type[BaseModel], data: dict, raise_on_error: bool = True):
    """
    Validate request data against a Pydantic schema.

    Args:
        schema_class: Pydantic model class
        data: Request data to validate
        raise_on_error: If True, raise ValidationError. If False, return (is_valid, errors)

    Returns:
        If raise_on_error=True: Validated data dict
        If raise_on_error=False: (is_valid: bool, validated_data: dict, errors: list)
    """
    if not isinstance(data, dict):
        if raise_on_error:
            raise ValidationError("Request body must be a JSON object")
        return False, {}, ["Request body must be a JSON object"]
    try:
        validated = schema_class(**data)
        if raise_on_error:
            return validated.model_dump(exclude_none=True)
        return True, validated.model_dump(exclude_none=True), []
    except Exception as e:
        if isinstance(e, ValidationError):
            raise
        # Convert Pydantic validation errors to our ValidationError
        errors = []
        if hasattr(e, 'errors'):
            for error in e.errors():
                field = '.'.join(str(x) for x in error.get('loc', []))
                message = error.get('msg', 'Validation error')
                errors.append(f"{field}: {message}" if field else message)

        error_message = '; '.join(errors) if errors else str(e)

        if raise_on_error:
            raise ValidationError(error_message, details={'validation_errors': errors})
        return False, {}, errors
