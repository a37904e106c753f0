"""
Models package - profile, generated resume and standard-format records
"""
from jobassist.models.profile import NormalizedProfile
from jobassist.models.resume import (
    EXPERIENCED,
    FRESHER,
    GeneratedResume,
    ResumeHeader,
    ResumeStrategy,
    build_generation_metadata,
    build_resume_record,
)
from jobassist.models.standard_resume import StandardResume

__all__ = [
    'NormalizedProfile',
    'GeneratedResume',
    'ResumeHeader',
    'ResumeStrategy',
    'StandardResume',
    'FRESHER',
    'EXPERIENCED',
    'build_generation_metadata',
    'build_resume_record',
]
