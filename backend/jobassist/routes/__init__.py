"""
Routes package - all API route blueprints
"""
from jobassist.routes.health import health_bp
from jobassist.routes.resumes import resumes_bp

__all__ = [
    'health_bp',
    'resumes_bp',
]
