"""
Pytest configuration and fixtures
"""
import json
import os
from unittest.mock import Mock

import pytest

# Set test environment before the app module is imported
os.environ['FLASK_ENV'] = 'testing'
os.environ['FIREBASE_ENABLED'] = 'false'
os.environ['GENERATION_PROVIDER'] = 'ollama'

from jobassist.config import Settings  # noqa: E402
from jobassist.extensions import ServiceContext  # noqa: E402
from jobassist.services.generation_client import AvailabilityResult, GenerationClient  # noqa: E402
from jobassist.services.resume_store import ResumeStore  # noqa: E402


class FakeGenerationClient(GenerationClient):
    """Generation backend double that records every call."""

    provider = "fake"

    def __init__(self, response="", available=True, error=None, generate_error=None):
        super().__init__(model="fake-model")
        self.response = response
        self.available = available
        self.error = error
        self.generate_error = generate_error
        self.availability_calls = 0
        self.generate_calls = 0
        self.prompts = []

    async def check_availability(self, deadline=None):
        self.availability_calls += 1
        return AvailabilityResult(self.available, None if self.available else self.error, 1.0)

    async def generate(self, prompt, options=None, deadline=None):
        self.generate_calls += 1
        self.prompts.append(prompt)
        if self.generate_error is not None:
            raise self.generate_error
        return self.response


class FakeRenderer:
    """PdfRenderer double."""

    def __init__(self, pdf=b"%PDF-1.4 fake", error=None):
        self.pdf = pdf
        self.error = error
        self.calls = []

    async def render(self, html, deadline=None):
        self.calls.append(html)
        if self.error is not None:
            raise self.error
        return self.pdf


@pytest.fixture
def settings():
    """Settings with short timeouts and fallback off"""
    return Settings(pipeline_timeout=10.0, generation_timeout=5.0, render_timeout=5.0)


@pytest.fixture
def model_output():
    """A well-formed model response following the record convention"""
    return json.dumps({
        "header": {"name": "Priya Sharma", "email": "priya@example.com"},
        "summary": "Backend engineer building reliable **Python** services.",
        "skills": "Languages: Python, Go\nDatabases: PostgreSQL",
        "technicalTools": "Docker, Git",
        "experience": "**Software Engineer** | Acme Corp | Jan 2020 - Present\n"
                      "• Built payment APIs in Flask\n• Cut latency by half",
        "education": "**B.Tech in Computer Science** | IIT Delhi | 2019",
        "projects": "**Resume Parser** | Technologies: Python, spaCy\n• Parsed resumes",
        "certifications": "**AWS Solutions Architect** | Amazon",
        "languages": "English (Fluent), Hindi (Native)",
        "volunteerWork": "",
        "publications": "",
        "awards": "",
        "interests": "Chess",
        "latexCode": "",
    })


@pytest.fixture
def experienced_profile():
    """Stored profile with three jobs"""
    return {
        "name": "Priya Sharma",
        "email": "priya@example.com",
        "phone": "+91 98765 43210",
        "location": "Bengaluru",
        "experience": [
            {"company": "Acme Corp", "role": "Software Engineer", "duration": "Jan 2020 - Present",
             "description": "Built payment APIs in Flask"},
            {"company": "Globex", "role": "Developer", "duration": "2018 - 2020"},
            {"company": "Initech", "role": "Intern", "duration": "2017 - 2018"},
        ],
        "education": [{"degree": "B.Tech in Computer Science", "university": "IIT Delhi", "year": "2019"}],
        "skills": ["Python", "Go", "PostgreSQL"],
    }


@pytest.fixture
def fresher_profile():
    """Minimal fresher profile"""
    return {
        "name": "Asha",
        "email": "a@x.com",
        "education": [{"degree": "B.Tech", "university": "XYZ"}],
        "skills": ["Python"],
    }


@pytest.fixture
def fake_client(model_output):
    return FakeGenerationClient(response=model_output)


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def mock_db():
    """Mock Firestore database"""
    return Mock()


@pytest.fixture
def services(settings, fake_client, fake_renderer, mock_db):
    return ServiceContext(
        settings=settings,
        generation_client=fake_client,
        renderer=fake_renderer,
        store=ResumeStore(mock_db),
    )


@pytest.fixture
def app(settings, services):
    """Create Flask app for testing"""
    from wsgi import create_app
    app = create_app(settings=settings, services=services,
                     config={'TESTING': True, 'RATELIMIT_ENABLED': False})
    return app


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()
