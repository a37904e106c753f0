"""
Application configuration - environment variables and pipeline defaults
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


# ========================================
# Generation backend defaults
# ========================================
SUPPORTED_PROVIDERS = ("ollama", "gemini", "openai")

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.1"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_TOKENS = 4000

# ========================================
# Timeouts (seconds)
# ========================================
AVAILABILITY_TIMEOUT = 5.0
GENERATION_TIMEOUT = 60.0
RENDER_TIMEOUT = 30.0
PIPELINE_TIMEOUT = 120.0

# ========================================
# Document rendering
# ========================================
BROWSER_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]
A4_VIEWPORT = {"width": 794, "height": 1123}
PDF_MARGIN = "0.5in"


@dataclass
class Settings:
    """Runtime settings, read once at process start and handed to the ServiceContext."""
    generation_provider: str = "ollama"
    ollama_base_url: str = DEFAULT_OLLAMA_BASE_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL

    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    availability_timeout: float = AVAILABILITY_TIMEOUT
    generation_timeout: float = GENERATION_TIMEOUT
    render_timeout: float = RENDER_TIMEOUT
    pipeline_timeout: float = PIPELINE_TIMEOUT
    fallback_enabled: bool = False

    generate_rate_limit: str = "10 per minute"
    cors_origins: List[str] = field(default_factory=list)
    firebase_enabled: bool = True
    firebase_project_id: Optional[str] = None
    firebase_credentials: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        provider = os.getenv("GENERATION_PROVIDER", "ollama").strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            provider = "ollama"
        return cls(
            generation_provider=provider,
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", DEFAULT_OLLAMA_BASE_URL).rstrip("/"),
            ollama_model=os.getenv("OLLAMA_MODEL", DEFAULT_OLLAMA_MODEL),
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            gemini_base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            temperature=_env_float("GENERATION_TEMPERATURE", DEFAULT_TEMPERATURE),
            max_tokens=_env_int("GENERATION_MAX_TOKENS", DEFAULT_MAX_TOKENS),
            availability_timeout=_env_float("AVAILABILITY_TIMEOUT", AVAILABILITY_TIMEOUT),
            generation_timeout=_env_float("GENERATION_TIMEOUT", GENERATION_TIMEOUT),
            render_timeout=_env_float("RENDER_TIMEOUT", RENDER_TIMEOUT),
            pipeline_timeout=_env_float("PIPELINE_TIMEOUT", PIPELINE_TIMEOUT),
            fallback_enabled=_env_bool("GENERATION_FALLBACK_ENABLED"),
            generate_rate_limit=os.getenv("GENERATE_RATE_LIMIT", "10 per minute"),
            cors_origins=_env_list("CORS_ORIGINS"),
            firebase_enabled=_env_bool("FIREBASE_ENABLED", True),
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID"),
            firebase_credentials=os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def model_name(self) -> str:
        if self.generation_provider == "gemini":
            return self.gemini_model
        if self.generation_provider == "openai":
            return self.openai_model
        return self.ollama_model
