"""
Flask extensions and the per-application ServiceContext
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore
from flask import Flask, current_app
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from jobassist.config import Settings
from jobassist.services.document_renderer import PdfRenderer
from jobassist.services.generation_client import GenerationClient, create_generation_client
from jobassist.services.resume_store import ResumeStore
from jobassist.utils.exceptions import JobAssistError

logger = logging.getLogger(__name__)

EXTENSION_KEY = "jobassist"

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"],
    storage_uri="memory://",
    strategy="fixed-window",
    headers_enabled=True,
)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


@dataclass
class ServiceContext:
    """Everything a request needs, built once in create_app and never mutated."""
    settings: Settings
    generation_client: GenerationClient
    renderer: PdfRenderer
    store: Optional[ResumeStore] = None


def init_firebase(settings: Settings):
    """Initialize Firebase Admin and return a Firestore client, or None if that fails."""
    if firebase_admin._apps:
        return firestore.client()

    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    cred_path = settings.firebase_credentials
    try:
        if cred_path and os.path.exists(cred_path):
            firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
            logger.info(f"[Firebase] Initialized with credentials from {cred_path}")
        else:
            logger.warning("[Firebase] No credentials file found, using application default credentials")
            firebase_admin.initialize_app(options=options)
        return firestore.client()
    except Exception as e:
        # App still starts; store-backed endpoints report the database as unavailable
        logger.error(f"[Firebase] Initialization failed: {e}")
        return None


def build_services(settings: Settings, db=None) -> ServiceContext:
    return ServiceContext(
        settings=settings,
        generation_client=create_generation_client(settings),
        renderer=PdfRenderer(timeout=settings.render_timeout),
        store=ResumeStore(db) if db is not None else None,
    )


def get_services() -> ServiceContext:
    return current_app.extensions[EXTENSION_KEY]


def get_store() -> ResumeStore:
    store = get_services().store
    if store is None:
        raise JobAssistError("Database not available", "DATABASE_UNAVAILABLE")
    return store


def init_app_extensions(app: Flask, settings: Settings, services: Optional[ServiceContext] = None):
    """Attach CORS, rate limiting and the ServiceContext (building it from settings if not given)."""
    limiter.init_app(app)

    origins = sorted(set(DEFAULT_CORS_ORIGINS + settings.cors_origins))
    CORS(app, resources={r"/api/*": {
        "origins": origins,
        "methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization", "X-Requested-With"],
        "supports_credentials": True,
        "max_age": 3600,
    }})

    if services is None:
        db = init_firebase(settings) if settings.firebase_enabled else None
        services = build_services(settings, db)
    app.extensions[EXTENSION_KEY] = services
    logger.info("[App] Services ready", extra={
        "provider": services.generation_client.provider,
        "model": services.generation_client.model,
        "store": services.store is not None,
    })
    return services
