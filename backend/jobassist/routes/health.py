"""
Health check routes
"""
from flask import Blueprint, jsonify

from jobassist.extensions import get_services
from jobassist.utils.async_runner import run_async
from jobassist.utils.exceptions import JobAssistError

health_bp = Blueprint('health', __name__)


@health_bp.route('/ping')
def ping():
    return "pong"


@health_bp.route('/health')
def health():
    """Health check endpoint with generation backend and Firestore status"""
    services = get_services()
    client = services.generation_client

    try:
        result = run_async(client.check_availability(), timeout=client.probe_timeout + 1,
                           step="availability check")
        backend = {
            'status': 'available' if result.is_available else 'unavailable',
            'error': result.error,
            'responseTime': result.response_time,
        }
    except JobAssistError as e:
        backend = {'status': 'unavailable', 'error': e.message, 'responseTime': None}

    return jsonify({
        'status': 'healthy',
        'services': {
            'generation': {
                'provider': client.provider,
                'model': client.model,
                **backend,
            },
            'firestore': {
                'status': 'initialized' if services.store is not None else 'not_initialized',
            },
        },
    })


@health_bp.get("/healthz")
def healthz():
    """Kubernetes health check endpoint"""
    return jsonify({"status": "ok"}), 200
