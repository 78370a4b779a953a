"""
Error Logger Utility
Logs unexpected application errors together with sanitized request context.
"""

import json
import logging
from flask import request, has_request_context

logger = logging.getLogger(__name__)


# Keys to redact from request data
SENSITIVE_KEYS = {
    'password', 'password_hash', 'token', 'csrf_token', 'secret',
    'api_key', 'authorization', 'cookie', 'session'
}


def _sanitize_data(data):
    """Redact sensitive keys from a dict."""
    if not isinstance(data, dict):
        return data
    sanitized = {}
    for key, value in data.items():
        if any(s in key.lower() for s in SENSITIVE_KEYS):
            sanitized[key] = '[REDACTED]'
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_data(value)
        else:
            sanitized[key] = str(value)[:500]  # Truncate long values
    return sanitized


def request_context():
    """
    Collect request details for an error report

    Returns:
        dict: url, method, endpoint and sanitized args/json, empty outside a request
    """
    if not has_request_context():
        return {}

    context = {
        'url': request.url[:512] if request.url else None,
        'method': request.method,
        'endpoint': request.endpoint,
        'remote_addr': request.remote_addr,
    }

    raw_data = {}
    if request.args:
        raw_data['args'] = dict(request.args)
    payload = request.get_json(silent=True) if request.is_json else None
    if isinstance(payload, dict):
        raw_data['json'] = payload
    if raw_data:
        context['data'] = json.dumps(_sanitize_data(raw_data))[:4000]
    return context


def log_error(error, status_code=500):
    """
    Log an error with its request context and traceback

    Args:
        error: The exception
        status_code: HTTP status code returned to the caller

    Returns:
        dict: The logged context
    """
    context = request_context()
    context['status_code'] = status_code
    context['error_type'] = type(error).__name__
    logger.error(f"Unhandled {type(error).__name__}: {str(error)[:2000]} | {json.dumps(context)}",
                 exc_info=error)
    return context
