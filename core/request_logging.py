"""
Request logging middleware for Flask applications.
Logs HTTP requests with timing and context, and renders API errors as JSON.
"""

import time
import uuid

from flask import request, g, jsonify
from flask_login import current_user
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from core.errors import MediaDeckError
from core.logging_config import log_request, get_logger, log_with_context

logger = get_logger(__name__)

SLOW_REQUEST_MS = 5000


def _current_user_id():
    try:
        if current_user.is_authenticated:
            return current_user.id
    except AttributeError:
        pass
    return None


def _client_ip():
    forwarded = request.headers.get('X-Forwarded-For')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr


def setup_request_logging(app):
    """Setup request logging middleware and JSON error handlers for a Flask app."""

    @app.before_request
    def log_request_start():
        """Set up request context and log the start of each API request."""
        g.request_start_time = time.time()
        g.request_id = str(uuid.uuid4())
        g.client_ip = _client_ip()

        if request.path.startswith('/api/'):
            with log_with_context(logger, request_id=g.request_id, ip_address=g.client_ip):
                logger.debug(f"Request started: {request.method} {request.path}")

    @app.after_request
    def log_request_end(response):
        """Log errors and slow requests; successful requests are not logged."""
        if not hasattr(g, 'request_start_time') or request.path.startswith('/media/'):
            return response

        duration_ms = round((time.time() - g.request_start_time) * 1000, 2)
        is_error = response.status_code >= 400
        is_slow = duration_ms > SLOW_REQUEST_MS

        if is_error or is_slow:
            user_id = _current_user_id()
            log_request(
                method=request.method,
                path=request.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
                user_id=user_id,
                ip_address=getattr(g, 'client_ip', None)
            )
            if is_slow:
                with log_with_context(logger, request_id=g.request_id, user_id=user_id, duration=duration_ms):
                    logger.warning(f"Slow request: {request.method} {request.path} took {duration_ms}ms")

        return response

    @app.errorhandler(MediaDeckError)
    def handle_mediadeck_error(error):
        with log_with_context(logger, request_id=getattr(g, 'request_id', None), user_id=_current_user_id()):
            logger.info(f"{request.method} {request.path} -> {error.status_code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        with log_with_context(logger, user_id=_current_user_id(), ip_address=getattr(g, 'client_ip', None)):
            logger.warning(f"Upload rejected, body too large: {request.method} {request.path}")
        return jsonify({'error': 'File too large'}), 413

    @app.errorhandler(404)
    def log_404_error(error):
        with log_with_context(logger, user_id=_current_user_id(), ip_address=getattr(g, 'client_ip', None)):
            logger.warning(f"404 Not Found: {request.method} {request.path}")
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(Exception)
    def log_unhandled_error(error):
        if isinstance(error, HTTPException):
            return jsonify({'error': error.description}), error.code

        with log_with_context(logger, user_id=_current_user_id(), ip_address=getattr(g, 'client_ip', None)):
            logger.error(f"500 Internal Server Error: {request.method} {request.path}", exc_info=error)
        return jsonify({'error': 'Internal server error'}), 500

    logger.info("Request logging middleware setup complete")
