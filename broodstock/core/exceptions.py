"""
DRF exception handler that keeps framework errors (405, parse errors,
throttling...) inside the ``{success, error}`` envelope.
"""
import logging

from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _flatten_detail(detail):
    if isinstance(detail, dict):
        if 'detail' in detail:
            return str(detail['detail'])
        return '; '.join(f"{key}: {_flatten_detail(value)}" for key, value in detail.items())
    if isinstance(detail, list):
        return ', '.join(_flatten_detail(item) for item in detail)
    return str(detail)


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        # Unhandled; Django's 500 path takes over
        view = context.get('view')
        logger.error(f"Unhandled exception in {view.__class__.__name__ if view else 'view'}: {exc}")
        return None

    response.data = {
        'success': False,
        'error': _flatten_detail(response.data),
    }
    return response
