"""
Response envelope and pagination helpers shared by every mock endpoint.

Success bodies look like ``{"success": true, "data": ...}``; failures look
like ``{"success": false, "error": "..."}``.
"""
import logging
import math
from functools import wraps

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = 'Internal server error'


def success_response(data, status_code=status.HTTP_200_OK):
    return Response({'success': True, 'data': data}, status=status_code)


def error_response(error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, **extra):
    """Build a failure envelope; extra keys (e.g. ``message``) are merged in."""
    body = {'success': False, 'error': error}
    body.update(extra)
    return Response(body, status=status_code)


def _parse_non_negative(raw, default):
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return max(value, 0)


def parse_pagination(request):
    """
    Read ``limit``/``offset`` from the query string.

    Unparseable values fall back to the defaults, negatives clamp to 0 and
    ``limit`` is capped at MAX_PAGE_SIZE.
    """
    limit = _parse_non_negative(request.query_params.get('limit'), settings.DEFAULT_PAGE_SIZE)
    offset = _parse_non_negative(request.query_params.get('offset'), 0)
    return min(limit, settings.MAX_PAGE_SIZE), offset


def paginate(items, limit, offset):
    """
    Slice ``items`` and build the pagination block.

    Returns ``(page, pagination)`` where ``pages = ceil(total / limit)``
    (0 when ``limit`` is 0).
    """
    total = len(items)
    page = list(items[offset:offset + limit])
    pagination = {
        'total': total,
        'limit': limit,
        'offset': offset,
        'pages': math.ceil(total / limit) if limit else 0,
    }
    return page, pagination


def envelope_errors(label):
    """
    Decorator for mock views: any uncaught exception is logged and turned
    into the generic 500 envelope.

    Usage:
        @api_view(['GET'])
        @envelope_errors('Orders API')
        def order_list(request):
            ...
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            try:
                return view_func(request, *args, **kwargs)
            except Exception as e:
                logger.error(f"{label} error: {str(e)}", exc_info=True)
                return error_response(INTERNAL_ERROR_MESSAGE)
        return wrapper
    return decorator
