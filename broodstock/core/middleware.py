"""
Request logging middleware: one line when a request arrives, one when the
response leaves, with status and duration.
"""
import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        start_time = time.monotonic()
        logger.info(
            f"--> {request.method} {request.get_full_path()} "
            f"(ip={request.META.get('REMOTE_ADDR')}, ua={request.META.get('HTTP_USER_AGENT', '-')})"
        )

        response = self.get_response(request)

        duration_ms = int((time.monotonic() - start_time) * 1000)
        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"<-- {request.method} {request.get_full_path()} - {response.status_code} ({duration_ms}ms)")
        return response
