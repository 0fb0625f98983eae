import logging
import time

import psutil
from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .demo_accounts import (
    DEMO_ACCOUNTS_HINT,
    authenticate_demo,
    issue_demo_tokens,
    user_for_token,
)
from .responses import envelope_errors, error_response, success_response

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


def _memory_snapshot():
    info = psutil.Process().memory_info()
    return {
        'used': round(info.rss / BYTES_PER_MB),
        'total': round(info.vms / BYTES_PER_MB),
    }


def _uptime_seconds():
    return int(time.time() - psutil.Process().create_time())


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Service health probe"""
    try:
        return Response({
            'status': 'healthy',
            'timestamp': timezone.now().isoformat(),
            'version': settings.APP_VERSION,
            'environment': settings.APP_ENV,
            'services': {
                'database': 'connected',
                'api': 'running',
                'auth': 'active',
            },
            'uptime': _uptime_seconds(),
            'memory': _memory_snapshot(),
        })
    except Exception as e:
        logger.error(f"Health check error: {str(e)}", exc_info=True)
        return Response(
            {
                'status': 'unhealthy',
                'error': 'Internal server error',
                'timestamp': timezone.now().isoformat(),
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@api_view(['POST'])
@permission_classes([AllowAny])
@envelope_errors('Login')
def login(request):
    """Demo login: exchanges one of the demo email/password pairs for mock tokens"""
    # JSON arrays/strings carry no credentials
    data = request.data if isinstance(request.data, dict) else {}
    email = data.get('email')
    password = data.get('password')

    user = authenticate_demo(email, password)
    if user is None:
        logger.info(f"Rejected demo login for {email!r}")
        return error_response(
            'Invalid credentials',
            status.HTTP_401_UNAUTHORIZED,
            message=DEMO_ACCOUNTS_HINT,
        )

    logger.info(f"Demo login: {user['email']} ({user['role']})")
    return success_response({
        'user': user,
        'tokens': issue_demo_tokens(user),
    })


@api_view(['POST'])
@permission_classes([AllowAny])
@envelope_errors('Logout')
def logout(request):
    """Nothing to revoke for mock tokens"""
    return Response({
        'success': True,
        'message': 'Logged out successfully',
    })


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Current user')
def current_user(request):
    """Resolve the demo user behind the bearer token"""
    auth_header = request.headers.get('Authorization')
    if not auth_header or not auth_header.startswith('Bearer '):
        return error_response('No authorization token provided', status.HTTP_401_UNAUTHORIZED)

    user = user_for_token(auth_header[len('Bearer '):])
    if user is None:
        return error_response('Invalid token', status.HTTP_401_UNAUTHORIZED)

    return success_response({'user': user})
