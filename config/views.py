import logging

from django.db import connections, OperationalError
from django.http import JsonResponse
from django.conf import settings

logger = logging.getLogger('apps.health')


def health_check(request):
    """Liveness plus a round trip to the exchange database."""
    try:
        with connections[settings.REWEAR_DATABASE_ALIAS].cursor() as cursor:
            cursor.execute('SELECT 1')
    except OperationalError as e:
        logger.warning("Health check failed: %s", e)
        return JsonResponse({
            'status': 'unavailable',
            'database': 'unreachable',
        }, status=503)

    return JsonResponse({
        'status': 'ok',
        'database': 'ok',
    })


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)
