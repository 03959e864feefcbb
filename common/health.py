"""
Health Check Endpoints

Provides endpoints for:
- Liveness checks (is the app running?)
- Readiness checks (can the app serve requests?)
"""

import time
import logging
from django.http import JsonResponse
from django.core.cache import cache
from django.views.decorators.http import require_GET
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)


@csrf_exempt
@require_GET
def health_check(request):
    """
    Basic health check - returns 200 if app is running.
    Used by load balancers and container orchestration.
    """
    return JsonResponse({
        'status': 'healthy',
        'timestamp': time.time(),
    })


@csrf_exempt
@require_GET
def readiness_check(request):
    """
    Readiness check - verifies app can serve requests.
    The order registry lives in the cache, so a cache round-trip is required.
    """
    checks = {
        'cache': False,
    }
    errors = []

    try:
        cache_key = 'health_check_test'
        cache.set(cache_key, 'ok', 10)
        if cache.get(cache_key) == 'ok':
            checks['cache'] = True
            cache.delete(cache_key)
        else:
            errors.append('Cache: Failed to read/write')
    except Exception as e:
        errors.append(f'Cache: {str(e)}')
        logger.error(f'Health check - Cache error: {e}')

    all_healthy = all(checks.values())
    status_code = 200 if all_healthy else 503

    return JsonResponse({
        'status': 'ready' if all_healthy else 'not_ready',
        'timestamp': time.time(),
        'checks': checks,
        'errors': errors if errors else None,
    }, status=status_code)


def get_health_urls():
    """
    Returns URL patterns for health endpoints.
    Add to your urls.py:
        from common.health import get_health_urls
        urlpatterns += get_health_urls()
    """
    from django.urls import path

    return [
        path('health/', health_check, name='health_check'),
        path('health/ready/', readiness_check, name='readiness_check'),
    ]
