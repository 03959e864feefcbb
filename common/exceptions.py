"""
DRF exception handler for application exceptions.
"""
import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from common.logging_config import get_request_id
from core.exceptions import BaseApplicationException

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Render BaseApplicationException subclasses as
    {"status": "error", "code", "message", "details"} with their status code.
    Everything else goes through DRF's default handler.
    """
    if not isinstance(exc, BaseApplicationException):
        return exception_handler(exc, context)

    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'N/A'
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"[{get_request_id()}] {view_name}: {exc.code}: {exc.message}")

    return Response(
        {
            'status': 'error',
            'code': exc.code,
            'message': exc.message,
            'details': exc.details,
        },
        status=exc.status_code,
    )
