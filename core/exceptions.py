# core/exceptions.py
import logging
import uuid

from rest_framework.views import exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    error_id = uuid.uuid4()

    response = exception_handler(exc, context)

    if response is None:
        logger.error(
            f"Error ID: {error_id}\n"
            f"Error: {str(exc)}\n"
            f"Context: {context}",
            exc_info=True
        )
        return Response(
            {
                'error': 'Ralat pelayan. Sila cuba lagi.',
                'error_id': str(error_id),
            },
            status=500
        )

    logger.warning(f"Error ID: {error_id} ({response.status_code}): {exc}")

    # Add error ID to all error responses
    if isinstance(response.data, dict):
        response.data['error_id'] = str(error_id)

    return response
