# api/exceptions.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Pull a readable message out of DRF's nested error detail"""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _first_message(detail['detail'])
        for key, value in detail.items():
            message = _first_message(value)
            if key == 'non_field_errors':
                return message
            return f"{key}: {message}"
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every API error as {"error": "..."}; validation errors keep the
    per-field detail under "fields". Unexpected exceptions become a logged 500.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(f"Unhandled error in {view.__class__.__name__ if view else 'API'}: {exc}", exc_info=exc)
        return Response({'error': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    payload = {'error': _first_message(response.data)}
    if response.status_code == status.HTTP_400_BAD_REQUEST and isinstance(response.data, dict):
        payload['fields'] = response.data
    response.data = payload
    return response
