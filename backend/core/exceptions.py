import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .upstream import UpstreamError

logger = logging.getLogger(__name__)


class CSVParseError(ValueError):
    """Uploaded CSV could not be turned into rows."""


def backoffice_exception_handler(exc, context):
    """
    Render backend and CSV failures as {"error": message}.

    Everything else goes through DRF's default handler.
    """
    request = context.get('request')
    where = f"{request.method} {request.path}" if request is not None else 'unknown request'

    if isinstance(exc, UpstreamError):
        logger.error(f"Backend error in {where}: {exc.message} (status {exc.status_code})")
        status_code = exc.status_code if 400 <= exc.status_code < 600 else status.HTTP_502_BAD_GATEWAY
        return Response({'error': exc.message}, status=status_code)

    if isinstance(exc, CSVParseError):
        logger.warning(f"CSV rejected in {where}: {str(exc)}")
        return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    return exception_handler(exc, context)
