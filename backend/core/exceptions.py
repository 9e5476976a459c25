# core/exceptions.py
"""
Error types and the DRF exception handler.

Permission problems raise django.core.exceptions.PermissionDenied and
missing rows raise Http404; DRF's stock handler already maps both.
This handler adds PolicyViolation (400), IntegrityError (409) and
ObjectDoesNotExist (404), and keeps every error body in the
{"detail": ...} shape the API uses everywhere else.
"""

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class PolicyViolation(Exception):
    """Raised when a business policy is violated."""
    pass


def api_exception_handler(exc, context):
    if isinstance(exc, PolicyViolation):
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, IntegrityError):
        # unique constraint hit past a command's own duplicate check
        logger.warning("Integrity error", extra={"error": str(exc)})
        return Response({"detail": _("Conflicts with an existing record")}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, ObjectDoesNotExist):
        return Response({"detail": _("Record not found")}, status=status.HTTP_404_NOT_FOUND)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled API error in %s",
            view.__class__.__name__ if view else "unknown view",
            exc_info=exc,
        )
    return response
