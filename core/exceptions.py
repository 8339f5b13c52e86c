"""
Core — Exception Handling

Ledger error taxonomy and the DRF exception handler that gives every API
error the same envelope.

Every ledger error is raised before or instead of a commit, so none of
them leaves a partial write behind.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import DatabaseError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class FieldValidationError(APIException):
    """Bad input shape or value. ``field`` names the offending input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid value.'
    default_code = 'VALIDATION_ERROR'

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        self.message = message or str(self.default_detail)
        super().__init__(detail={field: [self.message]})


class InsufficientStockError(APIException):
    """Raised when a sale would take a batch below zero."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Insufficient stock for this operation.'
    default_code = 'INSUFFICIENT_STOCK'

    def __init__(self, *, available: int | None = None, requested: int | None = None):
        self.available = available
        self.requested = requested
        if available is None or requested is None:
            super().__init__()
            return
        super().__init__(detail={
            'quantity': [f'Insufficient stock: available={available}, requested={requested}.'],
        })


class ConflictError(APIException):
    """A concurrent writer changed the batch between read and update."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The batch was modified concurrently. Retry the operation.'
    default_code = 'CONCURRENT_UPDATE'


class StorageError(APIException):
    """Infrastructure failure. Nothing was persisted; safe to retry."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Storage is temporarily unavailable.'
    default_code = 'STORAGE_ERROR'


class ResourceNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'RESOURCE_NOT_FOUND'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def _envelope(errors, code: str, status_code: int) -> Response:
    return Response({'success': False, 'errors': errors, 'code': code}, status=status_code)


def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "errors": {...}, "code": "ERROR_CODE" }

    Serializer and model validation failures share the VALIDATION_ERROR
    code with FieldValidationError. A DatabaseError that escapes a view is
    reported as STORAGE_ERROR.
    """
    if isinstance(exc, Http404):
        exc = ResourceNotFoundError()
    elif isinstance(exc, PermissionDenied):
        exc = DRFPermissionDenied()
    elif isinstance(exc, ValidationError):
        errors = exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages}
        return _envelope(errors, FieldValidationError.default_code, status.HTTP_400_BAD_REQUEST)
    elif isinstance(exc, DatabaseError):
        logger.exception('Storage failure in view')
        exc = StorageError()

    response = exception_handler(exc, context)
    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return _envelope(
            {'detail': ['Internal server error.']}, 'INTERNAL_ERROR',
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, DRFValidationError):
        code = FieldValidationError.default_code
    else:
        code = str(getattr(exc, 'default_code', 'ERROR')).upper()

    data = response.data
    if isinstance(data, dict):
        errors = data
    elif isinstance(data, list):
        errors = {'detail': data}
    else:
        errors = {'detail': [str(data)]}

    response.data = {'success': False, 'errors': errors, 'code': code}
    return response
