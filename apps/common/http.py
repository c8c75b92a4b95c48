"""Translation of service errors into API responses."""

from rest_framework import status
from rest_framework.response import Response

from .exceptions import (
    ServiceError,
    NotFoundError,
    InvalidTransitionError,
    InsufficientFundsError,
    ConflictRetryError,
    UnauthorizedError,
    ServiceUnavailableError,
    ValidationFailedError,
)

# Checked in order, first match wins.
ERROR_STATUS_CODES = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (ConflictRetryError, status.HTTP_409_CONFLICT),
    (InsufficientFundsError, status.HTTP_400_BAD_REQUEST),
    (ValidationFailedError, status.HTTP_400_BAD_REQUEST),
    (ServiceUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]

RETRYABLE_ERRORS = (ConflictRetryError, ServiceUnavailableError)


def service_error_response(error: ServiceError) -> Response:
    """Build the JSON error response for a service error."""
    http_status = status.HTTP_400_BAD_REQUEST
    for error_class, code in ERROR_STATUS_CODES:
        if isinstance(error, error_class):
            http_status = code
            break

    body = {'error': str(error), 'code': error.code}
    if isinstance(error, RETRYABLE_ERRORS):
        body['retry'] = True
    return Response(body, status=http_status)
