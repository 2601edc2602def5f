from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import PetEatsError

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again later."

HTTP_STATUS_BY_CODE = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "authorization_error": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "remote_write_error": status.HTTP_502_BAD_GATEWAY,
    "unexpected_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class OperationResult:
    success: bool
    message: str = ""
    data: Any = None
    error_code: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def ok(cls, data=None, message=""):
        return cls(success=True, message=message, data=data)

    @classmethod
    def failed(cls, error: Exception):
        if isinstance(error, PetEatsError):
            return cls(success=False, message=error.message, error_code=error.code, error=error)
        return cls(success=False, message=GENERIC_FAILURE_MESSAGE, error_code="unexpected_error", error=error)


def operation(success_message: str = "") -> Callable:
    """
    Boundary decorator for service operations.

    The wrapped function raises; callers of the decorated function always get
    an ``OperationResult`` back. Classified errors keep their message,
    anything else is logged with its traceback and reported generically.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                data = func(*args, **kwargs)
            except PetEatsError as exc:
                logger.info(f"{func.__qualname__} failed with {exc.code}: {exc.message}")
                return OperationResult.failed(exc)
            except Exception as exc:
                logger.exception(f"Unexpected error in {func.__qualname__}")
                return OperationResult.failed(exc)
            return OperationResult.ok(data=data, message=success_message)

        return wrapper

    return decorator


def result_response(result: OperationResult, serialize=None, success_status=status.HTTP_200_OK):
    """Render an ``OperationResult`` the same way for every endpoint."""
    if result.success:
        data = result.data
        if serialize is not None and data is not None:
            data = serialize(data)
        return Response(
            {"success": True, "message": result.message, "data": data},
            status=success_status,
        )

    payload = {"success": False, "message": result.message, "error_code": result.error_code}
    details = getattr(result.error, "details", None)
    if details:
        payload["details"] = details
    return Response(payload, status=HTTP_STATUS_BY_CODE.get(result.error_code, status.HTTP_400_BAD_REQUEST))


def api_exception_handler(exc, context):
    """
    DRF exception handler that keeps the ``success``/``message`` envelope for
    serializer and permission errors raised before a service is reached.
    """
    if isinstance(exc, PetEatsError):
        return result_response(OperationResult.failed(exc))

    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data
    if isinstance(detail, dict) and "detail" in detail:
        message = str(detail["detail"])
        errors = None
    else:
        message = "Invalid input."
        errors = detail

    response.data = {"success": False, "message": message}
    if errors is not None:
        response.data["errors"] = errors
    return response
