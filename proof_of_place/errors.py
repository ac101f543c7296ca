"""Error taxonomy for request intake.

The scoring core never raises these: analyzers degrade to neutral or low
scores on missing data. They are raised only while turning raw transport
input into a ValidationRequest.
"""

from enum import Enum
from typing import Any, Dict, Tuple


class ErrorCode(str, Enum):
    """Machine-readable intake failure codes."""

    MISSING_TEXT = "MISSING_TEXT"
    TEXT_TOO_LONG = "TEXT_TOO_LONG"
    INVALID_LOCATION_TYPE = "INVALID_LOCATION_TYPE"
    INVALID_COORDS = "INVALID_COORDS"
    INVALID_LAT = "INVALID_LAT"
    INVALID_LNG = "INVALID_LNG"
    MISSING_POI_NAME = "MISSING_POI_NAME"
    MISSING_CITY = "MISSING_CITY"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"


class RequestValidationError(Exception):
    """Raw input failed an intake precondition.

    Attributes:
        message: Human-readable description
        code: ErrorCode identifying the failed check
        status_code: HTTP-style status for transport layers (400 by default)
    """

    def __init__(self, message: str, code: ErrorCode, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


def handle_error(error: BaseException) -> Tuple[Dict[str, Any], int]:
    """
    Map an exception to an error payload and status code.

    Args:
        error: Exception raised while handling a request

    Returns:
        (payload, status_code): payload has "error" and, for intake
        failures, "code"
    """
    if isinstance(error, RequestValidationError):
        return {"error": error.message, "code": error.code.value}, error.status_code

    message = str(error) or "An unknown error occurred"
    return {"error": message}, 500


__all__ = ["ErrorCode", "RequestValidationError", "handle_error"]
