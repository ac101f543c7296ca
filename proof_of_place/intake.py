"""Turn raw transport fields into a ValidationRequest.

Transport layers (HTTP form handlers, the CLI) pass field values through
build_request, which enforces the preconditions the scoring engine relies
on and raises RequestValidationError with a specific code on failure:

- text present (after trimming) and at most max_text_length characters
- location type "coordinates" with numeric lat in [-90, 90] and lng in
  [-180, 180], or "poi" with non-empty name and city
- timestamp parseable as ISO-8601 (defaults to now when omitted)
- image no larger than max_image_bytes
"""

import math
from datetime import datetime
from typing import Any, Callable, Optional, Union

from pydantic import TypeAdapter, ValidationError

from proof_of_place.config.settings import settings
from proof_of_place.data_management.schemas import (
    Coordinates,
    PointOfInterest,
    ValidationRequest,
)
from proof_of_place.errors import ErrorCode, RequestValidationError
from proof_of_place.utils.logging import get_structured_logger
from proof_of_place.utils.timestamps import utc_now

_logger = get_structured_logger(__name__, component="Intake")
_datetime_adapter = TypeAdapter(datetime)


def validate_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """Return trimmed text, or raise MISSING_TEXT / TEXT_TOO_LONG."""
    limit = max_length if max_length is not None else settings.max_text_length
    if not isinstance(text, str) or not text.strip():
        raise RequestValidationError("Text content is required", ErrorCode.MISSING_TEXT)
    if len(text) > limit:
        raise RequestValidationError(
            f"Text content is too long (max {limit:,} characters)",
            ErrorCode.TEXT_TOO_LONG,
        )
    return text.strip()


def _parse_degrees(value: Union[str, float, int, None]) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RequestValidationError(
            "Latitude and longitude are required for coordinate locations",
            ErrorCode.INVALID_COORDS,
        )
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise RequestValidationError(
            "Invalid coordinates: must be numbers", ErrorCode.INVALID_COORDS
        ) from None
    if math.isnan(parsed) or math.isinf(parsed):
        raise RequestValidationError(
            "Invalid coordinates: must be numbers", ErrorCode.INVALID_COORDS
        )
    return parsed


def validate_coordinates(
    lat: Union[str, float, int, None],
    lng: Union[str, float, int, None],
) -> Coordinates:
    """Parse and range-check a coordinate pair."""
    lat_value = _parse_degrees(lat)
    lng_value = _parse_degrees(lng)

    if not -90 <= lat_value <= 90:
        raise RequestValidationError(
            "Latitude must be between -90 and 90", ErrorCode.INVALID_LAT
        )
    if not -180 <= lng_value <= 180:
        raise RequestValidationError(
            "Longitude must be between -180 and 180", ErrorCode.INVALID_LNG
        )
    return Coordinates(lat=lat_value, lng=lng_value)


def validate_poi(name: Optional[str], city: Optional[str]) -> PointOfInterest:
    """Trim and require both POI fields."""
    if not isinstance(name, str) or not name.strip():
        raise RequestValidationError("POI name is required", ErrorCode.MISSING_POI_NAME)
    if not isinstance(city, str) or not city.strip():
        raise RequestValidationError(
            "City is required for POI locations", ErrorCode.MISSING_CITY
        )
    return PointOfInterest(name=name.strip(), city=city.strip())


def validate_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; None or blank passes through as None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not value.strip():
        return None
    try:
        return _datetime_adapter.validate_python(value.strip())
    except ValidationError:
        raise RequestValidationError(
            "Invalid timestamp format", ErrorCode.INVALID_TIMESTAMP
        ) from None


def image_size(image: Any) -> Optional[int]:
    """Size in bytes of an image handle, when it can be told without reading it."""
    if isinstance(image, (bytes, bytearray, memoryview)):
        return len(image)
    if isinstance(image, str):
        return len(image.encode("utf-8"))
    size = getattr(image, "size", None)
    return size if isinstance(size, int) else None


def validate_image_size(image: Any, max_bytes: Optional[int] = None) -> None:
    limit = max_bytes if max_bytes is not None else settings.max_image_bytes
    size = image_size(image)
    if size is not None and size > limit:
        raise RequestValidationError(
            f"Image is too large ({size:,} bytes, max {limit:,})",
            ErrorCode.IMAGE_TOO_LARGE,
            status_code=413,
        )


def build_request(
    text: Optional[str],
    location_type: Optional[str],
    lat: Union[str, float, None] = None,
    lng: Union[str, float, None] = None,
    poi_name: Optional[str] = None,
    city: Optional[str] = None,
    timestamp: Union[str, datetime, None] = None,
    image: Any = None,
    submitter_id: Optional[str] = None,
    clock: Callable[[], datetime] = utc_now,
) -> ValidationRequest:
    """
    Validate raw fields and assemble a ValidationRequest.

    Args:
        text: Post content
        location_type: "coordinates" or "poi"
        lat, lng: Coordinates (strings from forms are accepted)
        poi_name, city: POI fields
        timestamp: ISO-8601 string or datetime; current time when omitted
        image: Optional image handle
        submitter_id: Optional submitter handle
        clock: Source of the default timestamp

    Returns:
        ValidationRequest ready for ScoringEngine.validate

    Raises:
        RequestValidationError: On the first failed precondition
    """
    clean_text = validate_text(text)

    location: Union[Coordinates, PointOfInterest]
    if location_type == "coordinates":
        location = validate_coordinates(lat, lng)
    elif location_type == "poi":
        location = validate_poi(poi_name, city)
    elif not location_type:
        raise RequestValidationError(
            "Location type is required", ErrorCode.INVALID_LOCATION_TYPE
        )
    else:
        raise RequestValidationError(
            f'Invalid location type. Must be "coordinates" or "poi", got: {location_type}',
            ErrorCode.INVALID_LOCATION_TYPE,
        )

    parsed_time = validate_timestamp(timestamp) or clock()

    if image is not None:
        validate_image_size(image)

    _logger.debug(
        "request_built",
        location_type=location_type,
        has_image=image is not None,
        has_submitter=submitter_id is not None,
    )

    return ValidationRequest(
        text=clean_text,
        image=image,
        location=location,
        timestamp=parsed_time,
        submitter_id=submitter_id or None,
    )


__all__ = [
    "build_request",
    "validate_text",
    "validate_coordinates",
    "validate_poi",
    "validate_timestamp",
    "validate_image_size",
]
