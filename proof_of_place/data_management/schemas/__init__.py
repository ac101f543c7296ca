"""Schema package for proof-of-place requests and responses.

Primary exports:
- ValidationRequest: text + optional image + claimed location + timestamp
- LocationInput: Coordinates | PointOfInterest (discriminated on "type")
- ValidationResponse: score, classification, signal breakdown, explanation

Usage:
    from proof_of_place.data_management.schemas import ValidationRequest, PointOfInterest
    request = ValidationRequest(
        text="Amazing concert at Madison Square Garden!",
        location=PointOfInterest(name="Madison Square Garden", city="New York"),
    )
"""

from proof_of_place.data_management.schemas.request_schema import (
    Coordinates,
    LocationInput,
    PointOfInterest,
    ValidationRequest,
    location_key,
)
from proof_of_place.data_management.schemas.result_schema import (
    Classification,
    SignalBreakdown,
    ValidationResponse,
)

__all__ = [
    "Coordinates",
    "LocationInput",
    "PointOfInterest",
    "ValidationRequest",
    "location_key",
    "Classification",
    "SignalBreakdown",
    "ValidationResponse",
]
