"""Request schema for proof-of-place validation.

A request carries the post text, an optional image handle, the claimed
location and an optional timestamp. Requests reaching the scoring engine
are assumed to have passed intake validation (see proof_of_place.intake);
the field constraints here are a backstop, not the error-reporting path.
Text length is bounded only at intake, by the configurable max_text_length.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """Claimed location as a latitude/longitude pair in degrees."""

    type: Literal["coordinates"] = "coordinates"
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    model_config = {"frozen": True}


class PointOfInterest(BaseModel):
    """Claimed location as a named venue in a city."""

    type: Literal["poi"] = "poi"
    name: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)

    model_config = {"frozen": True}


LocationInput = Annotated[
    Union[Coordinates, PointOfInterest],
    Field(discriminator="type"),
]


def location_key(location: Union[Coordinates, PointOfInterest]) -> str:
    """
    Stable key identifying a claimed location in the duplicate-image index.

    Coordinates are rounded to 4 decimal places (about 11 m) so repeated
    claims of the same spot share a key.
    """
    if isinstance(location, PointOfInterest):
        return f"{location.name}_{location.city}"
    return f"{location.lat:.4f}_{location.lng:.4f}"


class ValidationRequest(BaseModel):
    """A location-tagged post submitted for scoring.

    Attributes:
        text: Post content
        image: Opaque image handle (bytes, base64 string, or upload object)
        location: Claimed coordinates or POI
        timestamp: Post time, parsed from ISO-8601
        submitter_id: Optional submitter handle used for burst detection
    """

    text: str = Field(..., min_length=1)
    image: Optional[Any] = None
    location: LocationInput
    timestamp: Optional[datetime] = None
    submitter_id: Optional[str] = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}
