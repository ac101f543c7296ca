"""Image evidence analysis with duplicate-image detection.

Contributes 30% of the final score.

- No image (None or empty content): neutral 0.5 (absence is not penalized)
- Image present: base 0.5
- EXIF GPS present and coordinates claimed: banded by Haversine distance
  (<= 100 m 0.9, <= 1 km 0.7, <= 5 km 0.5, else 0.2)
- Image previously claimed at a different location: score x 0.3

The fingerprint is a content/identity surrogate, not a perceptual hash:
re-encoded or cropped copies are not recognized.
"""

import hashlib
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from loguru import logger

from proof_of_place.analyzers.exif import ExifReader, GpsFix, NoExifReader
from proof_of_place.config.scoring_tables import (
    EARTH_RADIUS_METERS,
    IMAGE_BASE_SCORE,
    IMAGE_DISTANCE_BANDS,
    IMAGE_DUPLICATE_PENALTY,
    IMAGE_FAR_SCORE,
    IMAGE_NEUTRAL_SCORE,
    IMAGE_STRING_FINGERPRINT_LENGTH,
)
from proof_of_place.data_management.schemas import (
    Coordinates,
    PointOfInterest,
    location_key,
)
from proof_of_place.data_management.submission_store import SubmissionStore


@dataclass
class ImageAnalysisResult:
    """Result of image analysis.

    Attributes:
        score: Image evidence score (0.0-1.0)
        has_exif: Whether GPS metadata was found
        exif_location: GPS fix from metadata, if any
        is_duplicate: Image was previously claimed at a different location
        fingerprint: Content fingerprint, None when no image or hashing failed
    """

    score: float
    has_exif: bool = False
    exif_location: Optional[GpsFix] = None
    is_duplicate: bool = False
    fingerprint: Optional[str] = None


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points in meters.

    Args:
        lat1, lng1: First point in degrees
        lat2, lng2: Second point in degrees

    Returns:
        Distance in meters on a sphere of radius 6,371,000 m
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def _is_empty(image: Any) -> bool:
    if image is None:
        return True
    if isinstance(image, (bytes, bytearray, memoryview, str)):
        return len(image) == 0
    return False


def distance_score(distance_m: float) -> float:
    """Map a distance between EXIF GPS and the claim to an evidence score."""
    for max_distance, score in IMAGE_DISTANCE_BANDS:
        if distance_m <= max_distance:
            return score
    return IMAGE_FAR_SCORE


class ImageAnalyzer:
    """
    Scores image evidence and tracks image reuse across locations.

    Usage:
        analyzer = ImageAnalyzer(store=SubmissionStore())
        result = await analyzer.analyze(image_bytes, location)

    Attributes:
        store: Shared submission store holding the image index
        exif_reader: GPS extraction capability
    """

    def __init__(
        self,
        store: Optional[SubmissionStore] = None,
        exif_reader: Optional[ExifReader] = None,
    ):
        self.store = store if store is not None else SubmissionStore()
        self.exif_reader = exif_reader or NoExifReader()
        self.logger = logger.bind(component="ImageAnalyzer")

    async def analyze(
        self,
        image: Any,
        location: Union[Coordinates, PointOfInterest],
    ) -> ImageAnalysisResult:
        """
        Analyze an image for location evidence.

        Records the image against the claimed location as a side effect.

        Args:
            image: bytes, base64/data string, upload object, or None
            location: Claimed coordinates or POI

        Returns:
            ImageAnalysisResult
        """
        if _is_empty(image):
            return ImageAnalysisResult(score=IMAGE_NEUTRAL_SCORE)

        fingerprint = self.fingerprint(image)
        gps = await self._read_gps(image)

        score = IMAGE_BASE_SCORE
        if gps is not None and isinstance(location, Coordinates):
            distance = haversine_distance(gps.lat, gps.lng, location.lat, location.lng)
            score = distance_score(distance)
            self.logger.debug(f"EXIF distance {distance:.0f}m -> {score}")

        is_duplicate = False
        if fingerprint is not None:
            is_duplicate = self.store.observe_image(fingerprint, location_key(location))
            if is_duplicate:
                score *= IMAGE_DUPLICATE_PENALTY
                self.logger.info(
                    "Image reused from another location",
                    fingerprint=fingerprint[:16],
                )

        return ImageAnalysisResult(
            score=score,
            has_exif=gps is not None,
            exif_location=gps,
            is_duplicate=is_duplicate,
            fingerprint=fingerprint,
        )

    def fingerprint(self, image: Any) -> Optional[str]:
        """
        Compute a duplicate-detection fingerprint for an image handle.

        - bytes: SHA256 of the content
        - str (base64 / data URL): first 50 characters
        - upload object with name and size: "name_size"
        - readable stream: SHA256 of its content (position restored)
        - empty content: None, so empty uploads never enter the duplicate index

        Returns:
            Fingerprint string, or None if the handle cannot be fingerprinted
        """
        if _is_empty(image):
            return None

        try:
            if isinstance(image, (bytes, bytearray, memoryview)):
                return hashlib.sha256(bytes(image)).hexdigest()

            if isinstance(image, str):
                return image[:IMAGE_STRING_FINGERPRINT_LENGTH]

            name = getattr(image, "name", None)
            size = getattr(image, "size", None)
            if name is not None and size is not None:
                return f"{name}_{size}"

            if hasattr(image, "read"):
                position = image.tell() if hasattr(image, "tell") else None
                content = image.read()
                if position is not None and hasattr(image, "seek"):
                    image.seek(position)
                if isinstance(content, str):
                    content = content.encode("utf-8")
                if not content:
                    return None
                return hashlib.sha256(content).hexdigest()

        except Exception as e:
            self.logger.warning(f"Image fingerprinting failed: {e}")
            return None

        self.logger.debug(f"Unsupported image handle type: {type(image).__name__}")
        return None

    async def _read_gps(self, image: Any) -> Optional[GpsFix]:
        try:
            return await self.exif_reader.read_gps(image)
        except Exception as e:
            self.logger.warning(f"EXIF extraction failed: {e}")
            return None


__all__ = ["ImageAnalyzer", "ImageAnalysisResult", "haversine_distance", "distance_score"]
