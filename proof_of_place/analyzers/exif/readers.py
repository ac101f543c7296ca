"""EXIF GPS capability used by the image analyzer.

The image analyzer only needs one question answered: does the image carry
GPS coordinates, and if so which. Readers answer it asynchronously so a
real implementation can parse large uploads off the event loop.

Variants:
- NoExifReader: always reports no GPS (the shipped default)
- FixedExifReader: always reports the same fix (for tests and demos)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class GpsFix:
    """GPS coordinates recovered from image metadata, in degrees."""

    lat: float
    lng: float


class ExifReader(ABC):
    """Reads GPS coordinates from an image handle."""

    @abstractmethod
    async def read_gps(self, image: Any) -> Optional[GpsFix]:
        """
        Extract GPS coordinates from an image.

        Args:
            image: Image handle as passed in the validation request

        Returns:
            GpsFix if the image carries GPS metadata, None otherwise
        """


class NoExifReader(ExifReader):
    """Reader for deployments without an EXIF library: never finds GPS."""

    async def read_gps(self, image: Any) -> Optional[GpsFix]:
        return None


class FixedExifReader(ExifReader):
    """Reader that reports the same GPS fix for every image."""

    def __init__(self, lat: float, lng: float):
        self.fix = GpsFix(lat=lat, lng=lng)

    async def read_gps(self, image: Any) -> Optional[GpsFix]:
        return self.fix


__all__ = ["ExifReader", "GpsFix", "NoExifReader", "FixedExifReader"]
