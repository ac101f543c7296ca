"""Pluggable EXIF GPS extraction for the image analyzer."""

from proof_of_place.analyzers.exif.readers import (
    ExifReader,
    FixedExifReader,
    GpsFix,
    NoExifReader,
)

__all__ = ["ExifReader", "FixedExifReader", "GpsFix", "NoExifReader"]
