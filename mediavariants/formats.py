"""
Format detection - classifies image buffers by their magic bytes.
"""

from enum import Enum
from typing import Optional

from .exceptions import UnsupportedFormatError


class ImageFormat(Enum):
    """
    Supported image formats.
    
    Each member carries the file extension used for variant filenames,
    the mime type stored in metadata and the Pillow format name.
    """
    JPEG = ('jpg', 'image/jpeg', 'JPEG')
    PNG = ('png', 'image/png', 'PNG')
    WEBP = ('webp', 'image/webp', 'WEBP')
    
    def __init__(self, extension: str, mime_type: str, pil_format: str):
        self.extension = extension
        self.mime_type = mime_type
        self.pil_format = pil_format


JPEG_SIGNATURE = b'\xff\xd8\xff'
PNG_SIGNATURE = b'\x89PNG'
RIFF_SIGNATURE = b'RIFF'
WEBP_SIGNATURE = b'WEBP'


def detect_format(data: bytes) -> Optional[ImageFormat]:
    """
    Detect the image format from the first 12 bytes of a buffer.
    
    Filenames and declared mime types are never consulted.
    
    Returns:
        The detected ImageFormat, or None if the header is not recognised
    """
    header = bytes(data[:12])
    
    if header.startswith(JPEG_SIGNATURE):
        return ImageFormat.JPEG
    if header.startswith(PNG_SIGNATURE):
        return ImageFormat.PNG
    if header.startswith(RIFF_SIGNATURE) and header[8:12] == WEBP_SIGNATURE:
        return ImageFormat.WEBP
    return None


def require_format(data: bytes) -> ImageFormat:
    """Detect the image format or raise UnsupportedFormatError."""
    fmt = detect_format(data)
    if fmt is None:
        raise UnsupportedFormatError(
            f"Unrecognised image header: {bytes(data[:12]).hex(' ') or 'empty buffer'}"
        )
    return fmt


def format_for_mime_type(mime_type: Optional[str]) -> Optional[ImageFormat]:
    """Map a declared mime type onto a format, for mismatch warnings only."""
    if not mime_type:
        return None
    normalized = mime_type.lower().strip()
    if normalized == 'image/jpg':
        normalized = 'image/jpeg'
    for fmt in ImageFormat:
        if fmt.mime_type == normalized:
            return fmt
    return None
