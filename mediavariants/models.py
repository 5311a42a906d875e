"""
Data model for variant generation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


class FitPolicy(Enum):
    """How a source aspect ratio is mapped onto a target box."""
    INSIDE = 'inside'
    COVER = 'cover'


@dataclass(frozen=True)
class VariantSpec:
    """
    A named size in the variant catalog.
    
    Attributes:
        name: Unique variant name (e.g., 'thumbnail')
        width: Target width in pixels
        height: Target height in pixels, or None to follow the source aspect ratio
        fit: Fit policy for the target box
        quality: Encoder quality (1-100) for lossy formats, or None for the default
    """
    name: str
    width: int
    height: Optional[int] = None
    fit: FitPolicy = FitPolicy.INSIDE
    quality: Optional[int] = None
    
    def __post_init__(self):
        if not self.name:
            raise ValueError("Variant name must not be empty")
        if self.quality is not None and not 1 <= self.quality <= 100:
            raise ValueError(f"Quality for {self.name} must be in [1, 100], got {self.quality}")


@dataclass
class DecodedImage:
    """
    Raw RGBA pixels, row-major, top-to-bottom.
    
    Attributes:
        width: Width in pixels
        height: Height in pixels
        pixels: width * height * 4 bytes
        source_size: (width, height) of the original file; differs from
            (width, height) only when the decoder shrank on load
    """
    width: int
    height: int
    pixels: bytes
    source_size: Optional[Tuple[int, int]] = None
    
    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid image dimensions {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(
                f"Pixel buffer is {len(self.pixels)} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )
        if self.source_size is None:
            self.source_size = (self.width, self.height)
    
    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass
class GeneratedVariant:
    """An encoded variant, ready to upload."""
    name: str
    data: bytes
    width: int
    height: int
    filename: str
    mime_type: str
    
    @property
    def file_size(self) -> int:
        return len(self.data)


@dataclass
class VariantMetadata:
    """
    Persisted description of one stored variant.
    
    Serializes with the camelCase keys the CMS stores in its imageSizes field.
    """
    url: str
    width: int
    height: int
    mime_type: str
    file_size: int
    filename: str
    
    @classmethod
    def from_variant(cls, variant: GeneratedVariant, url: str) -> 'VariantMetadata':
        return cls(
            url=url,
            width=variant.width,
            height=variant.height,
            mime_type=variant.mime_type,
            file_size=variant.file_size,
            filename=variant.filename,
        )
    
    def to_dict(self) -> dict:
        return {
            'url': self.url,
            'width': self.width,
            'height': self.height,
            'mimeType': self.mime_type,
            'fileSize': self.file_size,
            'filename': self.filename,
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> 'VariantMetadata':
        return cls(
            url=data['url'],
            width=int(data['width']),
            height=int(data['height']),
            mime_type=data['mimeType'],
            file_size=int(data.get('fileSize', 0)),
            filename=data['filename'],
        )


VariantMetadataMap = Dict[str, VariantMetadata]


def metadata_map_to_dict(sizes: Mapping[str, VariantMetadata]) -> Dict[str, dict]:
    """Convert a VariantMetadataMap into its JSON-serializable form."""
    return {name: meta.to_dict() for name, meta in sizes.items()}


def metadata_map_from_dict(data: Optional[Mapping[str, dict]]) -> VariantMetadataMap:
    """Parse the JSON form of a VariantMetadataMap. None yields an empty map."""
    if not data:
        return {}
    return {name: VariantMetadata.from_dict(entry) for name, entry in data.items()}


@dataclass
class DeletionResult:
    """Outcome of deleting a record's variants from the object store."""
    deleted: list = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    
    @property
    def attempted(self) -> int:
        return len(self.deleted) + len(self.failed)
