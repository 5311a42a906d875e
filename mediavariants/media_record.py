"""
MediaRecord - A media library entry and its stored image variants.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .catalog import IMAGE_VARIANTS
from .models import (
    VariantMetadataMap,
    VariantSpec,
    metadata_map_from_dict,
    metadata_map_to_dict,
)


@dataclass
class MediaRecord:
    """
    A media library entry as the CMS stores it.
    
    Attributes:
        id: Record ID
        filename: Object store key of the original upload
        mime_type: Declared mime type of the original
        image_sizes: Variant name -> metadata, persisted as one JSON blob
    """
    id: str
    filename: Optional[str]
    mime_type: Optional[str] = None
    image_sizes: VariantMetadataMap = field(default_factory=dict)
    
    @property
    def has_variants(self) -> bool:
        return len(self.image_sizes) > 0
    
    def missing_variants(self, catalog: Iterable[VariantSpec] = IMAGE_VARIANTS) -> List[str]:
        """Catalog variant names with no stored entry."""
        return [spec.name for spec in catalog if spec.name not in self.image_sizes]
    
    @property
    def variant_filenames(self) -> List[str]:
        return [meta.filename for meta in self.image_sizes.values()]
    
    @property
    def variant_bytes(self) -> int:
        return sum(meta.file_size for meta in self.image_sizes.values())
    
    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'filename': self.filename,
            'mimeType': self.mime_type,
            'imageSizes': metadata_map_to_dict(self.image_sizes),
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> 'MediaRecord':
        """Create from dictionary."""
        return cls(
            id=str(data['id']),
            filename=data.get('filename'),
            mime_type=data.get('mimeType'),
            image_sizes=metadata_map_from_dict(data.get('imageSizes')),
        )
