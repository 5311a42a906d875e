"""
MediaManifest - JSON file of media records, standing in for the CMS record store.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from .media_record import MediaRecord
from .models import VariantMetadataMap


logger = logging.getLogger(__name__)


@dataclass
class MediaManifest:
    """
    Media records exported from the CMS.
    
    update_image_sizes() is the "update record with JSON metadata" hook
    used by batch tools; save() writes the result back out.
    
    Attributes:
        created_at: ISO timestamp when the manifest was created
        records: Media records
    """
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    records: List[MediaRecord] = field(default_factory=list)
    
    def add_record(self, record: MediaRecord) -> None:
        if self.get(record.id) is not None:
            raise ValueError(f"Duplicate media record id: {record.id}")
        self.records.append(record)
    
    def get(self, record_id: str) -> Optional[MediaRecord]:
        for record in self.records:
            if record.id == str(record_id):
                return record
        return None
    
    def remove(self, record_id: str) -> Optional[MediaRecord]:
        """Remove a record and return it, or None if it does not exist."""
        record = self.get(record_id)
        if record is not None:
            self.records.remove(record)
        return record
    
    def update_image_sizes(self, record_id: str, sizes: VariantMetadataMap) -> MediaRecord:
        """
        Replace a record's variant metadata.
        
        Raises:
            KeyError: If no record has this id
        """
        record = self.get(record_id)
        if record is None:
            raise KeyError(f"No media record with id {record_id}")
        record.image_sizes = dict(sizes)
        return record
    
    def records_without_variants(self) -> Iterator[MediaRecord]:
        for record in self.records:
            if not record.has_variants:
                yield record
    
    @property
    def total_records(self) -> int:
        return len(self.records)
    
    @property
    def total_with_variants(self) -> int:
        return sum(1 for r in self.records if r.has_variants)
    
    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'created_at': self.created_at,
            'records': [r.to_dict() for r in self.records],
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> 'MediaManifest':
        """Create from dictionary."""
        manifest = cls(created_at=data.get('created_at') or datetime.now().isoformat())
        for record_data in data.get('records', []):
            manifest.add_record(MediaRecord.from_dict(record_data))
        return manifest
    
    def save(self, filepath: str) -> None:
        """Save manifest to a JSON file, replacing it atomically."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        
        tmp_path = path.with_name(path.name + '.tmp')
        with open(tmp_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        os.replace(tmp_path, path)
        logger.debug(f"Saved {len(self.records)} records to {filepath}")
    
    @classmethod
    def load(cls, filepath: str) -> 'MediaManifest':
        """Load manifest from a JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)
