"""
Cleanup - removes a media record's variant files when the record is deleted.
"""

import logging
from typing import Optional

from .manifest import MediaManifest
from .models import DeletionResult
from .publisher import ObjectStorePublisher


logger = logging.getLogger(__name__)


def delete_media_record(
    manifest: MediaManifest,
    record_id: str,
    publisher: ObjectStorePublisher,
    delete_original: bool = False
) -> Optional[DeletionResult]:
    """
    Delete a media record and every variant file listed in its metadata.
    
    Variant deletions are independent; the record is removed even if some
    of them fail.
    
    Returns:
        The DeletionResult, or None if the record does not exist
    """
    record = manifest.get(record_id)
    if record is None:
        logger.warning(f"No media record with id {record_id}")
        return None
    
    result = publisher.delete_variants(record.image_sizes)
    if result.failed:
        logger.warning(
            f"Record {record_id}: {len(result.failed)} of {result.attempted} "
            f"variant deletions failed"
        )
    
    if delete_original and record.filename:
        try:
            publisher.store.delete(record.filename)
        except Exception as e:
            logger.error(f"Failed to delete original {record.filename}: {e}")
            result.failed[record.filename] = str(e)
        else:
            result.deleted.append(record.filename)
    
    manifest.remove(record_id)
    return result
