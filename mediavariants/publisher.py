"""
ObjectStorePublisher - uploads variants and removes them when a record is deleted.
"""

import logging
from typing import Mapping, Optional

from .exceptions import PublishError
from .models import DeletionResult, GeneratedVariant, VariantMetadata


DEFAULT_URL_BASE = '/api/media/file'


class ObjectStorePublisher:
    """
    Publishes encoded variants to an object store.
    
    The store needs put(key, data, content_type) and delete(key); a
    public_url(key) method is used when no URL base is configured.
    Uploads are attempted once, never retried.
    """
    
    def __init__(
        self,
        store,
        url_base: Optional[str] = DEFAULT_URL_BASE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize publisher.
        
        Args:
            store: Object store (S3Client, LocalClient or compatible)
            url_base: Base for public URLs, or None to ask the store
            logger: Optional logger instance
        """
        self.store = store
        self.url_base = url_base.rstrip('/') if url_base is not None else None
        self.logger = logger or logging.getLogger(__name__)
    
    def url_for(self, filename: str) -> str:
        """Public URL for a stored filename."""
        if self.url_base is None:
            public_url = getattr(self.store, 'public_url', None)
            url = public_url(filename) if public_url else None
            if url:
                return url
            return f"/{filename}"
        return f"{self.url_base}/{filename}"
    
    def publish(self, variant: GeneratedVariant) -> str:
        """
        Upload a variant under its filename.
        
        Returns:
            The variant's public URL
        
        Raises:
            PublishError: On any store-level failure
        """
        self.logger.debug(f"Uploading {variant.filename} ({variant.file_size} bytes)")
        try:
            self.store.put(variant.filename, variant.data, variant.mime_type)
        except Exception as e:
            raise PublishError(f"Upload of {variant.filename} failed: {e}") from e
        return self.url_for(variant.filename)
    
    def delete_variants(self, image_sizes: Mapping[str, VariantMetadata]) -> DeletionResult:
        """
        Delete every stored variant file listed in a metadata map.
        
        Each deletion is independent: failures are logged and collected,
        never raised, so the remaining files are still removed.
        """
        result = DeletionResult()
        for name, meta in image_sizes.items():
            try:
                self.store.delete(meta.filename)
            except Exception as e:
                self.logger.error(f"Failed to delete variant {name} ({meta.filename}): {e}")
                result.failed[meta.filename] = str(e)
            else:
                self.logger.debug(f"Deleted variant {name}: {meta.filename}")
                result.deleted.append(meta.filename)
        return result
