"""
VariantGenerator - builds every catalog variant for an uploaded image.

One decode per upload, then independent resize, encode and publish jobs
per variant. A failing variant is logged and left out of the result;
only format detection and decoding can fail the whole call.
"""

import functools
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from .capability import default_codec
from .catalog import IMAGE_VARIANTS, validate_catalog
from .codec import CodecAdapter
from .formats import ImageFormat, format_for_mime_type, require_format
from .models import (
    DecodedImage,
    GeneratedVariant,
    VariantMetadata,
    VariantMetadataMap,
    VariantSpec,
)
from .publisher import DEFAULT_URL_BASE, ObjectStorePublisher


T = TypeVar('T')

DEFAULT_MAX_WORKERS = 4


def variant_filename(original_filename: str, spec_name: str, fmt: ImageFormat) -> str:
    """
    Derive the stored filename for a variant.
    
    'page-12.png' with 'thumbnail' gives 'page-12-thumbnail.png'. The
    extension always follows the detected format, not the original name. A
    name with no stem, such as '.png', falls back to 'image'.
    """
    name = os.path.basename(original_filename)
    basename, ext = os.path.splitext(name)
    if not ext and basename.startswith('.'):
        # '.png' is all extension
        basename = ''
    basename = basename or 'image'
    return f"{basename}-{spec_name}.{fmt.extension}"


class VariantGenerator:
    """
    Generates, uploads and describes image variants.
    """
    
    def __init__(
        self,
        store,
        codec: Optional[CodecAdapter] = None,
        catalog: Iterable[VariantSpec] = IMAGE_VARIANTS,
        url_base: Optional[str] = DEFAULT_URL_BASE,
        max_workers: int = DEFAULT_MAX_WORKERS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize variant generator.
        
        Args:
            store: Object store with put/delete (S3Client, LocalClient)
            codec: Codec adapter (default: process-wide selection)
            catalog: Variant specs to generate, in order
            url_base: Base for public variant URLs, or None to use the store's URLs
            max_workers: Variants processed concurrently (1 = sequential)
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.codec = codec or default_codec()
        self.catalog = validate_catalog(catalog)
        self.max_workers = max(1, max_workers)
        self.publisher = ObjectStorePublisher(store, url_base, logger=self.logger)
    
    @property
    def store(self):
        return self.publisher.store
    
    def generate(
        self,
        image_data: bytes,
        original_filename: str,
        mime_type: Optional[str] = None
    ) -> VariantMetadataMap:
        """
        Generate and publish all variants of an image.
        
        Args:
            image_data: Original image bytes
            original_filename: Uploaded filename, used to name variants
            mime_type: Declared mime type (advisory only)
            
        Returns:
            Mapping of variant name to metadata for every variant that was
            stored; failed variants are absent
        
        Raises:
            UnsupportedFormatError: If the image is not JPEG, PNG or WebP
            DecodeError: If the original cannot be decoded
        """
        start = time.time()
        fmt, decoded = self._prepare(image_data, original_filename, mime_type)
        
        def job(spec: VariantSpec) -> VariantMetadata:
            variant = self._build_variant(decoded, fmt, spec, original_filename)
            url = self.publisher.publish(variant)
            return VariantMetadata.from_variant(variant, url)
        
        results = self._run(job)
        sizes = {spec.name: results[spec.name] for spec in self.catalog if spec.name in results}
        
        self.logger.info(
            f"Generated {len(sizes)}/{len(self.catalog)} variants for "
            f"{original_filename} in {time.time() - start:.2f}s"
        )
        return sizes
    
    def generate_variants(
        self,
        image_data: bytes,
        original_filename: str,
        mime_type: Optional[str] = None
    ) -> List[GeneratedVariant]:
        """Resize and encode every variant without uploading anything."""
        fmt, decoded = self._prepare(image_data, original_filename, mime_type)
        results = self._run(
            lambda spec: self._build_variant(decoded, fmt, spec, original_filename)
        )
        return [results[spec.name] for spec in self.catalog if spec.name in results]
    
    def _prepare(
        self,
        image_data: bytes,
        original_filename: str,
        mime_type: Optional[str]
    ) -> Tuple[ImageFormat, DecodedImage]:
        """Detect the format and decode the original once."""
        fmt = require_format(image_data)
        
        declared = format_for_mime_type(mime_type)
        if mime_type and declared != fmt:
            self.logger.warning(
                f"{original_filename}: declared type {mime_type} but content is {fmt.mime_type}"
            )
        
        decode_start = time.time()
        decoded = self.codec.decode_for_catalog(image_data, fmt, self.catalog)
        source_w, source_h = decoded.source_size
        self.logger.debug(
            f"Decoded {original_filename} ({fmt.name}, {source_w}x{source_h}) "
            f"with {self.codec.name} in {time.time() - decode_start:.2f}s"
        )
        return fmt, decoded
    
    def _build_variant(
        self,
        decoded: DecodedImage,
        fmt: ImageFormat,
        spec: VariantSpec,
        original_filename: str
    ) -> GeneratedVariant:
        resized = self.codec.resize(decoded, spec.width, spec.height, spec.fit)
        data = self.codec.encode(resized, fmt, spec.quality)
        return GeneratedVariant(
            name=spec.name,
            data=data,
            width=resized.width,
            height=resized.height,
            filename=variant_filename(original_filename, spec.name, fmt),
            mime_type=fmt.mime_type,
        )
    
    def _run(self, job: Callable[[VariantSpec], T]) -> Dict[str, T]:
        """
        Run a job per catalog spec, skipping specs whose job raises.
        
        Results are collected in the calling thread only.
        """
        results: Dict[str, T] = {}
        
        if self.max_workers == 1:
            for spec in self.catalog:
                self._collect(results, spec, functools.partial(job, spec))
            return results
        
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {pool.submit(job, spec): spec for spec in self.catalog}
            for future in as_completed(futures):
                self._collect(results, futures[future], future.result)
        return results
    
    def _collect(self, results: dict, spec: VariantSpec, outcome: Callable) -> None:
        try:
            value = outcome()
        except Exception as e:
            self.logger.error(f"Error generating {spec.name} variant: {e.__class__.__name__}: {e}")
            return
        results[spec.name] = value
        self.logger.info(f"Generated {spec.name}: {value.width}x{value.height}")
