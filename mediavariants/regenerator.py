"""
Regenerator - rebuilds variants for media records that are missing them.
"""

import logging
import time
from typing import Optional

from .manifest import MediaManifest
from .media_record import MediaRecord
from .regeneration_stats import RegenerationStats
from .variant_generator import VariantGenerator


class Regenerator:
    """
    Batch tool: download each original, generate variants, update the record.
    """
    
    def __init__(
        self,
        variant_generator: VariantGenerator,
        cadence: float = 0.0,
        dry_run: bool = False,
        force: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize regenerator.
        
        Args:
            variant_generator: Generator whose store also holds the originals
            cadence: Seconds to wait between records
            dry_run: If True, only report what would be regenerated
            force: Regenerate records that already have variants
            logger: Optional logger instance
        """
        self.variant_generator = variant_generator
        self.store = variant_generator.store
        self.cadence = cadence
        self.dry_run = dry_run
        self.force = force
        self.logger = logger or logging.getLogger(__name__)
        self.stats = RegenerationStats()
        self._stop_requested = False
    
    def stop(self) -> None:
        """Request the regenerator to stop after the current record."""
        self._stop_requested = True
    
    def regenerate(self, manifest: MediaManifest, limit: Optional[int] = None) -> RegenerationStats:
        """
        Regenerate variants for records in a manifest.
        
        Args:
            manifest: Media records; updated in place
            limit: Optional maximum number of records to regenerate
            
        Returns:
            RegenerationStats with results
        """
        self.stats = RegenerationStats(total=manifest.total_records)
        mode_str = " [DRY RUN]" if self.dry_run else ""
        self.logger.info(f"Regenerating variants for {manifest.total_records} media records{mode_str}")
        
        for record in list(manifest.records):
            if self._stop_requested:
                self.logger.info("Stop requested, halting regeneration")
                break
            if limit is not None and self.stats.successful >= limit:
                self.logger.info(f"Reached limit of {limit} records")
                break
            
            if record.has_variants and not self.force:
                self.logger.debug(f"Skipping {record.filename} (already has variants)")
                self.stats.skipped += 1
                continue
            if not record.filename:
                self.logger.warning(f"Skipping record {record.id} (no filename)")
                self.stats.skipped += 1
                continue
            
            if self._process_record(manifest, record) and self.cadence > 0 and not self.dry_run:
                time.sleep(self.cadence)
        
        self.logger.info(
            f"Regeneration complete: {self.stats.successful} regenerated, "
            f"{self.stats.skipped} skipped, {self.stats.errors} errors "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )
        return self.stats
    
    def _process_record(self, manifest: MediaManifest, record: MediaRecord) -> bool:
        """Regenerate one record. Returns True on success."""
        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would regenerate: {record.filename}")
            self.stats.successful += 1
            return True
        
        try:
            image_data = self.store.get(record.filename)
            if image_data is None:
                raise FileNotFoundError(f"Original not found in store: {record.filename}")
            
            sizes = self.variant_generator.generate(image_data, record.filename, record.mime_type)
            manifest.update_image_sizes(record.id, sizes)
        except Exception as e:
            error_msg = f"Error processing {record.filename}: {e}"
            self.logger.error(error_msg)
            self.stats.errors += 1
            self.stats.error_details.append(error_msg)
            return False
        
        self.stats.successful += 1
        self.stats.variants_generated += len(sizes)
        self.stats.bytes_generated += sum(meta.file_size for meta in sizes.values())
        self.logger.info(
            f"Regenerated {record.filename}: {len(sizes)} variants "
            f"[{self.stats.completed_count}/{self.stats.total}]"
        )
        return True
