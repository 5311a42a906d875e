"""
Reporter - Human-readable variant coverage reports for a media manifest.
"""

import logging
import sys
from collections import Counter
from typing import Iterable, Optional, TextIO

from .catalog import IMAGE_VARIANTS
from .manifest import MediaManifest
from .models import VariantSpec


class Reporter:
    """
    Generates human-readable reports from a media manifest.
    """
    
    def __init__(
        self,
        output: Optional[TextIO] = None,
        catalog: Iterable[VariantSpec] = IMAGE_VARIANTS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.
        
        Args:
            output: Output stream (default: stdout)
            catalog: Variant catalog to measure coverage against
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.catalog = list(catalog)
        self.logger = logger or logging.getLogger(__name__)
    
    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)
    
    def _format_bytes(self, bytes_val: float) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} PB"
    
    def report_summary(self, manifest: MediaManifest) -> None:
        """Print totals of complete, partial and missing variant sets."""
        complete = partial = none = 0
        total_bytes = 0
        missing_by_name = Counter()
        
        for record in manifest.records:
            missing = record.missing_variants(self.catalog)
            total_bytes += record.variant_bytes
            missing_by_name.update(missing)
            if not record.has_variants:
                none += 1
            elif missing:
                partial += 1
            else:
                complete += 1
        
        self._print("=" * 60)
        self._print("VARIANT COVERAGE SUMMARY")
        self._print("=" * 60)
        self._print(f"  Created:          {manifest.created_at}")
        self._print(f"  Media records:    {manifest.total_records:,}")
        self._print(f"  Complete sets:    {complete:,}")
        self._print(f"  Partial sets:     {partial:,}")
        self._print(f"  No variants:      {none:,}")
        self._print(f"  Variant storage:  {self._format_bytes(total_bytes)}")
        
        if missing_by_name:
            self._print()
            self._print("Missing by variant:")
            for spec in self.catalog:
                count = missing_by_name.get(spec.name, 0)
                if count:
                    self._print(f"  {spec.name:<18} {count:,}")
        self._print("=" * 60)
    
    def report_missing(self, manifest: MediaManifest) -> None:
        """List every record that lacks one or more variants."""
        found = False
        for record in manifest.records:
            missing = record.missing_variants(self.catalog)
            if missing:
                found = True
                self._print(f"{record.id}\t{record.filename or '-'}\t{', '.join(missing)}")
        if not found:
            self._print("All records have every variant.")
