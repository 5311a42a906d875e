"""
RegenerationStats - Statistics for a batch regeneration run.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class RegenerationStats:
    """
    Statistics for a regeneration run.
    
    Attributes:
        total: Records considered
        successful: Records whose variants were regenerated
        errors: Records that failed (missing original, bad image, ...)
        skipped: Records skipped (already have variants, no filename)
        variants_generated: Variants stored across all records
        bytes_generated: Total bytes of variants stored
        start_time: Start timestamp
        error_details: List of error messages
    """
    total: int = 0
    successful: int = 0
    errors: int = 0
    skipped: int = 0
    variants_generated: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)
    
    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time
    
    @property
    def rate_per_minute(self) -> float:
        """Records regenerated per minute."""
        if self.elapsed_seconds > 0:
            return self.successful / self.elapsed_seconds * 60
        return 0.0
    
    @property
    def completed_count(self) -> int:
        """Total completed (successful + skipped + errors)."""
        return self.successful + self.skipped + self.errors
    
    @property
    def remaining_count(self) -> int:
        return self.total - self.completed_count
