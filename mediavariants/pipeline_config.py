"""
PipelineConfig - Settings for variant generation.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .capability import CODEC_PREFERENCES
from .publisher import DEFAULT_URL_BASE
from .variant_generator import DEFAULT_MAX_WORKERS


@dataclass
class PipelineConfig:
    """
    Variant pipeline settings.
    
    Attributes:
        url_base: Base of public variant URLs ('' or None to use the store's own URLs)
        max_workers: Variants processed concurrently per upload
        codec: Codec preference: 'auto', 'native' or 'portable'
        env_errors: Environment values that could not be parsed
    """
    url_base: Optional[str] = DEFAULT_URL_BASE
    max_workers: int = DEFAULT_MAX_WORKERS
    codec: str = 'auto'
    env_errors: List[str] = field(default_factory=list, repr=False, compare=False)
    
    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Load configuration from MEDIAVARIANTS_* environment variables."""
        url_base = os.getenv('MEDIAVARIANTS_URL_BASE', DEFAULT_URL_BASE)
        env_errors = []
        
        raw_workers = os.getenv('MEDIAVARIANTS_MAX_WORKERS', str(DEFAULT_MAX_WORKERS))
        try:
            max_workers = int(raw_workers)
        except ValueError:
            env_errors.append(f"MEDIAVARIANTS_MAX_WORKERS must be an integer, got {raw_workers!r}")
            max_workers = DEFAULT_MAX_WORKERS
        
        return cls(
            url_base=url_base or None,
            max_workers=max_workers,
            codec=os.getenv('MEDIAVARIANTS_CODEC', 'auto').strip().lower(),
            env_errors=env_errors,
        )
    
    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        errors = list(self.env_errors)
        if self.max_workers < 1:
            errors.append(f"max_workers must be at least 1, got {self.max_workers}")
        if self.codec not in CODEC_PREFERENCES:
            errors.append(f"codec must be one of {', '.join(CODEC_PREFERENCES)}, got {self.codec!r}")
        return errors
