"""
Codec selection - probes once for libvips and picks the codec backend.
"""

import functools
import importlib
import logging
from typing import Optional

from .codec import CodecAdapter, PillowCodec


logger = logging.getLogger(__name__)

CODEC_PREFERENCES = ('auto', 'native', 'portable')


@functools.lru_cache(maxsize=1)
def native_codec_available() -> bool:
    """
    Check whether the libvips backend can be loaded.
    
    A missing pyvips package or libvips shared library is a normal outcome
    and returns False. The result is memoized for the process lifetime.
    """
    try:
        importlib.import_module('pyvips')
        importlib.import_module('mediavariants.vips_codec')
    except (ImportError, OSError) as e:
        logger.debug(f"libvips unavailable, using portable codec: {e}")
        return False
    return True


def select_codec(
    preference: str = 'auto',
    log: Optional[logging.Logger] = None
) -> CodecAdapter:
    """
    Build the codec adapter for this runtime.
    
    Args:
        preference: 'auto' (libvips when available), 'native' (libvips,
            falling back with a warning) or 'portable' (always Pillow)
        log: Optional logger passed to the codec
    """
    if preference not in CODEC_PREFERENCES:
        raise ValueError(f"Unknown codec preference {preference!r}, expected one of {CODEC_PREFERENCES}")
    
    if preference != 'portable' and native_codec_available():
        from .vips_codec import VipsCodec
        return VipsCodec(logger=log)
    
    if preference == 'native':
        logger.warning("Native codec requested but libvips is not available; using Pillow")
    return PillowCodec(logger=log)


@functools.lru_cache(maxsize=None)
def default_codec(preference: str = 'auto') -> CodecAdapter:
    """Process-wide codec adapter, selected on first use."""
    codec = select_codec(preference)
    logger.info(f"Image codec backend: {codec.name}")
    return codec
