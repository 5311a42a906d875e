"""
Exceptions raised by the variant pipeline.

Call-level errors (UnsupportedFormatError, DecodeError) abort a whole
generate() call. VariantError subclasses only ever fail a single variant.
"""


class MediaVariantsError(Exception):
    """Base class for all pipeline errors."""


class UnsupportedFormatError(MediaVariantsError):
    """The buffer is not a JPEG, PNG or WebP image."""


class DecodeError(MediaVariantsError):
    """The original image could not be decoded."""


class VariantError(MediaVariantsError):
    """A single variant could not be produced or stored."""


class ResizeError(VariantError):
    pass


class EncodeError(VariantError):
    pass


class PublishError(VariantError):
    """The object store rejected an upload."""
