"""
Image variant generation for the webcomic media library.

Each upload is sniffed, decoded once, and turned into a fixed catalog of
resized variants that are stored in an object store and described by a
JSON-serializable metadata map.

The codec backend is libvips (via pyvips) where the native library can be
loaded, and Pillow everywhere else.
"""

__version__ = "1.0.0"

from .exceptions import (
    MediaVariantsError,
    UnsupportedFormatError,
    DecodeError,
    VariantError,
    ResizeError,
    EncodeError,
    PublishError,
)
from .formats import ImageFormat, detect_format
from .models import (
    FitPolicy,
    VariantSpec,
    DecodedImage,
    GeneratedVariant,
    VariantMetadata,
    metadata_map_to_dict,
    metadata_map_from_dict,
)
from .catalog import IMAGE_VARIANTS
from .resizer import Resizer, plan_resize
from .codec import CodecAdapter, PillowCodec
from .capability import native_codec_available, select_codec, default_codec
from .s3_config import S3Config
from .s3_client import S3Client
from .local_client import LocalConfig, LocalClient
from .publisher import ObjectStorePublisher
from .variant_generator import VariantGenerator, variant_filename
from .media_record import MediaRecord
from .manifest import MediaManifest
from .cleanup import delete_media_record
from .regeneration_stats import RegenerationStats
from .regenerator import Regenerator
from .pipeline_config import PipelineConfig

__all__ = [
    "MediaVariantsError",
    "UnsupportedFormatError",
    "DecodeError",
    "VariantError",
    "ResizeError",
    "EncodeError",
    "PublishError",
    "ImageFormat",
    "detect_format",
    "FitPolicy",
    "VariantSpec",
    "DecodedImage",
    "GeneratedVariant",
    "VariantMetadata",
    "metadata_map_to_dict",
    "metadata_map_from_dict",
    "IMAGE_VARIANTS",
    "Resizer",
    "plan_resize",
    "CodecAdapter",
    "PillowCodec",
    "native_codec_available",
    "select_codec",
    "default_codec",
    "S3Config",
    "S3Client",
    "LocalConfig",
    "LocalClient",
    "ObjectStorePublisher",
    "VariantGenerator",
    "variant_filename",
    "MediaRecord",
    "MediaManifest",
    "delete_media_record",
    "RegenerationStats",
    "Regenerator",
    "PipelineConfig",
]
