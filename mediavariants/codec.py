"""
Codec adapters - decode and encode images to and from raw RGBA pixels.

CodecAdapter defines the contract shared by the portable Pillow codec
(this module) and the native libvips codec (vips_codec).
"""

import io
import logging
from typing import FrozenSet, Iterable, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from .exceptions import DecodeError, EncodeError
from .formats import ImageFormat
from .models import DecodedImage, FitPolicy, VariantSpec
from .resizer import Resizer


DEFAULT_QUALITY = 85


class CodecAdapter:
    """
    Decodes, resizes and encodes images for one backend.
    
    Subclasses implement _decode and _encode; error wrapping and format
    checks live here so both backends raise the same exceptions.
    """
    
    name = 'base'
    formats: FrozenSet[ImageFormat] = frozenset()
    supports_shrink_on_load = False
    
    def __init__(
        self,
        resizer: Optional[Resizer] = None,
        default_quality: int = DEFAULT_QUALITY,
        logger: Optional[logging.Logger] = None
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.resizer = resizer or Resizer(logger=self.logger)
        self.default_quality = default_quality
    
    def decode(self, data: bytes, fmt: ImageFormat) -> DecodedImage:
        """
        Decode an image buffer to RGBA pixels.
        
        Raises:
            DecodeError: If the format is unsupported or the data is malformed
        """
        if fmt not in self.formats:
            raise DecodeError(f"{self.name} codec cannot decode {fmt.name}")
        try:
            return self._decode(data, fmt)
        except DecodeError:
            raise
        except Exception as e:
            raise DecodeError(f"Failed to decode {fmt.name} image: {e}") from e
    
    def decode_for_catalog(
        self,
        data: bytes,
        fmt: ImageFormat,
        specs: Iterable[VariantSpec]
    ) -> DecodedImage:
        """Decode once for a whole catalog. Backends without shrink-on-load decode in full."""
        return self.decode(data, fmt)
    
    def encode(
        self,
        image: DecodedImage,
        fmt: ImageFormat,
        quality: Optional[int] = None
    ) -> bytes:
        """
        Encode RGBA pixels into the given format.
        
        Raises:
            EncodeError: If the format is unsupported for output or encoding fails
        """
        if fmt not in self.formats:
            raise EncodeError(f"{self.name} codec cannot encode {fmt.name}")
        try:
            return self._encode(image, fmt, quality or self.default_quality)
        except EncodeError:
            raise
        except Exception as e:
            raise EncodeError(f"Failed to encode {fmt.name} image: {e}") from e
    
    def resize(
        self,
        image: DecodedImage,
        width: int,
        height: Optional[int] = None,
        fit: FitPolicy = FitPolicy.INSIDE
    ) -> DecodedImage:
        return self.resizer.resize(image, width, height, fit)
    
    def _decode(self, data: bytes, fmt: ImageFormat) -> DecodedImage:
        raise NotImplementedError
    
    def _encode(self, image: DecodedImage, fmt: ImageFormat, quality: int) -> bytes:
        raise NotImplementedError
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


class PillowCodec(CodecAdapter):
    """
    Portable codec using Pillow's bundled JPEG, PNG and WebP codecs.
    
    Needs no system libraries beyond the Pillow wheel, so it is always
    available as the fallback backend.
    """
    
    name = 'pillow'
    formats = frozenset({ImageFormat.JPEG, ImageFormat.PNG, ImageFormat.WEBP})
    
    def _decode(self, data: bytes, fmt: ImageFormat) -> DecodedImage:
        try:
            img = Image.open(io.BytesIO(data), formats=[fmt.pil_format])
            img.load()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise DecodeError(f"Malformed {fmt.name} data: {e}") from e
        
        img = ImageOps.exif_transpose(img)
        if img.mode != 'RGBA':
            img = img.convert('RGBA')
        
        return DecodedImage(img.width, img.height, img.tobytes())
    
    def _encode(self, image: DecodedImage, fmt: ImageFormat, quality: int) -> bytes:
        img = Image.frombytes('RGBA', image.size, image.pixels)
        output = io.BytesIO()
        
        if fmt == ImageFormat.JPEG:
            self._flatten(img).save(output, format='JPEG', quality=quality, optimize=True)
        elif fmt == ImageFormat.PNG:
            img.save(output, format='PNG', optimize=True)
        elif fmt == ImageFormat.WEBP:
            img.save(output, format='WEBP', quality=quality)
        else:
            raise EncodeError(f"Unsupported output format: {fmt.name}")
        
        return output.getvalue()
    
    @staticmethod
    def _flatten(img: Image.Image) -> Image.Image:
        """Composite RGBA onto white for formats without alpha."""
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        return background
