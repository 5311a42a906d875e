"""
VipsCodec - native codec backed by libvips through pyvips.

Only importable where the libvips shared library can be loaded; use
capability.native_codec_available() before constructing it.
"""

import logging
import math
from typing import Iterable, Optional, Tuple

import pyvips

from .codec import DEFAULT_QUALITY, CodecAdapter
from .exceptions import DecodeError, EncodeError
from .formats import ImageFormat
from .models import DecodedImage, VariantSpec
from .resizer import ResizePlan, Resizer, plan_resize


SAVE_SUFFIXES = {
    ImageFormat.JPEG: '.jpg',
    ImageFormat.PNG: '.png',
    ImageFormat.WEBP: '.webp',
}

# EXIF orientations that swap width and height
TRANSPOSED_ORIENTATIONS = {5, 6, 7, 8}


def to_vips(image: DecodedImage) -> 'pyvips.Image':
    """Wrap RGBA pixels in a vips image."""
    img = pyvips.Image.new_from_memory(image.pixels, image.width, image.height, 4, 'uchar')
    return img.copy(interpretation='srgb')


def to_decoded(img: 'pyvips.Image', source_size: Optional[Tuple[int, int]] = None) -> DecodedImage:
    """Normalize a vips image to 8-bit sRGB with alpha and copy out its pixels."""
    if img.interpretation != 'srgb':
        img = img.colourspace('srgb')
    if not img.hasalpha():
        img = img.bandjoin(255)
    if img.format != 'uchar':
        img = img.cast('uchar')
    return DecodedImage(img.width, img.height, img.write_to_memory(), source_size)


class VipsResizer(Resizer):
    """Resizer using libvips' lanczos3 kernel on premultiplied alpha."""
    
    def _resample(self, image: DecodedImage, plan: ResizePlan) -> DecodedImage:
        img = to_vips(image)
        scaled_w, scaled_h = plan.scaled_size
        
        if (img.width, img.height) != (scaled_w, scaled_h):
            img = img.premultiply().resize(
                scaled_w / img.width,
                vscale=scaled_h / img.height,
                kernel='lanczos3'
            ).unpremultiply().cast('uchar')
            if (img.width, img.height) != (scaled_w, scaled_h):
                # vips rounds the scaled size itself; pad or trim the odd pixel
                img = img.gravity('centre', scaled_w, scaled_h, extend='copy')
        
        if plan.crop_box:
            left, top, right, bottom = plan.crop_box
            img = img.crop(left, top, right - left, bottom - top)
        
        return to_decoded(img)


class VipsCodec(CodecAdapter):
    """
    Native codec for JPEG, PNG and WebP.
    
    Supports shrink-on-load: decode_for_catalog decodes straight to the
    smallest size that still covers every variant in the catalog.
    """
    
    name = 'libvips'
    formats = frozenset({ImageFormat.JPEG, ImageFormat.PNG, ImageFormat.WEBP})
    supports_shrink_on_load = True
    
    def __init__(
        self,
        resizer: Optional[Resizer] = None,
        default_quality: int = DEFAULT_QUALITY,
        logger: Optional[logging.Logger] = None
    ):
        logger = logger or logging.getLogger(__name__)
        super().__init__(resizer or VipsResizer(logger=logger), default_quality, logger)
    
    def _decode(self, data: bytes, fmt: ImageFormat) -> DecodedImage:
        try:
            # autorot reads out of order, so no sequential access here
            img = pyvips.Image.new_from_buffer(data, '')
            img = img.autorot()
            return to_decoded(img)
        except pyvips.Error as e:
            raise DecodeError(f"Malformed {fmt.name} data: {e}") from e
    
    def decode_for_catalog(
        self,
        data: bytes,
        fmt: ImageFormat,
        specs: Iterable[VariantSpec]
    ) -> DecodedImage:
        if fmt not in self.formats:
            raise DecodeError(f"{self.name} codec cannot decode {fmt.name}")
        
        try:
            source_w, source_h = self._oriented_size(data)
        except pyvips.Error as e:
            raise DecodeError(f"Malformed {fmt.name} data: {e}") from e
        
        scale = self._required_scale(source_w, source_h, specs)
        if scale <= 0.0 or scale >= 1.0:
            return self.decode(data, fmt)
        
        target_w = max(1, math.ceil(source_w * scale))
        target_h = max(1, math.ceil(source_h * scale))
        self.logger.debug(
            f"Shrink-on-load {source_w}x{source_h} -> {target_w}x{target_h}"
        )
        try:
            img = pyvips.Image.thumbnail_buffer(data, target_w, height=target_h, size='down')
            return to_decoded(img, source_size=(source_w, source_h))
        except pyvips.Error as e:
            raise DecodeError(f"Failed to decode {fmt.name} image: {e}") from e
    
    def _encode(self, image: DecodedImage, fmt: ImageFormat, quality: int) -> bytes:
        img = to_vips(image)
        try:
            if fmt == ImageFormat.JPEG:
                img = img.flatten(background=[255, 255, 255]).cast('uchar')
                return img.write_to_buffer(SAVE_SUFFIXES[fmt], Q=quality)
            if fmt == ImageFormat.PNG:
                return img.write_to_buffer(SAVE_SUFFIXES[fmt])
            if fmt == ImageFormat.WEBP:
                return img.write_to_buffer(SAVE_SUFFIXES[fmt], Q=quality)
        except pyvips.Error as e:
            raise EncodeError(f"libvips failed to write {fmt.name}: {e}") from e
        raise EncodeError(f"Unsupported output format: {fmt.name}")
    
    @staticmethod
    def _oriented_size(data: bytes) -> Tuple[int, int]:
        """Read the image size from the header, after EXIF rotation."""
        img = pyvips.Image.new_from_buffer(data, '')
        width, height = img.width, img.height
        if img.get_typeof('orientation') != 0 and img.get('orientation') in TRANSPOSED_ORIENTATIONS:
            width, height = height, width
        return width, height
    
    @staticmethod
    def _required_scale(source_w: int, source_h: int, specs: Iterable[VariantSpec]) -> float:
        """Largest scale factor any spec needs from the source."""
        scale = 0.0
        for spec in specs:
            plan = plan_resize(source_w, source_h, spec.width, spec.height, spec.fit)
            scaled_w, scaled_h = plan.scaled_size
            scale = max(scale, scaled_w / source_w, scaled_h / source_h)
        return scale
