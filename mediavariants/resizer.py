"""
Resizer - fit-policy geometry and Lanczos resampling of RGBA pixel buffers.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image

from .exceptions import ResizeError
from .models import DecodedImage, FitPolicy


@dataclass(frozen=True)
class ResizePlan:
    """
    Geometry for one resize.
    
    Attributes:
        scaled_size: Size the whole source is resampled to
        crop_box: (left, top, right, bottom) within the scaled image, or None
        output_size: Final output size
    """
    scaled_size: Tuple[int, int]
    crop_box: Optional[Tuple[int, int, int, int]]
    output_size: Tuple[int, int]


def target_box(
    source_width: int,
    source_height: int,
    width: int,
    height: Optional[int] = None
) -> Tuple[int, int]:
    """
    Resolve the target box, deriving a missing height from the source aspect ratio.
    
    Non-positive dimensions are clamped to 1.
    """
    width = max(1, int(width))
    if height is None:
        height = round(width * source_height / source_width)
    return width, max(1, int(height))


def plan_resize(
    source_width: int,
    source_height: int,
    width: int,
    height: Optional[int] = None,
    fit: FitPolicy = FitPolicy.INSIDE
) -> ResizePlan:
    """
    Compute scaled size, crop box and output size for a fit policy.
    
    INSIDE keeps the aspect ratio and fits within the box on both axes; a
    width-only box is hit exactly, with the height rounded from the aspect ratio.
    COVER fills the box exactly, center-cropping the overflowing axis.
    """
    if source_width <= 0 or source_height <= 0:
        raise ResizeError(f"Invalid source dimensions {source_width}x{source_height}")
    
    box_w, box_h = target_box(source_width, source_height, width, height)
    
    if fit == FitPolicy.COVER:
        scale = max(box_w / source_width, box_h / source_height)
        scaled_w = max(box_w, round(source_width * scale))
        scaled_h = max(box_h, round(source_height * scale))
        left = (scaled_w - box_w) // 2
        top = (scaled_h - box_h) // 2
        crop_box = None
        if (scaled_w, scaled_h) != (box_w, box_h):
            crop_box = (left, top, left + box_w, top + box_h)
        return ResizePlan((scaled_w, scaled_h), crop_box, (box_w, box_h))
    
    if height is None:
        return ResizePlan((box_w, box_h), None, (box_w, box_h))
    
    scale = min(box_w / source_width, box_h / source_height)
    out_w = min(box_w, max(1, round(source_width * scale)))
    out_h = min(box_h, max(1, round(source_height * scale)))
    return ResizePlan((out_w, out_h), None, (out_w, out_h))


class Resizer:
    """
    Resizes decoded images using Pillow's Lanczos (3-lobe) filter.
    
    Geometry is computed from the image's source_size so that an image
    shrunk on load produces the same output dimensions as a full decode.
    """
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
    
    def resize(
        self,
        image: DecodedImage,
        width: int,
        height: Optional[int] = None,
        fit: FitPolicy = FitPolicy.INSIDE
    ) -> DecodedImage:
        """
        Resize an image into a target box.
        
        Args:
            image: Decoded RGBA image
            width: Target width
            height: Target height, or None to derive it from the aspect ratio
            fit: Fit policy
            
        Returns:
            A new DecodedImage with the planned output size
        """
        source_w, source_h = image.source_size
        plan = plan_resize(source_w, source_h, width, height, fit)
        
        try:
            result = self._resample(image, plan)
        except ResizeError:
            raise
        except Exception as e:
            raise ResizeError(
                f"Failed to resize {image.width}x{image.height} to "
                f"{plan.output_size[0]}x{plan.output_size[1]}: {e}"
            ) from e
        
        if result.size != plan.output_size:
            raise ResizeError(
                f"Resampler produced {result.width}x{result.height}, "
                f"expected {plan.output_size[0]}x{plan.output_size[1]}"
            )
        return result
    
    def _resample(self, image: DecodedImage, plan: ResizePlan) -> DecodedImage:
        img = Image.frombytes('RGBA', image.size, image.pixels)
        
        if img.size != plan.scaled_size:
            img = img.resize(plan.scaled_size, Image.Resampling.LANCZOS)
        if plan.crop_box:
            img = img.crop(plan.crop_box)
        
        return DecodedImage(img.width, img.height, img.tobytes())
