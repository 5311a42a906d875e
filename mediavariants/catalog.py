"""
Variant catalog - the fixed, ordered list of sizes generated per upload.
"""

from typing import Iterable, List, Optional, Tuple

from .models import FitPolicy, VariantSpec


IMAGE_VARIANTS: Tuple[VariantSpec, ...] = (
    VariantSpec('thumbnail', 400, fit=FitPolicy.INSIDE, quality=85),
    VariantSpec('thumbnail_small', 200, fit=FitPolicy.INSIDE, quality=85),
    VariantSpec('webcomic_page', 800, fit=FitPolicy.INSIDE, quality=90),
    VariantSpec('webcomic_mobile', 400, fit=FitPolicy.INSIDE, quality=85),
    VariantSpec('cover_image', 600, 800, fit=FitPolicy.COVER, quality=85),
    VariantSpec('social_preview', 1200, 630, fit=FitPolicy.COVER, quality=85),
    VariantSpec('avatar', 200, 200, fit=FitPolicy.COVER, quality=85),
)


def validate_catalog(specs: Iterable[VariantSpec]) -> List[VariantSpec]:
    """
    Check that variant names are unique.
    
    Returns:
        The specs as a list, in their original order
    
    Raises:
        ValueError: If two specs share a name
    """
    specs = list(specs)
    seen = set()
    for spec in specs:
        if spec.name in seen:
            raise ValueError(f"Duplicate variant name in catalog: {spec.name}")
        seen.add(spec.name)
    return specs


def variant_names(specs: Iterable[VariantSpec] = IMAGE_VARIANTS) -> List[str]:
    return [spec.name for spec in specs]


def get_variant(name: str, specs: Iterable[VariantSpec] = IMAGE_VARIANTS) -> Optional[VariantSpec]:
    for spec in specs:
        if spec.name == name:
            return spec
    return None
