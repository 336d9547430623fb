# menu_backend/services/images/presets.py
import logging
from typing import Dict, List, Tuple

from PIL import Image

from .cache import DerivedImageCache
from .policy import ResizeSpec

logger = logging.getLogger(__name__)

PRESET_QUALITY = 85

# Card sizes used by the storefront (width, height)
PRESET_SIZES: Dict[str, Tuple[int, int]] = {
    "product_small": (120, 70),
    "product_medium": (180, 105),
    "product_large": (240, 140),
    "menu_small": (100, 58),
    "menu_medium": (150, 88),
    "menu_large": (220, 128),
    "banner_mobile": (320, 400),
    "banner_tablet": (480, 600),
    "banner_desktop": (1035, 450),
    "basket_small": (80, 47),
    "basket_medium": (100, 58),
    "basket_large": (120, 70),
    "logo_small": (45, 45),
    "logo_medium": (60, 60),
    "logo_large": (80, 80),
}


def presets_for_width(width: int) -> List[str]:
    """Guess which storefront slots an image of this width is used in."""
    if width >= 1000:
        return ["banner_mobile", "banner_tablet", "banner_desktop"]
    if width >= 500:
        return [
            "product_small", "product_medium", "product_large",
            "menu_small", "menu_medium", "menu_large",
            "basket_small", "basket_medium", "basket_large",
        ]
    if width >= 200:
        return ["product_small", "product_medium", "menu_small", "menu_medium"]
    return ["logo_small", "logo_medium", "logo_large"]


async def warm_presets(cache: DerivedImageCache, relative_path: str, fmt: str = "webp") -> List[str]:
    """Pre-generate preset variants of one image; returns the preset names produced."""
    source = cache.source_path(relative_path)
    try:
        with Image.open(source) as img:
            src_w, src_h = img.size
    except OSError as e:
        logger.warning(f"Skipping unreadable image {relative_path}: {e}")
        return []

    produced = []
    for name in presets_for_width(src_w):
        width, height = PRESET_SIZES[name]
        if width > src_w or height > src_h:
            continue
        spec = ResizeSpec(target_width=width, target_height=height, quality=PRESET_QUALITY, format=fmt)
        rendered = await cache.get(relative_path, spec)
        if rendered.optimized:
            produced.append(name)
    logger.info(f"Warmed {len(produced)} variants for {relative_path}")
    return produced
