# menu_backend/services/images/policy.py
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
OUTPUT_FORMATS = {"webp", "jpeg", "png"}
FORMAT_ALIASES = {"jpg": "jpeg"}

MIN_QUALITY = 10
MAX_QUALITY = 100
DEFAULT_QUALITY = 85
DEFAULT_FORMAT = "webp"

# Uploaded assets carry an epoch-millisecond stamp in their file name
ASSET_NAME_RE = re.compile(r"\d{10,}")


@dataclass(frozen=True)
class ResizeSpec:
    target_width: Optional[int]
    target_height: Optional[int]
    quality: int = DEFAULT_QUALITY
    format: str = DEFAULT_FORMAT

    @property
    def media_type(self) -> str:
        return f"image/{self.format}"

    @property
    def fit(self) -> str:
        if self.target_width and self.target_height:
            return "cover"
        return "inside"


DEFAULT_ASSET_SPEC = ResizeSpec(target_width=800, target_height=600, quality=DEFAULT_QUALITY, format=DEFAULT_FORMAT)


def is_image_path(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in SUPPORTED_EXTENSIONS


def looks_like_asset_name(path: str) -> bool:
    return ASSET_NAME_RE.search(path) is not None


def parse_dimension(raw: Optional[str]) -> Optional[int]:
    """Positive integer or None; anything else is treated as absent."""
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def clamp_quality(raw, default: int = DEFAULT_QUALITY) -> int:
    try:
        value = int(str(raw).strip()) if raw is not None else default
    except (TypeError, ValueError):
        value = default
    return max(MIN_QUALITY, min(MAX_QUALITY, value))


def normalize_format(raw: Optional[str], default: str = DEFAULT_FORMAT) -> str:
    if not raw:
        return default
    value = str(raw).strip().lower()
    value = FORMAT_ALIASES.get(value, value)
    return value if value in OUTPUT_FORMATS else DEFAULT_FORMAT


def resolve_resize_spec(
    path: str,
    query: Mapping[str, str],
    default_spec: ResizeSpec = DEFAULT_ASSET_SPEC,
) -> Optional[ResizeSpec]:
    """
    Decide whether an image request should be resized.

    Returns None when the request should fall through to the plain static
    file handler: unsupported extension, or no w/h given and the path does
    not look like an uploaded asset. Uploaded assets (10+ digit run in the
    name) requested without w/h get ``default_spec``.
    """
    if not is_image_path(path):
        return None

    width = parse_dimension(query.get("w"))
    height = parse_dimension(query.get("h"))

    if width is None and height is None:
        if not looks_like_asset_name(path):
            return None
        return default_spec

    return ResizeSpec(
        target_width=width,
        target_height=height,
        quality=clamp_quality(query.get("q")),
        format=normalize_format(query.get("f")),
    )
