# Image resizing package (re-export feature modules for stable imports)
from .policy import ResizeSpec, resolve_resize_spec
from .transcoder import TranscodeFailure, transcode
from .cache import DerivedImageCache, RenderedImage, SourceNotFound, cache_filename, parse_cache_filename
from .maintenance import SweepReport, sweep_image_cache

__all__ = [
    "ResizeSpec",
    "resolve_resize_spec",
    "TranscodeFailure",
    "transcode",
    "DerivedImageCache",
    "RenderedImage",
    "SourceNotFound",
    "cache_filename",
    "parse_cache_filename",
    "SweepReport",
    "sweep_image_cache",
]
