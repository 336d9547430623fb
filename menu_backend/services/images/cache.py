"""
Derived-image cache: resized/recompressed variants of static images stored
on disk in a ``cache/`` directory next to their source.
"""

import asyncio
import logging
import mimetypes
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from .policy import ResizeSpec
from .transcoder import TranscodeFailure, transcode

logger = logging.getLogger(__name__)

CACHE_DIR_NAME = "cache"
IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"

CACHE_NAME_RE = re.compile(
    r"^(?P<base>.+)_(?P<width>\d+|auto)x(?P<height>\d+|auto)_q(?P<quality>\d+)\.(?P<format>[a-z0-9]+)$"
)


class SourceNotFound(Exception):
    """The requested source image does not exist under the static root."""


@dataclass
class RenderedImage:
    media_type: str
    body: Optional[bytes] = None
    path: Optional[Path] = None
    cache_hit: bool = False
    optimized: bool = True
    headers: Dict[str, str] = field(default_factory=dict)


def cache_filename(base_name: str, spec: ResizeSpec) -> str:
    width = spec.target_width or "auto"
    height = spec.target_height or "auto"
    return f"{base_name}_{width}x{height}_q{spec.quality}.{spec.format}"


def parse_cache_filename(name: str) -> Optional[Tuple[str, Optional[int], Optional[int], int, str]]:
    """Inverse of :func:`cache_filename`: (base, width, height, quality, format)."""
    match = CACHE_NAME_RE.match(name)
    if not match:
        return None
    width = match.group("width")
    height = match.group("height")
    return (
        match.group("base"),
        None if width == "auto" else int(width),
        None if height == "auto" else int(height),
        int(match.group("quality")),
        match.group("format"),
    )


def guess_media_type(path: Path) -> str:
    media_type, _ = mimetypes.guess_type(str(path))
    return media_type or "application/octet-stream"


class DerivedImageCache:
    def __init__(self, static_root: str, enabled: bool = True):
        self.static_root = Path(static_root).resolve()
        self.enabled = enabled

    def source_path(self, relative_path: str) -> Path:
        """Resolve a request path under the static root, refusing traversal."""
        candidate = (self.static_root / relative_path.lstrip("/")).resolve()
        if candidate != self.static_root and self.static_root not in candidate.parents:
            raise SourceNotFound(relative_path)
        if not candidate.is_file():
            raise SourceNotFound(relative_path)
        return candidate

    def cache_path(self, source: Path, spec: ResizeSpec) -> Path:
        return source.parent / CACHE_DIR_NAME / cache_filename(source.stem, spec)

    def lookup(self, source: Path, spec: ResizeSpec) -> Optional[Path]:
        """Cached variant for ``spec`` if present and not older than its source."""
        if not self.enabled:
            return None
        path = self.cache_path(source, spec)
        try:
            if path.stat().st_mtime < source.stat().st_mtime:
                logger.info(f"Stale cache entry {path.name}, source was replaced")
                return None
        except OSError:
            return None
        return path

    def store(self, path: Path, data: bytes) -> bool:
        if not self.enabled:
            return False
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            return True
        except OSError as e:
            logger.error(f"Cache write error for {path}: {e}")
            return False

    async def get(self, relative_path: str, spec: ResizeSpec) -> RenderedImage:
        source = self.source_path(relative_path)

        cached = self.lookup(source, spec)
        if cached is not None:
            return RenderedImage(
                media_type=spec.media_type,
                path=cached,
                cache_hit=True,
                headers={"Cache-Control": IMMUTABLE_CACHE_CONTROL, "X-Image-Cache": "HIT"},
            )

        try:
            result = await asyncio.to_thread(transcode, str(source), spec)
        except TranscodeFailure:
            # Serve the untouched original rather than failing the request
            return RenderedImage(
                media_type=guess_media_type(source),
                path=source,
                optimized=False,
            )

        self.store(self.cache_path(source, spec), result.data)

        return RenderedImage(
            media_type=result.media_type,
            body=result.data,
            headers={
                "Cache-Control": IMMUTABLE_CACHE_CONTROL,
                "Content-Length": str(len(result.data)),
                "X-Image-Width": str(result.width),
                "X-Image-Height": str(result.height),
                "X-Original-Size": f"{result.original_width}x{result.original_height}",
                "X-Processed-Size": f"{result.width}x{result.height}",
                "X-Content-Optimized": "true",
                "X-Image-Cache": "MISS",
            },
        )

    def purge_variants(self, source: Path) -> int:
        """Delete every cached variant derived from ``source``; returns the count."""
        cache_dir = source.parent / CACHE_DIR_NAME
        if not cache_dir.is_dir():
            return 0
        removed = 0
        for entry in cache_dir.iterdir():
            parsed = parse_cache_filename(entry.name)
            if parsed is None or parsed[0] != source.stem:
                continue
            try:
                entry.unlink()
                removed += 1
            except OSError as e:
                logger.warning(f"Could not remove cached variant {entry}: {e}")
        return removed
