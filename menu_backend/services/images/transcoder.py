# menu_backend/services/images/transcoder.py
import io
import logging
from dataclasses import dataclass
from typing import Tuple

from PIL import Image, ImageOps

from .policy import ResizeSpec, MAX_QUALITY

logger = logging.getLogger(__name__)

PIL_FORMATS = {"webp": "WEBP", "jpeg": "JPEG", "jpg": "JPEG", "png": "PNG"}


class TranscodeFailure(Exception):
    """Raised when the source cannot be decoded, resized or encoded."""


@dataclass
class TranscodeResult:
    data: bytes
    width: int
    height: int
    original_width: int
    original_height: int
    format: str

    @property
    def media_type(self) -> str:
        return f"image/{self.format}"


def target_size(source_size: Tuple[int, int], spec: ResizeSpec) -> Tuple[int, int]:
    """
    Output dimensions for ``spec`` applied to an image of ``source_size``.

    Cover fit yields the requested box, shrunk to the source where the source
    is smaller. Inside fit keeps the aspect ratio and only ever downscales.
    """
    src_w, src_h = source_size
    width, height = spec.target_width, spec.target_height

    if width and height:
        return min(width, src_w), min(height, src_h)

    if width and width < src_w:
        return width, max(1, round(src_h * width / src_w))
    if height and height < src_h:
        return max(1, round(src_w * height / src_h)), height
    return src_w, src_h


def resize(img: Image.Image, spec: ResizeSpec) -> Image.Image:
    if not spec.target_width and not spec.target_height:
        return img

    size = target_size(img.size, spec)
    if size == img.size:
        return img

    if spec.fit == "cover":
        return ImageOps.fit(img, size, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5))
    return img.resize(size, Image.Resampling.LANCZOS)


def encode(img: Image.Image, fmt: str, quality: int) -> bytes:
    pil_format = PIL_FORMATS.get(fmt, "WEBP")
    output = io.BytesIO()

    if pil_format == "JPEG":
        # JPEG has no alpha channel
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(output, format="JPEG", quality=quality, optimize=True)
    elif pil_format == "PNG":
        if quality < MAX_QUALITY:
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA")
            colors = max(2, min(256, round(256 * quality / MAX_QUALITY)))
            img = img.quantize(colors=colors, method=Image.Quantize.FASTOCTREE)
        img.save(output, format="PNG", optimize=True)
    else:
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if "A" in img.getbands() or img.mode == "P" else "RGB")
        img.save(output, format="WEBP", quality=quality)

    return output.getvalue()


def transcode(source_path: str, spec: ResizeSpec) -> TranscodeResult:
    """Resize and re-encode ``source_path`` according to ``spec``."""
    try:
        with Image.open(source_path) as img:
            img.load()
            original_width, original_height = img.size
            processed = resize(img, spec)
            data = encode(processed, spec.format, spec.quality)
            width, height = processed.size
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error(f"Error transcoding {source_path}: {e}")
        raise TranscodeFailure(str(e)) from e

    fmt = spec.format if spec.format in PIL_FORMATS else "webp"
    if fmt == "jpg":
        fmt = "jpeg"
    return TranscodeResult(
        data=data,
        width=width,
        height=height,
        original_width=original_width,
        original_height=original_height,
        format=fmt,
    )
