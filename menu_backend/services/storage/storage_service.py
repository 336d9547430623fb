# menu_backend/services/storage/storage_service.py
import os
import re
import time
import uuid
import logging
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from menu_backend.exceptions import ApiError
from menu_backend.services.images.cache import DerivedImageCache

logger = logging.getLogger(__name__)

MIME_TO_EXT = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}
PRODUCT_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}

TRANSLIT = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo",
    "ж": "zh", "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m",
    "н": "n", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "х": "h", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "",
    "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}


def transliterate(text: str) -> str:
    """Latin slug for a (possibly Cyrillic) name: 'Горячие роллы' -> 'goryachie-rolly'."""
    out = "".join(TRANSLIT.get(ch, ch) for ch in text.lower())
    out = re.sub(r"[^a-z0-9\s-]", "", out)
    out = re.sub(r"\s+", "-", out)
    out = re.sub(r"-+", "-", out)
    return out.strip("-")


def safe_filename(name: Optional[str]) -> str:
    base, ext = os.path.splitext(os.path.basename(name or ""))
    base = re.sub(r"[^A-Za-z0-9_-]", "", base) or "image"
    ext = re.sub(r"[^A-Za-z0-9.]", "", ext).lower()
    return f"{base}{ext}"


def epoch_millis() -> int:
    return int(time.time() * 1000)


class StorageService:
    """Places uploaded images under the static root and removes replaced ones."""

    def __init__(self, static_dir: str, image_cache: Optional[DerivedImageCache] = None,
                 min_product_size: int = 100, max_product_size: int = 50 * 1024 * 1024):
        self.static_dir = static_dir
        self.image_cache = image_cache
        self.min_product_size = min_product_size
        self.max_product_size = max_product_size
        os.makedirs(self.static_dir, exist_ok=True)

    def _write(self, file: UploadFile, filename: str) -> str:
        path = os.path.join(self.static_dir, filename)
        file.file.seek(0)
        with open(path, "wb") as f:
            while chunk := file.file.read(1024 * 1024):
                f.write(chunk)
        logger.info(f"Stored upload as {filename}")
        return filename

    @staticmethod
    def _size(file: UploadFile) -> int:
        file.file.seek(0, 2)
        size = file.file.tell()
        file.file.seek(0)
        return size

    def validate_product_image(self, file: UploadFile) -> None:
        if file.content_type not in MIME_TO_EXT:
            raise ApiError.bad_request("Invalid image file. Please upload a valid JPEG, PNG or WebP image.")
        size = self._size(file)
        if size < self.min_product_size or size > self.max_product_size:
            raise ApiError.bad_request("Invalid image file. Please upload a valid JPEG, PNG or WebP image.")
        ext = os.path.splitext(file.filename or "")[1].lower()
        if ext and ext not in PRODUCT_IMAGE_EXTENSIONS:
            raise ApiError.bad_request("Invalid image file. Please upload a valid JPEG, PNG or WebP image.")

    def save_product_image(self, file: UploadFile) -> str:
        self.validate_product_image(file)
        filename = f"{uuid.uuid4()}{MIME_TO_EXT[file.content_type]}"
        return self._write(file, filename)

    def save_category_preview(self, file: UploadFile, category_name: str) -> str:
        if not (file.content_type or "").startswith("image/"):
            raise ApiError.bad_request("Uploaded file is not an image")
        ext = (file.filename or "").rsplit(".", 1)[-1].lower() if "." in (file.filename or "") else "jpg"
        slug = transliterate(category_name) or "category"
        return self._write(file, f"{slug}_{epoch_millis()}.{ext}")

    def save_banner_image(self, file: UploadFile, variant: str) -> str:
        if not (file.content_type or "").startswith("image/"):
            raise ApiError.bad_request("Uploaded file is not an image")
        return self._write(file, f"{epoch_millis()}_{variant}_{safe_filename(file.filename)}")

    def delete(self, filename: Optional[str]) -> bool:
        """Delete a stored file and every cached variant derived from it."""
        if not filename:
            return False
        path = os.path.join(self.static_dir, os.path.basename(filename))
        if self.image_cache is not None:
            self.image_cache.purge_variants(Path(path).resolve())
        try:
            os.remove(path)
            logger.info(f"Deleted stored file {filename}")
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Error deleting {filename}: {e}")
            return False
