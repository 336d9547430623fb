# menu_backend/services/images/maintenance.py
import logging
import os
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .cache import CACHE_DIR_NAME

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class SweepReport:
    deleted: int = 0
    freed_bytes: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def freed_mb(self) -> float:
        return round(self.freed_bytes / (1024 * 1024), 2)


def sweep_image_cache(static_root: str, max_age_days: int = 30, now: Optional[float] = None) -> SweepReport:
    """
    Delete cached image variants older than ``max_age_days``.

    Every ``cache/`` directory below ``static_root`` is scanned; source images
    are never touched.
    """
    report = SweepReport()
    if not os.path.isdir(static_root):
        logger.warning(f"Static directory not found: {static_root}")
        return report

    current = time.time() if now is None else now
    max_age = max_age_days * SECONDS_PER_DAY

    for dirpath, _dirnames, filenames in os.walk(static_root):
        if CACHE_DIR_NAME not in os.path.relpath(dirpath, static_root).split(os.sep):
            continue
        for name in filenames:
            path = os.path.join(dirpath, name)
            try:
                stats = os.stat(path)
                if current - stats.st_mtime <= max_age:
                    continue
                os.remove(path)
                report.deleted += 1
                report.freed_bytes += stats.st_size
                logger.debug(f"Deleted cached variant {path}")
            except OSError as e:
                logger.error(f"Error deleting {path}: {e}")
                report.errors.append(path)

    logger.info(f"Image cache sweep: deleted {report.deleted} files, freed {report.freed_mb} MB")
    return report
