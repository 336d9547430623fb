#!/usr/bin/env python3
"""
Delete cached image variants older than the retention window.
Meant for cron, e.g. daily:

    python clear_image_cache.py --days 30
"""
import argparse
import logging

from menu_backend.core.config import get_settings
from menu_backend.services.images.maintenance import sweep_image_cache

if __name__ == "__main__":
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Sweep stale resized images")
    parser.add_argument("--days", type=int, default=settings.IMAGE_CACHE_MAX_AGE_DAYS)
    parser.add_argument("--static-dir", default=settings.STATIC_DIR)
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)
    print(f"🧹 Clearing cached images older than {args.days} days in {args.static_dir}...")
    report = sweep_image_cache(args.static_dir, max_age_days=args.days)
    print(f"✅ Deleted {report.deleted} files, freed {report.freed_mb} MB")
    if report.errors:
        print(f"⚠ {len(report.errors)} files could not be deleted")
