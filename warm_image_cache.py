#!/usr/bin/env python3
"""
Pre-generate the storefront's preset image sizes so first visitors hit the cache.

    python warm_image_cache.py            # every image in the static dir
    python warm_image_cache.py a.jpg b.png
"""
import argparse
import asyncio
import logging
import os

from menu_backend.core.config import get_settings
from menu_backend.services.images.cache import DerivedImageCache, SourceNotFound
from menu_backend.services.images.policy import is_image_path
from menu_backend.services.images.presets import warm_presets


async def warm(static_dir: str, names, fmt: str) -> int:
    cache = DerivedImageCache(static_dir)
    total = 0
    for name in names:
        try:
            produced = await warm_presets(cache, name, fmt=fmt)
        except SourceNotFound:
            print(f"⚠ {name}: not found")
            continue
        print(f"✓ {name}: {', '.join(produced) or 'nothing to do'}")
        total += len(produced)
    return total


if __name__ == "__main__":
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Pre-generate preset image variants")
    parser.add_argument("images", nargs="*")
    parser.add_argument("--static-dir", default=settings.STATIC_DIR)
    parser.add_argument("--format", default="webp", choices=["webp", "jpeg", "png"])
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)
    names = args.images or sorted(
        entry for entry in os.listdir(args.static_dir)
        if is_image_path(entry) and os.path.isfile(os.path.join(args.static_dir, entry))
    )
    count = asyncio.run(warm(args.static_dir, names, args.format))
    print(f"✅ Generated {count} variants for {len(names)} images")
