import io
import os

import pytest
from PIL import Image

from conftest import make_image
from menu_backend.services.images.cache import (
    DerivedImageCache,
    SourceNotFound,
    cache_filename,
    parse_cache_filename,
)
from menu_backend.services.images.policy import ResizeSpec

SPEC = ResizeSpec(120, 70, 80, "webp")


def test_cache_filename_round_trips():
    name = cache_filename("1234567890123_desktop", SPEC)
    assert name == "1234567890123_desktop_120x70_q80.webp"
    assert parse_cache_filename(name) == ("1234567890123_desktop", 120, 70, 80, "webp")

    auto = cache_filename("logo", ResizeSpec(None, 45, 85, "png"))
    assert auto == "logo_autox45_q85.png"
    assert parse_cache_filename(auto) == ("logo", None, 45, 85, "png")


def test_parse_rejects_foreign_names():
    assert parse_cache_filename("logo.png") is None


async def test_miss_then_hit(static_dir):
    make_image(static_dir / "1234567890123_desktop.jpg")
    cache = DerivedImageCache(str(static_dir))

    first = await cache.get("/1234567890123_desktop.jpg", SPEC)
    assert first.cache_hit is False
    assert first.media_type == "image/webp"
    assert first.headers["X-Image-Cache"] == "MISS"
    assert first.headers["X-Original-Size"] == "1920x1080"
    assert first.headers["X-Processed-Size"] == "120x70"

    cached = static_dir / "cache" / "1234567890123_desktop_120x70_q80.webp"
    assert cached.is_file()
    with Image.open(cached) as img:
        assert img.size == (120, 70)

    second = await cache.get("/1234567890123_desktop.jpg", SPEC)
    assert second.cache_hit is True
    assert second.path == cached
    assert cached.read_bytes() == first.body


async def test_missing_source_creates_nothing(static_dir):
    cache = DerivedImageCache(str(static_dir))
    with pytest.raises(SourceNotFound):
        await cache.get("/nope.jpg", SPEC)
    assert not (static_dir / "cache").exists()


async def test_path_traversal_is_refused(tmp_path, static_dir):
    make_image(tmp_path / "secret.jpg", (10, 10))
    cache = DerivedImageCache(str(static_dir))
    with pytest.raises(SourceNotFound):
        await cache.get("/../secret.jpg", SPEC)


async def test_replaced_source_invalidates_entry(static_dir):
    source = make_image(static_dir / "dish.jpg", (400, 300), (255, 0, 0))
    cache = DerivedImageCache(str(static_dir))
    await cache.get("/dish.jpg", SPEC)
    cached = static_dir / "cache" / "dish_120x70_q80.webp"

    # New upload under the same name, newer than the cached variant
    make_image(source, (400, 300), (0, 0, 255))
    stamp = cached.stat().st_mtime + 10
    os.utime(source, (stamp, stamp))

    again = await cache.get("/dish.jpg", SPEC)
    assert again.cache_hit is False
    with Image.open(io.BytesIO(again.body)) as img:
        r, g, b = img.convert("RGB").getpixel((60, 35))
        assert b > r


async def test_cache_write_failure_still_serves(static_dir):
    make_image(static_dir / "dish.jpg", (400, 300))
    # A plain file where the cache directory should go makes every write fail
    (static_dir / "cache").write_text("not a directory")
    cache = DerivedImageCache(str(static_dir))

    rendered = await cache.get("/dish.jpg", SPEC)
    assert rendered.body
    assert rendered.headers["X-Image-Width"] == "120"


async def test_transcode_failure_serves_original(static_dir):
    broken = static_dir / "broken.jpg"
    broken.write_bytes(b"garbage bytes")
    cache = DerivedImageCache(str(static_dir))

    rendered = await cache.get("/broken.jpg", SPEC)
    assert rendered.optimized is False
    assert rendered.path == broken.resolve()
    assert rendered.media_type == "image/jpeg"
    assert not (static_dir / "cache").exists()


async def test_disabled_cache_always_transcodes(static_dir):
    make_image(static_dir / "dish.jpg", (400, 300))
    cache = DerivedImageCache(str(static_dir), enabled=False)

    first = await cache.get("/dish.jpg", SPEC)
    second = await cache.get("/dish.jpg", SPEC)
    assert not first.cache_hit and not second.cache_hit
    assert not (static_dir / "cache").exists()


async def test_purge_variants_only_touches_its_source(static_dir):
    make_image(static_dir / "dish.jpg", (400, 300))
    make_image(static_dir / "other.jpg", (400, 300))
    cache = DerivedImageCache(str(static_dir))
    await cache.get("/dish.jpg", SPEC)
    await cache.get("/dish.jpg", ResizeSpec(200, None, 85, "webp"))
    await cache.get("/other.jpg", SPEC)

    removed = cache.purge_variants((static_dir / "dish.jpg").resolve())
    assert removed == 2
    assert sorted(os.listdir(static_dir / "cache")) == ["other_120x70_q80.webp"]
