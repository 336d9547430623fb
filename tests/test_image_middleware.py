import io

from PIL import Image

from conftest import make_image


def test_resize_scenario_and_cache_hit(client, static_dir):
    make_image(static_dir / "1234567890123_desktop.jpg", (1920, 1080))
    url = "/1234567890123_desktop.jpg?w=120&h=70&q=80&f=webp"

    first = client.get(url)
    assert first.status_code == 200
    assert first.headers["content-type"] == "image/webp"
    assert first.headers["x-image-cache"] == "MISS"
    assert first.headers["cache-control"] == "public, max-age=31536000, immutable"
    with Image.open(io.BytesIO(first.content)) as img:
        assert img.size == (120, 70)
    assert (static_dir / "cache" / "1234567890123_desktop_120x70_q80.webp").is_file()

    second = client.get(url)
    assert second.status_code == 200
    assert second.headers["x-image-cache"] == "HIT"
    assert second.content == first.content


def test_missing_image_returns_json_404(client, static_dir):
    response = client.get("/missing.jpg?w=100")
    assert response.status_code == 404
    body = response.json()
    assert body["message"] == "Image not found"
    assert body["status"] == 404
    assert "timestamp" in body
    assert not (static_dir / "cache").exists()


def test_asset_name_without_params_uses_default_spec(client, static_dir):
    make_image(static_dir / "9876543210987_mobile.png", (1600, 1200), fmt="PNG")
    response = client.get("/9876543210987_mobile.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/webp"
    with Image.open(io.BytesIO(response.content)) as img:
        assert img.size == (800, 600)
    assert (static_dir / "cache" / "9876543210987_mobile_800x600_q85.webp").is_file()


def test_plain_image_falls_through_to_static_files(client, static_dir):
    source = make_image(static_dir / "logo.png", (40, 40), fmt="PNG")
    response = client.get("/logo.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == source.read_bytes()
    assert "x-image-cache" not in response.headers
    assert not (static_dir / "cache").exists()


def test_unknown_static_path_is_json_404(client):
    response = client.get("/nothing-here.txt")
    assert response.status_code == 404
    assert response.json()["status"] == 404


def test_images_get_cross_origin_headers(client, static_dir):
    make_image(static_dir / "dish.jpg", (300, 200))
    response = client.get("/dish.jpg?w=100")
    assert response.headers["cross-origin-resource-policy"] == "cross-origin"
    with Image.open(io.BytesIO(response.content)) as img:
        assert img.size == (100, 67)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_undecodable_source_is_served_untouched(client, static_dir):
    broken = static_dir / "broken.jpg"
    broken.write_bytes(b"not really a jpeg")
    response = client.get("/broken.jpg?w=100&h=100")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert response.content == b"not really a jpeg"
    assert not (static_dir / "cache").exists()


def test_low_quality_is_clamped_in_cache_name(client, static_dir):
    make_image(static_dir / "dish.jpg", (300, 200))
    response = client.get("/dish.jpg?w=150&q=5")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/webp"
    assert (static_dir / "cache" / "dish_150xauto_q10.webp").is_file()
