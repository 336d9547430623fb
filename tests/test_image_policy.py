from menu_backend.services.images.policy import (
    DEFAULT_ASSET_SPEC,
    ResizeSpec,
    clamp_quality,
    normalize_format,
    resolve_resize_spec,
)


def test_explicit_dimensions_build_spec():
    spec = resolve_resize_spec("/photo.jpg", {"w": "120", "h": "70", "q": "80", "f": "webp"})
    assert spec == ResizeSpec(target_width=120, target_height=70, quality=80, format="webp")
    assert spec.fit == "cover"
    assert spec.media_type == "image/webp"


def test_single_dimension_is_inside_fit_with_defaults():
    spec = resolve_resize_spec("/photo.png", {"w": "300"})
    assert spec.target_height is None
    assert spec.fit == "inside"
    assert spec.quality == 85
    assert spec.format == "webp"


def test_quality_is_clamped():
    assert clamp_quality("5") == 10
    assert clamp_quality("500") == 100
    assert clamp_quality("abc") == 85
    assert clamp_quality(None) == 85


def test_format_aliases_and_unknown():
    assert normalize_format("jpg") == "jpeg"
    assert normalize_format("PNG") == "png"
    assert normalize_format("gif") == "webp"
    assert normalize_format(None) == "webp"


def test_asset_name_without_dimensions_gets_default_spec():
    assert resolve_resize_spec("/1234567890123_desktop.jpg", {}) == DEFAULT_ASSET_SPEC
    assert DEFAULT_ASSET_SPEC == ResizeSpec(800, 600, 85, "webp")


def test_no_intent_passes_through():
    assert resolve_resize_spec("/logo.png", {}) is None
    assert resolve_resize_spec("/logo.png", {"q": "50"}) is None


def test_unsupported_extension_passes_through():
    assert resolve_resize_spec("/menu.pdf", {"w": "100"}) is None
    assert resolve_resize_spec("/1234567890123.txt", {}) is None


def test_invalid_dimensions_are_ignored():
    assert resolve_resize_spec("/logo.png", {"w": "-5", "h": "abc"}) is None
    spec = resolve_resize_spec("/logo.png", {"w": "0", "h": "40"})
    assert spec.target_width is None and spec.target_height == 40
