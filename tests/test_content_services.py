import io

import pytest
from fastapi import UploadFile
from sqlalchemy.exc import OperationalError
from sqlmodel import Session
from starlette.datastructures import Headers

from conftest import jpeg_bytes
from menu_backend.db.models import Banner, Type
from menu_backend.db.session import build_engine, create_db_and_tables
from menu_backend.services.catalog.type_service import TypeService
from menu_backend.services.content.banner_service import BannerService
from menu_backend.services.images.cache import DerivedImageCache
from menu_backend.services.storage.storage_service import StorageService


def _upload(filename: str) -> UploadFile:
    return UploadFile(file=io.BytesIO(jpeg_bytes()), filename=filename,
                      headers=Headers({"content-type": "image/jpeg"}))


@pytest.fixture
def session(settings):
    engine = build_engine(settings)
    create_db_and_tables(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


@pytest.fixture
def storage(static_dir):
    return StorageService(str(static_dir), DerivedImageCache(str(static_dir)))


def test_timestamps_are_timezone_aware():
    banner = Banner(img_desktop="a.jpg", img_mobile="b.jpg")
    assert banner.created_at.tzinfo is not None
    assert banner.updated_at.tzinfo is not None


def test_insert_and_update_round_trip(session):
    service = TypeService(session)
    created = service.create_type("Rolls")
    assert created.id is not None
    assert created.created_at is not None

    service.update_type(created.id, "Sushi")
    session.expire_all()
    assert session.get(Type, created.id).name == "Sushi"


def test_banner_update_failure_removes_new_files(session, storage, static_dir, monkeypatch):
    service = BannerService(session, storage)
    banner = service.create_banner("/promo", "1", _upload("wide.jpg"), _upload("tall.jpg"))
    originals = {banner.img_desktop, banner.img_mobile}
    banner_id = banner.id

    def failing_commit():
        raise OperationalError("UPDATE banners", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "commit", failing_commit)
    with pytest.raises(OperationalError):
        service.update_banner(banner_id, None, None, _upload("new-wide.jpg"), _upload("new-tall.jpg"))

    monkeypatch.undo()
    assert {p.name for p in static_dir.iterdir() if p.is_file()} == originals
    stored = session.get(Banner, banner_id)
    assert {stored.img_desktop, stored.img_mobile} == originals
