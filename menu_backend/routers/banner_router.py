# menu_backend/routers/banner_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlmodel import Session

from ..db.session import get_session
from ..dependencies import get_storage, require_admin
from ..schemas import BannerRead, MessageResponse
from ..services.content.banner_service import BannerService
from ..services.storage.storage_service import StorageService

router = APIRouter(prefix="/banner", tags=["Banners"])


def get_service(session: Session = Depends(get_session), storage: StorageService = Depends(get_storage)):
    return BannerService(session, storage)


@router.get("", response_model=List[BannerRead])
def list_banners(service: BannerService = Depends(get_service)):
    return service.list_banners()


@router.get("/{banner_id}", response_model=BannerRead)
def get_banner(banner_id: int, service: BannerService = Depends(get_service)):
    return service.get_banner(banner_id)


@router.post("", response_model=BannerRead, dependencies=[Depends(require_admin)])
def create_banner(
    link: str = Form(""),
    order: Optional[str] = Form(None),
    imgDesktop: Optional[UploadFile] = File(None),
    imgMobile: Optional[UploadFile] = File(None),
    service: BannerService = Depends(get_service),
):
    return service.create_banner(link, order, imgDesktop, imgMobile)


@router.put("/{banner_id}", response_model=BannerRead, dependencies=[Depends(require_admin)])
def update_banner(
    banner_id: int,
    link: Optional[str] = Form(None),
    order: Optional[str] = Form(None),
    imgDesktop: Optional[UploadFile] = File(None),
    imgMobile: Optional[UploadFile] = File(None),
    service: BannerService = Depends(get_service),
):
    return service.update_banner(banner_id, link, order, imgDesktop, imgMobile)


@router.delete("/{banner_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_banner(banner_id: int, service: BannerService = Depends(get_service)):
    service.delete_banner(banner_id)
    return {"message": "Banner deleted"}
