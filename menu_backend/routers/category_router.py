# menu_backend/routers/category_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlmodel import Session

from ..db.session import get_session
from ..dependencies import get_storage, require_admin
from ..schemas import CategoryRead, MessageResponse
from ..services.catalog.category_service import CategoryService
from ..services.storage.storage_service import StorageService

router = APIRouter(prefix="/category", tags=["Categories"])


def get_service(session: Session = Depends(get_session), storage: StorageService = Depends(get_storage)):
    return CategoryService(session, storage)


@router.get("", response_model=List[CategoryRead])
def list_categories(service: CategoryService = Depends(get_service)):
    return service.list_categories()


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: int, service: CategoryService = Depends(get_service)):
    return service.get_category(category_id)


@router.post("", response_model=CategoryRead, dependencies=[Depends(require_admin)])
def create_category(
    name: str = Form(...),
    order: Optional[str] = Form(None),
    img: Optional[UploadFile] = File(None),
    service: CategoryService = Depends(get_service),
):
    return service.create_category(name, order, img)


@router.put("/{category_id}", response_model=CategoryRead, dependencies=[Depends(require_admin)])
def update_category(
    category_id: int,
    name: Optional[str] = Form(None),
    order: Optional[str] = Form(None),
    img: Optional[UploadFile] = File(None),
    service: CategoryService = Depends(get_service),
):
    return service.update_category(category_id, name, order, img)


@router.delete("/{category_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_category(category_id: int, service: CategoryService = Depends(get_service)):
    service.delete_category(category_id)
    return {"message": "Category deleted"}
