# menu_backend/routers/product_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlmodel import Session

from ..db.session import get_session
from ..dependencies import get_storage, require_admin
from ..schemas import MessageResponse, ProductDetail, ProductRead
from ..services.catalog.product_service import ProductService
from ..services.storage.storage_service import StorageService

router = APIRouter(prefix="/product", tags=["Products"])


def get_service(session: Session = Depends(get_session), storage: StorageService = Depends(get_storage)):
    return ProductService(session, storage)


def product_fields(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    article: Optional[str] = Form(None),
    weight: Optional[str] = Form(None),
    categoryId: Optional[str] = Form(None),
    typeId: Optional[str] = Form(None),
    inStock: Optional[str] = Form(None),
    order: Optional[str] = Form(None),
) -> dict:
    # Multipart fields arrive as text; ProductService does the validation
    return {
        "name": name,
        "description": description,
        "price": price,
        "article": article,
        "weight": weight,
        "category_id": categoryId,
        "type_id": typeId,
        "in_stock": inStock,
        "order": order,
    }


@router.get("", response_model=List[ProductDetail])
def list_products(
    categoryId: Optional[str] = Query(None),
    typeId: Optional[str] = Query(None),
    inStock: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    service: ProductService = Depends(get_service),
):
    return service.list_products(categoryId, typeId, inStock, search)


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(product_id: int, service: ProductService = Depends(get_service)):
    return service.get_product(product_id)


@router.post("", response_model=ProductRead, dependencies=[Depends(require_admin)])
def create_product(
    fields: dict = Depends(product_fields),
    img: Optional[UploadFile] = File(None),
    service: ProductService = Depends(get_service),
):
    return service.create_product(fields, img)


@router.put("/{product_id}", response_model=ProductRead, dependencies=[Depends(require_admin)])
def update_product(
    product_id: int,
    fields: dict = Depends(product_fields),
    img: Optional[UploadFile] = File(None),
    service: ProductService = Depends(get_service),
):
    return service.update_product(product_id, fields, img)


@router.delete("/{product_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, service: ProductService = Depends(get_service)):
    service.delete_product(product_id)
    return {"message": "Product deleted"}
