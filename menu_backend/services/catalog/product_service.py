# menu_backend/services/catalog/product_service.py
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import UploadFile
from sqlmodel import Session, select

from menu_backend.db.models import Category, Product, Type
from menu_backend.exceptions import ApiError
from menu_backend.services.auth.auth_service import sanitize_string
from menu_backend.services.storage.storage_service import StorageService

logger = logging.getLogger(__name__)

MAX_PRICE = 100_000
MAX_WEIGHT = 10_000


def _blank(value) -> bool:
    return value is None or str(value).strip() == ""


def _to_int(value) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def validate_price(value) -> bool:
    price = _to_int(value)
    return price is not None and 0 < price <= MAX_PRICE


def validate_weight(value) -> bool:
    # empty and "0" mean "no weight"
    if _blank(value) or str(value).strip() == "0":
        return True
    weight = _to_int(value)
    return weight is not None and 0 < weight <= MAX_WEIGHT


def validate_article(value) -> bool:
    article = _to_int(value)
    return article is not None and article >= 0


def parse_bool(value) -> bool:
    return value is True or str(value).strip().lower() == "true"


def parse_positive_id(value, message: str) -> int:
    number = _to_int(value)
    if number is None or number <= 0:
        raise ApiError.bad_request(message)
    return number


def clean_name(value) -> str:
    if _blank(value):
        raise ApiError.bad_request("Product name is required")
    name = sanitize_string(str(value))
    if len(name) < 2 or len(name) > 100:
        raise ApiError.bad_request("Invalid product name length")
    return name


class ProductService:
    def __init__(self, session: Session, storage: StorageService):
        self.session = session
        self.storage = storage

    def list_products(self, category_id: Optional[str] = None, type_id: Optional[str] = None,
                      in_stock: Optional[str] = None, search: Optional[str] = None) -> List[Product]:
        query = select(Product)
        if not _blank(category_id):
            query = query.where(Product.category_id == parse_positive_id(category_id, "Invalid category ID"))
        if not _blank(type_id):
            query = query.where(Product.type_id == parse_positive_id(type_id, "Invalid type ID"))
        if in_stock is not None:
            query = query.where(Product.in_stock == parse_bool(in_stock))

        term = sanitize_string(search) if search else ""
        if term:
            query = query.where(Product.name.ilike(f"%{term}%")).order_by(Product.name, Product.order)
        else:
            query = query.order_by(Product.order, Product.id)
        return self.session.exec(query).all()

    def get_product(self, product_id: int) -> Product:
        if product_id <= 0:
            raise ApiError.bad_request("Invalid product ID")
        product = self.session.get(Product, product_id)
        if not product:
            raise ApiError.not_found("Product not found")
        return product

    def _check_references(self, category_id: Optional[int], type_id: Optional[int]) -> None:
        if category_id is not None and not self.session.get(Category, category_id):
            raise ApiError.bad_request("Category not found")
        if type_id is not None and not self.session.get(Type, type_id):
            raise ApiError.bad_request("Type not found")

    def create_product(self, fields: Dict[str, Optional[str]], img: Optional[UploadFile]) -> Product:
        """Validate multipart fields, store the image and insert the product."""
        required = ("name", "price", "article", "category_id", "type_id")
        if any(_blank(fields.get(key)) for key in required):
            raise ApiError.bad_request("Missing required fields")

        name = clean_name(fields["name"])
        if not validate_price(fields["price"]):
            raise ApiError.bad_request("Invalid price")
        if not validate_article(fields["article"]):
            raise ApiError.bad_request("Invalid article number")
        category_id = parse_positive_id(fields["category_id"], "Invalid category ID")
        type_id = parse_positive_id(fields["type_id"], "Invalid type ID")
        weight = fields.get("weight")
        if not validate_weight(weight):
            raise ApiError.bad_request("Invalid weight")
        if img is None:
            raise ApiError.bad_request("Image is required")
        self._check_references(category_id, type_id)

        description = fields.get("description")
        in_stock = fields.get("in_stock")
        filename = self.storage.save_product_image(img)
        product = Product(
            name=name,
            description=sanitize_string(description) if not _blank(description) else None,
            price=_to_int(fields["price"]),
            article=_to_int(fields["article"]),
            weight=_to_int(weight) or None,
            category_id=category_id,
            type_id=type_id,
            in_stock=True if in_stock is None else parse_bool(in_stock),
            img=filename,
            order=_to_int(fields.get("order")) or 0,
        )
        try:
            self.session.add(product)
            self.session.commit()
        except Exception:
            self.session.rollback()
            self.storage.delete(filename)
            raise
        self.session.refresh(product)
        logger.info(f"Created product {product.id} ({product.name})")
        return product

    def update_product(self, product_id: int, fields: Dict[str, Optional[str]],
                       img: Optional[UploadFile]) -> Product:
        """Partial update: only fields that were sent are validated and applied."""
        product = self.get_product(product_id)
        updates = {}

        if fields.get("name") is not None:
            updates["name"] = clean_name(fields["name"])
        if fields.get("description") is not None:
            description = fields["description"]
            updates["description"] = sanitize_string(description) if not _blank(description) else None
        if fields.get("price") is not None:
            if not validate_price(fields["price"]):
                raise ApiError.bad_request("Invalid price")
            updates["price"] = _to_int(fields["price"])
        if fields.get("article") is not None:
            if not validate_article(fields["article"]):
                raise ApiError.bad_request("Invalid article number")
            updates["article"] = _to_int(fields["article"])
        if fields.get("weight") is not None:
            weight = fields["weight"]
            if not validate_weight(weight):
                raise ApiError.bad_request("Invalid weight")
            updates["weight"] = _to_int(weight) or None
        if fields.get("category_id") is not None:
            if _blank(fields["category_id"]):
                raise ApiError.bad_request("Category is required")
            updates["category_id"] = parse_positive_id(fields["category_id"], "Invalid category ID")
        if fields.get("type_id") is not None:
            if _blank(fields["type_id"]):
                raise ApiError.bad_request("Type is required")
            updates["type_id"] = parse_positive_id(fields["type_id"], "Invalid type ID")
        if fields.get("in_stock") is not None:
            updates["in_stock"] = parse_bool(fields["in_stock"])
        if fields.get("order") is not None:
            updates["order"] = _to_int(fields["order"]) or 0

        self._check_references(updates.get("category_id"), updates.get("type_id"))

        old_img = new_img = None
        if img is not None:
            old_img = product.img
            new_img = self.storage.save_product_image(img)
            updates["img"] = new_img

        for key, value in updates.items():
            setattr(product, key, value)
        product.updated_at = datetime.now(timezone.utc)
        try:
            self.session.add(product)
            self.session.commit()
        except Exception:
            self.session.rollback()
            self.storage.delete(new_img)
            raise
        self.session.refresh(product)

        if old_img and old_img != new_img:
            self.storage.delete(old_img)
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        img = product.img
        self.session.delete(product)
        self.session.commit()
        self.storage.delete(img)
        logger.info(f"Deleted product {product_id}")
