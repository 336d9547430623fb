# menu_backend/services/orders/frontpad_service.py
"""
Order relay to the Frontpad restaurant-management API.

Frontpad takes form-encoded POSTs to ``index.php?<action>`` and answers with
JSON ``{"result": "success" | "error", "error": <code>, ...}``.
"""

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from menu_backend.core.config import Settings
from menu_backend.exceptions import ApiError
from menu_backend.schemas.orders.order import OrderRequest

logger = logging.getLogger(__name__)

# Text shown to restaurant staff in the order comment
PICKUP_MARK = "САМОВЫВОЗ"
COMMENT_PREFIX = "Комментарий: "
SCHEDULED_PREFIX = "Клиент заказал на "

ERROR_MESSAGES = {
    "cash_close": "The shift is closed. Please try to place the order later.",
    "invalid_product_keys": "Some products in your order are unavailable. Refresh the page and try again.",
    "invalid_certificate": "Invalid certificate number",
    "invalid_secret": "Order system configuration error",
    "requests_limit": "Too many requests. Please try again in a minute.",
    "api_off": "The order system is temporarily unavailable",
}

FormData = List[Tuple[str, str]]


def normalize_phone(phone: Optional[str]) -> str:
    """'8 (900) 123-45-67' -> '+79001234567'"""
    if not phone:
        return ""
    digits = re.sub(r"\D", "", phone)
    return "+" + re.sub(r"^8", "7", digits)


def is_delivery(flag: Any) -> bool:
    return flag is True or flag == "true" or (flag == 1 and not isinstance(flag, bool))


def build_comment(order: OrderRequest, delivery: bool) -> str:
    parts = []
    if not delivery:
        parts.append(PICKUP_MARK)
    if order.comment:
        parts.append(f"{COMMENT_PREFIX}{order.comment}")
    descr = ". ".join(parts)

    # only "DD.MM.YYYY HH:MM"-like times are forwarded
    if not order.deliveryNow and order.time and " " in order.time and ":" in order.time:
        scheduled = f"{SCHEDULED_PREFIX}{order.time}"
        descr = f"{scheduled}. {descr}" if descr else scheduled
    return descr


def build_order_form(order: OrderRequest, secret: str, affiliates: Dict[str, int]) -> FormData:
    delivery = is_delivery(order.typeIsDelivery)
    fields: List[Tuple[str, Any]] = [
        ("secret", secret),
        ("name", order.name),
        ("phone", normalize_phone(order.phone)),
        ("mail", order.email or ""),
        ("descr", build_comment(order, delivery)),
        ("person", order.persons or 1),
    ]
    if delivery:
        fields += [
            ("street", order.street),
            ("home", order.houseNumber),
            ("pod", order.entrance),
            ("et", order.floor),
            ("apart", order.apartmentNumber),
        ]
    elif order.deliveryBranch in affiliates:
        fields.append(("affiliate", affiliates[order.deliveryBranch]))

    form = [(key, str(value)) for key, value in fields if value is not None and value != ""]
    for index, item in enumerate(order.items):
        key = item.article if item.article not in (None, "") else item.id
        form.append((f"product[{index}]", str(key)))
        form.append((f"product_kol[{index}]", str(item.quantity)))
    return form


def _indexed(mapping: Any) -> Dict[str, Any]:
    # Frontpad returns parallel arrays either as lists or as index-keyed objects
    if isinstance(mapping, list):
        return {str(i): value for i, value in enumerate(mapping)}
    return {str(k): v for k, v in (mapping or {}).items()}


def _price(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def parse_product_list(payload: Dict[str, Any], with_sale: bool = False) -> List[Dict[str, Any]]:
    ids = _indexed(payload.get("product_id"))
    names = _indexed(payload.get("name"))
    prices = _indexed(payload.get("price"))
    sales = _indexed(payload.get("sale"))

    products = []
    for key, product_id in ids.items():
        product = {"id": product_id, "name": names.get(key), "price": _price(prices.get(key))}
        if with_sale:
            product["saleEnabled"] = str(sales.get(key)) == "1"
        products.append(product)
    return products


class FrontpadService:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.api_url = settings.FRONTPAD_API_URL

    async def _call(self, action: str, form: FormData, timeout: float) -> Dict[str, Any]:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.post(f"{self.api_url}?{action}", data=form) as response:
                return await response.json(content_type=None)

    def _require_secret(self, message: str) -> str:
        if not self.settings.frontpad_configured:
            raise ApiError(503, message)
        return self.settings.FRONTPAD_SECRET

    async def send_order(self, order: OrderRequest) -> Dict[str, Any]:
        secret = self._require_secret("Ordering is temporarily unavailable. Please contact the administrator.")
        form = build_order_form(order, secret, self.settings.frontpad_affiliates)

        try:
            payload = await self._call("new_order", form, self.settings.FRONTPAD_ORDER_TIMEOUT_SEC)
        except asyncio.TimeoutError:
            logger.error("Frontpad did not answer the order in time")
            raise ApiError(408, "The restaurant did not respond in time. Please try again later.")
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error sending order to Frontpad: {e}")
            raise ApiError.internal("Internal server error while sending the order")

        if payload.get("result") == "success":
            logger.info(f"Frontpad accepted order {payload.get('order_id')}")
            return {
                "success": True,
                "message": "Order sent to the restaurant",
                "frontpadOrderId": payload.get("order_id"),
                "frontpadOrderNumber": payload.get("order_number"),
                "warnings": payload.get("warnings") or None,
            }

        code = payload.get("error")
        logger.warning(f"Frontpad rejected order: {code}")
        message = ERROR_MESSAGES.get(code, f"Error: {code}")
        raise ApiError(400, message, extra={"error": code})

    async def get_products(self) -> List[Dict[str, Any]]:
        secret = self._require_secret("Product lookup is temporarily unavailable.")
        try:
            payload = await self._call("get_products", [("secret", secret)], self.settings.FRONTPAD_LOOKUP_TIMEOUT_SEC)
        except (asyncio.TimeoutError, aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error fetching Frontpad products: {e}")
            raise ApiError.internal("Error fetching the product list")

        if payload.get("result") != "success":
            raise ApiError.not_found("Products not found")
        return parse_product_list(payload, with_sale=True)

    async def get_stops(self) -> Dict[str, Any]:
        secret = self._require_secret("Stop list lookup is temporarily unavailable.")
        try:
            payload = await self._call("get_stops", [("secret", secret)], self.settings.FRONTPAD_LOOKUP_TIMEOUT_SEC)
        except (asyncio.TimeoutError, aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error fetching Frontpad stop list: {e}")
            raise ApiError.internal("Error fetching the stop list")

        if payload.get("result") != "success":
            raise ApiError.internal("Error fetching the stop list")
        if payload.get("error") == "no_stops":
            return {"success": True, "stops": [], "message": "No products in the stop list"}
        return {"success": True, "stops": parse_product_list(payload)}
