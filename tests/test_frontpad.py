import asyncio

import pytest

from menu_backend.exceptions import ApiError
from menu_backend.schemas.orders.order import OrderRequest
from menu_backend.services.orders.frontpad_service import (
    FrontpadService,
    build_order_form,
    normalize_phone,
)

AFFILIATES = {"Lesoparkovaya 27": 238}


def _order(**overrides):
    data = {
        "name": "Ivan",
        "phone": "8 (900) 123-45-67",
        "typeIsDelivery": True,
        "street": "Lenina",
        "houseNumber": "5",
        "apartmentNumber": "12",
        "items": [{"id": 1, "article": 1001, "quantity": 2}, {"id": 7, "quantity": 1}],
        "persons": 2,
    }
    data.update(overrides)
    return OrderRequest(**data)


@pytest.fixture
def relay(settings):
    settings.FRONTPAD_SECRET = "s3cret"
    settings.FRONTPAD_AFFILIATES = '{"Lesoparkovaya 27": 238}'
    return FrontpadService(settings)


def test_normalize_phone():
    assert normalize_phone("8 (900) 123-45-67") == "+79001234567"
    assert normalize_phone("+7 900 123 45 67") == "+79001234567"
    assert normalize_phone(None) == ""


def test_delivery_form():
    form = dict(build_order_form(_order(comment="No onions"), "s3cret", AFFILIATES))
    assert form["secret"] == "s3cret"
    assert form["phone"] == "+79001234567"
    assert form["street"] == "Lenina"
    assert form["home"] == "5"
    assert form["apart"] == "12"
    assert form["person"] == "2"
    assert form["descr"] == "Комментарий: No onions"
    # empty values are not sent
    assert "pod" not in form and "et" not in form and "mail" not in form
    assert "affiliate" not in form
    assert form["product[0]"] == "1001"
    assert form["product_kol[0]"] == "2"
    assert form["product[1]"] == "7"


def test_pickup_form_uses_affiliate_and_marks_comment():
    order = _order(typeIsDelivery="false", deliveryBranch="Lesoparkovaya 27", street="ignored")
    form = dict(build_order_form(order, "s3cret", AFFILIATES))
    assert form["affiliate"] == "238"
    assert "street" not in form
    assert form["descr"] == "САМОВЫВОЗ"


def test_unknown_branch_sends_no_affiliate():
    form = dict(build_order_form(_order(typeIsDelivery=False, deliveryBranch="Main"), "s", AFFILIATES))
    assert "affiliate" not in form


def test_scheduled_time_leads_the_comment():
    order = _order(deliveryNow=False, time="12.03.2025 18:30", comment="Call first")
    descr = dict(build_order_form(order, "s", AFFILIATES))["descr"]
    assert descr == "Клиент заказал на 12.03.2025 18:30. Комментарий: Call first"

    loose = _order(deliveryNow=False, time="soon")
    assert "descr" not in dict(build_order_form(loose, "s", AFFILIATES))


async def test_send_order_success(relay, monkeypatch):
    calls = []

    async def fake_call(action, form, timeout):
        calls.append((action, dict(form), timeout))
        return {"result": "success", "order_id": 555, "order_number": "A-12"}

    monkeypatch.setattr(relay, "_call", fake_call)
    result = await relay.send_order(_order())
    assert result["success"] is True
    assert result["frontpadOrderId"] == 555
    assert result["frontpadOrderNumber"] == "A-12"
    assert calls[0][0] == "new_order"
    assert calls[0][2] == 30.0


@pytest.mark.parametrize(
    "code, message",
    [
        ("cash_close", "The shift is closed. Please try to place the order later."),
        ("requests_limit", "Too many requests. Please try again in a minute."),
        ("weird_code", "Error: weird_code"),
    ],
)
async def test_send_order_error_codes(relay, monkeypatch, code, message):
    async def fake_call(action, form, timeout):
        return {"result": "error", "error": code}

    monkeypatch.setattr(relay, "_call", fake_call)
    with pytest.raises(ApiError) as exc:
        await relay.send_order(_order())
    assert exc.value.status_code == 400
    assert exc.value.detail == message
    assert exc.value.extra == {"error": code}


async def test_send_order_timeout(relay, monkeypatch):
    async def fake_call(action, form, timeout):
        raise asyncio.TimeoutError()

    monkeypatch.setattr(relay, "_call", fake_call)
    with pytest.raises(ApiError) as exc:
        await relay.send_order(_order())
    assert exc.value.status_code == 408


async def test_stops(relay, monkeypatch):
    async def no_stops(action, form, timeout):
        return {"result": "success", "error": "no_stops"}

    monkeypatch.setattr(relay, "_call", no_stops)
    assert (await relay.get_stops())["stops"] == []

    async def some_stops(action, form, timeout):
        return {"result": "success", "product_id": {"0": "11"}, "name": {"0": "Ramen"}, "price": {"0": "350.5"}}

    monkeypatch.setattr(relay, "_call", some_stops)
    assert (await relay.get_stops())["stops"] == [{"id": "11", "name": "Ramen", "price": 350.5}]


async def test_products(relay, monkeypatch):
    async def products(action, form, timeout):
        assert action == "get_products"
        return {
            "result": "success",
            "product_id": ["1", "2"],
            "name": ["Tea", "Coffee"],
            "price": ["100", "bad"],
            "sale": ["1", "0"],
        }

    monkeypatch.setattr(relay, "_call", products)
    assert await relay.get_products() == [
        {"id": "1", "name": "Tea", "price": 100.0, "saleEnabled": True},
        {"id": "2", "name": "Coffee", "price": 0.0, "saleEnabled": False},
    ]


def test_unconfigured_relay_is_503(client):
    response = client.post("/api/frontpad/send-order", json={"items": [{"id": 1, "quantity": 1}]})
    assert response.status_code == 503
    assert client.get("/api/frontpad/stops").status_code == 503


def test_rejected_order_over_http(client, app, monkeypatch):
    app.state.settings.FRONTPAD_SECRET = "s3cret"

    async def fake_call(action, form, timeout):
        return {"result": "error", "error": "invalid_product_keys"}

    monkeypatch.setattr(app.state.frontpad, "_call", fake_call)
    response = client.post("/api/frontpad/send-order", json={"items": [{"id": 1, "quantity": 1}]})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "invalid_product_keys"
    assert body["status"] == 400
