import pytest

from menu_backend.exceptions import ApiError
from menu_backend.schemas.content.settings import BooleanValue, JsonValue, NumberValue, StringValue
from menu_backend.services.content.settings_service import decode_value, encode_value


def test_encode_values_by_type():
    assert encode_value("number", "12") == "12"
    assert encode_value("number", 12.5) == "12.5"
    assert encode_value("boolean", "true") == "true"
    assert encode_value("boolean", "yes") == "false"
    assert encode_value("json", {"a": [1, 2]}) == '{"a": [1, 2]}'
    assert encode_value("string", None) == ""


@pytest.mark.parametrize("raw", ["abc", "", None, True])
def test_encode_rejects_non_numbers(raw):
    with pytest.raises(ApiError) as exc:
        encode_value("number", raw)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Invalid number value"


def test_decode_returns_tagged_values():
    assert decode_value("number", "42") == NumberValue(value=42)
    assert decode_value("number", "0.5").value == 0.5
    assert decode_value("boolean", "true") == BooleanValue(value=True)
    assert decode_value("json", '{"open": "10:00"}') == JsonValue(value={"open": "10:00"})
    assert decode_value("string", "hello") == StringValue(value="hello")


def test_undecodable_text_degrades_to_string():
    assert decode_value("json", "{broken") == StringValue(value="{broken")
    assert decode_value("number", "n/a") == StringValue(value="n/a")


def test_settings_api(client, admin_headers):
    created = [
        client.post("/api/settings", json={"key": "phone", "value": "+7 900 000-00-00", "order": 2},
                    headers=admin_headers),
        client.post("/api/settings", json={"key": "min_order", "value": "700", "type": "number", "order": 1},
                    headers=admin_headers),
        client.post("/api/settings", json={"key": "delivery_on", "value": True, "type": "boolean"},
                    headers=admin_headers),
        client.post("/api/settings", json={"key": "hours", "value": {"from": 10, "to": 23}, "type": "json"},
                    headers=admin_headers),
    ]
    assert [r.status_code for r in created] == [200, 200, 200, 200]
    assert created[1].json()["value"] == 700

    listing = client.get("/api/settings").json()
    assert [s["key"] for s in listing] == ["delivery_on", "hours", "min_order", "phone"]

    assert client.get("/api/settings/object").json() == {
        "delivery_on": True,
        "hours": {"from": 10, "to": 23},
        "min_order": 700,
        "phone": "+7 900 000-00-00",
    }

    one = client.get("/api/settings/key/hours").json()
    assert one["type"] == "json"
    assert one["value"] == {"from": 10, "to": 23}
    assert client.get("/api/settings/key/nope").status_code == 404

    setting_id = created[1].json()["id"]
    updated = client.put(f"/api/settings/{setting_id}", json={"value": "850.5"}, headers=admin_headers)
    assert updated.json()["value"] == 850.5

    bad = client.put(f"/api/settings/{setting_id}", json={"value": "lots"}, headers=admin_headers)
    assert bad.status_code == 400
    assert bad.json()["message"] == "Invalid number value"

    assert client.delete(f"/api/settings/{setting_id}", headers=admin_headers).status_code == 200
    assert "min_order" not in client.get("/api/settings/object").json()


def test_settings_mutations_are_admin_only(client, user_headers):
    response = client.post("/api/settings", json={"key": "x", "value": "y"}, headers=user_headers)
    assert response.status_code == 403
