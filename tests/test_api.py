import pytest

from conftest import make_settings
from storechat.services.tokens import issue_token


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_init_returns_welcome_sequence(client):
    res = client.get("/api/chat/init")
    assert res.status_code == 200
    messages = res.json()["messages"]
    assert [m["type"] for m in messages] == ["text", "action", "text", "product"]
    assert all(m["id"].startswith("msg_") for m in messages)


def test_product_message_uses_camel_case_and_omits_unset(client):
    res = client.post("/api/chat/message", json={"action": "category_speakers"})
    assert res.status_code == 200
    _, card = res.json()["messages"]

    assert card["imageUrl"].startswith("https://")
    assert card["inStock"] is True
    assert "originalPrice" not in card
    assert "image_url" not in card
    assert card["actions"][1] == {"label": "Add to Cart", "value": "cart_prod_speaker"}
    assert card["actions"][2]["url"] == "/products/prod_speaker?view=details"


def test_message_action(client):
    res = client.post("/api/chat/message", json={"action": "buy_prod_headphones"})
    assert res.status_code == 200
    text, upsell = res.json()["messages"]
    assert "Premium Wireless Headphones" in text["content"]
    assert [o["value"] for o in upsell["options"]] == ["warranty_prod_headphones", "checkout_prod_headphones"]


def test_free_text_message(client):
    res = client.post("/api/chat/message", json={"message": "I want something cheap"})
    assert res.status_code == 200
    messages = res.json()["messages"]
    assert messages[0]["content"] == "Here are our products under $100:"
    assert all(m["price"] < 100 for m in messages[1:])


def test_empty_body_gets_default_reply(client):
    res = client.post("/api/chat/message", json={})
    assert res.status_code == 200
    assert len(res.json()["messages"]) == 2


@pytest.mark.parametrize("kwargs", [
    {"content": "{not json", "headers": {"Content-Type": "application/json"}},
    {"json": ["category_speakers"]},
    {"json": {"action": 42}},
])
def test_malformed_body_is_400(client, kwargs):
    res = client.post("/api/chat/message", **kwargs)
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Error processing request"
    assert body["details"]


def test_unknown_route_is_404(client):
    res = client.get("/api/chat/history")
    assert res.status_code == 404
    assert res.json() == {"error": "Endpoint not found"}


def test_wrong_method_is_404(client):
    res = client.get("/api/chat/message")
    assert res.status_code == 404
    assert res.json() == {"error": "Endpoint not found"}


# --- Token-gated variant ---

@pytest.fixture
def locked_settings():
    return make_settings(REQUIRE_TOKEN=True, API_KEY="public-key")


@pytest.fixture
def locked_client(client, locked_settings):
    from storechat.dependencies import get_settings
    from storechat.main import app

    app.dependency_overrides[get_settings] = lambda: locked_settings
    return client


def test_token_endpoint_issues_token(locked_client):
    res = locked_client.post("/api/token", headers={"X-Api-Key": "public-key"})
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["data"]["token"].count(".") == 2
    assert isinstance(body["meta"]["timestamp"], int)


@pytest.mark.parametrize("headers", [{}, {"X-Api-Key": "wrong"}])
def test_token_endpoint_rejects_bad_key(locked_client, headers):
    res = locked_client.post("/api/token", headers=headers)
    assert res.status_code == 401
    body = res.json()
    assert body["success"] is False
    assert body["error"] == "Invalid or missing API key"
    assert "timestamp" in body["meta"]


def test_development_accepts_any_key(client):
    from storechat.dependencies import get_settings
    from storechat.main import app

    app.dependency_overrides[get_settings] = lambda: make_settings(ENVIRONMENT="development", API_KEY="secret")
    res = client.post("/api/token", headers={"X-Api-Key": "anything"})
    assert res.status_code == 200


def test_chat_requires_token_when_locked(locked_client):
    res = locked_client.get("/api/chat/init")
    assert res.status_code == 401
    body = res.json()
    assert body["success"] is False
    assert body["error"] == "Missing authorization token"


def test_chat_accepts_issued_token(locked_client):
    token = locked_client.post("/api/token", headers={"X-Api-Key": "public-key"}).json()["data"]["token"]

    res = locked_client.post(
        "/api/chat/message",
        json={"action": "show_categories"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 200
    assert res.json()["messages"][0]["content"] == "Here are our product categories:"


def test_chat_rejects_expired_token(locked_client, locked_settings):
    token = issue_token("public-key", locked_settings.TOKEN_SECRET, expires_in=-10)

    res = locked_client.get("/api/chat/init", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["error"] == "Token has expired"


def test_chat_rejects_forged_token(locked_client):
    token = issue_token("public-key", "not-the-secret")

    res = locked_client.get("/api/chat/init", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["error"] == "Invalid token signature"


def test_chat_rejects_non_ascii_token(locked_client):
    res = locked_client.get("/api/chat/init", headers={"Authorization": "Bearer é.a.b".encode("latin-1")})
    assert res.status_code == 401
    body = res.json()
    assert body["success"] is False
    assert body["error"] == "Invalid token signature"
