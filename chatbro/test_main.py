"""
Tests for the ChatBRO HTTP surface — chat validation, provider failures,
key updates, status and health.
Run with: pytest chatbro -v
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from chatbro.credentials import CredentialStore
from chatbro.main import app
from chatbro.providers import ANTHROPIC_API_URL, COHERE_API_URL, OPENAI_API_URL

client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_store():
    """Every test starts with no keys, regardless of the environment."""
    app.state.credentials = CredentialStore()
    yield app.state.credentials


# --------------- Chat validation ---------------

def test_chat_empty_message(fresh_store):
    fresh_store.set_credentials({"openai": "sk-test"})
    resp = client.post("/api/chat", json={"message": "", "model": "openai"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Message is required"}


def test_chat_missing_message():
    resp = client.post("/api/chat", json={"model": "openai"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Message is required"


def test_chat_missing_model():
    resp = client.post("/api/chat", json={"message": "Hello", "model": ""})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Model is required"


def test_chat_invalid_model():
    resp = client.post("/api/chat", json={"message": "Hello", "model": "invalid-model"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid model specified"


def test_chat_unconfigured_model():
    resp = client.post("/api/chat", json={"message": "Hello", "model": "google"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Google API key not configured"


def test_chat_wrong_type_is_400_not_422():
    resp = client.post("/api/chat", json={"message": ["not", "a", "string"], "model": "openai"})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_chat_non_json_body():
    resp = client.post("/api/chat", content=b"message=hi", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert "error" in resp.json()


# --------------- Chat against mocked providers ---------------

def test_chat_openai_success(fresh_store, respx_mock):
    fresh_store.set_credentials({"openai": "sk-test"})
    route = respx_mock.post(OPENAI_API_URL).mock(
        return_value=httpx.Response(200, json={"choices": [{"message": {"content": "Hi there!"}}]})
    )
    resp = client.post("/api/chat", json={"message": "Hello", "model": "openai"})
    assert resp.status_code == 200
    assert resp.json() == {"response": "Hi there!"}
    assert route.calls.last.request.headers["Authorization"] == "Bearer sk-test"


def test_chat_cohere_success(fresh_store, respx_mock):
    fresh_store.set_credentials({"cohere": "co-test"})
    respx_mock.post(COHERE_API_URL).mock(
        return_value=httpx.Response(200, json={"generations": [{"text": "Generated."}]})
    )
    resp = client.post("/api/chat", json={"message": "Hello", "model": "cohere"})
    assert resp.status_code == 200
    assert resp.json()["response"] == "Generated."


def test_chat_provider_error_is_500(fresh_store, respx_mock):
    fresh_store.set_credentials({"anthropic": "bad-key"})
    respx_mock.post(ANTHROPIC_API_URL).mock(
        return_value=httpx.Response(
            401,
            json={"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}},
        )
    )
    resp = client.post("/api/chat", json={"message": "Hello", "model": "anthropic"})
    assert resp.status_code == 500
    assert resp.json() == {
        "error": "Failed to get response from AI model: Anthropic API error: invalid x-api-key"
    }


def test_chat_network_failure_is_500(fresh_store, respx_mock):
    fresh_store.set_credentials({"openai": "sk-test"})
    respx_mock.post(OPENAI_API_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
    resp = client.post("/api/chat", json={"message": "Hello", "model": "openai"})
    assert resp.status_code == 500
    assert "Connection refused" in resp.json()["error"]


def test_chat_non_ascii_key_is_json_500(fresh_store, respx_mock):
    # a pasted ellipsis can't go into an Authorization header
    fresh_store.set_credentials({"openai": "sk-abc…"})
    resp = client.post("/api/chat", json={"message": "hi", "model": "openai"})
    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Failed to get response from AI model: OpenAI API error:")


# --------------- Key updates ---------------

def test_update_keys_success():
    resp = client.post("/api/update-keys", json={"openai": "sk-test-key-123", "anthropic": "sk-ant-test-key-123"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "API keys updated successfully"}


def test_update_keys_merges(fresh_store):
    client.post("/api/update-keys", json={"openai": "k1"})
    client.post("/api/update-keys", json={"anthropic": "k2"})
    assert fresh_store.get("openai") == "k1"
    assert fresh_store.get("anthropic") == "k2"


def test_update_keys_empty_value_keeps_previous(fresh_store):
    client.post("/api/update-keys", json={"openai": "k1"})
    client.post("/api/update-keys", json={"openai": ""})
    assert fresh_store.get("openai") == "k1"


def test_update_keys_ignores_unknown_fields(fresh_store):
    resp = client.post("/api/update-keys", json={"mistral": "m-key"})
    assert resp.status_code == 200
    assert fresh_store.configured_providers() == []


def test_updated_key_unblocks_chat(respx_mock):
    resp = client.post("/api/chat", json={"message": "Hello", "model": "openai"})
    assert resp.status_code == 400

    client.post("/api/update-keys", json={"openai": "sk-test"})
    respx_mock.post(OPENAI_API_URL).mock(
        return_value=httpx.Response(200, json={"choices": [{"message": {"content": "Now it works"}}]})
    )
    resp = client.post("/api/chat", json={"message": "Hello", "model": "openai"})
    assert resp.status_code == 200
    assert resp.json()["response"] == "Now it works"


# --------------- Status / root / health ---------------

def test_key_status_reports_presence_only():
    client.post("/api/update-keys", json={"google": "g-secret"})
    resp = client.get("/api/key-status")
    assert resp.status_code == 200
    assert resp.json() == {"openai": False, "anthropic": False, "google": True, "cohere": False}
    assert "g-secret" not in resp.text


def test_root():
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["providers"] == ["openai", "anthropic", "google", "cohere"]


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["service"] == "chatbro"


def test_unknown_route():
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Not Found"


def test_wrong_method_uses_error_envelope():
    resp = client.get("/api/chat")
    assert resp.status_code == 405
    assert resp.json() == {"error": "Method Not Allowed"}
    assert "POST" in resp.headers["allow"]
