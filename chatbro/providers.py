"""
Provider adapters.

Each provider is one row in PROVIDERS: how to turn (message, key) into an
outbound request, how to pull the reply text out of a success payload, and
how to pull a human-readable message out of an error payload. The dispatcher
only ever talks to this table, so adding a provider means adding a row.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

MAX_TOKENS = 150

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL = "gpt-3.5-turbo"

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_MODEL = "claude-3-haiku-20240307"
ANTHROPIC_VERSION = "2023-06-01"

GOOGLE_MODEL = "gemini-1.5-flash"
GOOGLE_API_URL = f"https://generativelanguage.googleapis.com/v1beta/models/{GOOGLE_MODEL}:generateContent"

COHERE_API_URL = "https://api.cohere.ai/v1/generate"
COHERE_MODEL = "command"
COHERE_TEMPERATURE = 0.7


@dataclass(frozen=True)
class ProviderRequest:
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    json: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderAdapter:
    id: str
    display_name: str
    build_request: Callable[[str, str], ProviderRequest]
    extract_text: Callable[[Any], str]
    extract_error: Callable[[Any], Optional[str]]


# --------------- Shared helpers ---------------

def _json_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if extra:
        headers.update(extra)
    return headers


def _bearer(key: str) -> Dict[str, str]:
    return _json_headers({"Authorization": f"Bearer {key}"})


def _nested_error_message(payload: Any) -> Optional[str]:
    """`{"error": {"message": ...}}`, the shape OpenAI, Anthropic and Google share."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


def _top_level_error_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return None


# --------------- OpenAI ---------------

def _openai_request(message: str, key: str) -> ProviderRequest:
    return ProviderRequest(
        url=OPENAI_API_URL,
        headers=_bearer(key),
        json={
            "model": OPENAI_MODEL,
            "messages": [{"role": "user", "content": message}],
            "max_tokens": MAX_TOKENS,
        },
    )


def _openai_text(payload: Any) -> str:
    return payload["choices"][0]["message"]["content"]


# --------------- Anthropic ---------------

def _anthropic_request(message: str, key: str) -> ProviderRequest:
    return ProviderRequest(
        url=ANTHROPIC_API_URL,
        headers=_json_headers({"x-api-key": key, "anthropic-version": ANTHROPIC_VERSION}),
        json={
            "model": ANTHROPIC_MODEL,
            "max_tokens": MAX_TOKENS,
            "messages": [{"role": "user", "content": message}],
        },
    )


def _anthropic_text(payload: Any) -> str:
    return payload["content"][0]["text"]


# --------------- Google ---------------

def _google_request(message: str, key: str) -> ProviderRequest:
    # Google takes the key as a query parameter, not a header.
    return ProviderRequest(
        url=GOOGLE_API_URL,
        headers=_json_headers(),
        params={"key": key},
        json={"contents": [{"parts": [{"text": message}]}]},
    )


def _google_text(payload: Any) -> str:
    return payload["candidates"][0]["content"]["parts"][0]["text"]


# --------------- Cohere ---------------

def _cohere_request(message: str, key: str) -> ProviderRequest:
    return ProviderRequest(
        url=COHERE_API_URL,
        headers=_bearer(key),
        json={
            "model": COHERE_MODEL,
            "prompt": message,
            "max_tokens": MAX_TOKENS,
            "temperature": COHERE_TEMPERATURE,
        },
    )


def _cohere_text(payload: Any) -> str:
    return payload["generations"][0]["text"]


# --------------- Registry ---------------

PROVIDERS: Dict[str, ProviderAdapter] = {
    adapter.id: adapter
    for adapter in (
        ProviderAdapter("openai", "OpenAI", _openai_request, _openai_text, _nested_error_message),
        ProviderAdapter("anthropic", "Anthropic", _anthropic_request, _anthropic_text, _nested_error_message),
        ProviderAdapter("google", "Google", _google_request, _google_text, _nested_error_message),
        ProviderAdapter("cohere", "Cohere", _cohere_request, _cohere_text, _top_level_error_message),
    )
}

PROVIDER_IDS = tuple(PROVIDERS)


def get_provider(provider_id: str) -> Optional[ProviderAdapter]:
    return PROVIDERS.get(provider_id)
