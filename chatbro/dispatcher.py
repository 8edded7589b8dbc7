"""
Provider Dispatcher

Validates a chat request, looks the provider up in the adapter table, makes
exactly one outbound call and returns the reply text. Every failure leaves
as a DispatchError subclass; nothing is retried.
"""

import logging
from typing import Mapping, Optional, Union

import httpx

from chatbro.credentials import CredentialStore
from chatbro.exceptions import (
    MissingCredentialError,
    MissingMessageError,
    MissingModelError,
    ProviderError,
    UnknownModelError,
)
from chatbro.providers import ProviderAdapter, get_provider

logger = logging.getLogger(__name__)

Credentials = Union[CredentialStore, Mapping[str, str]]


def resolve(message: Optional[str], model: Optional[str], credentials: Credentials):
    """Run the validation chain. Returns (adapter, key); first failing check wins."""
    if not message:
        raise MissingMessageError()
    if not model:
        raise MissingModelError()

    adapter = get_provider(model)
    if adapter is None:
        raise UnknownModelError()

    key = credentials.get(model)
    if not key:
        raise MissingCredentialError(adapter.display_name)
    return adapter, key


async def dispatch(message: Optional[str], model: Optional[str], credentials: Credentials) -> str:
    adapter, key = resolve(message, model, credentials)

    logger.info("Calling %s API (%d chars)", adapter.display_name, len(message))

    # No timeout override: httpx's default applies.
    # ValueError covers keys httpx cannot encode into a header (UnicodeEncodeError).
    try:
        request = adapter.build_request(message, key)
        async with httpx.AsyncClient() as client:
            response = await client.post(
                request.url,
                headers=request.headers,
                params=request.params or None,
                json=request.json,
            )
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("%s API request failed: %s", adapter.display_name, e)
        raise ProviderError(adapter.display_name, str(e) or type(e).__name__)

    if response.is_error:
        detail = _error_detail(adapter, response)
        logger.warning("%s API returned %s: %s", adapter.display_name, response.status_code, detail)
        raise ProviderError(adapter.display_name, detail)

    return _extract(adapter, response)


def _error_detail(adapter: ProviderAdapter, response: httpx.Response) -> str:
    """Prefer the provider's own message, fall back to the status line."""
    try:
        detail = adapter.extract_error(response.json())
    except ValueError:
        detail = None
    return detail or f"Request failed with status code {response.status_code}"


def _extract(adapter: ProviderAdapter, response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        raise ProviderError(adapter.display_name, "Response body is not valid JSON")

    try:
        text = adapter.extract_text(payload)
    except (KeyError, IndexError, TypeError) as e:
        logger.warning("%s API response missing expected field: %r", adapter.display_name, e)
        raise ProviderError(adapter.display_name, f"Unexpected response format: {e!r}")

    if not isinstance(text, str) or not text:
        raise ProviderError(adapter.display_name, "Empty response from provider")
    return text
