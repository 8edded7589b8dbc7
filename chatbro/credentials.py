"""ChatBRO — in-memory API key store.

Keys live for the lifetime of the process and are never written to disk.
"""

import logging
import os
from typing import Dict, List, Mapping, Optional

from chatbro.providers import PROVIDER_IDS

logger = logging.getLogger(__name__)


class CredentialStore:
    """Provider id -> API key, owned by the app and injected per request.

    Updates build a new dict and swap it in with one assignment, so a reader
    holding the old mapping never sees a half-applied update.
    """

    def __init__(self, initial: Optional[Mapping[str, Optional[str]]] = None):
        self._keys: Dict[str, str] = {}
        if initial:
            self.set_credentials(initial)

    @classmethod
    def from_env(cls) -> "CredentialStore":
        """Seed from OPENAI_API_KEY, ANTHROPIC_API_KEY, GOOGLE_API_KEY, COHERE_API_KEY."""
        return cls({pid: os.getenv(f"{pid.upper()}_API_KEY", "") for pid in PROVIDER_IDS})

    def set_credentials(self, partial: Mapping[str, Optional[str]]) -> List[str]:
        """Merge non-empty keys for known providers. Returns the ids that were set."""
        updated = dict(self._keys)
        changed = []
        for provider_id in PROVIDER_IDS:
            value = partial.get(provider_id)
            if not value:
                continue
            updated[provider_id] = value
            changed.append(provider_id)

        ignored = sorted(set(partial) - set(PROVIDER_IDS))
        if ignored:
            logger.warning("Ignoring keys for unknown providers: %s", ", ".join(ignored))

        self._keys = updated
        return changed

    def get(self, provider_id: str) -> Optional[str]:
        return self._keys.get(provider_id) or None

    def get_status(self) -> Dict[str, bool]:
        return {provider_id: provider_id in self._keys for provider_id in PROVIDER_IDS}

    def configured_providers(self) -> List[str]:
        return [provider_id for provider_id in PROVIDER_IDS if provider_id in self._keys]

    def __repr__(self) -> str:
        # never print the keys themselves
        return f"CredentialStore(configured={self.configured_providers()})"
