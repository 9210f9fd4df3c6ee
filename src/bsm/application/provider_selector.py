from __future__ import annotations

import logging
from typing import Callable

from bsm.config import PROVIDER_KINDS, PreferenceStore, ProviderSettings, load_provider_settings
from bsm.domain.errors import ValidationError
from bsm.domain.models import User
from bsm.repositories.contracts import DataProvider
from bsm.repositories.http_provider import HttpProvider
from bsm.repositories.memory_store import MemoryStore
from bsm.repositories.seed import seed_demo_data
from bsm.services.auth_service import require_permission

log = logging.getLogger(__name__)


def default_memory_factory() -> DataProvider:
    return seed_demo_data(MemoryStore())


class ProviderSelector:
    """Builds the data provider named by the saved preferences and keeps one live instance."""

    def __init__(
        self,
        preferences: PreferenceStore,
        memory_factory: Callable[[], DataProvider] | None = None,
        http_factory: Callable[[str, PreferenceStore], DataProvider] | None = None,
    ):
        self.preferences = preferences
        self.memory_factory = memory_factory or default_memory_factory
        self.http_factory = http_factory or (lambda url, prefs: HttpProvider(url, preferences=prefs))
        self._active: DataProvider | None = None

    def settings(self) -> ProviderSettings:
        return load_provider_settings(self.preferences)

    def get_provider(self) -> DataProvider:
        if self._active is None:
            self._active = self._build(self.settings())
        return self._active

    def set_provider(self, kind: str, api_url: str | None = None, *, actor: User | None) -> DataProvider:
        """Admin-only. Persists the choice and rebuilds the provider."""
        require_permission(actor, "change_settings")
        kind = (kind or "").strip().lower()
        if kind not in PROVIDER_KINDS:
            raise ValidationError(f"Unknown data provider: {kind!r}. Expected one of {', '.join(PROVIDER_KINDS)}.")

        self.preferences.set("db_provider", kind)
        if api_url:
            self.preferences.set("api_url", api_url.strip())

        self._active = None
        provider = self.get_provider()
        log.info("provider_changed kind=%s actor=%s", kind, actor.id)
        return provider

    def _build(self, settings: ProviderSettings) -> DataProvider:
        if settings.kind == "http":
            return self.http_factory(settings.api_url, self.preferences)
        return self.memory_factory()
