"""
Fidelman configuration.

Usage in settings.py:
    FIDELMAN = {
        "POINTS_CURRENCY_UNIT": 10,
        "CATALOG_BACKEND": "fidelman.adapters.catalog.DjangoCatalogBackend",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class FidelmanSettings:
    """Fidelman configuration settings."""

    # Points policy: 1 point per N currency units spent (deployment-wide)
    POINTS_CURRENCY_UNIT: int = 10

    # Collaborator backends (dotted paths)
    CATALOG_BACKEND: str = "fidelman.adapters.catalog.DjangoCatalogBackend"
    OWNERSHIP_BACKEND: str = "fidelman.adapters.ownership.DjangoOwnershipBackend"

    # Payment transaction ids: "<prefix>_<epoch ms>_<random>"
    TRANSACTION_ID_PREFIX: str = "tx"

    # Default size of ledger history listings
    LEDGER_HISTORY_LIMIT: int = 50


def get_fidelman_settings() -> FidelmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "FIDELMAN", {})
    return FidelmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_fidelman_settings(), name)


fidelman_settings = _LazySettings()


def get_catalog_backend():
    """Instantiate the configured CatalogBackend."""
    from django.utils.module_loading import import_string

    return import_string(fidelman_settings.CATALOG_BACKEND)()


def get_ownership_backend():
    """Instantiate the configured OwnershipBackend."""
    from django.utils.module_loading import import_string

    return import_string(fidelman_settings.OWNERSHIP_BACKEND)()
