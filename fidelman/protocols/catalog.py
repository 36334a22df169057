"""Catalog lookup protocol (establishments and sellable products)."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class EstablishmentInfo:
    """Establishment summary."""

    id: int
    name: str
    owner_id: int | None = None


@dataclass(frozen=True)
class ProductInfo:
    """Sellable product with its current price."""

    id: int
    establishment_id: int
    name: str
    price: Decimal


@runtime_checkable
class CatalogBackend(Protocol):
    """
    Protocol for resolving catalog records.

    Implemented by adapters/catalog.py (Django models).

    Configuration in settings.py:
        FIDELMAN = {
            "CATALOG_BACKEND": "fidelman.adapters.catalog.DjangoCatalogBackend",
        }
    """

    def get_establishment(self, establishment_id) -> EstablishmentInfo | None:
        """Return establishment by id, or None if it does not exist."""
        ...

    def get_sellable_products(
        self,
        establishment_id,
        product_ids: list,
    ) -> list[ProductInfo]:
        """
        Return the products among ``product_ids`` that belong to the
        establishment and are currently active.

        Unknown, foreign and inactive ids are simply absent from the result.
        """
        ...
