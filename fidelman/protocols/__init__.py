"""Fidelman protocols."""

from fidelman.protocols.catalog import (
    CatalogBackend,
    EstablishmentInfo,
    ProductInfo,
)
from fidelman.protocols.ownership import OwnershipBackend

__all__ = [
    # Catalog
    "CatalogBackend",
    "EstablishmentInfo",
    "ProductInfo",
    # Ownership
    "OwnershipBackend",
]
