"""Fidelman models."""

from fidelman.models.client import Client
from fidelman.models.catalog import Establishment, Product
from fidelman.models.order import Order, OrderItem, OrderStatus, TERMINAL_STATUSES
from fidelman.models.payment import Payment, PaymentStatus
from fidelman.models.points import PointsTransaction, PointsTransactionType

__all__ = [
    "Client",
    # Catalog (read by the default CatalogBackend)
    "Establishment",
    "Product",
    # Orders
    "Order",
    "OrderItem",
    "OrderStatus",
    "TERMINAL_STATUSES",
    # Payments
    "Payment",
    "PaymentStatus",
    # Points ledger
    "PointsTransaction",
    "PointsTransactionType",
]
