"""
Django Fidelman - Merchant loyalty orders and points.

Usage:
    from fidelman import OrderService

    order = OrderService.create_order(client_id, establishment_id, [
        {"product_id": product_id, "quantity": 2},
    ])
    OrderService.set_order_status(owner_id, order["id"], "ready")
    OrderService.complete_order(owner_id, order["id"])
    OrderService.establishment_points(client_id, establishment_id)
"""


def __getattr__(name):
    if name == "OrderService":
        from fidelman.service import OrderService

        return OrderService
    if name == "FidelmanError":
        from fidelman.exceptions import FidelmanError

        return FidelmanError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["OrderService", "FidelmanError"]
__version__ = "0.1.0"
