"""
Fidelman public API.

One classmethod per operation exposed to the transport layer. Results are
plain dicts; failures are FidelmanError subclasses (see exceptions).

ORDERS:
    OrderService.create_order(client_id, establishment_id, items)
    OrderService.list_orders(client_id)
    OrderService.list_store_orders(owner_id)
    OrderService.set_order_status(owner_id, order_id, status)
    OrderService.complete_order(owner_id, order_id)

PAYMENTS:
    OrderService.create_payment(client_id, order_id, amount, method)

POINTS (read-only views):
    OrderService.establishment_points(client_id, establishment_id)
    OrderService.points_from_orders(client_id, establishment_id)
    OrderService.all_user_points(client_id)
"""

from fidelman.services import ledger, lifecycle, orders, payments


class OrderService:
    """
    Fidelman public API.

    Uses @classmethod for extensibility (subclass and override a step).
    """

    # ======================================================================
    # ORDERS
    # ======================================================================

    @classmethod
    def create_order(cls, actor_client_id, establishment_id, items) -> dict:
        """
        Place an order for the calling client.

        Args:
            actor_client_id: Client placing the order
            establishment_id: Establishment ordered from
            items: [{"product_id": ..., "quantity": ...}, ...]

        Returns:
            Order dict with items and establishment summary
        """
        order = orders.place_order(actor_client_id, establishment_id, items)
        return orders.summarize(order, counterparty="establishment")

    @classmethod
    def list_orders(cls, actor_client_id) -> list[dict]:
        """Caller's own orders, newest first."""
        return [
            orders.summarize(o, counterparty="establishment")
            for o in orders.list_by_client(actor_client_id)
        ]

    @classmethod
    def list_store_orders(cls, actor_owner_id) -> list[dict]:
        """Orders of the caller's establishment, newest first."""
        establishment = lifecycle.owned_establishment(actor_owner_id)
        return [
            orders.summarize(o, counterparty="client")
            for o in orders.list_by_establishment(establishment.id)
        ]

    @classmethod
    def set_order_status(cls, actor_owner_id, order_id, new_status: str) -> dict:
        """Owner sets an intermediate status (or cancels)."""
        order = lifecycle.set_status(actor_owner_id, order_id, new_status)
        return orders.summarize(order, counterparty="client")

    @classmethod
    def complete_order(cls, actor_owner_id, order_id) -> dict:
        """Owner completes a ready order; its points are credited."""
        order = lifecycle.complete_order(actor_owner_id, order_id)
        return orders.summarize(order, counterparty="client")

    # ======================================================================
    # PAYMENTS
    # ======================================================================

    @classmethod
    def create_payment(cls, actor_client_id, order_id, amount, method: str) -> dict:
        """Record a pending payment for one of the caller's orders."""
        payment = payments.create_payment(actor_client_id, order_id, amount, method)
        return orders.summarize_payment(payment)

    # ======================================================================
    # POINTS
    # ======================================================================

    @classmethod
    def establishment_points(cls, client_id, establishment_id) -> dict:
        """Ledger-derived points at one establishment (never negative)."""
        return {
            "client_id": client_id,
            "establishment_id": establishment_id,
            "points": ledger.balance_for(client_id, establishment_id),
        }

    @classmethod
    def points_from_orders(cls, client_id, establishment_id) -> dict:
        """Sum of points_generated over all orders there, completed or not."""
        return ledger.points_from_orders(client_id, establishment_id)

    @classmethod
    def all_user_points(cls, client_id) -> dict:
        """Cached global balance plus ledger totals."""
        return ledger.all_user_points(client_id)
