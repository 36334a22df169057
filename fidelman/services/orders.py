"""Order store - persistence and lookups.

An order and its items are written in one transaction.atomic() block, so
no reader ever sees an order without its items.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from fidelman.exceptions import NotFoundError
from fidelman.models import Client, Order, OrderItem
from fidelman.services.builder import DraftLine, build_order
from fidelman.signals import order_created

logger = logging.getLogger(__name__)


def _with_details(qs):
    return qs.select_related("client", "establishment").prefetch_related(
        "items__product",
        "payments",
    )


def create_order(
    client_id,
    establishment_id,
    total_amount: Decimal,
    points_generated: int,
    lines: Iterable[DraftLine],
) -> Order:
    """
    Persist an order and its items as a single unit.

    Raises:
        NotFoundError: CLIENT_NOT_FOUND
    """
    with transaction.atomic():
        try:
            exists = Client.objects.filter(pk=client_id, is_active=True).exists()
        except (ValueError, TypeError):
            exists = False
        if not exists:
            raise NotFoundError("CLIENT_NOT_FOUND", client_id=client_id)

        order = Order.objects.create(
            client_id=client_id,
            establishment_id=establishment_id,
            total_amount=total_amount,
            points_generated=points_generated,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    total_price=line.total_price,
                )
                for line in lines
            ]
        )

    return get_by_id(order.pk)


def place_order(client_id, establishment_id, cart_lines: Iterable) -> Order:
    """
    Build and store an order in one atomic block.

    Raises:
        NotFoundError: ESTABLISHMENT_NOT_FOUND, CLIENT_NOT_FOUND
        ValidationError: EMPTY_CART, INVALID_QUANTITY, PRODUCTS_UNAVAILABLE
    """
    with transaction.atomic():
        draft = build_order(establishment_id, cart_lines)
        order = create_order(
            client_id,
            draft.establishment_id,
            draft.total_amount,
            draft.points_generated,
            draft.lines,
        )
        transaction.on_commit(
            lambda: order_created.send(sender=Order, order=order)
        )

    logger.info(
        "Order %s placed: client=%s establishment=%s total=%s points=%s",
        order.pk,
        client_id,
        draft.establishment_id,
        draft.total_amount,
        draft.points_generated,
    )
    return order


def get_by_id(order_id) -> Order:
    """
    Get order by id with items, payments, client and establishment.

    Raises:
        NotFoundError: ORDER_NOT_FOUND
    """
    try:
        return _with_details(Order.objects.all()).get(pk=order_id)
    except (Order.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError("ORDER_NOT_FOUND", order_id=str(order_id))


def get_for_client(client_id, order_id) -> Order:
    """Get order only if it belongs to the client (else ORDER_NOT_FOUND)."""
    order = get_by_id(order_id)
    if str(order.client_id) != str(client_id):
        raise NotFoundError("ORDER_NOT_FOUND", order_id=str(order_id))
    return order


def get_for_establishment(establishment_id, order_id) -> Order:
    """Get order only if it was placed at the establishment (else ORDER_NOT_FOUND)."""
    order = get_by_id(order_id)
    if str(order.establishment_id) != str(establishment_id):
        raise NotFoundError("ORDER_NOT_FOUND", order_id=str(order_id))
    return order


def list_by_client(client_id) -> list[Order]:
    """Client's orders, newest first."""
    return list(_with_details(Order.objects.filter(client_id=client_id)).order_by("-created_at"))


def list_by_establishment(establishment_id) -> list[Order]:
    """Establishment's orders, newest first."""
    return list(
        _with_details(Order.objects.filter(establishment_id=establishment_id)).order_by(
            "-created_at"
        )
    )


# ======================================================================
# Read-side payloads
# ======================================================================


def summarize_item(item: OrderItem) -> dict:
    return {
        "id": item.pk,
        "product_id": item.product_id,
        "product_name": item.product.name,
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "total_price": item.total_price,
    }


def summarize_payment(payment) -> dict:
    return {
        "id": str(payment.pk),
        "order_id": str(payment.order_id),
        "client_id": payment.client_id,
        "amount": payment.amount,
        "method": payment.method,
        "status": payment.status,
        "transaction_id": payment.transaction_id,
        "created_at": payment.created_at,
    }


def summarize(order: Order, counterparty: str = "establishment") -> dict:
    """
    Plain-dict view of an order.

    Args:
        order: Order loaded with get_by_id/list_* (relations prefetched)
        counterparty: "establishment" (client's view) or "client" (owner's view)
    """
    data = {
        "id": str(order.pk),
        "client_id": order.client_id,
        "establishment_id": order.establishment_id,
        "status": order.status,
        "total_amount": order.total_amount,
        "points_generated": order.points_generated,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "order_items": [summarize_item(i) for i in order.items.all()],
        "payments": [summarize_payment(p) for p in order.payments.all()],
    }
    if counterparty == "client":
        data["client"] = {
            "id": order.client.pk,
            "name": order.client.name,
            "email": order.client.email,
        }
    else:
        data["establishment"] = {
            "id": order.establishment.pk,
            "name": order.establishment.name,
        }
    return data
