"""Order state machine.

    pending -> confirmed -> preparing -> ready -> completed
    cancelled is reachable from any non-terminal state.
    completed and cancelled are terminal.

Only the owner of the order's establishment changes its status. An order
outside the caller's establishment is reported as ORDER_NOT_FOUND, the
same as a missing one.

Intermediate statuses may be set directly. Completion is gated: only
``ready`` orders complete, and completion credits the order's points in
the same transaction. The status write is a compare-and-swap
(UPDATE ... WHERE status='ready'), so concurrent completions credit once.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from fidelman.conf import get_ownership_backend
from fidelman.exceptions import InvalidStateError, NotFoundError, ValidationError
from fidelman.models import TERMINAL_STATUSES, Order, OrderStatus
from fidelman.protocols.catalog import EstablishmentInfo
from fidelman.services import ledger
from fidelman.services import orders as order_store
from fidelman.signals import order_completed, order_status_changed

logger = logging.getLogger(__name__)


def owned_establishment(owner_client_id) -> EstablishmentInfo:
    """
    Resolve the caller's establishment.

    Raises:
        NotFoundError: ESTABLISHMENT_NOT_FOUND (caller owns none)
    """
    establishment = get_ownership_backend().get_owned_establishment(owner_client_id)
    if establishment is None:
        raise NotFoundError("ESTABLISHMENT_NOT_FOUND", client_id=owner_client_id)
    return establishment


def _get_owned_order_for_update(establishment_id, order_id) -> Order:
    """
    Lock and return an order of the establishment.

    MUST be called inside transaction.atomic().
    """
    try:
        return Order.objects.select_for_update().get(
            pk=order_id,
            establishment_id=establishment_id,
        )
    except (Order.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError("ORDER_NOT_FOUND", order_id=str(order_id))


def can_transition(from_status: str, to_status: str) -> bool:
    """True if an owner may move an order from one status to another."""
    if from_status in TERMINAL_STATUSES:
        return False
    if to_status == OrderStatus.COMPLETED:
        return from_status == OrderStatus.READY
    return to_status in OrderStatus.values


def set_status(owner_client_id, order_id, new_status: str) -> Order:
    """
    Set an order's status (owner only).

    Args:
        owner_client_id: Caller; must own the order's establishment
        order_id: Order to change
        new_status: Any status except ``completed``

    Returns:
        Updated Order with details

    Raises:
        NotFoundError: ESTABLISHMENT_NOT_FOUND, ORDER_NOT_FOUND
        ValidationError: INVALID_STATUS, USE_COMPLETE_ORDER
        InvalidStateError: ORDER_TERMINAL
    """
    if new_status not in OrderStatus.values:
        raise ValidationError("INVALID_STATUS", status=new_status)
    if new_status == OrderStatus.COMPLETED:
        raise ValidationError("USE_COMPLETE_ORDER", order_id=str(order_id))

    establishment = owned_establishment(owner_client_id)

    with transaction.atomic():
        order = _get_owned_order_for_update(establishment.id, order_id)
        old_status = order.status

        if not can_transition(old_status, new_status):
            raise InvalidStateError(
                "ORDER_TERMINAL",
                order_id=str(order.pk),
                status=old_status,
            )

        order.status = new_status
        order.save(update_fields=["status", "updated_at"])

        transaction.on_commit(
            lambda: order_status_changed.send(
                sender=Order,
                order=order,
                old_status=old_status,
                new_status=new_status,
            )
        )

    logger.info("Order %s status %s -> %s", order.pk, old_status, new_status)
    return order_store.get_by_id(order.pk)


def complete_order(owner_client_id, order_id) -> Order:
    """
    Complete a ready order and credit its points, atomically.

    Returns:
        Completed Order with details

    Raises:
        NotFoundError: ESTABLISHMENT_NOT_FOUND, ORDER_NOT_FOUND
        InvalidStateError: ORDER_NOT_READY
    """
    establishment = owned_establishment(owner_client_id)

    with transaction.atomic():
        order = _get_owned_order_for_update(establishment.id, order_id)

        if order.status != OrderStatus.READY:
            logger.warning(
                "Rejected completion of order %s in status %s", order.pk, order.status
            )
            raise InvalidStateError(
                "ORDER_NOT_READY",
                order_id=str(order.pk),
                status=order.status,
            )

        # Compare-and-swap: only one caller moves ready -> completed
        swapped = Order.objects.filter(pk=order.pk, status=OrderStatus.READY).update(
            status=OrderStatus.COMPLETED,
            updated_at=timezone.now(),
        )
        if swapped != 1:
            logger.warning("Lost completion race for order %s", order.pk)
            raise InvalidStateError("ORDER_NOT_READY", order_id=str(order.pk))

        ledger.credit_points(
            order.client_id,
            order.pk,
            order.points_generated,
            description=f"Points earned from order #{order.pk}",
        )
        order.refresh_from_db()

        transaction.on_commit(
            lambda: order_completed.send(
                sender=Order,
                order=order,
                points=order.points_generated,
            )
        )

    logger.info(
        "Order %s completed: %s points to client %s",
        order.pk,
        order.points_generated,
        order.client_id,
    )
    return order_store.get_by_id(order.pk)
