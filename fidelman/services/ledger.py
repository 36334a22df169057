"""Points ledger - append-only points log and cached balance.

All point mutations use transaction.atomic() with the client row locked
(select_for_update). The PointsTransaction row and the
Client.points_balance update commit together or not at all.

Three read views exist and are deliberately kept apart:

    balance_for(client, establishment)
        Ledger-derived, per establishment: max(0, gains - losses) over
        entries whose order was placed at the establishment.

    points_from_orders(client, establishment)
        Raw sum of points_generated over ALL the client's orders at the
        establishment, completed or not. Operational/debug view; it counts
        points that were never credited.

    all_user_points(client)
        Global cached Client.points_balance, next to the ledger total and
        the per-establishment ledger balances.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Case, Count, F, IntegerField, Q, Sum, Value, When
from django.db.models.functions import Coalesce

from fidelman.conf import fidelman_settings
from fidelman.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from fidelman.models import Client, Order, PointsTransaction, PointsTransactionType
from fidelman.signals import points_credited, points_debited

logger = logging.getLogger(__name__)


_SIGNED_POINTS = Case(
    When(type=PointsTransactionType.GAIN, then=F("points")),
    default=-F("points"),
    output_field=IntegerField(),
)


def _check_points(points, allow_zero: bool) -> None:
    if isinstance(points, bool) or not isinstance(points, int):
        raise ValidationError("INVALID_POINTS", points=points)
    if points < 0 or (points == 0 and not allow_zero):
        raise ValidationError("INVALID_POINTS", points=points)


def _get_client_for_update(client_id) -> Client:
    """
    Get client with row-level lock.

    MUST be called inside transaction.atomic().
    """
    try:
        return Client.objects.select_for_update().get(pk=client_id)
    except (Client.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("CLIENT_NOT_FOUND", client_id=client_id)


def credit_points(
    client_id,
    order_id,
    points: int,
    description: str = "",
) -> PointsTransaction:
    """
    Credit points earned by a completed order.

    Called from lifecycle.complete_order(), inside its transaction.

    Args:
        client_id: Client receiving the points
        order_id: Completed order the points come from
        points: Order.points_generated (>= 0)
        description: Ledger description (defaults to the order reference)

    Returns:
        Created gain PointsTransaction

    Raises:
        ValidationError: INVALID_POINTS
        NotFoundError: CLIENT_NOT_FOUND
        ConflictError: POINTS_ALREADY_CREDITED
    """
    _check_points(points, allow_zero=True)

    try:
        with transaction.atomic():
            client = _get_client_for_update(client_id)

            Client.objects.filter(pk=client.pk).update(
                points_balance=F("points_balance") + points
            )
            client.refresh_from_db(fields=["points_balance"])

            entry = PointsTransaction.objects.create(
                client=client,
                order_id=order_id,
                points=points,
                type=PointsTransactionType.GAIN,
                balance_after=client.points_balance,
                description=description or f"Points earned from order #{order_id}",
            )
    except IntegrityError:
        logger.warning("Duplicate points credit rejected for order %s", order_id)
        raise ConflictError("POINTS_ALREADY_CREDITED", order_id=str(order_id))

    transaction.on_commit(
        lambda: points_credited.send(sender=PointsTransaction, entry=entry)
    )
    logger.info(
        "Credited %s points to client %s for order %s (balance=%s)",
        points,
        client_id,
        order_id,
        entry.balance_after,
    )
    return entry


def debit_points(
    client_id,
    points: int,
    description: str = "",
    order_id=None,
) -> PointsTransaction:
    """
    Redeem points from the client's balance.

    Raises:
        ValidationError: INVALID_POINTS
        NotFoundError: CLIENT_NOT_FOUND
        InvalidStateError: INSUFFICIENT_POINTS
    """
    _check_points(points, allow_zero=False)

    with transaction.atomic():
        client = _get_client_for_update(client_id)

        if client.points_balance < points:
            raise InvalidStateError(
                "INSUFFICIENT_POINTS",
                available=client.points_balance,
                requested=points,
            )

        Client.objects.filter(pk=client.pk).update(
            points_balance=F("points_balance") - points
        )
        client.refresh_from_db(fields=["points_balance"])

        entry = PointsTransaction.objects.create(
            client=client,
            order_id=order_id,
            points=points,
            type=PointsTransactionType.LOSS,
            balance_after=client.points_balance,
            description=description,
        )

    transaction.on_commit(
        lambda: points_debited.send(sender=PointsTransaction, entry=entry)
    )
    logger.info("Debited %s points from client %s (balance=%s)", points, client_id, entry.balance_after)
    return entry


# ======================================================================
# Read views
# ======================================================================


def ledger_total(client_id) -> int:
    """Sum of all the client's ledger entries (gains minus losses)."""
    total = PointsTransaction.objects.filter(client_id=client_id).aggregate(
        total=Coalesce(Sum(_SIGNED_POINTS), Value(0))
    )["total"]
    return int(total)


def balance_for(client_id, establishment_id) -> int:
    """Ledger-derived balance at one establishment, floored at zero."""
    total = PointsTransaction.objects.filter(
        client_id=client_id,
        order__establishment_id=establishment_id,
    ).aggregate(total=Coalesce(Sum(_SIGNED_POINTS), Value(0)))["total"]
    return max(0, int(total))


def points_from_orders(client_id, establishment_id) -> dict:
    """
    Sum of points_generated over every order of the client at the
    establishment, whatever its status.
    """
    agg = Order.objects.filter(
        client_id=client_id,
        establishment_id=establishment_id,
    ).aggregate(
        points=Coalesce(Sum("points_generated"), Value(0)),
        orders_count=Count("id"),
    )
    return {
        "client_id": client_id,
        "establishment_id": establishment_id,
        "points": int(agg["points"]),
        "orders_count": agg["orders_count"],
    }


def balances_by_establishment(client_id) -> dict:
    """Ledger-derived balance per establishment id (floored at zero)."""
    rows = (
        PointsTransaction.objects.filter(client_id=client_id, order__isnull=False)
        .values("order__establishment_id")
        .annotate(total=Sum(_SIGNED_POINTS))
        .order_by("order__establishment_id")
    )
    return {row["order__establishment_id"]: max(0, int(row["total"] or 0)) for row in rows}


def all_user_points(client_id) -> dict:
    """
    Global view: cached balance, ledger total and per-establishment balances.

    Raises:
        NotFoundError: CLIENT_NOT_FOUND
    """
    try:
        client = Client.objects.get(pk=client_id)
    except (Client.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("CLIENT_NOT_FOUND", client_id=client_id)

    return {
        "client_id": client.pk,
        "points_balance": client.points_balance,
        "ledger_total": ledger_total(client.pk),
        "establishments": balances_by_establishment(client.pk),
    }


def verify_balance(client_id) -> bool:
    """True if the cached balance equals the ledger sum."""
    cached = Client.objects.filter(pk=client_id).values_list("points_balance", flat=True).first()
    if cached is None:
        raise NotFoundError("CLIENT_NOT_FOUND", client_id=client_id)
    ok = cached == ledger_total(client_id)
    if not ok:
        logger.warning("Points balance diverges from ledger for client %s", client_id)
    return ok


def divergent_clients(client_id=None) -> list[tuple[Client, int]]:
    """
    Clients whose cached balance differs from the ledger.

    Returns:
        List of (client, ledger_total)
    """
    qs = Client.objects.annotate(
        ledger=Coalesce(
            Sum(
                Case(
                    When(
                        points_transactions__type=PointsTransactionType.GAIN,
                        then=F("points_transactions__points"),
                    ),
                    When(
                        points_transactions__type=PointsTransactionType.LOSS,
                        then=-F("points_transactions__points"),
                    ),
                    default=Value(0),
                    output_field=IntegerField(),
                )
            ),
            Value(0),
        )
    ).filter(~Q(points_balance=F("ledger")))
    if client_id is not None:
        qs = qs.filter(pk=client_id)
    return [(client, int(client.ledger)) for client in qs.order_by("pk")]


def rebuild_balance(client_id) -> Client:
    """Rewrite the cached balance from the ledger (repair path)."""
    with transaction.atomic():
        client = _get_client_for_update(client_id)
        client.points_balance = max(0, ledger_total(client.pk))
        client.save(update_fields=["points_balance", "updated_at"])
    logger.warning("Rebuilt points balance for client %s: %s", client.pk, client.points_balance)
    return client


def history(client_id, limit: int | None = None) -> list[PointsTransaction]:
    """Client's ledger entries, newest first."""
    if limit is None:
        limit = fidelman_settings.LEDGER_HISTORY_LIMIT
    return list(
        PointsTransaction.objects.filter(client_id=client_id)
        .select_related("order")
        .order_by("-created_at", "-id")[:limit]
    )
