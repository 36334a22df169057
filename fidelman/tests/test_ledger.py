"""Tests for the points ledger and its balance views."""

import pytest

from fidelman.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from fidelman.models import Client, Order, OrderStatus, PointsTransaction
from fidelman.services import ledger, lifecycle, orders


pytestmark = pytest.mark.django_db


@pytest.fixture
def completed_order(owner, ready_order):
    return lifecycle.complete_order(owner.pk, ready_order.pk)


class TestCreditPoints:
    """credit_points."""

    def test_credit_updates_balance_and_ledger(self, client_maria, pending_order):
        entry = ledger.credit_points(client_maria.pk, pending_order.pk, 5)

        client_maria.refresh_from_db()
        assert client_maria.points_balance == 5
        assert entry.balance_after == 5
        assert entry.type == "gain"
        assert entry.description == f"Points earned from order #{pending_order.pk}"

    def test_second_credit_for_same_order_conflicts(self, client_maria, pending_order):
        ledger.credit_points(client_maria.pk, pending_order.pk, 3)

        with pytest.raises(ConflictError) as exc_info:
            ledger.credit_points(client_maria.pk, pending_order.pk, 3)
        assert exc_info.value.code == "POINTS_ALREADY_CREDITED"
        assert exc_info.value.kind == "conflict"

        client_maria.refresh_from_db()
        assert client_maria.points_balance == 3

    @pytest.mark.parametrize("points", [-1, 1.5, "3", True])
    def test_invalid_points(self, client_maria, pending_order, points):
        with pytest.raises(ValidationError, match="INVALID_POINTS"):
            ledger.credit_points(client_maria.pk, pending_order.pk, points)

    def test_unknown_client(self, pending_order):
        with pytest.raises(NotFoundError, match="CLIENT_NOT_FOUND"):
            ledger.credit_points(999999, pending_order.pk, 1)


class TestDebitPoints:
    """debit_points."""

    def test_debit(self, client_maria, completed_order):
        entry = ledger.debit_points(client_maria.pk, 2, description="Resgate")

        client_maria.refresh_from_db()
        assert client_maria.points_balance == 1
        assert entry.type == "loss"
        assert entry.balance_after == 1
        assert entry.signed_points == -2

    def test_insufficient_points(self, client_maria, completed_order):
        with pytest.raises(InvalidStateError) as exc_info:
            ledger.debit_points(client_maria.pk, 4)
        assert exc_info.value.code == "INSUFFICIENT_POINTS"
        assert exc_info.value.data == {"available": 3, "requested": 4}

        client_maria.refresh_from_db()
        assert client_maria.points_balance == 3

    def test_zero_debit_rejected(self, client_maria):
        with pytest.raises(ValidationError, match="INVALID_POINTS"):
            ledger.debit_points(client_maria.pk, 0)


class TestBalanceViews:
    """The three read views disagree on purpose."""

    def test_balance_for_counts_only_credited_orders(
        self, owner, client_maria, bakery, bread, completed_order
    ):
        # second order never completes
        orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 10)])

        assert ledger.balance_for(client_maria.pk, bakery.pk) == 3
        assert ledger.points_from_orders(client_maria.pk, bakery.pk) == {
            "client_id": client_maria.pk,
            "establishment_id": bakery.pk,
            "points": 15,
            "orders_count": 2,
        }

    def test_balance_for_is_per_establishment(
        self, client_maria, bakery, coffee_shop, completed_order
    ):
        assert ledger.balance_for(client_maria.pk, bakery.pk) == 3
        assert ledger.balance_for(client_maria.pk, coffee_shop.pk) == 0

    def test_balance_for_never_negative(self, client_maria, bakery, completed_order):
        ledger.debit_points(client_maria.pk, 3, order_id=completed_order.pk)
        PointsTransaction.objects.create(
            client=client_maria,
            order=completed_order,
            points=2,
            type="loss",
            balance_after=0,
        )
        assert ledger.balance_for(client_maria.pk, bakery.pk) == 0

    def test_points_from_orders_counts_cancelled(self, owner, client_maria, bakery, pending_order):
        lifecycle.set_status(owner.pk, pending_order.pk, "cancelled")
        assert ledger.points_from_orders(client_maria.pk, bakery.pk)["points"] == 3

    def test_points_from_orders_empty(self, client_maria, bakery):
        data = ledger.points_from_orders(client_maria.pk, bakery.pk)
        assert data["points"] == 0
        assert data["orders_count"] == 0

    def test_all_user_points(self, client_maria, bakery, completed_order):
        assert ledger.all_user_points(client_maria.pk) == {
            "client_id": client_maria.pk,
            "points_balance": 3,
            "ledger_total": 3,
            "establishments": {bakery.pk: 3},
        }

    def test_all_user_points_unknown_client(self, db):
        with pytest.raises(NotFoundError, match="CLIENT_NOT_FOUND"):
            ledger.all_user_points(999999)


class TestReconciliation:
    """verify_balance / divergent_clients / rebuild_balance."""

    def test_consistent_after_completion(self, client_maria, completed_order):
        assert ledger.verify_balance(client_maria.pk)
        assert ledger.divergent_clients() == []

    def test_detects_and_repairs_drift(self, client_maria, completed_order):
        Client.objects.filter(pk=client_maria.pk).update(points_balance=50)

        assert not ledger.verify_balance(client_maria.pk)
        divergent = ledger.divergent_clients()
        assert [(c.pk, total) for c, total in divergent] == [(client_maria.pk, 3)]

        client = ledger.rebuild_balance(client_maria.pk)
        assert client.points_balance == 3
        assert ledger.verify_balance(client_maria.pk)

    def test_divergent_filtered_by_client(self, client_maria, client_joao, completed_order):
        Client.objects.filter(pk=client_joao.pk).update(points_balance=7)

        assert ledger.divergent_clients(client_id=client_maria.pk) == []
        assert len(ledger.divergent_clients(client_id=client_joao.pk)) == 1


class TestHistory:
    """history."""

    def test_newest_first_and_limited(self, client_maria, completed_order):
        ledger.debit_points(client_maria.pk, 1)
        ledger.debit_points(client_maria.pk, 1)

        entries = ledger.history(client_maria.pk, limit=2)

        assert len(entries) == 2
        assert all(e.type == "loss" for e in entries)
        assert entries[0].balance_after == 1
