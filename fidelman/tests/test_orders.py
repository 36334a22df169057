"""Tests for the order store."""

from decimal import Decimal
from unittest.mock import patch

import pytest

from fidelman.exceptions import NotFoundError, ValidationError
from fidelman.models import Order, OrderItem, OrderStatus
from fidelman.services import orders
from fidelman.services.builder import build_order
from fidelman.signals import order_created


pytestmark = pytest.mark.django_db


class TestPlaceOrder:
    """place_order builds and stores in one unit."""

    def test_creates_order_with_items(self, client_maria, bakery, bread, cake):
        order = orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 3), (cake.pk, 1)])

        assert order.status == OrderStatus.PENDING
        assert order.client_id == client_maria.pk
        assert order.establishment_id == bakery.pk
        assert order.total_amount == Decimal("61.50")
        assert order.points_generated == 6
        items = list(order.items.all())
        assert len(items) == 2
        assert sum(i.total_price for i in items) == order.total_amount

    def test_foreign_product_creates_nothing(self, client_maria, bakery, bread, espresso):
        with pytest.raises(ValidationError, match="PRODUCTS_UNAVAILABLE"):
            orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 1), (espresso.pk, 1)])

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_oversized_order_creates_nothing(self, client_maria, bakery, bread):
        with pytest.raises(ValidationError) as exc_info:
            orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 10**30)])
        assert exc_info.value.code == "INVALID_QUANTITY"

        with pytest.raises(ValidationError, match="ORDER_TOTAL_TOO_LARGE"):
            orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 2_000_000_000)])

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_unknown_client_creates_nothing(self, bakery, bread):
        with pytest.raises(NotFoundError, match="CLIENT_NOT_FOUND"):
            orders.place_order(999999, bakery.pk, [(bread.pk, 1)])
        assert Order.objects.count() == 0

    def test_item_failure_rolls_back_order(self, client_maria, bakery, bread):
        """An order row never exists without its items."""
        with patch.object(OrderItem.objects, "bulk_create", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 1)])

        assert Order.objects.count() == 0

    def test_order_created_signal_after_commit(
        self, client_maria, bakery, bread, django_capture_on_commit_callbacks
    ):
        received = []

        def handler(sender, order, **kwargs):
            received.append(order.pk)

        order_created.connect(handler)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                order = orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 1)])
        finally:
            order_created.disconnect(handler)

        assert received == [order.pk]


class TestCreateOrder:
    """create_order persists a priced draft."""

    def test_persists_draft(self, client_maria, bakery, bread):
        draft = build_order(bakery.pk, [(bread.pk, 2)])
        order = orders.create_order(
            client_maria.pk,
            draft.establishment_id,
            draft.total_amount,
            draft.points_generated,
            draft.lines,
        )

        assert order.total_amount == Decimal("24.00")
        assert order.points_generated == 2
        item = order.items.get()
        assert item.unit_price == Decimal("12.00")
        assert item.quantity == 2


class TestSnapshot:
    """Prices are frozen at order time."""

    def test_price_change_does_not_touch_order(self, pending_order, bread):
        bread.price = Decimal("99.00")
        bread.save()

        order = orders.get_by_id(pending_order.pk)
        assert order.total_amount == Decimal("36.00")
        assert order.points_generated == 3
        assert order.items.get().unit_price == Decimal("12.00")


class TestLookups:
    """get_by_id / list_by_client / list_by_establishment."""

    def test_get_by_id(self, pending_order):
        order = orders.get_by_id(pending_order.pk)
        assert order.pk == pending_order.pk
        assert len(order.items.all()) == 1

    def test_get_by_id_accepts_string(self, pending_order):
        assert orders.get_by_id(str(pending_order.pk)).pk == pending_order.pk

    @pytest.mark.parametrize("order_id", ["not-a-uuid", "00000000-0000-0000-0000-000000000000"])
    def test_get_by_id_not_found(self, db, order_id):
        with pytest.raises(NotFoundError) as exc_info:
            orders.get_by_id(order_id)
        assert exc_info.value.code == "ORDER_NOT_FOUND"
        assert exc_info.value.kind == "not_found"

    def test_get_for_client_hides_other_clients_orders(self, pending_order, client_joao):
        with pytest.raises(NotFoundError, match="ORDER_NOT_FOUND"):
            orders.get_for_client(client_joao.pk, pending_order.pk)

    def test_get_for_establishment(self, pending_order, bakery, coffee_shop):
        assert orders.get_for_establishment(bakery.pk, pending_order.pk).pk == pending_order.pk
        with pytest.raises(NotFoundError):
            orders.get_for_establishment(coffee_shop.pk, pending_order.pk)

    def test_list_by_client_newest_first(self, client_maria, client_joao, bakery, bread):
        first = orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 1)])
        second = orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 2)])
        orders.place_order(client_joao.pk, bakery.pk, [(bread.pk, 1)])
        Order.objects.filter(pk=first.pk).update(created_at=second.created_at.replace(year=2020))

        result = orders.list_by_client(client_maria.pk)

        assert [o.pk for o in result] == [second.pk, first.pk]

    def test_list_by_establishment(self, client_maria, bakery, coffee_shop, bread, espresso):
        orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 1)])
        orders.place_order(client_maria.pk, coffee_shop.pk, [(espresso.pk, 1)])

        result = orders.list_by_establishment(coffee_shop.pk)

        assert len(result) == 1
        assert result[0].establishment_id == coffee_shop.pk


class TestSummarize:
    """Read-side payloads."""

    def test_client_view_has_establishment(self, pending_order, bakery):
        data = orders.summarize(orders.get_by_id(pending_order.pk))

        assert data["id"] == str(pending_order.pk)
        assert data["establishment"] == {"id": bakery.pk, "name": "Padaria Central"}
        assert "client" not in data
        assert data["order_items"][0]["product_name"] == "Pão de queijo"
        assert data["payments"] == []

    def test_owner_view_has_client(self, pending_order, client_maria):
        data = orders.summarize(orders.get_by_id(pending_order.pk), counterparty="client")

        assert data["client"] == {
            "id": client_maria.pk,
            "name": "Maria Santos",
            "email": "maria@example.com",
        }
        assert "establishment" not in data
