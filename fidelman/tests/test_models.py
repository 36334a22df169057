"""Tests for Fidelman models, exceptions and admin registration."""

from decimal import Decimal

import pytest
from django.contrib import admin
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from fidelman.exceptions import ConflictError, FidelmanError, NotFoundError
from fidelman.models import (
    Client,
    Establishment,
    Order,
    OrderItem,
    Payment,
    PointsTransaction,
    Product,
)


pytestmark = pytest.mark.django_db


class TestClient:
    def test_email_and_document_normalized(self, db):
        client = Client.objects.create(
            name="Teste",
            email="  Teste@Example.COM ",
            document="123.456.789-09",
        )
        assert client.email == "teste@example.com"
        assert client.document == "12345678909"

    def test_is_owner(self, owner, client_maria, bakery):
        owner.refresh_from_db()
        assert owner.is_owner
        assert not client_maria.is_owner

    def test_negative_balance_rejected(self, client_maria):
        with pytest.raises(IntegrityError), transaction.atomic():
            Client.objects.filter(pk=client_maria.pk).update(points_balance=-1)

    def test_owner_has_single_establishment(self, owner, bakery):
        with pytest.raises(IntegrityError), transaction.atomic():
            Establishment.objects.create(name="Filial", owner=owner)


class TestOrder:
    def test_is_terminal(self, pending_order):
        assert not pending_order.is_terminal
        pending_order.status = "cancelled"
        assert pending_order.is_terminal

    def test_item_quantity_must_be_positive(self, pending_order, bread):
        with pytest.raises(IntegrityError), transaction.atomic():
            OrderItem.objects.create(
                order=pending_order,
                product=bread,
                quantity=0,
                unit_price=Decimal("12.00"),
                total_price=Decimal("0.00"),
            )

    def test_product_referenced_by_order_is_protected(self, pending_order, bread):
        with pytest.raises(ProtectedError):
            bread.delete()


class TestPointsTransaction:
    """Ledger rows are append-only."""

    @pytest.fixture
    def entry(self, client_maria, pending_order):
        return PointsTransaction.objects.create(
            client=client_maria,
            order=pending_order,
            points=3,
            type="gain",
            balance_after=3,
        )

    def test_update_refused(self, entry):
        entry.points = 100
        with pytest.raises(ValueError, match="append-only"):
            entry.save()

    def test_delete_refused(self, entry):
        with pytest.raises(ValueError, match="append-only"):
            entry.delete()
        assert PointsTransaction.objects.filter(pk=entry.pk).exists()

    def test_one_gain_per_order(self, entry, client_maria, pending_order):
        with pytest.raises(IntegrityError), transaction.atomic():
            PointsTransaction.objects.create(
                client=client_maria,
                order=pending_order,
                points=3,
                type="gain",
                balance_after=6,
            )

    def test_losses_may_share_an_order(self, entry, client_maria, pending_order):
        for _ in range(2):
            PointsTransaction.objects.create(
                client=client_maria,
                order=pending_order,
                points=1,
                type="loss",
                balance_after=2,
            )
        assert PointsTransaction.objects.filter(order=pending_order).count() == 3

    def test_signed_points(self, entry):
        assert entry.signed_points == 3


class TestExceptions:
    def test_default_message(self):
        err = NotFoundError("ORDER_NOT_FOUND", order_id="x")
        assert err.message == "Order not found"
        assert str(err) == "ORDER_NOT_FOUND: Order not found"
        assert err.as_dict() == {
            "code": "ORDER_NOT_FOUND",
            "message": "Order not found",
            "data": {"order_id": "x"},
            "kind": "not_found",
        }

    def test_custom_message(self):
        err = ConflictError("POINTS_ALREADY_CREDITED", "duplicado")
        assert err.message == "duplicado"
        assert isinstance(err, FidelmanError)


class TestAdmin:
    @pytest.mark.parametrize(
        "model", [Client, Establishment, Product, Order, Payment, PointsTransaction]
    )
    def test_registered(self, model):
        assert admin.site.is_registered(model)

    def test_ledger_is_read_only(self, rf):
        model_admin = admin.site._registry[PointsTransaction]
        request = rf.get("/")
        assert not model_admin.has_add_permission(request)
        assert not model_admin.has_change_permission(request)
        assert not model_admin.has_delete_permission(request)
