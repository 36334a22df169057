"""Pytest fixtures for Fidelman tests."""

from decimal import Decimal

import pytest

from fidelman.models import Client, Establishment, Order, OrderStatus, Product
from fidelman.services import orders


@pytest.fixture
def client_maria(db):
    """Client that places orders."""
    return Client.objects.create(name="Maria Santos", email="maria@example.com")


@pytest.fixture
def client_joao(db):
    """Another client (no relation to maria's orders)."""
    return Client.objects.create(name="João Silva", email="joao@example.com")


@pytest.fixture
def owner(db):
    """Client that owns the bakery."""
    return Client.objects.create(name="Ana Padeira", email="ana@padaria.com")


@pytest.fixture
def other_owner(db):
    """Client that owns the coffee shop (once the coffee_shop fixture exists)."""
    return Client.objects.create(name="Carlos Barista", email="carlos@cafe.com")


@pytest.fixture
def bakery(owner):
    return Establishment.objects.create(name="Padaria Central", category="bakery", owner=owner)


@pytest.fixture
def coffee_shop(other_owner):
    return Establishment.objects.create(name="Café Esquina", category="coffee", owner=other_owner)


@pytest.fixture
def bread(bakery):
    return Product.objects.create(establishment=bakery, name="Pão de queijo", price=Decimal("12.00"))


@pytest.fixture
def cake(bakery):
    return Product.objects.create(establishment=bakery, name="Bolo de milho", price=Decimal("25.50"))


@pytest.fixture
def inactive_product(bakery):
    return Product.objects.create(
        establishment=bakery,
        name="Sonho",
        price=Decimal("8.00"),
        is_active=False,
    )


@pytest.fixture
def espresso(coffee_shop):
    return Product.objects.create(establishment=coffee_shop, name="Espresso", price=Decimal("7.00"))


@pytest.fixture
def pending_order(client_maria, bakery, bread):
    """3x bread = 36.00 -> 3 points."""
    return orders.place_order(client_maria.pk, bakery.pk, [(bread.pk, 3)])


@pytest.fixture
def ready_order(pending_order):
    Order.objects.filter(pk=pending_order.pk).update(status=OrderStatus.READY)
    pending_order.refresh_from_db()
    return pending_order
