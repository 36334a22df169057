"""Order builder - cart validation, pricing and point yield.

Pure computation: reads the catalog through the configured CatalogBackend
and never writes. Persistence is services.orders' job.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from fidelman.conf import fidelman_settings, get_catalog_backend
from fidelman.exceptions import NotFoundError, ValidationError
from fidelman.protocols.catalog import CatalogBackend

CENTS = Decimal("0.01")

# Largest value the max_digits=12, decimal_places=2 money columns hold
MAX_AMOUNT = Decimal("9999999999.99")

# PositiveIntegerField upper bound
MAX_QUANTITY = 2147483647


@dataclass(frozen=True)
class CartLine:
    """Requested product and quantity."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class DraftLine:
    """Priced order line (unit price snapshot)."""

    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class OrderDraft:
    """Validated, priced order ready to be stored."""

    establishment_id: int
    lines: tuple[DraftLine, ...]
    total_amount: Decimal
    points_generated: int


def points_for(total_amount: Decimal, unit: int | None = None) -> int:
    """1 point per ``unit`` currency units spent, rounded down."""
    if unit is None:
        unit = fidelman_settings.POINTS_CURRENCY_UNIT
    if total_amount <= 0:
        return 0
    return int(Decimal(total_amount) // Decimal(unit))


def normalize_cart(cart_lines: Iterable) -> list[CartLine]:
    """
    Coerce cart input into CartLines.

    Accepts CartLine, (product_id, quantity) tuples or
    {"product_id": ..., "quantity": ...} dicts.

    Raises:
        ValidationError: EMPTY_CART, INVALID_CART_LINE or INVALID_QUANTITY
    """
    lines = []
    for raw in cart_lines or []:
        if isinstance(raw, CartLine):
            line = raw
        elif isinstance(raw, dict):
            line = CartLine(raw.get("product_id"), raw.get("quantity"))
        else:
            try:
                product_id, quantity = raw
            except (ValueError, TypeError):
                raise ValidationError("INVALID_CART_LINE", line=repr(raw))
            line = CartLine(product_id, quantity)

        quantity = line.quantity
        if (
            isinstance(quantity, bool)
            or not isinstance(quantity, int)
            or not 1 <= quantity <= MAX_QUANTITY
        ):
            raise ValidationError(
                "INVALID_QUANTITY",
                product_id=line.product_id,
                quantity=quantity,
            )
        lines.append(line)

    if not lines:
        raise ValidationError("EMPTY_CART")
    return lines


def build_order(
    establishment_id,
    cart_lines: Iterable,
    catalog: CatalogBackend | None = None,
) -> OrderDraft:
    """
    Validate a cart against the catalog and price it.

    Args:
        establishment_id: Establishment the order is placed at
        cart_lines: Non-empty sequence of (product_id, quantity)
        catalog: CatalogBackend override (defaults to settings)

    Returns:
        OrderDraft with per-line totals, total_amount and points_generated

    Raises:
        NotFoundError: ESTABLISHMENT_NOT_FOUND
        ValidationError: EMPTY_CART, INVALID_CART_LINE, INVALID_QUANTITY,
            PRODUCTS_UNAVAILABLE, ORDER_TOTAL_TOO_LARGE
    """
    catalog = catalog or get_catalog_backend()

    establishment = catalog.get_establishment(establishment_id)
    if establishment is None:
        raise NotFoundError("ESTABLISHMENT_NOT_FOUND", establishment_id=establishment_id)

    lines = normalize_cart(cart_lines)

    requested_ids = [line.product_id for line in lines]
    products = catalog.get_sellable_products(establishment.id, requested_ids)

    # Duplicate ids collapse to one product and fail the size check too
    if len(products) != len(requested_ids):
        found = {str(p.id) for p in products}
        raise ValidationError(
            "PRODUCTS_UNAVAILABLE",
            missing=[pid for pid in requested_ids if str(pid) not in found],
        )

    # Keyed by str: ids may arrive as strings from the transport layer
    by_id = {str(p.id): p for p in products}
    draft_lines = []
    total = Decimal("0")
    for line in lines:
        product = by_id[str(line.product_id)]
        price = Decimal(product.price)
        line_total = None
        # price <= MAX_AMOUNT and quantity <= MAX_QUANTITY keep quantize within precision
        if price <= MAX_AMOUNT:
            unit_price = price.quantize(CENTS, rounding=ROUND_HALF_UP)
            line_total = (unit_price * line.quantity).quantize(CENTS, rounding=ROUND_HALF_UP)
        if line_total is None or line_total > MAX_AMOUNT - total:
            raise ValidationError(
                "ORDER_TOTAL_TOO_LARGE",
                product_id=product.id,
                quantity=line.quantity,
                max_amount=str(MAX_AMOUNT),
            )
        total += line_total
        draft_lines.append(
            DraftLine(
                product_id=product.id,
                quantity=line.quantity,
                unit_price=unit_price,
                total_price=line_total,
            )
        )

    return OrderDraft(
        establishment_id=establishment.id,
        lines=tuple(draft_lines),
        total_amount=total,
        points_generated=points_for(total),
    )
