"""Payment recorder.

Records payment attempts as ``pending``. Only cancelled orders refuse
payment; amounts are not reconciled against the order total here.
"""

import logging
import time
import uuid
from decimal import Decimal, InvalidOperation

from django.db import transaction

from fidelman.conf import fidelman_settings
from fidelman.exceptions import InvalidStateError, ValidationError
from fidelman.models import Order, OrderStatus, Payment, PaymentStatus
from fidelman.services.builder import CENTS, MAX_AMOUNT
from fidelman.services import orders as order_store
from fidelman.signals import payment_created

logger = logging.getLogger(__name__)


def generate_transaction_id() -> str:
    """"<prefix>_<epoch ms>_<random hex>", distinct within the same millisecond."""
    millis = int(time.time() * 1000)
    return f"{fidelman_settings.TRANSACTION_ID_PREFIX}_{millis}_{uuid.uuid4().hex[:12]}"


def parse_amount(amount) -> Decimal:
    """
    Parse a payment amount (str, int or Decimal) into a positive Decimal.

    Raises:
        ValidationError: INVALID_AMOUNT
    """
    if amount is None or isinstance(amount, bool):
        raise ValidationError("INVALID_AMOUNT", amount=str(amount))
    try:
        # str() first so floats keep their shortest repr, not binary noise
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("INVALID_AMOUNT", amount=str(amount))
    # Bounded before quantize, which fails past the context precision
    if not value.is_finite() or value <= 0 or value > MAX_AMOUNT:
        raise ValidationError("INVALID_AMOUNT", amount=str(amount))
    value = value.quantize(CENTS)
    if value <= 0 or value > MAX_AMOUNT:
        raise ValidationError("INVALID_AMOUNT", amount=str(amount))
    return value


def create_payment(client_id, order_id, amount, method: str) -> Payment:
    """
    Record a pending payment for the client's order.

    Args:
        client_id: Paying client; must own the order
        order_id: Order being paid
        amount: Amount (e.g. "25.50")
        method: Free-form method (e.g. "pix")

    Returns:
        Created Payment

    Raises:
        NotFoundError: ORDER_NOT_FOUND
        InvalidStateError: ORDER_CANCELLED
        ValidationError: INVALID_AMOUNT, INVALID_PAYMENT_METHOD
    """
    order = order_store.get_for_client(client_id, order_id)

    if order.status == OrderStatus.CANCELLED:
        raise InvalidStateError("ORDER_CANCELLED", order_id=str(order.pk))

    value = parse_amount(amount)
    method = (method or "").strip()
    if not method:
        raise ValidationError("INVALID_PAYMENT_METHOD")

    with transaction.atomic():
        # Re-read under lock so a concurrent cancel is seen before the insert
        order = Order.objects.select_for_update().get(pk=order.pk)
        if order.status == OrderStatus.CANCELLED:
            raise InvalidStateError("ORDER_CANCELLED", order_id=str(order.pk))

        payment = Payment.objects.create(
            order=order,
            client_id=order.client_id,
            amount=value,
            method=method,
            status=PaymentStatus.PENDING,
            transaction_id=generate_transaction_id(),
        )
        transaction.on_commit(
            lambda: payment_created.send(sender=Payment, payment=payment)
        )

    logger.info(
        "Payment %s recorded for order %s: %s via %s",
        payment.transaction_id,
        order.pk,
        value,
        method,
    )
    return payment
