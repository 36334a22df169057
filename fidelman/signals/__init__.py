"""
Fidelman signals - public event API.

Emitted signals (always after the surrounding transaction block):
- order_created: Emitted by services.orders.place_order()
- order_status_changed: Emitted by services.lifecycle.set_status()
- order_completed: Emitted by services.lifecycle.complete_order()
- payment_created: Emitted by services.payments.create_payment()
- points_credited: Emitted by services.ledger.credit_points()
- points_debited: Emitted by services.ledger.debit_points()
"""

from django.dispatch import Signal

# Order signals
order_created = Signal()  # sender=Order, order=Order
order_status_changed = Signal()  # sender=Order, order=Order, old_status=str, new_status=str
order_completed = Signal()  # sender=Order, order=Order, points=int

# Payment signals
payment_created = Signal()  # sender=Payment, payment=Payment

# Ledger signals
points_credited = Signal()  # sender=PointsTransaction, entry=PointsTransaction
points_debited = Signal()  # sender=PointsTransaction, entry=PointsTransaction
