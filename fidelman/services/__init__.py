"""Fidelman services.

- builder: cart validation, pricing and point yield (pure)
- orders: order store (atomic create, lookups, read payloads)
- lifecycle: status state machine and atomic completion
- payments: payment recorder
- ledger: points ledger and balance views
"""

from fidelman.services import builder
from fidelman.services import orders
from fidelman.services import ledger
from fidelman.services import lifecycle
from fidelman.services import payments

__all__ = ["builder", "orders", "ledger", "lifecycle", "payments"]
