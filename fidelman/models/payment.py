"""Payment model."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class PaymentStatus(models.TextChoices):
    PENDING = "pending", _("Pendente")
    SETTLED = "settled", _("Liquidado")
    FAILED = "failed", _("Falhou")


class Payment(models.Model):
    """
    Payment attempt against an order.

    Several payments may exist for the same order. Amounts are not
    reconciled against Order.total_amount here.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        "fidelman.Order",
        on_delete=models.PROTECT,
        related_name="payments",
        verbose_name=_("pedido"),
    )
    client = models.ForeignKey(
        "fidelman.Client",
        on_delete=models.PROTECT,
        related_name="payments",
        verbose_name=_("cliente"),
    )

    amount = models.DecimalField(_("valor"), max_digits=12, decimal_places=2)
    method = models.CharField(
        _("forma de pagamento"),
        max_length=50,
        help_text=_("Ex: pix, credit_card"),
    )
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    transaction_id = models.CharField(_("id da transação"), max_length=100, unique=True)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("pagamento")
        verbose_name_plural = _("pagamentos")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.transaction_id}: {self.amount} ({self.status})"
