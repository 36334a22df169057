"""Order and OrderItem models.

Money fields are Decimal. total_amount and points_generated are fixed at
creation (services.orders) and never recomputed; OrderItem.unit_price is
a snapshot of the product price at order time.
"""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderStatus(models.TextChoices):
    """Order lifecycle states."""

    PENDING = "pending", _("Pendente")
    CONFIRMED = "confirmed", _("Confirmado")
    PREPARING = "preparing", _("Em preparo")
    READY = "ready", _("Pronto")
    COMPLETED = "completed", _("Concluído")
    CANCELLED = "cancelled", _("Cancelado")


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


class Order(models.Model):
    """A client's cart committed against one establishment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    client = models.ForeignKey(
        "fidelman.Client",
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name=_("cliente"),
    )
    establishment = models.ForeignKey(
        "fidelman.Establishment",
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name=_("estabelecimento"),
    )

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )
    total_amount = models.DecimalField(_("valor total"), max_digits=12, decimal_places=2)
    points_generated = models.PositiveIntegerField(
        _("pontos gerados"),
        help_text=_("Calculado na criação, nunca recalculado"),
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("pedido")
        verbose_name_plural = _("pedidos")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["client", "-created_at"], name="fidelman_order_client_created"),
            models.Index(fields=["establishment", "-created_at"], name="fidelman_order_estab_created"),
        ]

    def __str__(self):
        return f"Pedido {self.pk} ({self.status})"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class OrderItem(models.Model):
    """Order line with a price snapshot."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("pedido"),
    )
    product = models.ForeignKey(
        "fidelman.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
        verbose_name=_("produto"),
    )
    quantity = models.PositiveIntegerField(_("quantidade"))
    unit_price = models.DecimalField(
        _("preço unitário"),
        max_digits=10,
        decimal_places=2,
        help_text=_("Preço do produto no momento do pedido"),
    )
    total_price = models.DecimalField(_("total da linha"), max_digits=12, decimal_places=2)

    class Meta:
        verbose_name = _("item do pedido")
        verbose_name_plural = _("itens do pedido")
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="fidelman_orderitem_quantity_gte_1",
            ),
        ]

    def __str__(self):
        return f"{self.quantity}x {self.product_id} @ {self.unit_price}"
