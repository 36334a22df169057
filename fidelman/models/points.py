"""Points ledger model."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class PointsTransactionType(models.TextChoices):
    GAIN = "gain", _("Acúmulo")
    LOSS = "loss", _("Resgate")


class PointsTransaction(models.Model):
    """
    Immutable record of a points movement.

    Append-only: rows are never updated or deleted. The sum of a client's
    gains minus losses is the source of truth for Client.points_balance.
    An order yields at most one gain (partial unique constraint).
    """

    client = models.ForeignKey(
        "fidelman.Client",
        on_delete=models.PROTECT,
        related_name="points_transactions",
        verbose_name=_("cliente"),
    )
    order = models.ForeignKey(
        "fidelman.Order",
        on_delete=models.PROTECT,
        related_name="points_transactions",
        null=True,
        blank=True,
        verbose_name=_("pedido"),
    )

    points = models.PositiveIntegerField(
        _("pontos"),
        help_text=_("Magnitude; o sinal vem do tipo"),
    )
    type = models.CharField(
        _("tipo"),
        max_length=10,
        choices=PointsTransactionType.choices,
    )
    balance_after = models.IntegerField(
        _("saldo após"),
        help_text=_("Saldo de pontos do cliente após esta transação"),
    )
    description = models.CharField(_("descrição"), max_length=200, blank=True)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("transação de pontos")
        verbose_name_plural = _("transações de pontos")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["client", "-created_at"], name="fidelman_points_client_created"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["order"],
                condition=models.Q(type="gain"),
                name="fidelman_points_one_gain_per_order",
            ),
        ]

    def __str__(self):
        sign = "+" if self.type == PointsTransactionType.GAIN else "-"
        return f"{sign}{self.points}pts | {self.description}"

    @property
    def signed_points(self) -> int:
        return self.points if self.type == PointsTransactionType.GAIN else -self.points

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("PointsTransaction is append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("PointsTransaction is append-only")
