"""Client model.

Data architecture:
    Client.points_balance
        Cached running sum of the client's PointsTransaction rows
        (gains minus losses). Written only by services.ledger, in the same
        transaction as the ledger row. PointsTransaction is the source of
        truth; see ``fidelman_check_ledger`` for reconciliation.

    Establishment.owner
        A client owns at most one establishment through this one-to-one
        relation. There is no separate owner flag to keep in sync.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Client(models.Model):
    """Registered client (end customer that orders and earns points)."""

    name = models.CharField(_("nome"), max_length=200)
    email = models.EmailField(_("email"), unique=True)
    document = models.CharField(
        _("documento"),
        max_length=20,
        blank=True,
        db_index=True,
        help_text=_("CPF (apenas números)"),
    )

    points_balance = models.IntegerField(
        _("saldo de pontos"),
        default=0,
        help_text=_("Cache do saldo do extrato de pontos"),
    )

    is_active = models.BooleanField(_("ativo"), default=True, db_index=True)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("cliente")
        verbose_name_plural = _("clientes")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points_balance__gte=0),
                name="fidelman_client_points_balance_gte_0",
            ),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    @property
    def is_owner(self) -> bool:
        """True if the client owns an establishment."""
        return hasattr(self, "owned_establishment")

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.lower().strip()
        if self.document:
            self.document = "".join(filter(str.isdigit, self.document))
        super().save(*args, **kwargs)
