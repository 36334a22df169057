"""Catalog records (establishments and products).

Only what the default CatalogBackend adapter reads. Catalog CRUD belongs
to the host project.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Establishment(models.Model):
    """Merchant establishment where clients order and earn points."""

    name = models.CharField(_("nome"), max_length=200)
    description = models.TextField(_("descrição"), blank=True)
    category = models.CharField(_("categoria"), max_length=100, blank=True, db_index=True)
    address = models.CharField(_("endereço"), max_length=255, blank=True)

    owner = models.OneToOneField(
        "fidelman.Client",
        on_delete=models.PROTECT,
        related_name="owned_establishment",
        null=True,
        blank=True,
        verbose_name=_("proprietário"),
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("estabelecimento")
        verbose_name_plural = _("estabelecimentos")
        ordering = ["-created_at"]

    def __str__(self):
        return self.name


class Product(models.Model):
    """Product sold by an establishment."""

    establishment = models.ForeignKey(
        Establishment,
        on_delete=models.CASCADE,
        related_name="products",
        verbose_name=_("estabelecimento"),
    )
    name = models.CharField(_("nome"), max_length=200)
    description = models.TextField(_("descrição"), blank=True)
    price = models.DecimalField(_("preço"), max_digits=10, decimal_places=2)
    is_active = models.BooleanField(
        _("ativo"),
        default=True,
        help_text=_("Somente produtos ativos podem ser pedidos"),
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("produto")
        verbose_name_plural = _("produtos")
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["establishment", "is_active"],
                name="fidelman_product_estab_active",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.price})"
