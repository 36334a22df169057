"""Django-model CatalogBackend adapter."""

from fidelman.models import Establishment, Product
from fidelman.protocols.catalog import EstablishmentInfo, ProductInfo


class DjangoCatalogBackend:
    """Adapter that implements CatalogBackend over fidelman's catalog models."""

    def get_establishment(self, establishment_id) -> EstablishmentInfo | None:
        try:
            est = Establishment.objects.get(pk=establishment_id)
        except (Establishment.DoesNotExist, ValueError, TypeError):
            return None
        return EstablishmentInfo(id=est.pk, name=est.name, owner_id=est.owner_id)

    def get_sellable_products(
        self,
        establishment_id,
        product_ids: list,
    ) -> list[ProductInfo]:
        try:
            products = list(
                Product.objects.filter(
                    pk__in=product_ids,
                    establishment_id=establishment_id,
                    is_active=True,
                )
            )
        except (ValueError, TypeError):
            return []

        return [
            ProductInfo(
                id=p.pk,
                establishment_id=p.establishment_id,
                name=p.name,
                price=p.price,
            )
            for p in products
        ]
