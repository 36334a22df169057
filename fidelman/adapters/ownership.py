"""Django-model OwnershipBackend adapter."""

from fidelman.models import Establishment
from fidelman.protocols.catalog import EstablishmentInfo


class DjangoOwnershipBackend:
    """Adapter: resolves ownership through Establishment.owner."""

    def get_owned_establishment(self, client_id) -> EstablishmentInfo | None:
        try:
            est = Establishment.objects.get(owner_id=client_id)
        except (Establishment.DoesNotExist, ValueError, TypeError):
            return None
        return EstablishmentInfo(id=est.pk, name=est.name, owner_id=est.owner_id)
