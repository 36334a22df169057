"""Ownership protocol (which establishment does a client own)."""

from typing import Protocol, runtime_checkable

from fidelman.protocols.catalog import EstablishmentInfo


@runtime_checkable
class OwnershipBackend(Protocol):
    """
    Protocol for resolving the establishment owned by a client.

    Returning None is reported to callers exactly like a missing
    establishment (NotFoundError), so non-owners learn nothing about
    which orders exist.
    """

    def get_owned_establishment(self, client_id) -> EstablishmentInfo | None:
        """Return the caller's establishment, or None if it owns none."""
        ...
