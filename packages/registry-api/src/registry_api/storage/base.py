# SPDX-License-Identifier: MIT
"""Version catalog contract shared by every storage backend."""

from abc import ABC, abstractmethod

from ..models.provider import ProviderVersions
from .keys import ProviderKey


class VersionCatalog(ABC):
    """Maps a provider key to its full set of versions.

    ``read`` has three outcomes: a ``ProviderVersions`` value (found),
    ``None`` (not found), or a raised :class:`~.errors.CatalogError`
    (backend fault). ``write`` replaces the key's whole collection.
    """

    name: str = "catalog"

    @abstractmethod
    def read(self, key: ProviderKey) -> ProviderVersions | None:
        """Return the versions stored for ``key``, or None if absent.

        Raises:
            CatalogError: If the backend could not be read.
        """

    @abstractmethod
    def write(self, key: ProviderKey, versions: ProviderVersions) -> None:
        """Store ``versions`` as the complete collection for ``key``.

        Raises:
            CatalogError: If the backend could not be written.
        """

    def close(self) -> None:
        """Release backend resources."""
        return None
