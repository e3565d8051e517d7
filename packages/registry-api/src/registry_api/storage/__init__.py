# SPDX-License-Identifier: MIT
"""Version catalog backends and the startup-time backend factory."""

from typing import TYPE_CHECKING

from fastapi import Request

from .base import VersionCatalog
from .errors import CatalogDecodeError, CatalogError, InvalidProviderKeyError
from .filesystem import FilesystemCatalog
from .keys import ProviderKey
from .memory import MemoryCatalog
from .redis_catalog import RedisCatalog

if TYPE_CHECKING:
    from ..config import StorageConfig

__all__ = [
    "CatalogDecodeError",
    "CatalogError",
    "FilesystemCatalog",
    "InvalidProviderKeyError",
    "MemoryCatalog",
    "ProviderKey",
    "RedisCatalog",
    "VersionCatalog",
    "create_catalog",
    "get_catalog",
]


def create_catalog(config: "StorageConfig") -> VersionCatalog:
    """Build the catalog backend named by the storage configuration.

    Raises:
        ValueError: If the backend is unknown.
    """
    if config.backend == "memory":
        return MemoryCatalog()
    if config.backend == "filesystem":
        return FilesystemCatalog(config.providers_dir, read_only=config.read_only)
    if config.backend == "redis":
        return RedisCatalog.from_url(
            config.redis_url,
            collection=config.redis_collection,
            socket_timeout=config.redis_timeout,
        )
    raise ValueError(f"Unknown storage backend: {config.backend}")


def get_catalog(request: Request) -> VersionCatalog:
    """Get the application's version catalog for dependency injection."""
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise RuntimeError("Version catalog not initialized")
    return catalog
