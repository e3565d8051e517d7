# SPDX-License-Identifier: MIT
"""Redis catalog backend.

All providers live in one hash named after the configured collection.
Each field is the provider's storage key (``namespace/name``) and each
value is the JSON-encoded version collection, so a write is a single
atomic ``HSET``.
"""

import logging

import redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from ..models.provider import ProviderVersions
from .base import VersionCatalog
from .errors import CatalogDecodeError, CatalogError
from .keys import ProviderKey

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "tfregistry"


class RedisCatalog(VersionCatalog):
    """Catalog backed by a Redis hash.

    Example:
        >>> catalog = RedisCatalog.from_url("redis://localhost:6379/0")
        >>> catalog.read(ProviderKey("hashicorp", "aws"))
    """

    name = "redis"

    def __init__(self, client: redis.Redis, collection: str = DEFAULT_COLLECTION):
        if not collection:
            raise ValueError("collection cannot be empty")
        self._client = client
        self.collection = collection

    @classmethod
    def from_url(
        cls,
        url: str,
        collection: str = DEFAULT_COLLECTION,
        socket_timeout: float = 5.0,
    ) -> "RedisCatalog":
        """Create a catalog with its own connection pool."""
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        logger.info(f"Initializing Redis catalog (collection={collection})")
        return cls(client, collection=collection)

    def read(self, key: ProviderKey) -> ProviderVersions | None:
        try:
            raw = self._client.hget(self.collection, key.storage_key)
        except RedisError as e:
            raise CatalogError(
                f"Failed to get key {key} from collection {self.collection}: {e}",
                key=str(key),
            ) from e

        if raw is None:
            return None

        try:
            return ProviderVersions.model_validate_json(raw)
        except ValidationError as e:
            raise CatalogDecodeError(
                f"Failed to decode key {key} from collection {self.collection}: {e}",
                key=str(key),
            ) from e

    def write(self, key: ProviderKey, versions: ProviderVersions) -> None:
        try:
            self._client.hset(self.collection, key.storage_key, versions.model_dump_json())
        except RedisError as e:
            raise CatalogError(f"Failed to create record {key}: {e}", key=str(key)) from e

    def close(self) -> None:
        self._client.close()
