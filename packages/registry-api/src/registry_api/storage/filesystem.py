# SPDX-License-Identifier: MIT
"""Filesystem catalog backend.

Each provider is one JSON document at ``<root>/<namespace>/<name>.json``.
Reads always re-parse the file; there is no cache.
"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..models.provider import ProviderVersions
from .base import VersionCatalog
from .errors import CatalogDecodeError, CatalogError
from .keys import ProviderKey

logger = logging.getLogger(__name__)


class FilesystemCatalog(VersionCatalog):
    """Catalog backed by a directory tree of JSON documents."""

    name = "filesystem"

    def __init__(self, root: str | Path, read_only: bool = False):
        self.root = Path(root)
        self.read_only = read_only

    def path_for(self, key: ProviderKey) -> Path:
        """Return the document path for ``key``."""
        return self.root / key.namespace / f"{key.name}.json"

    def read(self, key: ProviderKey) -> ProviderVersions | None:
        path = self.path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CatalogError(f"Failed to read {path}: {e}", key=str(key)) from e

        try:
            return ProviderVersions.model_validate_json(data)
        except ValidationError as e:
            raise CatalogDecodeError(
                f"Failed to decode {path} into provider versions: {e}", key=str(key)
            ) from e

    def write(self, key: ProviderKey, versions: ProviderVersions) -> None:
        if self.read_only:
            raise CatalogError(f"Catalog at {self.root} is read-only", key=str(key))

        path = self.path_for(key)
        payload = versions.model_dump_json(indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file and rename so readers never see a partial document
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CatalogError(f"Failed to write {path}: {e}", key=str(key)) from e

        logger.debug("Wrote %d versions to %s", len(versions.versions), path)
