# SPDX-License-Identifier: MIT
"""Provider key construction and validation.

A provider is addressed by its (namespace, name) pair. Both parts are
restricted to a character set that excludes the ``/`` separator and any
path traversal, so the joined storage key and the on-disk path derived
from it can never collide for distinct pairs.
"""

import re
from dataclasses import dataclass

from .errors import InvalidProviderKeyError

KEY_SEPARATOR = "/"
MAX_SEGMENT_LENGTH = 64

_SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


def validate_segment(field: str, value: str) -> str:
    """Validate one half of a provider key.

    Raises:
        InvalidProviderKeyError: If the value is empty, too long, or holds
            characters outside ``[A-Za-z0-9_-]``.
    """
    if not value or len(value) > MAX_SEGMENT_LENGTH or not _SEGMENT_PATTERN.match(value):
        raise InvalidProviderKeyError(field, value)
    return value


@dataclass(frozen=True)
class ProviderKey:
    """Catalog lookup key for one provider."""

    namespace: str
    name: str

    def __post_init__(self) -> None:
        validate_segment("namespace", self.namespace)
        validate_segment("name", self.name)

    @property
    def storage_key(self) -> str:
        """Flat string form used by key-value backends."""
        return f"{self.namespace}{KEY_SEPARATOR}{self.name}"

    def __str__(self) -> str:
        return self.storage_key
