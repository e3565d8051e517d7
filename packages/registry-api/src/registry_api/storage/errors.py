# SPDX-License-Identifier: MIT
"""Exceptions raised by catalog backends."""


class CatalogError(Exception):
    """A storage backend failed to read or write a provider's versions."""

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)


class CatalogDecodeError(CatalogError):
    """A stored document could not be decoded into provider versions."""


class InvalidProviderKeyError(ValueError):
    """Namespace or name cannot be used to build a provider key."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid {field} '{value}': must start with a letter or digit and "
            "contain only letters, digits, '-' or '_'"
        )
