# SPDX-License-Identifier: MIT
"""Registry server for versioned provider metadata and download discovery."""

__version__ = "0.1.0"

from .app import create_app
from .config import (
    APIConfig,
    AuthConfig,
    ConfigError,
    LoggingConfig,
    ServerConfig,
    StorageConfig,
    TLSConfig,
)
from .middleware.errors import (
    APIError,
    AuthenticationRequiredError,
    BackendError,
    EncodingError,
    ErrorCode,
    InvalidRequestError,
    PlatformNotFoundError,
    ProviderNotFoundError,
    UnauthorizedError,
)
from .storage import (
    CatalogError,
    FilesystemCatalog,
    MemoryCatalog,
    ProviderKey,
    RedisCatalog,
    VersionCatalog,
    create_catalog,
)

__all__ = [
    # App factory
    "create_app",
    # Configuration
    "APIConfig",
    "AuthConfig",
    "ConfigError",
    "LoggingConfig",
    "ServerConfig",
    "StorageConfig",
    "TLSConfig",
    # Storage
    "CatalogError",
    "FilesystemCatalog",
    "MemoryCatalog",
    "ProviderKey",
    "RedisCatalog",
    "VersionCatalog",
    "create_catalog",
    # Errors
    "APIError",
    "AuthenticationRequiredError",
    "BackendError",
    "EncodingError",
    "ErrorCode",
    "InvalidRequestError",
    "PlatformNotFoundError",
    "ProviderNotFoundError",
    "UnauthorizedError",
]
