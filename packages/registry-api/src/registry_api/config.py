# SPDX-License-Identifier: MIT
"""API server configuration."""

import os
import uuid
from dataclasses import dataclass, field
from typing import Optional

STORAGE_BACKENDS = ("memory", "filesystem", "redis")


class ConfigError(Exception):
    """Configuration is incomplete or invalid."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


@dataclass
class ServerConfig:
    """Listener configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    # Bounds raw connection I/O only, not handler run time
    timeout: float = 15.0

    @property
    def listen_address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class TLSConfig:
    """Optional TLS termination."""

    certificate: Optional[str] = None
    private_key: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.certificate and self.private_key)


@dataclass
class StorageConfig:
    """Version catalog backend configuration."""

    backend: str = "memory"  # "memory", "filesystem" or "redis"
    providers_dir: str = "./providers"
    read_only: bool = False
    redis_url: str = "redis://localhost:6379/0"
    redis_collection: str = "tfregistry"
    redis_timeout: float = 5.0


@dataclass
class AuthConfig:
    """Shared-secret authentication for the publish endpoint."""

    secret_key: Optional[str] = None
    secret_header: str = "X-Registry-Secret-Key"


@dataclass
class LoggingConfig:
    """Log output configuration."""

    level: str = "INFO"
    service_name: str = "provider-registry"


@dataclass
class APIConfig:
    """Main API server configuration."""

    # Server settings
    title: str = "Provider Registry"
    description: str = "Registry server for versioned provider metadata and download discovery"
    version: str = "0.1.0"
    debug: bool = False

    # Sub-configurations
    server: ServerConfig = field(default_factory=ServerConfig)
    tls: TLSConfig = field(default_factory=TLSConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # API settings
    api_prefix: str = "/v1"
    docs_url: str = "/docs"
    openapi_url: str = "/openapi.json"

    @property
    def providers_prefix(self) -> str:
        """Path advertised by service discovery, with a trailing slash."""
        return self.api_prefix.rstrip("/") + "/"

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Create configuration from environment variables."""
        config = cls()

        # Server
        if host := os.getenv("REGISTRY_HOST"):
            config.server.host = host
        if port := os.getenv("REGISTRY_PORT"):
            config.server.port = int(port)

        # TLS
        config.tls.certificate = os.getenv("REGISTRY_TLS_CERTIFICATE") or None
        config.tls.private_key = os.getenv("REGISTRY_TLS_PRIVATE_KEY") or None

        # Storage
        if storage_backend := os.getenv("REGISTRY_CONFIG_STORAGE_TYPE"):
            config.storage.backend = storage_backend
        if providers_dir := os.getenv("REGISTRY_PROVIDERS_DIR"):
            config.storage.providers_dir = providers_dir
        config.storage.read_only = os.getenv("REGISTRY_PROVIDERS_READ_ONLY", "").lower() == "true"
        if redis_url := os.getenv("REGISTRY_REDIS_URL"):
            config.storage.redis_url = redis_url
        if redis_collection := os.getenv("REGISTRY_REDIS_COLLECTION"):
            config.storage.redis_collection = redis_collection

        # Auth
        config.auth.secret_key = os.getenv("REGISTRY_CONFIG_SECRET_KEY") or None

        # Logging
        if log_level := os.getenv("REGISTRY_LOG_LEVEL"):
            config.logging.level = log_level

        # Debug
        config.debug = os.getenv("REGISTRY_DEBUG", "").lower() == "true"

        return config

    def validate(self) -> "APIConfig":
        """Check the configuration is complete enough to start a server.

        Returns:
            The configuration itself, for chaining.

        Raises:
            ConfigError: Listing every problem found.
        """
        problems: list[str] = []

        if not self.auth.secret_key:
            problems.append("secret key is required (--secret-key or REGISTRY_CONFIG_SECRET_KEY)")
        else:
            try:
                uuid.UUID(self.auth.secret_key)
            except ValueError:
                problems.append("secret key must be a valid UUID")

        if not self.auth.secret_header:
            problems.append("secret header name cannot be empty")

        if self.storage.backend not in STORAGE_BACKENDS:
            problems.append(
                f"invalid storage type '{self.storage.backend}' "
                f"(expected one of: {', '.join(STORAGE_BACKENDS)})"
            )
        if self.storage.backend == "redis" and not self.storage.redis_collection:
            problems.append("redis collection cannot be empty")

        if bool(self.tls.certificate) != bool(self.tls.private_key):
            problems.append("TLS requires both a certificate and a private key")

        if not 0 < self.server.port < 65536:
            problems.append(f"invalid port {self.server.port}")
        if self.server.timeout <= 0:
            problems.append("server timeout must be positive")

        if problems:
            raise ConfigError(problems)
        return self
