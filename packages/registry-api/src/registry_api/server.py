# SPDX-License-Identifier: MIT
"""Server construction.

Everything that can fail at start-up (configuration, TLS material,
storage backend selection) fails here, before the listener opens.
"""

import logging
import ssl
from typing import Any

import uvicorn

from .app import create_app
from .config import APIConfig, ConfigError
from .storage import create_catalog

logger = logging.getLogger(__name__)


def load_tls_context(certificate: str, private_key: str) -> ssl.SSLContext:
    """Load an x509 key pair into a server-side TLS context (TLS 1.2 minimum).

    Raises:
        ConfigError: If the certificate or key cannot be loaded.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    try:
        context.load_cert_chain(certfile=certificate, keyfile=private_key)
    except (OSError, ssl.SSLError) as e:
        raise ConfigError([f"failed to load tls keypair: {e}"]) from e
    return context


def build_server(config: APIConfig) -> uvicorn.Server:
    """Validate configuration and build a ready-to-run server.

    Raises:
        ConfigError: If configuration or TLS material is invalid.
    """
    config.validate()

    ssl_options: dict[str, Any] = {}
    if config.tls.enabled:
        context = load_tls_context(config.tls.certificate, config.tls.private_key)
        ssl_options = {"ssl_context_factory": lambda _config, _default: context}

    try:
        catalog = create_catalog(config.storage)
    except ValueError as e:
        raise ConfigError([str(e)]) from e

    app = create_app(config, catalog=catalog)
    server_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        timeout_keep_alive=int(config.server.timeout),
        log_config=None,
        **ssl_options,
    )

    logger.info(
        f"Server configured on {config.server.listen_address}",
        extra={
            "context": {
                "storage": config.storage.backend,
                "tls": config.tls.enabled,
            }
        },
    )
    return uvicorn.Server(server_config)
