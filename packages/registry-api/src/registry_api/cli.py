# SPDX-License-Identifier: MIT
"""CLI entry point for the registry command."""

from __future__ import annotations

import json
import logging
import sys

import click

from .config import STORAGE_BACKENDS, APIConfig, ConfigError
from .logs import configure_logging
from .version import build_version

logger = logging.getLogger(__name__)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


@click.group()
@click.version_option(package_name="provider-registry")
def cli() -> None:
    """Provider registry server."""


@cli.command()
@click.option(
    "--providers-dir",
    envvar="REGISTRY_PROVIDERS_DIR",
    default="./providers",
    show_default=True,
    help="The directory to serve providers from (filesystem storage).",
)
@click.option(
    "--certificate",
    envvar="REGISTRY_TLS_CERTIFICATE",
    default=None,
    help="The x509 TLS certificate file (optional).",
)
@click.option(
    "--private-key",
    envvar="REGISTRY_TLS_PRIVATE_KEY",
    default=None,
    help="The x509 TLS private key file (optional).",
)
@click.option(
    "--host",
    envvar="REGISTRY_HOST",
    default="0.0.0.0",
    show_default=True,
    help="The address to listen on.",
)
@click.option(
    "--port",
    envvar="REGISTRY_PORT",
    type=int,
    default=8080,
    show_default=True,
    help="The TCP port to listen on.",
)
@click.option(
    "--storage-type",
    envvar="REGISTRY_CONFIG_STORAGE_TYPE",
    type=click.Choice(STORAGE_BACKENDS),
    default="memory",
    show_default=True,
    help="The storage backend to use.",
)
@click.option(
    "--read-only",
    is_flag=True,
    envvar="REGISTRY_PROVIDERS_READ_ONLY",
    help="Reject publishes to filesystem storage.",
)
@click.option(
    "--redis-url",
    envvar="REGISTRY_REDIS_URL",
    default="redis://localhost:6379/0",
    show_default=True,
    help="Redis URL (redis storage).",
)
@click.option(
    "--secret-key",
    envvar="REGISTRY_CONFIG_SECRET_KEY",
    default=None,
    help="A UUID secret key, used for authenticating publishes.",
)
@click.option(
    "--log-level",
    envvar="REGISTRY_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Minimum log level.",
)
def serve(
    providers_dir: str,
    certificate: str | None,
    private_key: str | None,
    host: str,
    port: int,
    storage_type: str,
    read_only: bool,
    redis_url: str,
    secret_key: str | None,
    log_level: str,
) -> None:
    """Run the registry API server."""
    config = APIConfig()
    config.storage.backend = storage_type
    config.storage.providers_dir = providers_dir
    config.storage.read_only = read_only
    config.storage.redis_url = redis_url
    config.tls.certificate = certificate or None
    config.tls.private_key = private_key or None
    config.server.host = host
    config.server.port = port
    config.auth.secret_key = secret_key or None
    config.logging.level = log_level.upper()

    configure_logging(config.logging.service_name, config.logging.level)

    from .server import build_server

    try:
        server = build_server(config)
    except ConfigError as e:
        logger.error(f"configure error: {e}")
        echo_error(str(e))
        sys.exit(1)

    server.run()
    logger.info("server exited cleanly, shutting down")


@cli.command()
def version() -> None:
    """Print build information as JSON."""
    click.echo(json.dumps(build_version().model_dump()))


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
