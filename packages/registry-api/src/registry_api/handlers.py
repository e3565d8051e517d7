# SPDX-License-Identifier: MIT
"""Provider protocol handlers.

Each handler is a plain synchronous function over a version catalog. They
hold no state between calls and translate catalog faults into API errors,
so routes only bind them to HTTP.
"""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from .middleware.errors import (
    BackendError,
    EncodingError,
    ErrorDetail,
    InvalidRequestError,
    PlatformNotFoundError,
    ProviderNotFoundError,
)
from .models.provider import (
    DownloadResponse,
    ProviderVersion,
    ProviderVersions,
    VersionListResponse,
    VersionSummary,
)
from .storage import (
    CatalogDecodeError,
    CatalogError,
    InvalidProviderKeyError,
    ProviderKey,
    VersionCatalog,
)

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Outcome of a publish: the stored collection and whether a version was replaced."""

    versions: ProviderVersions
    updated: bool

    @property
    def status_code(self) -> int:
        return 200 if self.updated else 202


def make_key(namespace: str, name: str) -> ProviderKey:
    """Build a provider key from request path parameters.

    Raises:
        InvalidRequestError: If namespace or name is not a valid key segment.
    """
    try:
        return ProviderKey(namespace=namespace, name=name)
    except InvalidProviderKeyError as e:
        raise InvalidRequestError(
            str(e), details=[ErrorDetail(field=e.field, error="invalid characters", value=e.value)]
        ) from e


def _read(catalog: VersionCatalog, key: ProviderKey) -> ProviderVersions | None:
    try:
        return catalog.read(key)
    except CatalogDecodeError as e:
        raise EncodingError(f"Stored versions for '{key}' could not be decoded") from e
    except CatalogError as e:
        raise BackendError(f"Failed to read versions for '{key}'") from e


def _read_existing(catalog: VersionCatalog, namespace: str, name: str) -> ProviderVersions:
    key = make_key(namespace, name)
    versions = _read(catalog, key)
    if versions is None:
        raise ProviderNotFoundError(namespace, name)
    return versions


def list_versions(catalog: VersionCatalog, namespace: str, name: str) -> VersionListResponse:
    """List every version of a provider without download details.

    Raises:
        ProviderNotFoundError: If nothing is stored for the provider.
        BackendError: If the catalog cannot be read.
    """
    versions = _read_existing(catalog, namespace, name)
    return VersionListResponse(
        versions=[VersionSummary.from_version(v) for v in versions.versions]
    )


def parse_provider_version(body: bytes) -> ProviderVersion:
    """Decode a publish request body.

    Raises:
        InvalidRequestError: If the body is empty, not valid JSON, or has
            no version string.
    """
    if not body or not body.strip():
        raise InvalidRequestError("Request body is required")

    try:
        return ProviderVersion.model_validate_json(body)
    except ValidationError as e:
        details = [
            ErrorDetail(field=".".join(str(p) for p in err["loc"]) or "body", error=err["msg"])
            for err in e.errors()
        ]
        raise InvalidRequestError("Invalid provider version", details=details) from e


def publish_version(
    catalog: VersionCatalog,
    namespace: str,
    name: str,
    provider_version: ProviderVersion,
) -> PublishResult:
    """Insert or replace one version of a provider.

    A missing provider is treated as an empty collection. An entry with
    the same version string is replaced whole, otherwise the version is
    appended.

    Raises:
        BackendError: If the catalog cannot be read or written.
    """
    key = make_key(namespace, name)
    versions = _read(catalog, key) or ProviderVersions()
    updated = versions.upsert(provider_version)

    try:
        catalog.write(key, versions)
    except CatalogError as e:
        raise BackendError(f"Failed to write versions for '{key}'") from e

    logger.info(
        f"{'Updated' if updated else 'Created'} version {provider_version.version} of {key}",
        extra={
            "context": {
                "namespace": namespace,
                "name": name,
                "version": provider_version.version,
                "updated": updated,
            }
        },
    )
    return PublishResult(versions=versions, updated=updated)


def resolve_download(
    catalog: VersionCatalog,
    namespace: str,
    name: str,
    version: str,
    os: str,
    arch: str,
) -> DownloadResponse:
    """Resolve the download metadata for one platform of one version.

    A missing version and a missing platform are both reported as
    PlatformNotFoundError.

    Raises:
        ProviderNotFoundError: If nothing is stored for the provider.
        PlatformNotFoundError: If the version or platform does not exist.
        BackendError: If the catalog cannot be read.
    """
    versions = _read_existing(catalog, namespace, name)

    provider_version = versions.find_version(version)
    platform = provider_version.find_platform(os, arch) if provider_version else None
    if provider_version is None or platform is None:
        raise PlatformNotFoundError(namespace, name, version, os, arch)

    return DownloadResponse.from_platform(provider_version, platform)
