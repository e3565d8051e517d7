# SPDX-License-Identifier: MIT
"""Pydantic models for API requests and responses."""

from .provider import (
    DownloadResponse,
    GPGPublicKey,
    Platform,
    PlatformSummary,
    ProviderVersion,
    ProviderVersions,
    SigningKeys,
    VersionListResponse,
    VersionSummary,
)
from .responses import DiscoveryResponse, ErrorResponse, HealthResponse

__all__ = [
    # Provider models
    "DownloadResponse",
    "GPGPublicKey",
    "Platform",
    "PlatformSummary",
    "ProviderVersion",
    "ProviderVersions",
    "SigningKeys",
    "VersionListResponse",
    "VersionSummary",
    # Response models
    "DiscoveryResponse",
    "ErrorResponse",
    "HealthResponse",
]
