# SPDX-License-Identifier: MIT
"""Pytest fixtures for API tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from registry_api import APIConfig, MemoryCatalog, create_app
from registry_api.models.provider import ProviderVersion

SECRET_KEY = "5a3c1c0e-6a44-4f5e-9d0b-2b7f7a0f3d11"
SECRET_HEADER = "X-Registry-Secret-Key"


@pytest.fixture
def test_config() -> APIConfig:
    """Create test configuration with in-memory storage."""
    config = APIConfig()
    config.storage.backend = "memory"
    config.auth.secret_key = SECRET_KEY
    return config


@pytest.fixture
def catalog() -> MemoryCatalog:
    """Create an empty in-memory catalog."""
    return MemoryCatalog()


@pytest.fixture
def app(test_config: APIConfig, catalog: MemoryCatalog):
    """Create test FastAPI application."""
    return create_app(test_config, catalog=catalog)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers carrying the correct shared secret."""
    return {SECRET_HEADER: SECRET_KEY}


@pytest.fixture
def aws_version_payload() -> dict:
    """Publish body for hashicorp/aws 5.1.0 on linux/amd64."""
    return {
        "version": "5.1.0",
        "protocols": ["5.0"],
        "platforms": [
            {
                "os": "linux",
                "arch": "amd64",
                "filename": "aws_5.1.0_linux_amd64.zip",
                "download_url": "https://x/aws.zip",
                "shasum": "abc123",
            }
        ],
    }


@pytest.fixture
def signed_version() -> ProviderVersion:
    """A version with two platforms, one carrying a signing key."""
    return ProviderVersion.model_validate(
        {
            "version": "2.0.0",
            "protocols": ["5.0", "6.0"],
            "platforms": [
                {
                    "os": "linux",
                    "arch": "amd64",
                    "filename": "random_2.0.0_linux_amd64.zip",
                    "download_url": "https://releases.example.com/random_2.0.0_linux_amd64.zip",
                    "shasums_url": "https://releases.example.com/random_2.0.0_SHA256SUMS",
                    "shasums_signature_url": "https://releases.example.com/random_2.0.0_SHA256SUMS.sig",
                    "shasum": "a" * 64,
                    "signing_keys": {
                        "gpg_public_keys": [
                            {
                                "key_id": "51852D87348FFC4C",
                                "ascii_armor": "-----BEGIN PGP PUBLIC KEY BLOCK-----\n...",
                                "trust_signature": "",
                                "source": "Example",
                                "source_url": "https://example.com/security.html",
                            }
                        ]
                    },
                },
                {
                    "os": "darwin",
                    "arch": "arm64",
                    "filename": "random_2.0.0_darwin_arm64.zip",
                    "download_url": "https://releases.example.com/random_2.0.0_darwin_arm64.zip",
                    "shasum": "b" * 64,
                },
            ],
        }
    )
