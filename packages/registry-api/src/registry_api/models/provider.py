# SPDX-License-Identifier: MIT
"""Pydantic models for provider version records and their projections."""

from pydantic import BaseModel, Field, field_validator


class GPGPublicKey(BaseModel):
    """A public key that signed a platform's checksum list."""

    key_id: str = ""
    ascii_armor: str = ""
    trust_signature: str = ""
    source: str = ""
    source_url: str = ""


class SigningKeys(BaseModel):
    """Signing key bundle attached to a platform."""

    gpg_public_keys: list[GPGPublicKey] = Field(default_factory=list)


class Platform(BaseModel):
    """A downloadable artifact of one version for a single os/arch pair.

    The registry never hosts the artifact itself. It only records where
    clients can fetch it and how they can verify it.
    """

    os: str = Field(..., min_length=1)
    arch: str = Field(..., min_length=1)
    filename: str = ""
    download_url: str = ""
    shasums_url: str = ""
    shasums_signature_url: str = ""
    shasum: str = ""
    signing_keys: SigningKeys = Field(default_factory=SigningKeys)


class ProviderVersion(BaseModel):
    """A single published version of a provider."""

    version: str = Field(..., min_length=1, description="Opaque version identifier")
    protocols: list[str] = Field(default_factory=list)
    platforms: list[Platform] = Field(default_factory=list)

    @field_validator("platforms")
    @classmethod
    def validate_unique_platforms(cls, v: list[Platform]) -> list[Platform]:
        """Reject more than one platform for the same os/arch pair."""
        seen: set[tuple[str, str]] = set()
        for platform in v:
            pair = (platform.os, platform.arch)
            if pair in seen:
                raise ValueError(f"duplicate platform {platform.os}/{platform.arch}")
            seen.add(pair)
        return v

    def find_platform(self, os: str, arch: str) -> Platform | None:
        """Return the platform matching os and arch."""
        for platform in self.platforms:
            if platform.os == os and platform.arch == arch:
                return platform
        return None


class ProviderVersions(BaseModel):
    """Every version stored for one provider key, in publish order."""

    versions: list[ProviderVersion] = Field(default_factory=list)

    @field_validator("versions")
    @classmethod
    def validate_unique_versions(cls, v: list[ProviderVersion]) -> list[ProviderVersion]:
        """Reject stored collections holding the same version string twice."""
        seen: set[str] = set()
        for entry in v:
            if entry.version in seen:
                raise ValueError(f"duplicate version {entry.version}")
            seen.add(entry.version)
        return v

    def find_version(self, version: str) -> ProviderVersion | None:
        """Return the entry with the given version string, if any."""
        for entry in self.versions:
            if entry.version == version:
                return entry
        return None

    def upsert(self, provider_version: ProviderVersion) -> bool:
        """Replace the entry with the same version string, or append it.

        The whole entry is replaced; fields are never merged.

        Returns:
            True if an existing entry was replaced, False if appended.
        """
        for i, entry in enumerate(self.versions):
            if entry.version == provider_version.version:
                self.versions[i] = provider_version
                return True
        self.versions.append(provider_version)
        return False


class PlatformSummary(BaseModel):
    """Platform reduced to its os/arch pair for version listings."""

    os: str
    arch: str


class VersionSummary(BaseModel):
    """Version listing entry without any download or checksum fields."""

    version: str
    protocols: list[str] = Field(default_factory=list)
    platforms: list[PlatformSummary] = Field(default_factory=list)

    @classmethod
    def from_version(cls, provider_version: ProviderVersion) -> "VersionSummary":
        return cls(
            version=provider_version.version,
            protocols=list(provider_version.protocols),
            platforms=[
                PlatformSummary(os=p.os, arch=p.arch) for p in provider_version.platforms
            ],
        )


class VersionListResponse(BaseModel):
    """Response for the version listing endpoint."""

    versions: list[VersionSummary]


class DownloadResponse(BaseModel):
    """Download metadata for one platform, flattened with its version's protocols."""

    protocols: list[str] = Field(default_factory=list)
    os: str
    arch: str
    filename: str = ""
    download_url: str = ""
    shasums_url: str = ""
    shasums_signature_url: str = ""
    shasum: str = ""
    signing_keys: SigningKeys = Field(default_factory=SigningKeys)

    @classmethod
    def from_platform(
        cls, provider_version: ProviderVersion, platform: Platform
    ) -> "DownloadResponse":
        return cls(protocols=list(provider_version.protocols), **platform.model_dump())
