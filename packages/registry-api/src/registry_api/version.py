# SPDX-License-Identifier: MIT
"""Build information reported by the /version endpoint."""

import os

from pydantic import BaseModel

from . import __version__


class BuildVersion(BaseModel):
    """Release version, commit and build date of the running server."""

    version: str
    commit_hash: str
    build_date: str


def build_version() -> BuildVersion:
    """Return build information injected through the environment at build time."""
    return BuildVersion(
        version=os.getenv("REGISTRY_BUILD_VERSION", __version__),
        commit_hash=os.getenv("REGISTRY_BUILD_COMMIT", ""),
        build_date=os.getenv("REGISTRY_BUILD_DATE", ""),
    )
