# SPDX-License-Identifier: MIT
"""API route modules."""

from . import discovery, providers

__all__ = ["discovery", "providers"]
