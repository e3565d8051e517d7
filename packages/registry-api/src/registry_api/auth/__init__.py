# SPDX-License-Identifier: MIT
"""Authentication handlers."""

from .secret import check_secret, require_secret_key

__all__ = ["check_secret", "require_secret_key"]
