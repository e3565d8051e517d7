# SPDX-License-Identifier: MIT
"""Shared-secret authentication for the publish endpoint.

The secret is a single process-wide token fixed at start-up. A request
with no secret header is answered differently from one carrying the
wrong secret, so clients can tell a missing credential from a bad one.
"""

import secrets

from fastapi import Request

from ..config import AuthConfig
from ..middleware.errors import AuthenticationRequiredError, UnauthorizedError


def check_secret(header_value: str | None, config: AuthConfig) -> None:
    """Validate a secret header value against the configured secret.

    The comparison is exact and case-sensitive.

    Raises:
        AuthenticationRequiredError: If the header is absent.
        UnauthorizedError: If the header does not match the secret.
    """
    if header_value is None:
        raise AuthenticationRequiredError(config.secret_header)

    expected = config.secret_key
    if not expected or not secrets.compare_digest(
        header_value.encode("utf-8"), expected.encode("utf-8")
    ):
        raise UnauthorizedError()


async def require_secret_key(request: Request) -> None:
    """FastAPI dependency gating a route on the shared secret header.

    Runs before the request body is read.
    """
    config = request.app.state.config.auth
    check_secret(request.headers.get(config.secret_header), config)
