# SPDX-License-Identifier: MIT
"""Service discovery endpoint."""

from fastapi import APIRouter, Request

from ..models.responses import DiscoveryResponse

router = APIRouter()


@router.get("/.well-known/terraform.json", response_model=DiscoveryResponse)
def discovery(request: Request) -> DiscoveryResponse:
    """Advertise the path prefix the provider endpoints are served under."""
    config = request.app.state.config
    return DiscoveryResponse(providers_v1=config.providers_prefix)
