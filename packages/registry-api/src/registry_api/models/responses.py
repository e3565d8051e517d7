# SPDX-License-Identifier: MIT
"""Pydantic models for API response wrappers."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: dict = Field(description="Error object containing code, message, and optional details")


class DiscoveryResponse(BaseModel):
    """Service discovery document served from /.well-known/terraform.json."""

    model_config = ConfigDict(populate_by_name=True)

    providers_v1: str = Field(alias="providers.v1")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
