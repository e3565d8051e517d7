# SPDX-License-Identifier: MIT
"""Provider version listing, publishing and download endpoints.

GET handlers are plain functions so FastAPI runs each request on its own
worker thread; catalog reads may block on a lock or on I/O without
stalling other requests. The publish handler awaits the body itself and
hands catalog work to the same thread pool.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .. import handlers
from ..auth import require_secret_key
from ..models.provider import DownloadResponse, ProviderVersions, VersionListResponse
from ..models.responses import ErrorResponse
from ..storage import VersionCatalog, get_catalog

router = APIRouter()


@router.get(
    "/{namespace}/{name}/versions",
    response_model=VersionListResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def list_versions(
    namespace: str,
    name: str,
    catalog: Annotated[VersionCatalog, Depends(get_catalog)],
) -> VersionListResponse:
    """List the available versions of a provider.

    Platforms are reduced to their os/arch pairs; download and checksum
    fields are omitted.
    """
    return handlers.list_versions(catalog, namespace, name)


@router.put(
    "/{namespace}/{name}/versions",
    response_model=ProviderVersions,
    status_code=202,
    dependencies=[Depends(require_secret_key)],
    responses={
        200: {"model": ProviderVersions, "description": "Existing version replaced"},
        202: {"model": ProviderVersions, "description": "New version added"},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        407: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def publish_version(
    namespace: str,
    name: str,
    request: Request,
    catalog: Annotated[VersionCatalog, Depends(get_catalog)],
) -> JSONResponse:
    """Publish a provider version, replacing any entry with the same version string.

    Requires the shared secret header. Returns the provider's full version
    collection: 200 when an existing version was replaced, 202 when the
    version was added.
    """
    provider_version = handlers.parse_provider_version(await request.body())
    result = await run_in_threadpool(
        handlers.publish_version, catalog, namespace, name, provider_version
    )
    return JSONResponse(
        status_code=result.status_code,
        content=result.versions.model_dump(mode="json"),
    )


@router.get(
    "/{namespace}/{name}/{version}/download/{os}/{arch}",
    response_model=DownloadResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def download(
    namespace: str,
    name: str,
    version: str,
    os: str,
    arch: str,
    catalog: Annotated[VersionCatalog, Depends(get_catalog)],
) -> DownloadResponse:
    """Return download metadata for one platform of a provider version."""
    return handlers.resolve_download(catalog, namespace, name, version, os, arch)
