"""
Gym routes for the Gym Sync API.

Exposes reconciliation, validation and the query helpers over HTTP so
interactive surfaces get structured results.
"""

from typing import Annotated, Any, AsyncIterator

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from api.core.config import Settings, get_settings
from api.models.schemas import (
    BusinessUnit,
    ConnectionResponse,
    DeleteResponse,
    ErrorResponse,
    LookupResponse,
    SearchResponse,
    SyncReportResponse,
    SyncRequest,
    ValidationResponse,
)
from gymsync.catalog import resolve_catalog
from gymsync.client import BusinessUnitsClient
from gymsync.errors import SnapshotFailure, TransportError, ValidationError
from gymsync.queries import check_connection, find_by_id, search_by_text
from gymsync.reconciler import Reconciler
from gymsync.validator import validate_record

router = APIRouter(prefix="/gyms", tags=["Gyms"])


# =============================================================================
# Dependencies
# =============================================================================

async def get_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AsyncIterator[BusinessUnitsClient]:
    """Client for the remote API, closed after the request."""
    client = BusinessUnitsClient(settings.client_config())
    try:
        yield client
    finally:
        await client.close()


def get_catalog(
    settings: Annotated[Settings, Depends(get_settings)],
) -> list[dict[str, Any]]:
    """The configured local catalog."""
    return resolve_catalog(settings.catalog_path)


Client = Annotated[BusinessUnitsClient, Depends(get_client)]
Catalog = Annotated[list[dict[str, Any]], Depends(get_catalog)]


def _upstream_error(error: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=error.to_dict(),
    )


UPSTREAM_RESPONSES = {
    502: {"description": "Remote API failed", "model": ErrorResponse},
}


# =============================================================================
# Catalog & Validation
# =============================================================================

@router.get(
    "/catalog",
    response_model=list[dict[str, Any]],
    responses={200: {"model": list[BusinessUnit]}},
    summary="Local catalog",
    description="The gyms that a sync pass would submit, exactly as loaded. "
    "Use /validate to check individual records.",
)
async def get_local_catalog(catalog: Catalog) -> list[dict[str, Any]]:
    return catalog


@router.post(
    "/validate",
    response_model=ValidationResponse,
    summary="Validate a record",
    description="Check a record against required-field and structural rules. No network access.",
)
async def validate_gym(record: Annotated[dict[str, Any], Body()]) -> ValidationResponse:
    result = validate_record(record)
    return ValidationResponse(valid=result.valid, errors=result.errors)


# =============================================================================
# Sync
# =============================================================================

@router.post(
    "/sync",
    response_model=SyncReportResponse,
    responses={
        200: {"description": "Outcome of every record, in input order"},
        422: {"description": "A record failed pre-flight validation", "model": ErrorResponse},
        **UPSTREAM_RESPONSES,
    },
    summary="Sync gyms",
    description="Create or update every gym on the remote API and report each outcome.",
)
async def sync_gyms(
    client: Client,
    catalog: Catalog,
    settings: Annotated[Settings, Depends(get_settings)],
    body: SyncRequest | None = None,
) -> dict[str, Any]:
    """
    Run one reconciliation pass.

    Per-record failures are reported inside the response with status 200.
    Only a failed snapshot or a failed pre-flight validation fails the call.
    """
    records = catalog
    validate_first = settings.sync_validate_first
    if body is not None:
        if body.records is not None:
            records = body.records
        if body.validate_first is not None:
            validate_first = body.validate_first

    reconciler = Reconciler(
        client,
        validate=validate_first,
        max_concurrency=settings.sync_max_concurrency,
    )

    try:
        report = await reconciler.sync_all(records)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.to_dict(),
        )
    except SnapshotFailure as e:
        raise _upstream_error(e)

    return report.to_dict()


# =============================================================================
# Queries
# =============================================================================

@router.get(
    "/connection",
    response_model=ConnectionResponse,
    summary="Test API connection",
)
async def probe_connection(client: Client) -> dict[str, Any]:
    check = await check_connection(client)
    return check.to_dict()


@router.get(
    "/search",
    response_model=SearchResponse,
    responses=UPSTREAM_RESPONSES,
    summary="Search gyms",
    description="Case-insensitive search over name, city and street.",
)
async def search_gyms(
    client: Client,
    q: str = Query(..., min_length=1, description="Search text"),
) -> SearchResponse:
    try:
        results = await search_by_text(client, q)
    except TransportError as e:
        raise _upstream_error(e)
    return SearchResponse(query=q, count=len(results), results=results)


@router.get(
    "/{gym_id}",
    response_model=LookupResponse,
    responses={
        404: {"description": "Gym not found", "model": ErrorResponse},
        **UPSTREAM_RESPONSES,
    },
    summary="Get gym by id",
)
async def get_gym(gym_id: int, client: Client) -> dict[str, Any]:
    try:
        result = await find_by_id(client, gym_id)
    except TransportError as e:
        raise _upstream_error(e)

    if not result.found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Gym {gym_id} not found",
        )
    return result.to_dict()


@router.delete(
    "/{gym_id}",
    response_model=DeleteResponse,
    responses=UPSTREAM_RESPONSES,
    summary="Delete gym",
    description="Remove a gym from the remote API. Never part of a sync pass.",
)
async def delete_gym(gym_id: int, client: Client) -> DeleteResponse:
    try:
        deleted = await client.delete(gym_id)
    except TransportError as e:
        raise _upstream_error(e)
    return DeleteResponse(identifier=gym_id, deleted=deleted)
