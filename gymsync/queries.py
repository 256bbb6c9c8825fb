"""
Read-only helpers layered on the client's list operation.

Each call lists the collection fresh; nothing is cached. Absence of a match
is a result. Transport failures propagate, except in check_connection which
exists to report them.
"""

import logging
from typing import Any

from .client import BusinessUnitsClient
from .errors import TransportError
from .models import ConnectionCheck, LookupResult, Record

logger = logging.getLogger(__name__)


async def find_by_id(client: BusinessUnitsClient, identifier: Any) -> LookupResult:
    """First remote record with a matching id, or a not-found result."""
    for record in await client.list():
        if record.get("id") == identifier:
            return LookupResult(identifier=identifier, found=True, record=record)
    return LookupResult(identifier=identifier, found=False)


def _matches(record: Record, term: str) -> bool:
    address = record.get("address") or {}
    if not isinstance(address, dict):
        address = {}
    for value in (record.get("name"), address.get("city"), address.get("street")):
        if isinstance(value, str) and term in value.lower():
            return True
    return False


async def search_by_text(client: BusinessUnitsClient, query: str) -> list[Record]:
    """Case-insensitive substring search over name, city and street."""
    term = query.lower()
    return [record for record in await client.list() if _matches(record, term)]


async def check_connection(client: BusinessUnitsClient) -> ConnectionCheck:
    """Probe the collection endpoint and report the outcome as a value."""
    try:
        records = await client.list()
    except TransportError as e:
        logger.error(f"API connection failed: {e}")
        return ConnectionCheck(success=False, endpoint=client.endpoint, error=e.to_dict())

    logger.info(f"API connection successful, found {len(records)} business units")
    return ConnectionCheck(success=True, count=len(records), endpoint=client.endpoint)
