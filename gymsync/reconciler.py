"""
Gym Sync - Reconciler

Runs one reconciliation pass of a local catalog against the remote
collection: fetch the snapshot once, decide create vs update per record by
``id``, and collect one outcome per record in input order.

A failing record never stops the pass. Only a failed snapshot does.
"""

import asyncio
import logging
import time
from collections import Counter
from typing import Any, Iterable, Optional

from .client import BusinessUnitsClient
from .errors import SnapshotFailure, TransportError
from .models import Record, SyncOutcome, SyncReport
from .validator import ensure_valid

logger = logging.getLogger(__name__)


def find_remote(snapshot: list[Record], identifier: Any) -> Optional[Record]:
    """First remote record whose id equals ``identifier``."""
    for remote in snapshot:
        if remote.get("id") == identifier:
            return remote
    return None


class Reconciler:
    """Synchronize local business units with the remote API."""

    def __init__(
        self,
        client: BusinessUnitsClient,
        *,
        validate: bool = False,
        max_concurrency: int = 1,
    ):
        """
        Args:
            client: Resource client for the remote collection
            validate: Validate every record before any network call
            max_concurrency: Per-record calls in flight at once (1 = sequential)
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.client = client
        self.validate = validate
        self.max_concurrency = max_concurrency

    async def sync_all(self, records: Iterable[Record]) -> SyncReport:
        """
        Perform one reconciliation pass.

        Args:
            records: Local catalog, in the order outcomes should be reported

        Returns:
            SyncReport with exactly one outcome per input record

        Raises:
            ValidationError: a record is invalid (only when validate=True)
            SnapshotFailure: the remote collection could not be listed
        """
        records = list(records)
        start_time = time.time()

        if self.validate:
            for record in records:
                ensure_valid(record)

        logger.info(f"Starting sync of {len(records)} business units...")

        try:
            snapshot = await self.client.list()
        except TransportError as e:
            logger.error(f"Snapshot failed, aborting sync: {e}")
            raise SnapshotFailure.from_transport(e) from e

        self._warn_duplicates(snapshot)

        if self.max_concurrency > 1:
            outcomes = await self._sync_concurrent(records, snapshot)
        else:
            outcomes = [await self._sync_record(record, snapshot) for record in records]

        report = SyncReport(
            outcomes=outcomes,
            duration_seconds=time.time() - start_time,
        )

        logger.info(
            f"Sync completed in {report.duration_seconds:.2f}s: "
            f"{report.created} created, {report.updated} updated, {report.failed} failed"
        )
        return report

    async def _sync_concurrent(self, records: list[Record], snapshot: list[Record]) -> list[SyncOutcome]:
        """Fan out per-record calls; gather keeps input order."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(record: Record) -> SyncOutcome:
            async with semaphore:
                return await self._sync_record(record, snapshot)

        return list(await asyncio.gather(*(bounded(record) for record in records)))

    async def _sync_record(self, record: Record, snapshot: list[Record]) -> SyncOutcome:
        """Create or update one record. Transport failures become outcomes."""
        identifier = record.get("id")
        name = record.get("name", identifier)

        try:
            if find_remote(snapshot, identifier) is not None:
                logger.info(f"Updating existing gym: {name}")
                payload = await self.client.update(identifier, record)
                return SyncOutcome.updated(record, payload)

            logger.info(f"Creating new gym: {name}")
            payload = await self.client.create(record)
            return SyncOutcome.created(record, payload)

        except TransportError as e:
            logger.warning(f"Failed to sync {name}: {e}")
            return SyncOutcome.failed(record, e)

    @staticmethod
    def _warn_duplicates(snapshot: list[Record]) -> None:
        counts = Counter(remote.get("id") for remote in snapshot)
        duplicates = [identifier for identifier, count in counts.items() if count > 1]
        if duplicates:
            # First match still wins
            logger.warning(f"Remote snapshot has duplicate ids: {duplicates}")


async def sync_all(
    client: BusinessUnitsClient,
    records: Iterable[Record],
    **options,
) -> SyncReport:
    """Convenience wrapper around Reconciler.sync_all."""
    return await Reconciler(client, **options).sync_all(records)
