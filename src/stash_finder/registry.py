"""Deduplicated, count-sorted registry of discovered stashes."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from .models import RegionId, StashRecord


class StashRegistry:
    """Holds one record per chunk, kept sorted by storage count (highest first).

    Every operation runs under a single lock so the duplicate check and the
    insert happen as one step even if scans arrive from worker threads.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._records: list[StashRecord] = []
        self._positions: set[RegionId] = set()
        self._lock = threading.Lock()
        self._logger = logger or logging.getLogger("stash_finder.registry")

    def try_insert(self, record: StashRecord) -> bool:
        """Add ``record`` unless its chunk is already known. Returns ``False`` for duplicates."""
        with self._lock:
            if record.position in self._positions:
                return False

            self._records.append(record)
            self._positions.add(record.position)
            self._sort()

        self._logger.debug(
            "stash_recorded",
            extra={"position": record.position.as_tuple(), "storage_count": record.storage_count},
        )
        return True

    def clear(self) -> None:
        with self._lock:
            removed = len(self._records)
            self._records.clear()
            self._positions.clear()
        self._logger.info("stashes_cleared", extra={"removed": removed})

    def snapshot(self) -> tuple[StashRecord, ...]:
        """Return the current records, highest storage count first."""
        with self._lock:
            return tuple(self._records)

    def replace_all(self, records: Iterable[StashRecord]) -> None:
        """Replace the contents, dropping repeated chunks (first one wins) and re-sorting."""
        unique: list[StashRecord] = []
        seen: set[RegionId] = set()
        dropped = 0
        for record in records:
            if record.position in seen:
                dropped += 1
                continue
            seen.add(record.position)
            unique.append(record)

        with self._lock:
            self._records = unique
            self._positions = seen
            self._sort()

        if dropped:
            self._logger.warning("duplicate_stashes_dropped", extra={"dropped": dropped})
        self._logger.info("stashes_replaced", extra={"count": len(unique)})

    def get(self, region: RegionId) -> StashRecord | None:
        with self._lock:
            for record in self._records:
                if record.position == region:
                    return record
        return None

    def __contains__(self, item: object) -> bool:
        if isinstance(item, StashRecord):
            item = item.position
        with self._lock:
            return item in self._positions

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _sort(self) -> None:
        # list.sort is stable, so equal counts keep their insertion order.
        self._records.sort(key=lambda record: record.storage_count, reverse=True)
