"""Stash finder module: routes chunk scans through the evaluator into the registry."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .evaluator import evaluate
from .events import ScanEvent
from .models import NotificationChannel, RegionId, ScanOutcome, StashRecord, ThresholdConfig
from .notifier import Notifier
from .persistence import StashFileStore
from .registry import StashRegistry

NOTIFICATION_TITLE = "Stash Finder"


def format_discovery_message(record: StashRecord) -> str:
    return f"Found chunk {record.position.short_string()} with {record.storage_count} storage blocks."


class StashFinder:
    """Owns a registry and feeds it from scan events.

    Re-scanning a chunk that is already recorded is a no-op: the stored count is
    kept and no notification is sent.
    """

    def __init__(
        self,
        *,
        registry: StashRegistry | None = None,
        store: StashFileStore | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry or StashRegistry()
        self._store = store
        self._logger = logger or logging.getLogger("stash_finder.intake")

    @property
    def registry(self) -> StashRegistry:
        return self._registry

    @property
    def stashes(self) -> tuple[StashRecord, ...]:
        return self._registry.snapshot()

    def on_scan(
        self,
        region: RegionId,
        inventory: Iterable[object],
        config: ThresholdConfig,
        notifier: Notifier | None = None,
    ) -> ScanOutcome:
        result = evaluate(region, inventory, config)
        # A minimum_count below 1 lets empty chunks qualify; never record those.
        if not result.qualified or result.match_count < 1:
            return ScanOutcome.NOT_QUALIFIED

        record = StashRecord(position=region, storage_count=result.match_count)
        if not self._registry.try_insert(record):
            self._logger.debug("stash_already_known", extra={"position": region.as_tuple()})
            return ScanOutcome.DUPLICATE

        self._logger.info(
            "stash_discovered",
            extra={
                "position": region.as_tuple(),
                "storage_count": record.storage_count,
                "distance": round(result.distance, 2),
            },
        )
        if config.notify and notifier is not None:
            self._send_discovery(record, config.notify_channel, notifier)
        return ScanOutcome.DISCOVERED

    def handle(self, event: ScanEvent, config: ThresholdConfig, notifier: Notifier | None = None) -> ScanOutcome:
        if not event.fresh:
            return ScanOutcome.SKIPPED
        return self.on_scan(event.region, event.inventory, config, notifier)

    def activate(self) -> None:
        self._registry.clear()

    def deactivate(self) -> None:
        if self._store is not None:
            self.save()

    def reset(self, notifier: Notifier | None = None) -> None:
        """Clear all recorded stashes on user request."""
        self._registry.clear()
        if notifier is not None:
            notifier.notify(NotificationChannel.POPUP, NOTIFICATION_TITLE, "Cleared stashes.")

    def load(self) -> int:
        """Replace the registry with the persisted state. Returns the number of stashes loaded."""
        records = self._store.load() if self._store is not None else []
        self._registry.replace_all(records)
        return len(self._registry)

    def save(self) -> None:
        if self._store is None:
            raise RuntimeError("No stash store configured")
        self._store.save(self._registry.snapshot())

    @staticmethod
    def _send_discovery(record: StashRecord, channel: NotificationChannel, notifier: Notifier) -> None:
        message = format_discovery_message(record)
        if channel.wants_chat:
            notifier.notify(NotificationChannel.CHAT, NOTIFICATION_TITLE, message)
        if channel.wants_popup:
            notifier.notify(NotificationChannel.POPUP, NOTIFICATION_TITLE, message)
