from __future__ import annotations

from pathlib import Path

import pytest

from stash_finder.events import ScanEvent
from stash_finder.intake import StashFinder, format_discovery_message
from stash_finder.models import NotificationChannel, RegionId, ScanOutcome, StashRecord, StructureType, ThresholdConfig
from stash_finder.persistence import StashFileStore


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[NotificationChannel, str, str]] = []

    def notify(self, channel: NotificationChannel, title: str, message: str) -> None:
        self.messages.append((channel, title, message))


def _config(**overrides) -> ThresholdConfig:
    values = {
        "match_types": frozenset({StructureType.CHEST}),
        "minimum_count": 4,
        "minimum_distance": 0,
        "notify": True,
        "notify_channel": NotificationChannel.CHAT,
    }
    values.update(overrides)
    return ThresholdConfig(**values)


def test_discovery_then_rescan_is_idempotent() -> None:
    finder = StashFinder()
    notifier = RecordingNotifier()

    first = finder.on_scan(RegionId(10, -3), ["chest"] * 4 + ["furnace"], _config(), notifier)
    second = finder.on_scan(RegionId(10, -3), ["chest"] * 6, _config(), notifier)

    assert first == ScanOutcome.DISCOVERED
    assert second == ScanOutcome.DUPLICATE
    assert finder.stashes == (StashRecord(RegionId(10, -3), storage_count=4),)
    assert finder.stashes[0].storage_count == 4
    assert len(notifier.messages) == 1
    channel, title, message = notifier.messages[0]
    assert channel == NotificationChannel.CHAT
    assert title == "Stash Finder"
    assert "10, -3" in message
    assert "4" in message


def test_not_qualified_scan_leaves_registry_untouched() -> None:
    finder = StashFinder()
    notifier = RecordingNotifier()

    outcome = finder.on_scan(RegionId(1, 1), ["chest", "barrel", "barrel", "barrel"], _config(), notifier)

    assert outcome == ScanOutcome.NOT_QUALIFIED
    assert finder.stashes == ()
    assert notifier.messages == []


@pytest.mark.parametrize(
    ("mode", "expected"),
    [
        (NotificationChannel.CHAT, [NotificationChannel.CHAT]),
        (NotificationChannel.POPUP, [NotificationChannel.POPUP]),
        (NotificationChannel.BOTH, [NotificationChannel.CHAT, NotificationChannel.POPUP]),
    ],
)
def test_notification_routing(mode: NotificationChannel, expected: list[NotificationChannel]) -> None:
    finder = StashFinder()
    notifier = RecordingNotifier()

    finder.on_scan(RegionId(2, 2), ["chest"] * 5, _config(notify_channel=mode), notifier)

    assert [channel for channel, _, _ in notifier.messages] == expected


def test_notifications_disabled_suppresses_messages() -> None:
    finder = StashFinder()
    notifier = RecordingNotifier()

    outcome = finder.on_scan(RegionId(2, 2), ["chest"] * 5, _config(notify=False), notifier)

    assert outcome == ScanOutcome.DISCOVERED
    assert len(finder.stashes) == 1
    assert notifier.messages == []


def test_reset_allows_rediscovery_and_renotification() -> None:
    finder = StashFinder()
    notifier = RecordingNotifier()
    finder.on_scan(RegionId(8, 8), ["chest"] * 4, _config(), notifier)

    finder.reset(notifier)
    outcome = finder.on_scan(RegionId(8, 8), ["chest"] * 7, _config(), notifier)

    assert outcome == ScanOutcome.DISCOVERED
    assert finder.stashes[0].storage_count == 7
    assert [message for _, _, message in notifier.messages] == [
        "Found chunk 8, 8 with 4 storage blocks.",
        "Cleared stashes.",
        "Found chunk 8, 8 with 7 storage blocks.",
    ]


def test_handle_skips_events_that_are_not_fresh() -> None:
    finder = StashFinder()

    stale = finder.handle(ScanEvent(RegionId(3, 3), ("chest",) * 8, fresh=False), _config())
    fresh = finder.handle(ScanEvent(RegionId(3, 3), ("chest",) * 8), _config())

    assert stale == ScanOutcome.SKIPPED
    assert fresh == ScanOutcome.DISCOVERED


def test_registry_stays_sorted_across_discoveries() -> None:
    finder = StashFinder()

    for x, count in [(0, 4), (1, 10), (2, 7), (3, 4), (4, 15)]:
        finder.on_scan(RegionId(x, 0), ["chest"] * count, _config(notify=False))

    counts = [record.storage_count for record in finder.stashes]
    assert counts == sorted(counts, reverse=True)


def test_lifecycle_load_activate_and_deactivate(tmp_path: Path) -> None:
    store = StashFileStore(tmp_path / "stashes.json")
    store.save([StashRecord(RegionId(1, 1), storage_count=5), StashRecord(RegionId(2, 2), storage_count=9)])

    finder = StashFinder(store=store)
    assert finder.load() == 2
    assert finder.stashes[0].position == RegionId(2, 2)

    finder.activate()
    assert finder.stashes == ()

    finder.on_scan(RegionId(6, 6), ["chest"] * 6, _config(notify=False))
    finder.deactivate()

    assert store.load() == [StashRecord(RegionId(6, 6), storage_count=6)]


def test_save_without_store_is_an_error() -> None:
    with pytest.raises(RuntimeError):
        StashFinder().save()


def test_format_discovery_message() -> None:
    record = StashRecord(RegionId(-12, 40), storage_count=21)

    assert format_discovery_message(record) == "Found chunk -12, 40 with 21 storage blocks."


@pytest.mark.parametrize("minimum_count", [0, -3])
def test_out_of_range_minimum_never_records_empty_chunks(tmp_path: Path, minimum_count: int) -> None:
    store = StashFileStore(tmp_path / "stashes.json")
    finder = StashFinder(store=store)
    notifier = RecordingNotifier()
    config = _config(minimum_count=minimum_count)

    found = finder.on_scan(RegionId(5, 5), ["chest"] * 9, config, notifier)
    empty = finder.on_scan(RegionId(6, 6), [], config, notifier)
    finder.deactivate()

    assert found == ScanOutcome.DISCOVERED
    assert empty == ScanOutcome.NOT_QUALIFIED
    assert len(notifier.messages) == 1
    assert finder.load() == 1
    assert all(record.storage_count >= 1 for record in finder.stashes)
    assert store.load() == [StashRecord(RegionId(5, 5), storage_count=9)]
