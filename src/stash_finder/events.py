"""Scan events and a JSONL source for replaying them."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .models import RegionId

logger = logging.getLogger("stash_finder.events")


@dataclass(frozen=True, slots=True)
class ScanEvent:
    """One chunk scan: its position and the block entity tags found in it.

    ``fresh`` is false for updates of chunks the client already had loaded.
    """

    region: RegionId
    inventory: tuple[str, ...] = field(default_factory=tuple)
    fresh: bool = True


def parse_scan_event(payload: dict) -> ScanEvent:
    blocks = payload.get("blocks", [])
    if not isinstance(blocks, list):
        raise ValueError("blocks must be a list")

    x, z = payload["x"], payload["z"]
    if isinstance(x, bool) or isinstance(z, bool) or not isinstance(x, int) or not isinstance(z, int):
        raise ValueError("x and z must be integers")

    fresh = payload.get("fresh", True)
    if not isinstance(fresh, bool):
        raise ValueError("fresh must be a boolean")

    return ScanEvent(
        region=RegionId(x, z),
        inventory=tuple(str(block) for block in blocks),
        fresh=fresh,
    )


def read_scan_events(file_path: str | Path) -> Iterator[ScanEvent]:
    """Yield events from a JSONL file of ``{"x", "z", "blocks", "fresh"?}`` objects.

    Blank lines are skipped; malformed lines are logged and skipped.
    """
    path = Path(file_path)
    with path.open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
                if not isinstance(payload, dict):
                    raise ValueError("event must be a JSON object")
                yield parse_scan_event(payload)
            except (json.JSONDecodeError, KeyError, ValueError) as exc:
                logger.warning(
                    "scan_event_skipped",
                    extra={"path": str(path), "line": line_number, "error": str(exc)},
                )
