"""JSON persistence for the stash registry.

The document is a list of ``{"pos": {"x": ..., "z": ...}, "storageCount": ...}``
objects. Unknown fields are ignored on read; a document that does not validate
loads as an empty list.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, ValidationError

from .models import RegionId, StashRecord

logger = logging.getLogger("stash_finder.persistence")


class StashStoreWriteError(OSError):
    """Raised when the state file cannot be written."""


class _PositionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    x: StrictInt
    z: StrictInt


class _StashPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    pos: _PositionPayload
    storage_count: StrictInt = Field(alias="storageCount", ge=1)


_STASH_LIST = TypeAdapter(list[_StashPayload])


def dumps(records: Iterable[StashRecord]) -> str:
    payloads = [
        _StashPayload.model_construct(
            pos=_PositionPayload.model_construct(x=record.position.x, z=record.position.z),
            storage_count=record.storage_count,
        )
        for record in records
    ]
    return _STASH_LIST.dump_json(payloads, indent=2, by_alias=True).decode("utf-8")


def loads(text: str | bytes) -> list[StashRecord]:
    if not text or not text.strip():
        return []

    try:
        payloads = _STASH_LIST.validate_json(text)
    except ValidationError as exc:
        logger.warning("stash_state_invalid", extra={"errors": exc.error_count()})
        return []

    return [
        StashRecord(position=RegionId(payload.pos.x, payload.pos.z), storage_count=payload.storage_count)
        for payload in payloads
    ]


class StashFileStore:
    """Reads and writes the registry as a single JSON document on disk."""

    def __init__(self, file_path: str | Path) -> None:
        self._path = Path(file_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[StashRecord]:
        if not self._path.exists():
            return []

        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("stash_state_unreadable", extra={"path": str(self._path), "error": str(exc)})
            return []

        records = loads(text)
        logger.info("stash_state_loaded", extra={"path": str(self._path), "count": len(records)})
        return records

    def save(self, records: Iterable[StashRecord]) -> None:
        document = dumps(records)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(document, encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StashStoreWriteError(f"Unable to write stash state to {self._path}: {exc}") from exc

        logger.info("stash_state_saved", extra={"path": str(self._path)})
