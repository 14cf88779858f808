from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

CHUNK_SIZE = 16


class StructureType(str, Enum):
    """Storage block entity kinds that can be counted in a chunk."""

    BARREL = "barrel"
    BLAST_FURNACE = "blast_furnace"
    BREWING_STAND = "brewing_stand"
    CAMPFIRE = "campfire"
    CHEST = "chest"
    CHISELED_BOOKSHELF = "chiseled_bookshelf"
    CRAFTER = "crafter"
    DECORATED_POT = "decorated_pot"
    DISPENSER = "dispenser"
    DROPPER = "dropper"
    ENDER_CHEST = "ender_chest"
    FURNACE = "furnace"
    HOPPER = "hopper"
    SHULKER_BOX = "shulker_box"
    SMOKER = "smoker"
    TRAPPED_CHEST = "trapped_chest"

    @classmethod
    def parse(cls, tag: Any) -> StructureType | None:
        """Resolve ``chest``, ``minecraft:chest`` or a member; ``None`` for anything else."""
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            return None

        name = tag.strip().lower().removeprefix("minecraft:")
        try:
            return cls(name)
        except ValueError:
            return None


ALL_STRUCTURE_TYPES: frozenset[StructureType] = frozenset(StructureType)


class NotificationChannel(str, Enum):
    """Where discovery notifications are routed."""

    CHAT = "chat"
    POPUP = "popup"
    BOTH = "both"

    @property
    def wants_chat(self) -> bool:
        return self in (NotificationChannel.CHAT, NotificationChannel.BOTH)

    @property
    def wants_popup(self) -> bool:
        return self in (NotificationChannel.POPUP, NotificationChannel.BOTH)


@dataclass(frozen=True, slots=True)
class RegionId:
    """Chunk coordinate pair identifying a scanned region."""

    x: int
    z: int

    def short_string(self) -> str:
        return f"{self.x}, {self.z}"

    def as_tuple(self) -> tuple[int, int]:
        return self.x, self.z

    def block_center(self) -> tuple[int, int]:
        """World block coordinates of the chunk centre, for travel requests."""
        return self.x * CHUNK_SIZE + CHUNK_SIZE // 2, self.z * CHUNK_SIZE + CHUNK_SIZE // 2

    def __str__(self) -> str:
        return self.short_string()


@dataclass(frozen=True, slots=True)
class StashRecord:
    """A qualifying chunk and the storage count seen when it was discovered.

    Identity is the position alone: two records for the same chunk compare equal
    whatever their counts.
    """

    position: RegionId
    storage_count: int = field(compare=False)


@dataclass(frozen=True, slots=True)
class ThresholdConfig:
    """Snapshot of the settings the scan evaluator and intake read per event."""

    match_types: frozenset[StructureType] = ALL_STRUCTURE_TYPES
    minimum_count: int = 4
    minimum_distance: int = 0
    notify: bool = True
    notify_channel: NotificationChannel = NotificationChannel.BOTH


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    qualified: bool
    match_count: int
    distance: float

    @classmethod
    def not_qualified(cls, *, match_count: int, distance: float) -> EvaluationResult:
        return cls(qualified=False, match_count=match_count, distance=distance)

    @classmethod
    def qualified_with(cls, *, match_count: int, distance: float) -> EvaluationResult:
        return cls(qualified=True, match_count=match_count, distance=distance)


class ScanOutcome(str, Enum):
    """Result of feeding one scan event through the intake."""

    SKIPPED = "skipped"
    NOT_QUALIFIED = "not_qualified"
    DUPLICATE = "duplicate"
    DISCOVERED = "discovered"
