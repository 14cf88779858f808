"""Ranked, deduplicated registry of storage hotspots found while exploring chunks."""

from .evaluator import evaluate
from .intake import StashFinder
from .models import NotificationChannel, RegionId, ScanOutcome, StashRecord, StructureType, ThresholdConfig
from .registry import StashRegistry

__all__ = [
    "NotificationChannel",
    "RegionId",
    "ScanOutcome",
    "StashFinder",
    "StashRecord",
    "StashRegistry",
    "StructureType",
    "ThresholdConfig",
    "evaluate",
]
