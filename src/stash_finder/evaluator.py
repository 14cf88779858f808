"""Density and distance filter applied to each scanned chunk."""

from __future__ import annotations

import math
from collections.abc import Iterable

from .models import EvaluationResult, RegionId, StructureType, ThresholdConfig


def count_matches(inventory: Iterable[object], match_types: frozenset[StructureType]) -> int:
    """Count inventory entries whose type is in ``match_types``; unknown tags are ignored."""
    count = 0
    for tag in inventory:
        structure = StructureType.parse(tag)
        if structure is not None and structure in match_types:
            count += 1
    return count


def distance_from_origin(region: RegionId) -> float:
    return math.hypot(region.x, region.z)


def evaluate(region: RegionId, inventory: Iterable[object], config: ThresholdConfig) -> EvaluationResult:
    distance = distance_from_origin(region)
    match_count = count_matches(inventory, config.match_types)

    if distance >= config.minimum_distance and match_count >= config.minimum_count:
        return EvaluationResult.qualified_with(match_count=match_count, distance=distance)
    return EvaluationResult.not_qualified(match_count=match_count, distance=distance)
