"""Qualitative threat level for a set of hazardous approaches.

This is a heuristic label for readers of the report, not a physical
impact-risk model.
"""

from enum import Enum
from typing import Iterable

from .config import ELEVATED_LUNAR_DISTANCE
from .normalize import Approach


class ThreatLevel(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    ELEVATED = "ELEVATED"


def classify_threat(hazardous: Iterable[Approach], threshold_lunar: float = ELEVATED_LUNAR_DISTANCE) -> ThreatLevel:
    hazardous = list(hazardous)
    if not hazardous:
        return ThreatLevel.LOW
    if any(a.distance_lunar < threshold_lunar for a in hazardous):
        return ThreatLevel.ELEVATED
    return ThreatLevel.NORMAL
