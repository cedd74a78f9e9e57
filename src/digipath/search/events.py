# search/events.py
from dataclasses import dataclass


@dataclass(frozen=True)
class NodeSettled:
    search_id: int
    step: int
    index: int
    ancestor: int
    distance: float


@dataclass(frozen=True)
class SearchFinished:
    search_id: int
    settled: int
    max_distance: float
