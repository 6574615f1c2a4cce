"""Shoot day aggregates.

A day's total_page_eighths and scene_count are a pure function of the scenes
currently assigned to it. This module is the only writer of those fields.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from shootsync.db.models import Scene, ShootDay
from shootsync.script.page_length import EIGHTHS_PER_PAGE


class DayAggregate(NamedTuple):
    total_page_eighths: int
    scene_count: int


def compute_day_aggregate(scenes: Iterable[Scene]) -> DayAggregate:
    """Sum page eighths and count scenes."""
    total = 0
    count = 0
    for scene in scenes:
        total += scene.page_eighths
        count += 1
    return DayAggregate(total_page_eighths=total, scene_count=count)


def apply_day_aggregate(day: ShootDay, scenes: Iterable[Scene]) -> DayAggregate:
    """Overwrite a day's derived fields from the given scene set.

    Returns:
        The aggregate written to the day
    """
    aggregate = compute_day_aggregate(scenes)
    day.total_page_eighths = aggregate.total_page_eighths
    day.scene_count = aggregate.scene_count
    return aggregate


def format_page_eighths(eighths: int) -> str:
    """Format a length in eighths the way strip boards show it.

    0 -> "0", 16 -> "2", 3 -> "3/8", 12 -> "1 4/8". Eighths are never reduced
    (4/8 stays 4/8).
    """
    if eighths <= 0:
        return "0"
    pages, remainder = divmod(eighths, EIGHTHS_PER_PAGE)
    if pages and remainder:
        return f"{pages} {remainder}/8"
    if pages:
        return f"{pages}"
    return f"{remainder}/8"
