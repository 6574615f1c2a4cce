"""Scene heading parsing.

Splits a heading line such as "INT./EXT. FARMHOUSE - KITCHEN - NIGHT" into
location type, location and time of day.
"""

from __future__ import annotations

from dataclasses import dataclass

# Longest prefixes first so "INT./EXT." is not read as "INT."
_LOCATION_PREFIXES: tuple[tuple[str, str], ...] = (
    ("INT./EXT.", "INT/EXT"),
    ("INT/EXT.", "INT/EXT"),
    ("I/E.", "I/E"),
    ("INT.", "INT"),
    ("EXT.", "EXT"),
)

_TIME_SEPARATOR = " - "


@dataclass(frozen=True)
class SceneHeading:
    """Parsed heading parts."""

    location_type: str
    location: str
    time_of_day: str


def parse_scene_heading(heading: str) -> SceneHeading:
    """Parse a scene heading line.

    The heading is upper-cased. The last " - " separated part is the time of
    day when there are at least two parts; the location type keeps no dots.

    Args:
        heading: Raw heading line

    Returns:
        SceneHeading with empty strings for missing parts
    """
    raw = heading.strip().upper()
    if not raw:
        return SceneHeading(location_type="", location="", time_of_day="")

    location_type = ""
    remainder = raw
    for prefix, normalized in _LOCATION_PREFIXES:
        if remainder.startswith(prefix):
            location_type = normalized
            remainder = remainder[len(prefix) :].strip()
            break

    parts = remainder.split(_TIME_SEPARATOR)
    if len(parts) >= 2:
        time_of_day = parts[-1].strip()
        location = _TIME_SEPARATOR.join(parts[:-1]).strip()
    else:
        time_of_day = ""
        location = remainder

    return SceneHeading(location_type=location_type, location=location, time_of_day=time_of_day)
