"""Unit tests for shoot day aggregates."""

import pytest

from shootsync.db.models import Scene, ShootDay
from shootsync.schedule.aggregates import apply_day_aggregate, compute_day_aggregate, format_page_eighths


def _scenes(*eighths: int) -> list[Scene]:
    return [Scene(id=f"s{i}", project_id="p", page_eighths=e) for i, e in enumerate(eighths)]


class TestComputeDayAggregate:
    """Test summing scenes assigned to a day."""

    def test_three_scenes(self):
        """Scenes of 3, 4 and 5 eighths total 12 eighths (1 4/8 pages)."""
        aggregate = compute_day_aggregate(_scenes(3, 4, 5))

        assert aggregate.total_page_eighths == 12
        assert aggregate.scene_count == 3
        assert format_page_eighths(aggregate.total_page_eighths) == "1 4/8"

    def test_empty_day(self):
        aggregate = compute_day_aggregate([])
        assert aggregate.total_page_eighths == 0
        assert aggregate.scene_count == 0

    def test_zero_length_scene_still_counts(self):
        aggregate = compute_day_aggregate(_scenes(0, 8))
        assert aggregate.total_page_eighths == 8
        assert aggregate.scene_count == 2


class TestApplyDayAggregate:
    """Test writing derived fields to a day."""

    def test_overwrites_stale_values(self):
        day = ShootDay(id="d1", project_id="p", day_number=1, total_page_eighths=99, scene_count=7)

        aggregate = apply_day_aggregate(day, _scenes(3, 4, 5))

        assert day.total_page_eighths == 12
        assert day.scene_count == 3
        assert aggregate == (12, 3)


class TestFormatPageEighths:
    """Test strip board formatting."""

    @pytest.mark.parametrize(
        ("eighths", "expected"),
        [
            (0, "0"),
            (3, "3/8"),
            (8, "1"),
            (12, "1 4/8"),
            (16, "2"),
            (23, "2 7/8"),
        ],
    )
    def test_format(self, eighths, expected):
        assert format_page_eighths(eighths) == expected
