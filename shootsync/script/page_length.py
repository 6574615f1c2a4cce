"""Page length estimation in eighths of a page.

Estimates are advisory. They seed a scene's length when it is first created,
and are applied to existing scenes only through the explicit bulk
"recalculate all" operation.

Line model:
- each paragraph occupies max(1, ceil(len(text) / chars_per_line)) lines
- plus spacing lines by type: scene heading +2, character +1,
  dialogue/parenthetical +0, anything else +1
- eighths = max(1, round_half_up(total_lines * 8 / lines_per_page))
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from loguru import logger

from shootsync.config.settings import settings
from shootsync.db.models import Scene
from shootsync.script.types import ParagraphType, SceneDraft, TypedParagraph

EIGHTHS_PER_PAGE = 8

_SPACING_LINES: dict[ParagraphType, int] = {
    ParagraphType.SCENE_HEADING: 2,
    ParagraphType.CHARACTER: 1,
    ParagraphType.DIALOGUE: 0,
    ParagraphType.PARENTHETICAL: 0,
}
_DEFAULT_SPACING_LINES = 1


@dataclass(frozen=True)
class PageLengthUpdate:
    """A stored page length replaced by a fresh estimate."""

    scene_id: str
    old_eighths: int
    new_eighths: int


class PageLengthEstimator:
    """Derives scene length in eighths from typed screenplay paragraphs."""

    def __init__(self, chars_per_line: int | None = None, lines_per_page: int | None = None) -> None:
        self.chars_per_line = chars_per_line or settings.chars_per_line
        self.lines_per_page = lines_per_page or settings.lines_per_page

    def paragraph_lines(self, paragraph: TypedParagraph) -> int:
        """Lines taken by one paragraph, spacing included."""
        text_lines = max(1, -(-len(paragraph.text) // self.chars_per_line))
        return text_lines + _SPACING_LINES.get(paragraph.type, _DEFAULT_SPACING_LINES)

    def total_lines(self, paragraphs: Iterable[TypedParagraph]) -> int:
        return sum(self.paragraph_lines(p) for p in paragraphs)

    def lines_to_eighths(self, total_lines: int) -> int:
        """Convert a line count to eighths, rounding half up, minimum 1."""
        numerator = 2 * total_lines * EIGHTHS_PER_PAGE + self.lines_per_page
        return max(1, numerator // (2 * self.lines_per_page))

    def estimate(self, paragraphs: Sequence[TypedParagraph]) -> int:
        """Estimate scene length in eighths. Never returns less than 1.

        Args:
            paragraphs: Typed paragraphs of one scene (may be empty)

        Returns:
            Length in eighths of a page (>= 1)
        """
        if not paragraphs:
            return 1
        return self.lines_to_eighths(self.total_lines(paragraphs))

    def seed_page_eighths(self, draft: SceneDraft) -> int:
        """Initial length for a new scene: the script's explicit value, else an estimate."""
        if draft.page_eighths is not None:
            return max(0, draft.page_eighths)
        return self.estimate(draft.paragraphs)

    def recalculate_all(
        self,
        scenes: Iterable[Scene],
        paragraphs_by_scene_id: Mapping[str, Sequence[TypedParagraph]],
    ) -> list[PageLengthUpdate]:
        """Bulk "recalculate all": re-estimate every scene that has paragraphs.

        Only scenes whose stored value differs from the fresh estimate are
        updated. Scenes without supplied paragraphs are left untouched.

        Args:
            scenes: Scenes to consider
            paragraphs_by_scene_id: Paragraphs keyed by scene id

        Returns:
            One PageLengthUpdate per scene that changed
        """
        updates: list[PageLengthUpdate] = []
        for scene in scenes:
            paragraphs = paragraphs_by_scene_id.get(scene.id)
            if paragraphs is None:
                continue
            fresh = self.estimate(paragraphs)
            if scene.page_eighths != fresh:
                updates.append(PageLengthUpdate(scene_id=scene.id, old_eighths=scene.page_eighths, new_eighths=fresh))
                scene.page_eighths = fresh

        logger.info(f"[PAGE_LENGTH] Recalculated page lengths: {len(updates)} scene(s) updated")
        return updates


def estimate_page_eighths(paragraphs: Sequence[TypedParagraph]) -> int:
    """Estimate with the configured page geometry."""
    return PageLengthEstimator().estimate(paragraphs)
