"""Script-side input types.

These are produced by the external import/parse pipeline and consumed
read-only by the page length estimator and the reconciler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class ParagraphType(StrEnum):
    """Screenplay paragraph types."""

    SCENE_HEADING = "scene_heading"
    ACTION = "action"
    CHARACTER = "character"
    DIALOGUE = "dialogue"
    PARENTHETICAL = "parenthetical"
    TRANSITION = "transition"
    SHOT = "shot"
    GENERAL = "general"

    @classmethod
    def parse(cls, raw: str | None) -> ParagraphType:
        """Map a screenplay-format paragraph type name to a ParagraphType.

        Accepts the spellings used by screenplay files ("Scene Heading",
        "sceneheading", "slug", ...). Unknown names map to GENERAL.
        """
        if not raw:
            return cls.GENERAL
        key = raw.strip().lower().replace("-", " ").replace("_", " ")
        return _PARAGRAPH_ALIASES.get(key, _PARAGRAPH_ALIASES.get(key.replace(" ", ""), cls.GENERAL))


_PARAGRAPH_ALIASES: dict[str, ParagraphType] = {
    "scene heading": ParagraphType.SCENE_HEADING,
    "sceneheading": ParagraphType.SCENE_HEADING,
    "slug": ParagraphType.SCENE_HEADING,
    "slugline": ParagraphType.SCENE_HEADING,
    "action": ParagraphType.ACTION,
    "character": ParagraphType.CHARACTER,
    "dialogue": ParagraphType.DIALOGUE,
    "parenthetical": ParagraphType.PARENTHETICAL,
    "transition": ParagraphType.TRANSITION,
    "shot": ParagraphType.SHOT,
    "general": ParagraphType.GENERAL,
}


@dataclass(frozen=True)
class TypedParagraph:
    """A single screenplay paragraph with its type."""

    type: ParagraphType
    text: str

    @classmethod
    def of(cls, raw_type: str, text: str) -> TypedParagraph:
        return cls(type=ParagraphType.parse(raw_type), text=text)


@dataclass
class SceneDraft:
    """Incoming scene from a freshly parsed script, not yet a Scene record.

    Attributes:
        number: Scene number string ("3", "12A")
        heading: Raw heading line ("INT. KITCHEN - NIGHT")
        ordinal: Position in script order
        scene_id: Stable identity assigned by the differ, if any
        page_eighths: Explicit page length from the script file, if any
        paragraphs: Typed paragraphs of the scene body
    """

    number: str
    heading: str
    ordinal: int = 0
    scene_id: str | None = None
    page_eighths: int | None = None
    paragraphs: list[TypedParagraph] = field(default_factory=list)
