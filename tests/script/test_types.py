"""Unit tests for screenplay paragraph types."""

import pytest

from shootsync.script.types import ParagraphType, TypedParagraph


class TestParagraphTypeParse:
    """Test mapping of screenplay-format type names."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Scene Heading", ParagraphType.SCENE_HEADING),
            ("SceneHeading", ParagraphType.SCENE_HEADING),
            ("scene_heading", ParagraphType.SCENE_HEADING),
            ("slug", ParagraphType.SCENE_HEADING),
            ("Slug-Line", ParagraphType.SCENE_HEADING),
            ("Character", ParagraphType.CHARACTER),
            ("DIALOGUE", ParagraphType.DIALOGUE),
            ("Parenthetical", ParagraphType.PARENTHETICAL),
            (" Transition ", ParagraphType.TRANSITION),
            ("Shot", ParagraphType.SHOT),
        ],
    )
    def test_known_names(self, raw, expected):
        assert ParagraphType.parse(raw) == expected

    @pytest.mark.parametrize("raw", ["Cast List", "lyrics", "", None])
    def test_unknown_names_are_general(self, raw):
        """Unrecognized types fall back to GENERAL."""
        assert ParagraphType.parse(raw) == ParagraphType.GENERAL

    def test_typed_paragraph_of(self):
        paragraph = TypedParagraph.of("Character", "ANNA")
        assert paragraph.type == ParagraphType.CHARACTER
        assert paragraph.text == "ANNA"
