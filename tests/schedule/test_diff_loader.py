"""Tests for loading and resolving diff documents."""

import json

import pytest

from shootsync.core.errors import DiffValidationError
from shootsync.schedule.diff_loader import DiffDocument, load_diff_document, resolve_diff
from shootsync.script.types import ParagraphType


@pytest.fixture
def write_json(tmp_path):
    def _write(payload, name: str = "diff.json"):
        path = tmp_path / name
        path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
        return path

    return _write


class TestLoadDiffDocument:
    """Test JSON parsing and schema validation."""

    def test_loads_all_categories(self, write_json):
        path = write_json(
            {
                "added": [
                    {
                        "number": "4A",
                        "heading": "EXT. BARN - NIGHT",
                        "paragraphs": [{"type": "Scene Heading", "text": "EXT. BARN - NIGHT"}],
                    }
                ],
                "removed": ["s1"],
                "modified": [{"scene_id": "s2", "incoming": {"number": "2", "page_eighths": 6}, "changes": {"page_eighths_changed": True}}],
                "moved": [{"scene_id": "s3", "old_index": 2, "new_index": 0}],
            }
        )

        document = load_diff_document(path)

        assert document.added[0].to_draft().paragraphs[0].type == ParagraphType.SCENE_HEADING
        assert document.removed == ["s1"]
        assert document.modified[0].changes.page_eighths_changed
        assert document.moved[0].new_index == 0

    def test_invalid_json(self, write_json):
        with pytest.raises(DiffValidationError) as exc_info:
            load_diff_document(write_json("{not json"))
        assert "invalid JSON" in exc_info.value.details[0]

    def test_negative_index_rejected(self, write_json):
        path = write_json({"moved": [{"scene_id": "s3", "old_index": -1, "new_index": 0}]})

        with pytest.raises(DiffValidationError) as exc_info:
            load_diff_document(path)

        assert any("old_index" in detail for detail in exc_info.value.details)


class TestResolveDiff:
    """Test resolving scene ids against the graph."""

    def test_resolves_existing_scenes(self, graph, make_day, make_scene):
        day = make_day(1)
        removed = make_scene(day=day)
        modified = make_scene(page_eighths=4, day=day)
        moved = make_scene()
        document = DiffDocument.model_validate(
            {
                "added": [{"number": "9", "heading": "INT. ATTIC - DAY"}],
                "removed": [removed.id],
                "modified": [
                    {
                        "scene_id": modified.id,
                        "incoming": {"number": modified.number, "page_eighths": 6},
                        "changes": {"page_eighths_changed": True},
                    }
                ],
                "moved": [{"scene_id": moved.id, "old_index": 2, "new_index": 0}],
            }
        )

        diff = resolve_diff(document, graph)

        assert diff.removed[0].scene is removed
        assert diff.modified[0].existing is modified
        assert diff.modified[0].incoming.page_eighths == 6
        assert diff.modified[0].changes.page_eighths_changed
        assert diff.moved[0].scene is moved
        assert diff.added[0].draft.number == "9"

    def test_unknown_scene(self, graph):
        document = DiffDocument(removed=["missing"])

        with pytest.raises(DiffValidationError) as exc_info:
            resolve_diff(document, graph)

        assert exc_info.value.details == ["removed: unknown scene missing"]

    def test_scene_from_other_project_is_unknown(self, graph, make_scene):
        foreign = make_scene(project_id="project-2")

        with pytest.raises(DiffValidationError):
            resolve_diff(DiffDocument(removed=[foreign.id]), graph)

    def test_removed_and_moved_conflict(self, graph, make_scene):
        scene = make_scene()
        document = DiffDocument.model_validate(
            {"removed": [scene.id], "moved": [{"scene_id": scene.id, "old_index": 0, "new_index": 1}]}
        )

        with pytest.raises(DiffValidationError) as exc_info:
            resolve_diff(document, graph)

        assert any("also modified or moved" in detail for detail in exc_info.value.details)

    def test_duplicate_ids(self, graph, make_scene):
        scene = make_scene()

        with pytest.raises(DiffValidationError) as exc_info:
            resolve_diff(DiffDocument(removed=[scene.id, scene.id]), graph)

        assert exc_info.value.details == [f"removed: duplicate scene(s) {scene.id}"]

    def test_duplicate_added_ids(self, graph):
        document = DiffDocument.model_validate(
            {"added": [{"number": "5", "scene_id": "new-1"}, {"number": "5", "scene_id": "new-1"}]}
        )

        with pytest.raises(DiffValidationError) as exc_info:
            resolve_diff(document, graph)

        assert exc_info.value.details == ["added: duplicate scene(s) new-1"]

    def test_added_id_from_other_project(self, graph, make_scene):
        foreign = make_scene(project_id="project-2")
        document = DiffDocument.model_validate({"added": [{"number": "1", "scene_id": foreign.id}]})

        with pytest.raises(DiffValidationError) as exc_info:
            resolve_diff(document, graph)

        assert exc_info.value.details == [f"added: scene {foreign.id} belongs to another project"]

    def test_added_id_of_existing_scene_is_accepted(self, graph, make_scene):
        """Re-adding a known scene of the same project is left to the reconciler, which skips it."""
        scene = make_scene()
        document = DiffDocument.model_validate({"added": [{"number": scene.number, "scene_id": scene.id}]})

        diff = resolve_diff(document, graph)

        assert diff.added[0].draft.scene_id == scene.id
