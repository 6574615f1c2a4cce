"""Diff documents: the JSON form of a DiffResult.

An external differ can hand over its result as a JSON document that refers to
existing scenes by id. resolve_diff() turns it into a DiffResult of Scene
records once, at the load boundary, so the reconciler only ever sees
well-formed input.

Document shape:
    {
      "added": [{"number": "4A", "heading": "INT. BARN - DAY", "paragraphs": [...]}],
      "removed": ["<scene id>"],
      "modified": [{"scene_id": "...", "incoming": {...}, "changes": {"page_eighths_changed": true}}],
      "moved": [{"scene_id": "...", "old_index": 3, "new_index": 5}]
    }
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from shootsync.core.errors import DiffValidationError
from shootsync.schedule.diff import ChangeSet, DiffResult, SceneModified, SceneMoved
from shootsync.schedule.graph import ScheduleGraph
from shootsync.script.types import SceneDraft, TypedParagraph


class ParagraphPayload(BaseModel):
    type: str = "general"
    text: str = ""


class DraftPayload(BaseModel):
    number: str
    heading: str = ""
    ordinal: int = Field(default=0, ge=0)
    scene_id: str | None = None
    page_eighths: int | None = Field(default=None, ge=0)
    paragraphs: list[ParagraphPayload] = Field(default_factory=list)

    def to_draft(self) -> SceneDraft:
        return SceneDraft(
            number=self.number,
            heading=self.heading,
            ordinal=self.ordinal,
            scene_id=self.scene_id,
            page_eighths=self.page_eighths,
            paragraphs=[TypedParagraph.of(p.type, p.text) for p in self.paragraphs],
        )


class ChangeSetPayload(BaseModel):
    number_changed: bool = False
    heading_changed: bool = False
    location_type_changed: bool = False
    script_location_changed: bool = False
    time_of_day_changed: bool = False
    page_eighths_changed: bool = False


class ModifiedPayload(BaseModel):
    scene_id: str
    incoming: DraftPayload
    changes: ChangeSetPayload = Field(default_factory=ChangeSetPayload)


class MovedPayload(BaseModel):
    scene_id: str
    old_index: int = Field(ge=0)
    new_index: int = Field(ge=0)


class DiffDocument(BaseModel):
    """JSON diff document as produced by the external differ."""

    added: list[DraftPayload] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    modified: list[ModifiedPayload] = Field(default_factory=list)
    moved: list[MovedPayload] = Field(default_factory=list)


def load_diff_document(path: str | Path) -> DiffDocument:
    """Read and validate a diff document from a JSON file.

    Raises:
        DiffValidationError: If the file is not valid JSON or does not match the schema
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return DiffDocument.model_validate(raw)
    except json.JSONDecodeError as e:
        raise DiffValidationError([f"{path}: invalid JSON ({e.msg} at line {e.lineno})"]) from e
    except ValidationError as e:
        details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise DiffValidationError(details) from e


def resolve_diff(document: DiffDocument, graph: ScheduleGraph) -> DiffResult:
    """Resolve scene ids of a diff document against the graph.

    Rules:
    - every referenced scene must exist in the graph's project
    - a scene appears at most once per category, added drafts included
    - an added scene_id never belongs to another project
    - a removed scene cannot also be modified or moved

    Raises:
        DiffValidationError: Listing every problem found
    """
    errors: list[str] = []

    def lookup(scene_id: str, category: str):
        scene = graph.get_scene(scene_id)
        if scene is None:
            errors.append(f"{category}: unknown scene {scene_id}")
        return scene

    added_ids = [d.scene_id for d in document.added if d.scene_id]
    for scene_id in dict.fromkeys(added_ids):
        if graph.has_scene_id(scene_id) and graph.get_scene(scene_id) is None:
            errors.append(f"added: scene {scene_id} belongs to another project")

    for category, ids in (
        ("added", added_ids),
        ("removed", document.removed),
        ("modified", [m.scene_id for m in document.modified]),
        ("moved", [m.scene_id for m in document.moved]),
    ):
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            errors.append(f"{category}: duplicate scene(s) {', '.join(duplicates)}")

    removed_ids = set(document.removed)
    conflicting = sorted(removed_ids & ({m.scene_id for m in document.modified} | {m.scene_id for m in document.moved}))
    if conflicting:
        errors.append(f"removed scene(s) also modified or moved: {', '.join(conflicting)}")

    removed = [lookup(scene_id, "removed") for scene_id in document.removed]
    modified = [(lookup(m.scene_id, "modified"), m) for m in document.modified]
    moved = [(lookup(m.scene_id, "moved"), m) for m in document.moved]

    if errors:
        raise DiffValidationError(errors)

    return DiffResult.from_lists(
        added=[d.to_draft() for d in document.added],
        removed=removed,
        modified=[
            SceneModified(existing=scene, incoming=m.incoming.to_draft(), changes=ChangeSet(**m.changes.model_dump()))
            for scene, m in modified
        ],
        moved=[SceneMoved(scene=scene, old_index=m.old_index, new_index=m.new_index) for scene, m in moved],
    )
