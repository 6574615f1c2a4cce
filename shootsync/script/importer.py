"""Scene record creation from incoming drafts.

New scenes always start unscheduled. Their page length is seeded once here;
later imports never overwrite it with an estimate.
"""

from __future__ import annotations

import uuid

from shootsync.db.models import SCENE_SCHEMA_VERSION, Scene
from shootsync.script.heading import parse_scene_heading
from shootsync.script.page_length import PageLengthEstimator
from shootsync.script.types import SceneDraft


def scene_from_draft(draft: SceneDraft, project_id: str, estimator: PageLengthEstimator | None = None) -> Scene:
    """Build an unscheduled Scene record from a draft.

    Args:
        draft: Incoming scene draft
        project_id: Owning project
        estimator: Page length estimator used when the draft has no explicit length

    Returns:
        New, unsaved Scene with no shoot day
    """
    estimator = estimator or PageLengthEstimator()
    heading = parse_scene_heading(draft.heading)

    return Scene(
        id=draft.scene_id or str(uuid.uuid4()),
        project_id=project_id,
        schema_version=SCENE_SCHEMA_VERSION,
        number=draft.number,
        heading=draft.heading.strip(),
        location_type=heading.location_type,
        script_location=heading.location,
        time_of_day=heading.time_of_day,
        page_eighths=estimator.seed_page_eighths(draft),
        script_order_index=draft.ordinal,
        shoot_day=None,
        shoot_day_order=None,
    )
