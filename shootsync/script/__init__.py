"""Script-side inputs: typed paragraphs, scene drafts, heading parsing, page length."""

from shootsync.script.heading import SceneHeading, parse_scene_heading
from shootsync.script.importer import scene_from_draft
from shootsync.script.page_length import PageLengthEstimator, PageLengthUpdate, estimate_page_eighths
from shootsync.script.types import ParagraphType, SceneDraft, TypedParagraph

__all__ = [
    "PageLengthEstimator",
    "PageLengthUpdate",
    "ParagraphType",
    "SceneDraft",
    "SceneHeading",
    "TypedParagraph",
    "estimate_page_eighths",
    "parse_scene_heading",
    "scene_from_draft",
]
