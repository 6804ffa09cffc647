"""Extraction sub-package: GoodWatch related-content parsing."""

from .dom import Node, SoupNode, parse_html
from .media import classify, extract_media_items
from .related import extract_related
from .render_detection import detect_render_issue
from .sections import find_related_root, iter_category_sections, normalize_label
from .urlnorm import absolute_link, extract_id_slug, slug_to_title

__all__ = [
    "Node",
    "SoupNode",
    "absolute_link",
    "classify",
    "detect_render_issue",
    "extract_id_slug",
    "extract_media_items",
    "extract_related",
    "find_related_root",
    "iter_category_sections",
    "normalize_label",
    "parse_html",
    "slug_to_title",
]
