"""Locate the related-content block and its category sections."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from watchparser.extractors.dom import Node, first

logger = logging.getLogger(__name__)

RELATED_ROOT_SELECTOR = "#related"
CATEGORY_SECTION_SELECTOR = "div[aria-hidden]"
CATEGORY_LABEL_SELECTOR = "p span.font-bold"
KIND_HEADING_SELECTOR = "h3"
CAROUSEL_SELECTOR = ".swiper"

SHOWS_HEADING = "Shows"
MOVIES_HEADING = "Movies"

_LABEL_SEPARATOR = ":"


def normalize_label(raw: str) -> str:
    """Strip whitespace and a single trailing separator from a category label."""
    label = raw.strip()
    if label.endswith(_LABEL_SEPARATOR):
        label = label[: -len(_LABEL_SEPARATOR)].strip()
    return label


def find_related_root(tree: Node) -> Node | None:
    return first(tree, RELATED_ROOT_SELECTOR)


def iter_category_sections(root: Node) -> Iterator[tuple[str, Node]]:
    """Yield ``(label, section)`` for each labelled category section under *root*."""
    for section in root.select(CATEGORY_SECTION_SELECTOR):
        header = first(section, CATEGORY_LABEL_SELECTOR)
        label = normalize_label(header.text()) if header is not None else ""
        if not label:
            logger.debug("Skipping related section without a category label")
            continue
        yield label, section


def find_kind_container(section: Node, heading: str) -> Node | None:
    """Return the carousel listed under the ``<h3>`` whose text is exactly *heading*."""
    for h3 in section.select(KIND_HEADING_SELECTOR):
        if h3.text() != heading:
            continue
        parent = h3.parent()
        if parent is None:
            return None
        return first(parent, CAROUSEL_SELECTOR)
    return None
