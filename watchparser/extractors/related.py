"""watchparser.extractors.related - HTML → :class:`RelatedContent`.

Pure function, no network or disk access.  The page's ``#related`` block
holds one section per category ("Overall", a genre, a mood ...), and each
section lists a "Shows" and a "Movies" carousel.  Every card is filed under
the kind its link path names, whichever carousel it was found in.

Usage::

    from watchparser.extractors.related import extract_related

    content = extract_related(html)
    print(list(content.tv_shows))        # category names
    print(content.to_json())
"""

from __future__ import annotations

import logging
from typing import assert_never

from watchparser.extractors.dom import Node, parse_html
from watchparser.extractors.media import ANCHOR_SELECTOR, classify, extract_media_item
from watchparser.extractors.sections import (
    MOVIES_HEADING,
    SHOWS_HEADING,
    find_kind_container,
    find_related_root,
    iter_category_sections,
)
from watchparser.items import MediaItem, MediaKind, RelatedContent
from watchparser.settings import SITE_ORIGIN

logger = logging.getLogger(__name__)


def _collect_section(
    section: Node,
    *,
    origin: str,
    with_scores: bool,
) -> dict[MediaKind, list[MediaItem]]:
    by_kind: dict[MediaKind, list[MediaItem]] = {kind: [] for kind in MediaKind}
    for heading in (SHOWS_HEADING, MOVIES_HEADING):
        container = find_kind_container(section, heading)
        if container is None:
            continue
        for anchor in container.select(ANCHOR_SELECTOR):
            kind = classify(anchor.attr("href") or "")
            item = extract_media_item(anchor, origin=origin, with_scores=with_scores)
            if item is None:
                continue
            match kind:
                case MediaKind.MOVIE | MediaKind.SHOW:
                    by_kind[kind].append(item)
                case None:
                    continue
                case _:
                    assert_never(kind)
    return by_kind


def extract_related(
    source: str | Node,
    *,
    origin: str = SITE_ORIGIN,
    with_scores: bool = True,
) -> RelatedContent:
    """Extract the categorized related titles from *source*.

    Args:
        source:      Raw HTML string, or an already parsed :class:`Node`.
        origin:      Site origin prefixed to the root-relative card links.
        with_scores: Read the GoodWatch score attached to each card.

    Returns:
        :class:`RelatedContent`.  Empty (``movies == tv_shows == {}``) when
        the page has no related block or no usable cards; never raises for
        missing structure.
    """
    tree = parse_html(source) if isinstance(source, str) else source
    content = RelatedContent()

    root = find_related_root(tree)
    if root is None:
        logger.debug("No related-content block in document")
        return content

    for label, section in iter_category_sections(root):
        by_kind = _collect_section(section, origin=origin, with_scores=with_scores)
        content.add(MediaKind.SHOW, label, by_kind[MediaKind.SHOW])
        content.add(MediaKind.MOVIE, label, by_kind[MediaKind.MOVIE])

    logger.debug(
        "Extracted %d movie(s) and %d show(s) across %d categor(y/ies)",
        content.count(MediaKind.MOVIE),
        content.count(MediaKind.SHOW),
        len(content.categories()),
    )
    return content
