"""Build :class:`MediaItem` records from the anchors of a related carousel.

Each carousel card is an ``<a href="/movie/...">`` or ``<a href="/show/...">``
holding a poster ``<img>`` (alt text ``"Poster for ..."``), a title
``<span>``, and usually a GoodWatch logo image that must not be mistaken for
the poster.  Cards missing a title or poster are dropped.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlparse

from watchparser.extractors.dom import Node, first
from watchparser.extractors.urlnorm import absolute_link
from watchparser.items import MediaItem, MediaKind
from watchparser.settings import SITE_ORIGIN

logger = logging.getLogger(__name__)

ANCHOR_SELECTOR = ", ".join(
    f'a[href^="{kind.path_prefix}"]' for kind in (MediaKind.SHOW, MediaKind.MOVIE)
)
POSTER_SELECTOR = 'img[alt^="Poster for"]'
TITLE_SELECTOR = "span.text-sm.font-bold.text-white"

# Score lookup, tried in order on the anchor and then on a parent that
# wraps no other card
_SCORE_ATTR = "data-score"
_SCORE_SELECTORS: tuple[str, ...] = (f"[{_SCORE_ATTR}]", '[class*="score"]')
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def classify(href: str) -> MediaKind | None:
    """Return the media kind encoded in the path prefix of *href*.

    Accepts root-relative paths and absolute URLs alike.
    """
    path = urlparse(href.strip()).path
    for kind in MediaKind:
        if path.startswith(kind.path_prefix):
            return kind
    return None


def parse_score(raw: str | None) -> int | float | None:
    """Return the first number in *raw*, or ``None`` when there is none."""
    if not raw:
        return None
    m = _NUMBER_RE.search(raw)
    if not m:
        return None
    token = m.group(0)
    return float(token) if "." in token else int(token)


def read_score(anchor: Node) -> int | float | None:
    own = parse_score(anchor.attr(_SCORE_ATTR))
    if own is not None:
        return own
    scopes = [anchor]
    parent = anchor.parent()
    if parent is not None and len(parent.select(ANCHOR_SELECTOR)) == 1:
        scopes.append(parent)
    for scope in scopes:
        for selector in _SCORE_SELECTORS:
            node = first(scope, selector)
            if node is None:
                continue
            score = parse_score(node.attr(_SCORE_ATTR) or node.text())
            if score is not None:
                return score
    return None


def extract_media_item(
    anchor: Node,
    *,
    origin: str = SITE_ORIGIN,
    with_scores: bool = True,
) -> MediaItem | None:
    """Build one record from a carousel anchor; ``None`` if it is incomplete."""
    href = (anchor.attr("href") or "").strip()
    if not href:
        return None

    poster = first(anchor, POSTER_SELECTOR)
    image = ((poster.attr("src") if poster is not None else None) or "").strip()

    title = first(anchor, TITLE_SELECTOR)
    name = title.text() if title is not None else ""

    if not name or not image:
        logger.debug("Dropping incomplete card %s (name=%r, image=%r)", href, name, image)
        return None

    return MediaItem(
        name=name,
        link=absolute_link(href, origin),
        image=image,
        goodwatch_score=read_score(anchor) if with_scores else None,
    )


def extract_media_items(
    container: Node,
    *,
    origin: str = SITE_ORIGIN,
    with_scores: bool = True,
) -> list[MediaItem]:
    """Return the complete records under *container*, in document order."""
    items: list[MediaItem] = []
    for anchor in container.select(ANCHOR_SELECTOR):
        item = extract_media_item(anchor, origin=origin, with_scores=with_scores)
        if item is not None:
            items.append(item)
    return items
