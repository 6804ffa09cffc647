"""Hand out related titles to scenes without showing any title twice.

An :class:`ItemDeduplicator` remembers which links it has already given
out.  Create one per allocation run; it is never shared between runs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from watchparser.items import CategoryScene, MediaItem, SceneGroup, SceneSelection

logger = logging.getLogger(__name__)

ITEMS_PER_KIND = 2
MAX_CATEGORY_SCENES = 3


class ItemDeduplicator:
    """Tracks used items (by link) and returns only unused ones."""

    def __init__(self) -> None:
        self._used: set[str] = set()

    def __len__(self) -> int:
        return len(self._used)

    def mark_used(self, item: MediaItem) -> None:
        self._used.add(item.link)

    def is_used(self, item: MediaItem) -> bool:
        return item.link in self._used

    def take_unused(self, items: Iterable[MediaItem], count: int) -> list[MediaItem]:
        """Return up to *count* unused items from *items*, marking them used.

        Single forward pass in source order.  Fewer than *count* come back
        when the source runs out.
        """
        taken: list[MediaItem] = []
        if count <= 0:
            return taken
        for item in items:
            if self.is_used(item):
                continue
            taken.append(item)
            self.mark_used(item)
            if len(taken) >= count:
                break
        return taken

    def reset(self) -> None:
        self._used.clear()


def select_items_for_scenes(
    movies: Sequence[MediaItem],
    tv_shows: Sequence[MediaItem],
    categories: Sequence[str],
    *,
    per_kind: int = ITEMS_PER_KIND,
    max_categories: int = MAX_CATEGORY_SCENES,
) -> SceneSelection:
    """Allocate items to the overall scene and up to *max_categories* category scenes.

    The overall scene is filled first, then each category in the given
    order.  Every scene draws from the same *movies* / *tv_shows* pools
    (not from the category's own list), so later scenes get whatever the
    earlier ones left over and may come up short.
    """
    dedup = ItemDeduplicator()

    overall = SceneGroup(
        movies=dedup.take_unused(movies, per_kind),
        tv_shows=dedup.take_unused(tv_shows, per_kind),
    )

    scenes: list[CategoryScene] = []
    for name in list(categories)[:max_categories]:
        scenes.append(
            CategoryScene(
                name=name,
                movies=dedup.take_unused(movies, per_kind),
                tv_shows=dedup.take_unused(tv_shows, per_kind),
            ),
        )

    logger.debug(
        "Allocated %d item(s) to %d scene(s) from %d movie(s) / %d show(s)",
        len(dedup), len(scenes) + 1, len(movies), len(tv_shows),
    )
    return SceneSelection(overall=overall, categories=scenes)
