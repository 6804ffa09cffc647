"""Frame-timed scene plan for the short-form related-titles video.

The plan is the hand-off to an external renderer: a vertical 1080x1920
video at 30 fps with an intro scene for the source title, an "overall"
scene, and up to three category scenes, each holding two movies and two
shows that never repeat across scenes.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, Field

from watchparser.allocator import MAX_CATEGORY_SCENES, select_items_for_scenes
from watchparser.extractors.urlnorm import slug_to_title
from watchparser.items import MediaItem, RelatedContent
from watchparser.settings import OUTPUT_SUFFIX

logger = logging.getLogger(__name__)

VIDEO_WIDTH = 1080
VIDEO_HEIGHT = 1920
VIDEO_FPS = 30

INTRO_DURATION = 90      # 3 s
SCENE_DURATION = 150     # 5 s

OVERALL_CATEGORY = "Overall"


class Scene(BaseModel):
    kind: Literal["intro", "overall", "category"]
    start_frame: int
    duration: int
    title: str = ""
    movies: list[MediaItem] = Field(default_factory=list)
    tv_shows: list[MediaItem] = Field(default_factory=list)


class Storyboard(BaseModel):
    source_title: str
    source_image: str = ""
    width: int = VIDEO_WIDTH
    height: int = VIDEO_HEIGHT
    fps: int = VIDEO_FPS
    scenes: list[Scene] = Field(default_factory=list)

    @property
    def total_frames(self) -> int:
        return sum(s.duration for s in self.scenes)

    @property
    def duration_seconds(self) -> float:
        return self.total_frames / self.fps

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        data["total_frames"] = self.total_frames
        return data


def choose_scene_categories(
    content: RelatedContent,
    limit: int = MAX_CATEGORY_SCENES,
) -> list[str]:
    """Pick the categories that get their own scene.

    Prefers categories that have both movies and shows (in movie order),
    then pads with the remaining movie categories.
    """
    movie_cats = [c for c in content.movies if c != OVERALL_CATEGORY]
    show_cats = {c for c in content.tv_shows if c != OVERALL_CATEGORY}

    selected = [c for c in movie_cats if c in show_cats][:limit]
    for cat in movie_cats:
        if len(selected) >= limit:
            break
        if cat not in selected:
            selected.append(cat)
    return selected


def source_info_from_filename(content: RelatedContent, filename: str) -> tuple[str, str]:
    """Return ``(title, image)`` for the source title of an output file.

    ``1412450-stranger-things.output.json`` gives ``"Stranger Things"``.  The
    image falls back to the first overall show, then the first overall movie.
    """
    stem = filename.removesuffix(OUTPUT_SUFFIX)
    title = slug_to_title(stem)

    image = ""
    for pool in (content.tv_shows.get(OVERALL_CATEGORY), content.movies.get(OVERALL_CATEGORY)):
        if pool:
            image = pool[0].image
            break
    return title, image


def build_storyboard(
    content: RelatedContent,
    source_title: str,
    source_image: str = "",
) -> Storyboard:
    """Allocate *content* to scenes and lay the scenes out on the timeline."""
    categories = choose_scene_categories(content)
    selection = select_items_for_scenes(
        content.movies.get(OVERALL_CATEGORY, []),
        content.tv_shows.get(OVERALL_CATEGORY, []),
        categories,
    )

    scenes: list[Scene] = []
    frame = 0

    def push(kind: str, duration: int, **fields: Any) -> None:
        nonlocal frame
        scenes.append(Scene(kind=kind, start_frame=frame, duration=duration, **fields))
        frame += duration

    push("intro", INTRO_DURATION, title=source_title)
    push(
        "overall",
        SCENE_DURATION,
        title=OVERALL_CATEGORY,
        movies=selection.overall.movies,
        tv_shows=selection.overall.tv_shows,
    )
    for scene in selection.categories:
        push(
            "category",
            SCENE_DURATION,
            title=scene.name,
            movies=scene.movies,
            tv_shows=scene.tv_shows,
        )

    if not selection.all_links():
        logger.warning("No overall titles to show for %s", source_title)

    return Storyboard(source_title=source_title, source_image=source_image, scenes=scenes)
