"""watchparser - related movies and shows from GoodWatch title pages.

Quick single-URL usage::

    from watchparser import fetch

    content = fetch("https://goodwatch.app/show/66732-stranger-things")
    print(list(content.movies))          # category names
    print(content.to_json())

Offline extraction and scene allocation::

    from watchparser import extract, select_items_for_scenes

    content = extract(html)
    selection = select_items_for_scenes(
        content.movies.get("Overall", []),
        content.tv_shows.get("Overall", []),
        ["Dark", "Mystery"],
    )
    print(selection.to_dict())
"""

from watchparser.allocator import ItemDeduplicator, select_items_for_scenes
from watchparser.items import (
    CategoryScene,
    MediaItem,
    MediaKind,
    RelatedContent,
    SceneGroup,
    SceneSelection,
)
from watchparser.query import FetchError, extract, fetch, fetch_related_html, parse_file
from watchparser.storyboard import Storyboard, build_storyboard

__version__ = "0.1.0"
__all__ = [
    "CategoryScene",
    "FetchError",
    "ItemDeduplicator",
    "MediaItem",
    "MediaKind",
    "RelatedContent",
    "SceneGroup",
    "SceneSelection",
    "Storyboard",
    "build_storyboard",
    "extract",
    "fetch",
    "fetch_related_html",
    "parse_file",
    "select_items_for_scenes",
]
