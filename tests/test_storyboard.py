"""Tests for watchparser.storyboard."""

from __future__ import annotations

from watchparser.extractors.related import extract_related
from watchparser.items import MediaItem, RelatedContent
from watchparser.storyboard import (
    INTRO_DURATION,
    SCENE_DURATION,
    build_storyboard,
    choose_scene_categories,
    source_info_from_filename,
)


def _item(slug: str, kind: str = "movie") -> MediaItem:
    return MediaItem(
        name=slug,
        link=f"https://goodwatch.app/{kind}/{slug}",
        image=f"https://img.example.org/{slug}.jpg",
    )


def _content(movie_cats: list[str], show_cats: list[str]) -> RelatedContent:
    return RelatedContent(
        movies={c: [_item(f"m-{c}")] for c in movie_cats},
        tv_shows={c: [_item(f"s-{c}", "show")] for c in show_cats},
    )


class TestChooseSceneCategories:
    def test_common_categories_first(self):
        content = _content(["Overall", "A", "B", "C"], ["Overall", "C", "B"])
        assert choose_scene_categories(content) == ["B", "C", "A"]

    def test_overall_never_chosen(self):
        content = _content(["Overall"], ["Overall"])
        assert choose_scene_categories(content) == []

    def test_limit(self):
        cats = ["A", "B", "C", "D", "E"]
        assert choose_scene_categories(_content(cats, cats)) == ["A", "B", "C"]

    def test_show_only_categories_not_padded(self):
        content = _content(["Overall"], ["Overall", "Mystery"])
        assert choose_scene_categories(content) == []


class TestSourceInfo:
    def test_title_from_filename(self):
        title, _ = source_info_from_filename(RelatedContent(), "66732-stranger-things.output.json")
        assert title == "Stranger Things"

    def test_image_prefers_overall_show(self, related_html):
        content = extract_related(related_html)
        _, image = source_info_from_filename(content, "1-x.output.json")
        assert image == "https://img.example.org/dark.jpg"

    def test_image_falls_back_to_movie(self):
        content = _content(["Overall"], [])
        _, image = source_info_from_filename(content, "1-x.output.json")
        assert image == "https://img.example.org/m-Overall.jpg"

    def test_no_image(self):
        assert source_info_from_filename(RelatedContent(), "1-x.output.json")[1] == ""


class TestBuildStoryboard:
    def test_scene_timeline(self, related_html):
        board = build_storyboard(extract_related(related_html), "Stranger Things")
        kinds = [s.kind for s in board.scenes]
        assert kinds == ["intro", "overall", "category"]
        starts = [s.start_frame for s in board.scenes]
        assert starts == [0, INTRO_DURATION, INTRO_DURATION + SCENE_DURATION]
        assert board.total_frames == INTRO_DURATION + 2 * SCENE_DURATION

    def test_overall_scene_items(self, related_html):
        board = build_storyboard(extract_related(related_html), "Stranger Things")
        overall = board.scenes[1]
        assert [i.name for i in overall.movies] == ["The Exorcist"]
        assert [i.name for i in overall.tv_shows] == ["Dark", "Game of Thrones"]

    def test_category_scene_left_empty_when_overall_pool_is_used_up(self, related_html):
        board = build_storyboard(extract_related(related_html), "Stranger Things")
        dark = board.scenes[2]
        assert dark.title == "Dark"
        assert dark.movies == []
        assert dark.tv_shows == []

    def test_empty_content(self):
        board = build_storyboard(RelatedContent(), "Nothing")
        assert [s.kind for s in board.scenes] == ["intro", "overall"]
        assert board.duration_seconds == (INTRO_DURATION + SCENE_DURATION) / 30

    def test_to_dict(self):
        data = build_storyboard(RelatedContent(), "Nothing", "https://img/x.jpg").to_dict()
        assert data["source_image"] == "https://img/x.jpg"
        assert data["total_frames"] == INTRO_DURATION + SCENE_DURATION
        assert (data["width"], data["height"], data["fps"]) == (1080, 1920, 30)
