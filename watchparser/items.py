"""Pydantic schemas for extracted related content and scene allocations."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Media kind
# ---------------------------------------------------------------------------

class MediaKind(StrEnum):
    """The two kinds of title the site links to."""

    MOVIE = "movie"
    SHOW = "show"

    @property
    def path_prefix(self) -> str:
        return f"/{self.value}/"

    @property
    def field_name(self) -> str:
        """Attribute of :class:`RelatedContent` that holds this kind."""
        return "movies" if self is MediaKind.MOVIE else "tv_shows"


# ---------------------------------------------------------------------------
# Extracted records
# ---------------------------------------------------------------------------

class MediaItem(BaseModel):
    """One related movie or show.  ``link`` is the identity key."""

    name: str
    link: str
    image: str
    goodwatch_score: int | float | None = None

    @field_validator("name", "link", "image", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("name", "link", "image")
    @classmethod
    def require_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must be a non-empty string")
        return v


CategoryContent = dict[str, list[MediaItem]]


class RelatedContent(BaseModel):
    """Related titles keyed by category name, split by media kind.

    Categories are independent views: the same link may be listed under
    several of them.  A category key is only present when it has items.
    """

    movies: CategoryContent = Field(default_factory=dict)
    tv_shows: CategoryContent = Field(default_factory=dict)

    def for_kind(self, kind: MediaKind) -> CategoryContent:
        return getattr(self, kind.field_name)

    def add(self, kind: MediaKind, category: str, items: list[MediaItem]) -> None:
        """Append *items* to *category*; empty lists never create a key."""
        if not items:
            return
        self.for_kind(kind).setdefault(category, []).extend(items)

    def is_empty(self) -> bool:
        return not self.movies and not self.tv_shows

    def count(self, kind: MediaKind) -> int:
        return sum(len(items) for items in self.for_kind(kind).values())

    def categories(self) -> list[str]:
        """Category names in first-seen order across both kinds."""
        seen: dict[str, None] = {}
        for name in (*self.tv_shows, *self.movies):
            seen.setdefault(name, None)
        return list(seen)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> RelatedContent:
        return cls.model_validate_json(text)


# ---------------------------------------------------------------------------
# Allocation output (consumed by the storyboard / renderer)
# ---------------------------------------------------------------------------

class SceneGroup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    movies: list[MediaItem] = Field(default_factory=list)
    tv_shows: list[MediaItem] = Field(default_factory=list, alias="tvShows")

    def items(self) -> list[MediaItem]:
        return [*self.movies, *self.tv_shows]


class CategoryScene(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    movies: list[MediaItem] = Field(default_factory=list)
    tv_shows: list[MediaItem] = Field(default_factory=list, alias="tvShows")

    def items(self) -> list[MediaItem]:
        return [*self.movies, *self.tv_shows]


class SceneSelection(BaseModel):
    overall: SceneGroup = Field(default_factory=SceneGroup)
    categories: list[CategoryScene] = Field(default_factory=list)

    def all_links(self) -> list[str]:
        groups: list[SceneGroup | CategoryScene] = [self.overall, *self.categories]
        return [item.link for group in groups for item in group.items()]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
