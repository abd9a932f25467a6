"""検索フィルタ用の標準タグカタログ。"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from game_catalog.shared.types import ValueObject


@dataclass(slots=True)
class TagGroup(ValueObject):
    """画面上でまとめて表示するタググループ。"""

    id: str
    label: str
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", tuple(self.tags))


TAG_GROUPS: tuple[TagGroup, ...] = (
    TagGroup(
        id="accessibility-categories",
        label="Accessibility Categories",
        tags=("Vision", "Hearing", "Motor", "Speech", "Cognitive"),
    ),
    TagGroup(
        id="vision",
        label="Vision Tags",
        tags=("Colourblind Mode", "High Contrast", "Large Text", "Screen Reader Friendly"),
    ),
    TagGroup(
        id="hearing",
        label="Hearing Tags",
        tags=("No Audio Needed", "Captions", "Visual Alerts"),
    ),
    TagGroup(
        id="motor",
        label="Motor Tags",
        tags=("One-Handed", "Simple Controls", "No Timed Inputs", "No Precision Needed"),
    ),
    TagGroup(id="speech", label="Speech Tags", tags=("No Voice Required",)),
    TagGroup(
        id="cognitive",
        label="Cognitive Tags",
        tags=("Simple UI", "Clear Instructions", "Tutorial Mode", "Adjustable Difficulty"),
    ),
    TagGroup(
        id="general-ui",
        label="General UI/Gameplay",
        tags=("Tap Only", "Hints Available", "Low Cognitive Load"),
    ),
    TagGroup(
        id="genres",
        label="Genres",
        tags=(
            "Action",
            "Adventure",
            "Puzzle",
            "Strategy",
            "Simulation",
            "Casual",
            "RPG",
            "Platformer",
            "Sports",
            "Kids",
        ),
    ),
)


def flatten_groups(groups: Iterable[TagGroup]) -> tuple[str, ...]:
    """グループ内のタグ名を出現順に重複なく並べる。"""

    names: dict[str, None] = {}
    for group in groups:
        for tag in group.tags:
            names.setdefault(tag, None)
    return tuple(names)


ALL_TAGS: tuple[str, ...] = flatten_groups(TAG_GROUPS)


@dataclass(slots=True)
class StaticTagCatalog:
    """固定のタグ名一覧をカタログとして提供する。"""

    names: Sequence[str] = ALL_TAGS

    def known_tag_names(self) -> frozenset[str]:
        return frozenset(self.names)


__all__ = [
    "ALL_TAGS",
    "StaticTagCatalog",
    "TAG_GROUPS",
    "TagGroup",
    "flatten_groups",
]
