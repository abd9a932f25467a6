"""テキスト検索とタグ AND 絞り込みのクエリプランを組み立てる。"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from game_catalog.shared.types import ValueObject

GAME_IDENTITY_KEY = "game.id"


@dataclass(slots=True)
class TextFilter(ValueObject):
    """ゲームタイトルに対する部分一致条件。"""

    term: str
    column: str = "title"
    case_insensitive: bool = True


@dataclass(slots=True)
class TagFilter(ValueObject):
    """タグ結合をタグ名の集合に制限する条件。"""

    names: tuple[str, ...]


@dataclass(slots=True)
class GroupBy(ValueObject):
    """結合結果をまとめるキー。"""

    key: str = GAME_IDENTITY_KEY


@dataclass(slots=True)
class HavingCount(ValueObject):
    """グループごとの一致タグ数に対する等価条件。"""

    expected: int
    distinct: bool = True

    def matches(self, count: int) -> bool:
        return count == self.expected


@dataclass(slots=True)
class QueryPlan(ValueObject):
    """永続化層に渡す宣言的な検索プラン。

    タグ条件があるときは ``tag_filter``・``group_by``・``having_count`` が必ず揃い、
    ないときは 3 つとも ``None`` になる。
    """

    text_filter: TextFilter | None = None
    tag_filter: TagFilter | None = None
    group_by: GroupBy | None = None
    having_count: HavingCount | None = None

    @property
    def is_tag_filtered(self) -> bool:
        return self.tag_filter is not None

    @property
    def is_text_filtered(self) -> bool:
        return self.text_filter is not None


@dataclass(slots=True)
class SearchQueryPlanner:
    """検索語と検証済みタグから ``QueryPlan`` を作る。"""

    text_column: str = "title"
    group_key: str = GAME_IDENTITY_KEY

    def plan(self, free_text: str | None, valid_tags: Sequence[str]) -> QueryPlan:
        term = (free_text or "").strip()
        text_filter = TextFilter(term=term, column=self.text_column) if term else None

        names = tuple(dict.fromkeys(valid_tags))
        if not names:
            return QueryPlan(text_filter=text_filter)

        # 結合は names に制限済みなので、件数が len(names) と等しい = 全タグを持つ
        return QueryPlan(
            text_filter=text_filter,
            tag_filter=TagFilter(names=names),
            group_by=GroupBy(key=self.group_key),
            having_count=HavingCount(expected=len(names)),
        )


def build_search_plan(free_text: str | None, valid_tags: Sequence[str]) -> QueryPlan:
    """既定設定のプランナーでプランを作る。"""

    return SearchQueryPlanner().plan(free_text, valid_tags)


__all__ = [
    "GAME_IDENTITY_KEY",
    "GroupBy",
    "HavingCount",
    "QueryPlan",
    "SearchQueryPlanner",
    "TagFilter",
    "TextFilter",
    "build_search_plan",
]
