"""カンマ区切りのタグ指定をカタログで検証するサービス。"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Protocol

from structlog.stdlib import BoundLogger

from game_catalog.core.search.catalog import StaticTagCatalog
from game_catalog.shared.logging import get_logger

DEFAULT_SEPARATOR = ","


class TagCatalogProtocol(Protocol):
    """既知のタグ名一覧を返すカタログのプロトコル。"""

    def known_tag_names(self) -> Collection[str]:
        """カタログに登録されたタグ名を返す。"""


def split_tags(requested: str | None, *, separator: str = DEFAULT_SEPARATOR) -> list[str]:
    """区切り文字で分割し、前後の空白を除いた空でない要素を返す。"""

    if not requested:
        return []
    return [piece.strip() for piece in requested.split(separator) if piece.strip()]


def resolve_tags(
    requested: str | None,
    known_tag_names: Collection[str],
    *,
    separator: str = DEFAULT_SEPARATOR,
) -> tuple[str, ...]:
    """カタログに存在するタグだけを、初出順・重複なしで返す。

    未知のタグ名はエラーにせず黙って捨てる。比較は大文字小文字を区別する完全一致。
    空の結果は「タグで絞り込まない」ことを意味する。
    """

    known = frozenset(known_tag_names)
    valid: dict[str, None] = {}
    for name in split_tags(requested, separator=separator):
        if name in known:
            valid.setdefault(name, None)
    return tuple(valid)


@dataclass(slots=True)
class TagResolver:
    """タグカタログを 1 回参照してリクエストのタグ指定を解決する。"""

    catalog: TagCatalogProtocol = field(default_factory=StaticTagCatalog)
    separator: str = DEFAULT_SEPARATOR
    logger: BoundLogger = field(
        default_factory=lambda: get_logger(__name__, component="tag-resolver")
    )

    def resolve(self, requested: str | None) -> tuple[str, ...]:
        requested_names = split_tags(requested, separator=self.separator)
        if not requested_names:
            return ()

        known = frozenset(self.catalog.known_tag_names())
        valid = resolve_tags(requested, known, separator=self.separator)

        unknown = sorted({name for name in requested_names if name not in known})
        if unknown:
            self.logger.debug("tag_resolver_unknown_tags", unknown=unknown)
        self.logger.info(
            "tag_resolver_resolved", requested=len(requested_names), resolved=len(valid)
        )
        return valid


__all__ = [
    "DEFAULT_SEPARATOR",
    "TagCatalogProtocol",
    "TagResolver",
    "resolve_tags",
    "split_tags",
]
