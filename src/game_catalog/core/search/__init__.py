"""タグ解決と検索プラン。"""

from game_catalog.core.search.catalog import ALL_TAGS, TAG_GROUPS, StaticTagCatalog, TagGroup
from game_catalog.core.search.planner import (
    GroupBy,
    HavingCount,
    QueryPlan,
    SearchQueryPlanner,
    TagFilter,
    TextFilter,
    build_search_plan,
)
from game_catalog.core.search.tag_resolver import TagCatalogProtocol, TagResolver, resolve_tags

__all__ = [
    "ALL_TAGS",
    "GroupBy",
    "HavingCount",
    "QueryPlan",
    "SearchQueryPlanner",
    "StaticTagCatalog",
    "TAG_GROUPS",
    "TagCatalogProtocol",
    "TagFilter",
    "TagGroup",
    "TagResolver",
    "TextFilter",
    "build_search_plan",
    "resolve_tags",
]
