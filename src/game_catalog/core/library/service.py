"""ライブラリ検索・ゲーム詳細・レビュー一覧のユースケース。"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from structlog.stdlib import BoundLogger

from game_catalog.core.projection.projector import (
    GameRecord,
    ReviewRecord,
    TagShape,
    project_game,
    project_review,
)
from game_catalog.core.projection.views import GameDetailView, LibraryGameView, ReviewView
from game_catalog.core.search.catalog import TAG_GROUPS, TagGroup
from game_catalog.core.search.planner import QueryPlan, SearchQueryPlanner
from game_catalog.core.search.tag_resolver import TagResolver
from game_catalog.shared.exceptions import NotFoundError
from game_catalog.shared.logging import get_logger


class GameRepositoryProtocol(Protocol):
    """``QueryPlan`` を実行しゲームを取得するリポジトリ。"""

    def execute(self, plan: QueryPlan) -> Sequence[GameRecord]:
        """プランに一致するゲームを返す。"""

    def get(self, game_id: int) -> GameRecord | None:
        """タグ・レビュー・投票をロード済みのゲームを返す。"""


class ReviewRepositoryProtocol(Protocol):
    """レビューを取得するリポジトリ。"""

    def list_for_game(self, game_id: int) -> Sequence[ReviewRecord]:
        """ユーザーと全投票をロード済みのレビューを新しい順で返す。"""


class GameNotFoundError(NotFoundError):
    """指定 ID のゲームが存在しない。"""

    default_message = "Game not found"

    def __init__(self, game_id: int) -> None:
        super().__init__(f"Game not found: {game_id}")
        self.game_id = game_id


@dataclass(slots=True)
class LibraryService:
    """タグ解決 → プラン作成 → 永続化層で実行 → レスポンス写像 を束ねる。"""

    games: GameRepositoryProtocol
    reviews: ReviewRepositoryProtocol
    tag_resolver: TagResolver = field(default_factory=TagResolver)
    planner: SearchQueryPlanner = field(default_factory=SearchQueryPlanner)
    tag_groups_source: Sequence[TagGroup] = TAG_GROUPS
    logger: BoundLogger = field(
        default_factory=lambda: get_logger(__name__, component="library-service")
    )

    def search(self, query: str | None = None, tags: str | None = None) -> list[LibraryGameView]:
        """テキストとタグ（全タグ一致）でゲームを検索する。"""

        valid_tags = self.tag_resolver.resolve(tags)
        plan = self.planner.plan(query, valid_tags)
        records = self.games.execute(plan)
        results = [project_game(record, TagShape.NAMES_SORTED) for record in records]
        self.logger.info(
            "library_search_completed",
            query=plan.text_filter.term if plan.text_filter else None,
            requested_tags=tags,
            valid_tags=list(valid_tags),
            tag_filtered=plan.is_tag_filtered,
            hits=len(results),
        )
        return results

    def list_games(self) -> list[LibraryGameView]:
        """絞り込みなしのライブラリ一覧。"""

        records = self.games.execute(QueryPlan())
        return [project_game(record, TagShape.NAMES_SORTED) for record in records]

    def get_game(self, game_id: int, viewer_id: int | None = None) -> GameDetailView:
        record = self.games.get(game_id)
        if record is None:
            self.logger.info("library_game_not_found", game_id=game_id)
            raise GameNotFoundError(game_id)
        return project_game(record, TagShape.OBJECTS_ORDERED, viewer_id=viewer_id)

    def list_reviews(self, game_id: int, viewer_id: int | None = None) -> list[ReviewView]:
        records = self.reviews.list_for_game(game_id)
        return [project_review(record, viewer_id) for record in records]

    def tag_groups(self) -> tuple[TagGroup, ...]:
        return tuple(self.tag_groups_source)


__all__ = [
    "GameNotFoundError",
    "GameRepositoryProtocol",
    "LibraryService",
    "ReviewRepositoryProtocol",
]
