"""カタログ・レビュー向けのリポジトリ実装。"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import Select, distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from structlog.stdlib import BoundLogger

from game_catalog.core.search.planner import GAME_IDENTITY_KEY, QueryPlan
from game_catalog.infra.db.models import Game, GameTagLink, Review, Tag
from game_catalog.infra.db.session import DatabaseError
from game_catalog.shared.logging import get_logger

SessionFactory = Callable[[], Session]

_TEXT_COLUMNS = {"title": Game.title}
_GROUP_KEYS = {GAME_IDENTITY_KEY: Game.id}


class RepositoryError(DatabaseError):
    """リポジトリ経由のクエリ失敗。"""

    default_message = "Repository query failed"


class _SQLAlchemyRepository:
    def __init__(self, session_factory: SessionFactory, *, logger: BoundLogger | None = None):
        self._session_factory = session_factory
        self._logger = logger or get_logger(__name__, component="repository")

    def _run(self, event: str, query: Callable[[Session], Any]) -> Any:
        try:
            with self._session_factory() as session:
                return query(session)
        except SQLAlchemyError as exc:
            self._logger.error(event, error_type=exc.__class__.__name__, message=str(exc))
            raise RepositoryError(str(exc)) from exc


class SQLAlchemyTagRepository(_SQLAlchemyRepository):
    """tags テーブルの DAO。タグカタログとしても振る舞う。"""

    def known_tag_names(self) -> frozenset[str]:
        names = self._run(
            "tag_repository_names_failed",
            lambda session: session.scalars(select(Tag.name)).all(),
        )
        return frozenset(names)


class SQLAlchemyGameRepository(_SQLAlchemyRepository):
    """games テーブルの DAO。``QueryPlan`` を SQLAlchemy の select に解釈する。"""

    def execute(self, plan: QueryPlan) -> list[Game]:
        """プランを実行し、タイトル昇順で各ゲームを 1 回ずつ返す。

        返すゲームのタグは一致タグだけでなく全件をロード済み。
        """

        stmt = build_plan_statement(plan)
        games = self._run(
            "game_repository_execute_failed",
            lambda session: list(session.scalars(stmt).all()),
        )
        self._logger.debug(
            "game_repository_executed",
            tag_filtered=plan.is_tag_filtered,
            text_filtered=plan.is_text_filtered,
            hits=len(games),
        )
        return games

    def get(self, game_id: int) -> Game | None:
        stmt = (
            select(Game)
            .where(Game.id == game_id)
            .options(
                selectinload(Game.tags),
                selectinload(Game.reviews).selectinload(Review.user),
                selectinload(Game.reviews).selectinload(Review.votes),
            )
        )
        return self._run("game_repository_get_failed", lambda session: session.scalar(stmt))


class SQLAlchemyReviewRepository(_SQLAlchemyRepository):
    """reviews テーブルの DAO。"""

    def list_for_game(self, game_id: int) -> list[Review]:
        """投稿ユーザーと全投票をロードしたレビューを新しい順で返す。"""

        stmt = (
            select(Review)
            .where(Review.game_id == game_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .options(selectinload(Review.user), selectinload(Review.votes))
        )
        return self._run(
            "review_repository_list_failed",
            lambda session: list(session.scalars(stmt).all()),
        )


def build_plan_statement(plan: QueryPlan) -> Select[tuple[Game]]:
    """``QueryPlan`` から select 文を組み立てる。"""

    stmt = select(Game)

    if plan.text_filter is not None:
        column = _TEXT_COLUMNS.get(plan.text_filter.column)
        if column is None:
            msg = f"Unsupported text filter column: {plan.text_filter.column}"
            raise RepositoryError(msg)
        if plan.text_filter.case_insensitive:
            stmt = stmt.where(column.icontains(plan.text_filter.term, autoescape=True))
        else:
            stmt = stmt.where(column.contains(plan.text_filter.term, autoescape=True))

    if plan.tag_filter is not None:
        stmt = (
            stmt.join(GameTagLink, GameTagLink.game_id == Game.id)
            .join(Tag, Tag.id == GameTagLink.tag_id)
            .where(Tag.name.in_(list(plan.tag_filter.names)))
        )

    if plan.group_by is not None:
        key = _GROUP_KEYS.get(plan.group_by.key)
        if key is None:
            msg = f"Unsupported group key: {plan.group_by.key}"
            raise RepositoryError(msg)
        stmt = stmt.group_by(key)

    if plan.having_count is not None:
        counted = (
            func.count(distinct(Tag.id)) if plan.having_count.distinct else func.count(Tag.id)
        )
        stmt = stmt.having(counted == plan.having_count.expected)

    return stmt.order_by(Game.title, Game.id).options(selectinload(Game.tags))


__all__ = [
    "RepositoryError",
    "SQLAlchemyGameRepository",
    "SQLAlchemyReviewRepository",
    "SQLAlchemyTagRepository",
    "build_plan_statement",
]
