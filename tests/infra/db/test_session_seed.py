"""Alembic 適用とサンプル投入の結合テスト。"""

from __future__ import annotations

import pytest
from sqlalchemy import func, inspect, select

from game_catalog.core.library.service import LibraryService
from game_catalog.core.search.catalog import ALL_TAGS
from game_catalog.core.search.tag_resolver import TagResolver
from game_catalog.infra.db.models import Game, GameTagLink, Tag
from game_catalog.infra.db.repositories import (
    SQLAlchemyGameRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyTagRepository,
)
from game_catalog.infra.db.seed import SAMPLE_GAMES, CatalogSeeder, SampleGame
from game_catalog.infra.db.session import DatabaseSessionManager
from game_catalog.shared.config import AppSettings, StorageSettings


@pytest.fixture
def manager(tmp_path):
    db_path = tmp_path / "nested" / "catalog.db"
    settings = AppSettings(storage=StorageSettings(sqlite_path=db_path))
    manager = DatabaseSessionManager(settings=settings)
    manager.initialize_schema()
    yield manager
    manager.close()


def _count(manager: DatabaseSessionManager, model) -> int:
    with manager.session() as session:
        return session.scalar(select(func.count()).select_from(model))


def test_initialize_schema_creates_tables(manager) -> None:
    tables = set(inspect(manager.engine).get_table_names())

    assert {
        "alembic_version",
        "games",
        "tags",
        "game_tags",
        "users",
        "reviews",
        "review_votes",
        "game_reports",
    } <= tables
    assert manager.url.endswith("catalog.db")


def test_explicit_db_path_overrides_settings(tmp_path) -> None:
    settings = AppSettings(storage=StorageSettings(sqlite_path=tmp_path / "unused.db"))
    manager = DatabaseSessionManager(tmp_path / "explicit.db", settings=settings)
    try:
        assert manager.url.endswith("explicit.db")
    finally:
        manager.close()


def test_seed_is_idempotent(manager) -> None:
    first = CatalogSeeder(manager.session_factory).run()
    second = CatalogSeeder(manager.session_factory).run()

    assert first.games_created == len(SAMPLE_GAMES)
    assert first.tags_created == len(set(ALL_TAGS) | {t for g in SAMPLE_GAMES for t in g.tags})
    assert first.links_created == sum(len(game.tags) for game in SAMPLE_GAMES)
    assert (second.tags_created, second.games_created, second.links_created) == (0, 0, 0)
    assert _count(manager, Game) == len(SAMPLE_GAMES)


def test_seed_reset_rebuilds_catalog(manager) -> None:
    CatalogSeeder(manager.session_factory).run()
    extra = SampleGame(title="Extra", tags=("Puzzle",))
    CatalogSeeder(manager.session_factory, games=(*SAMPLE_GAMES, extra)).run()
    assert _count(manager, Game) == len(SAMPLE_GAMES) + 1

    report = CatalogSeeder(manager.session_factory).run(reset=True)

    assert report.games_created == len(SAMPLE_GAMES)
    assert _count(manager, Game) == len(SAMPLE_GAMES)
    assert _count(manager, GameTagLink) == report.links_created


def test_seeded_catalog_is_searchable(manager) -> None:
    CatalogSeeder(manager.session_factory).run()
    factory = manager.session_factory
    service = LibraryService(
        games=SQLAlchemyGameRepository(factory),
        reviews=SQLAlchemyReviewRepository(factory),
        tag_resolver=TagResolver(catalog=SQLAlchemyTagRepository(factory)),
    )

    puzzle_retro = service.search(tags="Puzzle,Retro")
    assert [game.title for game in puzzle_retro] == ["Tetris"]
    assert puzzle_retro[0].tags == ("Classic", "Puzzle", "Retro")
    assert puzzle_retro[0].images == ("/tetris-1.jpg", "/tetris-2.avif", "/tetris-3.png")

    assert service.search(tags="Puzzle,RPG") == []
    assert [game.title for game in service.search(query="game")] == ["Game A", "Game B"]

    with manager.session() as session:
        assert session.scalar(select(func.count()).select_from(Tag)) >= len(ALL_TAGS)
