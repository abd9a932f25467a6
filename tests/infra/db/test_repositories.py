from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from game_catalog.core.library.service import LibraryService
from game_catalog.core.search.planner import build_search_plan
from game_catalog.core.search.tag_resolver import TagResolver
from game_catalog.infra.db.models import (
    Base,
    Game,
    GameTagLink,
    Review,
    ReviewVote,
    Tag,
    User,
)
from game_catalog.infra.db.repositories import (
    RepositoryError,
    SQLAlchemyGameRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyTagRepository,
)


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://", future=True)
    Base.metadata.create_all(engine)
    factory = sessionmaker(engine, autoflush=False, expire_on_commit=False, future=True)

    with factory.begin() as session:
        tags = {name: Tag(name=name) for name in ("Action", "Puzzle", "RPG")}
        session.add_all(tags.values())
        session.flush()

        puzzle_only = Game(title="Puzzle Only", thumb_images=["p.png"])
        both = Game(title="Both", thumb_images=["/b.png", "  "])
        action_rpg = Game(title="Action RPG", thumb_images=None)
        untagged = Game(title="100% Untagged")
        session.add_all([puzzle_only, both, action_rpg, untagged])
        session.flush()

        session.add_all(
            [
                GameTagLink(game_id=puzzle_only.id, tag_id=tags["Puzzle"].id),
                # 関連付け順は Puzzle → Action
                GameTagLink(game_id=both.id, tag_id=tags["Puzzle"].id),
                GameTagLink(game_id=both.id, tag_id=tags["Action"].id),
                GameTagLink(game_id=action_rpg.id, tag_id=tags["Action"].id),
                GameTagLink(game_id=action_rpg.id, tag_id=tags["RPG"].id),
            ]
        )

        users = [
            User(id=2, username="u2", email="u2@example.com"),
            User(id=3, username="u3", email="u3@example.com"),
            User(id=4, username="u4", email="u4@example.com"),
        ]
        session.add_all(users)
        session.flush()

        older = Review(
            game_id=both.id,
            user_id=2,
            rating=5,
            comment="Great",
            created_at=datetime(2024, 1, 1, 9, 0),
            updated_at=datetime(2024, 1, 1, 9, 0),
        )
        newer = Review(
            game_id=both.id,
            user_id=3,
            rating=2,
            comment="Meh",
            created_at=datetime(2024, 2, 1, 9, 0),
            updated_at=datetime(2024, 2, 1, 9, 0),
        )
        session.add_all([older, newer])
        session.flush()

        session.add_all(
            [
                ReviewVote(review_id=older.id, user_id=2, value=1),
                ReviewVote(review_id=older.id, user_id=3, value=1),
                ReviewVote(review_id=older.id, user_id=4, value=-1),
            ]
        )

    yield factory
    engine.dispose()


@pytest.fixture
def games(session_factory) -> SQLAlchemyGameRepository:
    return SQLAlchemyGameRepository(session_factory)


@pytest.fixture
def service(session_factory, games) -> LibraryService:
    return LibraryService(
        games=games,
        reviews=SQLAlchemyReviewRepository(session_factory),
        tag_resolver=TagResolver(catalog=SQLAlchemyTagRepository(session_factory)),
    )


def _titles(records) -> list[str]:
    return [record.title for record in records]


def _game_id(session_factory, title: str) -> int:
    with session_factory() as session:
        return session.scalars(select(Game.id).where(Game.title == title)).one()


def test_known_tag_names(session_factory) -> None:
    names = SQLAlchemyTagRepository(session_factory).known_tag_names()

    assert names == frozenset({"Action", "Puzzle", "RPG"})


def test_tag_filter_requires_every_tag(games) -> None:
    records = games.execute(build_search_plan(None, ["Puzzle", "Action"]))

    assert _titles(records) == ["Both"]


def test_tag_filter_returns_each_game_once(games) -> None:
    records = games.execute(build_search_plan(None, ["Action"]))

    assert _titles(records) == ["Action RPG", "Both"]
    assert len({record.id for record in records}) == len(records)


def test_tagged_result_carries_full_tag_set(games) -> None:
    (record,) = games.execute(build_search_plan(None, ["RPG"]))

    assert sorted(tag.name for tag in record.tags) == ["Action", "RPG"]


def test_empty_plan_lists_everything_by_title(games) -> None:
    records = games.execute(build_search_plan(None, ()))

    assert _titles(records) == ["100% Untagged", "Action RPG", "Both", "Puzzle Only"]


def test_text_filter_is_case_insensitive_substring(games) -> None:
    records = games.execute(build_search_plan("PUZZ", ()))

    assert _titles(records) == ["Puzzle Only"]


def test_text_filter_escapes_wildcards(games) -> None:
    assert _titles(games.execute(build_search_plan("100%", ()))) == ["100% Untagged"]
    assert _titles(games.execute(build_search_plan("%", ()))) == ["100% Untagged"]


def test_text_and_tags_combine(games) -> None:
    records = games.execute(build_search_plan("rpg", ["Action"]))

    assert _titles(records) == ["Action RPG"]


def test_search_through_service_uses_catalog_from_database(service) -> None:
    results = service.search(tags="Puzzle,Action,NotATag")

    assert [view.title for view in results] == ["Both"]
    assert results[0].tags == ("Action", "Puzzle")
    assert results[0].images == ("/b.png",)


def test_unknown_only_tags_fall_back_to_full_list(service) -> None:
    results = service.search(tags="Shooter")

    assert len(results) == 4


def test_detail_keeps_association_order(service, session_factory) -> None:
    detail = service.get_game(_game_id(session_factory, "Both"))

    assert [tag.name for tag in detail.tags] == ["Puzzle", "Action"]


def test_get_missing_game_returns_none(games) -> None:
    assert games.get(9999) is None


def test_detail_reviews_carry_vote_tallies(service, session_factory) -> None:
    detail = service.get_game(_game_id(session_factory, "Both"), viewer_id=3)
    reviews = {review.comment: review for review in detail.reviews}

    great = reviews["Great"]
    assert (great.likes, great.dislikes, great.my_vote) == (2, 1, 1)
    meh = reviews["Meh"]
    assert (meh.likes, meh.dislikes, meh.my_vote) == (0, 0, 0)


def test_review_list_is_newest_first_with_tallies(service, session_factory) -> None:
    reviews = service.list_reviews(_game_id(session_factory, "Both"), viewer_id=4)

    assert [review.comment for review in reviews] == ["Meh", "Great"]
    assert reviews[1].to_response()["myVote"] == -1
    assert reviews[1].to_response()["user"]["email"] == "u2@example.com"


def test_review_list_without_viewer(service, session_factory) -> None:
    reviews = service.list_reviews(_game_id(session_factory, "Both"))

    assert all(review.my_vote == 0 for review in reviews)


def test_query_failures_are_wrapped() -> None:
    engine = create_engine("sqlite://", future=True)
    factory = sessionmaker(engine, future=True)
    repository = SQLAlchemyGameRepository(factory)

    with pytest.raises(RepositoryError) as excinfo:
        repository.execute(build_search_plan(None, ()))

    assert isinstance(excinfo.value.__cause__, OperationalError)
    engine.dispose()
