"""標準タグとサンプルゲームの投入。"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker
from structlog.stdlib import BoundLogger

from game_catalog.core.search.catalog import ALL_TAGS
from game_catalog.infra.db.models import Game, GameTagLink, Tag
from game_catalog.shared.logging import get_logger


@dataclass(slots=True)
class SampleGame:
    title: str
    tags: tuple[str, ...]
    platform: str | None = None
    developer: str | None = None
    category: str | None = None
    release_date: date | None = None
    rating: float = 0.0
    description: str | None = None
    thumb_images: list[str] = field(default_factory=list)


SAMPLE_GAMES: tuple[SampleGame, ...] = (
    SampleGame(
        title="Tetris",
        tags=("Classic", "Puzzle", "Retro"),
        platform="NES",
        developer="Alexey Pajitnov",
        category="Puzzle",
        release_date=date(1984, 6, 6),
        rating=4.5,
        description="Stack falling tetrominoes to clear lines and chase high scores.",
        thumb_images=["/tetris-1.jpg", "/tetris-2.avif", "/tetris-3.png"],
    ),
    SampleGame(
        title="Game A",
        tags=("Action", "Adventure"),
        platform="PC",
        developer="Dev A",
        category="Action",
        release_date=date(2020, 1, 1),
        rating=4.5,
        description="An exciting action-adventure game.",
    ),
    SampleGame(
        title="Game B",
        tags=("RPG",),
        platform="Console",
        developer="Dev B",
        category="RPG",
        release_date=date(2019, 5, 15),
        rating=4.0,
        description="A captivating role-playing game.",
    ),
)


@dataclass(slots=True)
class SeedReport:
    tags_created: int = 0
    games_created: int = 0
    links_created: int = 0


def _ensure_tags(session: Session, names: Iterable[str]) -> dict[str, Tag]:
    wanted = list(dict.fromkeys(names))
    existing = {
        tag.name: tag for tag in session.scalars(select(Tag).where(Tag.name.in_(wanted))).all()
    }
    for name in wanted:
        if name not in existing:
            tag = Tag(name=name)
            session.add(tag)
            existing[name] = tag
    session.flush()
    return existing


@dataclass(slots=True)
class CatalogSeeder:
    """タグとゲームを冪等に投入する。タイトルが一致する既存ゲームは作り直さない。"""

    session_factory: sessionmaker[Session] | Callable[[], Session]
    games: Sequence[SampleGame] = SAMPLE_GAMES
    tags: Sequence[str] = ALL_TAGS
    logger: BoundLogger = field(default_factory=lambda: get_logger(__name__, component="seed"))

    def run(self, *, reset: bool = False) -> SeedReport:
        report = SeedReport()
        with self.session_factory() as session, session.begin():
            if reset:
                session.execute(delete(GameTagLink))
                session.execute(delete(Game))
                session.execute(delete(Tag))
                self.logger.info("seed_reset")

            before = set(session.scalars(select(Tag.name)).all())
            all_names = list(self.tags) + [name for game in self.games for name in game.tags]
            tags = _ensure_tags(session, all_names)
            report.tags_created = len(set(tags) - before)

            for sample in self.games:
                game = session.scalar(select(Game).where(Game.title == sample.title))
                if game is None:
                    game = Game(
                        title=sample.title,
                        platform=sample.platform,
                        developer=sample.developer,
                        category=sample.category,
                        release_date=sample.release_date,
                        rating=sample.rating,
                        description=sample.description,
                        thumb_images=list(sample.thumb_images),
                    )
                    session.add(game)
                    session.flush()
                    report.games_created += 1

                linked = set(
                    session.scalars(
                        select(GameTagLink.tag_id).where(GameTagLink.game_id == game.id)
                    ).all()
                )
                for name in sample.tags:
                    tag = tags[name]
                    if tag.id in linked:
                        continue
                    session.add(GameTagLink(game_id=game.id, tag_id=tag.id))
                    linked.add(tag.id)
                    report.links_created += 1

        self.logger.info(
            "seed_completed",
            tags_created=report.tags_created,
            games_created=report.games_created,
            links_created=report.links_created,
        )
        return report


__all__ = ["CatalogSeeder", "SAMPLE_GAMES", "SampleGame", "SeedReport"]
