"""DB 向けインフラ。"""

from .models import (
    Base,
    Game,
    GameReport,
    GameTagLink,
    Review,
    ReviewVote,
    Tag,
    User,
)
from .repositories import (
    RepositoryError,
    SQLAlchemyGameRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyTagRepository,
    build_plan_statement,
)
from .seed import CatalogSeeder, SeedReport
from .session import DatabaseError, DatabaseSessionManager

__all__ = [
    "Base",
    "CatalogSeeder",
    "DatabaseError",
    "DatabaseSessionManager",
    "Game",
    "GameReport",
    "GameTagLink",
    "RepositoryError",
    "Review",
    "ReviewVote",
    "SQLAlchemyGameRepository",
    "SQLAlchemyReviewRepository",
    "SQLAlchemyTagRepository",
    "SeedReport",
    "Tag",
    "User",
    "build_plan_statement",
]
