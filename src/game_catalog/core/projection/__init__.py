"""検索結果・レビューのレスポンス写像。"""

from game_catalog.core.projection.projector import (
    TagShape,
    normalize_images,
    project_game,
    project_review,
    project_tags,
    tally_votes,
)
from game_catalog.core.projection.views import (
    GameDetailView,
    LibraryGameView,
    ReviewUserView,
    ReviewUserWithEmailView,
    ReviewView,
    TagView,
    VoteTally,
)

__all__ = [
    "GameDetailView",
    "LibraryGameView",
    "ReviewUserView",
    "ReviewUserWithEmailView",
    "ReviewView",
    "TagShape",
    "TagView",
    "VoteTally",
    "normalize_images",
    "project_game",
    "project_review",
    "project_tags",
    "tally_votes",
]
