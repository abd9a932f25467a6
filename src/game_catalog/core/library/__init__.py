"""ライブラリ検索のユースケース。"""

from game_catalog.core.library.service import (
    GameNotFoundError,
    GameRepositoryProtocol,
    LibraryService,
    ReviewRepositoryProtocol,
)

__all__ = [
    "GameNotFoundError",
    "GameRepositoryProtocol",
    "LibraryService",
    "ReviewRepositoryProtocol",
]
