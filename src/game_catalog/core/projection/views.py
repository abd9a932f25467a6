"""公開レスポンス向けのビュー DTO。"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from game_catalog.shared.types import DTO, isoformat

__all__ = [
    "GameDetailView",
    "LibraryGameView",
    "ReviewUserView",
    "ReviewUserWithEmailView",
    "ReviewView",
    "TagView",
    "VoteTally",
]


@dataclass(slots=True)
class TagView(DTO):
    id: int
    name: str

    def to_response(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(slots=True)
class VoteTally(DTO):
    """レビューごとの投票集計と閲覧ユーザー自身の投票値。"""

    likes: int = 0
    dislikes: int = 0
    my_vote: int = 0


@dataclass(slots=True)
class ReviewUserView(DTO):
    """レビュー投稿者。ゲーム詳細ではメールアドレスを出さない。"""

    id: int
    username: str

    def to_response(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}


@dataclass(slots=True)
class ReviewUserWithEmailView(ReviewUserView):
    email: str | None = None

    def to_response(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "email": self.email}


@dataclass(slots=True)
class ReviewView(DTO):
    id: int
    rating: int
    comment: str | None
    created_at: datetime | str | None
    likes: int
    dislikes: int
    my_vote: int
    user: ReviewUserView | None = None

    def to_response(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "rating": self.rating,
            "comment": self.comment,
            "createdAt": isoformat(self.created_at),
            "likes": self.likes,
            "dislikes": self.dislikes,
            "myVote": self.my_vote,
            "user": self.user.to_response() if self.user else None,
        }


@dataclass(slots=True)
class LibraryGameView(DTO):
    """ライブラリ一覧・検索結果の 1 件。タグは名前のみを昇順で持つ。"""

    id: int
    title: str
    platform: str | None
    release_date: date | str | None
    rating: float | None
    images: tuple[str, ...] = field(default_factory=tuple)
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "images", tuple(self.images))
        object.__setattr__(self, "tags", tuple(self.tags))

    def to_response(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "platform": self.platform,
            "releaseDate": isoformat(self.release_date),
            "rating": self.rating,
            "images": list(self.images),
            "tags": list(self.tags),
        }


@dataclass(slots=True)
class GameDetailView(DTO):
    """ゲーム詳細。タグは関連付け順の ``{id, name}``、レビューは集計済み。"""

    id: int
    name: str
    platform: str | None
    developer: str | None
    category: str | None
    release_date: date | str | None
    rating: float | None
    description: str | None
    images: tuple[str, ...] = field(default_factory=tuple)
    tags: tuple[TagView, ...] = field(default_factory=tuple)
    reviews: tuple[ReviewView, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "images", tuple(self.images))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "reviews", tuple(self.reviews))

    def to_response(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "platform": self.platform,
            "developer": self.developer,
            "category": self.category,
            "releaseDate": isoformat(self.release_date),
            "rating": self.rating,
            "description": self.description,
            "images": list(self.images),
            "tags": [tag.to_response() for tag in self.tags],
            "reviews": [review.to_response() for review in self.reviews],
        }
