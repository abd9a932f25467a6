"""永続化レコードを公開レスポンス形状へ写像する。

ここの関数はすべて純粋関数で、セッションやクエリには触れない。
入力は ORM モデルでも、同じ属性を持つ任意のオブジェクトでもよい。
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from enum import StrEnum
from typing import Literal, Protocol, overload

from game_catalog.core.projection.views import (
    GameDetailView,
    LibraryGameView,
    ReviewUserView,
    ReviewUserWithEmailView,
    ReviewView,
    TagView,
    VoteTally,
)

LIKE = 1
DISLIKE = -1
NO_VOTE = 0


class TagShape(StrEnum):
    """タグの出力形状。呼び出し元ごとに意図的に異なる。"""

    NAMES_SORTED = "names-sorted"
    OBJECTS_ORDERED = "objects-ordered"


class TagRecord(Protocol):
    id: int
    name: str


class VoteRecord(Protocol):
    user_id: int
    value: int


class UserRecord(Protocol):
    id: int
    username: str
    email: str | None


class ReviewRecord(Protocol):
    id: int
    rating: int
    comment: str | None
    created_at: datetime | str | None
    user: UserRecord | None
    votes: Sequence[VoteRecord]


class GameRecord(Protocol):
    id: int
    title: str
    platform: str | None
    developer: str | None
    category: str | None
    release_date: date | str | None
    rating: float | None
    description: str | None
    thumb_images: Sequence[str | None] | None
    tags: Sequence[TagRecord]
    reviews: Sequence[ReviewRecord]


def normalize_image_path(value: object) -> str | None:
    """1 件の画像パスを正規化する。空なら None。

    先頭の `/` はちょうど 1 つに揃える。`//x.png` のように `/` で始まる値も
    そのままにはせず `/x.png` にする。
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return "/" + text.lstrip("/")


def normalize_images(values: Iterable[object] | None) -> list[str]:
    """空要素を落とし、先頭がちょうど 1 つの ``/`` になるよう揃える。順序は保持する。"""

    if values is None or isinstance(values, (str, bytes)):
        return []
    normalized: list[str] = []
    for value in values:
        path = normalize_image_path(value)
        if path is not None:
            normalized.append(path)
    return normalized


@overload
def project_tags(
    tags: Iterable[TagRecord] | None, shape: Literal[TagShape.NAMES_SORTED]
) -> tuple[str, ...]: ...


@overload
def project_tags(
    tags: Iterable[TagRecord] | None, shape: Literal[TagShape.OBJECTS_ORDERED]
) -> tuple[TagView, ...]: ...


def project_tags(
    tags: Iterable[TagRecord] | None, shape: TagShape
) -> tuple[str, ...] | tuple[TagView, ...]:
    """タグを指定形状で写像する。

    - ``NAMES_SORTED``: 名前だけを入力順に関係なく昇順で返す（ライブラリ一覧）。
    - ``OBJECTS_ORDERED``: ``TagView(id, name)`` を関連付け順のまま返す（詳細）。
    """

    records = list(tags or ())
    if TagShape(shape) is TagShape.NAMES_SORTED:
        return tuple(sorted(str(tag.name) for tag in records))
    return tuple(TagView(id=int(tag.id), name=str(tag.name)) for tag in records)


def tally_votes(votes: Iterable[VoteRecord] | None, viewer_id: int | None = None) -> VoteTally:
    """投票行から like/dislike 数と閲覧ユーザーの投票値を数える。

    集計は読み出しのたびに行う。votes はそのレビューの全件である必要がある。
    """

    likes = 0
    dislikes = 0
    my_vote = NO_VOTE
    for vote in votes or ():
        value = int(vote.value)
        if value == LIKE:
            likes += 1
        elif value == DISLIKE:
            dislikes += 1
        if viewer_id is not None and int(vote.user_id) == int(viewer_id):
            my_vote = value
    return VoteTally(likes=likes, dislikes=dislikes, my_vote=my_vote)


def project_user(user: UserRecord | None, *, include_email: bool = False) -> ReviewUserView | None:
    if user is None:
        return None
    if include_email:
        return ReviewUserWithEmailView(
            id=int(user.id), username=user.username, email=getattr(user, "email", None)
        )
    return ReviewUserView(id=int(user.id), username=user.username)


def project_review(
    raw: ReviewRecord,
    viewer_id: int | None = None,
    *,
    include_email: bool = True,
) -> ReviewView:
    """レビューを投票集計込みのビューにする。"""

    tally = tally_votes(getattr(raw, "votes", None), viewer_id)
    return ReviewView(
        id=int(raw.id),
        rating=raw.rating,
        comment=raw.comment,
        created_at=raw.created_at,
        likes=tally.likes,
        dislikes=tally.dislikes,
        my_vote=tally.my_vote,
        user=project_user(raw.user, include_email=include_email),
    )


@overload
def project_game(
    raw: GameRecord, tag_shape: Literal[TagShape.NAMES_SORTED], *, viewer_id: int | None = ...
) -> LibraryGameView: ...


@overload
def project_game(
    raw: GameRecord, tag_shape: Literal[TagShape.OBJECTS_ORDERED], *, viewer_id: int | None = ...
) -> GameDetailView: ...


def project_game(
    raw: GameRecord,
    tag_shape: TagShape = TagShape.OBJECTS_ORDERED,
    *,
    viewer_id: int | None = None,
) -> LibraryGameView | GameDetailView:
    """ゲームを呼び出し元の契約に合わせたビューにする。

    ``NAMES_SORTED`` はライブラリ一覧用の ``LibraryGameView``、
    ``OBJECTS_ORDERED`` はレビューを含む詳細用の ``GameDetailView`` を返す。
    """

    images = normalize_images(getattr(raw, "thumb_images", None))
    if TagShape(tag_shape) is TagShape.NAMES_SORTED:
        return LibraryGameView(
            id=int(raw.id),
            title=raw.title,
            platform=raw.platform,
            release_date=raw.release_date,
            rating=raw.rating,
            images=images,
            tags=project_tags(raw.tags, TagShape.NAMES_SORTED),
        )

    reviews = tuple(
        project_review(review, viewer_id, include_email=False)
        for review in (getattr(raw, "reviews", None) or ())
    )
    return GameDetailView(
        id=int(raw.id),
        name=raw.title,
        platform=raw.platform,
        developer=raw.developer,
        category=raw.category,
        release_date=raw.release_date,
        rating=raw.rating,
        description=raw.description,
        images=images,
        tags=project_tags(raw.tags, TagShape.OBJECTS_ORDERED),
        reviews=reviews,
    )


__all__ = [
    "DISLIKE",
    "GameRecord",
    "LIKE",
    "NO_VOTE",
    "ReviewRecord",
    "TagRecord",
    "TagShape",
    "UserRecord",
    "VoteRecord",
    "normalize_image_path",
    "normalize_images",
    "project_game",
    "project_review",
    "project_tags",
    "project_user",
    "tally_votes",
]
