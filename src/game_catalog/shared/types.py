"""共有型・ユーティリティ。"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any


@dataclass(slots=True)
class ValueObject:
    """DTO や VO のベースクラス。"""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class DTO(ValueObject):
    """データ転送オブジェクト用ベース。"""


def isoformat(value: date | str | None) -> str | None:
    """日付・日時を ISO 8601 文字列にする。文字列はそのまま返す。"""

    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


__all__ = ["DTO", "ValueObject", "isoformat"]
