from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

import pytest

from game_catalog.shared import types
from game_catalog.shared.types import DTO, isoformat


@dataclass(slots=True)
class SampleDTO(DTO):
    id: int
    name: str


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        (date(2024, 1, 1), "2024-01-01"),
        (datetime(2024, 1, 1, 9, 30), "2024-01-01T09:30:00"),
        ("2024-01-01", "2024-01-01"),
    ],
)
def test_isoformat(value, expected) -> None:
    assert isoformat(value) == expected


def test_dto_to_dict() -> None:
    assert SampleDTO(id=1, name="Puzzle").to_dict() == {"id": 1, "name": "Puzzle"}


def test_public_names() -> None:
    assert sorted(types.__all__) == ["DTO", "ValueObject", "isoformat"]
