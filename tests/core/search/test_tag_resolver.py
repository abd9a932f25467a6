from __future__ import annotations

import pytest

from game_catalog.core.search.catalog import ALL_TAGS, TAG_GROUPS, StaticTagCatalog
from game_catalog.core.search.tag_resolver import TagResolver, resolve_tags, split_tags

KNOWN = frozenset({"Puzzle", "Action", "RPG"})


class CountingCatalog:
    def __init__(self, names: set[str]) -> None:
        self._names = names
        self.calls = 0

    def known_tag_names(self) -> set[str]:
        self.calls += 1
        return self._names


@pytest.mark.parametrize("requested", [None, "", "   ", ",", " , ,, "])
def test_empty_request_means_no_filter(requested: str | None) -> None:
    assert resolve_tags(requested, KNOWN) == ()


def test_unknown_tags_are_dropped_silently() -> None:
    assert resolve_tags("Puzzle,NotATag", KNOWN) == ("Puzzle",)


def test_pieces_are_trimmed_and_deduplicated_in_first_occurrence_order() -> None:
    result = resolve_tags(" Action , Puzzle,Action,  RPG ,Puzzle", KNOWN)

    assert result == ("Action", "Puzzle", "RPG")


def test_matching_is_case_sensitive() -> None:
    assert resolve_tags("puzzle,RPG,rpg", KNOWN) == ("RPG",)


def test_result_is_always_subset_of_catalog() -> None:
    requested = "Puzzle,Action,Shooter,,RPG,Puzzle,action,  Sports  "

    result = resolve_tags(requested, KNOWN)

    assert set(result) <= KNOWN
    assert len(result) == len(set(result))


def test_custom_separator() -> None:
    assert split_tags("Puzzle; RPG;;", separator=";") == ["Puzzle", "RPG"]
    assert resolve_tags("Puzzle; RPG", KNOWN, separator=";") == ("Puzzle", "RPG")


def test_resolver_reads_catalog_once_per_call() -> None:
    catalog = CountingCatalog({"Puzzle", "Action"})
    resolver = TagResolver(catalog=catalog)

    assert resolver.resolve("Action,Unknown,Puzzle") == ("Action", "Puzzle")
    assert catalog.calls == 1


def test_resolver_skips_catalog_for_empty_request() -> None:
    catalog = CountingCatalog({"Puzzle"})
    resolver = TagResolver(catalog=catalog)

    assert resolver.resolve("") == ()
    assert catalog.calls == 0


def test_default_catalog_is_canonical_tag_list() -> None:
    resolver = TagResolver()

    assert resolver.resolve("Puzzle,UnknownTag,Screen Reader Friendly") == (
        "Puzzle",
        "Screen Reader Friendly",
    )
    assert StaticTagCatalog().known_tag_names() == frozenset(ALL_TAGS)


def test_canonical_groups_include_genres() -> None:
    genres = next(group for group in TAG_GROUPS if group.id == "genres")

    assert {"Action", "Puzzle", "RPG"} <= set(genres.tags)
    assert len(ALL_TAGS) == len(set(ALL_TAGS))
