from __future__ import annotations

from types import MappingProxyType

import pytest

from mangashelf.services.covers.queries import QueryBuilder, build_queries

pytestmark = pytest.mark.covers


def test_known_title_starts_with_english_first_volume_aliases() -> None:
    queries = build_queries("One Piece")

    assert queries[:4] == [
        "One Piece Volume 1 manga",
        "One Piece Volume 1 comic",
        'One Piece Volume 1 "graphic novel"',
        "One Piece Volume 1",
    ]
    assert "One Piece Vol.1 manga" in queries
    assert "One Piece First Volume" in queries


def test_lookup_key_ignores_case_and_punctuation() -> None:
    assert build_queries("ONE   PIECE!!")[0] == "One Piece Volume 1 manga"


def test_romanized_title_maps_to_english_alias() -> None:
    queries = build_queries("Shingeki no Kyojin")

    assert queries[0] == "Attack on Titan Volume 1 manga"
    assert 'Shingeki no Kyojin "volume 1" manga' in queries


def test_author_adds_author_qualified_alias_queries() -> None:
    queries = build_queries("Naruto", "Masashi Kishimoto")

    assert queries[:6] == [
        "Naruto Volume 1 manga",
        "Naruto Volume 1 comic",
        'Naruto Volume 1 "graphic novel"',
        "Naruto Volume 1",
        "Naruto Volume 1 Masashi Kishimoto manga",
        "Naruto Volume 1 Masashi Kishimoto comic",
    ]


def test_unknown_title_uses_generic_variants_in_order() -> None:
    queries = build_queries("Obscure Title")

    assert queries[:3] == [
        'Obscure Title "volume 1" manga',
        'Obscure Title "vol.1" manga',
        'Obscure Title "first volume" manga',
    ]
    assert queries[6:9] == [
        'Obscure Title "volume 1" "english edition"',
        'Obscure Title "vol.1" "english edition"',
        'Obscure Title "first volume" "english edition"',
    ]
    assert queries[-3:] == [
        "Obscure Title manga",
        "Obscure Title comic",
        'Obscure Title "graphic novel"',
    ]
    assert len(queries) == 19


def test_known_title_query_count() -> None:
    # Three aliases of four queries each, then the generic variants.
    assert len(build_queries("One Piece")) == 12 + 19


def test_queries_are_deduplicated() -> None:
    aliases = MappingProxyType({"solo": ("Solo", "Solo")})

    queries = QueryBuilder(aliases).build("Solo")

    assert len(queries) == len(set(queries))
    assert queries.count("Solo Volume 1 manga") == 1


def test_blank_title_produces_no_queries() -> None:
    assert build_queries("   ") == []


def test_each_call_returns_a_fresh_list() -> None:
    first = build_queries("Bleach")
    first.append("mutated")

    assert "mutated" not in build_queries("Bleach")


def test_injected_alias_table_is_used() -> None:
    builder = QueryBuilder(MappingProxyType({"my-series": ("My Series EN",)}))

    assert builder.first_volume_aliases("My Series") == [
        "My Series EN Volume 1",
        "My Series EN Vol.1",
        "My Series EN First Volume",
    ]
    assert builder.first_volume_aliases("Other") == []
