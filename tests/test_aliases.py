import pytest

from craftmatch.aliases import AliasResolver, AliasTable
from craftmatch.similarity import SimilarityScorer


def _resolver(table: AliasTable, threshold: float = 0.6) -> AliasResolver:
    return AliasResolver(table, SimilarityScorer(), threshold)


def test_canonical_term_expands_to_aliases(aliases):
    variants = _resolver(aliases).expand("Cardboard")
    assert {"cardboard", "box", "carton", "packaging", "corrugated"} <= variants


def test_alias_term_pulls_in_canonical(aliases):
    variants = _resolver(aliases).expand("shears")
    assert {"shears", "scissors", "cutting tool", "cutter"} <= variants


def test_similar_term_expands(aliases):
    variants = _resolver(aliases).expand("hot glue")
    assert "glue" in variants
    assert "adhesive" in variants


def test_shared_alias_expands_every_owner(aliases):
    variants = _resolver(aliases).expand("container")
    assert {"bottle", "jar", "mason jar", "plastic bottle"} <= variants


def test_unknown_term_only_returns_itself(aliases):
    assert _resolver(aliases).expand("Unicorn") == frozenset({"unicorn"})


def test_custom_table_is_injected():
    table = AliasTable({"button": ["toggle", "snap"]})
    resolver = _resolver(table)
    assert resolver.expand("snap") == frozenset({"snap", "button", "toggle"})
    assert len(table) == 1
    assert "button" in table
    assert table["button"] == ("toggle", "snap")


def test_alias_table_is_read_only(aliases):
    with pytest.raises(TypeError):
        aliases.entries["glue"] = ("goo",)


def test_alias_table_validation(tmp_path):
    with pytest.raises(ValueError):
        AliasTable({"glue": "paste"})
    with pytest.raises(FileNotFoundError):
        AliasTable.from_json(tmp_path / "missing.json")
    bad = tmp_path / "aliases.json"
    bad.write_text('["glue"]', encoding="utf-8")
    with pytest.raises(ValueError):
        AliasTable.from_json(bad)
