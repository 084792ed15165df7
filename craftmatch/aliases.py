from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Set, Tuple

from .similarity import SimilarityScorer
from .text_utils import normalize_text


class AliasTable:
    """Immutable canonical material -> aliases mapping."""

    def __init__(self, entries: Mapping[str, Iterable[str]]):
        table: Dict[str, Tuple[str, ...]] = {}
        for canonical, aliases in entries.items():
            if not str(canonical).strip():
                raise ValueError("Alias table keys must be non-empty")
            if isinstance(aliases, str):
                raise ValueError(f"Aliases for '{canonical}' must be a list, not a string")
            table[str(canonical)] = tuple(str(alias) for alias in aliases)
        self._entries = MappingProxyType(table)
        # normalized forms are what the resolver hands out
        self._normalized: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(
            (normalize_text(canonical), tuple(normalize_text(alias) for alias in aliases))
            for canonical, aliases in table.items()
        )

    @classmethod
    def from_json(cls, path: str | Path) -> "AliasTable":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Alias table not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        if not isinstance(payload, dict):
            raise ValueError("Alias table must be a JSON object")
        return cls(payload)

    @property
    def entries(self) -> Mapping[str, Tuple[str, ...]]:
        return self._entries

    def normalized_entries(self) -> Iterator[Tuple[str, Tuple[str, ...]]]:
        return iter(self._normalized)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, canonical: object) -> bool:
        return canonical in self._entries

    def __getitem__(self, canonical: str) -> Tuple[str, ...]:
        return self._entries[canonical]


class AliasResolver:
    def __init__(self, table: AliasTable, scorer: SimilarityScorer, threshold: float = 0.6):
        self.table = table
        self.scorer = scorer
        self.threshold = threshold

    def expand(self, term: str) -> FrozenSet[str]:
        normalized = normalize_text(term)
        variants: Set[str] = {normalized}
        for canonical, aliases in self.table.normalized_entries():
            if normalized == canonical or self.scorer.similarity(normalized, canonical) > self.threshold:
                variants.add(canonical)
                variants.update(aliases)
        for canonical, aliases in self.table.normalized_entries():
            if any(self.scorer.similarity(normalized, alias) > self.threshold for alias in aliases):
                variants.add(canonical)
                variants.update(aliases)
        return frozenset(variants)

    def expand_all(self, terms: Iterable[str]) -> List[Tuple[str, FrozenSet[str]]]:
        return [(term, self.expand(term)) for term in terms]
