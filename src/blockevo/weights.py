"""Weight profiles for choosing mutation kinds."""

from __future__ import annotations

import random
from typing import Dict, Iterable, Mapping, Optional, Sequence

REPLACE_VALUE = "replace_value"
REPLACE_BLOCK = "replace_block"
INSERT = "insert"
DELETE = "delete"
SWAP = "swap"
REWRITE = "rewrite"
EXTRACT = "extract"

MUTATION_KINDS = (REPLACE_VALUE, REPLACE_BLOCK, INSERT, DELETE, SWAP, REWRITE, EXTRACT)

DEFAULT_WEIGHTS: Dict[str, float] = {
    REPLACE_VALUE: 4.0,
    REPLACE_BLOCK: 1.0,
    INSERT: 1.0,
    DELETE: 1.0,
    SWAP: 1.0,
    REWRITE: 1.0,
    EXTRACT: 1.0,
}


class MutationWeights:
    """Relative weights for mutation kinds, with optional named groups."""

    def __init__(
        self,
        weights: Optional[Mapping[str, float]] = None,
        default_weight: float = 1.0,
    ):
        self.default_weight = float(default_weight)
        self._weights: Dict[str, float] = {}
        self._groups: Dict[str, set] = {"structural": {INSERT, DELETE, SWAP}}
        for kind, weight in (DEFAULT_WEIGHTS if weights is None else weights).items():
            self.set_weight(kind, weight)

    @staticmethod
    def _normalize_kind(kind: str) -> str:
        clean = kind.strip().lower()
        if clean not in MUTATION_KINDS:
            raise ValueError(
                f"Unknown mutation kind '{kind}'. Use one of: {', '.join(MUTATION_KINDS)}."
            )
        return clean

    def set_weight(self, kind: str, weight: Optional[float]) -> None:
        """Assign or clear the weight of one mutation kind."""
        key = self._normalize_kind(kind)
        if weight is None:
            self._weights.pop(key, None)
            return
        if weight < 0:
            raise ValueError("Mutation weights must be non-negative.")
        self._weights[key] = float(weight)

    def get_weight(self, kind: str) -> float:
        return self._weights.get(self._normalize_kind(kind), self.default_weight)

    def set_group_weight(self, name: str, weight: float) -> None:
        """Assign the same weight to every member of a named group."""
        members = self._groups.get(name.strip())
        if members is None:
            raise ValueError(f"Unknown mutation group '{name}'.")
        for kind in members:
            self.set_weight(kind, weight)

    def group_members(self, name: str) -> set:
        return set(self._groups.get(name.strip(), set()))

    def choose(self, kinds: Sequence[str], rng: Optional[random.Random] = None) -> str:
        """Weighted choice among ``kinds``; uniform when every weight is zero."""
        rng = rng or random
        if not kinds:
            raise ValueError("No mutation kinds to choose from.")
        weights = [self.get_weight(kind) for kind in kinds]
        if sum(weights) <= 0:
            return rng.choice(list(kinds))
        return rng.choices(list(kinds), weights=weights, k=1)[0]

    def as_dict(self) -> Dict[str, float]:
        return {kind: self.get_weight(kind) for kind in MUTATION_KINDS}

    @classmethod
    def only(cls, kinds: Iterable[str]) -> "MutationWeights":
        """Profile enabling just ``kinds``."""
        enabled = {cls._normalize_kind(kind) for kind in kinds}
        return cls({kind: (1.0 if kind in enabled else 0.0) for kind in MUTATION_KINDS})


__all__ = [
    "REPLACE_VALUE",
    "REPLACE_BLOCK",
    "INSERT",
    "DELETE",
    "SWAP",
    "REWRITE",
    "EXTRACT",
    "MUTATION_KINDS",
    "DEFAULT_WEIGHTS",
    "MutationWeights",
]
