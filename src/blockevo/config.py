"""Evolution run configuration."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigError
from .weights import MutationWeights

logger = logging.getLogger(__name__)


@dataclass
class EvolutionConfig:
    """Configuration for the evolutionary process."""

    population_size: int = 100
    max_generations: int = 50
    trials: int = 1
    evaluation_cases_count: int = 20
    num_evaluation_batches: int = 1
    mutation_rate: float = 0.3
    elite_count: int = 1
    max_blocks: int = 50
    min_initial_blocks: int = 5
    max_initial_blocks: int = 25
    max_depth: int = 2
    initial_value_bias: float = 0.7  # chance of seeding out = (a + b) + c over inputs
    target_fitness: Optional[float] = None  # stop a trial once reached
    seed: Optional[int] = None
    mutation_weights: Optional[Dict[str, float]] = None

    def validate(self) -> "EvolutionConfig":
        """Check ranges; returns self for chaining."""
        for name in ("population_size", "max_generations", "trials", "evaluation_cases_count",
                     "max_blocks", "min_initial_blocks", "max_depth"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be at least 1, got {getattr(self, name)}")
        if self.num_evaluation_batches <= 0:
            logger.warning(
                "num_evaluation_batches=%s is not positive, using 1", self.num_evaluation_batches
            )
            self.num_evaluation_batches = 1
        if self.population_size < 2:
            raise ConfigError("population_size must be at least 2 to keep a parent pool")
        if self.max_initial_blocks < self.min_initial_blocks:
            raise ConfigError("max_initial_blocks must not be below min_initial_blocks")
        if self.max_initial_blocks >= self.max_blocks:
            raise ConfigError("max_initial_blocks must leave room for the trailing return")
        if self.elite_count < 0:
            raise ConfigError("elite_count must not be negative")
        for name in ("mutation_rate", "initial_value_bias"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value}")
        if self.mutation_weights is not None:
            try:
                MutationWeights(self.mutation_weights)
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc
        return self

    def build_mutation_weights(self) -> MutationWeights:
        return MutationWeights(self.mutation_weights)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EvolutionConfig":
        """Build from a mapping; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data)).validate()

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "EvolutionConfig":
        """Load from a YAML file, either flat or under an ``evolution`` section."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Error loading configuration file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {path} must contain a mapping")
        if "evolution" in data:
            data = data["evolution"] or {}
        return cls.from_dict(data)


__all__ = ["EvolutionConfig"]
