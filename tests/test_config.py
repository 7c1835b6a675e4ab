"""Tests for evolution configuration."""

import logging
from pathlib import Path

import pytest

from blockevo import ConfigError, EvolutionConfig

EXAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "examples" / "sum_three_numbers.yaml"


class TestDefaults:
    def test_default_values(self):
        config = EvolutionConfig()
        assert config.population_size == 100
        assert config.max_generations == 50
        assert config.mutation_rate == 0.3
        assert config.elite_count == 1
        assert config.max_blocks == 50
        assert (config.min_initial_blocks, config.max_initial_blocks) == (5, 25)
        assert config.target_fitness is None
        assert config.validate() is config

    def test_default_mutation_weights(self):
        weights = EvolutionConfig().build_mutation_weights()
        assert weights.get_weight("replace_value") == 4.0
        assert weights.get_weight("swap") == 1.0


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"population_size": 0},
            {"population_size": 1},
            {"max_generations": 0},
            {"evaluation_cases_count": 0},
            {"min_initial_blocks": 10, "max_initial_blocks": 5},
            {"max_initial_blocks": 50},
            {"elite_count": -1},
            {"mutation_rate": 1.5},
            {"initial_value_bias": -0.1},
            {"mutation_weights": {"teleport": 1.0}},
            {"mutation_weights": {"swap": -1.0}},
        ],
    )
    def test_rejects(self, overrides):
        with pytest.raises(ConfigError):
            EvolutionConfig(**overrides).validate()

    def test_batches_are_coerced(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = EvolutionConfig(num_evaluation_batches=-2).validate()
        assert config.num_evaluation_batches == 1
        assert "not positive" in caplog.text

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            EvolutionConfig(population_size=0).validate()


class TestLoading:
    def test_dict_round_trip(self):
        config = EvolutionConfig(population_size=20, seed=3, mutation_weights={"swap": 0.0})
        restored = EvolutionConfig.from_dict(config.to_dict())
        assert restored == config

    def test_unknown_keys(self):
        with pytest.raises(ConfigError, match="populaton_size"):
            EvolutionConfig.from_dict({"populaton_size": 10})

    def test_flat_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("population_size: 12\nmax_generations: 3\nseed: 5\n")
        config = EvolutionConfig.from_yaml(path)
        assert config.population_size == 12
        assert config.max_generations == 3
        assert config.seed == 5

    def test_sectioned_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("evolution:\n  trials: 4\n  target_fitness: 0.9\n")
        config = EvolutionConfig.from_yaml(str(path))
        assert config.trials == 4
        assert config.target_fitness == 0.9

    def test_empty_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert EvolutionConfig.from_yaml(path) == EvolutionConfig()

    @pytest.mark.parametrize("text", ["- 1\n- 2\n", "population_size: [unclosed\n"])
    def test_bad_yaml(self, tmp_path, text):
        path = tmp_path / "config.yaml"
        path.write_text(text)
        with pytest.raises(ConfigError):
            EvolutionConfig.from_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            EvolutionConfig.from_yaml(tmp_path / "missing.yaml")

    def test_bundled_example(self):
        config = EvolutionConfig.from_yaml(EXAMPLE_CONFIG)
        assert config.trials == 3
        assert config.target_fitness == 1.0
        assert config.build_mutation_weights().get_weight("rewrite") == 2.0
