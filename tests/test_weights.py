"""Tests for mutation weight profiles."""

import random

import pytest

from blockevo import MUTATION_KINDS, MutationWeights


class TestMutationWeights:
    def test_defaults(self):
        weights = MutationWeights()
        assert weights.get_weight("replace_value") == 4.0
        assert set(weights.as_dict()) == set(MUTATION_KINDS)

    def test_partial_profile_uses_default_weight(self):
        weights = MutationWeights({"swap": 3.0}, default_weight=0.5)
        assert weights.get_weight("swap") == 3.0
        assert weights.get_weight("insert") == 0.5

    def test_kind_names_are_normalized(self):
        weights = MutationWeights({" Rewrite ": 2.0})
        assert weights.get_weight("rewrite") == 2.0

    def test_invalid_entries(self):
        with pytest.raises(ValueError):
            MutationWeights({"teleport": 1.0})
        with pytest.raises(ValueError):
            MutationWeights().set_weight("swap", -0.5)

    def test_clearing_a_weight(self):
        weights = MutationWeights({"swap": 3.0}, default_weight=1.0)
        weights.set_weight("swap", None)
        assert weights.get_weight("swap") == 1.0

    def test_group_weight(self):
        weights = MutationWeights()
        weights.set_group_weight("structural", 0.0)
        assert weights.group_members("structural") == {"insert", "delete", "swap"}
        assert all(weights.get_weight(kind) == 0.0 for kind in ("insert", "delete", "swap"))
        with pytest.raises(ValueError):
            weights.set_group_weight("cosmetic", 1.0)

    def test_only(self):
        weights = MutationWeights.only(["delete"])
        rng = random.Random(0)
        assert {weights.choose(MUTATION_KINDS, rng) for _ in range(50)} == {"delete"}

    def test_choose_uniform_when_all_zero(self):
        weights = MutationWeights({kind: 0.0 for kind in MUTATION_KINDS})
        rng = random.Random(0)
        picks = {weights.choose(["swap", "insert"], rng) for _ in range(50)}
        assert picks == {"swap", "insert"}

    def test_choose_needs_kinds(self):
        with pytest.raises(ValueError):
            MutationWeights().choose([])
