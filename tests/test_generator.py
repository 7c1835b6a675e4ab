"""Tests for random block generation."""

import random

import pytest

from blockevo import BlockKind, RandomBlockGenerator, ValueType
from blockevo.block import referenced_variables, walk
from blockevo.validator import value_type


class TestGeneratedValidity:
    """Generated blocks always validate for the inputs they were built with."""

    @pytest.mark.parametrize("seed", range(10))
    def test_reporters_are_valid(self, seed, validator, input_variables):
        generator = RandomBlockGenerator(random.Random(seed))
        for output in (ValueType.NUMBER, ValueType.BOOLEAN):
            for _ in range(30):
                block = generator.generate_random_block(
                    0, 3, input_variables=input_variables, output=output
                )
                assert validator.is_valid(block), block
                assert value_type(block) == output

    @pytest.mark.parametrize("seed", range(10))
    def test_actions_are_valid(self, seed, validator, input_variables):
        generator = RandomBlockGenerator(random.Random(seed))
        for _ in range(30):
            block = generator.generate_random_block(
                0, 2, is_action=True, input_variables=input_variables
            )
            assert validator.is_valid(block), block
            assert block.kind in (BlockKind.SET, BlockKind.IF, BlockKind.IF_ELSE)

    def test_actions_never_assign_inputs(self, generator, input_variables):
        for _ in range(100):
            block = generator.generate_random_block(
                0, 2, is_action=True, input_variables=input_variables
            )
            for _, node in walk([block]):
                if node.kind == BlockKind.SET:
                    assert node.var not in input_variables

    def test_target_forces_set(self, generator, input_variables):
        for _ in range(20):
            block = generator.generate_random_block(
                0, 2, is_action=True, target_var="v1", input_variables=input_variables
            )
            assert block.kind == BlockKind.SET
            assert block.var == "v1"

    def test_without_inputs(self, generator):
        for _ in range(30):
            block = generator.generate_random_block(0, 2)
            assert RandomBlockGenerator().validator_for(()).is_valid(block)


class TestTerminals:
    def test_slots_at_max_depth_are_terminals(self, generator, input_variables):
        for _ in range(50):
            value = generator.generate_input(ValueType.NUMBER, 2, 2, input_variables)
            assert value in input_variables

    def test_terminal_pools(self, generator):
        assert generator.terminal(ValueType.BOOLEAN, []) in (True, False)
        assert generator.terminal(ValueType.OPERATOR, []) in ("==", "!=", ">", ">=", "<", "<=")
        assert generator.terminal(ValueType.VARIABLE, []) in ("out", "v0", "v1", "v2")
        assert generator.terminal(ValueType.NUMBER, ["w"]) == "w"

    def test_scratch_variables_exclude_inputs(self, generator):
        assert generator.scratch_variables(["x"]) == ["out", "v0", "v1", "v2"]
        assert generator.scratch_variables(["v0", "v2"]) == ["out", "v1"]
        assert generator.scratch_variables(["out", "v0", "v1", "v2"]) == ["out"]


class TestInitialValue:
    def test_full_bias_sums_inputs(self, input_variables):
        generator = RandomBlockGenerator(random.Random(3), initial_value_bias=1.0)
        value = generator.generate_initial_value(input_variables)
        assert value.kind == BlockKind.ADD
        assert value.inputs[0].kind == BlockKind.ADD
        assert value.inputs[1] in input_variables

    def test_single_input_value_is_numeric(self):
        generator = RandomBlockGenerator(random.Random(3), initial_value_bias=1.0)
        validator = generator.validator_for(["x"])
        for _ in range(20):
            value = generator.generate_initial_value(["x"], 0, 2)
            assert validator.is_valid_value(value, ValueType.NUMBER)

    def test_statements_end_with_output_assignment(self, generator, validator, input_variables):
        for length in (1, 2, 6):
            statements = generator.generate_statements(input_variables, length)
            assert len(statements) == length
            assert statements[-1].kind == BlockKind.SET
            assert statements[-1].var == "out"
            assert all(validator.is_valid(block) for block in statements)


BOOLEAN_PROBLEM_INPUTS = ["x", "flag"]


class TestBooleanInputs:
    """Declared boolean inputs only fill boolean slots."""

    @pytest.mark.parametrize("seed", range(5))
    def test_statements_validate_with_declared_types(self, seed):
        generator = RandomBlockGenerator(random.Random(seed))
        validator = generator.validator_for(BOOLEAN_PROBLEM_INPUTS, ["flag"])
        for _ in range(20):
            for block in generator.generate_statements(BOOLEAN_PROBLEM_INPUTS, 6, 3, ["flag"]):
                assert validator.is_valid(block), block

    def test_boolean_terminal_draws_boolean_input(self, generator):
        values = [
            generator.terminal(ValueType.BOOLEAN, BOOLEAN_PROBLEM_INPUTS, ["flag"])
            for _ in range(100)
        ]
        assert "flag" in values
        assert all(value in ("flag", True, False) for value in values)

    def test_numeric_terminal_skips_boolean_input(self, generator):
        for _ in range(50):
            assert generator.terminal(ValueType.NUMBER, BOOLEAN_PROBLEM_INPUTS, ["flag"]) == "x"
            value = generator.generate_input(ValueType.NUMBER, 2, 2, BOOLEAN_PROBLEM_INPUTS, ["flag"])
            assert value == "x"

    def test_boolean_only_inputs_leave_numeric_slots_to_constants(self, generator):
        for _ in range(50):
            value = generator.terminal(ValueType.NUMBER, ["flag"], ["flag"])
            assert value != "flag"
            assert isinstance(value, (int, float))

    def test_initial_value_sums_numeric_inputs(self):
        generator = RandomBlockGenerator(random.Random(3), initial_value_bias=1.0)
        for _ in range(20):
            value = generator.generate_initial_value(["x", "flag", "y"], boolean_inputs=["flag"])
            assert value.kind == BlockKind.ADD
            assert set(referenced_variables(value)) <= {"x", "y"}

    def test_scratch_variables_exclude_boolean_inputs(self, generator):
        assert generator.scratch_variables(["x"], ["v1"]) == ["out", "v0", "v2"]


class TestFallbackValue:
    def test_numeric_fallback_without_inputs_is_zero(self, generator):
        assert generator._fallback_value("out", []) == 0
        assert generator._fallback_value("v0", ["flag"], ["flag"]) == 0

    def test_numeric_fallback_prefers_numeric_input(self, generator):
        assert generator._fallback_value("out", ["flag", "x"], ["flag"]) == "x"

    def test_boolean_fallback(self, generator):
        assert generator._fallback_value("b0", ["x"]) is False
