"""Tests for block validation."""

import pytest

from blockevo import (
    BLOCK_CATALOG,
    Block,
    BlockKind,
    BlockValidator,
    ValueType,
    is_valid,
    make_get,
    make_if,
    make_if_else,
    make_op,
    make_return,
    make_set,
)
from blockevo.enums import LITERAL_KINDS, STATEMENT_KINDS
from blockevo.validator import value_type

GOOD_VALUES = {
    ValueType.NUMBER: "x",
    ValueType.BOOLEAN: True,
    ValueType.OPERATOR: "<=",
    ValueType.VARIABLE: "v0",
}

BAD_VALUES = {
    ValueType.NUMBER: False,
    ValueType.BOOLEAN: 1,
    ValueType.OPERATOR: "x",
    ValueType.VARIABLE: 5,
}

REPORTER_KINDS = [
    kind for kind in BlockKind if kind not in STATEMENT_KINDS and kind not in LITERAL_KINDS
]


def well_typed(kind):
    return Block(kind, [GOOD_VALUES[slot] for slot in BLOCK_CATALOG[kind].inputs])


class TestReporterSoundness:
    """Correct arity and types validate; any deviation does not."""

    @pytest.mark.parametrize("kind", REPORTER_KINDS)
    def test_well_typed_block_is_valid(self, kind, validator):
        assert validator.is_valid(well_typed(kind))

    @pytest.mark.parametrize("kind", REPORTER_KINDS)
    def test_extra_input_is_invalid(self, kind, validator):
        block = well_typed(kind)
        block.inputs.append(1)
        assert not validator.is_valid(block)

    @pytest.mark.parametrize(
        "kind", [kind for kind in REPORTER_KINDS if BLOCK_CATALOG[kind].arity > 0]
    )
    def test_missing_input_is_invalid(self, kind, validator):
        block = well_typed(kind)
        block.inputs.pop()
        assert not validator.is_valid(block)

    @pytest.mark.parametrize(
        "kind", [kind for kind in REPORTER_KINDS if BLOCK_CATALOG[kind].arity > 0]
    )
    def test_mistyped_input_is_invalid(self, kind, validator):
        spec = BLOCK_CATALOG[kind]
        for idx, slot in enumerate(spec.inputs):
            block = well_typed(kind)
            block.inputs[idx] = BAD_VALUES[slot]
            assert not validator.is_valid(block), (kind, idx)

    def test_literal_blocks(self, validator):
        assert validator.is_valid(Block(BlockKind.NUMBER, [3]))
        assert validator.is_valid(Block(BlockKind.BOOLEAN, [False]))
        assert not validator.is_valid(Block(BlockKind.NUMBER, ["x"]))
        assert not validator.is_valid(Block(BlockKind.NUMBER, [True]))
        assert not validator.is_valid(Block(BlockKind.BOOLEAN, [0]))

    def test_nested_output_types_must_match(self, validator):
        compare = make_op(BlockKind.COMPARE, "x", 1, "==")
        assert validator.is_valid(make_op(BlockKind.NOT, compare))
        assert not validator.is_valid(make_op(BlockKind.ADD, compare, 1))
        assert not validator.is_valid(make_op(BlockKind.ADD, make_set("v0", 1), 1))
        assert not validator.is_valid(make_op(BlockKind.ADD, make_op(BlockKind.ADD, "x"), 1))

    def test_non_block_is_invalid(self, validator):
        assert not validator.is_valid("x")
        assert not validator.is_valid(None)


class TestStatements:
    """Set, Return, If and IfElse rules."""

    def test_set_value_type_follows_name(self, validator):
        assert validator.is_valid(make_set("out", 1))
        assert validator.is_valid(make_set("v12", make_op(BlockKind.ADD, "x", "y")))
        assert validator.is_valid(make_set("b0", True))
        assert not validator.is_valid(make_set("b0", 1))
        assert not validator.is_valid(make_set("v0", True))

    def test_set_target_naming(self, validator):
        assert validator.is_valid(make_set("x", 2))
        assert not validator.is_valid(make_set("foo", 2))
        assert not validator.is_valid(make_set("", 2))
        assert not validator.is_valid(Block(BlockKind.SET, [1, 2], var="out"))

    def test_return(self, validator):
        assert validator.is_valid(make_return("out"))
        assert validator.is_valid(make_return(make_op(BlockKind.NEGATE, "z")))
        assert not validator.is_valid(make_return(True))
        assert not validator.is_valid(Block(BlockKind.RETURN, ["out", "x"]))
        assert not validator.is_valid(Block(BlockKind.RETURN, []))

    def test_if(self, validator):
        assert validator.is_valid(make_if(True, [make_set("out", 1)]))
        assert validator.is_valid(make_if("b3", []))
        assert not validator.is_valid(make_if(1, [make_set("out", 1)]))
        assert not validator.is_valid(make_if(True, [make_set("foo", 1)]))
        block = make_if(True, [make_set("out", 1)])
        block.else_actions.append(make_set("out", 2))
        assert not validator.is_valid(block)

    def test_if_else(self, validator):
        condition = make_op(BlockKind.COMPARE, "x", "y", ">")
        assert validator.is_valid(make_if_else(condition, [make_set("out", "x")], [make_set("out", "y")]))
        assert not validator.is_valid(make_if_else(condition, [make_set("out", "x")], [make_set("b0", 3)]))

    def test_module_level_helper(self):
        assert is_valid(make_set("out", "w"), ["w"])
        assert not is_valid(make_set("out", "w"), [])


class TestValueRules:
    """Variable-name values and Get references."""

    def test_number_slot_names(self, validator):
        assert validator.is_valid_value("x", ValueType.NUMBER)
        assert validator.is_valid_value("out", ValueType.NUMBER)
        assert validator.is_valid_value("v7", ValueType.NUMBER)
        assert not validator.is_valid_value("b1", ValueType.NUMBER)
        assert not validator.is_valid_value("foo", ValueType.NUMBER)

    def test_boolean_slot_names(self, validator):
        assert validator.is_valid_value("b1", ValueType.BOOLEAN)
        assert not validator.is_valid_value("v1", ValueType.BOOLEAN)
        assert not validator.is_valid_value("x", ValueType.BOOLEAN)

    def test_get_type_follows_prefix(self, validator):
        assert validator.is_valid_value(make_get("v0"), ValueType.NUMBER)
        assert validator.is_valid_value(make_get("b0"), ValueType.BOOLEAN)
        assert not validator.is_valid_value(make_get("b0"), ValueType.NUMBER)
        assert not validator.is_valid_value(make_get("v0"), ValueType.BOOLEAN)
        assert not validator.is_valid_value(make_get("nope"), ValueType.NUMBER)

    def test_value_type(self):
        assert value_type(3) == ValueType.NUMBER
        assert value_type(True) == ValueType.BOOLEAN
        assert value_type("b2") == ValueType.BOOLEAN
        assert value_type(make_get("v2")) == ValueType.NUMBER
        assert value_type(make_op(BlockKind.OR, True, False)) == ValueType.BOOLEAN
        assert value_type(make_return("out")) == ValueType.NONE


class TestDeclaredInputTypes:
    """Inputs typed by declaration rather than by name prefix."""

    @pytest.fixture
    def typed_validator(self):
        return BlockValidator(["x", "flag", "base"], boolean_inputs=["flag"])

    def test_boolean_input_fills_boolean_slots(self, typed_validator):
        assert typed_validator.is_valid_value("flag", ValueType.BOOLEAN)
        assert typed_validator.is_valid_value(make_get("flag"), ValueType.BOOLEAN)
        assert typed_validator.is_valid(make_if("flag", [make_set("v0", "x")]))

    def test_boolean_input_rejected_in_numeric_slots(self, typed_validator):
        assert not typed_validator.is_valid_value("flag", ValueType.NUMBER)
        assert not typed_validator.is_valid(make_set("out", make_op(BlockKind.ADD, "flag", 1)))

    def test_numeric_input_with_b_prefix_stays_numeric(self, typed_validator):
        assert typed_validator.is_valid_value("base", ValueType.NUMBER)
        assert not typed_validator.is_valid_value("base", ValueType.BOOLEAN)

    def test_value_type_uses_declarations(self, typed_validator):
        assert typed_validator.value_type("flag") == ValueType.BOOLEAN
        assert typed_validator.value_type(make_get("flag")) == ValueType.BOOLEAN
        assert typed_validator.value_type("base") == ValueType.NUMBER
        assert value_type("flag", boolean_inputs=["flag"]) == ValueType.BOOLEAN
        assert value_type("flag") == ValueType.NUMBER

    def test_module_level_check(self):
        block = make_if(make_get("flag"), [make_set("v0", 1)])
        assert is_valid(block, ["x"], ["flag"])
        assert not is_valid(block, ["x", "flag"])
