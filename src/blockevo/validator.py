"""Structural and type validation for block trees."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .block import Block
from .catalog import BLOCK_CATALOG
from .enums import BlockKind, LITERAL_KINDS, ValueType
from .values import (
    ValueEnumerations,
    is_boolean,
    is_boolean_name,
    is_number,
    is_valid_variable_name,
)

logger = logging.getLogger(__name__)


def value_type(
    value: Any, boolean_inputs: Iterable[str] = (), input_variables: Iterable[str] = ()
) -> ValueType:
    """Static type of a slot value; names and Get blocks follow the variable's type."""
    if is_boolean(value):
        return ValueType.BOOLEAN
    if is_number(value):
        return ValueType.NUMBER
    if isinstance(value, str):
        if is_boolean_name(value, boolean_inputs, input_variables):
            return ValueType.BOOLEAN
        return ValueType.NUMBER
    if isinstance(value, Block):
        if value.kind == BlockKind.GET:
            name = value.inputs[0] if value.inputs else ""
            if isinstance(name, str) and is_boolean_name(name, boolean_inputs, input_variables):
                return ValueType.BOOLEAN
            return ValueType.NUMBER
        spec = BLOCK_CATALOG.get(value.kind)
        return spec.output if spec else ValueType.NONE
    return ValueType.NONE


class BlockValidator:
    """
    Checks blocks against the catalog and the variable naming conventions.

    ``check`` returns a short reason for the first problem found, or None
    when the block is valid. Inputs listed in ``boolean_inputs`` are typed
    boolean, every other input is numeric.
    """

    def __init__(self, input_variables: Iterable[str] = (), boolean_inputs: Iterable[str] = ()):
        self.boolean_inputs: List[str] = list(boolean_inputs)
        self.input_variables: List[str] = list(input_variables)
        self.input_variables.extend(
            name for name in self.boolean_inputs if name not in self.input_variables
        )

    def is_valid(self, block: Any) -> bool:
        reason = self.check(block)
        if reason is not None:
            kind = getattr(block.kind, "label", block.kind) if isinstance(block, Block) else type(block).__name__
            logger.debug("Invalid %s block: %s", kind, reason)
            return False
        return True

    def is_valid_name(self, name: Any) -> bool:
        return is_valid_variable_name(name, self.input_variables)

    def is_boolean_name(self, name: str) -> bool:
        return is_boolean_name(name, self.boolean_inputs, self.input_variables)

    def value_type(self, value: Any) -> ValueType:
        return value_type(value, self.boolean_inputs, self.input_variables)

    def is_valid_value(self, value: Any, expected: ValueType) -> bool:
        return self.check_value(value, expected) is None

    def check(self, block: Any) -> Optional[str]:
        if not isinstance(block, Block):
            return f"expected a block, got {type(block).__name__}"
        spec = BLOCK_CATALOG.get(block.kind)
        if spec is None:
            return f"unknown kind {block.kind!r}"

        if block.kind == BlockKind.SET:
            if not self.is_valid_name(block.var):
                return f"invalid target name {block.var!r}"
            if len(block.inputs) != 1:
                return "set takes exactly one value"
            expected = ValueType.BOOLEAN if self.is_boolean_name(block.var) else ValueType.NUMBER
            return self.check_value(block.inputs[0], expected)

        if block.kind in (BlockKind.IF, BlockKind.IF_ELSE):
            if len(block.inputs) != 1:
                return "conditional takes exactly one condition"
            reason = self.check_value(block.inputs[0], ValueType.BOOLEAN)
            if reason is not None:
                return f"condition: {reason}"
            if block.kind == BlockKind.IF and block.else_actions:
                return "if block carries else actions"
            for action in list(block.actions) + list(block.else_actions):
                reason = self.check(action)
                if reason is not None:
                    return f"action: {reason}"
            return None

        if len(block.inputs) != spec.arity:
            return f"expected {spec.arity} inputs, got {len(block.inputs)}"

        if block.kind in LITERAL_KINDS:
            literal = block.inputs[0]
            ok = is_number(literal) if block.kind == BlockKind.NUMBER else is_boolean(literal)
            return None if ok else f"literal {literal!r} does not match {block.kind.label}"

        for idx, (value, expected) in enumerate(zip(block.inputs, spec.inputs)):
            reason = self.check_value(value, expected)
            if reason is not None:
                return f"input {idx}: {reason}"
        return None

    def check_value(self, value: Any, expected: ValueType) -> Optional[str]:
        if expected == ValueType.VARIABLE:
            return None if self.is_valid_name(value) else f"invalid variable name {value!r}"

        if expected == ValueType.OPERATOR:
            if isinstance(value, str) and value in ValueEnumerations.COMPARE_OPERATORS:
                return None
            return f"invalid operator {value!r}"

        if expected == ValueType.ANY:
            if self.check_value(value, ValueType.NUMBER) is None:
                return None
            return self.check_value(value, ValueType.BOOLEAN)

        if isinstance(value, Block):
            reason = self.check(value)
            if reason is not None:
                return reason
            actual = self.value_type(value)
            if actual != expected:
                return f"{value.kind.label} yields {actual.name.lower()}, expected {expected.name.lower()}"
            return None

        if expected == ValueType.NUMBER:
            if is_number(value):
                return None
            if isinstance(value, str):
                if self.is_valid_name(value) and not self.is_boolean_name(value):
                    return None
                return f"unknown numeric variable {value!r}"
            return f"{value!r} is not numeric"

        if expected == ValueType.BOOLEAN:
            if is_boolean(value):
                return None
            if isinstance(value, str):
                if self.is_valid_name(value) and self.is_boolean_name(value):
                    return None
                return f"unknown boolean variable {value!r}"
            return f"{value!r} is not boolean"

        return f"unsupported slot type {expected!r}"


def is_valid(
    block: Any, input_variables: Iterable[str] = (), boolean_inputs: Iterable[str] = ()
) -> bool:
    """Validate one block against the catalog for a set of input names."""
    return BlockValidator(input_variables, boolean_inputs).is_valid(block)


__all__ = ["BlockValidator", "is_valid", "value_type"]
