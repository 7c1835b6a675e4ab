"""Execution engine for block programs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .block import Block
from .catalog import get_spec
from .enums import BlockKind, ValueType
from .validator import BlockValidator
from .values import ValueEnumerations, is_boolean, is_boolean_name, is_number

logger = logging.getLogger(__name__)


@dataclass
class ExecutionState:
    """Variable environment and output slot for one run."""

    variables: Dict[str, Any] = field(default_factory=dict)
    output: Any = 0
    input_variables: List[str] = field(default_factory=list)
    boolean_inputs: List[str] = field(default_factory=list)

    @classmethod
    def seeded(
        cls,
        input_variables: Iterable[str],
        inputs: Optional[Mapping[str, Any]] = None,
        boolean_inputs: Iterable[str] = (),
    ) -> "ExecutionState":
        """Fixed names start at 0, input names are copied from ``inputs``."""
        inputs = inputs or {}
        state = cls(
            {name: 0 for name in ValueEnumerations.FIXED_VARIABLES},
            input_variables=list(input_variables),
            boolean_inputs=list(boolean_inputs),
        )
        state.input_variables.extend(
            name for name in state.boolean_inputs if name not in state.input_variables
        )
        for name in state.input_variables:
            if name in inputs:
                state.variables[name] = inputs[name]
            else:
                default = False if name in state.boolean_inputs else 0
                logger.warning(
                    "Input variable '%s' missing from runtime inputs, using %r", name, default
                )
                state.variables[name] = default
        return state

    def is_boolean_name(self, name: str) -> bool:
        return is_boolean_name(name, self.boolean_inputs, self.input_variables)


def _default(expected: ValueType) -> Any:
    return False if expected == ValueType.BOOLEAN else 0


def _matches(value: Any, expected: ValueType) -> bool:
    if expected == ValueType.NUMBER:
        return is_number(value)
    if expected == ValueType.BOOLEAN:
        return is_boolean(value)
    return True


class BlockInterpreter:
    """Executes block programs against a fresh variable environment per run."""

    def run(self, program: Any, inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Execute a constructed program and return its output.

        Args:
            program: Object exposing ``blocks`` and ``input_variables``; its
                blocks are expected to be valid already
            inputs: Runtime values keyed by input variable name
        Returns:
            The value held in the output slot after the last statement
        """
        return self.execute_blocks(
            program.blocks,
            program.input_variables,
            inputs,
            boolean_inputs=getattr(program, "boolean_inputs", ()),
            validate=False,
        )

    def execute_blocks(
        self,
        blocks: Sequence[Block],
        input_variables: Iterable[str] = (),
        inputs: Optional[Mapping[str, Any]] = None,
        *,
        boolean_inputs: Iterable[str] = (),
        validate: bool = True,
    ) -> Any:
        """Run a raw statement list, skipping invalid statements when validating."""
        input_variables = list(input_variables)
        state = ExecutionState.seeded(input_variables, inputs, boolean_inputs)
        validator = (
            BlockValidator(input_variables, state.boolean_inputs) if validate else None
        )

        for block in blocks:
            if validator is not None and not validator.is_valid(block):
                logger.warning("Skipping invalid %s block", getattr(block, "kind", block))
                continue
            self.execute_block(block, state)

        return state.output

    def execute_block(self, block: Block, state: ExecutionState) -> Any:
        """Execute one block; statements return None, reporters their value."""
        spec = get_spec(block.kind)

        if block.kind == BlockKind.SET:
            expected = ValueType.BOOLEAN if state.is_boolean_name(block.var) else ValueType.NUMBER
            state.variables[block.var] = self.resolve_value(block.inputs[0], expected, state)
            return None

        if block.kind == BlockKind.RETURN:
            state.output = self.resolve_value(block.inputs[0], ValueType.NUMBER, state)
            return None

        if block.kind in (BlockKind.IF, BlockKind.IF_ELSE):
            if self.resolve_value(block.inputs[0], ValueType.BOOLEAN, state):
                branch = block.actions
            else:
                branch = block.else_actions if block.kind == BlockKind.IF_ELSE else []
            for action in branch:
                self.execute_block(action, state)
            return None

        if block.kind == BlockKind.GET:
            name = block.inputs[0]
            expected = ValueType.BOOLEAN if state.is_boolean_name(name) else ValueType.NUMBER
            return self._lookup(name, expected, state)

        args = [
            self.resolve_value(value, expected, state)
            for value, expected in zip(block.inputs, spec.inputs)
        ]
        return spec.function(*args)

    def resolve_value(self, value: Any, expected: ValueType, state: ExecutionState) -> Any:
        """Resolve a slot value to a number, boolean or operator token."""
        if expected in (ValueType.OPERATOR, ValueType.VARIABLE):
            return value

        if isinstance(value, str):
            return self._lookup(value, expected, state)

        if isinstance(value, Block):
            if value.kind == BlockKind.GET:
                return self._lookup(value.inputs[0], expected, state)
            result = self.execute_block(value, state)
            if _matches(result, expected):
                return result
            logger.warning(
                "%s block produced %r where %s was expected, using default",
                value.kind.label,
                result,
                expected.name.lower(),
            )
            return _default(expected)

        if _matches(value, expected):
            return value

        logger.warning("Literal %r does not match %s, using default", value, expected.name.lower())
        return _default(expected)

    def _lookup(self, name: str, expected: ValueType, state: ExecutionState) -> Any:
        if name not in state.variables:
            logger.warning("Variable '%s' is undefined, using default", name)
            return _default(expected)
        current = state.variables[name]
        if not _matches(current, expected):
            logger.warning(
                "Variable '%s' holds %r, expected %s, using default",
                name,
                current,
                expected.name.lower(),
            )
            return _default(expected)
        return current


__all__ = ["ExecutionState", "BlockInterpreter"]
