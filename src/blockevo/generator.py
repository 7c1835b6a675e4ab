"""Random generation of valid block trees and statement lists."""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .block import Block, make_if, make_if_else, make_op, make_set
from .catalog import action_kinds, get_spec, reporter_kinds
from .enums import BlockKind, ValueType
from .validator import BlockValidator
from .values import ValueEnumerations

logger = logging.getLogger(__name__)

INPUT_VARIABLE_WEIGHT = 0.6
NESTED_BLOCK_WEIGHT = 0.3
BOOLEAN_BLOCK_WEIGHT = 0.3


class RandomBlockGenerator:
    """
    Builds random, type-correct blocks.

    Numeric slots favour numeric input variables, then nested reporters, then
    constants; boolean slots draw declared boolean inputs as terminals. Every
    generated block is validated and replaced by a safe terminal or literal
    when it fails.
    """

    def __init__(self, rng: Optional[random.Random] = None, initial_value_bias: float = 0.7):
        self.rng = rng or random.Random()
        self.initial_value_bias = initial_value_bias
        self._validators: Dict[Tuple[Tuple[str, ...], Tuple[str, ...]], BlockValidator] = {}

    def validator_for(
        self, input_variables: Sequence[str], boolean_inputs: Sequence[str] = ()
    ) -> BlockValidator:
        key = (tuple(input_variables), tuple(boolean_inputs))
        if key not in self._validators:
            self._validators[key] = BlockValidator(*key)
        return self._validators[key]

    @staticmethod
    def numeric_inputs(
        input_variables: Sequence[str], boolean_inputs: Sequence[str] = ()
    ) -> List[str]:
        return [name for name in input_variables if name not in boolean_inputs]

    def scratch_variables(
        self, input_variables: Sequence[str], boolean_inputs: Sequence[str] = ()
    ) -> List[str]:
        """Fixed names a generated Set may target without clobbering inputs."""
        names = [
            v
            for v in ValueEnumerations.FIXED_VARIABLES
            if v not in input_variables and v not in boolean_inputs
        ]
        return names or [ValueEnumerations.OUTPUT_VARIABLE]

    def terminal(
        self,
        slot_type: ValueType,
        input_variables: Sequence[str],
        boolean_inputs: Sequence[str] = (),
    ) -> Any:
        """Leaf value for a slot type."""
        if slot_type == ValueType.BOOLEAN:
            if boolean_inputs and self.rng.random() < INPUT_VARIABLE_WEIGHT:
                return self.rng.choice(list(boolean_inputs))
            return self.rng.choice(ValueEnumerations.BOOLEAN_CONSTANTS)
        if slot_type == ValueType.VARIABLE:
            return self.rng.choice(ValueEnumerations.FIXED_VARIABLES)
        if slot_type == ValueType.OPERATOR:
            return self.rng.choice(ValueEnumerations.COMPARE_OPERATORS)
        numeric = self.numeric_inputs(input_variables, boolean_inputs)
        if numeric:
            return self.rng.choice(numeric)
        return self.rng.choice(ValueEnumerations.NUMERIC_CONSTANTS)

    def generate_input(
        self,
        slot_type: ValueType,
        depth: int,
        max_depth: int,
        input_variables: Sequence[str] = (),
        boolean_inputs: Sequence[str] = (),
    ) -> Any:
        """Fill one input slot of the given type."""
        if slot_type in (ValueType.VARIABLE, ValueType.OPERATOR) or depth >= max_depth:
            return self.terminal(slot_type, input_variables, boolean_inputs)

        roll = self.rng.random()
        validator = self.validator_for(input_variables, boolean_inputs)

        if slot_type == ValueType.BOOLEAN:
            if roll < BOOLEAN_BLOCK_WEIGHT:
                block = self.generate_random_block(
                    depth + 1,
                    max_depth,
                    input_variables=input_variables,
                    output=ValueType.BOOLEAN,
                    boolean_inputs=boolean_inputs,
                )
                if validator.is_valid_value(block, ValueType.BOOLEAN):
                    return block
                logger.debug("Discarding generated boolean block %s", block.kind.label)
            return self.terminal(ValueType.BOOLEAN, input_variables, boolean_inputs)

        numeric = self.numeric_inputs(input_variables, boolean_inputs)
        if roll < INPUT_VARIABLE_WEIGHT and numeric:
            return self.rng.choice(numeric)
        if roll < INPUT_VARIABLE_WEIGHT + NESTED_BLOCK_WEIGHT:
            block = self.generate_random_block(
                depth + 1, max_depth, input_variables=input_variables, boolean_inputs=boolean_inputs
            )
            if validator.is_valid_value(block, ValueType.NUMBER):
                return block
            logger.debug("Discarding generated numeric block %s", block.kind.label)
        return self.rng.choice(ValueEnumerations.NUMERIC_CONSTANTS)

    def generate_random_block(
        self,
        depth: int = 0,
        max_depth: int = 2,
        is_action: bool = False,
        target_var: Optional[str] = None,
        input_variables: Sequence[str] = (),
        output: ValueType = ValueType.NUMBER,
        boolean_inputs: Sequence[str] = (),
    ) -> Block:
        """
        Generate a random reporter or action block.

        Args:
            depth: Current nesting depth
            max_depth: Depth at which slots are filled with terminals
            is_action: Build a statement (Set, If, IfElse) instead of a reporter
            target_var: Target for a generated Set; forces a Set when given
            input_variables: Declared input names
            output: Reporter output type when ``is_action`` is False
            boolean_inputs: Declared inputs holding booleans; they are only
                used as boolean terminals
        """
        if is_action:
            block = self._generate_action(
                depth, max_depth, target_var, input_variables, boolean_inputs
            )
        else:
            kind = self.rng.choice(reporter_kinds(output))
            spec = get_spec(kind)
            inputs = [
                self.generate_input(slot_type, depth + 1, max_depth, input_variables, boolean_inputs)
                for slot_type in spec.inputs
            ]
            block = make_op(kind, *inputs)

        validator = self.validator_for(input_variables, boolean_inputs)
        if validator.is_valid(block):
            return block

        logger.debug("Generated %s block failed validation, using fallback", block.kind.label)
        if is_action:
            target = target_var or ValueEnumerations.OUTPUT_VARIABLE
            return make_set(target, self._fallback_value(target, input_variables, boolean_inputs))
        if output == ValueType.BOOLEAN:
            return Block(BlockKind.BOOLEAN, [self.rng.choice(ValueEnumerations.BOOLEAN_CONSTANTS)])
        return Block(BlockKind.NUMBER, [self.rng.choice(ValueEnumerations.NUMERIC_CONSTANTS)])

    def _generate_action(
        self,
        depth: int,
        max_depth: int,
        target_var: Optional[str],
        input_variables: Sequence[str],
        boolean_inputs: Sequence[str] = (),
    ) -> Block:
        kind = BlockKind.SET if target_var else self.rng.choice(action_kinds() + [BlockKind.SET])

        if kind == BlockKind.SET:
            target = target_var or self.rng.choice(
                self.scratch_variables(input_variables, boolean_inputs)
            )
            validator = self.validator_for(input_variables, boolean_inputs)
            slot_type = ValueType.BOOLEAN if validator.is_boolean_name(target) else ValueType.NUMBER
            return make_set(
                target,
                self.generate_input(slot_type, depth, max_depth, input_variables, boolean_inputs),
            )

        condition = self.generate_input(
            ValueType.BOOLEAN, depth, max_depth, input_variables, boolean_inputs
        )
        actions = self._generate_branch(depth, max_depth, input_variables, boolean_inputs)
        if kind == BlockKind.IF_ELSE:
            else_actions = self._generate_branch(depth, max_depth, input_variables, boolean_inputs)
            return make_if_else(condition, actions, else_actions)
        return make_if(condition, actions)

    def _generate_branch(
        self,
        depth: int,
        max_depth: int,
        input_variables: Sequence[str],
        boolean_inputs: Sequence[str] = (),
    ) -> List[Block]:
        return [
            self.generate_random_block(
                depth + 1,
                max_depth,
                is_action=True,
                target_var=self.rng.choice(self.scratch_variables(input_variables, boolean_inputs)),
                input_variables=input_variables,
                boolean_inputs=boolean_inputs,
            )
            for _ in range(self.rng.randint(1, 2))
        ]

    def _fallback_value(
        self, target: str, input_variables: Sequence[str], boolean_inputs: Sequence[str] = ()
    ) -> Any:
        if self.validator_for(input_variables, boolean_inputs).is_boolean_name(target):
            return False
        numeric = self.numeric_inputs(input_variables, boolean_inputs)
        if numeric:
            return numeric[0]
        return 0

    def generate_initial_value(
        self,
        input_variables: Sequence[str] = (),
        depth: int = 0,
        max_depth: int = 2,
        boolean_inputs: Sequence[str] = (),
    ) -> Any:
        """Value for ``out``; biased toward summing the numeric input variables."""
        names = self.numeric_inputs(input_variables, boolean_inputs)
        if len(names) >= 2 and self.rng.random() < self.initial_value_bias:
            return make_op(
                BlockKind.ADD,
                make_op(BlockKind.ADD, self.rng.choice(names), self.rng.choice(names)),
                self.rng.choice(names),
            )
        return self.generate_input(
            ValueType.NUMBER, depth, max_depth, input_variables, boolean_inputs
        )

    def generate_statements(
        self,
        input_variables: Sequence[str],
        length: int,
        max_depth: int = 2,
        boolean_inputs: Sequence[str] = (),
    ) -> List[Block]:
        """``length`` statements, the last one assigning ``out``."""
        statements = [
            self.generate_random_block(
                0,
                max_depth,
                is_action=True,
                input_variables=input_variables,
                boolean_inputs=boolean_inputs,
            )
            for _ in range(max(length - 1, 0))
        ]
        statements.append(
            make_set(
                ValueEnumerations.OUTPUT_VARIABLE,
                self.generate_initial_value(input_variables, 0, max_depth, boolean_inputs),
            )
        )
        return statements


__all__ = [
    "INPUT_VARIABLE_WEIGHT",
    "NESTED_BLOCK_WEIGHT",
    "BOOLEAN_BLOCK_WEIGHT",
    "RandomBlockGenerator",
]
