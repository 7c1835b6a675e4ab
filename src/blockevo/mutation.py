"""Mutation operators for block programs."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

from .block import (
    BODY,
    INPUTS,
    Block,
    Path,
    make_get,
    make_set,
    node_at,
    replace_at,
    walk,
)
from .enums import BlockKind, ValueType
from .generator import RandomBlockGenerator
from .program import BlockProgram
from .rewrites import matching_rules
from .values import ValueEnumerations
from .weights import (
    DELETE,
    EXTRACT,
    INSERT,
    REPLACE_BLOCK,
    REPLACE_VALUE,
    REWRITE,
    SWAP,
    MutationWeights,
)

logger = logging.getLogger(__name__)

_SCRATCH_NAME = re.compile(r"^v([0-9]+)$")

MutationFn = Callable[[BlockProgram], Optional[List[Block]]]


class ProgramMutator:
    """
    Applies one randomly chosen mutation kind to a program.

    Every operator works on a copied statement list and hands the result to
    ``BlockProgram``, which re-validates it and restores the trailing Return.
    A kind that does not apply to the program is skipped in favour of the
    remaining ones; when none applies the program is returned unchanged.
    """

    def __init__(
        self,
        generator: Optional[RandomBlockGenerator] = None,
        weights: Optional[MutationWeights] = None,
        max_blocks: int = 50,
        max_depth: int = 2,
    ):
        self.generator = generator or RandomBlockGenerator()
        self.weights = weights or MutationWeights()
        self.max_blocks = max_blocks
        self.max_depth = max_depth
        self._operators: Dict[str, MutationFn] = {
            REPLACE_VALUE: self.replace_value,
            REPLACE_BLOCK: self.replace_block,
            INSERT: self.insert_block,
            DELETE: self.delete_block,
            SWAP: self.swap_blocks,
            REWRITE: self.apply_rewrite,
            EXTRACT: self.extract_subexpression,
        }

    @property
    def rng(self):
        return self.generator.rng

    def mutate(self, program: BlockProgram) -> BlockProgram:
        """Return a mutated copy of ``program``."""
        candidates = [kind for kind in self._operators if self.weights.get_weight(kind) > 0]
        while candidates:
            kind = self.weights.choose(candidates, self.rng)
            blocks = self._operators[kind](program)
            if blocks is not None:
                logger.debug("Applied %s mutation", kind)
                return program.with_blocks(blocks)
            candidates.remove(kind)
        logger.debug("No mutation applied to program of %d blocks", len(program))
        return program.copy()

    def _body_indices(self, program: BlockProgram) -> List[int]:
        """Top-level positions other than the trailing Return."""
        last = len(program.blocks) - 1
        return [idx for idx in range(len(program.blocks)) if idx != last]

    def replace_value(self, program: BlockProgram) -> Optional[List[Block]]:
        """Give a Set statement a freshly generated value."""
        sets = [path for path, block in walk(program.blocks) if block.kind == BlockKind.SET]
        if not sets:
            return None
        path = self.rng.choice(sets)
        target = node_at(program.blocks, path).var
        inputs, booleans = program.input_variables, program.boolean_inputs
        if target == ValueEnumerations.OUTPUT_VARIABLE:
            value = self.generator.generate_initial_value(inputs, 0, self.max_depth, booleans)
        else:
            is_boolean = program.validator.is_boolean_name(target)
            slot_type = ValueType.BOOLEAN if is_boolean else ValueType.NUMBER
            value = self.generator.generate_input(slot_type, 0, self.max_depth, inputs, booleans)
        return replace_at(program.blocks, path + ((INPUTS, 0),), value)

    def replace_block(self, program: BlockProgram) -> Optional[List[Block]]:
        """Swap a statement or a nested reporter for a new random one of the same role."""
        sites: List[Path] = [((BODY, idx),) for idx in self._body_indices(program)]
        sites.extend(
            path
            for path, block in walk(program.blocks)
            if path[-1][0] == INPUTS
            and program.validator.value_type(block) in (ValueType.NUMBER, ValueType.BOOLEAN)
        )
        if not sites:
            return None
        path = self.rng.choice(sites)
        inputs, booleans = program.input_variables, program.boolean_inputs
        if len(path) == 1:
            replacement = self.generator.generate_random_block(
                0, self.max_depth, is_action=True, input_variables=inputs, boolean_inputs=booleans
            )
            return replace_at(program.blocks, path, [replacement])
        output = program.validator.value_type(node_at(program.blocks, path))
        replacement = self.generator.generate_random_block(
            1, self.max_depth, input_variables=inputs, output=output, boolean_inputs=booleans
        )
        return replace_at(program.blocks, path, replacement)

    def insert_block(self, program: BlockProgram) -> Optional[List[Block]]:
        """Insert a random statement before the trailing Return."""
        if len(program.blocks) >= self.max_blocks:
            return None
        position = self.rng.randint(0, len(program.blocks) - 1)
        statement = self.generator.generate_random_block(
            0,
            self.max_depth,
            is_action=True,
            input_variables=program.input_variables,
            boolean_inputs=program.boolean_inputs,
        )
        blocks = [block.copy() for block in program.blocks]
        blocks.insert(position, statement)
        return blocks

    def delete_block(self, program: BlockProgram) -> Optional[List[Block]]:
        """Delete a statement whose writes are never read afterwards."""
        removable = program.liveness().removable_indices()
        if not removable:
            return None
        index = self.rng.choice(removable)
        return [block.copy() for idx, block in enumerate(program.blocks) if idx != index]

    def swap_blocks(self, program: BlockProgram) -> Optional[List[Block]]:
        """Exchange two statements."""
        indices = self._body_indices(program)
        if len(indices) < 2:
            return None
        first, second = self.rng.sample(indices, 2)
        blocks = [block.copy() for block in program.blocks]
        blocks[first], blocks[second] = blocks[second], blocks[first]
        return blocks

    def apply_rewrite(self, program: BlockProgram) -> Optional[List[Block]]:
        """Apply a catalog rewrite rule at a node whose shape matches it."""
        sites = [
            (path, rules)
            for path, block in walk(program.blocks)
            for rules in [matching_rules(block)]
            if rules
        ]
        if not sites:
            return None
        path, rules = self.rng.choice(sites)
        rule = self.rng.choice(rules)
        replacement = rule.apply(node_at(program.blocks, path))
        logger.debug("Rewrite rule %s at %s", rule.name, path)
        if path[-1][0] == INPUTS:
            if len(replacement) != 1:
                return None
            return replace_at(program.blocks, path, replacement[0])
        return replace_at(program.blocks, path, replacement)

    def extract_subexpression(self, program: BlockProgram) -> Optional[List[Block]]:
        """Hoist a numeric sub-expression of a top-level Set into a new variable."""
        if len(program.blocks) >= self.max_blocks:
            return None
        sites = [
            path
            for path, block in walk(program.blocks)
            if len(path) > 1
            and path[1] == (INPUTS, 0)
            and program.blocks[path[0][1]].kind == BlockKind.SET
            and block.kind not in (BlockKind.GET, BlockKind.NUMBER)
            and program.validator.value_type(block) == ValueType.NUMBER
        ]
        if not sites:
            return None
        path = self.rng.choice(sites)
        name = self.fresh_variable(program)
        expression = node_at(program.blocks, path)
        blocks = replace_at(program.blocks, path, make_get(name))
        blocks.insert(path[0][1], make_set(name, expression.copy()))
        return blocks

    def fresh_variable(self, program: BlockProgram) -> str:
        """First ``v<n>`` name the program neither reads nor writes."""
        used = set(program.input_variables)
        for _, block in walk(program.blocks):
            if block.var:
                used.add(block.var)
            used.update(block.referenced_variables())
        taken = set()
        for name in used:
            match = _SCRATCH_NAME.match(name)
            if match:
                taken.add(int(match.group(1)))
        index = 0
        while index in taken:
            index += 1
        return f"v{index}"


__all__ = ["ProgramMutator"]
