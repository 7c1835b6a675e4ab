"""Block programs: normalizing construction, execution and inspection."""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .block import Block, make_return, make_set
from .catalog import render_statements
from .enums import BlockKind
from .exceptions import BlockSerializationError
from .generator import RandomBlockGenerator
from .interpreter import BlockInterpreter
from .liveness import LivenessResult, analyze
from .validator import BlockValidator
from .values import ValueEnumerations

logger = logging.getLogger(__name__)

_INTERPRETER = BlockInterpreter()


class BlockProgram:
    """
    Ordered top-level statements plus the input names they were built against.

    Construction filters invalid statements and guarantees a trailing Return,
    so every instance is executable. The statement tuple is replaced, never
    edited, by the variation operators.
    """

    def __init__(
        self,
        blocks: Optional[Sequence[Block]] = None,
        input_variables: Iterable[str] = (),
        boolean_inputs: Iterable[str] = (),
    ):
        self.input_variables: List[str] = list(input_variables)
        self.boolean_inputs: List[str] = list(boolean_inputs)
        self.validator = BlockValidator(self.input_variables, self.boolean_inputs)
        self.fitness: Optional[float] = None
        self.generation: int = 0
        self._signature: Optional[str] = None
        self._liveness: Optional[LivenessResult] = None
        self.blocks: Tuple[Block, ...] = tuple(self._normalize(blocks or []))

    @classmethod
    def create(
        cls,
        input_variables: Sequence[str] = (),
        generator: Optional[RandomBlockGenerator] = None,
        max_depth: int = 2,
        boolean_inputs: Sequence[str] = (),
    ) -> "BlockProgram":
        """Program that assigns a generated value to ``out`` and returns it."""
        generator = generator or RandomBlockGenerator()
        value = generator.generate_initial_value(input_variables, 0, max_depth, boolean_inputs)
        return cls(
            [make_set(ValueEnumerations.OUTPUT_VARIABLE, value)], input_variables, boolean_inputs
        )

    @classmethod
    def random(
        cls,
        input_variables: Sequence[str],
        generator: RandomBlockGenerator,
        length: int,
        max_depth: int = 2,
        boolean_inputs: Sequence[str] = (),
    ) -> "BlockProgram":
        """Program of ``length`` random statements followed by ``return out``."""
        blocks = generator.generate_statements(input_variables, length, max_depth, boolean_inputs)
        return cls(blocks, input_variables, boolean_inputs)

    def trivial_blocks(self) -> List[Block]:
        numeric = [name for name in self.input_variables if name not in self.boolean_inputs]
        value = numeric[0] if numeric else 0
        return [make_set(ValueEnumerations.OUTPUT_VARIABLE, value), make_return()]

    def _normalize(self, blocks: Sequence[Block]) -> List[Block]:
        valid: List[Block] = []
        for block in blocks:
            if self.validator.is_valid(block):
                valid.append(block.copy())
            else:
                logger.warning(
                    "Dropping invalid %s block during construction",
                    getattr(getattr(block, "kind", None), "label", block),
                )

        if not valid:
            return self.trivial_blocks()

        if valid[-1].kind != BlockKind.RETURN:
            valid.append(make_return())

        if not all(self.validator.is_valid(block) for block in valid):
            logger.warning("Program failed final validation, using constant fallback")
            return [make_set(ValueEnumerations.OUTPUT_VARIABLE, 0), make_return()]
        return valid

    def __len__(self) -> int:
        return len(self.blocks)

    def run(self, inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """Execute against runtime inputs and return the output."""
        return _INTERPRETER.run(self, inputs)

    def copy(self) -> "BlockProgram":
        clone = BlockProgram(self.blocks, self.input_variables, self.boolean_inputs)
        clone.fitness = self.fitness
        clone.generation = self.generation
        return clone

    def with_blocks(self, blocks: Sequence[Block]) -> "BlockProgram":
        """New program over the same inputs with a replaced statement list."""
        child = BlockProgram(blocks, self.input_variables, self.boolean_inputs)
        child.generation = self.generation
        return child

    def return_count(self) -> int:
        return sum(1 for block in self.blocks if block.kind == BlockKind.RETURN)

    def liveness(self) -> LivenessResult:
        if self._liveness is None:
            self._liveness = analyze(self.blocks)
        return self._liveness

    def extract_effective_blocks(self) -> List[int]:
        """Indices of statements that contribute to the output."""
        return self.liveness().effective_indices()

    def get_signature(self) -> str:
        """md5 over the effective statements."""
        if self._signature is None:
            effective = [self.blocks[idx].to_dict() for idx in self.extract_effective_blocks()]
            payload = json.dumps(effective, sort_keys=True, default=str)
            self._signature = hashlib.md5(payload.encode()).hexdigest()
        return self._signature

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_variables": list(self.input_variables),
            "boolean_inputs": list(self.boolean_inputs),
            "blocks": [block.to_dict() for block in self.blocks],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlockProgram":
        if not isinstance(data, Mapping) or "blocks" not in data:
            raise BlockSerializationError("Program data must be a mapping with 'blocks'.")
        if not isinstance(data["blocks"], list):
            raise BlockSerializationError("Program 'blocks' must be a list.")
        blocks = [Block.from_dict(item) for item in data["blocks"]]
        return cls(blocks, data.get("input_variables", []), data.get("boolean_inputs", []))

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "BlockProgram":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise BlockSerializationError(f"Invalid program JSON: {exc}") from exc
        return cls.from_dict(data)

    def to_text(self) -> str:
        """JavaScript-like listing of the program."""
        return "\n".join(render_statements(self.blocks))

    def to_human_readable(self) -> List[str]:
        """Listing with ✓ on effective statements and ✗ on dead ones."""
        effective = set(self.extract_effective_blocks())
        readable = []
        for idx, block in enumerate(self.blocks):
            prefix = "✓" if idx in effective else "✗"
            lines = render_statements([block])
            readable.append(f"{prefix} {lines[0]}")
            readable.extend(f"  {line}" for line in lines[1:])
        return readable

    def __repr__(self) -> str:
        return f"BlockProgram(blocks={len(self.blocks)}, inputs={self.input_variables!r}, fitness={self.fitness!r})"


__all__ = ["BlockProgram"]
