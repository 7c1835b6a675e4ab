"""Static block catalog: signatures, evaluation and rendering per kind."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .block import Block
from .enums import BlockKind, ValueType
from .exceptions import UnknownBlockError
from .rewrites import REWRITE_RULES, RewriteRule


@dataclass(frozen=True)
class BlockSpec:
    """Metadata describing one block kind."""

    kind: BlockKind
    inputs: Tuple[ValueType, ...]
    output: ValueType
    function: Optional[Callable[..., Any]]
    template: str
    doc: str = ""

    @property
    def arity(self) -> int:
        return len(self.inputs)

    @property
    def is_statement(self) -> bool:
        return self.output == ValueType.NONE

    @property
    def rules(self) -> Tuple[RewriteRule, ...]:
        return REWRITE_RULES.get(self.kind, ())


def _add(a, b) -> float:
    return float(a) + float(b)


def _subtract(a, b) -> float:
    return float(a) - float(b)


def _multiply(a, b) -> float:
    return float(a) * float(b)


# numpy float64 gives IEEE results where Python floats raise
def _divide(a, b) -> float:
    with np.errstate(all="ignore"):
        return float(np.divide(np.float64(a), np.float64(b)))


def _power(a, b) -> float:
    with np.errstate(all="ignore"):
        return float(np.power(np.float64(a), np.float64(b)))


def _modulo(a, b) -> float:
    with np.errstate(all="ignore"):
        return float(np.fmod(np.float64(a), np.float64(b)))


def _compare(a, b, op: str) -> bool:
    if op == "==":
        return a == b
    if op == "!=":
        return a != b
    if op == ">":
        return a > b
    if op == ">=":
        return a >= b
    if op == "<":
        return a < b
    if op == "<=":
        return a <= b
    raise ValueError(f"Unknown compare operator '{op}'")


N = ValueType.NUMBER
B = ValueType.BOOLEAN

BLOCK_CATALOG: Dict[BlockKind, BlockSpec] = {
    spec.kind: spec
    for spec in (
        BlockSpec(BlockKind.SET, (ValueType.ANY,), ValueType.NONE, None, "{var} = {0};",
                  "Assign a value to a variable."),
        BlockSpec(BlockKind.RETURN, (N,), ValueType.NONE, None, "return {0};",
                  "Write the program output."),
        BlockSpec(BlockKind.IF, (B,), ValueType.NONE, None, "if ({0})",
                  "Run actions when the condition holds."),
        BlockSpec(BlockKind.IF_ELSE, (B,), ValueType.NONE, None, "if ({0})",
                  "Run one of two action lists."),
        BlockSpec(BlockKind.ADD, (N, N), N, _add, "({0} + {1})"),
        BlockSpec(BlockKind.SUBTRACT, (N, N), N, _subtract, "({0} - {1})"),
        BlockSpec(BlockKind.MULTIPLY, (N, N), N, _multiply, "({0} * {1})"),
        BlockSpec(BlockKind.DIVIDE, (N, N), N, _divide, "({0} / {1})"),
        BlockSpec(BlockKind.POWER, (N, N), N, _power, "Math.pow({0}, {1})"),
        BlockSpec(BlockKind.MODULO, (N, N), N, _modulo, "({0} % {1})"),
        BlockSpec(BlockKind.ABSOLUTE, (N,), N, lambda a: abs(float(a)), "Math.abs({0})"),
        BlockSpec(BlockKind.NEGATE, (N,), N, lambda a: -float(a), "-({0})"),
        BlockSpec(BlockKind.COMPARE, (N, N, ValueType.OPERATOR), B, _compare, "({0} {2} {1})"),
        BlockSpec(BlockKind.AND, (B, B), B, lambda a, b: bool(a) and bool(b), "({0} && {1})"),
        BlockSpec(BlockKind.OR, (B, B), B, lambda a, b: bool(a) or bool(b), "({0} || {1})"),
        BlockSpec(BlockKind.NOT, (B,), B, lambda a: not bool(a), "!({0})"),
        BlockSpec(BlockKind.GET, (ValueType.VARIABLE,), ValueType.ANY, None, "{0}",
                  "Read a variable; its type follows the name."),
        BlockSpec(BlockKind.PI, (), N, lambda: math.pi, "Math.PI"),
        BlockSpec(BlockKind.E, (), N, lambda: math.e, "Math.E"),
        BlockSpec(BlockKind.NUMBER, (N,), N, float, "{0}", "Numeric literal."),
        BlockSpec(BlockKind.BOOLEAN, (B,), B, bool, "{0}", "Boolean literal."),
    )
}


def get_spec(kind: BlockKind) -> BlockSpec:
    """Catalog entry for ``kind``; raises UnknownBlockError when absent."""
    try:
        return BLOCK_CATALOG[kind]
    except KeyError as exc:
        raise UnknownBlockError(kind) from exc


def reporter_kinds(output: ValueType) -> List[BlockKind]:
    """Kinds producing ``output`` that the generator may pick."""
    return [
        kind
        for kind, spec in BLOCK_CATALOG.items()
        if spec.output == output and kind not in (BlockKind.GET, BlockKind.NUMBER, BlockKind.BOOLEAN)
    ]


def action_kinds() -> List[BlockKind]:
    """Statement kinds usable as generated actions (Set and Return excluded)."""
    return [
        kind
        for kind, spec in BLOCK_CATALOG.items()
        if spec.is_statement and kind not in (BlockKind.SET, BlockKind.RETURN)
    ]


def render_value(value: Any) -> str:
    """Render a slot value as expression text."""
    if isinstance(value, Block):
        spec = get_spec(value.kind)
        args = [render_value(item) for item in value.inputs]
        if value.kind == BlockKind.COMPARE and len(args) == 3:
            args[2] = str(value.inputs[2])
        try:
            return spec.template.format(*args, var=value.var)
        except IndexError:
            return f"{value.kind.label}({', '.join(args)})"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_statements(blocks: Sequence[Block], indent: int = 0) -> List[str]:
    """Render a statement list, one line per statement or brace."""
    pad = "  " * indent
    lines: List[str] = []
    for block in blocks:
        spec = get_spec(block.kind)
        if block.kind in (BlockKind.IF, BlockKind.IF_ELSE):
            lines.append(f"{pad}{spec.template.format(render_value(block.condition))} {{")
            lines.extend(render_statements(block.actions, indent + 1))
            if block.kind == BlockKind.IF_ELSE:
                lines.append(f"{pad}}} else {{")
                lines.extend(render_statements(block.else_actions, indent + 1))
            lines.append(f"{pad}}}")
        elif spec.is_statement:
            lines.append(pad + spec.template.format(render_value(block.value), var=block.var))
        else:
            lines.append(f"{pad}{render_value(block)};")
    return lines


__all__ = [
    "BlockSpec",
    "BLOCK_CATALOG",
    "get_spec",
    "reporter_kinds",
    "action_kinds",
    "render_value",
    "render_statements",
]
