"""Per-kind local rewrite rules.

Each rule pairs a guard over a block's shape with a rewrite that returns the
replacement. Reporter rewrites return a single value; statement rewrites
return the list of statements to splice in place (empty list deletes).
Rules never touch their input block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

from .block import Block, copy_value, make_op, same_value
from .enums import BlockKind
from .values import is_boolean, is_number

SIMPLIFY = "simplify"
FORMAT = "format"
EXPAND = "expand"


@dataclass(frozen=True)
class RewriteRule:
    """Guarded rewrite for one block kind."""

    name: str
    guard: Callable[[Block], bool]
    rewrite: Callable[[Block], List[Any]]
    style: str = SIMPLIFY

    def matches(self, block: Block) -> bool:
        return self.guard(block)

    def apply(self, block: Block) -> List[Any]:
        return [copy_value(item) for item in self.rewrite(block)]


def _pair(block: Block) -> Tuple[Any, Any]:
    if len(block.inputs) < 2:
        return None, None
    return block.inputs[0], block.inputs[1]


def _single(block: Block) -> Any:
    return block.inputs[0] if block.inputs else None


def _literal(value: Any, target: float) -> bool:
    return is_number(value) and value == target


def _kind(value: Any, kind: BlockKind) -> bool:
    return isinstance(value, Block) and value.kind == kind


def _either(block: Block, predicate: Callable[[Any], bool]) -> bool:
    a, b = _pair(block)
    return predicate(a) or predicate(b)


def _other(block: Block, predicate: Callable[[Any], bool]) -> Any:
    """The input that does not satisfy ``predicate`` (second one wins ties)."""
    a, b = _pair(block)
    return b if predicate(a) else a


def _both_numbers(block: Block) -> bool:
    a, b = _pair(block)
    return is_number(a) and is_number(b)


def _same_pair(block: Block) -> bool:
    a, b = _pair(block)
    return a is not None and same_value(a, b)


def _negative(value: Any) -> bool:
    return is_number(value) and value < 0


def _assigns_itself(block: Block) -> bool:
    value = block.value
    if isinstance(value, str):
        return value == block.var
    return _kind(value, BlockKind.GET) and value.inputs == [block.var]


def _is_true(value: Any) -> bool:
    return is_boolean(value) and bool(value)


def _is_false(value: Any) -> bool:
    return is_boolean(value) and not bool(value)


def _fold_compare(block: Block) -> List[Any]:
    a, b = _pair(block)
    token = block.inputs[2]
    result = {
        "==": a == b,
        "!=": a != b,
        ">": a > b,
        ">=": a >= b,
        "<": a < b,
        "<=": a <= b,
    }[token]
    return [bool(result)]


SET_RULES = (
    RewriteRule("self_assignment", _assigns_itself, lambda b: []),
)

ADD_RULES = (
    RewriteRule("double", _same_pair, lambda b: [make_op(BlockKind.MULTIPLY, b.inputs[0], 2)]),
    RewriteRule(
        "add_zero",
        lambda b: _either(b, lambda v: _literal(v, 0)),
        lambda b: [_other(b, lambda v: _literal(v, 0))],
    ),
    RewriteRule("fold", _both_numbers, lambda b: [b.inputs[0] + b.inputs[1]]),
    RewriteRule(
        "add_negative_constant",
        lambda b: _negative(_pair(b)[1]) and not is_number(_pair(b)[0]),
        lambda b: [make_op(BlockKind.SUBTRACT, b.inputs[0], -b.inputs[1])],
        FORMAT,
    ),
    RewriteRule(
        "add_negation",
        lambda b: _kind(_pair(b)[1], BlockKind.NEGATE),
        lambda b: [make_op(BlockKind.SUBTRACT, b.inputs[0], b.inputs[1].inputs[0])],
        FORMAT,
    ),
)

SUBTRACT_RULES = (
    RewriteRule("self_subtract", _same_pair, lambda b: [0]),
    RewriteRule(
        "zero_minus",
        lambda b: _literal(_pair(b)[0], 0),
        lambda b: [make_op(BlockKind.NEGATE, b.inputs[1])],
    ),
    RewriteRule("minus_zero", lambda b: _literal(_pair(b)[1], 0), lambda b: [b.inputs[0]]),
    RewriteRule("fold", _both_numbers, lambda b: [b.inputs[0] - b.inputs[1]]),
    RewriteRule(
        "minus_negative_constant",
        lambda b: _negative(_pair(b)[1]) and not is_number(_pair(b)[0]),
        lambda b: [make_op(BlockKind.ADD, b.inputs[0], -b.inputs[1])],
        FORMAT,
    ),
    RewriteRule(
        "minus_negation",
        lambda b: _kind(_pair(b)[1], BlockKind.NEGATE),
        lambda b: [make_op(BlockKind.ADD, b.inputs[0], b.inputs[1].inputs[0])],
        FORMAT,
    ),
)

MULTIPLY_RULES = (
    RewriteRule("square", _same_pair, lambda b: [make_op(BlockKind.POWER, b.inputs[0], 2)]),
    RewriteRule("times_zero", lambda b: _either(b, lambda v: _literal(v, 0)), lambda b: [0]),
    RewriteRule(
        "times_one",
        lambda b: _either(b, lambda v: _literal(v, 1)),
        lambda b: [_other(b, lambda v: _literal(v, 1))],
    ),
    RewriteRule(
        "times_minus_one",
        lambda b: _either(b, lambda v: _literal(v, -1)),
        lambda b: [make_op(BlockKind.NEGATE, _other(b, lambda v: _literal(v, -1)))],
    ),
    RewriteRule("fold", _both_numbers, lambda b: [b.inputs[0] * b.inputs[1]]),
    RewriteRule(
        "times_two",
        lambda b: _either(b, lambda v: _literal(v, 2)) and not _both_numbers(b),
        lambda b: [
            make_op(
                BlockKind.ADD,
                _other(b, lambda v: _literal(v, 2)),
                copy_value(_other(b, lambda v: _literal(v, 2))),
            )
        ],
        EXPAND,
    ),
)

DIVIDE_RULES = (
    RewriteRule("divide_by_one", lambda b: _literal(_pair(b)[1], 1), lambda b: [b.inputs[0]]),
    RewriteRule("self_divide", _same_pair, lambda b: [1]),
    RewriteRule(
        "fold",
        lambda b: _both_numbers(b) and b.inputs[1] != 0,
        lambda b: [b.inputs[0] / b.inputs[1]],
    ),
)

POWER_RULES = (
    RewriteRule("power_one", lambda b: _literal(_pair(b)[1], 1), lambda b: [b.inputs[0]]),
    RewriteRule(
        "square_expand",
        lambda b: _literal(_pair(b)[1], 2),
        lambda b: [make_op(BlockKind.MULTIPLY, b.inputs[0], copy_value(b.inputs[0]))],
        EXPAND,
    ),
)

MODULO_RULES = (
    RewriteRule("modulo_one", lambda b: _literal(_pair(b)[1], 1), lambda b: [0]),
    RewriteRule("self_modulo", _same_pair, lambda b: [0]),
)

ABSOLUTE_RULES = (
    RewriteRule(
        "nested_absolute",
        lambda b: _kind(_single(b), BlockKind.ABSOLUTE),
        lambda b: [b.inputs[0]],
    ),
    RewriteRule(
        "absolute_of_negation",
        lambda b: _kind(_single(b), BlockKind.NEGATE),
        lambda b: [make_op(BlockKind.ABSOLUTE, b.inputs[0].inputs[0])],
    ),
)

NEGATE_RULES = (
    RewriteRule(
        "double_negation",
        lambda b: _kind(_single(b), BlockKind.NEGATE),
        lambda b: [b.inputs[0].inputs[0]],
    ),
    RewriteRule("fold", lambda b: is_number(_single(b)), lambda b: [-b.inputs[0]]),
)

COMPARE_RULES = (
    RewriteRule(
        "self_compare",
        _same_pair,
        lambda b: [b.inputs[2] in ("==", ">=", "<=")],
    ),
    RewriteRule("fold", _both_numbers, _fold_compare),
)

AND_RULES = (
    RewriteRule("idempotent", _same_pair, lambda b: [b.inputs[0]]),
    RewriteRule("and_false", lambda b: _either(b, _is_false), lambda b: [False]),
    RewriteRule("and_true", lambda b: _either(b, _is_true), lambda b: [_other(b, _is_true)]),
)

OR_RULES = (
    RewriteRule("idempotent", _same_pair, lambda b: [b.inputs[0]]),
    RewriteRule("or_true", lambda b: _either(b, _is_true), lambda b: [True]),
    RewriteRule("or_false", lambda b: _either(b, _is_false), lambda b: [_other(b, _is_false)]),
)

NOT_RULES = (
    RewriteRule(
        "double_not",
        lambda b: _kind(_single(b), BlockKind.NOT),
        lambda b: [b.inputs[0].inputs[0]],
    ),
    RewriteRule("fold", lambda b: is_boolean(_single(b)), lambda b: [not b.inputs[0]]),
)

IF_RULES = (
    RewriteRule("always_true", lambda b: _is_true(b.condition), lambda b: list(b.actions)),
    RewriteRule("always_false", lambda b: _is_false(b.condition), lambda b: []),
)

IF_ELSE_RULES = (
    RewriteRule("always_true", lambda b: _is_true(b.condition), lambda b: list(b.actions)),
    RewriteRule(
        "always_false", lambda b: _is_false(b.condition), lambda b: list(b.else_actions)
    ),
)


REWRITE_RULES: Dict[BlockKind, Tuple[RewriteRule, ...]] = {
    BlockKind.SET: SET_RULES,
    BlockKind.ADD: ADD_RULES,
    BlockKind.SUBTRACT: SUBTRACT_RULES,
    BlockKind.MULTIPLY: MULTIPLY_RULES,
    BlockKind.DIVIDE: DIVIDE_RULES,
    BlockKind.POWER: POWER_RULES,
    BlockKind.MODULO: MODULO_RULES,
    BlockKind.ABSOLUTE: ABSOLUTE_RULES,
    BlockKind.NEGATE: NEGATE_RULES,
    BlockKind.COMPARE: COMPARE_RULES,
    BlockKind.AND: AND_RULES,
    BlockKind.OR: OR_RULES,
    BlockKind.NOT: NOT_RULES,
    BlockKind.IF: IF_RULES,
    BlockKind.IF_ELSE: IF_ELSE_RULES,
}


def matching_rules(block: Block) -> List[RewriteRule]:
    """Rules whose guard accepts ``block``."""
    return [rule for rule in REWRITE_RULES.get(block.kind, ()) if rule.matches(block)]


__all__ = [
    "SIMPLIFY",
    "FORMAT",
    "EXPAND",
    "RewriteRule",
    "REWRITE_RULES",
    "matching_rules",
]
