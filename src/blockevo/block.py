"""Block tree representation, serialization and path helpers."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .enums import BlockKind
from .exceptions import BlockSerializationError
from .values import ValueEnumerations, is_boolean, is_number

# Step fields used in paths. BODY addresses the top-level statement list.
BODY = "body"
INPUTS = "inputs"
ACTIONS = "actions"
ELSE_ACTIONS = "else_actions"

Path = Tuple[Tuple[str, int], ...]


@dataclass(eq=False)
class Block:
    """
    One node of a program tree.

    ``inputs`` holds the value slots in catalog order. A Set block keeps its
    target name in ``var`` and the assigned value in ``inputs[0]``; If and
    IfElse keep the condition in ``inputs[0]``.
    """

    kind: BlockKind
    inputs: List[Any] = field(default_factory=list)
    var: Optional[str] = None
    actions: List["Block"] = field(default_factory=list)
    else_actions: List["Block"] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Block):
            return NotImplemented
        return same_value(self, other)

    __hash__ = None  # type: ignore[assignment]

    @property
    def value(self) -> Any:
        """Assigned value of a Set, returned value of a Return."""
        return self.inputs[0] if self.inputs else None

    @property
    def condition(self) -> Any:
        return self.inputs[0] if self.inputs else None

    def copy(self) -> "Block":
        """Create deep copy."""
        return copy.deepcopy(self)

    def iter_children(self) -> Iterator[Tuple[str, int, "Block"]]:
        """Yield (field, index, block) for every direct child block."""
        for idx, value in enumerate(self.inputs):
            if isinstance(value, Block):
                yield INPUTS, idx, value
        for idx, action in enumerate(self.actions):
            yield ACTIONS, idx, action
        for idx, action in enumerate(self.else_actions):
            yield ELSE_ACTIONS, idx, action

    def referenced_variables(self) -> List[str]:
        """Names read by this block's value slots, nested actions excluded."""
        names: List[str] = []
        for value in self.inputs:
            names.extend(referenced_variables(value))
        return names

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.label}
        if self.kind == BlockKind.SET:
            data["var"] = self.var
            data["value"] = encode_value(self.value)
        elif self.kind in (BlockKind.IF, BlockKind.IF_ELSE):
            data["condition"] = encode_value(self.condition)
            data["actions"] = [action.to_dict() for action in self.actions]
            if self.kind == BlockKind.IF_ELSE:
                data["else_actions"] = [action.to_dict() for action in self.else_actions]
        else:
            data["inputs"] = [encode_value(value) for value in self.inputs]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Block":
        if not isinstance(data, dict) or "kind" not in data:
            raise BlockSerializationError(f"Block data must be a mapping with a 'kind': {data!r}")
        try:
            kind = BlockKind.from_label(str(data["kind"]))
        except KeyError as exc:
            raise BlockSerializationError(f"Unknown block kind '{data['kind']}'") from exc

        if kind == BlockKind.SET:
            if "var" not in data or "value" not in data:
                raise BlockSerializationError("Set blocks need 'var' and 'value'.")
            return cls(kind, [decode_value(data["value"])], var=data["var"])

        if kind in (BlockKind.IF, BlockKind.IF_ELSE):
            if "condition" not in data:
                raise BlockSerializationError(f"{kind.label} blocks need a 'condition'.")
            actions = [cls.from_dict(item) for item in _as_list(data.get("actions", []))]
            else_actions: List[Block] = []
            if kind == BlockKind.IF_ELSE:
                else_actions = [
                    cls.from_dict(item) for item in _as_list(data.get("else_actions", []))
                ]
            return cls(
                kind,
                [decode_value(data["condition"])],
                actions=actions,
                else_actions=else_actions,
            )

        inputs = [decode_value(item) for item in _as_list(data.get("inputs", []))]
        return cls(kind, inputs)


Value = Union[int, float, bool, str, Block]


def _as_list(items: Any) -> List[Any]:
    if not isinstance(items, list):
        raise BlockSerializationError(f"Expected a list, got {items!r}")
    return items


def encode_value(value: Any) -> Any:
    """Convert a slot value to a JSON compatible object."""
    if isinstance(value, Block):
        return value.to_dict()
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    return value


def decode_value(data: Any) -> Any:
    if isinstance(data, dict):
        return Block.from_dict(data)
    if isinstance(data, (bool, int, float, str)):
        return data
    raise BlockSerializationError(f"Unsupported value in block tree: {data!r}")


def same_value(left: Any, right: Any) -> bool:
    """Structural equality that keeps booleans and numbers apart."""
    if isinstance(left, Block) or isinstance(right, Block):
        if not (isinstance(left, Block) and isinstance(right, Block)):
            return False
        if left.kind != right.kind or left.var != right.var:
            return False
        return (
            _same_sequence(left.inputs, right.inputs)
            and _same_sequence(left.actions, right.actions)
            and _same_sequence(left.else_actions, right.else_actions)
        )
    if is_boolean(left) or is_boolean(right):
        return is_boolean(left) and is_boolean(right) and bool(left) == bool(right)
    if is_number(left) and is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def _same_sequence(left: Sequence[Any], right: Sequence[Any]) -> bool:
    return len(left) == len(right) and all(same_value(a, b) for a, b in zip(left, right))


def referenced_variables(value: Any) -> List[str]:
    """Variable names an expression reads, in evaluation order."""
    if isinstance(value, str):
        return [value]
    if not isinstance(value, Block):
        return []
    if value.kind == BlockKind.GET:
        return [value.inputs[0]] if value.inputs and isinstance(value.inputs[0], str) else []
    if value.kind == BlockKind.COMPARE:
        # third slot is an operator token
        return referenced_variables(value.inputs[0] if value.inputs else None) + referenced_variables(
            value.inputs[1] if len(value.inputs) > 1 else None
        )
    names: List[str] = []
    for item in value.inputs:
        names.extend(referenced_variables(item))
    return names


def walk(blocks: Sequence[Block]) -> Iterator[Tuple[Path, Block]]:
    """Pre-order walk over a statement list and every nested block."""
    for index, block in enumerate(blocks):
        yield from _walk(block, ((BODY, index),))


def _walk(block: Block, path: Path) -> Iterator[Tuple[Path, Block]]:
    yield path, block
    for field_name, index, child in block.iter_children():
        yield from _walk(child, path + ((field_name, index),))


def _slot_list(root: List[Any], holder: Optional[Block], field_name: str) -> List[Any]:
    if holder is None:
        if field_name != BODY:
            raise ValueError(f"Paths must start at '{BODY}', got '{field_name}'")
        return root
    return getattr(holder, field_name)


def node_at(blocks: Sequence[Block], path: Path) -> Any:
    """Return the value or block addressed by a path."""
    holder: Optional[Block] = None
    root = list(blocks)
    for field_name, index in path[:-1]:
        holder = _slot_list(root, holder, field_name)[index]
    field_name, index = path[-1]
    return _slot_list(root, holder, field_name)[index]


def replace_at(blocks: Sequence[Block], path: Path, replacement: Any) -> List[Block]:
    """
    Rebuild a statement list with the node at ``path`` replaced.

    Input slots take a single value. Statement positions (body and action
    lists) take a list of blocks spliced in place, so an empty list deletes
    the statement. The source list is left untouched.
    """
    result = [block.copy() for block in blocks]
    holder: Optional[Block] = None
    for field_name, index in path[:-1]:
        holder = _slot_list(result, holder, field_name)[index]
    field_name, index = path[-1]
    target = _slot_list(result, holder, field_name)
    if field_name == INPUTS:
        target[index] = copy_value(replacement)
    else:
        target[index : index + 1] = [copy_value(item) for item in replacement]
    return result


def copy_value(value: Any) -> Any:
    return value.copy() if isinstance(value, Block) else value


def make_set(var: str, value: Any) -> Block:
    return Block(BlockKind.SET, [value], var=var)


def make_return(value: Any = ValueEnumerations.OUTPUT_VARIABLE) -> Block:
    return Block(BlockKind.RETURN, [value])


def make_if(condition: Any, actions: Sequence[Block]) -> Block:
    return Block(BlockKind.IF, [condition], actions=list(actions))


def make_if_else(
    condition: Any, actions: Sequence[Block], else_actions: Sequence[Block]
) -> Block:
    return Block(
        BlockKind.IF_ELSE, [condition], actions=list(actions), else_actions=list(else_actions)
    )


def make_get(name: str) -> Block:
    return Block(BlockKind.GET, [name])


def make_op(kind: BlockKind, *inputs: Any) -> Block:
    """Build a reporter block from its inputs in catalog order."""
    return Block(kind, list(inputs))


__all__ = [
    "BODY",
    "INPUTS",
    "ACTIONS",
    "ELSE_ACTIONS",
    "Path",
    "Block",
    "Value",
    "encode_value",
    "decode_value",
    "same_value",
    "referenced_variables",
    "walk",
    "node_at",
    "replace_at",
    "copy_value",
    "make_set",
    "make_return",
    "make_if",
    "make_if_else",
    "make_get",
    "make_op",
]
