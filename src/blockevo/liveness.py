"""Backward liveness analysis over statement lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Sequence, Set

from .block import Block
from .enums import BlockKind

# Pseudo variable for the program output slot written by Return.
OUTPUT = "<output>"


def _reads(block: Block) -> Set[str]:
    return set(block.referenced_variables())


def may_write(block: Block) -> Set[str]:
    """Names a statement can assign on some path."""
    if block.kind == BlockKind.SET:
        return {block.var}
    if block.kind == BlockKind.RETURN:
        return {OUTPUT}
    written: Set[str] = set()
    for action in list(block.actions) + list(block.else_actions):
        written |= may_write(action)
    return written


def must_write(block: Block) -> Set[str]:
    """Names a statement assigns on every path."""
    if block.kind == BlockKind.SET:
        return {block.var}
    if block.kind == BlockKind.RETURN:
        return {OUTPUT}
    if block.kind == BlockKind.IF_ELSE:
        return _must_write_all(block.actions) & _must_write_all(block.else_actions)
    return set()


def _must_write_all(blocks: Sequence[Block]) -> Set[str]:
    written: Set[str] = set()
    for block in blocks:
        written |= must_write(block)
    return written


def transfer(block: Block, live_out: FrozenSet[str]) -> FrozenSet[str]:
    """Live set before ``block`` given the live set after it."""
    if not may_write(block) & live_out:
        return live_out

    if block.kind in (BlockKind.SET, BlockKind.RETURN):
        return frozenset((live_out - must_write(block)) | _reads(block))

    live = _reads(block) | _live_before(block.actions, live_out)
    if block.kind == BlockKind.IF_ELSE:
        live |= _live_before(block.else_actions, live_out)
    else:
        live |= live_out
    return frozenset(live)


def _live_before(blocks: Sequence[Block], live_out: FrozenSet[str]) -> FrozenSet[str]:
    live = live_out
    for block in reversed(blocks):
        live = transfer(block, live)
    return live


@dataclass(frozen=True)
class LivenessResult:
    """Live-set snapshots at every statement boundary."""

    live_in: List[FrozenSet[str]]
    live_out: List[FrozenSet[str]]
    dead: List[bool]

    def is_live(self, index: int, name: str) -> bool:
        """Whether ``name`` is read after statement ``index`` before being overwritten."""
        return name in self.live_out[index]

    def effective_indices(self) -> List[int]:
        return [idx for idx, dead in enumerate(self.dead) if not dead]

    def removable_indices(self) -> List[int]:
        return [idx for idx, dead in enumerate(self.dead) if dead]


def analyze(blocks: Sequence[Block], live_at_end: FrozenSet[str] = frozenset({OUTPUT})) -> LivenessResult:
    """
    Single backward pass over ``blocks``.

    A statement is dead when nothing it may write is live afterwards; dead
    statements contribute no reads, so whole dead chains are found in one
    pass.
    """
    count = len(blocks)
    live_in: List[FrozenSet[str]] = [frozenset()] * count
    live_out: List[FrozenSet[str]] = [frozenset()] * count
    dead: List[bool] = [False] * count

    live = frozenset(live_at_end)
    for idx in range(count - 1, -1, -1):
        block = blocks[idx]
        live_out[idx] = live
        dead[idx] = not (may_write(block) & live)
        live = transfer(block, live)
        live_in[idx] = live

    return LivenessResult(live_in=live_in, live_out=live_out, dead=dead)


__all__ = [
    "OUTPUT",
    "may_write",
    "must_write",
    "transfer",
    "LivenessResult",
    "analyze",
]
