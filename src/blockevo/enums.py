"""Enumerations and block kind groupings."""

from enum import IntEnum
from typing import List, Set


class ValueType(IntEnum):
    """Slot and output types as integer indices."""

    NONE = 0
    NUMBER = 1
    BOOLEAN = 2
    VARIABLE = 3  # variable name slot (Set target, Get reference)
    OPERATOR = 4  # compare token slot
    ANY = 5  # Get output, decided by the referenced name


class BlockKind(IntEnum):
    """Block kinds as integer indices."""

    # Statements (output = NONE)
    SET = 0
    RETURN = 1
    IF = 2
    IF_ELSE = 3

    # Numeric reporters
    ADD = 10
    SUBTRACT = 11
    MULTIPLY = 12
    DIVIDE = 13
    POWER = 14
    MODULO = 15
    ABSOLUTE = 16
    NEGATE = 17

    # Boolean reporters
    COMPARE = 20
    AND = 21
    OR = 22
    NOT = 23

    # References and constants
    GET = 30
    PI = 31
    E = 32
    NUMBER = 33
    BOOLEAN = 34

    @property
    def label(self) -> str:
        """Lowercase name used in serialized trees."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "BlockKind":
        return cls[label.strip().upper()]


STATEMENT_KINDS: List[BlockKind] = [
    BlockKind.SET,
    BlockKind.RETURN,
    BlockKind.IF,
    BlockKind.IF_ELSE,
]

CONTROL_KINDS: List[BlockKind] = [
    BlockKind.IF,
    BlockKind.IF_ELSE,
]

NUMBER_KINDS: List[BlockKind] = [
    BlockKind.ADD,
    BlockKind.SUBTRACT,
    BlockKind.MULTIPLY,
    BlockKind.DIVIDE,
    BlockKind.POWER,
    BlockKind.MODULO,
    BlockKind.ABSOLUTE,
    BlockKind.NEGATE,
    BlockKind.PI,
    BlockKind.E,
]

BOOLEAN_KINDS: List[BlockKind] = [
    BlockKind.COMPARE,
    BlockKind.AND,
    BlockKind.OR,
    BlockKind.NOT,
]

LITERAL_KINDS: Set[BlockKind] = {
    BlockKind.NUMBER,
    BlockKind.BOOLEAN,
}

BINARY_KINDS: Set[BlockKind] = {
    BlockKind.ADD,
    BlockKind.SUBTRACT,
    BlockKind.MULTIPLY,
    BlockKind.DIVIDE,
    BlockKind.POWER,
    BlockKind.MODULO,
    BlockKind.AND,
    BlockKind.OR,
}

UNARY_KINDS: Set[BlockKind] = {
    BlockKind.ABSOLUTE,
    BlockKind.NEGATE,
    BlockKind.NOT,
}


__all__ = [
    "ValueType",
    "BlockKind",
    "STATEMENT_KINDS",
    "CONTROL_KINDS",
    "NUMBER_KINDS",
    "BOOLEAN_KINDS",
    "LITERAL_KINDS",
    "BINARY_KINDS",
    "UNARY_KINDS",
]
