"""Exception hierarchy for blockevo."""


class BlockEvoError(Exception):
    """Base class for package errors."""


class BlockSerializationError(BlockEvoError, ValueError):
    """Raised when a serialized block tree cannot be parsed."""


class UnknownBlockError(BlockEvoError):
    """Raised when execution reaches a kind without a catalog entry."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"No catalog entry for block kind {kind!r}")


class ConfigError(BlockEvoError, ValueError):
    """Raised for invalid evolution configuration."""


__all__ = [
    "BlockEvoError",
    "BlockSerializationError",
    "UnknownBlockError",
    "ConfigError",
]
