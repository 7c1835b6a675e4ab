"""Program-log sinks receiving best-program snapshots."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Union

from .program import BlockProgram

BEST_PROGRAMS_LOGGER = "blockevo.best_programs"


class ProgramSink:
    """Write-only consumer of best-program snapshots."""

    def record(self, trial: int, generation: int, fitness: float, program: BlockProgram) -> None:
        raise NotImplementedError


class NullProgramSink(ProgramSink):
    def record(self, trial: int, generation: int, fitness: float, program: BlockProgram) -> None:
        return None


class LoggingProgramSink(ProgramSink):
    """Sends the serialized program through a dedicated logger at DEBUG."""

    def __init__(self, logger_name: str = BEST_PROGRAMS_LOGGER, level: int = logging.DEBUG):
        self.logger = logging.getLogger(logger_name)
        self.level = level

    def record(self, trial: int, generation: int, fitness: float, program: BlockProgram) -> None:
        if not self.logger.isEnabledFor(self.level):
            return
        self.logger.log(
            self.level,
            "trial=%d generation=%d fitness=%.6f program=%s",
            trial,
            generation,
            fitness,
            program.to_json(),
        )


class JsonlProgramSink(ProgramSink):
    """Appends one JSON object per snapshot to a file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def record(self, trial: int, generation: int, fitness: float, program: BlockProgram) -> None:
        entry = {
            "timestamp": datetime.now().isoformat(),
            "trial": trial,
            "generation": generation,
            "fitness": fitness,
            "signature": program.get_signature(),
            "program": program.to_dict(),
        }
        with open(self.path, "a") as f:
            f.write(json.dumps(entry) + "\n")

    def read(self) -> list:
        """Entries written so far, oldest first."""
        if not self.path.exists():
            return []
        with open(self.path, "r") as f:
            return [json.loads(line) for line in f if line.strip()]

    def clear(self) -> None:
        self.path.write_text("")


__all__ = [
    "BEST_PROGRAMS_LOGGER",
    "ProgramSink",
    "NullProgramSink",
    "LoggingProgramSink",
    "JsonlProgramSink",
]
