"""Fitness evaluation against generated test cases."""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Sequence

import numpy as np

from .interpreter import BlockInterpreter
from .problems import TestCase, TestProblem
from .program import BlockProgram
from .values import is_number

logger = logging.getLogger(__name__)


def fitness_from_error(total_error: float) -> float:
    """``1 / (1 + error)``; a NaN error scores 0."""
    if math.isnan(total_error):
        return 0.0
    return 1.0 / (1.0 + total_error)


class FitnessEvaluator:
    """
    Scores programs by summed absolute error over a problem's cases,
    optionally averaged over several independent case batches.
    """

    def __init__(
        self,
        problem: TestProblem,
        evaluation_cases_count: int = 20,
        num_evaluation_batches: int = 1,
        interpreter: Optional[BlockInterpreter] = None,
    ):
        """
        Args:
            problem: Supplies input names and the case generator
            evaluation_cases_count: Cases drawn per batch
            num_evaluation_batches: Independent batches averaged per score
            interpreter: Executor to use; a fresh one by default
        """
        if num_evaluation_batches <= 0:
            logger.warning(
                "num_evaluation_batches=%s is not positive, using 1", num_evaluation_batches
            )
            num_evaluation_batches = 1
        self.problem = problem
        self.evaluation_cases_count = evaluation_cases_count
        self.num_evaluation_batches = num_evaluation_batches
        self.interpreter = interpreter or BlockInterpreter()

    def total_error(
        self,
        program: BlockProgram,
        cases: Sequence[TestCase],
        callback: Optional[Callable[[int, TestCase, float], None]] = None,
    ) -> Optional[float]:
        """Summed absolute error, or None when a run yields a non-number."""
        error = 0.0
        for idx, case in enumerate(cases):
            result = self.interpreter.run(program, case.inputs)
            if callback is not None:
                callback(idx, case, result)
            if not is_number(result):
                logger.warning("Program produced non-numeric result %r", result)
                return None
            error += abs(float(result) - float(case.expected))
        return error

    def evaluate_cases(
        self,
        program: BlockProgram,
        cases: Sequence[TestCase],
        callback: Optional[Callable[[int, TestCase, float], None]] = None,
    ) -> float:
        """
        Fitness on a fixed case set.

        Args:
            program: Program to score
            cases: Cases shared by every program compared in this round
            callback: Optional callback(case_idx, case, result) per run
        """
        error = self.total_error(program, cases, callback)
        if error is None:
            return 0.0
        return fitness_from_error(error)

    def draw_batches(self) -> List[List[TestCase]]:
        return [
            self.problem.generate_cases(self.evaluation_cases_count)
            for _ in range(self.num_evaluation_batches)
        ]

    def evaluate(self, program: BlockProgram) -> float:
        """Batched fitness on freshly drawn cases."""
        return self.evaluate_population([program])[0]

    def evaluate_population(self, programs: Sequence[BlockProgram]) -> List[float]:
        """Batched fitness for every program, all scored on the same batches."""
        batches = self.draw_batches()
        scores = np.zeros((len(programs), len(batches)))
        for col, cases in enumerate(batches):
            for row, program in enumerate(programs):
                scores[row, col] = self.evaluate_cases(program, cases)
        return [float(value) for value in scores.mean(axis=1)]


__all__ = ["fitness_from_error", "FitnessEvaluator"]
