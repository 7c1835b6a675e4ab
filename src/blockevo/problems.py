"""Named target problems and their test-case generators."""

from __future__ import annotations

import dataclasses
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


@dataclass(frozen=True)
class InputSpec:
    """One input variable of a problem."""

    name: str
    type: str = "number"


@dataclass
class TestCase:
    """Inputs keyed by variable name and the expected output."""

    __test__ = False

    inputs: Dict[str, Any]
    expected: float


@dataclass
class TestProblem:
    """
    A target function over named inputs.

    Cases draw integer inputs uniformly from ``round(u * 20 - 10)`` and
    booleans from a fair coin, using the problem's own generator.
    """

    __test__ = False

    name: str
    inputs: List[InputSpec]
    target: Callable[..., Any]
    description: str = ""
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @property
    def input_variables(self) -> List[str]:
        return [spec.name for spec in self.inputs]

    @property
    def boolean_inputs(self) -> List[str]:
        return [spec.name for spec in self.inputs if spec.type == "boolean"]

    def expected(self, inputs: Dict[str, Any]) -> Any:
        return self.target(**{spec.name: inputs[spec.name] for spec in self.inputs})

    def _draw(self, spec: InputSpec) -> Any:
        if spec.type == "boolean":
            return self.rng.random() < 0.5
        return round(self.rng.random() * 20 - 10)

    def generate_cases(self, count: int) -> List[TestCase]:
        """Fresh randomized cases for one evaluation batch."""
        cases = []
        for _ in range(count):
            inputs = {spec.name: self._draw(spec) for spec in self.inputs}
            cases.append(TestCase(inputs=inputs, expected=self.expected(inputs)))
        return cases

    def with_seed(self, seed: Optional[int]) -> "TestProblem":
        """Copy of this problem whose case generator is seeded."""
        return dataclasses.replace(self, rng=random.Random(seed))


def _numbers(*names: str) -> List[InputSpec]:
    return [InputSpec(name) for name in names]


def _conditional_output(x, y):
    return 3 if 3 in (x - y, x + y, x * y) else 0


PROBLEMS: Dict[str, TestProblem] = {
    problem.name: problem
    for problem in (
        TestProblem(
            "sum_three_numbers",
            _numbers("x", "y", "z"),
            lambda x, y, z: x + y + z,
            "Sum of three numbers.",
        ),
        TestProblem(
            "square_number",
            _numbers("x"),
            lambda x: x * x,
            "Square of a number.",
        ),
        TestProblem(
            "multiply_by_4_subtract_2",
            _numbers("x"),
            lambda x: x * 4 - 2,
            "Multiply by 4, then subtract 2.",
        ),
        TestProblem(
            "quadratic_equation",
            _numbers("x", "y", "z"),
            lambda x, y, z: y * x * x + z * x,
            "y*x^2 + z*x.",
        ),
        TestProblem(
            "conditional_output",
            _numbers("x", "y"),
            _conditional_output,
            "3 when x-y, x+y or x*y equals 3, otherwise 0.",
        ),
        TestProblem(
            "absolute_value",
            _numbers("x"),
            lambda x: abs(x),
            "Absolute value of a number.",
        ),
    )
}


def get_problem(name: str) -> TestProblem:
    """Look up a bundled problem by name."""
    try:
        return PROBLEMS[name]
    except KeyError:
        raise KeyError(
            f"Unknown problem '{name}'. Available: {', '.join(sorted(PROBLEMS))}"
        ) from None


def problem_names() -> List[str]:
    return list(PROBLEMS)


__all__ = [
    "InputSpec",
    "TestCase",
    "TestProblem",
    "PROBLEMS",
    "get_problem",
    "problem_names",
]
