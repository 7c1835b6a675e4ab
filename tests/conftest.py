"""Shared fixtures for blockevo tests."""

import random

import pytest

from blockevo import (
    BlockInterpreter,
    BlockKind,
    BlockProgram,
    BlockValidator,
    InputSpec,
    RandomBlockGenerator,
    TestProblem,
    get_problem,
    make_op,
    make_return,
    make_set,
)

XYZ = ["x", "y", "z"]


@pytest.fixture
def input_variables():
    return list(XYZ)


@pytest.fixture
def validator():
    return BlockValidator(XYZ)


@pytest.fixture
def interpreter():
    return BlockInterpreter()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def generator(rng):
    return RandomBlockGenerator(rng)


@pytest.fixture
def sum_blocks():
    """out = (x + y) + z; return out"""
    return [
        make_set("out", make_op(BlockKind.ADD, make_op(BlockKind.ADD, "x", "y"), "z")),
        make_return("out"),
    ]


@pytest.fixture
def sum_program(sum_blocks):
    return BlockProgram(sum_blocks, XYZ)


@pytest.fixture
def sum_problem():
    return get_problem("sum_three_numbers").with_seed(7)


@pytest.fixture
def flag_problem():
    """x when flag holds, otherwise -x"""
    return TestProblem(
        "signed_by_flag",
        [InputSpec("x"), InputSpec("flag", "boolean")],
        lambda x, flag: x if flag else -x,
    ).with_seed(7)
