"""Genetic programming over typed block programs."""

import logging

from .enums import (
    BlockKind,
    ValueType,
    STATEMENT_KINDS,
    CONTROL_KINDS,
    NUMBER_KINDS,
    BOOLEAN_KINDS,
    LITERAL_KINDS,
    BINARY_KINDS,
    UNARY_KINDS,
)
from .exceptions import (
    BlockEvoError,
    BlockSerializationError,
    UnknownBlockError,
    ConfigError,
)
from .values import ValueEnumerations, is_valid_variable_name
from .block import (
    Block,
    make_get,
    make_if,
    make_if_else,
    make_op,
    make_return,
    make_set,
)
from .rewrites import RewriteRule, REWRITE_RULES, matching_rules
from .catalog import BlockSpec, BLOCK_CATALOG, get_spec, render_statements, render_value
from .validator import BlockValidator, is_valid
from .interpreter import BlockInterpreter, ExecutionState
from .generator import RandomBlockGenerator
from .liveness import LivenessResult, analyze
from .program import BlockProgram
from .weights import MutationWeights, MUTATION_KINDS
from .mutation import ProgramMutator
from .problems import InputSpec, TestCase, TestProblem, PROBLEMS, get_problem, problem_names
from .evaluator import FitnessEvaluator, fitness_from_error
from .config import EvolutionConfig
from .sinks import JsonlProgramSink, LoggingProgramSink, NullProgramSink, ProgramSink
from .evolver import BlockEvolver, EvolutionResult, GenerationStats
from .log import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BlockKind",
    "ValueType",
    "STATEMENT_KINDS",
    "CONTROL_KINDS",
    "NUMBER_KINDS",
    "BOOLEAN_KINDS",
    "LITERAL_KINDS",
    "BINARY_KINDS",
    "UNARY_KINDS",
    "BlockEvoError",
    "BlockSerializationError",
    "UnknownBlockError",
    "ConfigError",
    "ValueEnumerations",
    "is_valid_variable_name",
    "Block",
    "make_get",
    "make_if",
    "make_if_else",
    "make_op",
    "make_return",
    "make_set",
    "RewriteRule",
    "REWRITE_RULES",
    "matching_rules",
    "BlockSpec",
    "BLOCK_CATALOG",
    "get_spec",
    "render_statements",
    "render_value",
    "BlockValidator",
    "is_valid",
    "BlockInterpreter",
    "ExecutionState",
    "RandomBlockGenerator",
    "LivenessResult",
    "analyze",
    "BlockProgram",
    "MutationWeights",
    "MUTATION_KINDS",
    "ProgramMutator",
    "InputSpec",
    "TestCase",
    "TestProblem",
    "PROBLEMS",
    "get_problem",
    "problem_names",
    "FitnessEvaluator",
    "fitness_from_error",
    "EvolutionConfig",
    "JsonlProgramSink",
    "LoggingProgramSink",
    "NullProgramSink",
    "ProgramSink",
    "BlockEvolver",
    "EvolutionResult",
    "GenerationStats",
    "setup_logging",
]
