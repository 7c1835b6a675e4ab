"""Evolution engine for block programs."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

import numpy as np

from .block import make_return
from .config import EvolutionConfig
from .enums import BlockKind
from .evaluator import FitnessEvaluator
from .generator import RandomBlockGenerator
from .mutation import ProgramMutator
from .problems import TestProblem
from .program import BlockProgram
from .sinks import LoggingProgramSink, ProgramSink

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, BlockProgram, float], None]


@dataclass
class GenerationStats:
    """Fitness summary of one generation."""

    trial: int
    generation: int
    best_fitness: float
    mean_fitness: float
    std_fitness: float
    best_size: int
    effective_size: int


@dataclass
class EvolutionResult:
    """Outcome of a run over one or more trials."""

    best_program: Optional[BlockProgram]
    best_fitness: float
    trial_bests: List[Optional[BlockProgram]] = field(default_factory=list)
    trial_fitness: List[float] = field(default_factory=list)
    history: List[GenerationStats] = field(default_factory=list)


class BlockEvolver:
    """
    Generational engine: initialize, then evaluate, select and breed for
    ``max_generations``, repeated for independent trials.
    """

    def __init__(
        self,
        problem: TestProblem,
        config: Optional[EvolutionConfig] = None,
        sink: Optional[ProgramSink] = None,
        rng: Optional[random.Random] = None,
        evaluator: Optional[FitnessEvaluator] = None,
    ):
        self.config = (config or EvolutionConfig()).validate()
        self.problem = problem
        self.rng = rng or random.Random(self.config.seed)
        self.generator = RandomBlockGenerator(self.rng, self.config.initial_value_bias)
        self.mutator = ProgramMutator(
            self.generator,
            self.config.build_mutation_weights(),
            max_blocks=self.config.max_blocks,
            max_depth=self.config.max_depth,
        )
        self.evaluator = evaluator or FitnessEvaluator(
            problem,
            self.config.evaluation_cases_count,
            self.config.num_evaluation_batches,
        )
        self.sink = sink or LoggingProgramSink()
        self.population: List[BlockProgram] = []
        self.generation = 0
        self.trial = 0
        self.history: List[GenerationStats] = []
        self.diversity_cache: Set[str] = set()

    @property
    def input_variables(self) -> List[str]:
        return self.problem.input_variables

    @property
    def boolean_inputs(self) -> List[str]:
        return self.problem.boolean_inputs

    def initialize_population(self) -> List[BlockProgram]:
        """Create initial random population, preferring distinct programs."""
        self.population = []
        self.diversity_cache = set()
        attempts = 0
        max_attempts = self.config.population_size * 10

        while len(self.population) < self.config.population_size:
            length = self.rng.randint(self.config.min_initial_blocks, self.config.max_initial_blocks)
            program = BlockProgram.random(
                self.input_variables,
                self.generator,
                length,
                self.config.max_depth,
                self.boolean_inputs,
            )
            attempts += 1
            sig = program.get_signature()
            if sig in self.diversity_cache and attempts < max_attempts:
                continue
            self.diversity_cache.add(sig)
            self.population.append(program)

        return self.population

    def evaluate(self, program: BlockProgram) -> float:
        """Batched fitness of a single program on fresh cases."""
        return self.evaluator.evaluate(program)

    def select(self) -> List[BlockProgram]:
        """
        Score the population and rank it by fitness, best first.

        Returns:
            The surviving parent pool, the top half of the ranking
        """
        scores = self.evaluator.evaluate_population(self.population)
        for program, score in zip(self.population, scores):
            program.fitness = score

        ranked = sorted(self.population, key=lambda p: p.fitness, reverse=True)
        self.population = ranked
        if not ranked:
            return []

        best = ranked[0]
        values = np.array(scores, dtype=float)
        stats = GenerationStats(
            trial=self.trial,
            generation=self.generation,
            best_fitness=best.fitness,
            mean_fitness=float(np.mean(values)),
            std_fitness=float(np.std(values)),
            best_size=len(best),
            effective_size=len(best.extract_effective_blocks()),
        )
        self.history.append(stats)

        log = logger.info if self.generation % 10 == 0 else logger.debug
        log(
            "Trial %d Gen %03d: Best Fitness=%.4f, Mean=%.4f, Effective Size=%d/%d",
            self.trial,
            self.generation,
            stats.best_fitness,
            stats.mean_fitness,
            stats.effective_size,
            stats.best_size,
        )
        self.sink.record(self.trial, self.generation, best.fitness, best)

        return ranked[: self.config.population_size // 2]

    def crossover(self, parent1: BlockProgram, parent2: BlockProgram) -> BlockProgram:
        """One-point splice of the parents' statement lists."""
        blocks1, blocks2 = parent1.blocks, parent2.blocks
        if not blocks1 and not blocks2:
            return BlockProgram.create(
                self.input_variables, self.generator, self.config.max_depth, self.boolean_inputs
            )
        if not blocks1:
            return parent2.copy()
        if not blocks2:
            return parent1.copy()

        point1 = self.rng.randint(0, len(blocks1))
        point2 = self.rng.randint(0, len(blocks2))
        spliced = list(blocks1[:point1]) + list(blocks2[point2:])
        body = [block for block in spliced if block.kind != BlockKind.RETURN]
        body = body[: self.config.max_blocks - 1]

        child = BlockProgram(
            body + [make_return()], parent1.input_variables, parent1.boolean_inputs
        )
        child.generation = self.generation + 1
        return child

    def mutate(self, program: BlockProgram) -> BlockProgram:
        return self.mutator.mutate(program)

    def breed(self, survivors: List[BlockProgram]) -> List[BlockProgram]:
        """Elites first, then mutated crossover children up to population size."""
        new_population = [elite.copy() for elite in survivors[: self.config.elite_count]]

        while len(new_population) < self.config.population_size:
            parent1 = self.rng.choice(survivors)
            parent2 = self.rng.choice(survivors)
            child = self.crossover(parent1, parent2)
            if self.rng.random() < self.config.mutation_rate:
                child = self.mutate(child)
            child.fitness = None
            child.generation = self.generation + 1
            new_population.append(child)

        return new_population[: self.config.population_size]

    def run_trial(
        self, trial: int = 0, progress_callback: Optional[ProgressCallback] = None
    ) -> Optional[BlockProgram]:
        """Evolve a fresh population; returns the best program of the last generation."""
        self.trial = trial
        self.initialize_population()
        reinitialized = False
        best: Optional[BlockProgram] = None

        for gen in range(self.config.max_generations):
            self.generation = gen
            if not self.population:
                if reinitialized:
                    logger.error("Population empty again, abandoning trial %d", trial)
                    return best
                logger.warning("Empty population in trial %d, re-initializing", trial)
                reinitialized = True
                self.initialize_population()
                if not self.population:
                    logger.error("Re-initialization produced no programs, abandoning trial %d", trial)
                    return best

            survivors = self.select()

            best = self.population[0]
            if progress_callback:
                progress_callback(gen, best, best.fitness)

            target = self.config.target_fitness
            if target is not None and best.fitness >= target:
                logger.info("Trial %d reached fitness %.4f at generation %d", trial, best.fitness, gen)
                break

            if gen < self.config.max_generations - 1:
                self.population = self.breed(survivors)

        return best

    def run(
        self,
        trials: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> EvolutionResult:
        """
        Run independent trials and keep the overall best program.

        Args:
            trials: Number of restarts; defaults to the configured value
            progress_callback: Optional callback(generation, best_program, best_fitness)
        """
        trials = self.config.trials if trials is None else trials
        self.history = []
        result = EvolutionResult(best_program=None, best_fitness=0.0)

        for trial in range(trials):
            logger.info("Starting trial %d/%d on %s", trial + 1, trials, self.problem.name)
            best = self.run_trial(trial, progress_callback)
            if best is None:
                result.trial_bests.append(None)
                result.trial_fitness.append(0.0)
                continue

            fitness = self.evaluate(best)
            best.fitness = fitness
            result.trial_bests.append(best)
            result.trial_fitness.append(fitness)
            logger.info("Trial %d best fitness %.4f:\n%s", trial + 1, fitness, best.to_text())

            if result.best_program is None or fitness > result.best_fitness:
                result.best_program = best
                result.best_fitness = fitness

        result.history = list(self.history)
        if result.best_program is not None:
            logger.info("Overall best fitness %.4f", result.best_fitness)
        else:
            logger.warning("No trial produced a program")
        return result


__all__ = ["GenerationStats", "EvolutionResult", "BlockEvolver"]
