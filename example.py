"""Example workflow evolving a block program for a bundled problem."""

import sys
from typing import Optional

from blockevo import (
    BlockEvolver,
    BlockKind,
    BlockProgram,
    EvolutionConfig,
    get_problem,
    make_op,
    make_set,
    matching_rules,
    setup_logging,
)


def rewrite_demo() -> None:
    """Show the rewrite rules available on a hand-built program."""
    program = BlockProgram(
        [
            make_set("v0", make_op(BlockKind.SUBTRACT, "x", "x")),
            make_set("out", make_op(BlockKind.MULTIPLY, make_op(BlockKind.ADD, "x", "y"), 1)),
        ],
        ["x", "y"],
    )
    print("Program:")
    for line in program.to_human_readable():
        print(" ", line)

    print("\nMatching rewrite rules:")
    for block in program.blocks:
        value = block.value
        if hasattr(value, "kind"):
            for rule in matching_rules(value):
                print(f"  {value.kind.label}: {rule.name} ({rule.style})")

    print("\nRun with x=3, y=4:", program.run({"x": 3, "y": 4}))


def main(problem_name: str = "sum_three_numbers", config_path: Optional[str] = None) -> None:
    setup_logging()

    config = EvolutionConfig.from_yaml(config_path) if config_path else EvolutionConfig(seed=42)
    problem = get_problem(problem_name).with_seed(config.seed)
    evolver = BlockEvolver(problem, config)

    def progress_callback(gen, best, best_fitness):
        if gen % 10 == 0:
            print(f"Gen {gen:03d} | fitness={best_fitness:.6f} | size={len(best)}")

    result = evolver.run(progress_callback=progress_callback)
    best = result.best_program

    print("\nBest program fitness:", result.best_fitness)
    print("Signature:", best.get_signature()[:16] + "...")

    print("\nEffective statements:")
    for line in best.to_human_readable():
        if line.startswith("✓"):
            print("  " + line)

    print("\nSpot-check predictions:")
    for case in problem.generate_cases(4):
        predicted = best.run(case.inputs)
        print(f"  {case.inputs} | predicted={predicted} | expected={case.expected}")


if __name__ == "__main__":
    mode = sys.argv[1].lower() if len(sys.argv) > 1 else "sum_three_numbers"
    if mode == "rewrite":
        rewrite_demo()
    else:
        main(mode, sys.argv[2] if len(sys.argv) > 2 else None)
