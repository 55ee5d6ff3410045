"""
Command-line entry point for generating puzzles.

Usage:
    blockfit --level 12
    blockfit settings.yaml --level 200 --count 5 --output puzzles.json --verbose
    python -m blockfit.main --level 60 --worker --show
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import EngineSettings, load_settings
from .engine import count_solutions, generate_level
from .environment import GenerationOrchestrator, PuzzleSession
from .errors import GenerationFailed, PuzzleError
from .utils.grid_visualizer import render_board, render_dock


def main():
    parser = argparse.ArgumentParser(
        description="Generate polyomino tiling puzzles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example settings.yaml:
  max_generation_retries: 200
  max_worker_retries: 10
  worker_timeout: 30
  seed: 42
        """
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="Path to YAML settings file (defaults are used when omitted)"
    )
    parser.add_argument(
        "--level", "-l",
        type=int,
        default=1,
        help="Level number to generate (default: 1)"
    )
    parser.add_argument(
        "--count", "-n",
        type=int,
        default=1,
        help="Number of consecutive levels to generate"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (overrides the settings file)"
    )
    parser.add_argument(
        "--worker",
        action="store_true",
        help="Generate in a separate worker process"
    )
    parser.add_argument(
        "--output", "-o",
        help="Path to save the generated puzzles as JSON"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the board and pieces of each puzzle"
    )
    parser.add_argument(
        "--count-solutions",
        action="store_true",
        help="Count distinct tilings of each puzzle (capped)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress to stdout"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config) if args.config else EngineSettings()
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.seed is not None:
        settings = settings.model_copy(update={"seed": args.seed})

    if args.verbose:
        if args.config:
            print(f"Config: {args.config}")
        print(f"Levels: {args.level}..{args.level + args.count - 1}")
        print()

    puzzles = []
    orchestrator = GenerationOrchestrator(settings=settings) if args.worker else None
    try:
        for level in range(args.level, args.level + args.count):
            seed = None if settings.seed is None else settings.seed + level
            if orchestrator is not None:
                puzzle = orchestrator.generate(level)
            else:
                puzzle = generate_level(level, seed=seed, settings=settings)

            session = PuzzleSession.from_puzzle(puzzle)
            session.solve()
            if not session.is_complete:
                raise GenerationFailed(f"Level {level}: recorded solution does not tile the board")

            puzzles.append(puzzle)
            if args.verbose:
                print(
                    f"Level {level}: {puzzle.board_rows}x{puzzle.board_cols} board, "
                    f"{puzzle.piece_count} pieces, {puzzle.target_grid.fillable_count} cells, "
                    f"{puzzle.attempts} attempt(s)"
                )
            if args.count_solutions:
                print(f"Level {level}: {count_solutions(puzzle.target_grid, puzzle.pieces)} solution(s) (capped at 10)")
            if args.show:
                print(render_board(puzzle.target_grid))
                print()
                print(render_dock(puzzle.pieces))
                print()
                print(render_board(session.target_grid, session.pieces))
                print()
    except KeyboardInterrupt:
        print("\nGeneration interrupted by user")
    except PuzzleError as e:
        print(f"Error during generation: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if orchestrator is not None:
            orchestrator.close()

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump([p.model_dump(mode="json") for p in puzzles], f, indent=2)
        if args.verbose:
            print(f"Puzzles saved to: {output_path}")

    # Print summary
    print()
    print("=== Generation Summary ===")
    print(f"Puzzles generated: {len(puzzles)}")
    if puzzles:
        print(f"Total attempts: {sum(p.attempts for p in puzzles)}")
        print(f"Pieces per puzzle: {', '.join(str(p.piece_count) for p in puzzles)}")


if __name__ == "__main__":
    main()
