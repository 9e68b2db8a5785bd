"""
2D multi-head Turing machine simulator.

Main entry point for simulations.
"""

from __future__ import annotations
import argparse
import logging
from pathlib import Path
from typing import Optional

from turing2d.config import SimulatorConfig, ProgramParams, RunParams, StorageParams, random_seed
from turing2d.core import EvolutionEngine, Program
from turing2d.storage import RunRecorder, default_export_name, load_program, save_program
from turing2d.visualization import format_transition_table, save_image


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_simulation(
    config: SimulatorConfig,
    program: Optional[Program] = None,
    run_name: str = "simulation",
    show_table: bool = False,
) -> dict:
    """
    Run a complete simulation.

    Args:
        config: Simulator configuration
        program: Program to run (built from config.program if None)
        run_name: Name for this run
        show_table: Log the transition table before running

    Returns:
        Dictionary with program, result, export and run paths
    """
    if program is None:
        program = Program.from_config(config.program, use_numba=config.run.use_numba)

    logger.info(f"Starting simulation: {run_name}")
    logger.info(f"{program!r}")
    logger.info(f"Steps: {config.run.steps}, batch size: {config.run.batch_size}")

    if show_table:
        logger.info("Transition table:\n" + format_transition_table(program.table))

    recorder = RunRecorder(
        name=run_name,
        base_path=config.storage.base_path,
        config=config._to_dict(),
        description="2D multi-head Turing machine run",
        compress=config.storage.compress,
    )

    with recorder:
        recorder.record_program(program)
        recorder.save_snapshot(program, "initial")

        engine = EvolutionEngine(use_numba=config.run.use_numba)
        log_every = max(1, config.run.log_every)

        def on_batch(prog: Program, batch: int) -> None:
            recorder.record_program(prog)
            if (batch + 1) % log_every == 0:
                states = ", ".join(str(s) for s in prog.active_states())
                logger.info(
                    f"Iteration {prog.iterations} - active states: {states}, "
                    f"filled cells: {prog.grid.filled_cells()}"
                )

        engine.add_batch_callback(on_batch)
        result = engine.run(program, steps=config.run.steps, batch_size=config.run.batch_size)

        stats = result.stats
        logger.info(
            f"Ran {stats.rounds} rounds in {stats.elapsed_time:.2f}s "
            f"({stats.rounds_per_second:.0f} rounds/s)"
        )

        recorder.save_snapshot(program, "final")
        export_path = save_program(
            program,
            recorder.path / f"{default_export_name(program)}.json",
            compress=config.storage.compress,
        )

        image_path = None
        if config.storage.save_image:
            image_path = save_image(program, recorder.path / "final.png")
            logger.info(f"Image saved to: {image_path}")

    logger.info(f"Run saved to: {recorder.path}")

    return {
        'program': program,
        'result': result,
        'export_path': export_path,
        'image_path': image_path,
        'run_path': recorder.path,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="2D multi-head Turing machine simulator")

    parser.add_argument('--config', type=str, default=None,
                       help='JSON configuration file (flags override it)')
    parser.add_argument('--states', type=int, default=None,
                       help='Number of states (default: 6)')
    parser.add_argument('--symbols', type=int, default=None,
                       help='Number of symbols (default: 6)')
    parser.add_argument('--heads', type=int, default=None,
                       help='Number of heads (default: 36)')
    parser.add_argument('--radius', type=float, default=None,
                       help='Head circle radius as a fraction of the grid (default: 0.25)')
    parser.add_argument('--width', type=int, default=None,
                       help='Grid width (default: 512)')
    parser.add_argument('--height', type=int, default=None,
                       help='Grid height (default: 512)')
    parser.add_argument('--seed', type=int, default=None,
                       help='32-bit seed (default: 0)')
    parser.add_argument('--random-seed', action='store_true',
                       help='Draw a fresh random seed')
    parser.add_argument('--steps', type=int, default=None,
                       help='Number of rounds to run (default: 1000)')
    parser.add_argument('--batch-size', type=int, default=None,
                       help='Rounds per batch (default: 100)')
    parser.add_argument('--no-numba', action='store_true',
                       help='Use the pure Python stepper')
    parser.add_argument('--load', type=str, default=None,
                       help='Load a program from an exported JSON record')
    parser.add_argument('--resume', action='store_true',
                       help='With --load, restore heads and iterations from the record')
    parser.add_argument('--output', type=str, default=None,
                       help='Output directory (default: ./runs)')
    parser.add_argument('--name', type=str, default='simulation',
                       help='Run name (default: simulation)')
    parser.add_argument('--compress', action='store_true',
                       help='Gzip JSON output')
    parser.add_argument('--show-table', action='store_true',
                       help='Log the transition table')
    parser.add_argument('--no-image', action='store_true',
                       help='Skip writing the final PNG')

    return parser


def config_from_args(args: argparse.Namespace) -> SimulatorConfig:
    """Merge CLI flags over a config file (or defaults)."""
    if args.config is not None:
        config = SimulatorConfig.load(args.config)
    else:
        config = SimulatorConfig(
            program=ProgramParams(),
            run=RunParams(),
            storage=StorageParams(),
        )

    overrides = {
        'num_states': args.states,
        'num_symbols': args.symbols,
        'num_heads': args.heads,
        'head_radius': args.radius,
        'width': args.width,
        'height': args.height,
        'seed': args.seed,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config.program, key, value)
    if args.random_seed:
        config.program.seed = random_seed()

    if args.steps is not None:
        config.run.steps = args.steps
    if args.batch_size is not None:
        config.run.batch_size = args.batch_size
    if args.no_numba:
        config.run.use_numba = False

    if args.output is not None:
        config.storage.base_path = Path(args.output)
    if args.compress:
        config.storage.compress = True
    if args.no_image:
        config.storage.save_image = False

    return config


def main(argv: Optional[list] = None) -> int:
    """Command-line interface for running simulations."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = config_from_args(args)

    program = None
    if args.load is not None:
        program = load_program(args.load, resume=args.resume, use_numba=config.run.use_numba)
    else:
        issues = config.validate()
        if issues:
            for issue in issues:
                logger.error(f"Invalid configuration: {issue}")
            return 2

    run_simulation(config, program=program, run_name=args.name, show_table=args.show_table)

    logger.info("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
