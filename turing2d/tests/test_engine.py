"""
Tests for the batched evolution engine and the CLI loop.
"""

import json

import pytest

from turing2d.core import EvolutionEngine, Program
from turing2d.main import main


class TestEvolutionEngine:
    """Tests for EvolutionEngine."""

    def test_run_in_batches(self, small_program, use_numba):
        engine = EvolutionEngine(use_numba=use_numba)
        seen = []
        engine.add_batch_callback(lambda prog, batch: seen.append((batch, prog.iterations)))

        result = engine.run(small_program, steps=250, batch_size=100)

        assert result.completed
        assert seen == [(0, 100), (1, 200), (2, 250)]
        assert result.stats.rounds == 250
        assert result.stats.batches == 3
        assert result.stats.final_iteration == 250
        assert result.stats.active_states == small_program.active_states()

    def test_batches_match_single_update(self, use_numba):
        batched = Program(4, 4, 50, 50, 9, 0.3, seed=21, use_numba=use_numba)
        single = Program(4, 4, 50, 50, 9, 0.3, seed=21, use_numba=use_numba)

        EvolutionEngine(use_numba=use_numba).run(batched, steps=330, batch_size=64)
        single.update(330)

        assert batched.grid == single.grid
        assert batched.heads == single.heads

    def test_callback_stops_between_batches(self, small_program):
        engine = EvolutionEngine()
        engine.add_batch_callback(lambda prog, batch: prog.iterations >= 300)

        result = engine.run(small_program, steps=1000, batch_size=100)

        assert result.stop_reason == "stopped_by_callback"
        assert not result.completed
        assert small_program.iterations == 300

    def test_remove_callback(self, small_program):
        engine = EvolutionEngine()
        stop = lambda prog, batch: True
        engine.add_batch_callback(stop)
        engine.remove_batch_callback(stop)

        assert engine.run(small_program, steps=200, batch_size=50).completed

    def test_invalid_batch_size(self, small_program):
        with pytest.raises(ValueError):
            EvolutionEngine().run(small_program, steps=10, batch_size=0)

    def test_zero_steps(self, small_program):
        result = EvolutionEngine().run(small_program, steps=0)
        assert result.stats.batches == 0
        assert small_program.iterations == 0


class TestMain:
    """Tests for the command-line entry point."""

    def test_run_and_resume(self, tmp_path):
        args = [
            "--states", "3", "--symbols", "3", "--heads", "4",
            "--width", "32", "--height", "32", "--seed", "5",
            "--steps", "120", "--batch-size", "50",
            "--output", str(tmp_path), "--name", "cli", "--no-image",
        ]
        assert main(args) == 0

        exports = list(tmp_path.glob("cli_*/turing-machine-2d-seed-5-3S-3C-4H.json"))
        assert len(exports) == 1
        with open(exports[0], encoding="utf-8") as f:
            record = json.load(f)
        assert record["parameters"]["iterations"] == 120

        resume_args = [
            "--load", str(exports[0]), "--resume", "--steps", "30",
            "--output", str(tmp_path), "--name", "again", "--no-image",
        ]
        assert main(resume_args) == 0

        resumed = list(tmp_path.glob("again_*/*.json"))
        resumed = [p for p in resumed if p.name.startswith("turing-machine-2d")]
        with open(resumed[0], encoding="utf-8") as f:
            assert json.load(f)["parameters"]["iterations"] == 150

    def test_invalid_config(self, tmp_path):
        assert main(["--symbols", "1", "--output", str(tmp_path)]) == 2
