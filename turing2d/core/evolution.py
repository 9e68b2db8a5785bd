"""
Stepper for the multi-head 2D Turing machine.

One round visits every head in list order. For each head:

    symbol          = grid[y * width + x]
    rule            = table[num_states * symbol + state]
    state           = rule.new_state
    grid[y*w + x]   = rule.new_symbol  (0 if new_symbol >= num_symbols)
    move one cell by rule.action, wrapping on the torus

Heads later in the list see the writes of earlier heads in the same
round, so rounds are strictly sequential.

Movement is fixed as:
    LEFT  -> x + 1
    RIGHT -> x - 1
    UP    -> y - 1
    DOWN  -> y + 1
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Optional, TYPE_CHECKING
import logging
import time

import numpy as np
from numba import njit

from .rules import Action

if TYPE_CHECKING:
    from .program import Program

logger = logging.getLogger(__name__)

_LEFT = int(Action.LEFT)
_RIGHT = int(Action.RIGHT)
_UP = int(Action.UP)
_DOWN = int(Action.DOWN)


def _advance_python(
    cells: np.ndarray,
    head_state: np.ndarray,
    head_x: np.ndarray,
    head_y: np.ndarray,
    entries: np.ndarray,
    num_states: int,
    num_symbols: int,
    width: int,
    height: int,
    steps: int,
) -> None:
    """Reference implementation of `steps` rounds (in place)."""
    num_heads = len(head_state)

    for _ in range(steps):
        for h in range(num_heads):
            x = int(head_x[h])
            y = int(head_y[h])
            cell = y * width + x
            row = num_states * int(cells[cell]) + int(head_state[h])

            head_state[h] = entries[row, 0]
            new_symbol = entries[row, 1]
            cells[cell] = new_symbol if new_symbol < num_symbols else 0

            action = entries[row, 2]
            if action == _LEFT:
                head_x[h] = (x + 1) % width
            elif action == _RIGHT:
                head_x[h] = (x - 1 + width) % width
            elif action == _UP:
                head_y[h] = (y - 1 + height) % height
            elif action == _DOWN:
                head_y[h] = (y + 1) % height


@njit(cache=True)
def _advance_numba(
    cells,
    head_state,
    head_x,
    head_y,
    entries,
    num_states,
    num_symbols,
    width,
    height,
    steps,
):
    """Numba-compiled twin of _advance_python."""
    num_heads = head_state.shape[0]

    for _ in range(steps):
        for h in range(num_heads):
            x = head_x[h]
            y = head_y[h]
            cell = y * width + x
            row = num_states * cells[cell] + head_state[h]

            head_state[h] = entries[row, 0]
            new_symbol = entries[row, 1]
            if new_symbol < num_symbols:
                cells[cell] = new_symbol
            else:
                cells[cell] = 0

            action = entries[row, 2]
            if action == 0:
                head_x[h] = (x + 1) % width
            elif action == 1:
                head_x[h] = (x - 1 + width) % width
            elif action == 2:
                head_y[h] = (y - 1 + height) % height
            elif action == 3:
                head_y[h] = (y + 1) % height


def advance(program: "Program", steps: int, use_numba: bool = True) -> None:
    """
    Run `steps` whole rounds on `program` in place and bump its iteration count.

    Blocking and not interruptible; callers that need to stay responsive
    should call this in bounded batches.
    """
    steps = int(steps)
    if steps < 0:
        raise ValueError(f"steps must be non-negative, got {steps}")
    if steps == 0:
        return

    kernel = _advance_numba if use_numba else _advance_python
    heads = program.heads
    kernel(
        program.grid.cells,
        heads.state,
        heads.x,
        heads.y,
        program.table.entries,
        program.num_states,
        program.num_symbols,
        program.width,
        program.height,
        steps,
    )
    program.iterations += steps


@dataclass
class EvolutionStats:
    """Statistics from an engine run."""
    rounds: int = 0
    batches: int = 0

    start_time: float = 0.0
    end_time: float = 0.0

    start_iteration: int = 0
    final_iteration: int = 0
    active_states: List[int] = field(default_factory=list)
    filled_cells: int = 0

    @property
    def elapsed_time(self) -> float:
        return self.end_time - self.start_time

    @property
    def rounds_per_second(self) -> float:
        if self.elapsed_time > 0:
            return self.rounds / self.elapsed_time
        return 0.0


@dataclass
class EvolutionResult:
    """Outcome of EvolutionEngine.run."""
    stats: EvolutionStats = field(default_factory=EvolutionStats)
    stop_reason: str = "steps_completed"

    @property
    def completed(self) -> bool:
        return self.stop_reason == "steps_completed"


BatchCallback = Callable[["Program", int], Optional[bool]]


class EvolutionEngine:
    """
    Batched driver around `advance`.

    The engine owns no timing policy: it advances in fixed batches and
    calls the registered callbacks between batches. A callback returning
    True stops the run before the next batch.

    Example:
        engine = EvolutionEngine()
        engine.add_batch_callback(lambda prog, batch: prog.iterations >= 500)
        result = engine.run(program, steps=10_000, batch_size=100)
    """

    def __init__(self, use_numba: bool = True):
        self.use_numba = use_numba
        self._batch_callbacks: List[BatchCallback] = []

    def add_batch_callback(self, callback: BatchCallback) -> None:
        """Add callback(program, batch_index) called after each batch."""
        self._batch_callbacks.append(callback)

    def remove_batch_callback(self, callback: BatchCallback) -> None:
        self._batch_callbacks.remove(callback)

    def step(self, program: "Program", steps: int = 1) -> None:
        """Advance without batching or callbacks."""
        advance(program, steps, use_numba=self.use_numba)

    def run(self, program: "Program", steps: int, batch_size: int = 100) -> EvolutionResult:
        """
        Advance `program` by up to `steps` rounds in batches of `batch_size`.

        Args:
            program: Program to evolve (modified in place)
            steps: Total rounds to run
            batch_size: Rounds per uninterrupted batch

        Returns:
            EvolutionResult with run statistics
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")

        stats = EvolutionStats(start_time=time.time(), start_iteration=program.iterations)
        stop_reason = "steps_completed"
        remaining = steps

        while remaining > 0:
            batch = min(batch_size, remaining)
            advance(program, batch, use_numba=self.use_numba)
            remaining -= batch
            stats.rounds += batch
            stats.batches += 1

            stop = False
            for callback in self._batch_callbacks:
                if callback(program, stats.batches - 1):
                    stop = True
            if stop and remaining > 0:
                stop_reason = "stopped_by_callback"
                logger.info(f"Run stopped by callback at iteration {program.iterations}")
                break

        stats.end_time = time.time()
        stats.final_iteration = program.iterations
        stats.active_states = program.active_states()
        stats.filled_cells = program.grid.filled_cells()

        return EvolutionResult(stats=stats, stop_reason=stop_reason)
