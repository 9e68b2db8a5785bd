"""
Program: the aggregate that owns a transition table, a grid and its heads.

    program = Program(num_states=6, num_symbols=6, width=512, height=512,
                      num_heads=36, head_radius=0.25, seed=0)
    program.update(100)
    program.active_states()

Table generation and state seeding each use their own stream built from
the same seed, so `reset()` always reproduces the initial layout.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
import logging

from .errors import ConstructionError
from .evolution import advance
from .grid import Grid, HeadArray, HeadLike, seed_state
from .prng import MODULUS, PseudoRandomStream
from .rules import RuleLike, TransitionTable

logger = logging.getLogger(__name__)


class Program:
    """
    A seeded multi-head 2D Turing machine.

    Attributes:
        table: Dense transition table
        grid: Toroidal symbol grid
        heads: Fixed-length head arena
        iterations: Completed rounds since the last reset
    """

    def __init__(
        self,
        num_states: int,
        num_symbols: int,
        width: int,
        height: int,
        num_heads: int,
        head_radius: float,
        seed: int,
        table: Optional[TransitionTable | Iterable[RuleLike]] = None,
        use_numba: bool = True,
    ):
        """
        Initialize program.

        Args:
            num_states: Number of head control states
            num_symbols: Number of cell symbols (>= 2)
            width: Grid width
            height: Grid height
            num_heads: Number of heads
            head_radius: Head circle radius as a fraction of min(width, height)
            seed: Seed for table generation and initial layout (reduced mod 2**32)
            table: Explicit table or rule list; generated from `seed` if None
            use_numba: Use the compiled stepper

        Raises:
            ConstructionError: if num_symbols < 2
            RuleImportError: if an explicit rule list cannot be imported
        """
        if num_symbols < 2:
            raise ConstructionError(f"num_symbols must be >= 2, got {num_symbols}")

        self.num_states = int(num_states)
        self.num_symbols = int(num_symbols)
        self.width = int(width)
        self.height = int(height)
        self.num_heads = int(num_heads)
        self.head_radius = head_radius
        self.seed = int(seed) % MODULUS
        self.use_numba = use_numba

        if table is None:
            self.table = TransitionTable.generate(
                self.num_states, self.num_symbols, PseudoRandomStream(self.seed)
            )
        elif isinstance(table, TransitionTable):
            if (table.num_states, table.num_symbols) != (self.num_states, self.num_symbols):
                raise ConstructionError(
                    f"Table is {table.num_states}x{table.num_symbols}, "
                    f"program is {self.num_states}x{self.num_symbols}"
                )
            self.table = table.copy()
        else:
            self.table = TransitionTable.from_rules(self.num_states, self.num_symbols, table)

        self.grid = Grid(self.width, self.height)
        self.heads = HeadArray(self.num_heads)
        self.iterations = 0

        self.reset()

    @classmethod
    def from_config(cls, params: Any, **kwargs) -> "Program":
        """Create a program from a ProgramParams-like object."""
        return cls(
            num_states=params.num_states,
            num_symbols=params.num_symbols,
            width=params.width,
            height=params.height,
            num_heads=params.num_heads,
            head_radius=params.head_radius,
            seed=params.seed,
            **kwargs,
        )

    def reset(self) -> None:
        """Restore the seeded initial grid and head layout; iterations -> 0."""
        seed_state(
            self.grid,
            self.heads,
            self.num_symbols,
            self.head_radius,
            PseudoRandomStream(self.seed),
        )
        self.iterations = 0
        logger.debug(f"Program reset (seed={self.seed})")

    def update(self, steps: int = 1) -> None:
        """Run `steps` rounds over all heads."""
        advance(self, steps, use_numba=self.use_numba)

    def active_states(self) -> List[int]:
        """Distinct head states in first-occurrence order."""
        seen: Dict[int, None] = {}
        for state in self.heads.state.tolist():
            seen.setdefault(state, None)
        return list(seen)

    def set_heads(self, heads: Iterable[HeadLike]) -> None:
        """
        Overwrite every head.

        The whole snapshot is parsed and checked before anything is
        written, so a rejected snapshot leaves the current heads intact.

        Raises:
            ValueError: if the count differs from num_heads or a head has
                a state or position outside the program
        """
        arena = HeadArray.from_heads(heads)
        if len(arena) != self.num_heads:
            raise ValueError(f"Expected {self.num_heads} heads, got {len(arena)}")

        for i, head in enumerate(arena):
            if not 0 <= head.state < self.num_states:
                raise ValueError(f"Head {i} state {head.state} outside [0, {self.num_states})")
            if not (0 <= head.x < self.width and 0 <= head.y < self.height):
                raise ValueError(
                    f"Head {i} at ({head.x}, {head.y}) outside {self.width}x{self.height} grid"
                )

        self.heads.state[:] = arena.state
        self.heads.x[:] = arena.x
        self.heads.y[:] = arena.y

    def parameters(self) -> Dict[str, Any]:
        """Parameter block of the interchange record."""
        return {
            "numStates": self.num_states,
            "numSymbols": self.num_symbols,
            "numHeads": self.num_heads,
            "headRadius": self.head_radius,
            "width": self.width,
            "height": self.height,
            "seed": self.seed,
            "iterations": self.iterations,
        }

    def copy(self) -> "Program":
        """Independent program with identical table, grid, heads and iterations."""
        other = Program.__new__(Program)
        other.num_states = self.num_states
        other.num_symbols = self.num_symbols
        other.width = self.width
        other.height = self.height
        other.num_heads = self.num_heads
        other.head_radius = self.head_radius
        other.seed = self.seed
        other.use_numba = self.use_numba
        other.table = self.table.copy()
        other.grid = self.grid.copy()
        other.heads = self.heads.copy()
        other.iterations = self.iterations
        return other

    def __repr__(self) -> str:
        return (
            f"Program(states={self.num_states}, symbols={self.num_symbols}, "
            f"{self.width}x{self.height}, heads={self.num_heads}, "
            f"seed={self.seed}, iterations={self.iterations})"
        )
