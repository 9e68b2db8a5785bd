"""
Toroidal symbol grid and head arena.

The grid is a flat array of width * height symbols addressed as
y * width + x, wrapping on both axes. Symbol 0 is the blank background.

Heads are kept in a fixed-length struct-of-arrays (HeadArray) so the
stepper can run over plain integer arrays; Head is the value snapshot
handed out to callers.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple, Union
import logging
import math

import numpy as np

from .errors import ConstructionError
from .prng import PseudoRandomStream

logger = logging.getLogger(__name__)

# Largest half-width of the noise patch stamped around the grid center
MAX_PATTERN_SIZE = 5
# Draws below this value leave the cell untouched
NOISE_SKIP_THRESHOLD = 0.8


def round_half_up(value: float) -> int:
    """Round to nearest integer, ties toward +infinity."""
    return math.floor(value + 0.5)


class Grid:
    """
    Mutable toroidal grid of symbols.

    Example:
        grid = Grid(3, 3)
        grid[0, 2] = 1          # (x, y)
        grid[3, 2]              # wraps to (0, 2) -> 1
    """

    def __init__(self, width: int, height: int, cells: np.ndarray | None = None):
        self.width = int(width)
        self.height = int(height)

        if cells is None:
            self._cells = np.zeros(self.width * self.height, dtype=np.int64)
        else:
            cells = np.asarray(cells, dtype=np.int64).ravel()
            if cells.size != self.width * self.height:
                raise ValueError(
                    f"Expected {self.width * self.height} cells, got {cells.size}"
                )
            self._cells = cells.copy()

    @property
    def cells(self) -> np.ndarray:
        """Flat cell array (live view)."""
        return self._cells

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width)."""
        return (self.height, self.width)

    def index(self, x: int, y: int) -> int:
        """Flat index of (x, y) with toroidal wrap."""
        return (y % self.height) * self.width + (x % self.width)

    def __len__(self) -> int:
        return self._cells.size

    def __getitem__(self, pos: Tuple[int, int]) -> int:
        x, y = pos
        return int(self._cells[self.index(x, y)])

    def __setitem__(self, pos: Tuple[int, int], value: int) -> None:
        x, y = pos
        self._cells[self.index(x, y)] = value

    def clear(self) -> "Grid":
        self._cells.fill(0)
        return self

    def as_array(self) -> np.ndarray:
        """Copy of the grid as a (height, width) array."""
        return self._cells.reshape(self.height, self.width).copy()

    def filled_cells(self) -> int:
        """Number of non-blank cells."""
        return int(np.count_nonzero(self._cells))

    def copy(self) -> "Grid":
        return Grid(self.width, self.height, self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, filled={self.filled_cells()})"


@dataclass
class Head:
    """Snapshot of one head: control state and position."""
    state: int
    x: int
    y: int

    def to_dict(self) -> Dict[str, int]:
        return {"state": self.state, "x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Head":
        return cls(state=int(d["state"]), x=int(d["x"]), y=int(d["y"]))


HeadLike = Union[Head, Mapping[str, Any], Tuple[int, int, int]]


class HeadArray:
    """
    Fixed-length, index-addressable sequence of heads.

    Stored as three parallel int64 arrays (state, x, y). Reading an item
    returns a Head snapshot; assigning an item writes through.
    """

    def __init__(self, count: int):
        self.state = np.zeros(count, dtype=np.int64)
        self.x = np.zeros(count, dtype=np.int64)
        self.y = np.zeros(count, dtype=np.int64)

    @classmethod
    def from_heads(cls, heads: Iterable[HeadLike]) -> "HeadArray":
        heads = list(heads)
        arena = cls(len(heads))
        for i, head in enumerate(heads):
            arena[i] = head
        return arena

    def __len__(self) -> int:
        return len(self.state)

    def _check(self, i: int) -> int:
        n = len(self)
        if i < 0:
            i += n
        if not 0 <= i < n:
            raise IndexError(f"Head index {i} out of range [0, {n})")
        return i

    def __getitem__(self, i: int) -> Head:
        i = self._check(i)
        return Head(int(self.state[i]), int(self.x[i]), int(self.y[i]))

    def __setitem__(self, i: int, head: HeadLike) -> None:
        i = self._check(i)
        if isinstance(head, Head):
            values = (head.state, head.x, head.y)
        elif isinstance(head, Mapping):
            values = (head["state"], head["x"], head["y"])
        else:
            values = tuple(head)
        self.state[i], self.x[i], self.y[i] = values

    def __iter__(self) -> Iterator[Head]:
        for i in range(len(self)):
            yield self[i]

    def place(self, i: int, state: int, x: int, y: int) -> None:
        self.state[i] = state
        self.x[i] = x
        self.y[i] = y

    def to_list(self) -> List[Dict[str, int]]:
        """Interchange snapshot in head order."""
        return [head.to_dict() for head in self]

    def copy(self) -> "HeadArray":
        other = HeadArray(len(self))
        other.state[:] = self.state
        other.x[:] = self.x
        other.y[:] = self.y
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeadArray):
            return NotImplemented
        return (
            np.array_equal(self.state, other.state)
            and np.array_equal(self.x, other.x)
            and np.array_equal(self.y, other.y)
        )

    def __repr__(self) -> str:
        return f"HeadArray({self.to_list()})"


def pattern_size(width: int, height: int) -> int:
    """Half-width of the noise patch for a grid of this size."""
    return min(MAX_PATTERN_SIZE, min(width, height) // 40)


def place_heads(
    grid: Grid,
    heads: HeadArray,
    num_symbols: int,
    head_radius: float,
) -> None:
    """
    Spread heads evenly on a circle around the grid center.

    Each head starts in state 0 and marks its cell with a non-blank
    symbol cycling through 1..num_symbols-1. Positions are clamped (not
    wrapped) into the grid, so several heads may share a cell.
    """
    width, height = grid.width, grid.height
    center_x = width // 2
    center_y = height // 2
    radius = min(width, height) * head_radius
    count = len(heads)

    for i in range(count):
        angle = (i * 2 * math.pi) / count
        x = center_x + round_half_up(radius * math.cos(angle))
        y = center_y + round_half_up(radius * math.sin(angle))

        x = max(0, min(width - 1, x))
        y = max(0, min(height - 1, y))

        heads.place(i, 0, x, y)
        grid.cells[y * width + x] = 1 + (i % (num_symbols - 1))


def stamp_noise(grid: Grid, num_symbols: int, stream: PseudoRandomStream) -> None:
    """
    Scatter random symbols in a square patch around the grid center.

    Every offset consumes one draw whether or not it is written, dx
    outer and dy inner, so the patch is reproducible from the seed.
    """
    width, height = grid.width, grid.height
    center_x = width // 2
    center_y = height // 2
    size = pattern_size(width, height)

    for dx in range(-size, size + 1):
        for dy in range(-size, size + 1):
            if stream.next() < NOISE_SKIP_THRESHOLD:
                continue

            gx = (center_x + dx) % width
            gy = (center_y + dy) % height
            grid.cells[gy * width + gx] = 1 + stream.next_int(num_symbols - 1)


def seed_state(
    grid: Grid,
    heads: HeadArray,
    num_symbols: int,
    head_radius: float,
    stream: PseudoRandomStream,
) -> None:
    """
    Initialize grid and heads in place.

    Clears the grid, places the heads on their circle, then stamps the
    center noise patch using `stream`.

    Raises:
        ConstructionError: if num_symbols < 2
    """
    if num_symbols < 2:
        raise ConstructionError(f"num_symbols must be >= 2, got {num_symbols}")

    grid.clear()
    place_heads(grid, heads, num_symbols, head_radius)
    stamp_noise(grid, num_symbols, stream)

    logger.debug(
        f"Seeded {grid.width}x{grid.height} grid with {len(heads)} heads, "
        f"{grid.filled_cells()} cells filled"
    )
