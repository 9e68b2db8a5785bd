"""
Grid visualization functions.

Renders a program's grid through a symbol palette with heads marked in
white, either to an RGB array, a matplotlib axis or an image file.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np

from ..core.program import Program
from ..core.rules import TransitionTable
from .palette import HEAD_COLOR, generate_palette

# Lazy import for matplotlib
_plt = None


def _get_plt():
    global _plt
    if _plt is None:
        import matplotlib.pyplot as plt
        _plt = plt
    return _plt


def render_rgb(program: Program, palette: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Render the grid as an RGB image.

    Symbols without a palette entry render black.

    Returns:
        uint8 array of shape (height, width, 3)
    """
    if palette is None:
        palette = generate_palette(program.num_symbols)
    palette = np.asarray(palette, dtype=np.uint8)

    cells = program.grid.cells
    known = (cells >= 0) & (cells < len(palette))
    flat = np.zeros((cells.size, 3), dtype=np.uint8)
    flat[known] = palette[cells[known]]

    heads = program.heads
    flat[heads.y * program.width + heads.x] = HEAD_COLOR

    return flat.reshape(program.height, program.width, 3)


def plot_program(
    program: Program,
    ax: Optional[Any] = None,
    title: Optional[str] = None,
    palette: Optional[np.ndarray] = None,
) -> Any:
    """
    Draw the grid on a matplotlib axis.

    Args:
        program: Program to draw
        ax: Matplotlib axis (created if None)
        title: Plot title (defaults to iteration and active states)
        palette: Symbol palette

    Returns:
        Matplotlib axis
    """
    plt = _get_plt()

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))

    ax.imshow(render_rgb(program, palette), interpolation='nearest')
    ax.set_xticks([])
    ax.set_yticks([])

    if title is None:
        states = ", ".join(str(s) for s in program.active_states())
        title = f"Iterations: {program.iterations}  Active states: {states}"
    ax.set_title(title)

    return ax


def save_image(
    program: Program,
    filepath: Union[str, Path],
    palette: Optional[np.ndarray] = None,
) -> Path:
    """Write the rendered grid at native resolution (one pixel per cell)."""
    plt = _get_plt()
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    plt.imsave(filepath, render_rgb(program, palette))
    return filepath


def format_transition_table(table: TransitionTable) -> str:
    """Plain-text view of the table, one rule per line."""
    headers = ["State", "Symbol", "New State", "New Symbol", "Action"]
    keys = ["state", "symbol", "newState", "newSymbol", "action"]
    rows = [[str(row[k]) for k in keys] for row in table.display_rows()]

    widths = [
        max(len(h), *(len(r[i]) for r in rows)) if rows else len(h)
        for i, h in enumerate(headers)
    ]

    def line(cells):
        return " | ".join(c.center(w) for c, w in zip(cells, widths))

    out = [line(headers), "-+-".join("-" * w for w in widths)]
    out.extend(line(r) for r in rows)
    return "\n".join(out)
