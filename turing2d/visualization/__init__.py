"""
Visualization module.

Provides:
- Symbol palette generation
- RGB rendering of the grid with head markers
- Matplotlib plotting and PNG export
- Plain-text transition table view
"""

from .palette import generate_palette, hsl_to_rgb
from .grid_viz import render_rgb, plot_program, save_image, format_transition_table

__all__ = [
    "generate_palette",
    "hsl_to_rgb",
    "render_rgb",
    "plot_program",
    "save_image",
    "format_transition_table",
]
