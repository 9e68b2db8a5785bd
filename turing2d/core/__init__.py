"""
Core module for the 2D multi-head Turing machine.

Contains:
- PseudoRandomStream: seeded LCG used for all procedural content
- Action, TransitionRule, TransitionTable: the dense rule table
- Grid, Head, HeadArray: toroidal grid and head arena
- Program: aggregate of table, grid, heads and iteration count
- EvolutionEngine: batched stepper
- export_program / import_program: interchange record
"""

from .errors import Turing2DError, ConstructionError, RuleImportError, InvalidRecordError
from .prng import PseudoRandomStream
from .rules import Action, TransitionRule, TransitionTable
from .grid import Grid, Head, HeadArray, seed_state
from .evolution import EvolutionEngine, EvolutionResult, EvolutionStats, advance
from .program import Program
from .serializer import export_program, import_program, restore_heads

__all__ = [
    "Turing2DError",
    "ConstructionError",
    "RuleImportError",
    "InvalidRecordError",
    "PseudoRandomStream",
    "Action",
    "TransitionRule",
    "TransitionTable",
    "Grid",
    "Head",
    "HeadArray",
    "seed_state",
    "EvolutionEngine",
    "EvolutionResult",
    "EvolutionStats",
    "advance",
    "Program",
    "export_program",
    "import_program",
    "restore_heads",
]
