"""
2D Multi-Head Turing Machine Simulator

A deterministic, seeded Turing machine with many heads sharing one
toroidal grid and one transition table.

Main components:
- core: PRNG, transition table, grid/heads, stepper, export/import
- storage: JSON records and run recording
- visualization: palette, rendering, table view
"""

__version__ = "0.1.0"

from .core import (
    Action,
    ConstructionError,
    EvolutionEngine,
    Head,
    InvalidRecordError,
    Program,
    PseudoRandomStream,
    RuleImportError,
    TransitionRule,
    TransitionTable,
    export_program,
    import_program,
    restore_heads,
)
from .config import SimulatorConfig, ProgramParams, RunParams, StorageParams

__all__ = [
    "Action",
    "ConstructionError",
    "EvolutionEngine",
    "Head",
    "InvalidRecordError",
    "Program",
    "PseudoRandomStream",
    "RuleImportError",
    "TransitionRule",
    "TransitionTable",
    "export_program",
    "import_program",
    "restore_heads",
    "SimulatorConfig",
    "ProgramParams",
    "RunParams",
    "StorageParams",
]
