"""
Interchange record export/import.

Record layout:

    {
      "parameters": {numStates, numSymbols, numHeads, headRadius,
                     width, height, seed, iterations},
      "transitionTable": [{currentState, currentSymbol, newState,
                           newSymbol, action}, ...],
      "currentHeads": [{state, x, y}, ...]
    }

Importing rebuilds the table and regenerates the initial layout from the
seed. The head snapshot and iteration count are NOT restored by
`import_program`; call `restore_heads` to resume a run exactly.
"""

from __future__ import annotations
from typing import Any, Dict, Mapping
import logging

from .errors import InvalidRecordError
from .program import Program

logger = logging.getLogger(__name__)

PARAMETER_KEYS = (
    "numStates",
    "numSymbols",
    "numHeads",
    "headRadius",
    "width",
    "height",
    "seed",
)

# Used when an imported record carries no headRadius
DEFAULT_HEAD_RADIUS = 0.3


def export_program(program: Program) -> Dict[str, Any]:
    """Export parameters, the full table and a head snapshot."""
    return {
        "parameters": program.parameters(),
        "transitionTable": program.table.to_list(),
        "currentHeads": program.heads.to_list(),
    }


def _parameters(record: Mapping[str, Any]) -> Mapping[str, Any]:
    if not isinstance(record, Mapping):
        raise InvalidRecordError(f"Record must be a mapping, got {type(record).__name__}")
    if "parameters" not in record or "transitionTable" not in record:
        raise InvalidRecordError("Record needs both 'parameters' and 'transitionTable'")

    params = record["parameters"]
    missing = [k for k in PARAMETER_KEYS if k not in params and k != "headRadius"]
    if missing:
        raise InvalidRecordError(f"Record parameters missing: {', '.join(missing)}")
    return params


def import_program(record: Mapping[str, Any], use_numba: bool = True) -> Program:
    """
    Build a fresh program from a record.

    Heads are regenerated from the seed and iterations start at 0; any
    `currentHeads` block in the record is ignored here.

    Raises:
        InvalidRecordError: if required blocks or parameters are missing
        RuleImportError: if a rule cannot be imported
        ConstructionError: if numSymbols < 2
    """
    params = _parameters(record)
    head_radius = params.get("headRadius")
    if head_radius is None:
        head_radius = DEFAULT_HEAD_RADIUS

    program = Program(
        num_states=int(params["numStates"]),
        num_symbols=int(params["numSymbols"]),
        width=int(params["width"]),
        height=int(params["height"]),
        num_heads=int(params["numHeads"]),
        head_radius=head_radius,
        seed=int(params["seed"]),
        table=record["transitionTable"],
        use_numba=use_numba,
    )
    logger.debug(f"Imported {program!r}")
    return program


def restore_heads(program: Program, record: Mapping[str, Any]) -> Program:
    """
    Overwrite heads and iterations from the record's snapshot.

    The grid is not part of the record and keeps whatever state it has.
    The snapshot is checked as a whole before it is applied.

    Raises:
        InvalidRecordError: if the snapshot is missing, malformed, has the
            wrong head count, or places a head outside the program
    """
    heads = record.get("currentHeads")
    if heads is None:
        raise InvalidRecordError("Record has no 'currentHeads' block")

    try:
        program.set_heads(heads)
    except (KeyError, TypeError) as e:
        raise InvalidRecordError(f"Malformed head snapshot: {e}") from None
    except ValueError as e:
        raise InvalidRecordError(str(e)) from None

    program.iterations = int(record.get("parameters", {}).get("iterations", 0))
    return program
