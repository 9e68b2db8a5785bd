"""
JSON storage for interchange records and run artifacts.
"""

from __future__ import annotations
import json
import gzip
from pathlib import Path
from typing import Any, Dict, List, Union
from dataclasses import asdict, is_dataclass
import logging

import numpy as np

from ..core.program import Program
from ..core.serializer import export_program, import_program, restore_heads

logger = logging.getLogger(__name__)


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy scalars and arrays."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        if isinstance(obj, Path):
            return str(obj)
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


def _open_text(filepath: Path, mode: str):
    if filepath.suffix == '.gz':
        return gzip.open(filepath, mode + 't', encoding='utf-8')
    return open(filepath, mode, encoding='utf-8')


class JSONStorage:
    """
    JSON-based storage backend.

    Supports:
    - Plain JSON files
    - Gzipped JSON files
    - Automatic numpy scalar/array handling
    """

    def __init__(self, base_path: Union[str, Path]):
        """
        Initialize JSON storage.

        Args:
            base_path: Base directory for storage
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def save(
        self,
        data: Any,
        filename: str,
        compress: bool = False,
    ) -> Path:
        """
        Save data to JSON file.

        Args:
            data: Data to save
            filename: Filename (without extension)
            compress: Use gzip compression

        Returns:
            Path to saved file
        """
        suffix = ".json.gz" if compress else ".json"
        filepath = self.base_path / f"{filename}{suffix}"
        with _open_text(filepath, 'w') as f:
            json.dump(data, f, cls=NumpyEncoder, indent=2)
        return filepath

    def _resolve(self, filename: str) -> Path:
        for ext in ['', '.json', '.json.gz']:
            filepath = self.base_path / f"{filename}{ext}"
            if filepath.is_file():
                return filepath
        raise FileNotFoundError(f"No JSON file found for {filename}")

    def load(self, filename: str) -> Any:
        """
        Load data from JSON file.

        Args:
            filename: Filename (with or without extension)
        """
        with _open_text(self._resolve(filename), 'r') as f:
            return json.load(f)

    def list_files(self, pattern: str = "*.json*") -> List[Path]:
        """List all JSON files in storage."""
        return sorted(self.base_path.glob(pattern))

    def exists(self, filename: str) -> bool:
        """Check if file exists."""
        try:
            self._resolve(filename)
        except FileNotFoundError:
            return False
        return True

    def delete(self, filename: str) -> bool:
        """Delete file if exists."""
        try:
            self._resolve(filename).unlink()
        except FileNotFoundError:
            return False
        return True


def default_export_name(program: Program) -> str:
    """File stem used for exported programs."""
    return (
        f"turing-machine-2d-seed-{program.seed}-"
        f"{program.num_states}S-{program.num_symbols}C-{program.num_heads}H"
    )


def save_program(
    program: Program,
    filepath: Union[str, Path],
    compress: bool = False,
) -> Path:
    """
    Write the program's interchange record to a file.

    Args:
        program: Program to export
        filepath: Full path; a .gz suffix forces compression
        compress: Use gzip compression

    Returns:
        Path to saved file
    """
    filepath = Path(filepath)
    if compress and filepath.suffix != '.gz':
        filepath = filepath.with_name(filepath.name + '.gz')
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with _open_text(filepath, 'w') as f:
        json.dump(export_program(program), f, cls=NumpyEncoder, indent=2)

    logger.info(f"Saved program to {filepath}")
    return filepath


def load_record(filepath: Union[str, Path]) -> Dict[str, Any]:
    """Read an interchange record from a (possibly gzipped) JSON file."""
    with _open_text(Path(filepath), 'r') as f:
        return json.load(f)


def load_program(
    filepath: Union[str, Path],
    resume: bool = False,
    use_numba: bool = True,
) -> Program:
    """
    Load a program from an interchange record file.

    Args:
        filepath: Path to record file
        resume: Also restore the head snapshot and iteration count
        use_numba: Use the compiled stepper

    Returns:
        Program rebuilt from the record's seed and table
    """
    record = load_record(filepath)
    program = import_program(record, use_numba=use_numba)
    if resume:
        restore_heads(program, record)
    logger.info(f"Loaded {program!r} from {filepath}")
    return program
