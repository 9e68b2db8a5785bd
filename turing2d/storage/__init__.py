"""
Storage module for the simulator.

Provides persistence for:
- Interchange records (exported programs)
- Run metadata, snapshots and metrics
"""

from .json_storage import (
    JSONStorage,
    default_export_name,
    save_program,
    load_program,
    load_record,
)
from .experiment import RunRecorder, load_run, load_run_snapshot

__all__ = [
    "JSONStorage",
    "default_export_name",
    "save_program",
    "load_program",
    "load_record",
    "RunRecorder",
    "load_run",
    "load_run_snapshot",
]
