"""
Run recording and management.
"""

from __future__ import annotations
import time
import uuid
from pathlib import Path
from typing import Dict, List, Any, Optional, Union
from dataclasses import dataclass, field, asdict
from datetime import datetime

from ..core.program import Program
from ..core.serializer import export_program
from .json_storage import JSONStorage


@dataclass
class RunMetadata:
    """Metadata for a simulation run."""

    run_id: str
    name: str
    description: str
    created_at: str
    config: Dict[str, Any]
    tags: List[str] = field(default_factory=list)
    status: str = "running"  # running, completed, failed
    duration_seconds: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RunMetadata":
        return cls(**d)


class RunRecorder:
    """
    Records a simulation run:
    - Configuration and status metadata
    - Interchange-record snapshots at checkpoints
    - Per-batch metrics (iterations, active states, filled cells)
    """

    def __init__(
        self,
        name: str,
        base_path: Union[str, Path],
        config: Optional[Dict[str, Any]] = None,
        description: str = "",
        tags: Optional[List[str]] = None,
        compress: bool = False,
    ):
        """
        Initialize run recorder.

        Args:
            name: Run name
            base_path: Base directory for runs
            config: Run configuration
            description: Run description
            tags: List of tags for categorization
            compress: Gzip snapshots and metrics
        """
        self.run_id = f"{name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
        self.base_path = Path(base_path) / self.run_id
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.compress = compress

        self.json_storage = JSONStorage(self.base_path)

        self.metadata = RunMetadata(
            run_id=self.run_id,
            name=name,
            description=description,
            created_at=datetime.now().isoformat(),
            config=config or {},
            tags=tags or [],
            status="running",
        )
        self._save_metadata()

        self.start_time = time.time()
        self._metrics: Dict[str, List[tuple]] = {}  # metric_name -> [(iteration, value), ...]

    def _save_metadata(self):
        self.json_storage.save(self.metadata.to_dict(), "metadata", compress=False)

    def record_metric(self, name: str, value: Any, iteration: int):
        self._metrics.setdefault(name, []).append((iteration, value))

    def record_program(self, program: Program):
        """Record the standard per-batch metrics of a program."""
        iteration = program.iterations
        self.record_metric("active_states", program.active_states(), iteration)
        self.record_metric("active_state_count", len(program.active_states()), iteration)
        self.record_metric("filled_cells", program.grid.filled_cells(), iteration)

    def save_snapshot(self, program: Program, name: str) -> Path:
        """
        Save a named interchange-record snapshot.

        Args:
            program: Program to export
            name: Snapshot name
        """
        storage = JSONStorage(self.base_path / "snapshots")
        data = {
            'iteration': program.iterations,
            'timestamp': datetime.now().isoformat(),
            'record': export_program(program),
        }
        return storage.save(data, name, compress=self.compress)

    def finalize(self, status: str = "completed"):
        """
        Write metrics and close the run.

        Args:
            status: Final status (completed, failed)
        """
        metrics_data = {
            name: {'iterations': [m[0] for m in values], 'values': [m[1] for m in values]}
            for name, values in self._metrics.items()
        }
        self.json_storage.save(metrics_data, "metrics", compress=self.compress)

        self.metadata.status = status
        self.metadata.duration_seconds = time.time() - self.start_time
        self._save_metadata()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        status = "failed" if exc_type is not None else "completed"
        self.finalize(status)
        return False

    @property
    def path(self) -> Path:
        """Run directory path."""
        return self.base_path


def load_run(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a recorded run.

    Returns:
        Dict containing metadata, metrics, snapshot names and path
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Run not found: {path}")

    storage = JSONStorage(path)
    metadata = RunMetadata.from_dict(storage.load("metadata"))

    metrics = {}
    if storage.exists("metrics"):
        metrics = storage.load("metrics")

    snapshots_dir = path / "snapshots"
    snapshots = []
    if snapshots_dir.exists():
        snapshots = sorted(f.name.split('.')[0] for f in snapshots_dir.glob("*.json*"))

    return {
        'metadata': metadata,
        'metrics': metrics,
        'snapshots': snapshots,
        'path': path,
    }


def load_run_snapshot(path: Union[str, Path], name: str) -> Dict[str, Any]:
    """Load a named snapshot of a recorded run."""
    return JSONStorage(Path(path) / "snapshots").load(name)
