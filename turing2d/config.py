"""
Configuration module for the 2D Turing machine simulator.

Contains all configurable parameters for a run. The core trusts the
values it is given; range checks live here in `validate()`.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import json
from pathlib import Path

import numpy as np

MAX_SEED = 2 ** 32 - 1


@dataclass
class ProgramParams:
    """Parameters that define a program (and its export record)."""
    num_states: int = 6
    num_symbols: int = 6
    width: int = 512
    height: int = 512
    num_heads: int = 36
    head_radius: float = 0.25   # Fraction of min(width, height)
    seed: int = 0               # uint32


@dataclass
class RunParams:
    """Execution parameters for the host loop."""
    steps: int = 1000
    batch_size: int = 100       # Rounds per uninterrupted update call
    use_numba: bool = True
    log_every: int = 10         # Batches between progress log lines


@dataclass
class StorageParams:
    """Output parameters."""
    base_path: Path = field(default_factory=lambda: Path("./runs"))
    compress: bool = False
    save_image: bool = True


@dataclass
class SimulatorConfig:
    """
    Main configuration container.

    Example:
        config = SimulatorConfig(program=ProgramParams(seed=7))
        config.save("my_config.json")
    """
    program: ProgramParams = field(default_factory=ProgramParams)
    run: RunParams = field(default_factory=RunParams)
    storage: StorageParams = field(default_factory=StorageParams)

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self._to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> "SimulatorConfig":
        """Load configuration from JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls._from_dict(data)

    def _to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        def convert(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif hasattr(obj, '__dataclass_fields__'):
                return {k: convert(v) for k, v in obj.__dict__.items()}
            return obj

        return convert(self)

    @classmethod
    def _from_dict(cls, data: dict) -> "SimulatorConfig":
        """Reconstruct from dictionary."""
        data = dict(data)
        if 'program' in data:
            data['program'] = ProgramParams(**data['program'])
        if 'run' in data:
            data['run'] = RunParams(**data['run'])
        if 'storage' in data:
            storage = dict(data['storage'])
            if 'base_path' in storage:
                storage['base_path'] = Path(storage['base_path'])
            data['storage'] = StorageParams(**storage)
        return cls(**data)

    def validate(self) -> List[str]:
        """Validate configuration, return list of issues."""
        issues = []
        p = self.program

        if not 2 <= p.num_states <= 128:
            issues.append("num_states must be in [2, 128]")
        if not 2 <= p.num_symbols <= 128:
            issues.append("num_symbols must be in [2, 128]")
        if not 1 <= p.num_heads <= 1024:
            issues.append("num_heads must be in [1, 1024]")
        if not 0 < p.head_radius <= 1:
            issues.append("head_radius must be in (0, 1]")
        if p.width < 1 or p.height < 1:
            issues.append("width and height must be positive")
        if not 0 <= p.seed <= MAX_SEED:
            issues.append("seed must be an unsigned 32-bit integer")

        if self.run.steps < 0:
            issues.append("steps must be non-negative")
        if self.run.batch_size < 1:
            issues.append("batch_size must be at least 1")
        if self.run.log_every < 1:
            issues.append("log_every must be at least 1")

        return issues


def random_seed(rng: Optional[np.random.Generator] = None) -> int:
    """Draw a fresh uint32 seed."""
    if rng is None:
        rng = np.random.default_rng()
    return int(rng.integers(0, MAX_SEED, endpoint=True))


# Preset configurations
def minimal_config() -> SimulatorConfig:
    """Small grid and short run for quick testing."""
    return SimulatorConfig(
        program=ProgramParams(width=64, height=64, num_heads=4),
        run=RunParams(steps=200, batch_size=50),
        storage=StorageParams(save_image=False),
    )


def standard_config() -> SimulatorConfig:
    """Defaults of the interactive viewer: 512x512, 36 heads."""
    return SimulatorConfig(run=RunParams(steps=100_000))
