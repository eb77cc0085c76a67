"""
Run configuration.

The RunConfig loads a YAML run definition describing which grid sizes to
estimate, how many trials to run and where outputs go.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import InvalidArgument


class RunConfig:
    """
    Loads and validates a run configuration YAML.

    Example:
        config = RunConfig.from_yaml('config/threshold_scan.yaml')
        print(config.run_name)
        print(config.grid_sizes)
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data
        self._validate()

    @classmethod
    def from_yaml(cls, path: str) -> 'RunConfig':
        """Load run config from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Run config not found: {path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        return cls(data)

    def _validate(self):
        """Validate required config sections and trial parameters."""
        if not isinstance(self._data, dict):
            raise ValueError("Run config must be a mapping")

        required_sections = ['run_name', 'steps', 'output']
        for section in required_sections:
            if section not in self._data:
                raise ValueError(f"Missing required config section: '{section}'")

        if 'trials' not in self._data['steps']:
            raise ValueError("Missing required config section: 'steps.trials'")
        if 'base_dir' not in self._data['output']:
            raise ValueError("Missing required config value: 'output.base_dir'")

        if not self.grid_sizes:
            raise InvalidArgument("steps.trials.grid_sizes must list at least one size")
        if any(n <= 0 for n in self.grid_sizes):
            raise InvalidArgument(f"grid sizes must be > 0, got {self.grid_sizes}")
        if len(set(self.grid_sizes)) != len(self.grid_sizes):
            raise InvalidArgument(f"grid sizes must be unique, got {self.grid_sizes}")
        if self.trials <= 0:
            raise InvalidArgument(f"trials must be > 0, got {self.trials}")
        if self.trials_per_job <= 0:
            raise InvalidArgument(f"trials_per_job must be > 0, got {self.trials_per_job}")

    # --- Properties ---

    @property
    def run_name(self) -> str:
        return self._data['run_name']

    @property
    def seed(self) -> Optional[int]:
        return self._data.get('seed')

    # --- Trial parameters ---

    @property
    def grid_sizes(self) -> List[int]:
        return [int(n) for n in self._data['steps']['trials'].get('grid_sizes', [])]

    @property
    def trials(self) -> int:
        return int(self._data['steps']['trials'].get('trials', 100))

    @property
    def trials_per_job(self) -> int:
        """Trials in one batch; defaults to all trials of a grid size."""
        return int(self._data['steps']['trials'].get('trials_per_job', self.trials))

    @property
    def chunk_size(self) -> int:
        """Batches per chunk file (one array task)."""
        return int(self._data['steps']['trials'].get('chunk_size', 1))

    # --- Output paths ---

    @property
    def base_dir(self) -> Path:
        return Path(self._data['output']['base_dir'])

    @property
    def jobs_dir(self) -> Path:
        return self.base_dir / self._data['output'].get('jobs_dir', 'jobs')

    @property
    def chunks_dir(self) -> Path:
        return self.jobs_dir / 'chunks'

    @property
    def samples_dir(self) -> Path:
        return self.base_dir / self._data['output'].get('samples_dir', 'samples')

    @property
    def summary_csv(self) -> Path:
        return self.base_dir / self._data['output'].get('summary_csv', 'summary.csv')

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)
