"""
Search configuration, loadable from and savable to YAML.

Example search.yaml:

	annealing:
	  schedule: self_tuning_lam
	restarts:
	  schedule: luby
	  luby_scale: 1000
	num_threads: 4
	num_restarts: 20
	seed: 42
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from stochsearch.factory import AnnealingScheduleType, RestartScheduleType, parse_enum


def _from_dict(cls, data: dict):
	"""Build a config dataclass, rejecting unknown keys."""
	unknown = set(data) - {f.name for f in fields(cls)}
	if unknown:
		raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
	return cls(**data)


@dataclass
class AnnealingConfig:
	"""
	Annealing schedule selection.

	Parameters (only those used by the chosen schedule matter):
	- t0: initial temperature (exponential, linear, logarithmic)
	- alpha: cooling rate in (0, 1) (exponential)
	- delta_t: temperature decrement (linear)
	- steps: evaluations between temperature changes
	"""
	schedule: str = "self_tuning_lam"
	t0: Optional[float] = None
	alpha: Optional[float] = None
	delta_t: Optional[float] = None
	steps: int = 1

	def __post_init__(self):
		self.schedule = parse_enum(AnnealingScheduleType, self.schedule).name.lower()
		if self.steps < 1:
			raise ValueError(f"steps must be at least 1, got {self.steps}")

	def params(self) -> dict:
		return {
			't0': self.t0,
			'alpha': self.alpha,
			'delta_t': self.delta_t,
			'steps': self.steps,
		}


@dataclass
class RestartConfig:
	"""Restart schedule selection."""
	schedule: str = "constant"
	run_length: int = 100000
	r0: int = 1000
	luby_scale: int = 1

	def __post_init__(self):
		self.schedule = parse_enum(RestartScheduleType, self.schedule).name.lower()
		if self.run_length < 1:
			raise ValueError(f"run_length must be at least 1, got {self.run_length}")
		if self.r0 < 1:
			raise ValueError(f"r0 must be at least 1, got {self.r0}")
		if self.luby_scale < 1:
			raise ValueError(f"luby_scale must be at least 1, got {self.luby_scale}")

	def params(self) -> dict:
		return {
			'run_length': self.run_length,
			'r0': self.r0,
			'luby_scale': self.luby_scale,
		}


@dataclass
class SearchConfig:
	"""Configuration for a parallel multistart annealing experiment."""

	annealing: AnnealingConfig = field(default_factory=AnnealingConfig)
	restarts: RestartConfig = field(default_factory=RestartConfig)

	num_threads: int = 1
	num_restarts: int = 10

	# Time-bounded search: number of time units (None = restart bounded)
	time_limit: Optional[int] = None
	time_unit_ms: int = 1000

	seed: Optional[int] = None
	verbose: bool = False

	def __post_init__(self):
		if isinstance(self.annealing, dict):
			self.annealing = _from_dict(AnnealingConfig, self.annealing)
		if isinstance(self.restarts, dict):
			self.restarts = _from_dict(RestartConfig, self.restarts)
		if self.num_threads < 1:
			raise ValueError(f"num_threads must be at least 1, got {self.num_threads}")
		if self.num_restarts < 1:
			raise ValueError(f"num_restarts must be at least 1, got {self.num_restarts}")
		if self.time_limit is not None and self.time_limit < 1:
			raise ValueError(f"time_limit must be at least 1, got {self.time_limit}")
		if self.time_unit_ms < 1:
			raise ValueError(f"time_unit_ms must be at least 1, got {self.time_unit_ms}")

	def to_yaml(self) -> str:
		"""Convert config to YAML string."""
		return yaml.dump(asdict(self), default_flow_style=False, sort_keys=False)

	def save_yaml(self, filepath: str) -> None:
		"""Save config to YAML file."""
		path = Path(filepath)
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w') as f:
			f.write(self.to_yaml())

	@classmethod
	def from_yaml(cls, yaml_str: str) -> 'SearchConfig':
		"""Create config from YAML string."""
		data: Any = yaml.safe_load(yaml_str) or {}
		if not isinstance(data, dict):
			raise ValueError("Search config must be a mapping")
		return _from_dict(cls, data)

	@classmethod
	def load_yaml(cls, filepath: str) -> 'SearchConfig':
		"""Load config from YAML file."""
		with open(filepath, 'r') as f:
			return cls.from_yaml(f.read())
