"""
Base class for annealing schedules.

A schedule decides whether simulated annealing moves to a neighbor, and
adapts its temperature as the run progresses. Lifecycle:

	schedule.init(max_evals)      # once per run, resets all run state
	schedule.accept(nc, cc)       # once per evaluation

Each schedule owns a SplittableGenerator for its acceptance draws, so a
schedule must never be shared between threads: use split().
"""

import math
from abc import ABC, abstractmethod
from typing import Optional

from stochsearch.core.rand import SplittableGenerator, create_generator

# Temperature below which cooling schedules stop cooling
TEMPERATURE_FLOOR = 0.001


class AnnealingSchedule(ABC):
	"""
	Abstract annealing schedule.

	Subclasses must implement:
	- init(): reset per-run state for a run of max_evals evaluations
	- accept(): decide on a neighbor and advance the schedule one step
	- split(): fresh copy with identical parameters and a split generator
	"""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		self._rng = rng if rng is not None else create_generator()
		self._t = 0.0

	@abstractmethod
	def init(self, max_evals: int) -> None:
		...

	@abstractmethod
	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		...

	@abstractmethod
	def split(self) -> 'AnnealingSchedule':
		...

	@property
	def temperature(self) -> float:
		"""Current temperature."""
		return self._t

	def _metropolis(self, neighbor_cost: float, current_cost: float) -> bool:
		"""
		Metropolis criterion at the current temperature.

		Improving and equal moves are always accepted. A worsening move is
		accepted with probability exp((current - neighbor) / t). A non-finite
		neighbor or a non-positive temperature rejects every worsening move.
		"""
		if neighbor_cost <= current_cost:
			return True
		if self._t <= 0 or math.isinf(neighbor_cost):
			return False
		return self._rng.random() < math.exp((current_cost - neighbor_cost) / self._t)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(t={self._t:.6g})"
