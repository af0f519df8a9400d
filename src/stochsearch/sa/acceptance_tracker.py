"""
Acceptance rate recording for annealing schedules.

Wraps any AnnealingSchedule and counts, for each iteration index of a run,
how many runs accepted the neighbor evaluated at that index. Useful for
plotting how closely an adaptive schedule follows its target rate.

Usage:
	schedule = AcceptanceTracker(SelfTuningLam())
	sa = SimulatedAnnealing(problem, mutation, initializer, schedule)
	for _ in range(100):
		sa.optimize(10000)
	rates = schedule.acceptance_rates()
"""

from typing import Optional

import numpy as np

from stochsearch.sa.base import AnnealingSchedule


class AcceptanceTracker(AnnealingSchedule):
	"""Annealing schedule wrapper recording acceptance counts per iteration."""

	def __init__(self, schedule: AnnealingSchedule):
		if schedule is None:
			raise TypeError("schedule is required")
		self._schedule = schedule
		self._counts: Optional[np.ndarray] = None
		self._num_runs = 0
		self._iteration = 0

	def reset(self, max_evals: int) -> None:
		"""Discard all recorded runs, preparing for runs of max_evals."""
		if max_evals <= 0:
			raise ValueError("maxEvals must be positive")
		if self._counts is None or len(self._counts) != max_evals:
			self._counts = np.zeros(max_evals, dtype=np.int64)
		else:
			self._counts.fill(0)
		self._num_runs = 0

	def init(self, max_evals: int) -> None:
		self._schedule.init(max_evals)
		if self._counts is None or len(self._counts) != max_evals:
			self.reset(max_evals)
		self._num_runs += 1
		self._iteration = 0

	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		accepted = self._schedule.accept(neighbor_cost, current_cost)
		if self._iteration < len(self._counts):
			if accepted:
				self._counts[self._iteration] += 1
			self._iteration += 1
		return accepted

	def split(self) -> 'AcceptanceTracker':
		return AcceptanceTracker(self._schedule.split())

	def get_acceptance_rate(self, iteration_index: int) -> float:
		"""
		Fraction of recorded runs that accepted at iteration_index.

		Raises:
			RuntimeError: If no run was recorded and reset() was never called
			IndexError: If iteration_index is outside [0, max_evals)
		"""
		if self._counts is None:
			raise RuntimeError("No runs recorded")
		if iteration_index < 0 or iteration_index >= len(self._counts):
			raise IndexError(f"iteration_index {iteration_index} out of range")
		return float(self._counts[iteration_index] / self._num_runs)

	def acceptance_rates(self) -> np.ndarray:
		"""Acceptance rate of every iteration index."""
		if self._counts is None:
			raise RuntimeError("No runs recorded")
		return self._counts / self._num_runs

	@property
	def num_runs(self) -> int:
		return self._num_runs

	@property
	def schedule(self) -> AnnealingSchedule:
		return self._schedule

	@property
	def temperature(self) -> float:
		return self._schedule.temperature

	def __repr__(self) -> str:
		return f"AcceptanceTracker({self._schedule!r}, runs={self._num_runs})"
