"""
Time-bounded parallel multistart search.

Threads restart their searches without bound while the calling thread
sleeps. After each unit of time the tracker's best solution is recorded
in the search history. When time is up the tracker is stopped; each
worker returns at its next evaluation, so no run is abandoned in the
middle of a mutation.

The tracker is left stopped when optimize() returns. Every timed call
clears the stop flag before starting.

Usage:
	search = TimedParallelMultistarter(sa, 1000, num_threads=4)
	search.set_time_unit(100)           # ticks of 100 ms
	best = search.optimize(50)          # about 5 seconds
	costs = [p.cost for p in search.search_history if p is not None]
"""

import sys
import time
from typing import Callable, List, Optional, TypeVar

from stochsearch.core.solution import SolutionCostPair
from stochsearch.parallel.multistarter import (
	ParallelMultistarter,
	ParallelReoptimizableMultistarter,
)

T = TypeVar('T')

TIME_UNIT_MS = 1000

# Restart count handed to workers; they only return when stopped
UNBOUNDED_RESTARTS = sys.maxsize


class TimedParallelMultistarter(ParallelMultistarter[T]):
	"""ParallelMultistarter whose optimize() is bounded by time."""

	def __init__(self, *args, **kwargs):
		super().__init__(*args, **kwargs)
		self._time_unit = TIME_UNIT_MS
		self._history: Optional[List[Optional[SolutionCostPair[T]]]] = None

	@property
	def name(self) -> str:
		return "TimedParallelMultistarter"

	def set_time_unit(self, time_unit: int) -> None:
		"""Set the length of one unit of time, in milliseconds."""
		if time_unit < 1:
			raise ValueError("The unit of time must be at least 1 millisecond.")
		self._time_unit = time_unit

	@property
	def time_unit(self) -> int:
		"""Length of one unit of time, in milliseconds."""
		return self._time_unit

	@property
	def search_history(self) -> Optional[List[Optional[SolutionCostPair[T]]]]:
		"""Best solution after each unit of time of the last call, or None before any call."""
		return self._history

	def optimize(self, time_units: int) -> Optional[SolutionCostPair[T]]:
		"""
		Search for time_units units of time.

		Returns:
			Best solution found by the threads, or None if the tracker
			already holds a provably optimal solution

		Raises:
			RuntimeError: If the coordinator was closed
		"""
		return self._timed_run(time_units, lambda member: member.optimize(UNBOUNDED_RESTARTS))

	def _timed_run(self, time_units: int, task: Callable) -> Optional[SolutionCostPair[T]]:
		self._check_open()
		tracker = self.progress_tracker
		tracker.start()
		self._history = []
		if tracker.did_find_best():
			return None
		futures = [self._pool.submit(task, member) for member in self._members]
		try:
			for tick in range(time_units):
				if tracker.did_find_best() or all(f.done() for f in futures):
					break
				time.sleep(self._time_unit / 1000.0)
				snapshot = tracker.get_solution_cost_pair()
				self._history.append(snapshot)
				self._log(f"[{self.name}] tick {tick + 1}/{time_units}: best={snapshot.cost if snapshot is not None else None}")
		finally:
			tracker.stop()
		return self._collect(futures)

	def split(self) -> 'TimedParallelMultistarter[T]':
		twin = super().split()
		twin.set_time_unit(self._time_unit)
		return twin


class TimedParallelReoptimizableMultistarter(TimedParallelMultistarter[T], ParallelReoptimizableMultistarter[T]):
	"""Timed parallel multistarter whose restarts can resume from the best solution."""

	@property
	def name(self) -> str:
		return "TimedParallelReoptimizableMultistarter"

	def reoptimize(self, time_units: int) -> Optional[SolutionCostPair[T]]:
		"""Like optimize(), but each restart begins from the best known solution."""
		return self._timed_run(time_units, lambda member: member.reoptimize(UNBOUNDED_RESTARTS))
