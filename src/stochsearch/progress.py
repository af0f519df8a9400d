"""
Progress tracking shared by all searches of an experiment.

A single ProgressTracker is created per experiment and handed by
reference to every search and every thread. It holds the best solution
found so far together with its cost, plus two sticky flags: found_best
(a provably optimal solution was found) and stopped (cooperative
cancellation). Searches poll both flags and return as soon as either
is set.

Writes go through update(), which replaces the best solution and its
cost together under one lock. Plain reads (get_cost, get_solution,
did_find_best, is_stopped) take no lock; get_solution_cost_pair() takes
the lock to return a consistent snapshot.

Usage:
	tracker = ProgressTracker()

	# inside any search, any thread
	if cost < tracker.get_cost_double():
		tracker.update(cost, candidate, problem.is_min_cost(cost))

	# afterwards
	best = tracker.get_solution_cost_pair()
"""

import logging
import math
import threading
import time
from typing import Callable, Generic, Optional, TypeVar

from stochsearch.core.solution import (
	INT_COST_UNKNOWN,
	SolutionCostPair,
	copy_candidate,
	int_mirror,
	is_int_cost,
)

T = TypeVar('T')

logger = logging.getLogger(__name__)


class ProgressTracker(Generic[T]):
	"""
	Thread-safe holder of the best solution found across searches.

	Attributes are only ever replaced wholesale: the stored solution is a
	private copy that is never mutated after being stored, so unlocked
	readers always see some complete state.
	"""

	def __init__(
		self,
		logger: Optional[Callable[[str], None]] = None,
		verbose: bool = False,
		prefix: str = "",
	):
		"""
		Args:
			logger: Callable that logs messages (e.g., Logger instance, print)
			verbose: If True, log every improvement
			prefix: Prefix for log messages (e.g., "[SA]")
		"""
		self._log_fn = logger or print
		self._verbose = verbose
		self._prefix = prefix + " " if prefix else ""
		self._lock = threading.Lock()

		# State
		self._solution: Optional[T] = None
		self._cost: int | float = math.inf
		self._int_cost: int = INT_COST_UNKNOWN
		self._contains_int_cost = False
		self._found_best = False
		self._stopped = False
		self._origin = time.monotonic_ns()
		self._when = self._origin
		self._improvements = 0

	def _log(self, msg: str) -> None:
		if self._verbose:
			self._log_fn(msg)

	def update(self, cost: int | float, solution: T, is_known_optimal: bool = False) -> int | float:
		"""
		Record a solution if it is better than the best so far.

		The solution is copied before being stored. When the update wins,
		found_best is set to is_known_optimal.

		Args:
			cost: Cost of the solution
			solution: The solution (copied if stored)
			is_known_optimal: True if cost is provably the minimum

		Returns:
			Best cost after this call, whether or not this update won
		"""
		with self._lock:
			if self._solution is None or cost < self._cost:
				if self._found_best and not is_known_optimal:
					logger.warning(
						"Tracker improved to cost %s after a known optimal "
						"cost %s was reported", cost, self._cost,
					)
				self._solution = copy_candidate(solution)
				self._cost = cost
				self._int_cost = int_mirror(cost)
				self._contains_int_cost = is_int_cost(cost)
				self._found_best = is_known_optimal
				self._when = time.monotonic_ns()
				self._improvements += 1
				self._log(f"{self._prefix}[Tracker] new best={cost}{' (optimal)' if is_known_optimal else ''}")
			return self._cost

	def get_cost(self) -> int:
		"""Integer view of the best cost (sys.maxsize while empty)."""
		return self._int_cost

	def get_cost_double(self) -> float:
		"""Best cost as a float (inf while empty)."""
		return float(self._cost)

	def get_solution(self) -> Optional[T]:
		"""Best solution so far, or None. Callers must not mutate it."""
		return self._solution

	def get_solution_cost_pair(self) -> Optional[SolutionCostPair[T]]:
		"""Consistent snapshot of the best solution, its cost, and found_best."""
		with self._lock:
			if self._solution is None:
				return None
			return SolutionCostPair(
				copy_candidate(self._solution),
				self._cost,
				self._found_best,
			)

	def contains_int_cost(self) -> bool:
		return self._contains_int_cost

	def did_find_best(self) -> bool:
		return self._found_best

	def set_found_best(self) -> None:
		"""Mark the best so far as optimal without supplying a solution."""
		self._found_best = True

	def stop(self) -> None:
		"""Ask every search sharing this tracker to return."""
		self._stopped = True

	def start(self) -> None:
		"""Clear the stop flag."""
		self._stopped = False

	def is_stopped(self) -> bool:
		return self._stopped

	def elapsed(self) -> int:
		"""Nanoseconds from creation of this tracker to the last improvement."""
		return self._when - self._origin

	def time_since_improvement(self) -> int:
		"""Nanoseconds since the last improvement (or creation)."""
		return time.monotonic_ns() - self._when

	@property
	def improvements(self) -> int:
		"""Number of updates that replaced the best solution."""
		return self._improvements

	def summary(self) -> dict:
		"""Get summary of the tracked state."""
		return {
			"cost": self._cost if self._solution is not None else None,
			"found_best": self._found_best,
			"stopped": self._stopped,
			"improvements": self._improvements,
			"elapsed_seconds": self.elapsed() / 1e9,
		}

	def __repr__(self) -> str:
		return (
			f"ProgressTracker(cost={self._cost}, found_best={self._found_best}, "
			f"stopped={self._stopped})"
		)
