"""
Hill climbing over enumerable neighborhoods.

Both climbers move from a candidate to an improving neighbor until no
neighbor improves, i.e. until a local optimum is reached:

- FirstDescentHillClimber: takes the first improving neighbor found
- SteepestDescentHillClimber: scans the whole neighborhood and takes the
  best neighbor

Neighborhoods are enumerated with an IterableMutationOperator. The run
length of a climber is the number of neighbors it has evaluated. Every
local optimum reached is reported to the ProgressTracker.

Climbers can be used on their own (optimize(num_restarts)) or attached to
SimulatedAnnealing to polish each run's end solution.
"""

from abc import abstractmethod
from typing import Callable, Generic, Optional, TypeVar

from stochsearch.core.operators import Initializer, IterableMutationOperator
from stochsearch.core.search import SearchBase
from stochsearch.core.solution import SolutionCostPair, copy_candidate
from stochsearch.progress import ProgressTracker

T = TypeVar('T')


class HillClimberBase(SearchBase, Generic[T]):
	"""
	Abstract hill climber.

	Subclasses must implement:
	- _climb_once(): climb from a candidate to a local optimum, in place,
	  returning the final cost
	- name property
	- split()
	"""

	def __init__(
		self,
		problem,
		mutation: IterableMutationOperator[T],
		initializer: Initializer[T],
		tracker: Optional[ProgressTracker[T]] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		super().__init__(verbose=verbose, logger=logger)
		if problem is None or mutation is None or initializer is None:
			raise TypeError("problem, mutation and initializer are required")
		self._problem = problem
		self._mutation = mutation
		self._initializer = initializer
		self._tracker = tracker if tracker is not None else ProgressTracker()
		self._neighbor_count = 0

	@property
	def problem(self):
		return self._problem

	@property
	def progress_tracker(self) -> ProgressTracker[T]:
		return self._tracker

	@progress_tracker.setter
	def progress_tracker(self, tracker: ProgressTracker[T]) -> None:
		if tracker is not None:
			self._tracker = tracker

	@property
	def total_run_length(self) -> int:
		"""Number of neighbors evaluated over all climbs."""
		return self._neighbor_count

	def optimize(self, num_restarts: int = 1) -> Optional[SolutionCostPair[T]]:
		"""
		Climb from num_restarts random candidates.

		Returns:
			Best local optimum found, or None if the tracker was already
			stopped or already holds a provably optimal solution
		"""
		if self._tracker.did_find_best() or self._tracker.is_stopped():
			return None
		best = None
		for i in range(num_restarts):
			if self._tracker.did_find_best() or self._tracker.is_stopped():
				break
			current = self._climb(self._initializer.create_candidate_solution())
			if best is None or current < best:
				best = current
			self._log(f"[{self.name}] restart {i + 1}/{num_restarts}: cost={current.cost}, best={best.cost}")
		return best

	def climb(self, start: T) -> Optional[SolutionCostPair[T]]:
		"""Climb from a copy of start."""
		if self._tracker.did_find_best() or self._tracker.is_stopped():
			return None
		return self._climb(copy_candidate(start))

	def _climb(self, current: T) -> SolutionCostPair[T]:
		cost = self._climb_once(current)
		is_optimal = self._problem.is_min_cost(cost)
		if cost < self._tracker.get_cost_double():
			self._tracker.update(cost, current, is_optimal)
		return SolutionCostPair(current, cost, is_optimal)

	@abstractmethod
	def _climb_once(self, current: T) -> int | float:
		...


class FirstDescentHillClimber(HillClimberBase[T]):
	"""Hill climber taking the first improving neighbor."""

	@property
	def name(self) -> str:
		return "FirstDescent"

	def _climb_once(self, current: T) -> int | float:
		cost = self._problem.cost(current)
		keep_climbing = True
		while keep_climbing:
			keep_climbing = False
			neighbors = self._mutation.iterator(current)
			while neighbors.has_next():
				neighbors.next_mutant()
				self._neighbor_count += 1
				neighbor_cost = self._problem.cost(current)
				if neighbor_cost < cost:
					cost = neighbor_cost
					keep_climbing = True
					break
			if not keep_climbing:
				neighbors.rollback()
		return cost

	def split(self) -> 'FirstDescentHillClimber[T]':
		return FirstDescentHillClimber(
			self._problem,
			self._mutation.split(),
			self._initializer.split(),
			self._tracker,
			verbose=self._verbose,
			logger=self._logger,
		)


class SteepestDescentHillClimber(HillClimberBase[T]):
	"""Hill climber taking the best neighbor of each neighborhood."""

	@property
	def name(self) -> str:
		return "SteepestDescent"

	def _climb_once(self, current: T) -> int | float:
		cost = self._problem.cost(current)
		while True:
			neighbors = self._mutation.iterator(current)
			best_neighbor_cost = cost
			while neighbors.has_next():
				neighbors.next_mutant()
				self._neighbor_count += 1
				neighbor_cost = self._problem.cost(current)
				if neighbor_cost < best_neighbor_cost:
					neighbors.set_savepoint()
					best_neighbor_cost = neighbor_cost
			neighbors.rollback()
			if best_neighbor_cost == cost:
				return cost
			cost = best_neighbor_cost

	def split(self) -> 'SteepestDescentHillClimber[T]':
		return SteepestDescentHillClimber(
			self._problem,
			self._mutation.split(),
			self._initializer.split(),
			self._tracker,
			verbose=self._verbose,
			logger=self._logger,
		)
