"""
Simulated annealing.

One run starts from a candidate (random, given, or the best known), then
repeatedly mutates it and asks the annealing schedule whether to keep the
mutant. Worse neighbors are kept with a probability that shrinks as the
schedule cools, which lets the search escape local minima early and
settle into one late. Every improvement on the best known solution is
published to the shared ProgressTracker.

The engine polls the tracker before every evaluation and returns as soon
as it is stopped, or as soon as a provably optimal solution is known.

Usage:
	sa = SimulatedAnnealing(problem, mutation, initializer)   # SelfTuningLam
	result = sa.optimize(100000)
	print(result.cost, sa.total_run_length)
"""

from typing import Callable, Generic, Optional, TypeVar

from stochsearch.core.operators import Initializer, MutationOperator, SupportsUndo
from stochsearch.core.search import SearchBase
from stochsearch.core.solution import SolutionCostPair, copy_candidate
from stochsearch.progress import ProgressTracker
from stochsearch.sa.base import AnnealingSchedule
from stochsearch.sa.lam import SelfTuningLam

T = TypeVar('T')


class SimulatedAnnealing(SearchBase, Generic[T]):
	"""
	Simulated annealing over an arbitrary representation.

	Mutation operators that can undo (see SupportsUndo) revert a rejected
	neighbor in place. Other operators are supported by keeping a copy of
	the candidate from before each mutation and restoring it on rejection.

	An optional hill climber post-processes the end-of-run solution. It must
	solve the same problem and is made to share this engine's tracker.
	"""

	def __init__(
		self,
		problem,
		mutation: MutationOperator[T],
		initializer: Initializer[T],
		schedule: Optional[AnnealingSchedule] = None,
		tracker: Optional[ProgressTracker[T]] = None,
		hill_climber=None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		"""
		Args:
			problem: Problem with cost() and is_min_cost()
			mutation: Operator producing random neighbors in place
			initializer: Source of random starting candidates
			schedule: Annealing schedule (default: SelfTuningLam)
			tracker: Shared progress tracker (default: a new tracker)
			hill_climber: Optional local search applied to each run's result
			verbose: Log a line at the end of every run
			logger: Callable that logs messages (default: print)

		Raises:
			TypeError: If problem, mutation or initializer is missing
			ValueError: If hill_climber solves a different problem
		"""
		super().__init__(verbose=verbose, logger=logger)
		if problem is None or mutation is None or initializer is None:
			raise TypeError("problem, mutation and initializer are required")
		self._problem = problem
		self._mutation = mutation
		self._initializer = initializer
		self._schedule = schedule if schedule is not None else SelfTuningLam()
		self._tracker = tracker if tracker is not None else ProgressTracker()
		self._can_undo = isinstance(mutation, SupportsUndo)
		self._hill_climber = hill_climber
		if hill_climber is not None:
			if hill_climber.problem is not problem:
				raise ValueError("hc must be configured with the same problem.")
			if hill_climber.progress_tracker is not self._tracker:
				hill_climber.progress_tracker = self._tracker
		self._elapsed_evals = 0

	@property
	def name(self) -> str:
		return "SimulatedAnnealing"

	@property
	def problem(self):
		return self._problem

	@property
	def mutation(self):
		return self._mutation

	@property
	def schedule(self) -> AnnealingSchedule:
		return self._schedule

	@property
	def progress_tracker(self) -> ProgressTracker[T]:
		return self._tracker

	@progress_tracker.setter
	def progress_tracker(self, tracker: ProgressTracker[T]) -> None:
		if tracker is not None:
			self._tracker = tracker
			if self._hill_climber is not None:
				self._hill_climber.progress_tracker = tracker

	@property
	def total_run_length(self) -> int:
		"""Evaluations performed by this instance over all its runs."""
		total = self._elapsed_evals
		if self._hill_climber is not None:
			total += self._hill_climber.total_run_length
		return total

	def optimize(self, run_length: int, start: Optional[T] = None) -> Optional[SolutionCostPair[T]]:
		"""
		Run simulated annealing for run_length evaluations.

		Args:
			run_length: Number of neighbor evaluations
			start: Optional starting candidate (copied); random if omitted

		Returns:
			The end-of-run solution and cost, or None if the tracker was
			already stopped or already holds a provably optimal solution
		"""
		if self._tracker.did_find_best() or self._tracker.is_stopped():
			return None
		if start is not None:
			current = copy_candidate(start)
		else:
			current = self._initializer.create_candidate_solution()
		return self._run(run_length, current)

	def reoptimize(self, run_length: int) -> Optional[SolutionCostPair[T]]:
		"""
		Run simulated annealing starting from the tracker's best solution.

		Starts from a random candidate if the tracker is still empty.
		"""
		if self._tracker.did_find_best() or self._tracker.is_stopped():
			return None
		best = self._tracker.get_solution()
		if best is not None:
			current = copy_candidate(best)
		else:
			current = self._initializer.create_candidate_solution()
		return self._run(run_length, current)

	def _run(self, run_length: int, current: T) -> Optional[SolutionCostPair[T]]:
		problem = self._problem
		tracker = self._tracker

		cost = problem.cost(current)
		best_cost = tracker.get_cost_double()
		if cost < best_cost:
			best_cost = tracker.update(cost, current, problem.is_min_cost(cost))
			if tracker.did_find_best():
				return SolutionCostPair(current, cost, problem.is_min_cost(cost))

		self._schedule.init(run_length)
		for i in range(1, run_length + 1):
			if tracker.is_stopped():
				self._elapsed_evals += i - 1
				self._log(f"[SA] stopped after {i - 1}/{run_length} evals, cost={cost}")
				return SolutionCostPair(current, cost, problem.is_min_cost(cost))

			if self._can_undo:
				self._mutation.mutate(current)
			else:
				previous = copy_candidate(current)
				self._mutation.mutate(current)
			neighbor_cost = problem.cost(current)

			if self._schedule.accept(neighbor_cost, cost):
				cost = neighbor_cost
				if cost < best_cost:
					best_cost = tracker.update(cost, current, problem.is_min_cost(cost))
					if tracker.did_find_best():
						self._elapsed_evals += i
						self._log(f"[SA] optimal cost={cost} found after {i} evals")
						return SolutionCostPair(current, cost, problem.is_min_cost(cost))
			elif self._can_undo:
				self._mutation.undo(current)
			else:
				current = previous

		self._elapsed_evals += run_length
		self._log(
			f"[SA] run complete: evals={run_length}, cost={cost}, "
			f"best={best_cost}, T={self._schedule.temperature:.6g}"
		)
		if self._hill_climber is not None:
			refined = self._hill_climber.climb(current)
			if refined is not None:
				return refined
		return SolutionCostPair(current, cost, problem.is_min_cost(cost))

	def split(self) -> 'SimulatedAnnealing[T]':
		"""
		Independent copy for use by another thread.

		Shares the problem and tracker. Mutation, initializer, schedule and
		hill climber are split. The copy's run length count starts at 0.
		"""
		return SimulatedAnnealing(
			self._problem,
			self._mutation.split(),
			self._initializer.split(),
			self._schedule.split(),
			self._tracker,
			self._hill_climber.split() if self._hill_climber is not None else None,
			verbose=self._verbose,
			logger=self._logger,
		)

	def __repr__(self) -> str:
		return f"SimulatedAnnealing(schedule={self._schedule!r}, evals={self._elapsed_evals})"
