"""
Sequential multistart search.

A Multistarter wraps a metaheuristic that performs fixed length runs and
restarts it according to a RestartSchedule, keeping the best solution it
sees. It stops early when the shared tracker is stopped or already holds a
provably optimal solution.

Usage:
	sa = SimulatedAnnealing(problem, mutation, initializer)
	search = Multistarter(sa, LubyRestarts(1000))
	best = search.optimize(20)
"""

from typing import Callable, Generic, Optional, TypeVar

from stochsearch.core.capabilities import ResumesFromBest
from stochsearch.core.search import SearchBase
from stochsearch.core.solution import SolutionCostPair
from stochsearch.progress import ProgressTracker
from stochsearch.restarts.schedules import ConstantRestartSchedule, RestartSchedule

T = TypeVar('T')


def as_restart_schedule(schedule: RestartSchedule | int) -> RestartSchedule:
	"""Accept either a restart schedule or a constant run length."""
	if isinstance(schedule, RestartSchedule):
		return schedule
	if isinstance(schedule, int) and not isinstance(schedule, bool):
		return ConstantRestartSchedule(schedule)
	raise TypeError(f"Expected RestartSchedule or int, got {type(schedule).__name__}")


class Multistarter(SearchBase, Generic[T]):
	"""Restarts a metaheuristic according to a restart schedule."""

	def __init__(
		self,
		search,
		schedule: RestartSchedule | int,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		"""
		Args:
			search: Metaheuristic with optimize(run_length)
			schedule: Restart schedule, or a constant run length
			verbose: Log every restart
			logger: Callable that logs messages (default: print)

		Raises:
			TypeError: If search is missing
			ValueError: If schedule is a run length below 1
		"""
		super().__init__(verbose=verbose, logger=logger)
		if search is None:
			raise TypeError("search is required")
		self._search = search
		self._schedule = as_restart_schedule(schedule)

	@property
	def name(self) -> str:
		return f"Multistart({getattr(self._search, 'name', type(self._search).__name__)})"

	@property
	def search(self):
		return self._search

	@property
	def restart_schedule(self) -> RestartSchedule:
		return self._schedule

	@property
	def problem(self):
		return self._search.problem

	@property
	def progress_tracker(self) -> ProgressTracker[T]:
		return self._search.progress_tracker

	@progress_tracker.setter
	def progress_tracker(self, tracker: ProgressTracker[T]) -> None:
		self._search.progress_tracker = tracker

	@property
	def total_run_length(self) -> int:
		"""Evaluations consumed by the wrapped search."""
		return self._search.total_run_length

	def optimize(self, num_restarts: int) -> Optional[SolutionCostPair[T]]:
		"""
		Perform up to num_restarts runs of the search.

		Returns:
			Best solution of the runs this call performed, or None if no run
			produced one
		"""
		return self._restart(num_restarts, self._search.optimize)

	def _restart(self, num_restarts: int, run) -> Optional[SolutionCostPair[T]]:
		tracker = self._search.progress_tracker
		best = None
		i = 0
		while i < num_restarts and not tracker.is_stopped() and not tracker.did_find_best():
			run_length = self._schedule.next_run_length()
			current = run(run_length)
			if current is not None and (best is None or current < best):
				best = current
			i += 1
			self._log(
				f"[Restart {i}] run_length={run_length}, "
				f"cost={current.cost if current is not None else None}, "
				f"best={best.cost if best is not None else None}"
			)
		return best

	def split(self) -> 'Multistarter[T]':
		return Multistarter(
			self._search.split(),
			self._schedule.split(),
			verbose=self._verbose,
			logger=self._logger,
		)


class ReoptimizableMultistarter(Multistarter[T]):
	"""Multistarter that can also restart every run from the best known solution."""

	def __init__(
		self,
		search,
		schedule: RestartSchedule | int,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		if search is not None and not isinstance(search, ResumesFromBest):
			raise TypeError(f"{type(search).__name__} cannot reoptimize")
		super().__init__(search, schedule, verbose=verbose, logger=logger)

	def reoptimize(self, num_restarts: int) -> Optional[SolutionCostPair[T]]:
		"""Like optimize(), but each run resumes from the tracker's best solution."""
		return self._restart(num_restarts, self._search.reoptimize)

	def split(self) -> 'ReoptimizableMultistarter[T]':
		return ReoptimizableMultistarter(
			self._search.split(),
			self._schedule.split(),
			verbose=self._verbose,
			logger=self._logger,
		)
