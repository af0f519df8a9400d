"""
Parallel multistart search.

Every thread runs its own Multistarter: a copy of the search restarted
according to its own restart schedule. All threads share one
ProgressTracker, so a thread that finds a provably optimal solution, or a
stop() on the tracker, ends the others at their next evaluation.

Usage:
	sa = SimulatedAnnealing(problem, mutation, initializer)
	with ParallelMultistarter(sa, LubyRestarts(1000), num_threads=8) as search:
		best = search.optimize(10)

Forms accepted by the constructor:
	ParallelMultistarter(search, run_length_or_schedule, num_threads)
	ParallelMultistarter(search, [schedule, ...])
	ParallelMultistarter([search, ...], [schedule, ...])
	ParallelMultistarter([search, ...], run_length)
	ParallelMultistarter(multistarter, num_threads)
	ParallelMultistarter([multistarter, ...])
"""

from typing import Callable, Generic, Optional, TypeVar

from stochsearch.core.solution import SolutionCostPair
from stochsearch.parallel.base import ParallelSearchBase, validate_shared_state
from stochsearch.restarts.multistarter import (
	Multistarter,
	ReoptimizableMultistarter,
	as_restart_schedule,
)
from stochsearch.restarts.schedules import RestartSchedule

T = TypeVar('T')


class ParallelMultistarter(ParallelSearchBase[T], Generic[T]):
	"""Runs one Multistarter per thread and returns the best result."""

	multistarter_class = Multistarter

	def __init__(
		self,
		search,
		schedule: RestartSchedule | int | list | None = None,
		num_threads: Optional[int] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		"""
		Args:
			search: A search, a list of searches, a Multistarter, or a list
				of Multistarters
			schedule: Run length, restart schedule, or list of schedules
				(one per thread)
			num_threads: Thread count, for the single search and single
				Multistarter forms

		Raises:
			ValueError: On invalid counts or lengths, or if the searches do
				not all solve the same problem with the same tracker
			TypeError: If a required argument is missing
		"""
		members = self._build_multistarters(search, schedule, num_threads)
		super().__init__(members, verbose=verbose, logger=logger)

	def _build_multistarters(self, search, schedule, num_threads) -> list:
		cls = self.multistarter_class
		if isinstance(search, (list, tuple)):
			if schedule is None:
				for m in search:
					if not isinstance(m, cls):
						raise TypeError(f"Expected {cls.__name__} instances, got {type(m).__name__}")
				validate_shared_state(search, "Multistarters")
				return list(search)
			if isinstance(schedule, (list, tuple)):
				if len(search) != len(schedule):
					raise ValueError("number of searches and number of schedules must be the same")
				validate_shared_state(search, "metaheuristics")
				return [cls(s, r) for s, r in zip(search, schedule)]
			validate_shared_state(search, "metaheuristics")
			if isinstance(schedule, RestartSchedule):
				return [cls(s, schedule if i == 0 else schedule.split()) for i, s in enumerate(search)]
			if schedule < 1:
				raise ValueError("runLength must be at least 1")
			return [cls(s, schedule) for s in search]

		if search is None:
			raise TypeError("search is required")

		if isinstance(search, Multistarter):
			if not isinstance(search, cls):
				raise TypeError(f"Expected {cls.__name__}, got {type(search).__name__}")
			threads = num_threads if num_threads is not None else schedule
			if threads is None or threads < 1:
				raise ValueError("must be at least 1 thread")
			return [search] + [search.split() for _ in range(1, threads)]

		if isinstance(schedule, (list, tuple)):
			if not schedule:
				raise ValueError("must be at least 1 thread")
			members = [cls(search, schedule[0])]
			members.extend(cls(search.split(), r) for r in schedule[1:])
			return members

		if num_threads is None or num_threads < 1:
			raise ValueError("must be at least 1 thread")
		if schedule is None:
			raise TypeError("run length or restart schedule is required")
		if not isinstance(schedule, RestartSchedule) and schedule < 1:
			raise ValueError("runLength must be at least 1")
		first = as_restart_schedule(schedule)
		members = [cls(search, first)]
		members.extend(cls(search.split(), first.split()) for _ in range(1, num_threads))
		return members

	@property
	def name(self) -> str:
		return "ParallelMultistarter"

	def optimize(self, num_restarts: int) -> Optional[SolutionCostPair[T]]:
		"""
		Each thread performs up to num_restarts restarts.

		Raises:
			RuntimeError: If the coordinator was closed
		"""
		return self._run_threaded(lambda member: member.optimize(num_restarts))


class ParallelReoptimizableMultistarter(ParallelMultistarter[T]):
	"""ParallelMultistarter whose restarts can resume from the best solution."""

	multistarter_class = ReoptimizableMultistarter

	@property
	def name(self) -> str:
		return "ParallelReoptimizableMultistarter"

	def reoptimize(self, num_restarts: int) -> Optional[SolutionCostPair[T]]:
		"""Like optimize(), but each restart begins from the best known solution."""
		return self._run_threaded(lambda member: member.reoptimize(num_restarts))
