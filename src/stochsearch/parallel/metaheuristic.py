"""
Parallel runs of a metaheuristic.

Each thread performs a single run of its own copy of the search; the
result is the best of the parallel runs.

Usage:
	with ParallelMetaheuristic(sa, num_threads=4) as search:
		best = search.optimize(100000)
"""

from typing import Callable, Generic, Optional, TypeVar

from stochsearch.core.capabilities import ResumesFromBest
from stochsearch.core.solution import SolutionCostPair
from stochsearch.parallel.base import ParallelSearchBase, validate_shared_state

T = TypeVar('T')


class ParallelMetaheuristic(ParallelSearchBase[T], Generic[T]):
	"""
	Runs copies of a metaheuristic in parallel, one run per thread.

	Construct either from one search and a thread count (the search is
	split for the other threads), or from a list of searches that solve
	the same problem and share a tracker.
	"""

	def __init__(
		self,
		search,
		num_threads: Optional[int] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		"""
		Args:
			search: A metaheuristic, or a list of metaheuristics
			num_threads: Number of threads (required for a single search)

		Raises:
			ValueError: If num_threads < 1, or listed searches differ in
				problem or tracker
		"""
		if isinstance(search, (list, tuple)):
			validate_shared_state(search, "metaheuristics")
			members = list(search)
		else:
			if search is None:
				raise TypeError("search is required")
			if num_threads is None or num_threads < 1:
				raise ValueError("must be at least 1 thread")
			members = [search] + [search.split() for _ in range(1, num_threads)]
		super().__init__(members, verbose=verbose, logger=logger)

	@property
	def name(self) -> str:
		return "ParallelMetaheuristic"

	def optimize(self, run_length: int) -> Optional[SolutionCostPair[T]]:
		"""One run of run_length per thread. Returns the best run."""
		return self._run_threaded(lambda member: member.optimize(run_length))


class ParallelReoptimizableMetaheuristic(ParallelMetaheuristic[T]):
	"""ParallelMetaheuristic whose threads can resume from the best solution."""

	def __init__(
		self,
		search,
		num_threads: Optional[int] = None,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		searches = search if isinstance(search, (list, tuple)) else [search]
		for s in searches:
			if s is not None and not isinstance(s, ResumesFromBest):
				raise TypeError(f"{type(s).__name__} cannot reoptimize")
		super().__init__(search, num_threads, verbose=verbose, logger=logger)

	@property
	def name(self) -> str:
		return "ParallelReoptimizableMetaheuristic"

	def reoptimize(self, run_length: int) -> Optional[SolutionCostPair[T]]:
		"""One run of run_length per thread, each from the best known solution."""
		return self._run_threaded(lambda member: member.reoptimize(run_length))
