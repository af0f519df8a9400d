"""
Shared machinery of the parallel search coordinators.

A coordinator owns a list of member searches (one per thread) that all
solve the same problem and share one ProgressTracker, plus a fixed size
thread pool. Each call runs one task per member on the pool and waits
for all of them. The best result wins (ties go to the earliest member).
If any member raised, the first exception (in member order) is re-raised
once every member has finished.

Coordinators are context managers; leaving the block closes the pool.
"""

import logging
from abc import abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Generic, List, Optional, TypeVar

from stochsearch.core.search import SearchBase
from stochsearch.core.solution import SolutionCostPair
from stochsearch.progress import ProgressTracker

T = TypeVar('T')

logger = logging.getLogger(__name__)


def validate_shared_state(members: list, kind: str) -> None:
	"""
	Check that all members solve one problem and share one tracker.

	Raises:
		ValueError: If members is empty, or problems or trackers differ
	"""
	if not members:
		raise ValueError("must be at least 1 thread")
	problem = members[0].problem
	tracker = members[0].progress_tracker
	for member in members[1:]:
		if member.problem is not problem:
			raise ValueError(f"All {kind} in searches must solve the same problem.")
		if member.progress_tracker is not tracker:
			raise ValueError(f"All {kind} must share a single ProgressTracker.")


class ParallelSearchBase(SearchBase, Generic[T]):
	"""
	Abstract coordinator running member searches on a thread pool.

	Subclasses must implement:
	- name property
	"""

	def __init__(
		self,
		members: list,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		super().__init__(verbose=verbose, logger=logger)
		if not members:
			raise ValueError("must be at least 1 thread")
		self._members = list(members)
		self._pool = ThreadPoolExecutor(
			max_workers=len(self._members),
			thread_name_prefix=self.__class__.__name__,
		)
		self._closed = False

	@property
	def members(self) -> List:
		"""Member searches, one per thread."""
		return list(self._members)

	@property
	def num_threads(self) -> int:
		return len(self._members)

	@property
	def problem(self):
		return self._members[0].problem

	@property
	def progress_tracker(self) -> ProgressTracker[T]:
		return self._members[0].progress_tracker

	@progress_tracker.setter
	def progress_tracker(self, tracker: ProgressTracker[T]) -> None:
		if tracker is not None:
			for member in self._members:
				member.progress_tracker = tracker

	@property
	def total_run_length(self) -> int:
		"""Sum of the run lengths of all members."""
		return sum(member.total_run_length for member in self._members)

	def close(self) -> None:
		"""Shut down the thread pool. Later searches raise RuntimeError."""
		if not self._closed:
			self._closed = True
			self._pool.shutdown(wait=True)

	def is_closed(self) -> bool:
		return self._closed

	def __enter__(self):
		return self

	def __exit__(self, exc_type, exc_val, exc_tb) -> None:
		self.close()

	def _check_open(self) -> None:
		if self._closed:
			raise RuntimeError(f"This {self.__class__.__name__} was previously closed.")

	def _run_threaded(self, task: Callable) -> Optional[SolutionCostPair[T]]:
		"""
		Run task(member) for every member on the pool and combine results.

		Nothing is submitted if the tracker is already stopped or already
		holds a provably optimal solution.
		"""
		self._check_open()
		tracker = self.progress_tracker
		if tracker.is_stopped() or tracker.did_find_best():
			return None
		futures = [self._pool.submit(task, member) for member in self._members]
		return self._collect(futures)

	def _collect(self, futures: list) -> Optional[SolutionCostPair[T]]:
		best = None
		error = None
		for i, future in enumerate(futures):
			try:
				pair = future.result()
			except Exception as e:
				logger.error("%s thread %d failed: %r", self.name, i, e)
				if error is None:
					error = e
				continue
			if pair is not None and (best is None or pair < best):
				best = pair
		if error is not None:
			raise error
		self._log(f"[{self.name}] {len(futures)} threads done, best={best.cost if best is not None else None}")
		return best

	def _copy_members(self) -> list:
		return [member.split() for member in self._members]

	def split(self) -> 'ParallelSearchBase[T]':
		"""
		Coordinator over splits of every member, with its own pool.

		The copy is closed if this coordinator is closed.
		"""
		twin = self.__class__(self._copy_members(), verbose=self._verbose, logger=self._logger)
		if self._closed:
			twin.close()
		return twin

	@property
	@abstractmethod
	def name(self) -> str:
		...

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(threads={len(self._members)}, closed={self._closed})"
