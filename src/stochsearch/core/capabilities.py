"""
Capability protocols shared by searches and search coordinators.

Concrete searches compose these instead of inheriting from a deep
hierarchy:

- RunsFixedLength: optimize(run_length) performs one bounded run
- ResumesFromBest: reoptimize(run_length) continues from the best known
- Splittable: split() yields an independent copy for another thread
- TracksProgress: shares a ProgressTracker and exposes its problem

Coordinators check these at construction time, e.g. a reoptimizable
multistarter requires its search to be ResumesFromBest.
"""

from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

from stochsearch.core.solution import SolutionCostPair

if TYPE_CHECKING:
	from stochsearch.progress import ProgressTracker


@runtime_checkable
class Splittable(Protocol):
	def split(self) -> Any: ...


@runtime_checkable
class RunsFixedLength(Protocol):
	def optimize(self, run_length: int) -> Optional[SolutionCostPair]: ...


@runtime_checkable
class ResumesFromBest(Protocol):
	def reoptimize(self, run_length: int) -> Optional[SolutionCostPair]: ...


@runtime_checkable
class TracksProgress(Protocol):
	@property
	def progress_tracker(self) -> 'ProgressTracker': ...

	@property
	def problem(self) -> Any: ...

	@property
	def total_run_length(self) -> int: ...


@runtime_checkable
class Metaheuristic(RunsFixedLength, Splittable, TracksProgress, Protocol):
	"""Search performing fixed length runs that report to a shared tracker."""


@runtime_checkable
class ReoptimizableMetaheuristic(Metaheuristic, ResumesFromBest, Protocol):
	"""Metaheuristic that can also restart from the best solution so far."""
