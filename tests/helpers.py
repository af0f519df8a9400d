"""
Small problems, operators and scripted searches used by the tests.
"""

import threading
import time
from typing import Optional

import numpy as np

from stochsearch.core.operators import (
	Initializer,
	IterableMutationOperator,
	MutationIterator,
	MutationOperator,
	UndoableMutationOperator,
)
from stochsearch.core.problem import IntegerCostOptimizationProblem, OptimizationProblem
from stochsearch.core.rand import SplittableGenerator
from stochsearch.core.solution import SolutionCostPair
from stochsearch.progress import ProgressTracker


class OnesCount(IntegerCostOptimizationProblem):
	"""Cost is the number of ones in a bit vector; the all-zero vector is optimal."""

	def cost(self, candidate: np.ndarray) -> int:
		return int(candidate.sum())

	def min_cost(self) -> int:
		return 0


class OnesCountNoBound(OnesCount):
	"""Same costs, but the optimum is never recognized."""

	def is_min_cost(self, cost) -> bool:
		return False


class WeightedOnes(OptimizationProblem):
	"""Real valued variant: each one costs 0.5 plus its index / 100."""

	def cost(self, candidate: np.ndarray) -> float:
		return float(sum(0.5 + i / 100 for i, bit in enumerate(candidate) if bit))

	def min_cost(self) -> float:
		return 0.0


class BitFlip(UndoableMutationOperator):
	"""Flips one random bit; undo flips it back."""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		self._rng = rng if rng is not None else SplittableGenerator(11)
		self._last = -1
		self.mutations = 0
		self.undos = 0

	def mutate(self, candidate: np.ndarray) -> None:
		self._last = self._rng.integers(len(candidate))
		candidate[self._last] ^= 1
		self.mutations += 1

	def undo(self, candidate: np.ndarray) -> None:
		candidate[self._last] ^= 1
		self.undos += 1

	def split(self) -> 'BitFlip':
		return BitFlip(self._rng.split())


class BitFlipNoUndo(MutationOperator):
	"""Flips one random bit and cannot undo."""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		self._rng = rng if rng is not None else SplittableGenerator(13)

	def mutate(self, candidate: np.ndarray) -> None:
		candidate[self._rng.integers(len(candidate))] ^= 1

	def split(self) -> 'BitFlipNoUndo':
		return BitFlipNoUndo(self._rng.split())


class BitFlipIterator(MutationIterator):
	"""Enumerates the single bit flip neighbors of a bit vector."""

	def __init__(self, candidate: np.ndarray):
		self._candidate = candidate
		self._next = 0
		self._current = -1
		self._saved = -1

	def has_next(self) -> bool:
		return self._next < len(self._candidate)

	def next_mutant(self) -> None:
		if self._current >= 0:
			self._candidate[self._current] ^= 1
		self._current = self._next
		self._candidate[self._current] ^= 1
		self._next += 1

	def set_savepoint(self) -> None:
		self._saved = self._current

	def rollback(self) -> None:
		if self._current >= 0:
			self._candidate[self._current] ^= 1
			self._current = -1
		if self._saved >= 0:
			self._candidate[self._saved] ^= 1
			self._saved = -1
		self._next = len(self._candidate)


class IterableBitFlip(IterableMutationOperator, BitFlip):
	"""BitFlip whose neighborhood can be enumerated."""

	def iterator(self, candidate: np.ndarray) -> BitFlipIterator:
		return BitFlipIterator(candidate)

	def split(self) -> 'IterableBitFlip':
		return IterableBitFlip(self._rng.split())


class RandomBits(Initializer):
	"""Random bit vectors of a fixed length."""

	def __init__(self, n: int, rng: Optional[SplittableGenerator] = None):
		self._n = n
		self._rng = rng if rng is not None else SplittableGenerator(17)

	def create_candidate_solution(self) -> np.ndarray:
		return self._rng.generator.integers(0, 2, size=self._n).astype(np.int8)

	def split(self) -> 'RandomBits':
		return RandomBits(self._n, self._rng.split())


class FixedBits(Initializer):
	"""Always the same starting vector."""

	def __init__(self, bits):
		self._bits = np.array(bits, dtype=np.int8)

	def create_candidate_solution(self) -> np.ndarray:
		return self._bits.copy()

	def split(self) -> 'FixedBits':
		return FixedBits(self._bits)


class ScriptedSearch:
	"""
	Metaheuristic double that only counts evaluations.

	Each run consumes its full run length, except that the run crossing
	stop_at_eval ends there and stops the tracker, and the run crossing
	find_best_at_eval ends there reporting a known optimal cost of 1.
	Runs return costs 1000, 999, 998, ... unless cost_offset is set.
	"""

	def __init__(
		self,
		tracker: Optional[ProgressTracker] = None,
		problem=None,
		stop_at_eval: Optional[int] = None,
		find_best_at_eval: Optional[int] = None,
		delay: float = 0.0,
		fail_with: Optional[Exception] = None,
		cost_offset: int = 0,
	):
		self._tracker = tracker if tracker is not None else ProgressTracker()
		self._problem = problem if problem is not None else OnesCount()
		self._stop_at = stop_at_eval
		self._best_at = find_best_at_eval
		self._delay = delay
		self._fail_with = fail_with
		self._cost_offset = cost_offset
		self._lock = threading.Lock()
		self.elapsed = 0
		self.optimize_calls = []
		self.reoptimize_calls = []
		self.splits = []

	@property
	def problem(self):
		return self._problem

	@property
	def progress_tracker(self) -> ProgressTracker:
		return self._tracker

	@progress_tracker.setter
	def progress_tracker(self, tracker: ProgressTracker) -> None:
		if tracker is not None:
			self._tracker = tracker

	@property
	def total_run_length(self) -> int:
		return self.elapsed

	def optimize(self, run_length: int) -> Optional[SolutionCostPair]:
		self.optimize_calls.append(run_length)
		return self._run(run_length)

	def reoptimize(self, run_length: int) -> Optional[SolutionCostPair]:
		self.reoptimize_calls.append(run_length)
		return self._run(run_length)

	def _run(self, run_length: int) -> Optional[SolutionCostPair]:
		if self._tracker.is_stopped() or self._tracker.did_find_best():
			return None
		if self._fail_with is not None:
			raise self._fail_with
		if self._delay:
			time.sleep(self._delay)
		runs = len(self.optimize_calls) + len(self.reoptimize_calls)
		cost = 1000 - runs + self._cost_offset
		self.elapsed += run_length
		if self._stop_at is not None and self.elapsed >= self._stop_at:
			self.elapsed = self._stop_at
			self._tracker.stop()
		if self._best_at is not None and self.elapsed >= self._best_at:
			self.elapsed = self._best_at
			cost = 1
			self._tracker.update(cost, [cost], True)
			return SolutionCostPair([cost], cost, True)
		self._tracker.update(cost, [cost], False)
		return SolutionCostPair([cost], cost, False)

	def split(self) -> 'ScriptedSearch':
		twin = ScriptedSearch(
			self._tracker,
			self._problem,
			self._stop_at,
			self._best_at,
			self._delay,
			self._fail_with,
			self._cost_offset,
		)
		self.splits.append(twin)
		return twin


class FixedLengthOnly(ScriptedSearch):
	"""ScriptedSearch without reoptimize."""

	reoptimize = None
