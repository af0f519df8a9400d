"""
Candidate solutions paired with their costs.
"""

import copy
import math
import sys
from dataclasses import dataclass, field
from numbers import Integral
from typing import Generic, TypeVar

T = TypeVar('T')

# Integer mirror used while no finite integer cost is known
INT_COST_UNKNOWN = sys.maxsize


def copy_candidate(candidate: T) -> T:
	"""
	Return an independent duplicate of a candidate solution.

	Uses the candidate's own copy() when it has one (numpy arrays, lists,
	user representation classes), otherwise falls back to a deep copy.
	"""
	copier = getattr(candidate, "copy", None)
	if callable(copier):
		return copier()
	return copy.deepcopy(candidate)


def is_int_cost(cost) -> bool:
	return isinstance(cost, Integral) and not isinstance(cost, bool)


def int_mirror(cost) -> int:
	"""Integer view of a cost: itself if integral, else rounded half up."""
	if is_int_cost(cost):
		return int(cost)
	if math.isfinite(cost):
		return math.floor(cost + 0.5)
	return INT_COST_UNKNOWN if cost > 0 else -INT_COST_UNKNOWN - 1


@dataclass(frozen=True, order=True)
class SolutionCostPair(Generic[T]):
	"""
	A solution together with its cost.

	Immutable. Ordered by cost only (lower is better), so min() over a
	collection of pairs yields the best one, and sorting is stable with
	respect to the order solutions were found.
	"""
	solution: T = field(compare=False)
	cost: int | float
	is_known_optimal: bool = field(default=False, compare=False)

	@property
	def contains_int_cost(self) -> bool:
		return is_int_cost(self.cost)

	@property
	def cost_double(self) -> float:
		return float(self.cost)

	@property
	def int_cost(self) -> int:
		return int_mirror(self.cost)

	def __repr__(self) -> str:
		return (
			f"SolutionCostPair(cost={self.cost}, "
			f"is_known_optimal={self.is_known_optimal})"
		)
