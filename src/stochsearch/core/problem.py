"""
Optimization problem contracts.

Concrete problems live outside this library. Searches only need the
cost of a candidate and a way to recognize a provably optimal cost.
"""

import math
import sys
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar('T')


class OptimizationProblem(ABC, Generic[T]):
	"""
	Problem with real valued costs. Lower cost is better.

	Subclasses must implement:
	- cost(): cost of a candidate solution

	min_cost() defaults to -inf, in which case no cost is ever recognized
	as optimal. Override it (or is_min_cost) when a lower bound is known.
	"""

	@abstractmethod
	def cost(self, candidate: T) -> float:
		...

	def min_cost(self) -> float:
		return -math.inf

	def is_min_cost(self, cost: float) -> bool:
		return cost == self.min_cost()

	def value(self, candidate: T) -> float:
		"""Problem specific value of a candidate. Defaults to its cost."""
		return self.cost(candidate)


class IntegerCostOptimizationProblem(OptimizationProblem[T]):
	"""Problem whose costs are integers."""

	@abstractmethod
	def cost(self, candidate: T) -> int:
		...

	def min_cost(self) -> int:
		return -sys.maxsize - 1

	def value(self, candidate: T) -> int:
		return self.cost(candidate)
