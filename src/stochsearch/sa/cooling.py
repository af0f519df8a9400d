"""
Classic cooling schedules with fixed parameters.

- ExponentialCooling: t <- alpha * t every `steps` evaluations
- LinearCooling: t <- t - delta_t every `steps` evaluations
- LogarithmicCooling: t = t0 / ln(e + i) after evaluation i

Exponential and linear cooling stop once the temperature drops to the
floor of 0.001. Linear cooling lands on the floor exactly.
"""

import math
from typing import Optional

from stochsearch.core.rand import SplittableGenerator
from stochsearch.sa.base import AnnealingSchedule, TEMPERATURE_FLOOR


class ExponentialCooling(AnnealingSchedule):
	"""
	Exponential (geometric) cooling.

	Parameters:
	- t0: initial temperature, must be positive
	- alpha: cooling rate, in (0, 1)
	- steps: evaluations between temperature changes (<= 0 means 1)
	"""

	def __init__(
		self,
		t0: float,
		alpha: float,
		steps: int = 1,
		rng: Optional[SplittableGenerator] = None,
	):
		if t0 <= 0:
			raise ValueError("Initial temperature must be positive")
		if alpha <= 0 or alpha >= 1:
			raise ValueError("alpha must be in interval (0,1)")
		super().__init__(rng)
		self._t0 = t0
		self._alpha = alpha
		self._steps = steps if steps > 0 else 1
		self._step_counter = 0
		self._t = t0

	def init(self, max_evals: int) -> None:
		self._t = self._t0
		self._step_counter = 0

	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		accepted = self._metropolis(neighbor_cost, current_cost)
		self._step_counter += 1
		if self._step_counter == self._steps and self._t > TEMPERATURE_FLOOR:
			self._step_counter = 0
			self._t *= self._alpha
		return accepted

	def split(self) -> 'ExponentialCooling':
		return ExponentialCooling(self._t0, self._alpha, self._steps, self._rng.split())

	@property
	def alpha(self) -> float:
		return self._alpha

	@property
	def steps(self) -> int:
		return self._steps


class LinearCooling(AnnealingSchedule):
	"""
	Linear cooling.

	Parameters:
	- t0: initial temperature, must be positive
	- delta_t: amount subtracted from the temperature, must be positive
	- steps: evaluations between temperature changes (<= 0 means 1)
	"""

	def __init__(
		self,
		t0: float,
		delta_t: float,
		steps: int = 1,
		rng: Optional[SplittableGenerator] = None,
	):
		if t0 <= 0:
			raise ValueError("Initial temperature must be positive")
		if delta_t <= 0:
			raise ValueError("deltaT must be positive")
		super().__init__(rng)
		self._t0 = t0
		self._delta_t = delta_t
		self._steps = steps if steps > 0 else 1
		self._step_counter = 0
		self._t = t0

	def init(self, max_evals: int) -> None:
		self._t = self._t0
		self._step_counter = 0

	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		accepted = self._metropolis(neighbor_cost, current_cost)
		self._step_counter += 1
		if self._step_counter == self._steps and self._t > TEMPERATURE_FLOOR:
			self._step_counter = 0
			self._t -= self._delta_t
			if self._t < TEMPERATURE_FLOOR:
				self._t = TEMPERATURE_FLOOR
		return accepted

	def split(self) -> 'LinearCooling':
		return LinearCooling(self._t0, self._delta_t, self._steps, self._rng.split())

	@property
	def delta_t(self) -> float:
		return self._delta_t

	@property
	def steps(self) -> int:
		return self._steps


class LogarithmicCooling(AnnealingSchedule):
	"""Logarithmic cooling: t = t0 / ln(e + i) after the i-th evaluation."""

	def __init__(self, t0: float, rng: Optional[SplittableGenerator] = None):
		if t0 <= 0:
			raise ValueError("Initial temperature must be positive")
		super().__init__(rng)
		self._t0 = t0
		self._step_counter = 0
		self._t = t0

	def init(self, max_evals: int) -> None:
		self._t = self._t0
		self._step_counter = 0

	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		accepted = self._metropolis(neighbor_cost, current_cost)
		self._step_counter += 1
		self._t = self._t0 / math.log(math.e + self._step_counter)
		return accepted

	def split(self) -> 'LogarithmicCooling':
		return LogarithmicCooling(self._t0, self._rng.split())
