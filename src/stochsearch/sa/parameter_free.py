"""
Parameter-free cooling schedules.

These schedules need no tuning. Each run begins with an estimation phase
that accepts every neighbor until ESTIMATION_SAMPLE_SIZE neighbors with a
cost different from the current one have been seen. The mean absolute
cost change of those samples sets the initial temperature so that an
average worsening move would be accepted with probability 0.95. The
cooling rate is then chosen so that the temperature reaches the 0.001
floor at the end of the run, cooling every `steps` evaluations where
`steps` is the smallest power of two that keeps the per-step change
meaningful:

- ParameterFreeExponentialCooling: alpha <= 0.999
- ParameterFreeLinearCooling: delta_t >= 1e-6
"""

import math
from abc import abstractmethod
from typing import Optional

from stochsearch.core.rand import SplittableGenerator
from stochsearch.sa.base import AnnealingSchedule, TEMPERATURE_FLOOR

ESTIMATION_SAMPLE_SIZE = 10
LOG_INITIAL_ACCEPTANCE_PROBABILITY = math.log(0.95)
MIN_INITIAL_TEMPERATURE = 0.002


class _ParameterFreeCooling(AnnealingSchedule):
	"""Shared estimation phase of the parameter-free schedules."""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		super().__init__(rng)
		self._max_evals = 0
		self._cost_sum = 0.0
		self._num_est_samples = 0
		self._step_counter = 0
		self._steps = 0

	def init(self, max_evals: int) -> None:
		self._max_evals = max_evals
		self._cost_sum = 0.0
		self._num_est_samples = 0
		self._step_counter = 0
		self._steps = 0
		self._t = 0.0
		self._reset_rate()

	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		if self._num_est_samples < ESTIMATION_SAMPLE_SIZE:
			return self._estimation_step(neighbor_cost, current_cost)
		accepted = self._metropolis(neighbor_cost, current_cost)
		self._step_counter += 1
		if self._step_counter == self._steps and self._t > TEMPERATURE_FLOOR:
			self._step_counter = 0
			self._cool()
		return accepted

	def _estimation_step(self, neighbor_cost: float, current_cost: float) -> bool:
		self._step_counter += 1
		if not (math.isfinite(neighbor_cost) and math.isfinite(current_cost)):
			# Infinite deltas carry no scale information
			return neighbor_cost <= current_cost
		if neighbor_cost != current_cost:
			self._num_est_samples += 1
			self._cost_sum -= abs(neighbor_cost - current_cost)
			if self._num_est_samples == ESTIMATION_SAMPLE_SIZE:
				self._initialize_temperature()
		return True

	def _initialize_temperature(self) -> None:
		self._t = self._cost_sum / (ESTIMATION_SAMPLE_SIZE * LOG_INITIAL_ACCEPTANCE_PROBABILITY)
		if self._t < MIN_INITIAL_TEMPERATURE:
			self._t = MIN_INITIAL_TEMPERATURE
		remaining = max(1, self._max_evals - self._step_counter - 1)
		i = 0
		j = 0
		while True:
			# ceil(remaining / 2**i)
			k = remaining >> i if (remaining & j) == 0 else (remaining >> i) + 1
			done = self._derive_rate(k)
			i += 1
			j = (j << 1) | 1
			if done:
				break
		self._steps = 1 << (i - 1)
		self._step_counter = 0

	@abstractmethod
	def _reset_rate(self) -> None:
		...

	@abstractmethod
	def _derive_rate(self, num_changes: int) -> bool:
		"""Set the rate for num_changes temperature changes; True if acceptable."""
		...

	@abstractmethod
	def _cool(self) -> None:
		...

	@property
	def steps(self) -> int:
		return self._steps


class ParameterFreeExponentialCooling(_ParameterFreeCooling):
	"""Exponential cooling with self-determined t0, alpha and steps."""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		super().__init__(rng)
		self._alpha = 0.0

	def _reset_rate(self) -> None:
		self._alpha = 0.0

	def _derive_rate(self, num_changes: int) -> bool:
		self._alpha = math.pow(TEMPERATURE_FLOOR / self._t, 1.0 / num_changes)
		return self._alpha <= 0.999

	def _cool(self) -> None:
		self._t *= self._alpha

	def split(self) -> 'ParameterFreeExponentialCooling':
		return ParameterFreeExponentialCooling(self._rng.split())

	@property
	def alpha(self) -> float:
		return self._alpha


class ParameterFreeLinearCooling(_ParameterFreeCooling):
	"""Linear cooling with self-determined t0, delta_t and steps."""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		super().__init__(rng)
		self._delta_t = 0.0

	def _reset_rate(self) -> None:
		self._delta_t = 0.0

	def _derive_rate(self, num_changes: int) -> bool:
		self._delta_t = (self._t - TEMPERATURE_FLOOR) / num_changes
		return self._delta_t >= 1e-6

	def _cool(self) -> None:
		self._t -= self._delta_t
		if self._t < TEMPERATURE_FLOOR:
			self._t = TEMPERATURE_FLOOR

	def split(self) -> 'ParameterFreeLinearCooling':
		return ParameterFreeLinearCooling(self._rng.split())

	@property
	def delta_t(self) -> float:
		return self._delta_t
