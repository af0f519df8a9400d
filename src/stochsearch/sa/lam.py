"""
Lam annealing schedules.

Lam and Delosme's schedule is a feedback controller: it tracks the rate at
which neighbors are accepted and nudges the temperature so that rate
follows a target curve. The target starts near 1.0, decays exponentially
to 0.44 over the first 15% of the run, holds 0.44 until 65% of the run,
then decays exponentially towards 0:

	phase 1 (i <= 0.15 n):        0.44 + 0.56 * 560 ** (-i / (0.15 n))
	phase 2 (0.15 n < i <= 0.65 n): 0.44
	phase 3 (i > 0.65 n):         0.44 * 440 ** (-(i / n - 0.65) / 0.35)

- ModifiedLamOriginal: Boyan's formulation, recomputing the target in
  closed form at every step
- ModifiedLam: same behavior with the target updated incrementally
- SelfTuningLam: samples the landscape during a short phase 0 to choose
  the initial temperature, the temperature multiplier, and the acceptance
  rate smoothing, instead of using fixed constants

Reference: Cicirello, "Self-Tuning Lam Annealing: Learning Hyperparameters
While Problem Solving", Applied Sciences 11(21), 2021.
"""

import math
from typing import Optional

from stochsearch.core.rand import SplittableGenerator
from stochsearch.sa.base import AnnealingSchedule

LAM_RATE_001 = 0.9768670788789564
LAM_RATE_002 = 0.9546897506857566
LAM_RATE_01 = 0.8072615745900611
LAM_RATE_02 = 0.6808590431613767

# Run length from which phase 0 is 0.1% (rather than 1%) of the run
LONG_RUN = 10000

PLATEAU_RATE = 0.44


class _LamSchedule(AnnealingSchedule):
	"""Target acceptance rate curve shared by the Lam variants."""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		super().__init__(rng)
		self._last_max_evals = -1
		self._accept_rate = 0.0
		self._target_rate = 0.0
		self._phase1 = 0.0
		self._phase2 = 0.0
		self._iteration_count = 0

	def _init_phases(self, max_evals: int) -> bool:
		"""Recompute phase boundaries if the run length changed."""
		if self._last_max_evals == max_evals:
			return False
		self._phase1 = 0.15 * max_evals
		self._phase2 = 0.65 * max_evals
		self._last_max_evals = max_evals
		return True

	@property
	def accept_rate(self) -> float:
		"""Smoothed observed acceptance rate."""
		return self._accept_rate

	@property
	def target_rate(self) -> float:
		return self._target_rate


class _IncrementalLamSchedule(_LamSchedule):
	"""Lam schedule updating the phase 1 and 3 target incrementally."""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		super().__init__(rng)
		self._term_phase1 = 0.0
		self._mult_phase1 = 1.0
		self._mult_phase3 = 1.0

	def _init_phases(self, max_evals: int) -> bool:
		changed = super()._init_phases(max_evals)
		if changed and max_evals > 0:
			self._mult_phase1 = math.pow(560, -1.0 / self._phase1)
			self._mult_phase3 = math.pow(440, -1.0 / (max_evals - self._phase2))
		return changed

	def _update_target(self) -> None:
		if self._iteration_count <= self._phase1:
			self._term_phase1 *= self._mult_phase1
			self._target_rate = PLATEAU_RATE + self._term_phase1
		elif self._iteration_count > self._phase2:
			self._target_rate *= self._mult_phase3
		else:
			self._target_rate = PLATEAU_RATE


class ModifiedLam(_IncrementalLamSchedule):
	"""
	Modified Lam annealing (optimized).

	Acceptance rate is smoothed with fixed weights 0.998 / 0.002 and the
	temperature is multiplied by 0.999 or 1 / 0.999 at every step.
	"""

	def init(self, max_evals: int) -> None:
		self._t = 0.5
		self._accept_rate = 0.5
		self._target_rate = 1.0
		self._iteration_count = 0
		self._term_phase1 = 0.56
		self._init_phases(max_evals)

	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		accepted = self._metropolis(neighbor_cost, current_cost)
		self._accept_rate = 0.998 * self._accept_rate + (0.002 if accepted else 0.0)
		self._iteration_count += 1
		self._update_target()
		if self._accept_rate > self._target_rate:
			self._t *= 0.999
		else:
			self._t *= 1.001001001001001
		return accepted

	def split(self) -> 'ModifiedLam':
		return ModifiedLam(self._rng.split())


class ModifiedLamOriginal(_LamSchedule):
	"""Modified Lam annealing, as originally described by Boyan."""

	def init(self, max_evals: int) -> None:
		self._t = 0.5
		self._accept_rate = 0.5
		self._target_rate = 1.0
		self._iteration_count = 0
		self._init_phases(max_evals)

	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		accepted = self._metropolis(neighbor_cost, current_cost)
		self._accept_rate = 0.998 * self._accept_rate + (0.002 if accepted else 0.0)
		self._iteration_count += 1
		i = self._iteration_count
		if i <= self._phase1:
			self._target_rate = PLATEAU_RATE + 0.56 * math.pow(560, -i / self._phase1)
		elif i > self._phase2:
			self._target_rate = PLATEAU_RATE * math.pow(440, -(i / self._last_max_evals - 0.65) / 0.35)
		else:
			self._target_rate = PLATEAU_RATE
		if self._accept_rate > self._target_rate:
			self._t *= 0.999
		else:
			self._t /= 0.999
		return accepted

	def split(self) -> 'ModifiedLamOriginal':
		return ModifiedLamOriginal(self._rng.split())


class SelfTuningLam(_IncrementalLamSchedule):
	"""
	Self-Tuning Lam annealing.

	Phase 0 covers the first 1% of the run (0.1% for runs of at least
	10000 evaluations). During phase 0 every neighbor is accepted and the
	cost deltas are recorded. At its end the initial temperature is chosen
	so that the initial acceptance rate implied by the samples matches the
	start of the target curve, and beta (the temperature multiplier) so the
	temperature would traverse the curve in the remaining run.
	"""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		super().__init__(rng)
		self._phase0 = 0.0
		self._alpha = 0.2
		self._beta = 0.9
		self._delta_sum = 0.0
		self._same_cost_count = 0
		self._better_cost_count = 0

	def init(self, max_evals: int) -> None:
		long_run = max_evals >= LONG_RUN
		self._accept_rate = LAM_RATE_001 if long_run else LAM_RATE_01
		self._target_rate = self._accept_rate
		self._term_phase1 = self._accept_rate - PLATEAU_RATE
		self._same_cost_count = 0
		self._better_cost_count = 0
		self._delta_sum = 0.0
		self._t = 0.5
		self._iteration_count = 0
		if self._last_max_evals != max_evals:
			if long_run:
				self._phase0 = 0.001 * max_evals
				self._alpha = 2.0 / (1.0 + 0.01 * max_evals)
			else:
				self._phase0 = 0.01 * max_evals
				self._alpha = 2.0 / (1.0 + self._phase0) if self._phase0 > 9 else 0.2
				self._beta = 0.9
			self._init_phases(max_evals)

	def accept(self, neighbor_cost: float, current_cost: float) -> bool:
		self._iteration_count += 1
		if self._iteration_count <= self._phase0:
			return self._phase_zero_update(neighbor_cost, current_cost)
		accepted = self._metropolis(neighbor_cost, current_cost)
		self._update_schedule(accepted)
		return accepted

	def split(self) -> 'SelfTuningLam':
		return SelfTuningLam(self._rng.split())

	def _phase_zero_update(self, neighbor_cost: float, current_cost: float) -> bool:
		accepted = True
		cost_delta = current_cost - neighbor_cost
		if math.isinf(neighbor_cost) or math.isinf(current_cost) or math.isnan(cost_delta):
			accepted = neighbor_cost <= current_cost
		elif cost_delta > 0.0:
			self._better_cost_count += 1
			self._delta_sum += cost_delta
		elif cost_delta < 0.0:
			self._delta_sum -= cost_delta
		else:
			self._same_cost_count += 1
		if self._iteration_count + 1 > self._phase0:
			self._initialize_temperature()
		return accepted

	def _initialize_temperature(self) -> None:
		n = self._iteration_count
		long_run = self._last_max_evals >= LONG_RUN
		accepted_count = self._same_cost_count + self._better_cost_count
		if accepted_count != n:
			initial_rate = accepted_count / n
		else:
			initial_rate = accepted_count / (1.0 + n)
		if n == self._same_cost_count:
			cost_average = 1.0
		else:
			cost_average = self._delta_sum / (n - self._same_cost_count)

		if initial_rate < self._accept_rate:
			denom = math.log((self._accept_rate - initial_rate) / (1.0 - initial_rate))
			self._t = -cost_average / denom
			drop_rate = LAM_RATE_002 if long_run else LAM_RATE_02
			if initial_rate < drop_rate:
				self._beta = math.pow(
					denom / math.log((drop_rate - initial_rate) / (1.0 - initial_rate)),
					1.0 / self._phase0,
				)
			else:
				self._beta = math.pow(
					denom * (-0.260731492877931 if long_run else -0.17334743675123146),
					1.0 / self._phase0,
				)
		else:
			self._t = cost_average * (0.3141120890121576 if long_run else 0.18987910472222955)
			self._beta = math.pow(
				0.8300587656396743 if long_run else 0.912935823058667,
				1.0 / self._phase0,
			)

	def _update_schedule(self, accepted: bool) -> None:
		self._accept_rate = (1 - self._alpha) * self._accept_rate + (self._alpha if accepted else 0.0)
		self._update_target()
		if self._accept_rate > self._target_rate:
			self._t *= self._beta
		else:
			self._t /= self._beta

	@property
	def alpha(self) -> float:
		"""Acceptance rate smoothing weight."""
		return self._alpha

	@property
	def beta(self) -> float:
		"""Temperature multiplier."""
		return self._beta
