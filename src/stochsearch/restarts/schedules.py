"""
Restart schedules.

A restart schedule supplies the run length of each successive restart
of a multistart search:

- ConstantRestartSchedule: r, r, r, ...
- LubyRestarts: Luby et al.'s universal sequence a * (1, 1, 2, 1, 1, 2, 4, ...)
- VariableAnnealingLength: r0, 2 r0, 4 r0, ... (VAL)
- ParallelVariableAnnealingLength: per-thread schedules that together
  implement P-VAL

Schedules are stateful iterators: next_run_length() advances, reset()
rewinds to the start, and split() returns an independent copy continuing
from the current position.

Reference: Cicirello, "Variable Annealing Length and Parallelism in
Simulated Annealing", SoCS 2017.
"""

import copy
from abc import ABC, abstractmethod
from typing import List

# Run lengths saturate at the largest 32-bit signed int
MAX_RUN_LENGTH = 0x7fffffff
_DOUBLING_LIMIT = 0x40000000


class RestartSchedule(ABC):
	"""Abstract restart schedule."""

	@abstractmethod
	def next_run_length(self) -> int:
		...

	@abstractmethod
	def reset(self) -> None:
		...

	def split(self) -> 'RestartSchedule':
		"""Independent copy positioned at the same point of the sequence."""
		return copy.copy(self)

	def __iter__(self):
		while True:
			yield self.next_run_length()


class ConstantRestartSchedule(RestartSchedule):
	"""Every run has the same length."""

	def __init__(self, run_length: int):
		if run_length < 1:
			raise ValueError("runLength must be at least 1")
		self._run_length = run_length

	def next_run_length(self) -> int:
		return self._run_length

	def reset(self) -> None:
		pass

	def __repr__(self) -> str:
		return f"ConstantRestartSchedule({self._run_length})"


class LubyRestarts(RestartSchedule):
	"""
	Luby restart sequence scaled by a.

	The sequence is 1, 1, 2, 1, 1, 2, 4, 1, 1, 2, 1, 1, 2, 4, 8, ...
	computed with Knuth's reluctant doubling recurrence.
	"""

	def __init__(self, a: int = 1):
		if a < 1:
			raise ValueError("a must be positive")
		self._a = a
		self._u = 1
		self._v = 1

	def next_run_length(self) -> int:
		r = self._a * self._v
		if (self._u & -self._u) == self._v:
			self._u += 1
			self._v = 1
		else:
			self._v <<= 1
		return r

	def reset(self) -> None:
		self._u = 1
		self._v = 1

	def __repr__(self) -> str:
		return f"LubyRestarts(a={self._a})"


class VariableAnnealingLength(RestartSchedule):
	"""Doubling run lengths starting at r0 (VAL)."""

	def __init__(self, r0: int = 1000):
		if r0 < 1:
			raise ValueError("r0 must be positive")
		self._r0 = r0
		self._r = r0

	def next_run_length(self) -> int:
		r = self._r
		self._r = self._r << 1 if self._r < _DOUBLING_LIMIT else MAX_RUN_LENGTH
		return r

	def reset(self) -> None:
		self._r = self._r0

	@staticmethod
	def create_restart_schedules(num_threads: int, r0: int = 1000) -> List['VariableAnnealingLength']:
		"""One VAL schedule per thread, all starting at r0."""
		if num_threads <= 0:
			raise ValueError("Must have at least 1 thread.")
		if r0 <= 0:
			raise ValueError("r0 must be greater than 0")
		return [VariableAnnealingLength(r0) for _ in range(num_threads)]

	def __repr__(self) -> str:
		return f"VariableAnnealingLength(r0={self._r0})"


class ParallelVariableAnnealingLength(RestartSchedule):
	"""
	One thread's share of the P-VAL schedule.

	With k = min(threads, 4), the first k threads start at r0, 2 r0, 4 r0,
	8 r0 and every thread multiplies its run length by 2**k per restart, so
	together they cover the VAL sequence k times faster. Threads beyond the
	fourth repeat the schedule of the thread four positions earlier.

	Instances come from create_restart_schedules().
	"""

	def __init__(self, shift: int, r0: int):
		if shift < 1 or shift > 4:
			raise ValueError("shift must be in [1, 4]")
		if r0 < 1:
			raise ValueError("r0 must be positive")
		self._shift = shift
		self._shift_limit = _DOUBLING_LIMIT >> (shift - 1)
		self._r0 = r0
		self._r = r0

	def next_run_length(self) -> int:
		r = self._r
		self._r = self._r << self._shift if self._r < self._shift_limit else MAX_RUN_LENGTH
		return r

	def reset(self) -> None:
		self._r = self._r0

	@staticmethod
	def create_restart_schedules(num_threads: int, r0: int = 1000) -> List['ParallelVariableAnnealingLength']:
		"""Schedules for num_threads threads that together implement P-VAL."""
		if num_threads <= 0:
			raise ValueError("Must have at least 1 thread.")
		if r0 <= 0:
			raise ValueError("r0 must be greater than 0")
		shift = min(num_threads, 4)
		schedules = [ParallelVariableAnnealingLength(shift, r0 << i) for i in range(shift)]
		for i in range(shift, num_threads):
			schedules.append(ParallelVariableAnnealingLength(shift, schedules[i - 4]._r0))
		return schedules

	def __repr__(self) -> str:
		return f"ParallelVariableAnnealingLength(shift={self._shift}, r0={self._r0})"
