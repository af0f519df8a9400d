"""Restart schedules and sequential multistart search."""

from stochsearch.restarts.schedules import (
	ConstantRestartSchedule,
	LubyRestarts,
	ParallelVariableAnnealingLength,
	RestartSchedule,
	VariableAnnealingLength,
)
from stochsearch.restarts.multistarter import Multistarter, ReoptimizableMultistarter

__all__ = [
	'RestartSchedule', 'ConstantRestartSchedule', 'LubyRestarts',
	'VariableAnnealingLength', 'ParallelVariableAnnealingLength',
	'Multistarter', 'ReoptimizableMultistarter',
]
