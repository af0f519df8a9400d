"""Simulated annealing engine and annealing schedules."""

from stochsearch.sa.base import AnnealingSchedule
from stochsearch.sa.cooling import ExponentialCooling, LinearCooling, LogarithmicCooling
from stochsearch.sa.parameter_free import (
	ParameterFreeExponentialCooling,
	ParameterFreeLinearCooling,
)
from stochsearch.sa.lam import ModifiedLam, ModifiedLamOriginal, SelfTuningLam
from stochsearch.sa.acceptance_tracker import AcceptanceTracker
from stochsearch.sa.simulated_annealing import SimulatedAnnealing

__all__ = [
	'AnnealingSchedule',
	'ExponentialCooling', 'LinearCooling', 'LogarithmicCooling',
	'ParameterFreeExponentialCooling', 'ParameterFreeLinearCooling',
	'ModifiedLam', 'ModifiedLamOriginal', 'SelfTuningLam',
	'AcceptanceTracker',
	'SimulatedAnnealing',
]
