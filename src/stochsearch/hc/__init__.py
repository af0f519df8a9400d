"""Hill climbers."""

from stochsearch.hc.hill_climbers import (
	FirstDescentHillClimber,
	HillClimberBase,
	SteepestDescentHillClimber,
)

__all__ = ['HillClimberBase', 'FirstDescentHillClimber', 'SteepestDescentHillClimber']
