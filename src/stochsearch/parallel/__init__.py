"""Parallel search coordinators."""

from stochsearch.parallel.base import ParallelSearchBase
from stochsearch.parallel.metaheuristic import (
	ParallelMetaheuristic,
	ParallelReoptimizableMetaheuristic,
)
from stochsearch.parallel.multistarter import (
	ParallelMultistarter,
	ParallelReoptimizableMultistarter,
)
from stochsearch.parallel.timed import (
	TimedParallelMultistarter,
	TimedParallelReoptimizableMultistarter,
)

__all__ = [
	'ParallelSearchBase',
	'ParallelMetaheuristic', 'ParallelReoptimizableMetaheuristic',
	'ParallelMultistarter', 'ParallelReoptimizableMultistarter',
	'TimedParallelMultistarter', 'TimedParallelReoptimizableMultistarter',
]
