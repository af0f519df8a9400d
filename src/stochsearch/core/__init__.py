"""Core contracts: solutions, problems, operators, randomness, capabilities."""

from stochsearch.core.solution import SolutionCostPair, copy_candidate
from stochsearch.core.rand import (
	SplittableGenerator,
	configure_default,
	configure_random_generator,
	create_generator,
)
from stochsearch.core.problem import OptimizationProblem, IntegerCostOptimizationProblem
from stochsearch.core.operators import (
	Initializer,
	IterableMutationOperator,
	MutationIterator,
	MutationOperator,
	SupportsUndo,
	UndoableMutationOperator,
)
from stochsearch.core.search import SearchBase
from stochsearch.core.capabilities import (
	Metaheuristic,
	ReoptimizableMetaheuristic,
	ResumesFromBest,
	RunsFixedLength,
	Splittable,
	TracksProgress,
)

__all__ = [
	'SolutionCostPair', 'copy_candidate',
	'SplittableGenerator', 'configure_default', 'configure_random_generator', 'create_generator',
	'OptimizationProblem', 'IntegerCostOptimizationProblem',
	'Initializer', 'IterableMutationOperator', 'MutationIterator', 'MutationOperator',
	'SupportsUndo', 'UndoableMutationOperator',
	'SearchBase',
	'Metaheuristic', 'ReoptimizableMetaheuristic', 'ResumesFromBest', 'RunsFixedLength',
	'Splittable', 'TracksProgress',
]
