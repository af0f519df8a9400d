"""stochsearch - stochastic local search: simulated annealing, restarts, parallel multistart."""

from stochsearch.logger import Logger, create_logger
from stochsearch.progress import ProgressTracker
from stochsearch.core import (
	SolutionCostPair,
	SplittableGenerator,
	configure_default,
	configure_random_generator,
	OptimizationProblem,
	IntegerCostOptimizationProblem,
	Initializer,
	MutationOperator,
	UndoableMutationOperator,
	IterableMutationOperator,
	MutationIterator,
)
from stochsearch.sa import (
	AnnealingSchedule,
	ExponentialCooling,
	LinearCooling,
	LogarithmicCooling,
	ParameterFreeExponentialCooling,
	ParameterFreeLinearCooling,
	ModifiedLam,
	ModifiedLamOriginal,
	SelfTuningLam,
	AcceptanceTracker,
	SimulatedAnnealing,
)
from stochsearch.hc import FirstDescentHillClimber, SteepestDescentHillClimber
from stochsearch.restarts import (
	RestartSchedule,
	ConstantRestartSchedule,
	LubyRestarts,
	VariableAnnealingLength,
	ParallelVariableAnnealingLength,
	Multistarter,
	ReoptimizableMultistarter,
)
from stochsearch.parallel import (
	ParallelMetaheuristic,
	ParallelReoptimizableMetaheuristic,
	ParallelMultistarter,
	ParallelReoptimizableMultistarter,
	TimedParallelMultistarter,
	TimedParallelReoptimizableMultistarter,
)
from stochsearch.factory import (
	AnnealingScheduleFactory,
	AnnealingScheduleType,
	RestartScheduleFactory,
	RestartScheduleType,
	SearchFactory,
)
from stochsearch.config import AnnealingConfig, RestartConfig, SearchConfig

__version__ = "0.1.0"

__all__ = [
	'Logger', 'create_logger',
	'ProgressTracker',
	'SolutionCostPair', 'SplittableGenerator', 'configure_default', 'configure_random_generator',
	'OptimizationProblem', 'IntegerCostOptimizationProblem',
	'Initializer', 'MutationOperator', 'UndoableMutationOperator',
	'IterableMutationOperator', 'MutationIterator',
	'AnnealingSchedule', 'ExponentialCooling', 'LinearCooling', 'LogarithmicCooling',
	'ParameterFreeExponentialCooling', 'ParameterFreeLinearCooling',
	'ModifiedLam', 'ModifiedLamOriginal', 'SelfTuningLam', 'AcceptanceTracker',
	'SimulatedAnnealing',
	'FirstDescentHillClimber', 'SteepestDescentHillClimber',
	'RestartSchedule', 'ConstantRestartSchedule', 'LubyRestarts',
	'VariableAnnealingLength', 'ParallelVariableAnnealingLength',
	'Multistarter', 'ReoptimizableMultistarter',
	'ParallelMetaheuristic', 'ParallelReoptimizableMetaheuristic',
	'ParallelMultistarter', 'ParallelReoptimizableMultistarter',
	'TimedParallelMultistarter', 'TimedParallelReoptimizableMultistarter',
	'AnnealingScheduleFactory', 'AnnealingScheduleType',
	'RestartScheduleFactory', 'RestartScheduleType', 'SearchFactory',
	'AnnealingConfig', 'RestartConfig', 'SearchConfig',
]
