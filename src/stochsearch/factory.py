"""
Factories for annealing schedules, restart schedules and ready-to-run
searches. Uses match-case for type dispatching.

Usage:
	from stochsearch.factory import AnnealingScheduleFactory, AnnealingScheduleType

	schedule = AnnealingScheduleFactory.create(
		AnnealingScheduleType.EXPONENTIAL,
		t0=10.0,
		alpha=0.95,
	)

	# Everything from a configuration file
	config = SearchConfig.load_yaml("search.yaml")
	SearchFactory.configure(config)
	mutation, initializer = make_operators()
	with SearchFactory.create_parallel_annealer(config, problem, mutation, initializer) as search:
		best = SearchFactory.run(search, config)
"""

from enum import IntEnum, auto
from typing import Any, List, Optional

from stochsearch.core.rand import configure_random_generator
from stochsearch.parallel.multistarter import ParallelReoptimizableMultistarter
from stochsearch.parallel.timed import TimedParallelReoptimizableMultistarter
from stochsearch.progress import ProgressTracker
from stochsearch.restarts.schedules import (
	ConstantRestartSchedule,
	LubyRestarts,
	ParallelVariableAnnealingLength,
	RestartSchedule,
	VariableAnnealingLength,
)
from stochsearch.sa.base import AnnealingSchedule
from stochsearch.sa.cooling import ExponentialCooling, LinearCooling, LogarithmicCooling
from stochsearch.sa.lam import ModifiedLam, ModifiedLamOriginal, SelfTuningLam
from stochsearch.sa.parameter_free import (
	ParameterFreeExponentialCooling,
	ParameterFreeLinearCooling,
)
from stochsearch.sa.simulated_annealing import SimulatedAnnealing


class AnnealingScheduleType(IntEnum):
	"""Available annealing schedules."""
	EXPONENTIAL = auto()
	LINEAR = auto()
	LOGARITHMIC = auto()
	PARAMETER_FREE_EXPONENTIAL = auto()
	PARAMETER_FREE_LINEAR = auto()
	MODIFIED_LAM = auto()
	MODIFIED_LAM_ORIGINAL = auto()
	SELF_TUNING_LAM = auto()


class RestartScheduleType(IntEnum):
	"""Available restart schedules."""
	CONSTANT = auto()
	LUBY = auto()
	VARIABLE_ANNEALING_LENGTH = auto()
	PARALLEL_VARIABLE_ANNEALING_LENGTH = auto()


def parse_enum(enum_class, value):
	"""Accept an enum member, its name (any case), or its value."""
	if isinstance(value, enum_class):
		return value
	if isinstance(value, str):
		try:
			return enum_class[value.strip().upper()]
		except KeyError:
			raise ValueError(f"Unknown {enum_class.__name__}: {value}") from None
	try:
		return enum_class(value)
	except ValueError:
		raise ValueError(f"Unknown {enum_class.__name__}: {value}") from None


class AnnealingScheduleFactory:
	"""
	Factory for creating annealing schedules.

	Parameters that a schedule does not use are ignored, so one set of
	keyword arguments can be passed for any type.
	"""

	@staticmethod
	def create(schedule_type: AnnealingScheduleType | str, **kwargs: Any) -> AnnealingSchedule:
		"""
		Create an annealing schedule.

		Args:
			schedule_type: Type of schedule to create
			**kwargs: t0, alpha, delta_t, steps (as needed by the type)

		Returns:
			New annealing schedule

		Raises:
			ValueError: If schedule_type is not recognized, a required
				parameter is missing, or a parameter is out of range
		"""
		schedule_type = parse_enum(AnnealingScheduleType, schedule_type)
		match schedule_type:
			case AnnealingScheduleType.EXPONENTIAL:
				return ExponentialCooling(
					_require(kwargs, 't0', schedule_type),
					_require(kwargs, 'alpha', schedule_type),
					kwargs.get('steps') or 1,
				)

			case AnnealingScheduleType.LINEAR:
				return LinearCooling(
					_require(kwargs, 't0', schedule_type),
					_require(kwargs, 'delta_t', schedule_type),
					kwargs.get('steps') or 1,
				)

			case AnnealingScheduleType.LOGARITHMIC:
				return LogarithmicCooling(_require(kwargs, 't0', schedule_type))

			case AnnealingScheduleType.PARAMETER_FREE_EXPONENTIAL:
				return ParameterFreeExponentialCooling()

			case AnnealingScheduleType.PARAMETER_FREE_LINEAR:
				return ParameterFreeLinearCooling()

			case AnnealingScheduleType.MODIFIED_LAM:
				return ModifiedLam()

			case AnnealingScheduleType.MODIFIED_LAM_ORIGINAL:
				return ModifiedLamOriginal()

			case AnnealingScheduleType.SELF_TUNING_LAM:
				return SelfTuningLam()

			case _:
				raise ValueError(f"Unknown annealing schedule type: {schedule_type}")


class RestartScheduleFactory:
	"""Factory for creating restart schedules."""

	@staticmethod
	def create(schedule_type: RestartScheduleType | str, **kwargs: Any) -> RestartSchedule:
		"""
		Create a single restart schedule.

		Args:
			schedule_type: Type of schedule to create
			**kwargs: run_length (constant), luby_scale (Luby), r0 (VAL)

		Raises:
			ValueError: If schedule_type is not recognized or is only
				meaningful per thread (P-VAL)
		"""
		schedule_type = parse_enum(RestartScheduleType, schedule_type)
		match schedule_type:
			case RestartScheduleType.CONSTANT:
				return ConstantRestartSchedule(_require(kwargs, 'run_length', schedule_type))

			case RestartScheduleType.LUBY:
				return LubyRestarts(kwargs.get('luby_scale') or 1)

			case RestartScheduleType.VARIABLE_ANNEALING_LENGTH:
				return VariableAnnealingLength(kwargs.get('r0') or 1000)

			case RestartScheduleType.PARALLEL_VARIABLE_ANNEALING_LENGTH:
				raise ValueError("P-VAL schedules must be created per thread, use create_for_threads()")

			case _:
				raise ValueError(f"Unknown restart schedule type: {schedule_type}")

	@staticmethod
	def create_for_threads(
		schedule_type: RestartScheduleType | str,
		num_threads: int,
		**kwargs: Any,
	) -> List[RestartSchedule]:
		"""Create one restart schedule per thread."""
		if num_threads < 1:
			raise ValueError("Must have at least 1 thread.")
		schedule_type = parse_enum(RestartScheduleType, schedule_type)
		match schedule_type:
			case RestartScheduleType.PARALLEL_VARIABLE_ANNEALING_LENGTH:
				return ParallelVariableAnnealingLength.create_restart_schedules(
					num_threads, kwargs.get('r0') or 1000,
				)

			case RestartScheduleType.VARIABLE_ANNEALING_LENGTH:
				return VariableAnnealingLength.create_restart_schedules(
					num_threads, kwargs.get('r0') or 1000,
				)

			case _:
				return [RestartScheduleFactory.create(schedule_type, **kwargs) for _ in range(num_threads)]


class SearchFactory:
	"""
	Builds complete searches from a SearchConfig.

	Call configure() before constructing the mutation operator and
	initializer, so that every component of a seeded search draws its own
	stream from the same configured generator.
	"""

	@staticmethod
	def configure(config) -> None:
		"""Seed the random generator configuration if config.seed is set."""
		if config.seed is not None:
			configure_random_generator(config.seed)

	@staticmethod
	def create_annealer(
		config,
		problem,
		mutation,
		initializer,
		tracker: Optional[ProgressTracker] = None,
		logger=None,
	):
		"""
		Create a single SimulatedAnnealing engine.

		The schedule takes the next stream of the current generator
		configuration. The configuration is left as is, see configure().
		"""
		schedule = AnnealingScheduleFactory.create(config.annealing.schedule, **config.annealing.params())
		return SimulatedAnnealing(
			problem,
			mutation,
			initializer,
			schedule,
			tracker,
			verbose=config.verbose,
			logger=logger,
		)

	@staticmethod
	def create_parallel_annealer(
		config,
		problem,
		mutation,
		initializer,
		tracker: Optional[ProgressTracker] = None,
		logger=None,
	):
		"""
		Create a parallel reoptimizable multistart annealer.

		Returns a TimedParallelReoptimizableMultistarter if config.time_limit
		is set, else a ParallelReoptimizableMultistarter.
		"""
		sa = SearchFactory.create_annealer(config, problem, mutation, initializer, tracker, logger)
		schedules = RestartScheduleFactory.create_for_threads(
			config.restarts.schedule,
			config.num_threads,
			**config.restarts.params(),
		)
		if config.time_limit is not None:
			search = TimedParallelReoptimizableMultistarter(
				sa, schedules, verbose=config.verbose, logger=logger,
			)
			search.set_time_unit(config.time_unit_ms)
			return search
		return ParallelReoptimizableMultistarter(sa, schedules, verbose=config.verbose, logger=logger)

	@staticmethod
	def run(search, config):
		"""Run a search built by create_parallel_annealer() as configured."""
		if config.time_limit is not None:
			return search.optimize(config.time_limit)
		return search.optimize(config.num_restarts)


def _require(kwargs: dict, key: str, schedule_type) -> Any:
	value = kwargs.get(key)
	if value is None:
		raise ValueError(f"{schedule_type.name} requires parameter '{key}'")
	return value
