"""
Tests for configuration and factories.
"""

import numpy as np
import pytest

from stochsearch.config import AnnealingConfig, RestartConfig, SearchConfig
from stochsearch.core.rand import create_generator
from stochsearch.factory import (
	AnnealingScheduleFactory,
	AnnealingScheduleType,
	RestartScheduleFactory,
	RestartScheduleType,
	SearchFactory,
	parse_enum,
)
from stochsearch.parallel.multistarter import ParallelReoptimizableMultistarter
from stochsearch.parallel.timed import TimedParallelReoptimizableMultistarter
from stochsearch.restarts.schedules import (
	ConstantRestartSchedule,
	LubyRestarts,
	ParallelVariableAnnealingLength,
	VariableAnnealingLength,
)
from stochsearch.sa.cooling import ExponentialCooling, LinearCooling, LogarithmicCooling
from stochsearch.sa.lam import ModifiedLam, ModifiedLamOriginal, SelfTuningLam
from stochsearch.sa.parameter_free import (
	ParameterFreeExponentialCooling,
	ParameterFreeLinearCooling,
)
from stochsearch.sa.simulated_annealing import SimulatedAnnealing
from tests.helpers import BitFlip, RandomBits


class TestParseEnum:
	"""Enum lookup by member, name or value."""

	def test_forms(self):
		assert parse_enum(AnnealingScheduleType, AnnealingScheduleType.LINEAR) is AnnealingScheduleType.LINEAR
		assert parse_enum(AnnealingScheduleType, "self_tuning_lam") is AnnealingScheduleType.SELF_TUNING_LAM
		assert parse_enum(RestartScheduleType, " Luby ") is RestartScheduleType.LUBY
		assert parse_enum(RestartScheduleType, 1) is RestartScheduleType.CONSTANT

	def test_unknown(self):
		with pytest.raises(ValueError, match="Unknown"):
			parse_enum(AnnealingScheduleType, "boiling")
		with pytest.raises(ValueError):
			parse_enum(RestartScheduleType, 99)


class TestAnnealingScheduleFactory:
	"""Schedule creation by type."""

	@pytest.mark.parametrize("schedule_type,expected", [
		(AnnealingScheduleType.PARAMETER_FREE_EXPONENTIAL, ParameterFreeExponentialCooling),
		(AnnealingScheduleType.PARAMETER_FREE_LINEAR, ParameterFreeLinearCooling),
		(AnnealingScheduleType.MODIFIED_LAM, ModifiedLam),
		(AnnealingScheduleType.MODIFIED_LAM_ORIGINAL, ModifiedLamOriginal),
		(AnnealingScheduleType.SELF_TUNING_LAM, SelfTuningLam),
	])
	def test_parameterless(self, schedule_type, expected):
		assert type(AnnealingScheduleFactory.create(schedule_type)) is expected

	def test_exponential(self):
		schedule = AnnealingScheduleFactory.create("exponential", t0=10.0, alpha=0.9, steps=5)
		assert isinstance(schedule, ExponentialCooling)
		assert schedule.alpha == 0.9
		assert schedule.steps == 5
		assert schedule.temperature == 10.0

	def test_linear_and_logarithmic(self):
		linear = AnnealingScheduleFactory.create(AnnealingScheduleType.LINEAR, t0=1.0, delta_t=0.1)
		assert isinstance(linear, LinearCooling)
		assert linear.steps == 1
		assert isinstance(AnnealingScheduleFactory.create("logarithmic", t0=2.0), LogarithmicCooling)

	def test_unused_parameters_ignored(self):
		assert isinstance(AnnealingScheduleFactory.create("modified_lam", t0=3.0, alpha=0.5), ModifiedLam)

	def test_missing_parameter(self):
		with pytest.raises(ValueError, match="alpha"):
			AnnealingScheduleFactory.create("exponential", t0=1.0)
		with pytest.raises(ValueError, match="t0"):
			AnnealingScheduleFactory.create("logarithmic")

	def test_out_of_range_parameter(self):
		with pytest.raises(ValueError):
			AnnealingScheduleFactory.create("exponential", t0=1.0, alpha=1.5)


class TestRestartScheduleFactory:
	"""Restart schedule creation by type."""

	def test_create(self):
		assert isinstance(RestartScheduleFactory.create("constant", run_length=5), ConstantRestartSchedule)
		luby = RestartScheduleFactory.create("luby", luby_scale=10)
		assert isinstance(luby, LubyRestarts)
		assert luby.next_run_length() == 10
		val = RestartScheduleFactory.create("variable_annealing_length", r0=3)
		assert isinstance(val, VariableAnnealingLength)
		assert val.next_run_length() == 3

	def test_parallel_val_needs_threads(self):
		with pytest.raises(ValueError):
			RestartScheduleFactory.create(RestartScheduleType.PARALLEL_VARIABLE_ANNEALING_LENGTH)
		schedules = RestartScheduleFactory.create_for_threads(
			RestartScheduleType.PARALLEL_VARIABLE_ANNEALING_LENGTH, 3, r0=10,
		)
		assert all(isinstance(s, ParallelVariableAnnealingLength) for s in schedules)
		assert [s.next_run_length() for s in schedules] == [10, 20, 40]

	def test_create_for_threads_gives_separate_instances(self):
		schedules = RestartScheduleFactory.create_for_threads("luby", 3, luby_scale=2)
		assert len(schedules) == 3
		assert len({id(s) for s in schedules}) == 3
		with pytest.raises(ValueError):
			RestartScheduleFactory.create_for_threads("luby", 0)


class TestConfig:
	"""Dataclass validation and YAML round trip."""

	def test_defaults(self):
		config = SearchConfig()
		assert config.annealing.schedule == "self_tuning_lam"
		assert config.restarts.schedule == "constant"
		assert config.num_threads == 1
		assert config.time_limit is None

	def test_schedule_names_normalized(self):
		assert AnnealingConfig(schedule="MODIFIED_LAM").schedule == "modified_lam"
		assert RestartConfig(schedule=RestartScheduleType.LUBY).schedule == "luby"

	def test_validation(self):
		with pytest.raises(ValueError):
			AnnealingConfig(schedule="freezing")
		with pytest.raises(ValueError):
			AnnealingConfig(steps=0)
		with pytest.raises(ValueError):
			RestartConfig(run_length=0)
		with pytest.raises(ValueError):
			RestartConfig(luby_scale=0)
		with pytest.raises(ValueError):
			SearchConfig(num_threads=0)
		with pytest.raises(ValueError):
			SearchConfig(time_limit=0)
		with pytest.raises(ValueError):
			SearchConfig(time_unit_ms=0)

	def test_yaml_round_trip(self, tmp_path):
		config = SearchConfig(
			annealing=AnnealingConfig(schedule="exponential", t0=5.0, alpha=0.9),
			restarts=RestartConfig(schedule="luby", luby_scale=100),
			num_threads=4,
			num_restarts=20,
			seed=7,
		)
		path = tmp_path / "configs" / "search.yaml"
		config.save_yaml(str(path))
		assert SearchConfig.load_yaml(str(path)) == config

	def test_from_yaml_partial(self):
		config = SearchConfig.from_yaml(
			"annealing:\n"
			"  schedule: linear\n"
			"  t0: 2.0\n"
			"  delta_t: 0.01\n"
			"time_limit: 30\n"
		)
		assert config.annealing.schedule == "linear"
		assert config.annealing.delta_t == 0.01
		assert config.restarts == RestartConfig()
		assert config.time_limit == 30

	def test_from_yaml_empty(self):
		assert SearchConfig.from_yaml("") == SearchConfig()

	def test_from_yaml_rejects_bad_documents(self):
		with pytest.raises(ValueError, match="mapping"):
			SearchConfig.from_yaml("- 1\n- 2\n")
		with pytest.raises(ValueError, match="Unknown"):
			SearchConfig.from_yaml("threads: 4\n")
		with pytest.raises(ValueError, match="Unknown"):
			SearchConfig.from_yaml("annealing:\n  temperature: 4\n")


class TestSearchFactory:
	"""Complete searches from configuration."""

	def test_create_annealer(self, problem, mutation, initializer):
		config = SearchConfig(annealing=AnnealingConfig(schedule="linear", t0=3.0, delta_t=0.5))
		sa = SearchFactory.create_annealer(config, problem, mutation, initializer)
		assert isinstance(sa, SimulatedAnnealing)
		assert isinstance(sa.schedule, LinearCooling)

	def test_create_parallel_annealer(self, problem, mutation, initializer, tracker):
		config = SearchConfig(
			restarts=RestartConfig(schedule="parallel_variable_annealing_length", r0=100),
			num_threads=3,
			num_restarts=4,
		)
		with SearchFactory.create_parallel_annealer(config, problem, mutation, initializer, tracker) as search:
			assert type(search) is ParallelReoptimizableMultistarter
			assert search.num_threads == 3
			assert search.progress_tracker is tracker
			best = SearchFactory.run(search, config)
		assert best.cost == tracker.get_cost() == 0

	def test_create_timed_parallel_annealer(self, unbounded_problem, mutation, initializer):
		config = SearchConfig(
			restarts=RestartConfig(run_length=200),
			num_threads=2,
			time_limit=2,
			time_unit_ms=10,
		)
		with SearchFactory.create_parallel_annealer(config, unbounded_problem, mutation, initializer) as search:
			assert type(search) is TimedParallelReoptimizableMultistarter
			assert search.time_unit == 10
			SearchFactory.run(search, config)
			assert len(search.search_history) == 2

	def test_seed_makes_runs_reproducible(self, unbounded_problem):
		config = SearchConfig(seed=123)
		costs = []
		for _ in range(2):
			SearchFactory.configure(config)
			sa = SearchFactory.create_annealer(config, unbounded_problem, BitFlip(), RandomBits(24))
			sa.optimize(2000, np.ones(24, dtype=np.int8))
			costs.append(sa.progress_tracker.get_cost())
		assert costs[0] == costs[1]

	def test_seeded_components_draw_distinct_streams(self, problem):
		config = SearchConfig(seed=7, num_threads=2)
		SearchFactory.configure(config)
		mutation = BitFlip(create_generator())
		initializer = RandomBits(4, create_generator())
		with SearchFactory.create_parallel_annealer(config, problem, mutation, initializer) as search:
			for member in search.members:
				sa = member.search
				mutation_draws = [sa.mutation._rng.random() for _ in range(5)]
				schedule_draws = [sa.schedule._rng.random() for _ in range(5)]
				assert mutation_draws != schedule_draws

	def test_create_annealer_keeps_generator_configuration(self, problem):
		config = SearchConfig(seed=7)
		SearchFactory.configure(config)
		mutation = BitFlip(create_generator())
		sa = SearchFactory.create_annealer(config, problem, mutation, RandomBits(4))
		SearchFactory.configure(config)
		replayed = BitFlip(create_generator())
		draws = [mutation._rng.random() for _ in range(5)]
		assert [sa.schedule._rng.random() for _ in range(5)] != draws
		assert [replayed._rng.random() for _ in range(5)] == draws
