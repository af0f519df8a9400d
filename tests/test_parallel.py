"""
Tests for the parallel coordinators.
"""

import pytest

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
from stochsearch.progress import ProgressTracker
from stochsearch.restarts.multistarter import Multistarter, ReoptimizableMultistarter
from stochsearch.restarts.schedules import (
	ConstantRestartSchedule,
	LubyRestarts,
	ParallelVariableAnnealingLength,
)
from stochsearch.sa.simulated_annealing import SimulatedAnnealing
from tests.helpers import FixedLengthOnly, OnesCount, ScriptedSearch


@pytest.fixture
def shared():
	"""Tracker and problem for hand-built lists of searches."""
	return ProgressTracker(), OnesCount()


class TestParallelMultistarterConstruction:
	"""The accepted constructor forms."""

	def test_single_search_and_run_length(self):
		search = ScriptedSearch()
		with ParallelMultistarter(search, 10, num_threads=3) as parallel:
			assert parallel.num_threads == 3
			assert len(search.splits) == 2
			assert parallel.members[0].search is search
			assert parallel.progress_tracker is search.progress_tracker

	def test_single_search_and_schedules(self):
		search = ScriptedSearch()
		schedules = [LubyRestarts(10), ConstantRestartSchedule(5)]
		with ParallelMultistarter(search, schedules) as parallel:
			parallel.optimize(3)
		assert search.optimize_calls == [10, 10, 20]
		assert search.splits[0].optimize_calls == [5, 5, 5]

	def test_searches_and_schedules(self, shared):
		tracker, problem = shared
		searches = [ScriptedSearch(tracker, problem) for _ in range(2)]
		schedules = ParallelVariableAnnealingLength.create_restart_schedules(2, 10)
		with ParallelMultistarter(searches, schedules) as parallel:
			parallel.optimize(2)
		assert searches[0].optimize_calls == [10, 40]
		assert searches[1].optimize_calls == [20, 80]

	def test_searches_and_run_length(self, shared):
		tracker, problem = shared
		searches = [ScriptedSearch(tracker, problem) for _ in range(3)]
		with ParallelMultistarter(searches, 4) as parallel:
			parallel.optimize(2)
		assert all(s.optimize_calls == [4, 4] for s in searches)
		assert parallel.total_run_length == 24

	def test_searches_and_one_schedule(self, shared):
		tracker, problem = shared
		searches = [ScriptedSearch(tracker, problem) for _ in range(2)]
		with ParallelMultistarter(searches, LubyRestarts(1)) as parallel:
			parallel.optimize(3)
		assert searches[0].optimize_calls == [1, 1, 2]
		assert searches[1].optimize_calls == [1, 1, 2]

	def test_multistarter_and_thread_count(self):
		search = ScriptedSearch()
		with ParallelMultistarter(Multistarter(search, 10), 3) as parallel:
			assert parallel.num_threads == 3

	def test_list_of_multistarters(self, shared):
		tracker, problem = shared
		members = [Multistarter(ScriptedSearch(tracker, problem), 10) for _ in range(2)]
		with ParallelMultistarter(members) as parallel:
			assert parallel.members == members

	def test_validation(self, shared):
		tracker, problem = shared
		with pytest.raises(ValueError, match="at least 1 thread"):
			ParallelMultistarter(ScriptedSearch(), 10, num_threads=0)
		with pytest.raises(ValueError, match="same problem"):
			ParallelMultistarter([ScriptedSearch(tracker), ScriptedSearch(tracker)], 10)
		with pytest.raises(ValueError, match="single ProgressTracker"):
			ParallelMultistarter([ScriptedSearch(problem=problem), ScriptedSearch(problem=problem)], 10)
		with pytest.raises(ValueError, match="must be the same"):
			ParallelMultistarter([ScriptedSearch(tracker, problem)], [LubyRestarts(), LubyRestarts()])
		with pytest.raises(ValueError):
			ParallelMultistarter(ScriptedSearch(), 0, num_threads=2)
		with pytest.raises(TypeError):
			ParallelMultistarter(ScriptedSearch(), None, num_threads=2)

	def test_reoptimizable_requires_matching_multistarters(self):
		with pytest.raises(TypeError):
			ParallelReoptimizableMultistarter(Multistarter(ScriptedSearch(), 10), 2)
		with pytest.raises(TypeError):
			ParallelReoptimizableMultistarter(FixedLengthOnly(), 10, num_threads=2)


class TestParallelMultistarterRuns:
	"""Running threads and combining results."""

	def test_single_thread_matches_multistarter(self):
		search = ScriptedSearch()
		with ParallelMultistarter(search, 10, num_threads=1) as parallel:
			best = parallel.optimize(3)
			assert parallel.total_run_length == 30
		assert search.optimize_calls == [10, 10, 10]
		assert search.reoptimize_calls == []
		assert best.cost == 997

	def test_reoptimize_single_thread(self):
		search = ScriptedSearch()
		with ParallelReoptimizableMultistarter(search, 10, num_threads=1) as parallel:
			parallel.reoptimize(3)
			assert isinstance(parallel.members[0], ReoptimizableMultistarter)
		assert search.reoptimize_calls == [10, 10, 10]
		assert search.optimize_calls == []

	def test_every_thread_runs(self):
		search = ScriptedSearch()
		with ParallelMultistarter(search, 10, num_threads=4) as parallel:
			parallel.optimize(5)
			assert parallel.total_run_length == 200
		for twin in search.splits:
			assert twin.optimize_calls == [10] * 5

	def test_best_across_threads(self, shared):
		tracker, problem = shared
		searches = [ScriptedSearch(tracker, problem, cost_offset=o) for o in (0, -500, 100)]
		with ParallelMultistarter(searches, 10) as parallel:
			best = parallel.optimize(2)
		assert best.cost == 498
		assert tracker.get_cost() == 498

	def test_stopped_tracker(self):
		search = ScriptedSearch()
		search.progress_tracker.stop()
		with ParallelMultistarter(search, 10, num_threads=2) as parallel:
			assert parallel.optimize(3) is None
		assert search.optimize_calls == []

	def test_optimum_ends_all_threads(self, problem, mutation, initializer):
		sa = SimulatedAnnealing(problem, mutation, initializer)
		with ParallelMultistarter(sa, 1000, num_threads=4) as parallel:
			best = parallel.optimize(100)
		assert best.cost == 0
		assert parallel.progress_tracker.did_find_best()

	def test_worker_exception_is_raised(self, shared):
		tracker, problem = shared
		healthy = ScriptedSearch(tracker, problem)
		failing = ScriptedSearch(tracker, problem, fail_with=ValueError("boom"))
		with ParallelMultistarter([healthy, failing], 10) as parallel:
			with pytest.raises(ValueError, match="boom"):
				parallel.optimize(2)
		assert healthy.optimize_calls == [10, 10]

	def test_first_exception_wins(self, shared):
		tracker, problem = shared
		searches = [
			ScriptedSearch(tracker, problem, fail_with=KeyError("first")),
			ScriptedSearch(tracker, problem, fail_with=ValueError("second")),
		]
		with ParallelMultistarter(searches, 10) as parallel:
			with pytest.raises(KeyError):
				parallel.optimize(1)

	def test_tracker_setter(self):
		search = ScriptedSearch()
		with ParallelMultistarter(search, 10, num_threads=2) as parallel:
			tracker = ProgressTracker()
			parallel.progress_tracker = tracker
			assert all(m.progress_tracker is tracker for m in parallel.members)


class TestLifecycle:
	"""Closing and splitting coordinators."""

	def test_closed_coordinator_raises(self):
		parallel = ParallelMultistarter(ScriptedSearch(), 10, num_threads=2)
		parallel.close()
		assert parallel.is_closed()
		with pytest.raises(RuntimeError, match="previously closed"):
			parallel.optimize(1)
		parallel.close()

	def test_context_manager_closes(self):
		with ParallelMetaheuristic(ScriptedSearch(), 2) as parallel:
			parallel.optimize(5)
		assert parallel.is_closed()

	def test_split(self):
		search = ScriptedSearch()
		with ParallelMultistarter(search, 10, num_threads=2) as parallel:
			twin = parallel.split()
			assert type(twin) is ParallelMultistarter
			assert twin.num_threads == 2
			assert not twin.is_closed()
			assert twin.progress_tracker is parallel.progress_tracker
			assert twin.members[0] is not parallel.members[0]
			twin.close()

	def test_split_of_closed_is_closed(self):
		parallel = ParallelReoptimizableMultistarter(ScriptedSearch(), 10, num_threads=2)
		parallel.close()
		twin = parallel.split()
		assert type(twin) is ParallelReoptimizableMultistarter
		assert twin.is_closed()


class TestParallelMetaheuristic:
	"""One run per thread."""

	def test_runs(self):
		search = ScriptedSearch()
		with ParallelMetaheuristic(search, 3) as parallel:
			best = parallel.optimize(50)
			assert parallel.total_run_length == 150
		assert search.optimize_calls == [50]
		assert best.cost == 999

	def test_reoptimize(self):
		search = ScriptedSearch()
		with ParallelReoptimizableMetaheuristic(search, 2) as parallel:
			parallel.reoptimize(7)
		assert search.reoptimize_calls == [7]
		assert search.splits[0].reoptimize_calls == [7]

	def test_validation(self, shared):
		tracker, problem = shared
		with pytest.raises(ValueError):
			ParallelMetaheuristic(ScriptedSearch(), 0)
		with pytest.raises(ValueError):
			ParallelMetaheuristic([])
		with pytest.raises(ValueError, match="same problem"):
			ParallelMetaheuristic([ScriptedSearch(tracker), ScriptedSearch(tracker)])
		with pytest.raises(TypeError):
			ParallelReoptimizableMetaheuristic(FixedLengthOnly(), 2)

	def test_with_simulated_annealing(self, unbounded_problem, mutation, initializer):
		sa = SimulatedAnnealing(unbounded_problem, mutation, initializer)
		with ParallelMetaheuristic(sa, 2) as parallel:
			best = parallel.optimize(200)
			assert parallel.total_run_length == 400
		assert best.cost >= parallel.progress_tracker.get_cost()


class TestTimedParallelMultistarter:
	"""Time-bounded search."""

	def test_time_unit(self):
		with TimedParallelMultistarter(ScriptedSearch(), 10, num_threads=1) as parallel:
			assert parallel.time_unit == 1000
			assert parallel.search_history is None
			with pytest.raises(ValueError):
				parallel.set_time_unit(0)
			parallel.set_time_unit(5)
			assert parallel.time_unit == 5
			twin = parallel.split()
			assert twin.time_unit == 5
			twin.close()

	def test_history_per_time_unit(self):
		search = ScriptedSearch(delay=0.002)
		with TimedParallelMultistarter(search, 10, num_threads=2) as parallel:
			parallel.set_time_unit(10)
			best = parallel.optimize(3)
		assert len(parallel.search_history) == 3
		assert best is not None
		assert parallel.progress_tracker.is_stopped()
		costs = [p.cost for p in parallel.search_history if p is not None]
		assert costs == sorted(costs, reverse=True)

	def test_ends_early_on_optimum(self):
		search = ScriptedSearch(find_best_at_eval=30, delay=0.001)
		with TimedParallelMultistarter(search, 10, num_threads=2) as parallel:
			parallel.set_time_unit(20)
			best = parallel.optimize(500)
		assert best.cost == 1
		assert best.is_known_optimal
		assert len(parallel.search_history) < 500

	def test_clears_stop_flag(self):
		search = ScriptedSearch(delay=0.001)
		search.progress_tracker.stop()
		with TimedParallelMultistarter(search, 10, num_threads=1) as parallel:
			parallel.set_time_unit(5)
			assert parallel.optimize(1) is not None
		assert len(parallel.search_history) == 1

	def test_known_optimum_returns_none(self):
		search = ScriptedSearch()
		search.progress_tracker.update(1, [1], True)
		with TimedParallelMultistarter(search, 10, num_threads=1) as parallel:
			assert parallel.optimize(5) is None
			assert parallel.search_history == []
		assert search.optimize_calls == []

	def test_reoptimize(self):
		search = ScriptedSearch(delay=0.001)
		with TimedParallelReoptimizableMultistarter(search, 10, num_threads=1) as parallel:
			parallel.set_time_unit(5)
			parallel.reoptimize(2)
		assert search.reoptimize_calls
		assert not search.optimize_calls
		assert isinstance(parallel.members[0], ReoptimizableMultistarter)

	def test_with_simulated_annealing(self, unbounded_problem, mutation, initializer):
		sa = SimulatedAnnealing(unbounded_problem, mutation, initializer)
		with TimedParallelMultistarter(sa, 500, num_threads=2) as parallel:
			parallel.set_time_unit(10)
			best = parallel.optimize(2)
		assert best is not None
		assert parallel.total_run_length > 0
		assert parallel.progress_tracker.get_cost() <= parallel.search_history[-1].cost
