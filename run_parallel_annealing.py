#!/usr/bin/env python3
"""
Parallel Multistart Annealing Demo

Sorts a random permutation by simulated annealing: the cost of a
permutation is its number of inversions, so the identity permutation is
the (known) optimum. Threads run restarted annealing according to the
restart schedule of the configuration, sharing one ProgressTracker.

Examples:
	python run_parallel_annealing.py --size 200 --threads 4 --restarts 8
	python run_parallel_annealing.py --config search.yaml --output result.json
	python run_parallel_annealing.py --time-limit 10 --time-unit 500
"""

import argparse
import json
from dataclasses import asdict
from datetime import datetime
from typing import Optional

import numpy as np

from stochsearch.config import AnnealingConfig, RestartConfig, SearchConfig
from stochsearch.core.operators import Initializer, UndoableMutationOperator
from stochsearch.core.problem import IntegerCostOptimizationProblem
from stochsearch.core.rand import SplittableGenerator, create_generator
from stochsearch.factory import SearchFactory
from stochsearch.logger import Logger
from stochsearch.progress import ProgressTracker


# Global logger instance
logger: Optional[Logger] = None


def log(msg: str):
	"""Log wrapper that uses the global logger."""
	if logger:
		logger(msg)
	else:
		print(msg)


class Inversions(IntegerCostOptimizationProblem):
	"""Number of out-of-order pairs of a permutation."""

	def cost(self, candidate: np.ndarray) -> int:
		n = len(candidate)
		return int(sum(int((candidate[i + 1:] < candidate[i]).sum()) for i in range(n - 1)))

	def min_cost(self) -> int:
		return 0


class SwapMutation(UndoableMutationOperator):
	"""Swaps two random positions; undo swaps them back."""

	def __init__(self, rng: Optional[SplittableGenerator] = None):
		self._rng = rng if rng is not None else create_generator()
		self._i = 0
		self._j = 0

	def mutate(self, candidate: np.ndarray) -> None:
		n = len(candidate)
		self._i = self._rng.integers(n)
		self._j = self._rng.integers(n - 1)
		if self._j >= self._i:
			self._j += 1
		candidate[[self._i, self._j]] = candidate[[self._j, self._i]]

	def undo(self, candidate: np.ndarray) -> None:
		candidate[[self._i, self._j]] = candidate[[self._j, self._i]]

	def split(self) -> 'SwapMutation':
		return SwapMutation(self._rng.split())


class RandomPermutation(Initializer):
	"""Uniformly random permutations of 0..n-1."""

	def __init__(self, n: int, rng: Optional[SplittableGenerator] = None):
		self._n = n
		self._rng = rng if rng is not None else create_generator()

	def create_candidate_solution(self) -> np.ndarray:
		return self._rng.generator.permutation(self._n)

	def split(self) -> 'RandomPermutation':
		return RandomPermutation(self._n, self._rng.split())


def build_config(args) -> SearchConfig:
	"""Configuration from a YAML file, with command line overrides."""
	if args.config:
		config = SearchConfig.load_yaml(args.config)
	else:
		config = SearchConfig(
			annealing=AnnealingConfig(schedule=args.schedule),
			restarts=RestartConfig(
				schedule=args.restarts_schedule,
				run_length=args.run_length,
				r0=args.run_length,
				luby_scale=args.run_length,
			),
		)
	if args.threads is not None:
		config.num_threads = args.threads
	if args.restarts is not None:
		config.num_restarts = args.restarts
	if args.time_limit is not None:
		config.time_limit = args.time_limit
		config.time_unit_ms = args.time_unit
	if args.seed is not None:
		config.seed = args.seed
	config.verbose = config.verbose or args.verbose
	return config


def main():
	global logger

	parser = argparse.ArgumentParser(description="Parallel Multistart Annealing Demo")
	parser.add_argument("--size", type=int, default=100, help="Permutation length")
	parser.add_argument("--config", type=str, default=None, help="SearchConfig YAML file")
	parser.add_argument("--schedule", type=str, default="self_tuning_lam", help="Annealing schedule")
	parser.add_argument("--restarts-schedule", type=str, default="parallel_variable_annealing_length", help="Restart schedule")
	parser.add_argument("--run-length", type=int, default=1000, help="Run length (or r0 for VAL)")
	parser.add_argument("--threads", type=int, default=None, help="Number of threads")
	parser.add_argument("--restarts", type=int, default=None, help="Restarts per thread")
	parser.add_argument("--time-limit", type=int, default=None, help="Time units (enables timed search)")
	parser.add_argument("--time-unit", type=int, default=1000, help="Milliseconds per time unit")
	parser.add_argument("--seed", type=int, default=None, help="Random seed")
	parser.add_argument("--log-dir", type=str, default=None, help="Directory for log files")
	parser.add_argument("--verbose", action="store_true", help="Log every run")
	parser.add_argument("--output", type=str, default=None, help="Output JSON file")
	parser.add_argument("--save-config", type=str, default=None, help="Write the effective config as YAML")
	args = parser.parse_args()

	logger = Logger("parallel_annealing", log_dir=args.log_dir)
	config = build_config(args)
	if args.save_config:
		config.save_yaml(args.save_config)

	logger.header("Parallel Multistart Annealing")
	log(f"  Permutation size: {args.size}")
	log(f"  Annealing: {config.annealing.schedule}")
	log(f"  Restarts: {config.restarts.schedule}")
	log(f"  Threads: {config.num_threads}")
	if config.time_limit is not None:
		log(f"  Time limit: {config.time_limit} x {config.time_unit_ms} ms")
	else:
		log(f"  Restarts per thread: {config.num_restarts}")

	problem = Inversions()
	tracker = ProgressTracker(logger=logger, verbose=config.verbose, prefix="[Demo]")
	SearchFactory.configure(config)
	mutation = SwapMutation()
	initializer = RandomPermutation(args.size)

	start = datetime.now()
	with SearchFactory.create_parallel_annealer(config, problem, mutation, initializer, tracker, logger) as search:
		best = SearchFactory.run(search, config)
		evaluations = search.total_run_length
	elapsed = (datetime.now() - start).total_seconds()

	logger.header("Results")
	final = tracker.get_solution_cost_pair()
	log(f"  Best cost: {final.cost if final is not None else None}")
	log(f"  Optimal: {tracker.did_find_best()}")
	log(f"  Evaluations: {evaluations:,}")
	log(f"  Elapsed: {elapsed:.2f}s")
	if best is not None and best.cost != final.cost:
		log(f"  (returned cost {best.cost})")

	if args.output:
		result = {
			"timestamp": start.isoformat(),
			"size": args.size,
			"config": asdict(config),
			"best_cost": final.cost if final is not None else None,
			"optimal": tracker.did_find_best(),
			"evaluations": evaluations,
			"elapsed_seconds": elapsed,
		}
		with open(args.output, "w") as f:
			json.dump(result, f, indent=2)
		log(f"  Results saved to {args.output}")

	logger.close()


if __name__ == "__main__":
	main()
