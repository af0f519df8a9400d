"""
Shared fixtures.
"""

import pytest

from stochsearch.core.rand import SplittableGenerator, configure_default, configure_random_generator
from stochsearch.progress import ProgressTracker
from tests.helpers import (
	BitFlip,
	BitFlipNoUndo,
	IterableBitFlip,
	OnesCount,
	OnesCountNoBound,
	RandomBits,
)


@pytest.fixture(autouse=True)
def seeded_generators():
	"""Make every test reproducible."""
	configure_random_generator(20231)
	yield
	configure_default()


@pytest.fixture
def tracker():
	return ProgressTracker()


@pytest.fixture
def problem():
	return OnesCount()


@pytest.fixture
def unbounded_problem():
	return OnesCountNoBound()


@pytest.fixture
def mutation():
	return BitFlip(SplittableGenerator(3))


@pytest.fixture
def mutation_no_undo():
	return BitFlipNoUndo(SplittableGenerator(5))


@pytest.fixture
def iterable_mutation():
	return IterableBitFlip(SplittableGenerator(7))


@pytest.fixture
def initializer():
	return RandomBits(24, SplittableGenerator(9))
