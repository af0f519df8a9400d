"""
Operator contracts consumed by the search algorithms.

Mutation operators modify a candidate in place. Operators and
initializers carry mutable state (typically a random generator), so
each thread works with its own copy obtained through split().
"""

from abc import ABC, abstractmethod
from typing import Generic, Protocol, TypeVar, runtime_checkable

T = TypeVar('T')


class MutationOperator(ABC, Generic[T]):
	"""Mutates a candidate solution in place."""

	@abstractmethod
	def mutate(self, candidate: T) -> None:
		...

	@abstractmethod
	def split(self) -> 'MutationOperator[T]':
		...


@runtime_checkable
class SupportsUndo(Protocol):
	"""Operator that can revert the most recent mutate() call."""

	def undo(self, candidate) -> None: ...


class UndoableMutationOperator(MutationOperator[T]):
	"""
	Mutation operator that can revert its most recent mutation.

	undo(c) must restore c to its state immediately before the last
	mutate(c), and is only ever called right after that mutate().
	"""

	@abstractmethod
	def undo(self, candidate: T) -> None:
		...


class MutationIterator(ABC):
	"""
	Systematic enumeration of the neighbors of one candidate.

	Each next_mutant() transforms the candidate into its next neighbor
	(relative to the original). set_savepoint() remembers the current
	neighbor, and rollback() leaves the candidate at the savepoint, or at
	the original if no savepoint was set.
	"""

	@abstractmethod
	def has_next(self) -> bool:
		...

	@abstractmethod
	def next_mutant(self) -> None:
		...

	@abstractmethod
	def set_savepoint(self) -> None:
		...

	@abstractmethod
	def rollback(self) -> None:
		...


class IterableMutationOperator(MutationOperator[T]):
	"""Mutation operator whose neighborhood can be enumerated."""

	@abstractmethod
	def iterator(self, candidate: T) -> MutationIterator:
		...


class Initializer(ABC, Generic[T]):
	"""Creates (typically random) starting candidates."""

	@abstractmethod
	def create_candidate_solution(self) -> T:
		...

	@abstractmethod
	def split(self) -> 'Initializer[T]':
		...
