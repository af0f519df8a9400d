"""
Base class for search algorithms and search coordinators.

Provides the logging conventions shared by everything that runs a
search: an optional logger callable (print by default) that is only
used when verbose is set.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional


class SearchBase(ABC):
	"""
	Abstract base for searches.

	Subclasses must implement:
	- name property
	- split(): independent copy for use by another thread
	"""

	def __init__(
		self,
		verbose: bool = False,
		logger: Optional[Callable[[str], None]] = None,
	):
		self._verbose = verbose
		self._logger = logger or print

	def _log(self, msg: str) -> None:
		"""Log a message using the configured logger."""
		if self._verbose:
			self._logger(msg)

	@property
	def verbose(self) -> bool:
		return self._verbose

	@property
	def logger(self) -> Callable[[str], None]:
		return self._logger

	@property
	@abstractmethod
	def name(self) -> str:
		"""Return the search name."""
		...

	@abstractmethod
	def split(self) -> 'SearchBase':
		...

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(verbose={self._verbose})"
