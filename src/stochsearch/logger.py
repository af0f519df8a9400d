"""
Callable logger for search experiments.

Every search accepts a `logger: Callable[[str], None]`. This module's
Logger is such a callable: it timestamps each message and writes it to the
console and, when a log directory is given, to a dated log file
(<log_dir>/YYYY/MM/DD/<name>_<timestamp>.log).

Usage:
	logger = Logger("tsp_run", log_dir="logs")
	logger.header("Parallel annealing")

	search = ParallelMultistarter(sa, 1000, num_threads=4, verbose=True, logger=logger)
	best = search.optimize(10)
	logger(f"best cost: {best.cost}")
"""

import logging
import os
import threading
from datetime import datetime
from typing import Optional


class Logger:
	"""
	Logger writing timestamped lines to the console and optionally a file.

	Safe to share between the threads of a parallel search.

	Attributes:
		name: Logger name (used for the log file name)
		log_file: Path to the log file, or None when not logging to a file
	"""

	_counter = 0
	_counter_lock = threading.Lock()

	def __init__(
		self,
		name: str = "search",
		log_dir: Optional[str] = None,
		console: bool = True,
		timestamp_format: str = '%H:%M:%S',
		level: int = logging.INFO,
	):
		"""
		Args:
			name: Base name for the log file (e.g., "tsp_parallel")
			log_dir: Root of the dated log directories; no file if None
			console: Whether to also log to console
			timestamp_format: strftime format for log timestamps
			level: Level the messages are logged at
		"""
		self.name = name
		self._level = level
		self.log_file: Optional[str] = None

		timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
		with Logger._counter_lock:
			Logger._counter += 1
			instance = Logger._counter

		self._logger = logging.getLogger(f'stochsearch.run.{name}.{timestamp}.{instance}')
		self._logger.setLevel(level)
		self._logger.propagate = False
		self._logger.handlers.clear()

		formatter = logging.Formatter(
			'%(asctime)s | %(threadName)s | %(message)s',
			datefmt=timestamp_format,
		)

		if log_dir is not None:
			now = datetime.now()
			dated_dir = os.path.join(log_dir, now.strftime("%Y"), now.strftime("%m"), now.strftime("%d"))
			os.makedirs(dated_dir, exist_ok=True)
			self.log_file = os.path.join(dated_dir, f"{name}_{timestamp}.log")
			file_handler = logging.FileHandler(self.log_file)
			file_handler.setLevel(level)
			file_handler.setFormatter(formatter)
			self._logger.addHandler(file_handler)

		if console:
			console_handler = logging.StreamHandler()
			console_handler.setLevel(level)
			console_handler.setFormatter(formatter)
			self._logger.addHandler(console_handler)

	def __call__(self, message: str = "") -> None:
		"""Log a message. Makes Logger usable wherever a log callable is expected."""
		self.log(message)

	def log(self, message: str = "") -> None:
		"""Log a message and flush the handlers."""
		self._logger.log(self._level, message)
		for handler in self._logger.handlers:
			handler.flush()

	def separator(self, char: str = "=", width: int = 70) -> None:
		self.log(char * width)

	def header(self, title: str, char: str = "=", width: int = 70) -> None:
		"""Log a title between two separator lines."""
		self.log()
		self.separator(char, width)
		self.log(f"  {title}")
		self.separator(char, width)

	def close(self) -> None:
		"""Detach and close the handlers."""
		for handler in list(self._logger.handlers):
			handler.close()
			self._logger.removeHandler(handler)

	def __repr__(self) -> str:
		return f"Logger(name='{self.name}', log_file={self.log_file!r})"


def create_logger(
	name: str = "search",
	log_dir: Optional[str] = None,
	console: bool = True,
) -> Logger:
	"""
	Factory function to create a Logger instance.

	Args:
		name: Base name for the log file
		log_dir: Root of the dated log directories; no file if None
		console: Whether to also log to console

	Returns:
		Configured Logger instance
	"""
	return Logger(name=name, log_dir=log_dir, console=console)
