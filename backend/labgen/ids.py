from __future__ import annotations
import itertools
import threading
import uuid
from typing import Callable


IdSource = Callable[[], str]


def uuid_ids() -> str:
	return uuid.uuid4().hex[:12]


class CounterIds:
	"""Monotonic ids (``t1``, ``t2``, ...) for reproducible allocations."""

	def __init__(self, prefix: str = "t", start: int = 1) -> None:
		self.prefix = prefix
		self._counter = itertools.count(start)
		self._lock = threading.Lock()

	def __call__(self) -> str:
		with self._lock:
			return f"{self.prefix}{next(self._counter)}"
