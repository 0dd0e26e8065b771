from __future__ import annotations

import time
from typing import Callable, Optional


class Deadline:
	"""Point in time after which a stage call must give up."""

	def __init__(self, timeout_s: float, *, clock: Callable[[], float] = time.monotonic):
		self._clock = clock
		self.timeout_s = float(timeout_s)
		self._expires_at = clock() + self.timeout_s

	def remaining(self) -> float:
		return max(0.0, self._expires_at - self._clock())

	def expired(self) -> bool:
		return self.remaining() <= 0.0

	def bound(self, timeout_s: float) -> float:
		return min(float(timeout_s), self.remaining())

	@property
	def timeout_ms(self) -> int:
		return int(self.timeout_s * 1000)


def bounded_timeout(timeout_s: float, deadline: Optional[Deadline]) -> float:
	if deadline is None:
		return timeout_s
	return deadline.bound(timeout_s)
