from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Union


FailureReason = Literal[
	"unavailable",
	"network_error",
	"timeout",
	"http_status",
	"missing_content",
	"unparseable",
]


@dataclass(frozen=True)
class ProviderSuccess:
	payload: Dict[str, Any] = field(default_factory=dict)
	ok: Literal[True] = True


@dataclass(frozen=True)
class ProviderFailure:
	reason: FailureReason
	detail: str = ""
	ok: Literal[False] = False

	def describe(self) -> str:
		return f"{self.reason}: {self.detail}" if self.detail else self.reason


ProviderOutcome = Union[ProviderSuccess, ProviderFailure]
