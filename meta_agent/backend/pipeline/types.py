from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from meta_agent.backend.response import now_iso


StageName = Literal["admin", "client", "courier"]


@dataclass(frozen=True)
class StageResponse:
	status: Literal["ok", "error"]
	data: Optional[Dict[str, Any]] = None
	error: str = ""

	@property
	def ok(self) -> bool:
		return self.status == "ok" and isinstance(self.data, dict)

	@classmethod
	def success(cls, data: Dict[str, Any]) -> "StageResponse":
		return cls(status="ok", data=data)

	@classmethod
	def failure(cls, error: str) -> "StageResponse":
		return cls(status="error", error=error)

	@classmethod
	def from_result(cls, result: Any) -> "StageResponse":
		if not isinstance(result, dict):
			return cls.failure("Assistant returned a non-object result.")
		if result.get("status") != "ok":
			return cls.failure(str(result.get("error") or "Assistant reported an error."))
		return cls.success(result)


@dataclass
class PipelineRun:
	"""Accumulator for one pipeline run; built fresh per request."""

	steps_executed: List[str] = field(default_factory=list)
	results: Dict[str, Dict[str, Any]] = field(default_factory=dict)
	errors: List[str] = field(default_factory=list)

	def record(self, stage: str, result: Dict[str, Any]) -> None:
		self.results[stage] = result
		self.steps_executed.append(stage)

	def success(self, next_actions: List[str]) -> Dict[str, Any]:
		return {
			"status": "ok",
			"stepsExecuted": list(self.steps_executed),
			"results": dict(self.results),
			"conflicts": [],
			"nextActions": next_actions,
			"timestamp": now_iso(),
		}

	def failure(self, message: str) -> Dict[str, Any]:
		return {
			"status": "error",
			"message": message,
			"stepsExecuted": list(self.steps_executed),
			"results": dict(self.results),
			"errors": list(self.errors),
			"timestamp": now_iso(),
		}
