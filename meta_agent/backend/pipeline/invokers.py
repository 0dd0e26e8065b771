from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from meta_agent.backend import constants
from meta_agent.backend.assistants.base import TaskRequest, task_request_for_stage
from meta_agent.backend.deadline import Deadline
from meta_agent.backend.pipeline.types import StageResponse


logger = logging.getLogger(__name__)

TaskFn = Callable[[TaskRequest, Optional[Deadline]], Dict[str, Any]]


def timeout_error(stage: str, deadline: Deadline) -> str:
	return f"Timeout calling {stage} ({deadline.timeout_ms}ms)"


class StageInvoker:
	"""Runs one pipeline stage and reports the outcome as a :class:`StageResponse`."""

	def invoke(
		self,
		stage: str,
		*,
		goal: str,
		description: str,
		context: Dict[str, Any],
		deadline: Deadline,
	) -> StageResponse:
		raise NotImplementedError

	def close(self) -> None:
		return None


class InProcessStageInvoker(StageInvoker):
	"""Calls the assistant tasks directly on a worker pool, waiting at most the stage deadline.

	A stage that overruns is reported as failed; the deadline it was handed also
	bounds its outbound provider calls, so the worker gives up on its own.
	"""

	def __init__(self, tasks: Mapping[str, TaskFn], *, max_workers: int = 8):
		self._tasks = dict(tasks)
		self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="meta-agent-stage")

	def invoke(
		self,
		stage: str,
		*,
		goal: str,
		description: str,
		context: Dict[str, Any],
		deadline: Deadline,
	) -> StageResponse:
		task = self._tasks.get(stage)
		if task is None:
			return StageResponse.failure(f"No assistant registered for stage '{stage}'.")
		request = task_request_for_stage(stage, goal=goal, description=description, context=context)
		future = self._executor.submit(task, request, deadline)
		try:
			result = future.result(timeout=deadline.remaining())
		except FutureTimeoutError:
			future.cancel()
			logger.warning("Stage %s exceeded %.1fs", stage, deadline.timeout_s)
			return StageResponse.failure(timeout_error(stage, deadline))
		return StageResponse.from_result(result)

	def close(self) -> None:
		self._executor.shutdown(wait=False, cancel_futures=True)


class RemoteStageInvoker(StageInvoker):
	"""Calls a task-hosting service over HTTP, one ``POST /assistant/{stage}`` per stage."""

	def __init__(self, base_url: str, *, http_client: Optional[httpx.Client] = None):
		self._base_url = base_url.rstrip("/")
		self._owns_client = http_client is None
		self._client = http_client or httpx.Client()

	def url_for(self, stage: str) -> str:
		return f"{self._base_url}/assistant/{constants.STAGE_ROUTES.get(stage, stage)}"

	def invoke(
		self,
		stage: str,
		*,
		goal: str,
		description: str,
		context: Dict[str, Any],
		deadline: Deadline,
	) -> StageResponse:
		if deadline.expired():
			return StageResponse.failure(timeout_error(stage, deadline))
		try:
			response = self._client.post(
				self.url_for(stage),
				json={"goal": goal, "description": description, "context": context},
				timeout=deadline.remaining(),
			)
		except httpx.TimeoutException:
			logger.warning("Stage %s timed out after %.1fs", stage, deadline.timeout_s)
			return StageResponse.failure(timeout_error(stage, deadline))
		except httpx.HTTPError as exc:
			logger.warning("Stage %s request failed: %s", stage, exc)
			return StageResponse.failure(str(exc) or exc.__class__.__name__)

		if not response.is_success:
			return StageResponse.failure(f"HTTP {response.status_code}: {response.reason_phrase}")
		try:
			body = response.json()
		except ValueError:
			return StageResponse.failure("Assistant service returned invalid JSON.")
		if not isinstance(body, dict):
			return StageResponse.failure("Assistant service returned an unexpected payload shape.")
		if body.get("status") != "ok":
			return StageResponse.failure(str(body.get("error") or "Assistant service reported an error."))
		return StageResponse.from_result(body.get("data"))

	def close(self) -> None:
		if self._owns_client:
			self._client.close()
