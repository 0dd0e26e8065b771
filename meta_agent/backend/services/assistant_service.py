from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from meta_agent.backend import constants
from meta_agent.backend.assistants import task_request_for_stage
from meta_agent.backend.runtime import Runtime


logger = logging.getLogger(__name__)


class AssistantServiceError(Exception):
	def __init__(self, *, status_code: int, message: str):
		super().__init__(message)
		self.status_code = status_code
		self.message = message


def resolve_stage(stage: str) -> str:
	canonical = constants.STAGE_ALIASES.get(stage.strip().lower())
	if canonical is None:
		raise AssistantServiceError(status_code=404, message=f"Unknown assistant '{stage}'.")
	return canonical


def handle_stage(
	runtime: Runtime,
	*,
	stage: str,
	goal: str,
	description: Optional[str] = None,
	context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
	"""Run one assistant locally, the way a task-hosting service answers a stage call."""
	canonical = resolve_stage(stage)
	assistant = runtime.assistants[canonical]
	request = task_request_for_stage(canonical, goal=goal, description=description, context=context)
	logger.info("Assistant %s handling intent %r", canonical, request.intent)
	return assistant.handle_task(request)


def list_providers(runtime: Runtime) -> Dict[str, Any]:
	return {
		"configured": [provider.name for provider in runtime.chain.available_providers()],
		"order": [provider.name for provider in runtime.chain.providers],
	}
