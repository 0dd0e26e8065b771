from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from meta_agent.backend import constants
from meta_agent.backend.deadline import Deadline
from meta_agent.backend.pipeline.invokers import StageInvoker
from meta_agent.backend.pipeline.types import PipelineRun


logger = logging.getLogger(__name__)

_NEXT_ACTIONS = (
	("admin", "firestoreProposal", "Review and implement Firestore schema from admin proposal"),
	("client", "clientPlan", "Build UI screens according to client plan"),
	("courier", "deliveryPlan", "Configure delivery routing and ETA system"),
)
_DEFAULT_NEXT_ACTION = "Review assistant outputs and determine next steps"


def next_actions(results: Dict[str, Dict[str, Any]]) -> List[str]:
	actions: List[str] = []
	for stage, plan_key, suggestion in _NEXT_ACTIONS:
		plan = (results.get(stage) or {}).get(plan_key)
		if isinstance(plan, dict) and any(plan.values()):
			actions.append(suggestion)
	if not actions:
		actions.append(_DEFAULT_NEXT_ACTION)
	return actions


class PipelineOrchestrator:
	"""Runs admin -> client -> courier, threading each result into the next stage.

	Stages run strictly in order. The first failing stage (reported error, timeout
	or transport failure) ends the run; whatever completed before it stays in the
	returned ``results`` and ``stepsExecuted``.
	"""

	def __init__(self, invoker: StageInvoker, *, stage_timeout_s: float = constants.DEFAULT_STAGE_TIMEOUT_S):
		self._invoker = invoker
		self.stage_timeout_s = stage_timeout_s

	def run(
		self,
		*,
		intent: str,
		description: str = "",
		context: Optional[Dict[str, Any]] = None,
	) -> Dict[str, Any]:
		run = PipelineRun()
		base_context = dict(context or {})
		stage_context = base_context
		try:
			for stage in constants.STAGE_ORDER:
				title = stage.capitalize()
				logger.info("Pipeline stage %s started (intent=%r)", stage, intent)
				response = self._invoker.invoke(
					stage,
					goal=intent,
					description=description,
					context=stage_context,
					deadline=Deadline(self.stage_timeout_s),
				)
				if not response.ok:
					logger.warning("Pipeline stage %s failed: %s", stage, response.error)
					run.errors.append(f"{title} assistant error: {response.error}")
					return run.failure(f"{title} assistant failed")

				run.record(stage, response.data)
				logger.info("Pipeline stage %s completed", stage)
				output_key = constants.STAGE_OUTPUT_KEYS.get(stage)
				if output_key:
					stage_context = {**base_context, output_key: response.data}
		except Exception as exc:
			logger.exception("Pipeline orchestration failed")
			run.errors.append(f"Orchestration error: {exc}")
			return run.failure("Orchestration failed")

		return run.success(next_actions(run.results))
