from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from meta_agent.backend.deadline import Deadline
from meta_agent.backend.llm.chain import FallbackChain
from meta_agent.backend.llm.providers import Provider


logger = logging.getLogger(__name__)

_FEEDBACK_TOKENS = ("rate", "rating", "feedback")


@dataclass(frozen=True)
class TaskRequest:
	intent: str
	description: str = ""
	context: Dict[str, Any] = field(default_factory=dict)


def lowered(request: TaskRequest) -> Tuple[str, str]:
	return str(request.intent or "").lower(), str(request.description or "").lower()


def is_delivery_request(intent: str, description: str) -> bool:
	return (
		"order" in intent
		or "order" in description
		or "pickup" in description
		or "deliver" in description
		or "delivery" in intent
	)


def mentions_feedback(description: str) -> bool:
	return any(token in description for token in _FEEDBACK_TOKENS)


def context_block(context: Dict[str, Any]) -> str:
	if not context:
		return "(none)"
	return json.dumps(context, ensure_ascii=False, indent=2, sort_keys=True, default=str)


class AssistantTask:
	"""Shared shape of the admin, client and courier assistants.

	Subclasses supply the prompt, the rule-based plan and the normalization of a
	provider payload; ``handle_task`` wires them into the fallback chain and never
	raises.
	"""

	name = "assistant"
	plan_key = "plan"
	system_instruction = "Respond ONLY with valid JSON, no markdown or extra text."

	def __init__(self, chain: FallbackChain):
		self._chain = chain

	def build_prompt(self, request: TaskRequest) -> str:
		raise NotImplementedError

	def rule_based(self, request: TaskRequest) -> Dict[str, Any]:
		raise NotImplementedError

	def normalize(self, payload: Dict[str, Any], provider: Provider) -> Dict[str, Any]:
		raise NotImplementedError

	def error_result(self, message: str) -> Dict[str, Any]:
		return {"assistant": self.name, "status": "error", "error": message}

	def handle_task(self, request: TaskRequest, deadline: Optional[Deadline] = None) -> Dict[str, Any]:
		try:
			return self._chain.resolve(
				prompt=self.build_prompt(request),
				system_instruction=self.system_instruction,
				normalize=self.normalize,
				rule_based=lambda: self.rule_based(request),
				deadline=deadline,
			)
		except Exception as exc:
			logger.exception("%s assistant failed for intent %r", self.name, request.intent)
			return self.error_result(str(exc) or exc.__class__.__name__)


def task_request_for_stage(
	stage: str,
	*,
	goal: str,
	description: str | None = None,
	context: Optional[Dict[str, Any]] = None,
) -> TaskRequest:
	"""Map a ``{goal, description, context}`` stage call onto a :class:`TaskRequest`.

	Per-stage overrides (``context["admin"]``, ``context["client"]``,
	``context["courier"]`` or the legacy ``context["curier"]``) are merged over the
	shared context. The description comes from the call itself, then the stage
	overrides, then the shared context.
	"""
	shared = dict(context or {})
	overrides: Dict[str, Any] = {}
	for key in _STAGE_OVERRIDE_KEYS.get(stage, (stage,)):
		candidate = shared.get(key)
		if isinstance(candidate, dict):
			overrides.update(candidate)
	merged = {**shared, **overrides}
	resolved_description = description or overrides.get("description") or shared.get("description") or ""
	return TaskRequest(intent=str(goal), description=str(resolved_description), context=merged)


_STAGE_OVERRIDE_KEYS = {
	"admin": ("admin",),
	"client": ("client",),
	"courier": ("curier", "courier"),
}
