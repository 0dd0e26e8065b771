from __future__ import annotations

from typing import Any, Dict, List

from meta_agent.backend.assistants.base import (
	AssistantTask,
	TaskRequest,
	context_block,
	is_delivery_request,
	lowered,
	mentions_feedback,
)
from meta_agent.backend.llm.normalization import clamp_confidence, list_field, map_field, section, text_field
from meta_agent.backend.llm.providers import Provider


_PROMPT_TEMPLATE = """You are a backend architect. Design a Firestore database schema for this intent: "{intent}". Description: "{description}".

Context from earlier planning:
{context}

Respond ONLY with valid JSON (no markdown, no extra text):
{{
  "analysis": "string describing the design",
  "confidence": 0.0-1.0,
  "risks": ["array", "of", "risks"],
  "firestoreProposal": {{
    "collections": ["array", "of", "collection", "names"],
    "fields": {{ "collectionName": {{ "fieldName": "type", "otherField": "type" }} }},
    "notes": ["array", "of", "implementation", "notes"]
  }}
}}"""

_DELIVERY_FIELDS = {
	"orders": {
		"id": "string",
		"clientId": "ref:clients",
		"courierId": "ref:couriers|null",
		"status": "string (e.g. 'created','assigned','in_transit','delivered')",
		"pickup": "map { address, lat, lng }",
		"dropoff": "map { address, lat, lng }",
		"price": "number",
		"createdAt": "timestamp",
		"updatedAt": "timestamp",
	},
	"clients": {
		"id": "string",
		"name": "string",
		"contact": "map { phone, email }",
		"defaultAddress": "map { address, lat, lng }",
	},
	"couriers": {
		"id": "string",
		"name": "string",
		"vehicle": "string",
		"active": "boolean",
		"location": "map { lat, lng }",
	},
}

_ACCOUNT_FIELDS = {
	"users": {"id": "string", "email": "string", "roles": "array", "createdAt": "timestamp"},
	"sessions": {"id": "string", "userId": "ref:users", "expiresAt": "timestamp"},
}

_GENERIC_FIELDS = {
	"items": {"id": "string", "name": "string", "metadata": "map"},
	"logs": {"id": "string", "level": "string", "message": "string", "ts": "timestamp"},
}

_REVIEW_FIELDS = {
	"id": "string",
	"targetId": "string",
	"rating": "number (1-5)",
	"comment": "string",
	"createdAt": "timestamp",
}


def _copy_fields(fields: Dict[str, Dict[str, str]]) -> Dict[str, Dict[str, str]]:
	return {name: dict(spec) for name, spec in fields.items()}


class AdminAssistant(AssistantTask):
	"""Backend architect: proposes a Firestore schema for the intent."""

	name = "admin"
	plan_key = "firestoreProposal"
	system_instruction = "You are a backend architect. Respond ONLY with valid JSON, no markdown or extra text."

	def build_prompt(self, request: TaskRequest) -> str:
		return _PROMPT_TEMPLATE.format(
			intent=str(request.intent),
			description=str(request.description),
			context=context_block(request.context),
		)

	def normalize(self, payload: Dict[str, Any], provider: Provider) -> Dict[str, Any]:
		proposal = section(payload, "firestoreProposal")
		return {
			"assistant": self.name,
			"status": "ok",
			"analysis": text_field(payload.get("analysis"), f"Design completed by {provider.analysis_label}"),
			"confidence": clamp_confidence(payload.get("confidence")),
			"risks": list_field(payload.get("risks")),
			"llmProvider": provider.label,
			"firestoreProposal": {
				"collections": list_field(proposal.get("collections")),
				"fields": map_field(proposal.get("fields")),
				"notes": list_field(proposal.get("notes")),
			},
		}

	def rule_based(self, request: TaskRequest) -> Dict[str, Any]:
		intent, description = lowered(request)
		notes: List[str] = []

		if is_delivery_request(intent, description):
			collections = ["orders", "clients", "couriers"]
			fields = _copy_fields(_DELIVERY_FIELDS)
			notes.append("Use an `orders/{orderId}/events` subcollection for status history.")
			notes.append("Index `orders` by `clientId` and `status` for fast queries.")
		elif "user" in intent or "user" in description or "signup" in intent:
			collections = ["users", "sessions"]
			fields = _copy_fields(_ACCOUNT_FIELDS)
			notes.append("Keep PII to a minimum; encrypt sensitive fields where needed.")
		else:
			collections = ["items", "logs"]
			fields = _copy_fields(_GENERIC_FIELDS)
			notes.append("Generic design; refine once concrete requirements are known.")

		if mentions_feedback(description):
			if "reviews" not in collections:
				collections.append("reviews")
			fields["reviews"] = dict(_REVIEW_FIELDS)
			notes.append("Add an aggregated `avgRating` field on parent documents for fast reads.")

		confidence = 0.6
		risks: List[str] = []
		if "orders" in collections:
			confidence = 0.8
			risks.append("Status changes on orders require compound indexes.")
			risks.append("clientId/courierId references must stay in sync with Auth.")
		if len(collections) <= 2:
			confidence = 0.5
			risks.append("Generic design; may not cover all real-world cases.")

		analysis = " ".join(
			[
				f'Fallback rule-based design for intent: "{request.intent}"',
				f'Detected intent: "{request.intent}".',
				f"Selected collections: {', '.join(collections)}.",
				"Design captured in `firestoreProposal` object (fallback mode).",
			]
		)
		return {
			"assistant": self.name,
			"status": "ok",
			"confidence": confidence,
			"risks": risks,
			"analysis": analysis,
			"firestoreProposal": {
				"collections": collections,
				"fields": fields,
				"notes": notes,
			},
		}
