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
from meta_agent.backend.llm.normalization import list_field, section, text_field
from meta_agent.backend.llm.providers import Provider


_PROMPT_TEMPLATE = """Design client UX and interaction flow for intent="{intent}" description="{description}".

Context from earlier planning (the backend schema proposal is under "adminOutput"):
{context}

Respond ONLY with valid JSON (no markdown, no extra text):
{{
  "analysis": "string describing the user flow",
  "clientPlan": {{
    "screens": ["ordered", "screen", "names"],
    "actions": ["ui", "actions()"],
    "notes": ["array", "of", "ux", "notes"]
  }}
}}"""


class ClientAssistant(AssistantTask):
	"""UX planner: screen sequence and actions for the client app."""

	name = "client"
	plan_key = "clientPlan"
	system_instruction = "You are a UX and interaction designer. Respond ONLY with valid JSON, no markdown or extra text."

	def build_prompt(self, request: TaskRequest) -> str:
		return _PROMPT_TEMPLATE.format(
			intent=str(request.intent),
			description=str(request.description),
			context=context_block(request.context),
		)

	def normalize(self, payload: Dict[str, Any], provider: Provider) -> Dict[str, Any]:
		plan = section(payload, "clientPlan")
		return {
			"assistant": self.name,
			"status": "ok",
			"analysis": text_field(payload.get("analysis"), f"UX plan completed by {provider.analysis_label}"),
			"llmProvider": provider.label,
			"clientPlan": {
				"screens": list_field(plan.get("screens")),
				"actions": list_field(plan.get("actions")),
				"notes": list_field(plan.get("notes")),
			},
		}

	def rule_based(self, request: TaskRequest) -> Dict[str, Any]:
		intent, description = lowered(request)
		notes: List[str] = []

		if is_delivery_request(intent, description):
			screens = [
				"OrderCreation",
				"PickupDetails",
				"DropoffLocation",
				"PricingReview",
				"OrderConfirmation",
				"TrackingLive",
			]
			actions = [
				"createOrder()",
				"selectPickupAddress()",
				"selectDropoffAddress()",
				"calculatePrice()",
				"confirmOrder()",
				"trackOrderRealTime()",
			]
			notes.append("Conversion: optimize for speed and a clear confirmation step.")
			notes.append("Show the price before confirmation and ask for explicit consent.")
			notes.append("Allow saving frequent addresses for future orders.")
			notes.append("Push notifications for real-time status updates.")
		elif "user" in intent or "user" in description or "signup" in intent:
			screens = [
				"SignupForm",
				"EmailVerification",
				"ProfileSetup",
				"PaymentMethod",
				"Dashboard",
			]
			actions = [
				"registerUser()",
				"verifyEmail()",
				"completeProfile()",
				"addPaymentMethod()",
				"navigateToDashboard()",
			]
			notes.append("Offer social login (Google, Facebook) to reduce friction.")
			notes.append("Validate forms in real time with clear error messages.")
			notes.append("Store preferences and order history.")
		else:
			screens = ["Dashboard", "ListingPage", "DetailPage"]
			actions = ["loadData()", "filterByCategory()", "viewDetails()", "goBack()"]
			notes.append("Generic design; add specific features based on feedback.")

		if mentions_feedback(description):
			if "ReviewScreen" not in screens:
				screens.append("ReviewScreen")
			if "submitReview()" not in actions:
				actions.append("submitReview()")
			notes.append("Review form: 1-5 stars plus an optional comment; easy submit.")

		notes.append("Consider mobile-first: large buttons, simple inputs, minimal scrolling.")
		notes.append("Persist the user session; offer a clear logout.")

		prompt = f"Design client UX and interaction flow for intent={request.intent} description={request.description}"
		analysis = " ".join(
			[
				f"Prompt: {prompt}",
				f'Detected intent: "{request.intent}".',
				f"Designed {len(screens)} screens for smooth user flow.",
				"Screen sequence and action mapping in `clientPlan` object.",
			]
		)
		return {
			"assistant": self.name,
			"status": "ok",
			"analysis": analysis,
			"clientPlan": {
				"screens": screens,
				"actions": actions,
				"notes": notes,
			},
		}
