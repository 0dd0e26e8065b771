from __future__ import annotations

from typing import Any, Dict, List

from meta_agent.backend.assistants.base import AssistantTask, TaskRequest, context_block, is_delivery_request, lowered
from meta_agent.backend.llm.normalization import list_field, map_field, section, text_field
from meta_agent.backend.llm.providers import Provider


_PROMPT_TEMPLATE = """Plan delivery routes and ETA for intent="{intent}" description="{description}".

Context from earlier planning (the client UX plan is under "clientOutput"):
{context}

Respond ONLY with valid JSON (no markdown, no extra text):
{{
  "analysis": "string describing the logistics plan",
  "deliveryPlan": {{
    "orders": [{{ "orderId": "string", "priority": "string", "type": "string", "distance": "string" }}],
    "routes": [{{ "routeId": "string", "stops": ["Hub", "..."], "totalDistance": "string" }}],
    "eta": {{ "orderId": "HH:MM" }},
    "notes": ["array", "of", "logistics", "notes"]
  }}
}}"""

_GENERAL_NOTES = (
	"Enable live GPS verification and real-time tracking.",
	"Monitor anomalies: delays and unplanned route changes.",
	"Collect courier feedback: actual duration vs. ETA, blockers, notes.",
)


class CourierAssistant(AssistantTask):
	"""Logistics planner: orders, routes and ETAs for couriers."""

	name = "courier"
	plan_key = "deliveryPlan"
	system_instruction = "You are a delivery logistics planner. Respond ONLY with valid JSON, no markdown or extra text."

	def build_prompt(self, request: TaskRequest) -> str:
		return _PROMPT_TEMPLATE.format(
			intent=str(request.intent),
			description=str(request.description),
			context=context_block(request.context),
		)

	def normalize(self, payload: Dict[str, Any], provider: Provider) -> Dict[str, Any]:
		plan = section(payload, "deliveryPlan")
		return {
			"assistant": self.name,
			"status": "ok",
			"analysis": text_field(payload.get("analysis"), f"Delivery plan completed by {provider.analysis_label}"),
			"llmProvider": provider.label,
			"deliveryPlan": {
				"orders": list_field(plan.get("orders")),
				"routes": list_field(plan.get("routes")),
				"eta": map_field(plan.get("eta")),
				"notes": list_field(plan.get("notes")),
			},
		}

	def rule_based(self, request: TaskRequest) -> Dict[str, Any]:
		intent, description = lowered(request)
		notes: List[str] = []

		if is_delivery_request(intent, description):
			orders = [
				{"orderId": "ORD001", "priority": "high", "type": "delivery", "distance": "5.2km"},
				{"orderId": "ORD002", "priority": "medium", "type": "delivery", "distance": "3.8km"},
			]
			routes = [
				{"routeId": "RT01", "stops": ["Hub", "Pickup1", "Dropoff1", "Pickup2", "Dropoff2"], "totalDistance": "9km"},
				{"routeId": "RT02", "stops": ["Hub", "Pickup3", "Dropoff3"], "totalDistance": "7.5km"},
			]
			eta = {"ORD001": "14:30", "ORD002": "15:45", "averageDeliveryTime": "45 min"}
			notes.append("Prioritize time-sensitive orders (same-day delivery).")
			notes.append("Group deliveries into geographic clusters.")
			notes.append("Validate addresses and delivery time windows.")
			notes.append("Check vehicle capacity (weight, volume) per route.")
			notes.append("Reassign orders when the ETA shifts significantly.")
		elif "user" in intent or "user" in description or "pickup" in intent:
			orders = [{"orderId": "USR001", "priority": "normal", "type": "pickup", "distance": "2km"}]
			routes = [{"routeId": "RT03", "stops": ["Hub", "PickupLocation", "Hub"], "totalDistance": "4km"}]
			eta = {"USR001": "10:15", "estimatedDuration": "20 min"}
			notes.append("Simple pickup; confirm location and time with the client in advance.")
		else:
			orders = [{"orderId": "GENERIC001", "priority": "normal", "type": "service", "distance": "TBD"}]
			routes = [{"routeId": "RT00", "stops": ["Hub", "Location"], "totalDistance": "TBD"}]
			eta = {"GENERIC001": "On-demand", "status": "pending_details"}
			notes.append("Generic plan; specify concrete details per order.")

		if "urgent" in description or "rush" in description:
			notes.append("Urgent flag: top priority, dedicate an exclusive courier.")
			notes.append("Contact the courier directly via SMS or push notification.")

		if "multiple" in description or "batch" in description:
			notes.append("Batch delivery: agree on grouped delivery with the client.")
			notes.append("Discount for multiple deliveries in the same area.")

		notes.extend(_GENERAL_NOTES)

		prompt = f"Plan delivery routes and ETA for intent={request.intent} description={request.description}"
		analysis = " ".join(
			[
				f"Prompt: {prompt}",
				f'Detected intent: "{request.intent}".',
				f"Planned {len(orders)} order(s) across {len(routes)} route(s).",
				"Route optimization and ETA mapping in `deliveryPlan` object.",
			]
		)
		return {
			"assistant": self.name,
			"status": "ok",
			"analysis": analysis,
			"deliveryPlan": {
				"orders": orders,
				"routes": routes,
				"eta": eta,
				"notes": notes,
			},
		}
