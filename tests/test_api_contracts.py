from unittest import TestCase

from fastapi.testclient import TestClient

from meta_agent.backend.main import create_app
from meta_agent.backend.pipeline import PipelineOrchestrator
from meta_agent.backend.pipeline.invokers import StageInvoker
from meta_agent.backend.pipeline.types import StageResponse
from meta_agent.backend.settings import Settings


class _FailingClientInvoker(StageInvoker):
	def invoke(self, stage, **kwargs) -> StageResponse:
		if stage == "client":
			return StageResponse.failure("HTTP 502: Bad Gateway")
		return StageResponse.success({"assistant": stage, "status": "ok"})


class ApiContractTests(TestCase):
	def setUp(self) -> None:
		self.app = create_app(Settings())
		self.client = TestClient(self.app)

	def test_health_contract(self) -> None:
		response = self.client.get("/health")
		self.assertEqual(response.status_code, 200)
		body = response.json()
		self.assertEqual(body["status"], "ok")
		self.assertEqual(body["message"], "Server running")
		self.assertEqual(body["executionMode"], "in_process")
		self.assertEqual(body["providers"], [])

	def test_run_without_goal_is_rejected(self) -> None:
		response = self.client.post("/run", json={"description": "x"})
		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.json(), {"status": "error", "error": 'Missing "goal" field'})

	def test_run_without_body_is_rejected(self) -> None:
		response = self.client.post("/run")
		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.json(), {"status": "error", "error": 'Missing "goal" field'})

	def test_run_contract(self) -> None:
		response = self.client.post(
			"/run",
			json={"goal": "order.create", "description": "delivery pickup", "context": {"tenant": "t1"}},
		)
		self.assertEqual(response.status_code, 200)
		body = response.json()
		self.assertEqual(body["status"], "ok")
		self.assertEqual(body["stepsExecuted"], ["admin", "client", "courier"])
		self.assertEqual(len(body["nextActions"]), 3)
		self.assertEqual(body["conflicts"], [])
		self.assertIn("timestamp", body)

	def test_run_failure_returns_500_with_partial_results(self) -> None:
		self.app.state.runtime.orchestrator = PipelineOrchestrator(_FailingClientInvoker())
		response = self.client.post("/run", json={"goal": "order.create"})
		self.assertEqual(response.status_code, 500)
		body = response.json()
		self.assertEqual(body["message"], "Client assistant failed")
		self.assertEqual(body["stepsExecuted"], ["admin"])
		self.assertEqual(body["errors"], ["Client assistant error: HTTP 502: Bad Gateway"])

	def test_admin_stage_contract(self) -> None:
		response = self.client.post("/assistant/admin", json={"goal": "order.create", "description": "delivery"})
		self.assertEqual(response.status_code, 200)
		body = response.json()
		self.assertEqual(body["status"], "ok")
		self.assertEqual(body["data"]["assistant"], "admin")
		self.assertIn("firestoreProposal", body["data"])

	def test_courier_stage_is_served_under_both_spellings(self) -> None:
		for route in ("curier", "courier"):
			with self.subTest(route=route):
				response = self.client.post(f"/assistant/{route}", json={"goal": "order.create"})
				self.assertEqual(response.status_code, 200)
				self.assertEqual(response.json()["data"]["assistant"], "courier")

	def test_stage_without_goal_is_rejected(self) -> None:
		response = self.client.post("/assistant/client", json={})
		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.json()["error"], 'Missing "goal" field')

	def test_unknown_stage_is_404(self) -> None:
		response = self.client.post("/assistant/billing", json={"goal": "x"})
		self.assertEqual(response.status_code, 404)
		self.assertEqual(response.json(), {"status": "error", "error": "Unknown assistant 'billing'."})

	def test_providers_listing(self) -> None:
		response = self.client.get("/assistant/providers")
		self.assertEqual(response.status_code, 200)
		self.assertEqual(
			response.json()["data"],
			{"configured": [], "order": ["cloudflare", "groq", "openai"]},
		)

	def test_request_id_is_echoed(self) -> None:
		response = self.client.get("/health", headers={"X-Request-ID": "req-123"})
		self.assertEqual(response.headers["X-Request-ID"], "req-123")
		self.assertIn("X-Process-Time", response.headers)

	def test_wrong_context_type_is_validation_error(self) -> None:
		response = self.client.post("/run", json={"goal": "g", "context": "not-an-object"})
		self.assertEqual(response.status_code, 422)
		body = response.json()
		self.assertEqual(body["error"], "Request validation failed.")
		self.assertTrue(body["details"])
