import json
from unittest import TestCase

import httpx
from fastapi.testclient import TestClient

from meta_agent.backend.deadline import Deadline
from meta_agent.backend.main import create_app
from meta_agent.backend.pipeline import PipelineOrchestrator, RemoteStageInvoker
from meta_agent.backend.settings import Settings


BASE_URL = "http://assistants.local"


def _invoker(handler) -> RemoteStageInvoker:
	client = httpx.Client(transport=httpx.MockTransport(handler))
	return RemoteStageInvoker(BASE_URL + "/", http_client=client)


def _call(invoker: RemoteStageInvoker, stage: str = "admin", timeout_s: float = 5.0):
	return invoker.invoke(stage, goal="g", description="d", context={"k": "v"}, deadline=Deadline(timeout_s))


class RemoteStageInvokerTests(TestCase):
	def test_stage_routes_use_wire_names(self) -> None:
		invoker = RemoteStageInvoker(BASE_URL)
		self.assertEqual(invoker.url_for("admin"), f"{BASE_URL}/assistant/admin")
		self.assertEqual(invoker.url_for("client"), f"{BASE_URL}/assistant/client")
		self.assertEqual(invoker.url_for("courier"), f"{BASE_URL}/assistant/curier")
		invoker.close()

	def test_success_unwraps_data(self) -> None:
		seen = {}

		def handler(request: httpx.Request) -> httpx.Response:
			seen["path"] = request.url.path
			seen["body"] = json.loads(request.content)
			return httpx.Response(200, json={"status": "ok", "data": {"assistant": "admin", "status": "ok"}})

		response = _call(_invoker(handler))
		self.assertTrue(response.ok)
		self.assertEqual(response.data["assistant"], "admin")
		self.assertEqual(seen["path"], "/assistant/admin")
		self.assertEqual(seen["body"], {"goal": "g", "description": "d", "context": {"k": "v"}})

	def test_error_status_is_reported(self) -> None:
		response = _call(_invoker(lambda request: httpx.Response(503, json={})))
		self.assertFalse(response.ok)
		self.assertEqual(response.error, "HTTP 503: Service Unavailable")

	def test_timeout_is_reported_with_budget(self) -> None:
		def handler(request: httpx.Request) -> httpx.Response:
			raise httpx.ReadTimeout("slow", request=request)

		response = _call(_invoker(handler), stage="client", timeout_s=30)
		self.assertEqual(response.error, "Timeout calling client (30000ms)")

	def test_body_error_is_reported(self) -> None:
		handler = lambda request: httpx.Response(200, json={"status": "error", "error": "assistant crashed"})
		self.assertEqual(_call(_invoker(handler)).error, "assistant crashed")

	def test_invalid_json_is_reported(self) -> None:
		handler = lambda request: httpx.Response(200, content=b"<html>")
		self.assertEqual(_call(_invoker(handler)).error, "Assistant service returned invalid JSON.")

	def test_expired_deadline_does_not_call(self) -> None:
		calls = []

		def handler(request: httpx.Request) -> httpx.Response:
			calls.append(request)
			return httpx.Response(200, json={})

		response = _call(_invoker(handler), timeout_s=0)
		self.assertFalse(response.ok)
		self.assertEqual(calls, [])


class RemotePipelineIntegrationTests(TestCase):
	def test_pipeline_runs_against_task_hosting_service(self) -> None:
		client = TestClient(create_app(Settings()))
		invoker = RemoteStageInvoker("http://testserver", http_client=client)
		result = PipelineOrchestrator(invoker).run(intent="order.create", description="delivery pickup")

		self.assertEqual(result["status"], "ok")
		self.assertEqual(result["stepsExecuted"], ["admin", "client", "courier"])
		self.assertEqual(result["results"]["courier"]["assistant"], "courier")
		self.assertEqual(
			result["results"]["admin"]["firestoreProposal"]["collections"],
			["orders", "clients", "couriers"],
		)
