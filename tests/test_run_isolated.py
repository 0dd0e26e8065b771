import threading
from unittest import TestCase

from meta_agent.backend.assistants import TaskRequest
from meta_agent.backend.pipeline import run_isolated


class RunIsolatedTests(TestCase):
	def test_all_assistants_run_concurrently_on_the_same_request(self) -> None:
		barrier = threading.Barrier(3, timeout=2)
		seen = {}

		def task(stage):
			def run(request, deadline):
				barrier.wait()
				seen[stage] = request
				return {"assistant": stage, "status": "ok"}

			return run

		request = TaskRequest(intent="order.create", description="d")
		results = run_isolated({stage: task(stage) for stage in ("courier", "admin", "client")}, request)

		self.assertEqual([item["assistant"] for item in results], ["admin", "client", "courier"])
		self.assertTrue(all(item["ok"] for item in results))
		self.assertTrue(all(received is request for received in seen.values()))

	def test_raising_assistant_is_reported_without_hiding_others(self) -> None:
		def broken(request, deadline):
			raise RuntimeError("no luck")

		def fine(request, deadline):
			return {"assistant": "admin", "status": "ok"}

		results = run_isolated({"admin": fine, "client": broken}, TaskRequest(intent="x"))
		self.assertEqual(results[0], {"assistant": "admin", "ok": True, "result": {"assistant": "admin", "status": "ok"}})
		self.assertEqual(results[1], {"assistant": "client", "ok": False, "error": "no luck"})
