from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Mapping

from meta_agent.backend import constants
from meta_agent.backend.assistants.base import TaskRequest
from meta_agent.backend.pipeline.invokers import TaskFn


logger = logging.getLogger(__name__)


def run_isolated(tasks: Mapping[str, TaskFn], request: TaskRequest) -> List[Dict[str, Any]]:
	"""Smoke-test mode: every assistant runs concurrently on the same request.

	No context is threaded between assistants and no deadline is applied. Each
	assistant is reported on its own, in stage order, whether it settled or raised.
	"""
	settled: Dict[str, Dict[str, Any]] = {}
	stages = [stage for stage in constants.STAGE_ORDER if stage in tasks]
	with ThreadPoolExecutor(max_workers=max(1, len(stages))) as pool:
		futures = {pool.submit(tasks[stage], request, None): stage for stage in stages}
		for future in as_completed(futures):
			stage = futures[future]
			try:
				settled[stage] = {"assistant": stage, "ok": True, "result": future.result()}
			except Exception as exc:
				logger.warning("Isolated run of %s raised: %s", stage, exc)
				settled[stage] = {"assistant": stage, "ok": False, "error": str(exc)}
	return [settled[stage] for stage in stages]
