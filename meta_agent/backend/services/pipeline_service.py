from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from meta_agent.backend.runtime import Runtime


logger = logging.getLogger(__name__)


def run_pipeline(
	runtime: Runtime,
	*,
	goal: str,
	description: Optional[str] = None,
	context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
	result = runtime.orchestrator.run(
		intent=goal,
		description=description or "",
		context=context or {},
	)
	logger.info(
		"Pipeline for %r finished with status=%s steps=%s",
		goal,
		result.get("status"),
		result.get("stepsExecuted"),
	)
	return result
