from __future__ import annotations

from typing import Dict

from meta_agent.backend import constants
from meta_agent.backend.runtime import Runtime
from meta_agent.backend.services import assistant_service


def get_summary(runtime: Runtime) -> Dict[str, object]:
	return {
		"status": "ok",
		"message": "Server running",
		"version": constants.APP_VERSION,
		"executionMode": runtime.settings.execution_mode,
		"providers": assistant_service.list_providers(runtime)["configured"],
	}
