from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def error_response(
	*,
	error: str,
	details: Optional[List[str]] = None,
) -> Dict[str, Any]:
	payload: Dict[str, Any] = {
		"status": "error",
		"error": error,
	}
	if details:
		payload["details"] = details
	return payload


def stage_response(result: Dict[str, Any]) -> Dict[str, Any]:
	if result.get("status") == "ok":
		return {"status": "ok", "data": result}
	return error_response(error=str(result.get("error") or "Assistant reported an error."))
