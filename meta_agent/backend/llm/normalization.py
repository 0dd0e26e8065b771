from __future__ import annotations

import math
from typing import Any, Dict, List

from meta_agent.backend import constants


def clamp_confidence(value: Any, default: float = constants.DEFAULT_CONFIDENCE) -> float:
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		return default
	try:
		number = float(value)
	except OverflowError:
		return default
	if math.isnan(number):
		return default
	return min(max(number, 0.0), 1.0)


def list_field(value: Any) -> List[Any]:
	return list(value) if isinstance(value, list) else []


def map_field(value: Any) -> Dict[str, Any]:
	return dict(value) if isinstance(value, dict) else {}


def text_field(value: Any, default: str) -> str:
	if isinstance(value, str) and value.strip():
		return value.strip()
	return default


def section(payload: Dict[str, Any], key: str) -> Dict[str, Any]:
	return map_field(payload.get(key))
