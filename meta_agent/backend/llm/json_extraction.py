from __future__ import annotations

import json
import re
from typing import Any

from meta_agent.backend.llm.types import ProviderFailure, ProviderOutcome, ProviderSuccess


_FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_OBJECT_SPAN_RE = re.compile(r"\{[\s\S]*\}")


def _strict_parse(text: str) -> Any:
	try:
		return json.loads(text)
	except (ValueError, TypeError, RecursionError):
		return None


def extract_json_object(raw: str) -> ProviderOutcome:
	"""Parse a JSON object out of model output that may be wrapped in prose or fences.

	Tries, in order: the whole text, the first fenced code block, and the greedy
	span from the first ``{`` to the last ``}``.
	"""
	if not isinstance(raw, str) or not raw.strip():
		return ProviderFailure(reason="unparseable", detail="empty content")

	candidates = [raw.strip()]
	fenced = _FENCED_BLOCK_RE.search(raw)
	if fenced:
		candidates.append(fenced.group(1))
	span = _OBJECT_SPAN_RE.search(raw)
	if span:
		candidates.append(span.group(0))

	for candidate in candidates:
		parsed = _strict_parse(candidate)
		if isinstance(parsed, dict):
			return ProviderSuccess(payload=parsed)

	return ProviderFailure(reason="unparseable", detail="no JSON object found in content")
