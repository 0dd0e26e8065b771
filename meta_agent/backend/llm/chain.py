from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from meta_agent.backend.deadline import Deadline
from meta_agent.backend.llm.providers import Provider


logger = logging.getLogger(__name__)

NormalizeFn = Callable[[Dict[str, Any], Provider], Dict[str, Any]]
RuleBasedFn = Callable[[], Dict[str, Any]]


class FallbackChain:
	"""Tries providers one at a time, then falls through to a rule-based generator.

	Providers are never raced; the first success wins. The rule-based generator is
	the terminal step and cannot fail, so ``resolve`` always returns a result.
	"""

	def __init__(self, providers: Sequence[Provider]):
		self._providers = tuple(providers)

	@property
	def providers(self) -> tuple[Provider, ...]:
		return self._providers

	def available_providers(self) -> list[Provider]:
		return [provider for provider in self._providers if provider.available]

	def resolve(
		self,
		*,
		prompt: str,
		system_instruction: str,
		normalize: NormalizeFn,
		rule_based: RuleBasedFn,
		deadline: Optional[Deadline] = None,
	) -> Dict[str, Any]:
		for provider in self.available_providers():
			if deadline is not None and deadline.expired():
				logger.warning("Stage deadline expired before trying %s; using rule-based plan.", provider.name)
				break
			try:
				outcome = provider.attempt(prompt, system_instruction, deadline=deadline)
				if outcome.ok:
					result = normalize(outcome.payload, provider)
					logger.info("Provider %s produced a plan.", provider.name)
					return result
			except Exception:
				logger.exception("Provider %s output could not be used; trying next.", provider.name)
				continue
			logger.warning("Provider %s failed (%s); trying next.", provider.name, outcome.describe())
		return rule_based()
