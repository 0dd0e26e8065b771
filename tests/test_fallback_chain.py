import itertools
import math
from unittest import TestCase

from meta_agent.backend.deadline import Deadline
from meta_agent.backend.llm import FallbackChain, ProviderFailure, ProviderSuccess
from meta_agent.backend.llm.normalization import clamp_confidence
from meta_agent.backend.llm.providers import Provider


class _ScriptedProvider(Provider):
	def __init__(self, name: str, mode: str, payload=None):
		super().__init__()
		self.name = name
		self.label = name.title()
		self.analysis_label = name.title()
		self.mode = mode
		self.payload = payload or {"analysis": f"from {name}"}
		self.calls = 0

	@property
	def available(self) -> bool:
		return self.mode != "unavailable"

	def attempt(self, prompt, system_instruction, *, deadline=None):
		self.calls += 1
		if self.mode == "raise":
			raise RecursionError("maximum recursion depth exceeded")
		if self.mode == "success":
			return ProviderSuccess(payload=dict(self.payload))
		return ProviderFailure(reason="network_error", detail=f"{self.name} down")


def _normalize(payload, provider):
	return {"source": provider.name, "payload": payload}


def _rules():
	return {"source": "rules"}


class FallbackChainTests(TestCase):
	def _resolve(self, chain: FallbackChain, **kwargs):
		return chain.resolve(prompt="p", system_instruction="s", normalize=_normalize, rule_based=_rules, **kwargs)

	def test_first_success_wins_and_later_providers_are_not_called(self) -> None:
		first = _ScriptedProvider("cloudflare", "success")
		second = _ScriptedProvider("groq", "success")
		result = self._resolve(FallbackChain([first, second]))
		self.assertEqual(result["source"], "cloudflare")
		self.assertEqual(second.calls, 0)

	def test_failure_moves_to_next_provider(self) -> None:
		first = _ScriptedProvider("cloudflare", "failure")
		second = _ScriptedProvider("groq", "success")
		result = self._resolve(FallbackChain([first, second]))
		self.assertEqual(result["source"], "groq")
		self.assertEqual(first.calls, 1)

	def test_unavailable_provider_is_never_attempted(self) -> None:
		skipped = _ScriptedProvider("cloudflare", "unavailable")
		used = _ScriptedProvider("openai", "success")
		chain = FallbackChain([skipped, used])
		result = self._resolve(chain)
		self.assertEqual(result["source"], "openai")
		self.assertEqual(skipped.calls, 0)
		self.assertEqual([p.name for p in chain.available_providers()], ["openai"])

	def test_all_failures_fall_through_to_rules(self) -> None:
		chain = FallbackChain([_ScriptedProvider("cloudflare", "failure"), _ScriptedProvider("groq", "failure")])
		self.assertEqual(self._resolve(chain), {"source": "rules"})

	def test_no_providers_uses_rules(self) -> None:
		self.assertEqual(self._resolve(FallbackChain([])), {"source": "rules"})

	def test_raising_provider_counts_as_failure(self) -> None:
		broken = _ScriptedProvider("cloudflare", "raise")
		used = _ScriptedProvider("groq", "success")
		result = self._resolve(FallbackChain([broken, used]))
		self.assertEqual(result["source"], "groq")
		self.assertEqual(broken.calls, 1)

	def test_unusable_payload_moves_on_to_rules(self) -> None:
		def normalize(payload, provider):
			raise OverflowError("int too large to convert to float")

		chain = FallbackChain([_ScriptedProvider("cloudflare", "success")])
		result = chain.resolve(prompt="p", system_instruction="s", normalize=normalize, rule_based=_rules)
		self.assertEqual(result, {"source": "rules"})

	def test_expired_deadline_stops_trying_providers(self) -> None:
		provider = _ScriptedProvider("cloudflare", "success")
		result = self._resolve(FallbackChain([provider]), deadline=Deadline(0))
		self.assertEqual(result["source"], "rules")
		self.assertEqual(provider.calls, 0)

	def test_source_is_first_successful_provider_for_every_combination(self) -> None:
		names = ("cloudflare", "groq", "openai")
		for modes in itertools.product(("unavailable", "failure", "success"), repeat=3):
			with self.subTest(modes=modes):
				chain = FallbackChain([_ScriptedProvider(name, mode) for name, mode in zip(names, modes)])
				expected = next((name for name, mode in zip(names, modes) if mode == "success"), "rules")
				self.assertEqual(self._resolve(chain)["source"], expected)


class ConfidenceClampTests(TestCase):
	def test_values_are_clamped_into_unit_range(self) -> None:
		cases = [
			(1.7, 1.0),
			(-0.3, 0.0),
			(0, 0.0),
			(0.42, 0.42),
			(1, 1.0),
			("0.9", 0.75),
			(None, 0.75),
			(True, 0.75),
			(math.nan, 0.75),
			(math.inf, 1.0),
			(10**400, 0.75),
			(-(10**400), 0.75),
		]
		for raw, expected in cases:
			with self.subTest(raw=raw):
				self.assertEqual(clamp_confidence(raw), expected)
