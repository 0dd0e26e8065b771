from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import OpenAI

from meta_agent.backend import constants
from meta_agent.backend.deadline import Deadline, bounded_timeout
from meta_agent.backend.llm.json_extraction import extract_json_object
from meta_agent.backend.llm.types import ProviderFailure, ProviderOutcome
from meta_agent.backend.settings import Settings


logger = logging.getLogger(__name__)


def _messages(prompt: str, system_instruction: str) -> List[Dict[str, str]]:
	return [
		{"role": "system", "content": system_instruction},
		{"role": "user", "content": prompt},
	]


class Provider:
	"""One remote text-generation API behind a single ``attempt`` call.

	``attempt`` never raises: transport errors, bad statuses, empty content and
	unparseable output all come back as :class:`ProviderFailure` values so the
	fallback chain can move on uniformly.
	"""

	name = "provider"
	label = "Provider"
	analysis_label = "Provider"

	def __init__(self, *, timeout_s: float = constants.DEFAULT_PROVIDER_TIMEOUT_S):
		self.timeout_s = timeout_s

	@property
	def available(self) -> bool:
		return False

	def attempt(
		self,
		prompt: str,
		system_instruction: str,
		*,
		deadline: Optional[Deadline] = None,
	) -> ProviderOutcome:
		if not self.available:
			return ProviderFailure(reason="unavailable", detail=f"{self.name} credentials not configured")
		timeout_s = bounded_timeout(self.timeout_s, deadline)
		if timeout_s <= 0:
			return ProviderFailure(reason="timeout", detail="stage deadline already expired")
		content = self._fetch_content(prompt, system_instruction, timeout_s)
		if isinstance(content, ProviderFailure):
			return content
		return extract_json_object(content)

	def _fetch_content(self, prompt: str, system_instruction: str, timeout_s: float) -> str | ProviderFailure:
		raise NotImplementedError


class CloudflareProvider(Provider):
	name = "cloudflare"
	label = "Cloudflare (Mistral-7b)"
	analysis_label = "Mistral-7b (Cloudflare)"

	def __init__(
		self,
		*,
		api_token: str,
		account_id: str,
		model: str = constants.DEFAULT_CLOUDFLARE_MODEL,
		timeout_s: float = constants.DEFAULT_PROVIDER_TIMEOUT_S,
		http_client: Optional[httpx.Client] = None,
	):
		super().__init__(timeout_s=timeout_s)
		self._api_token = api_token
		self._account_id = account_id
		self.model = model
		self._http_client = http_client

	@property
	def available(self) -> bool:
		return bool(self._api_token and self._account_id)

	@property
	def url(self) -> str:
		return f"{constants.CLOUDFLARE_API_ROOT}/accounts/{self._account_id}/ai/run/{self.model}"

	def _client(self) -> httpx.Client:
		if self._http_client is None:
			self._http_client = httpx.Client()
		return self._http_client

	def _fetch_content(self, prompt: str, system_instruction: str, timeout_s: float) -> str | ProviderFailure:
		try:
			response = self._client().post(
				self.url,
				headers={"Authorization": f"Bearer {self._api_token}"},
				json={"messages": _messages(prompt, system_instruction)},
				timeout=timeout_s,
			)
		except httpx.TimeoutException as exc:
			logger.warning("Cloudflare AI request timed out: %s", exc)
			return ProviderFailure(reason="timeout", detail=str(exc))
		except httpx.HTTPError as exc:
			logger.warning("Cloudflare AI request failed: %s", exc)
			return ProviderFailure(reason="network_error", detail=str(exc))

		if not response.is_success:
			return ProviderFailure(reason="http_status", detail=f"HTTP {response.status_code}")
		try:
			data = response.json()
		except ValueError:
			return ProviderFailure(reason="missing_content", detail="response body is not JSON")
		content = _cloudflare_content(data)
		if not content:
			return ProviderFailure(reason="missing_content", detail="no content in Cloudflare response")
		return content


def _cloudflare_content(data: Any) -> str:
	if not isinstance(data, dict):
		return ""
	result = data.get("result")
	if not isinstance(result, dict):
		return ""
	text = result.get("response")
	if isinstance(text, str) and text.strip():
		return text
	nested = result.get("data")
	if isinstance(nested, dict):
		return _choice_content(nested.get("choices"))
	return ""


def _choice_content(choices: Any) -> str:
	if not isinstance(choices, list) or not choices:
		return ""
	first = choices[0]
	message = first.get("message") if isinstance(first, dict) else getattr(first, "message", None)
	if isinstance(message, dict):
		content = message.get("content")
	else:
		content = getattr(message, "content", None)
	return content if isinstance(content, str) and content.strip() else ""


def _build_openai_client(*, api_key: str, base_url: str | None, timeout_s: float) -> OpenAI:
	return OpenAI(api_key=api_key, base_url=base_url, timeout=timeout_s, max_retries=0)


def _sdk_failure(exc: Exception) -> ProviderFailure:
	if isinstance(exc, (openai.APITimeoutError, TimeoutError)):
		return ProviderFailure(reason="timeout", detail=str(exc))
	if isinstance(exc, openai.APIStatusError):
		return ProviderFailure(reason="http_status", detail=f"HTTP {exc.status_code}")
	return ProviderFailure(reason="network_error", detail=f"{exc.__class__.__name__}: {exc}")


class OpenAICompatibleProvider(Provider):
	"""Chat-completions provider reached through the OpenAI SDK (OpenAI itself, Groq)."""

	def __init__(
		self,
		*,
		name: str,
		label: str,
		api_key: str,
		model: str,
		base_url: str | None = None,
		timeout_s: float = constants.DEFAULT_PROVIDER_TIMEOUT_S,
	):
		super().__init__(timeout_s=timeout_s)
		self.name = name
		self.label = label
		self.analysis_label = label
		self.model = model
		self._api_key = api_key
		self._base_url = base_url
		self._sdk_client: OpenAI | None = None

	@property
	def available(self) -> bool:
		return bool(self._api_key)

	def _client(self) -> OpenAI:
		if self._sdk_client is None:
			self._sdk_client = _build_openai_client(
				api_key=self._api_key,
				base_url=self._base_url,
				timeout_s=self.timeout_s,
			)
		return self._sdk_client

	def _fetch_content(self, prompt: str, system_instruction: str, timeout_s: float) -> str | ProviderFailure:
		try:
			response = self._client().chat.completions.create(
				model=self.model,
				messages=_messages(prompt, system_instruction),
				temperature=constants.PROVIDER_TEMPERATURE,
				max_tokens=constants.PROVIDER_MAX_TOKENS,
				timeout=timeout_s,
			)
		except Exception as exc:
			failure = _sdk_failure(exc)
			logger.warning("%s request failed: %s", self.label, failure.describe())
			return failure

		content = _choice_content(getattr(response, "choices", None))
		if not content:
			return ProviderFailure(reason="missing_content", detail=f"no content in {self.label} response")
		return content


def build_providers(settings: Settings, *, http_client: Optional[httpx.Client] = None) -> List[Provider]:
	"""Providers in priority order, cheapest and fastest first."""
	return [
		CloudflareProvider(
			api_token=settings.cloudflare_api_token,
			account_id=settings.cloudflare_account_id,
			model=settings.cloudflare_model,
			timeout_s=settings.provider_timeout_s,
			http_client=http_client,
		),
		OpenAICompatibleProvider(
			name="groq",
			label="Groq",
			api_key=settings.groq_api_key,
			model=settings.groq_model,
			base_url=constants.GROQ_BASE_URL,
			timeout_s=settings.provider_timeout_s,
		),
		OpenAICompatibleProvider(
			name="openai",
			label="OpenAI",
			api_key=settings.openai_api_key,
			model=settings.openai_model,
			timeout_s=settings.provider_timeout_s,
		),
	]
