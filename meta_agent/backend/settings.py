from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from meta_agent.backend import constants


class SettingsError(ValueError):
	pass


@dataclass(frozen=True)
class Settings:
	"""Process-wide configuration, read once at startup and injected downstream."""

	cloudflare_api_token: str = ""
	cloudflare_account_id: str = ""
	cloudflare_model: str = constants.DEFAULT_CLOUDFLARE_MODEL
	groq_api_key: str = ""
	groq_model: str = constants.DEFAULT_GROQ_MODEL
	openai_api_key: str = ""
	openai_model: str = constants.DEFAULT_OPENAI_MODEL
	provider_timeout_s: float = constants.DEFAULT_PROVIDER_TIMEOUT_S
	stage_timeout_s: float = constants.DEFAULT_STAGE_TIMEOUT_S
	assistant_base_url: str = ""
	log_level: str = "INFO"

	@property
	def has_cloudflare(self) -> bool:
		return bool(self.cloudflare_api_token and self.cloudflare_account_id)

	@property
	def has_groq(self) -> bool:
		return bool(self.groq_api_key)

	@property
	def has_openai(self) -> bool:
		return bool(self.openai_api_key)

	@property
	def execution_mode(self) -> str:
		return "remote" if self.assistant_base_url else "in_process"


def _str_env(environ: Mapping[str, str], name: str, default: str = "") -> str:
	return environ.get(name, "").strip() or default


def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
	raw = environ.get(name, "").strip()
	if not raw:
		return default
	try:
		value = float(raw)
	except ValueError as exc:
		raise SettingsError(f"{name} must be numeric.") from exc
	if value <= 0:
		raise SettingsError(f"{name} must be greater than zero.")
	return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
	env = os.environ if environ is None else environ
	return Settings(
		cloudflare_api_token=_str_env(env, "CLOUDFLARE_API_TOKEN"),
		cloudflare_account_id=_str_env(env, "CLOUDFLARE_ACCOUNT_ID"),
		cloudflare_model=_str_env(env, "CLOUDFLARE_AI_MODEL", constants.DEFAULT_CLOUDFLARE_MODEL),
		groq_api_key=_str_env(env, "GROQ_API_KEY"),
		groq_model=_str_env(env, "GROQ_MODEL", constants.DEFAULT_GROQ_MODEL),
		openai_api_key=_str_env(env, "OPENAI_API_KEY"),
		openai_model=_str_env(env, "OPENAI_MODEL", constants.DEFAULT_OPENAI_MODEL),
		provider_timeout_s=_float_env(env, "META_AGENT_PROVIDER_TIMEOUT_S", constants.DEFAULT_PROVIDER_TIMEOUT_S),
		stage_timeout_s=_float_env(env, "META_AGENT_STAGE_TIMEOUT_S", constants.DEFAULT_STAGE_TIMEOUT_S),
		assistant_base_url=_str_env(env, "META_AGENT_ASSISTANT_BASE_URL").rstrip("/"),
		log_level=_str_env(env, "META_AGENT_LOG_LEVEL", "INFO").upper(),
	)
