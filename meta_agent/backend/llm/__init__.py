from meta_agent.backend.llm.chain import FallbackChain
from meta_agent.backend.llm.json_extraction import extract_json_object
from meta_agent.backend.llm.providers import CloudflareProvider, OpenAICompatibleProvider, Provider, build_providers
from meta_agent.backend.llm.types import ProviderFailure, ProviderOutcome, ProviderSuccess

__all__ = [
	"CloudflareProvider",
	"FallbackChain",
	"OpenAICompatibleProvider",
	"Provider",
	"ProviderFailure",
	"ProviderOutcome",
	"ProviderSuccess",
	"build_providers",
	"extract_json_object",
]
