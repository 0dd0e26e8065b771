from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from meta_agent.backend.assistants import AdminAssistant, AssistantTask, ClientAssistant, CourierAssistant
from meta_agent.backend.llm import FallbackChain, build_providers
from meta_agent.backend.pipeline import InProcessStageInvoker, PipelineOrchestrator, RemoteStageInvoker, StageInvoker
from meta_agent.backend.pipeline.invokers import TaskFn
from meta_agent.backend.settings import Settings


@dataclass
class Runtime:
	settings: Settings
	chain: FallbackChain
	assistants: Dict[str, AssistantTask]
	invoker: StageInvoker
	orchestrator: PipelineOrchestrator

	def task_functions(self) -> Dict[str, TaskFn]:
		return {stage: assistant.handle_task for stage, assistant in self.assistants.items()}

	def close(self) -> None:
		self.invoker.close()


def build_runtime(settings: Settings, *, http_client: Optional[httpx.Client] = None) -> Runtime:
	chain = FallbackChain(build_providers(settings, http_client=http_client))
	assistants: Dict[str, AssistantTask] = {
		"admin": AdminAssistant(chain),
		"client": ClientAssistant(chain),
		"courier": CourierAssistant(chain),
	}
	invoker: StageInvoker
	if settings.assistant_base_url:
		invoker = RemoteStageInvoker(settings.assistant_base_url, http_client=http_client)
	else:
		invoker = InProcessStageInvoker(
			{stage: assistant.handle_task for stage, assistant in assistants.items()}
		)
	return Runtime(
		settings=settings,
		chain=chain,
		assistants=assistants,
		invoker=invoker,
		orchestrator=PipelineOrchestrator(invoker, stage_timeout_s=settings.stage_timeout_s),
	)
