from meta_agent.backend.pipeline.diagnostics import run_isolated
from meta_agent.backend.pipeline.invokers import InProcessStageInvoker, RemoteStageInvoker, StageInvoker
from meta_agent.backend.pipeline.orchestrator import PipelineOrchestrator, next_actions
from meta_agent.backend.pipeline.types import PipelineRun, StageResponse

__all__ = [
	"InProcessStageInvoker",
	"PipelineOrchestrator",
	"PipelineRun",
	"RemoteStageInvoker",
	"StageInvoker",
	"StageResponse",
	"next_actions",
	"run_isolated",
]
