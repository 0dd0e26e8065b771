from meta_agent.backend.assistants.admin import AdminAssistant
from meta_agent.backend.assistants.base import AssistantTask, TaskRequest, task_request_for_stage
from meta_agent.backend.assistants.client import ClientAssistant
from meta_agent.backend.assistants.courier import CourierAssistant

__all__ = [
	"AdminAssistant",
	"AssistantTask",
	"ClientAssistant",
	"CourierAssistant",
	"TaskRequest",
	"task_request_for_stage",
]
