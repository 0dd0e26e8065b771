from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class PipelineRunRequest(BaseModel):
	model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

	goal: Optional[str] = Field(default=None, description="Intent driving all three assistants.")
	description: Optional[str] = Field(default=None, description="Free-text detail for the intent.")
	context: Optional[Dict[str, Any]] = Field(
		default=None,
		description="Shared context plus optional per-stage overrides under admin/client/curier.",
	)


class StageRequest(BaseModel):
	model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

	goal: Optional[str] = Field(default=None, description="Intent for this assistant.")
	description: Optional[str] = Field(default=None)
	context: Optional[Dict[str, Any]] = Field(default=None)


class StageEnvelope(BaseModel):
	model_config = ConfigDict(extra="allow")

	status: Literal["ok", "error"]
	data: Optional[Dict[str, Any]] = None
	error: Optional[str] = None


class PipelineResponse(BaseModel):
	model_config = ConfigDict(extra="allow")

	status: Literal["ok", "error"]
	stepsExecuted: List[str] = Field(default_factory=list)
	results: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
	conflicts: Optional[List[Any]] = None
	nextActions: Optional[List[str]] = None
	message: Optional[str] = None
	errors: Optional[List[str]] = None
	timestamp: str


class HealthResponse(BaseModel):
	model_config = ConfigDict(extra="allow")

	status: Literal["ok"]
