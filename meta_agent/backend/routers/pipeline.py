from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from meta_agent.backend.schemas import PipelineResponse, PipelineRunRequest
from meta_agent.backend.services import pipeline_service


router = APIRouter(tags=["pipeline"])

MISSING_GOAL = 'Missing "goal" field'


@router.post("/run", response_model=PipelineResponse)
def run(request: Request, payload: Optional[PipelineRunRequest] = None):
	if payload is None or not payload.goal:
		raise HTTPException(status_code=400, detail=MISSING_GOAL)
	result = pipeline_service.run_pipeline(
		request.app.state.runtime,
		goal=payload.goal,
		description=payload.description,
		context=payload.context,
	)
	status_code = 200 if result.get("status") == "ok" else 500
	return JSONResponse(status_code=status_code, content=result)
