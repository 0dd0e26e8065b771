from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from meta_agent.backend.response import stage_response
from meta_agent.backend.routers.pipeline import MISSING_GOAL
from meta_agent.backend.schemas import StageEnvelope, StageRequest
from meta_agent.backend.services import assistant_service


router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.get("/providers")
def providers(request: Request):
	return {"status": "ok", "data": assistant_service.list_providers(request.app.state.runtime)}


@router.post("/{stage}", response_model=StageEnvelope)
def run_stage(stage: str, request: Request, payload: Optional[StageRequest] = None):
	if payload is None or not payload.goal:
		raise HTTPException(status_code=400, detail=MISSING_GOAL)
	try:
		result = assistant_service.handle_stage(
			request.app.state.runtime,
			stage=stage,
			goal=payload.goal,
			description=payload.description,
			context=payload.context,
		)
	except assistant_service.AssistantServiceError as exc:
		raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

	body = stage_response(result)
	return JSONResponse(status_code=200 if body["status"] == "ok" else 500, content=body)
