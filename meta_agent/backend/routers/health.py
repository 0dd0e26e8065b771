from __future__ import annotations

from fastapi import APIRouter, Request

from meta_agent.backend.schemas import HealthResponse
from meta_agent.backend.services import health_service


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def get_health(request: Request):
	return health_service.get_summary(request.app.state.runtime)
