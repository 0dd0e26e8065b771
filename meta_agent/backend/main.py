from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware

from meta_agent.backend import constants
from meta_agent.backend.middleware import RequestContextMiddleware
from meta_agent.backend.response import error_response
from meta_agent.backend.routers import assistant, health, pipeline
from meta_agent.backend.runtime import Runtime, build_runtime
from meta_agent.backend.settings import Settings, load_settings


logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
	logging.basicConfig(level=level, format=_LOG_FORMAT)
	logging.getLogger().setLevel(level)


def create_app(settings: Optional[Settings] = None, *, runtime: Optional[Runtime] = None) -> FastAPI:
	settings = settings or (runtime.settings if runtime is not None else load_settings())
	configure_logging(settings.log_level)
	runtime = runtime or build_runtime(settings)

	@asynccontextmanager
	async def lifespan(_app: FastAPI):
		yield
		runtime.close()

	app = FastAPI(
		title=constants.APP_NAME,
		version=constants.APP_VERSION,
		lifespan=lifespan,
	)
	app.state.runtime = runtime
	_register_middleware(app)
	_register_handlers(app)
	_register_routers(app)
	logger.info(
		"%s ready: mode=%s providers=%s",
		constants.APP_NAME,
		settings.execution_mode,
		[provider.name for provider in runtime.chain.available_providers()] or ["rule-based"],
	)
	return app


def _register_middleware(app: FastAPI) -> None:
	app.add_middleware(RequestContextMiddleware)
	app.add_middleware(GZipMiddleware, minimum_size=1024)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=constants.DEFAULT_CORS_ALLOW_ORIGINS,
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)
	app.add_middleware(
		TrustedHostMiddleware,
		allowed_hosts=constants.DEFAULT_TRUSTED_HOSTS,
	)


def _register_routers(app: FastAPI) -> None:
	app.include_router(health.router)
	app.include_router(pipeline.router)
	app.include_router(assistant.router)


def _register_handlers(app: FastAPI) -> None:
	@app.exception_handler(HTTPException)
	async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
		payload = error_response(error=_exc_message(exc.detail))
		return JSONResponse(status_code=exc.status_code, content=payload)

	@app.exception_handler(StarletteHTTPException)
	async def handle_starlette_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
		payload = error_response(error=_exc_message(exc.detail))
		return JSONResponse(status_code=exc.status_code, content=payload)

	@app.exception_handler(RequestValidationError)
	async def handle_request_validation_error(
		request: Request,
		exc: RequestValidationError,
	) -> JSONResponse:
		details = []
		for issue in exc.errors():
			loc = ".".join(str(part) for part in issue.get("loc", []))
			msg = issue.get("msg", "Invalid request.")
			details.append(f"{loc}: {msg}" if loc else msg)
		payload = error_response(
			error="Request validation failed.",
			details=details,
		)
		return JSONResponse(status_code=422, content=payload)

	@app.exception_handler(Exception)
	async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
		logger.exception("Unhandled error on %s %s", request.method, request.url.path)
		payload = error_response(error="Internal server error.")
		return JSONResponse(status_code=500, content=payload)


def _exc_message(detail: Any) -> str:
	if isinstance(detail, str):
		return detail
	if detail is None:
		return "Request failed."
	return str(detail)


app = create_app()
