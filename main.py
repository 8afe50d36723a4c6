# app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from election_routes import router as election_router
from election_service import ElectionGateway
from errors import GatewayError, ValidationError, envelope

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _invalid_fields(exc: RequestValidationError):
    fields = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        name = ".".join(loc) or "body"
        if name not in fields:
            fields.append(name)
    return fields


async def gateway_error_handler(request: Request, exc: GatewayError):
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc
        )
    return JSONResponse(status_code=exc.status_code, content=envelope(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError.for_fields(_invalid_fields(exc))
    return JSONResponse(status_code=error.status_code, content=envelope(error))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error in %s %s", request.method, request.url.path)
    error = GatewayError("Something went wrong!", details=exc)
    return JSONResponse(status_code=500, content=envelope(error))


def create_app(gateway: Optional[ElectionGateway] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app):
        if getattr(app.state, "gateway", None) is None:
            app.state.gateway = ElectionGateway.from_config()
        logger.info(
            "Election gateway started: rpc=%s artifact=%s address=%s gas=%d",
            config.RPC_URL[:48],
            config.CONTRACT_ARTIFACT_PATH,
            config.CONTRACT_ADDRESS or "(from artifact)",
            config.GAS_LIMIT,
        )
        yield
        logger.info("Election gateway stopped")

    app = FastAPI(title="Election Gateway API", version="0.1.0", lifespan=lifespan)
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(election_router, prefix=config.API_PREFIX)

    @app.get("/healthz")
    def healthz():
        return {"ok": "true"}

    return app


app = create_app()
