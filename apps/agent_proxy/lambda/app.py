"""Agent proxy backend using FastAPI + Mangum for AWS Lambda."""

import json
import logging
import os
from functools import lru_cache, partial
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException

from agent_proxy.config import load_provider_configs, load_proxy_settings
from agent_proxy.constants import CORS_HEADERS
from agent_proxy.errors import BadRequestError, RateLimitExceeded
from agent_proxy.infra.runtime import (
    ensure_langsmith_configured,
    flush_langsmith_traces,
    resolve_secret,
)
from agent_proxy.orchestration.base import ChatOrchestrator
from agent_proxy.orchestration.langgraph_flow import LangGraphFallbackOrchestrator
from agent_proxy.orchestration.sequential import SequentialFallbackOrchestrator
from agent_proxy.providers.registry import build_provider_registry
from agent_proxy.rate_limiter import SlidingWindowRateLimiter
from agent_proxy.schemas import parse_proxy_body
from agent_proxy.services.proxy_service import AgentProxyService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

app = FastAPI()
router = APIRouter()

INVALID_GET_MESSAGE = (
    "Invalid GET request. Use POST for LLM requests or GET with "
    "?provider=X&action=health for health checks"
)
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
METHOD_NOT_ALLOWED_MESSAGE = "Method Not Allowed. Use POST for requests or GET for health checks."
INVALID_JSON_MESSAGE = "Request body must be valid JSON"


@lru_cache(maxsize=1)
def get_proxy_service() -> AgentProxyService:
    settings = load_proxy_settings(os.environ)
    registry = build_provider_registry(
        load_provider_configs(
            os.environ, secret_resolver=partial(resolve_secret, region=settings.aws_region)
        )
    )

    orchestrator: ChatOrchestrator
    if settings.orchestrator == "langgraph":
        orchestrator = LangGraphFallbackOrchestrator(
            registry, settings.cloud_priority, settings.local_priority
        )
    else:
        orchestrator = SequentialFallbackOrchestrator(
            registry, settings.cloud_priority, settings.local_priority
        )

    rate_limiter = SlidingWindowRateLimiter(
        {descriptor.id: descriptor.rate_limit_per_minute for descriptor in registry.descriptors()}
    )
    return AgentProxyService(registry=registry, orchestrator=orchestrator, rate_limiter=rate_limiter)


def _json_response(status_code: int, content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


def get_client_id(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded_for.split(",")[0].strip()
    if first_hop:
        return first_hop
    real_ip = request.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


async def read_json_body(request: Request) -> Any:
    """Decode the body as JSON whatever its content type; an empty body is ``None``."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning("Unreadable request body", extra={"path": request.url.path})
        raise StarletteHTTPException(status_code=400, detail=INVALID_JSON_MESSAGE) from e


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        message = METHOD_NOT_ALLOWED_MESSAGE
    else:
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _json_response(exc.status_code, {"error": message})


@router.options("/agent-proxy")
def agent_proxy_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/agent-proxy")
def agent_proxy(request: Request, body: Any = Depends(read_json_body)) -> JSONResponse:
    """Route a chat request to a named provider or the fallback orchestrator."""
    client_id = get_client_id(request)
    try:
        ensure_langsmith_configured()
        proxy_request = parse_proxy_body(body)
        response = get_proxy_service().handle(proxy_request, client_id)
        return _json_response(200, response.to_envelope())
    except BadRequestError as e:
        logger.warning("Rejected agent proxy request", extra={"error": str(e)})
        return _json_response(400, {"error": str(e)})
    except RateLimitExceeded as e:
        logger.warning(
            "Agent proxy request throttled",
            extra={"provider": e.provider_id, "client_id": e.client_id},
        )
        return _json_response(429, {"error": RATE_LIMIT_MESSAGE})
    except Exception as e:
        logger.exception("Agent proxy error")
        return _json_response(
            500, {"error": "Internal server error", "message": str(e), "fallback": True}
        )
    finally:
        flush_langsmith_traces()


@router.get("/agent-proxy")
def agent_proxy_health(provider: str | None = None, action: str | None = None) -> JSONResponse:
    """Report whether a provider answers its availability probe."""
    if action != "health" or not provider or not provider.strip():
        return _json_response(400, {"error": INVALID_GET_MESSAGE})
    try:
        status = get_proxy_service().health(provider.strip().lower())
    except Exception as e:
        logger.exception("Agent proxy health check failed")
        return _json_response(
            500, {"error": "Internal server error", "message": str(e), "fallback": True}
        )
    return _json_response(200, status.model_dump())


@router.get("/health")
def health() -> dict[str, str]:
    """Liveness check for the Lambda itself."""
    return {"status": "ok"}


app.include_router(router)


handler = Mangum(app)
