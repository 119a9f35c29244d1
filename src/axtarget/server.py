"""FastAPI HTTP interface for the chat pipeline.

Endpoints:
  GET  /health      — liveness probe
  POST /api/chat    — one chat turn, returns {"response"} or {"error"}
  GET  /api/chat    — 405, chat is POST-only
"""

import json
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from axtarget.pipeline import ChatPipeline

logger = logging.getLogger(__name__)

_UNKNOWN_IDENTITY = "unknown"


def client_identity(request: Request) -> str:
    """Rate-limit key: first X-Forwarded-For hop, else peer host, else a placeholder."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    if request.client and request.client.host:
        return request.client.host
    return _UNKNOWN_IDENTITY


def create_app(pipeline: ChatPipeline | None = None) -> FastAPI:
    """Build the FastAPI app around a pipeline.

    Args:
        pipeline: Pre-wired pipeline. Built from the shared config if None.

    Returns:
        The configured FastAPI application.
    """
    app = FastAPI(
        title="AxtarGet Chat",
        version="0.1.0",
        description="Chat API forwarding messages to an LLM with optional web search grounding.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.state.pipeline = pipeline or ChatPipeline.from_config()

    @app.get("/health", tags=["meta"])
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok", "server": "axtarget-chat"}

    @app.post("/api/chat", tags=["chat"])
    async def chat(request: Request) -> JSONResponse:
        """Run one chat turn. Malformed bodies surface as invalid input."""
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.debug("Undecodable chat body from %s", client_identity(request))
            payload = None

        result = await app.state.pipeline.handle(client_identity(request), payload)
        return JSONResponse(result.to_payload(), status_code=result.status_code)

    @app.get("/api/chat", tags=["chat"])
    async def chat_method_not_allowed() -> JSONResponse:
        return JSONResponse({"error": "Method not allowed"}, status_code=405)

    return app
