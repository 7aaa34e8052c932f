# =============================================================================
# tools/http_app.py  -  HTTP binding for the JSON-RPC router (FastAPI)
# =============================================================================
#
# ROUTES:
#   POST /  and  POST /mcp   one JSON-RPC envelope -> tools/router.McpRouter
#   GET  /health             {status, name, version, tools}
#   OPTIONS *                CORS preflight (200, empty)
#
#   Every response carries permissive CORS headers so browser-based MCP
#   clients can call the server directly.
#
# RUNNING:
#   python -m tools.http_app          (PORT env var, default 8000)
# =============================================================================

import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from core.config import SERVER_NAME, SERVER_VERSION, Settings, load_settings
from core.context import ToolContext
from core.gateway import Gateway
from tools.catalog import TOOL_NAMES
from tools.router import McpRouter

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, mcp-session-id, x-session-id, Accept",
}


def create_app(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    """Build the app around one Gateway shared by all requests.

    ``client`` is handed to the Gateway as-is (tests inject one backed by
    httpx.MockTransport).
    """
    gateway = Gateway(settings, client=client)
    router = McpRouter(ToolContext(settings=settings, gateway=gateway))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await gateway.aclose()

    app = FastAPI(title="Korea Culture MCP Server", version=SERVER_VERSION, lifespan=lifespan)
    app.state.router = router

    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "name": SERVER_NAME,
            "version": SERVER_VERSION,
            "tools": list(TOOL_NAMES),
        }

    @app.post("/")
    @app.post("/mcp")
    async def rpc(request: Request):
        try:
            envelope = await request.json()
        except ValueError:
            # Undecodable bodies are routed as "not an envelope" (-32600).
            envelope = None
        reply = await router.handle(envelope)
        return JSONResponse(status_code=reply.status_code, content=reply.body)

    return app


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [HTTP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting {SERVER_NAME} {SERVER_VERSION} on port {port}")
    uvicorn.run(create_app(load_settings()), host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
