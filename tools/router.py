# =============================================================================
# tools/router.py  -  JSON-RPC 2.0 Method Router (MCP over HTTP)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Takes one decoded request envelope and produces (HTTP status, body).
#
#   initialize                 protocol handshake + server identity
#   notifications/initialized  {}
#   ping                       {}
#   tools/list                 the static catalog (tools/catalog.py)
#   tools/call                 tools/dispatch.call_tool, wrapped as
#                              {content: [{type: "text", text}]}
#
# ERROR CODES:
#   -32600  400  not a JSON-RPC 2.0 envelope, or non-object arguments
#   -32601  400  unknown method, or unknown tool (no upstream call is made)
#   -32603  500  anything unexpected while serving the request
#
#   A tool that fails on the upstream side is NOT a JSON-RPC error; its
#   "❌ ..." text comes back as a normal result.
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from core.config import SERVER_NAME, SERVER_VERSION
from core.context import ToolContext
from tools.catalog import list_tools
from tools.dispatch import call_tool, is_known_tool

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
DEFAULT_PROTOCOL_VERSION = "2024-11-05"

INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603

SERVER_INFO = {"name": SERVER_NAME, "version": SERVER_VERSION}


@dataclass(frozen=True)
class RouterReply:
    status_code: int
    body: dict = field(default_factory=dict)


def jsonrpc_result(request_id: Any, result: dict) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def jsonrpc_error(request_id: Any, code: int, message: str) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": {"code": code, "message": message}}


class McpRouter:
    """Routes JSON-RPC envelopes to the protocol methods and tools."""

    def __init__(self, ctx: ToolContext):
        self.ctx = ctx

    async def handle(self, envelope: Any) -> RouterReply:
        request_id = envelope.get("id") if isinstance(envelope, Mapping) else None
        try:
            return await self._route(envelope, request_id)
        except Exception as e:
            logger.exception("Unhandled error while serving JSON-RPC request")
            return RouterReply(500, jsonrpc_error(request_id, INTERNAL_ERROR, str(e) or type(e).__name__))

    async def _route(self, envelope: Any, request_id: Any) -> RouterReply:
        if not isinstance(envelope, Mapping) or envelope.get("jsonrpc") != JSONRPC_VERSION:
            return RouterReply(400, jsonrpc_error(request_id, INVALID_REQUEST, "Invalid JSON-RPC version"))

        method = envelope.get("method")
        params = envelope.get("params")
        if not isinstance(params, Mapping):
            params = {}

        if method == "initialize":
            return self._ok(request_id, {
                "protocolVersion": params.get("protocolVersion") or DEFAULT_PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": dict(SERVER_INFO),
            })

        if method in ("notifications/initialized", "ping"):
            return self._ok(request_id, {})

        if method == "tools/list":
            return self._ok(request_id, {"tools": list_tools()})

        if method == "tools/call":
            return await self._call(request_id, params)

        return RouterReply(400, jsonrpc_error(request_id, METHOD_NOT_FOUND, f"Unknown method: {method}"))

    async def _call(self, request_id: Any, params: Mapping) -> RouterReply:
        name = params.get("name")
        if not is_known_tool(name):
            return RouterReply(400, jsonrpc_error(request_id, METHOD_NOT_FOUND, f"Unknown tool: {name}"))

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            return RouterReply(400, jsonrpc_error(request_id, INVALID_REQUEST, "Tool arguments must be an object"))

        text = await call_tool(self.ctx, name, arguments)
        return self._ok(request_id, {"content": [{"type": "text", "text": text}]})

    @staticmethod
    def _ok(request_id: Any, result: dict) -> RouterReply:
        return RouterReply(200, jsonrpc_result(request_id, result))
