from __future__ import annotations

import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from . import __version__
from .config import DbConfig
from .db.pool import ConnectionPool
from .errors import ProtocolError
from .gateway import CommandGateway
from .registry import Operation, list_operations

logger = logging.getLogger(__name__)

SERVER_NAME = "mysql-mcp-server"


def tool_for(operation: Operation) -> types.Tool:
    return types.Tool(
        name=operation.name,
        description=operation.description,
        inputSchema=dict(operation.input_schema),
    )


async def handle_call(gateway: CommandGateway, name: str, arguments: Any) -> types.CallToolResult:
    """
    Run one tools/call request through the gateway.

    Protocol failures are raised as McpError so the session answers with a
    JSON-RPC error; database failures come back as an isError result.
    """
    try:
        envelope = await gateway.call(name, arguments)
    except ProtocolError as exc:
        raise McpError(types.ErrorData(code=int(exc.code), message=exc.message)) from exc

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=item["text"]) for item in envelope["content"]],
        isError=envelope.get("isError", False),
    )


def build_server(gateway: CommandGateway) -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [tool_for(op) for op in list_operations()]

    # Registered directly instead of through @server.call_tool(), which would
    # turn McpError into an isError result and validate arguments itself.
    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await handle_call(gateway, request.params.name, request.params.arguments)
        return types.ServerResult(result)

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(config: DbConfig) -> None:
    """Serve the gateway over stdio until the client disconnects."""
    pool = ConnectionPool.from_config(config)
    gateway = CommandGateway(pool, error_label=config.error_label)
    server = build_server(gateway)
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("MySQL MCP server running on stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await pool.dispose()
