"""
todo-plus MCP server entry point.

Startup sequence:
1. Configure logging from TODO_PLUS_LOG_LEVEL
2. Read TODO_PLUS_HOTKEYS and bind default hotkeys for the rest
3. Start REST API server in background thread (if API_ENABLED)
4. Register all MCP tools
5. Run MCP server (stdio transport)
"""

import logging
import os
import sys
import threading

from mcp.server.fastmcp import FastMCP

from todo_plus.commands import bind_default_hotkeys, parse_bindings
from todo_plus.tools import register_line_tools
from todo_plus.utils.dates import system_clock

log = logging.getLogger(__name__)


def _configure_logging() -> None:
    level = os.environ.get("TODO_PLUS_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def _start_api_server(host: str, port: int, bindings) -> None:
    """Run the FastAPI/uvicorn server in a daemon thread."""
    import uvicorn

    from todo_plus.api.app import create_app

    app = create_app(system_clock, bindings)
    log.info("Starting REST API on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level="warning")


def main() -> None:
    _configure_logging()

    try:
        bindings = bind_default_hotkeys(parse_bindings(os.environ.get("TODO_PLUS_HOTKEYS", "")))
    except ValueError as e:
        log.error("TODO_PLUS_HOTKEYS: %s", e)
        sys.exit(1)
    for command_id, hotkeys in bindings.items():
        log.info("Command %s: %s", command_id, ", ".join(str(h) for h in hotkeys))

    if _env_flag("API_ENABLED", "true"):
        api_host = os.environ.get("API_HOST", "127.0.0.1")
        try:
            api_port = int(os.environ.get("API_PORT", "9410"))
        except ValueError:
            log.error("API_PORT must be an integer, got %r", os.environ.get("API_PORT"))
            sys.exit(1)
        api_thread = threading.Thread(
            target=_start_api_server, args=(api_host, api_port, bindings), daemon=True
        )
        api_thread.start()

    mcp = FastMCP("todo-plus")
    register_line_tools(mcp, system_clock, bindings)

    log.info("Starting todo-plus server")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
