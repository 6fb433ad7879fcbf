"""FastAPI application factory for the task line REST API."""

from typing import Dict, List, Optional

from fastapi import APIRouter, FastAPI

from todo_plus.api.routes import register_line_routes
from todo_plus.commands import Hotkey
from todo_plus.utils.dates import Clock, system_clock


def create_app(
    clock: Clock = system_clock,
    bindings: Optional[Dict[str, List[Hotkey]]] = None,
) -> FastAPI:
    """Build and return a FastAPI app whose time tags come from the given clock."""
    app = FastAPI(title="todo-plus", docs_url="/api/docs", openapi_url="/api/openapi.json")

    api = APIRouter(prefix="/api")
    register_line_routes(api, clock, bindings)
    app.include_router(api)

    return app
