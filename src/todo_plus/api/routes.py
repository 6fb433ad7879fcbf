"""REST API routes for task line operations."""

from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from todo_plus.commands import Hotkey
from todo_plus.tools.line_tools import (
    handle_command_list,
    handle_document_command,
    handle_duration,
    handle_line_parse,
    handle_line_transition,
)
from todo_plus.utils.dates import Clock, system_clock


class LineParseBody(BaseModel):
    text: str


class LineTransitionBody(BaseModel):
    text: str
    command: str
    now: Optional[str] = None


class DocumentCommandBody(BaseModel):
    text: str
    command: str
    line: int
    column: int = 0
    now: Optional[str] = None


def register_line_routes(
    app_router: APIRouter,
    clock: Clock = system_clock,
    bindings: Optional[Dict[str, List[Hotkey]]] = None,
) -> None:
    """Attach task line REST routes."""

    @app_router.post("/lines/parse")
    def parse_line(body: LineParseBody):
        return handle_line_parse(text=body.text)

    @app_router.post("/lines/transition")
    def transition_line(body: LineTransitionBody):
        result = handle_line_transition(clock=clock, **body.model_dump())
        if "error" in result:
            raise HTTPException(status_code=400, detail=result["error"])
        return result

    @app_router.post("/documents/command")
    def document_command(body: DocumentCommandBody):
        result = handle_document_command(clock=clock, **body.model_dump())
        if "error" in result:
            raise HTTPException(status_code=400, detail=result["error"])
        return result

    @app_router.get("/duration/{ms}")
    def get_duration(ms: int):
        return handle_duration(ms=ms)

    @app_router.get("/commands")
    def list_commands():
        return handle_command_list(bindings)
