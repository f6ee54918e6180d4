"""HTTP API for configuring gesture recognition.

Exposes the core's command/query surface: controller state, template
management, live traces, and the queue of detected gestures.

Usage:
    gesture-trace serve
    # or
    uvicorn gesture_trace.server:app --host 127.0.0.1 --port 8765
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from gesture_trace import __version__
from gesture_trace.config import ServerConfig
from gesture_trace.core import Core
from gesture_trace.controller import State
from gesture_trace.errors import NoLiveModelError, TemplateFileError, TemplateNotFoundError
from gesture_trace.template import Template

logger = logging.getLogger("gesture_trace.server")

app = FastAPI(title="gesture-trace", version=__version__)


# --- State ---

class ServerState:
    def __init__(self):
        self.config: ServerConfig = ServerConfig()
        self.core: Optional[Core] = None

    def get_core(self) -> Core:
        if self.core is None:
            self.core = Core(template_file=self.config.template_file)
        return self.core


state = ServerState()


class StateUpdate(BaseModel):
    state: str


class TemplateCreate(BaseModel):
    name: str
    start: Optional[int] = Field(None, alias="from")
    end: Optional[int] = Field(None, alias="to")


def _template_summary(template: Template) -> dict:
    return {
        "id": template.id,
        "name": template.name,
        "points": len(template.model),
    }


# --- Errors ---

@app.exception_handler(NoLiveModelError)
async def no_live_model(request: Request, exc: NoLiveModelError):
    return JSONResponse({"error": str(exc)}, status_code=409)


@app.exception_handler(TemplateNotFoundError)
async def template_not_found(request: Request, exc: TemplateNotFoundError):
    return JSONResponse({"error": str(exc)}, status_code=404)


@app.exception_handler(TemplateFileError)
async def template_file_error(request: Request, exc: TemplateFileError):
    return JSONResponse({"error": str(exc)}, status_code=500)


@app.exception_handler(ValueError)
async def invalid_value(request: Request, exc: ValueError):
    return JSONResponse({"error": str(exc)}, status_code=422)


# --- Controller state ---

@app.get("/api/v1/state")
async def get_state():
    return {"state": state.get_core().state().value}


@app.put("/api/v1/state")
async def put_state(update: StateUpdate):
    core = state.get_core()
    previous = core.set_state(update.state)
    return {"state": core.state().value, "previous": previous.value}


@app.get("/api/v1/record")
async def get_recording():
    return {"recording": state.get_core().state() is State.RECORDING}


@app.get("/api/v1/record/{recording}")
async def set_recording(recording: bool):
    core = state.get_core()
    core.set_state(State.RECORDING if recording else State.NORMAL)
    return {"recording": core.state() is State.RECORDING}


# --- Templates ---

@app.get("/api/v1/templates")
async def list_templates():
    return {"templates": [_template_summary(t) for t in state.get_core().to_templates()]}


@app.get("/api/v1/templates/{template_id}")
async def get_template(template_id: int):
    template = state.get_core().store.get(template_id)
    if template is None:
        raise TemplateNotFoundError(template_id)
    return template.to_dict()


@app.post("/api/v1/templates", status_code=201)
async def create_template(body: TemplateCreate):
    template = state.get_core().create(body.name, body.start, body.end)
    return _template_summary(template)


@app.delete("/api/v1/templates/{template_id}")
async def delete_template(template_id: int):
    removed = state.get_core().delete(template_id)
    return {"deleted": _template_summary(removed)}


@app.delete("/api/v1/templates")
async def delete_all_templates():
    return {"deleted": state.get_core().delete_all()}


# --- Live data ---

@app.get("/api/v1/live")
async def live_trace():
    return {"models": [m.to_dict() for m in state.get_core().live_trace()]}


@app.get("/api/v1/detected")
async def flush_detected():
    return {"detected": [_template_summary(t) for t in state.get_core().flush_detected()]}


# --- Prometheus metrics ---

@app.get("/metrics")
async def metrics():
    return PlainTextResponse(
        state.get_core().metrics.render(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )


@app.on_event("startup")
async def startup():
    core = state.get_core()
    try:
        count = core.load()
    except TemplateFileError as e:
        logger.error("Starting with an empty template store: %s", e)
        return
    logger.info("Loaded %d templates", count)


@app.on_event("shutdown")
async def shutdown():
    if state.core is not None:
        state.core.save()


# --- Entry point ---

def main():
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="gesture-trace HTTP API")
    parser.add_argument("--host", default=state.config.host, help="Bind address")
    parser.add_argument("--port", type=int, default=state.config.port, help="Port")
    parser.add_argument("--log-level", default=state.config.log_level)
    args = parser.parse_args()

    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
