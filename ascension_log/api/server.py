"""
Ascension Log: HTTP API Server
==============================

Uploads JSON log documents and serves the reconstructed products of each.
Uploaded logs live in memory until deleted or the process stops.

Endpoints:
- POST /api/v1/logs                   -> Load records (id + data-quality errors)
- GET  /api/v1/logs/{log_id}/rundown  -> Turn rundown, one entry per interval
- GET  /api/v1/logs/{log_id}/log      -> Full log text
- GET  /api/v1/logs/{log_id}/summary  -> Summary aggregates
- GET  /api/v1/logs/{log_id}/slice    -> Full log of a turn range
- DELETE /api/v1/logs/{log_id}        -> Drop a loaded log
- GET  /health

Environment:
- ALV_DATA_TABLES: JSON file with data table overrides
- ALV_LOG_LEVEL:   logging level (default WARNING)

Usage:
    uvicorn ascension_log.api.server:app --reload
"""
import logging
import os
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..contracts.base import ErrorCode, InvalidArgumentError, InvalidStateError
from ..data_tables import DataTables, DEFAULT_DATA_TABLES
from ..engine import AscensionLog, AscensionLogConfig
from ..observability import configure_logging
from ..rendering.formats import LogOutputFormat
from ..timeline.store import TurnIterationMode
from .mapper import map_summary_to_dto

logger = logging.getLogger(__name__)

# =============================================================================
# INFRASTRUCTURE SETUP
# =============================================================================

# Loaded logs by id, None until startup
log_registry: Optional[Dict[str, AscensionLog]] = None
data_tables: DataTables = DEFAULT_DATA_TABLES


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and data tables on startup."""
    global log_registry, data_tables

    configure_logging(os.environ.get("ALV_LOG_LEVEL", "WARNING"))
    tables_path = os.environ.get("ALV_DATA_TABLES")
    data_tables = DataTables.from_json(tables_path) if tables_path else DEFAULT_DATA_TABLES
    logger.info("Data tables: %s", tables_path or "defaults")

    log_registry = {}
    yield

    logger.info("Shutting down, dropping %d logs", len(log_registry))
    log_registry = None


app = FastAPI(
    title="Ascension Log API",
    version=__version__,
    description="Turn-interval reconstruction and rendering of ascension logs",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    return JSONResponse(status_code=400, content={"detail": exc.error.to_dict()})


@app.exception_handler(InvalidStateError)
async def invalid_state_handler(request: Request, exc: InvalidStateError):
    return JSONResponse(status_code=409, content={"detail": exc.error.to_dict()})


class LogUpload(BaseModel):
    """A log document. Records are checked one by one by the loader."""
    records: List[Any]
    detailed: bool = True
    turn_iteration_mode: str = TurnIterationMode.MAFIA.name
    show_notes: bool = True


def _registry() -> Dict[str, AscensionLog]:
    if log_registry is None:
        raise HTTPException(status_code=503, detail="Server not initialized")
    return log_registry


def _get_log(log_id: str) -> AscensionLog:
    log = _registry().get(log_id)
    if log is None:
        raise HTTPException(
            status_code=404,
            detail={"code": ErrorCode.LOG_NOT_FOUND.name, "message": f"No log '{log_id}'."}
        )
    return log


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
async def health_check():
    """System status."""
    registry = _registry()
    return {"status": "online", "version": __version__, "logs": len(registry)}


@app.post("/api/v1/logs", status_code=201)
async def upload_log(upload: LogUpload):
    """
    Load a log document.
    Records that cannot be applied are skipped and reported, never fatal.
    """
    registry = _registry()
    config = AscensionLogConfig(
        detailed=upload.detailed,
        turn_iteration_mode=TurnIterationMode.parse(upload.turn_iteration_mode),
        data_tables=data_tables,
        show_notes=upload.show_notes
    )
    log = AscensionLog.load(upload.records, config)
    log_id = uuid.uuid4().hex
    registry[log_id] = log
    logger.info("Loaded log %s (%d errors)", log_id, len(log.errors))
    return {
        "log_id": log_id,
        "last_turn": log.store.last_turn_number,
        "errors": [e.to_dict() for e in log.errors],
    }


@app.delete("/api/v1/logs/{log_id}")
async def delete_log(log_id: str):
    """Drop a loaded log; its id answers 404 afterwards."""
    _get_log(log_id)
    del _registry()[log_id]
    logger.info("Dropped log %s", log_id)
    return {"log_id": log_id, "deleted": True}


@app.get("/api/v1/logs/{log_id}/rundown")
async def get_rundown(log_id: str, format: str = LogOutputFormat.TEXT.value):
    """Turn rundown: one entry per emitted interval, in log order."""
    log = _get_log(log_id)
    output_format = LogOutputFormat.parse(format)
    return {
        "log_id": log_id,
        "format": output_format.value,
        "intervals": log.rundown(output_format),
    }


@app.get("/api/v1/logs/{log_id}/log")
async def get_full_log(log_id: str, format: str = LogOutputFormat.TEXT.value,
                       date: Optional[str] = None):
    """Full log text."""
    log = _get_log(log_id)
    output_format = LogOutputFormat.parse(format)
    return {"log_id": log_id, "format": output_format.value,
            "text": log.full_log(output_format, date)}


@app.get("/api/v1/logs/{log_id}/summary")
async def get_summary(log_id: str):
    """Summary aggregates."""
    return {"log_id": log_id, "summary": map_summary_to_dto(_get_log(log_id).summary)}


@app.get("/api/v1/logs/{log_id}/slice")
async def get_slice(log_id: str, start: int = Query(...), end: int = Query(...),
                    format: str = LogOutputFormat.TEXT.value):
    """Full log of turns [start, end]."""
    log = _get_log(log_id)
    output_format = LogOutputFormat.parse(format)
    sub_log = log.slice(start, end)
    return {
        "log_id": log_id,
        "start": start,
        "end": end,
        "format": output_format.value,
        "text": sub_log.full_log(output_format),
    }
