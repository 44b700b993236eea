import logging
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from logging_config import LOGGER_NAME

router = APIRouter()

frontend_logger = logging.getLogger(f"{LOGGER_NAME}.frontend")

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class LogEntry(BaseModel):
    timestamp: Optional[str] = None
    level: str = "info"
    component: str = "app"
    message: str = ""
    data: Optional[Any] = None


@router.post("")
def receive_log(entry: LogEntry):
    """Relay a log line from the dashboard frontend into the server log."""
    level = LEVELS.get(entry.level.lower(), logging.INFO)
    line = f"[{entry.timestamp or '-'}] {entry.component}: {entry.message}"
    if entry.data is not None:
        line += f" | data={entry.data!r}"
    frontend_logger.log(level, line)
    return {"success": True}
