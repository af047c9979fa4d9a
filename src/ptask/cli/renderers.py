"""
Output renderers for machine-readable CLI modes.

Every `--json` command prints exactly one envelope:

    {"command": "...", "status": "success", "data": {...}, "error": null}

Anything a command prints while the renderer is capturing is discarded, so
stray output can never corrupt the envelope.
"""

import io
import json
from contextlib import contextmanager, redirect_stdout
from typing import Any, Dict, Optional

import click
from pydantic import BaseModel

from ..core.exceptions import PtaskError


class JsonRenderer:
    """Standard JSON envelope for a single command invocation."""

    def __init__(self, command: str):
        self.command = command
        self.captured = ""

    @contextmanager
    def capture(self):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            yield
        self.captured = buffer.getvalue()

    def _emit(self, status: str, data: Optional[Any], error: Optional[Dict[str, str]]) -> None:
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")
        envelope = {
            "command": self.command,
            "status": status,
            "data": data,
            "error": error,
        }
        click.echo(json.dumps(envelope, indent=2, ensure_ascii=False))

    def render_success(self, data: Any) -> None:
        self._emit("success", data, None)

    def render_error(self, error: Exception) -> None:
        code = type(error).__name__ if isinstance(error, PtaskError) else "InternalError"
        self._emit("error", None, {"code": code, "message": str(error)})


class _null_context:
    def __enter__(self):
        pass

    def __exit__(self, *args):
        pass
