"""
JSON response rendering shared by every route and error handler.
"""
import json
from typing import Any

from fastapi.responses import JSONResponse

POWERED_BY = "FastAPI HTTP Exercise"


def render_json(data: Any) -> str:
    """Serialize data the way every body of this server is written (2-space indent)."""
    return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)


class PrettyJSONResponse(JSONResponse):
    """Indented JSON response carrying the X-Powered-By header."""

    def __init__(self, content: Any, *args, **kwargs):
        super().__init__(content, *args, **kwargs)
        self.headers["X-Powered-By"] = POWERED_BY

    def render(self, content: Any) -> bytes:
        return render_json(content).encode("utf-8")


def error_response(status_code: int, message: str, headers=None) -> PrettyJSONResponse:
    """Uniform error envelope: {"error": message}."""
    return PrettyJSONResponse({"error": message}, status_code=status_code, headers=headers)
