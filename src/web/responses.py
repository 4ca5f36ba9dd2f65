"""Response classes shared by the routes."""

import json
from typing import Any

from fastapi.responses import JSONResponse

__all__ = ["PrettyJSONResponse"]


class PrettyJSONResponse(JSONResponse):
    """JSON response rendered with a two-space indent."""

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content, ensure_ascii=False, allow_nan=False, indent=2
        ).encode("utf-8")
