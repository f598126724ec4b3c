from __future__ import annotations

from typing import Any


def build_error(code: str, message: str, detail: dict[str, Any] | None = None) -> dict[str, Any]:
    error: dict[str, Any] = {"error": message, "code": code}
    if detail is not None:
        error["detail"] = detail
    return error
