"""The canonical response envelope: {"status": "success", "data": ...}."""

from typing import Any

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    status: str = "success"
    data: Any = None


class ErrorBody(BaseModel):
    type: str
    message: str
    request_id: str | None = None


class ErrorResponse(BaseModel):
    status: str = "error"
    error: ErrorBody


def ok(data: Any = None) -> dict:
    return {"status": "success", "data": data}
