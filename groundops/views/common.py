"""Common response schemas."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    message: str
    field: Optional[str] = None
