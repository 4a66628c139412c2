"""
Error envelope model.

Every error response body mirrors this shape.
"""

from pydantic import BaseModel


class ErrorEnvelope(BaseModel):
    status: int = 500
    message: str = "Internal Server Error"


NOT_FOUND = ErrorEnvelope(status=404, message="Resource Not Found")
