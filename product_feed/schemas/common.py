"""
Common schemas.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = True


class ErrorResponse(BaseModel):
    """Error response."""
    message: str
