from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class CreatePasteRequest(BaseModel):
    """Body of `POST /api/pastes`.

    Notes
    -----
    - Fields are deliberately untyped: `PasteStore.create` owns validation so
      that clients get its specific error messages rather than a generic 422.
    """

    content: Any = None
    ttl_seconds: Any = None
    max_views: Any = None


class CreatePasteResponse(BaseModel):
    id: str
    url: str


class PasteResponse(BaseModel):
    content: str
    remaining_views: Optional[int] = None
    expires_at: Optional[datetime] = None


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool
