"""
Schools API schemas (response models).
"""

from __future__ import annotations

from pydantic import BaseModel


class SchoolCreatedResponse(BaseModel):
    message: str = "School added successfully"
    id: int


class SchoolListItem(BaseModel):
    id: int
    name: str
    address: str
    city: str
    state: str | None = None
    # data: URI, or the placeholder path when no blob is stored
    image: str
