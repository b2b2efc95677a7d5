"""
Pydantic schemas for the collections backend.

Request fields are all optional so that a missing field surfaces as a 400
with the service's own message rather than FastAPI's 422.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class UserPayload(BaseModel):
    uid: Optional[str] = None
    email: Optional[str] = None


class UserResponse(BaseModel):
    message: str
    userId: Optional[int] = None


class CollectionPayload(BaseModel):
    uid: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    method: Optional[str] = None
    params: Any = None
    headers: Any = None
    body: Any = None


class SaveCollectionResponse(BaseModel):
    message: str
    collectionId: int


class CollectionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uid: str
    name: str
    url: str
    method: str
    headers: Optional[str] = None
    params: Optional[str] = None
    body: Optional[str] = None
    created_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str
