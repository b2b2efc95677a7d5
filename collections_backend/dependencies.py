"""
Dependency wiring for the FastAPI app.

The pool lives on ``app.state`` (set by ``create_app``); stores are built per
request around it.
"""

from __future__ import annotations

from fastapi import Request

from collections_backend.db import CollectionStore, UserStore
from collections_backend.pool import DatabasePool


def get_pool(request: Request) -> DatabasePool:
    return request.app.state.pool


def get_user_store(request: Request) -> UserStore:
    return UserStore(get_pool(request))


def get_collection_store(request: Request) -> CollectionStore:
    return CollectionStore(get_pool(request))
