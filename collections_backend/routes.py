"""
HTTP routes for users and saved request collections.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from collections_backend.db import CollectionStore, CollectionUpdate, UserStore
from collections_backend.dependencies import get_collection_store, get_user_store
from collections_backend.errors import InternalError, ValidationError
from collections_backend.schemas import (
    CollectionPayload,
    CollectionRecord,
    MessageResponse,
    SaveCollectionResponse,
    UserPayload,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/users", response_model=UserResponse, status_code=201)
def register_user(
    payload: Optional[UserPayload] = None,
    users: UserStore = Depends(get_user_store),
):
    """
    Store a user the first time their uid is seen. Repeat calls are a no-op
    answered with 200.
    """
    if payload is None:
        payload = UserPayload()
    if not payload.uid or not payload.email:
        raise ValidationError("Missing required user information")

    try:
        if users.exists(payload.uid):
            return JSONResponse(
                status_code=200, content={"message": "User already exists"}
            )
        user_id = users.create(payload.uid, payload.email)
    except SQLAlchemyError as exc:
        logger.error("Error storing user in database", exc_info=exc)
        raise InternalError("register_user") from exc

    return UserResponse(
        message="User stored in database successfully", userId=user_id
    )


@router.post(
    "/save-collection", response_model=SaveCollectionResponse, status_code=201
)
def save_collection(
    payload: Optional[CollectionPayload] = None,
    collections: CollectionStore = Depends(get_collection_store),
):
    if payload is None:
        payload = CollectionPayload()
    if not (payload.uid and payload.name and payload.url and payload.method):
        raise ValidationError(
            "Missing required collection information or user authentication"
        )

    try:
        collection_id = collections.create(
            uid=payload.uid,
            name=payload.name,
            url=payload.url,
            method=payload.method,
            headers=payload.headers,
            params=payload.params,
            body=payload.body,
        )
    except SQLAlchemyError as exc:
        logger.error("Error saving collection", exc_info=exc)
        raise InternalError("save_collection") from exc

    return SaveCollectionResponse(
        message="Collection saved successfully", collectionId=collection_id
    )


@router.get("/collections", response_model=list[CollectionRecord])
def list_collections(
    uid: Optional[str] = Query(None),
    collections: CollectionStore = Depends(get_collection_store),
):
    if not uid:
        raise ValidationError("Missing user authentication")

    try:
        return collections.list_for_user(uid)
    except SQLAlchemyError as exc:
        logger.error("Error retrieving collections", exc_info=exc)
        raise InternalError("list_collections") from exc


@router.put("/collections/{collection_id}", response_model=MessageResponse)
def update_collection(
    collection_id: int,
    payload: Optional[CollectionPayload] = None,
    collections: CollectionStore = Depends(get_collection_store),
):
    """
    Apply the non-null fields of the payload to one collection. An unknown id
    still answers 200; the update simply matches no row.
    """
    if payload is None:
        payload = CollectionPayload()
    changes = CollectionUpdate(**payload.model_dump())
    if changes.is_empty():
        raise ValidationError("No fields to update")

    try:
        matched = collections.apply_update(collection_id, changes)
    except SQLAlchemyError as exc:
        logger.error("Error updating collection", exc_info=exc)
        raise InternalError("update_collection") from exc

    if not matched:
        logger.info("Update for collection %s matched no rows", collection_id)
    return MessageResponse(message="Collection updated successfully")
