"""
Tables and data access for users and saved request collections.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import Any, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    String,
    Text,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.dml import Update

from collections_backend.pool import DatabasePool

JSON_FIELDS = ("headers", "params", "body")


def to_json_text(value: Any) -> Optional[str]:
    """Serialize a request-template field; a missing value is stored as NULL."""
    if value is None:
        return None
    return json.dumps(value)


@dataclass
class CollectionUpdate:
    """
    Optional field changes for one collection row. Fields left as None are
    not part of the update, so an explicit null cannot clear a column.
    """

    uid: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    method: Optional[str] = None
    params: Any = None
    headers: Any = None
    body: Any = None

    def values(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if value is None:
                continue
            if field.name in JSON_FIELDS:
                value = to_json_text(value)
            values[field.name] = value
        return values

    def is_empty(self) -> bool:
        return not self.values()

    def statement(self, collection_id: int) -> Update:
        values = self.values()
        if not values:
            raise ValueError("CollectionUpdate has no fields to update")
        return (
            update(CollectionRow.__table__)
            .where(CollectionRow.__table__.c.id == collection_id)
            .values(**values)
        )


class UserStore:
    def __init__(self, pool: DatabasePool):
        self.pool = pool

    def exists(self, uid: str) -> bool:
        with self.pool.Session() as session:
            stmt = select(UserRow.id).where(UserRow.firebase_user_id == uid).limit(1)
            return session.execute(stmt).first() is not None

    def create(self, uid: str, email: str) -> int:
        with self.pool.Session() as session:
            result = session.execute(
                insert(UserRow.__table__).values(
                    firebase_user_id=uid, email=email, created_at=func.now()
                )
            )
            session.commit()
            return result.inserted_primary_key[0]


class CollectionStore:
    def __init__(self, pool: DatabasePool):
        self.pool = pool

    def create(
        self,
        *,
        uid: str,
        name: str,
        url: str,
        method: str,
        headers: Any = None,
        params: Any = None,
        body: Any = None,
    ) -> int:
        with self.pool.Session() as session:
            result = session.execute(
                insert(CollectionRow.__table__).values(
                    uid=uid,
                    name=name,
                    url=url,
                    method=method,
                    headers=to_json_text(headers),
                    params=to_json_text(params),
                    body=to_json_text(body),
                    created_at=func.now(),
                )
            )
            session.commit()
            return result.inserted_primary_key[0]

    def list_for_user(self, uid: str) -> list[dict]:
        """Rows owned by ``uid`` in whatever order the store returns them."""
        with self.pool.Session() as session:
            stmt = select(CollectionRow.__table__).where(CollectionRow.uid == uid)
            return [dict(row) for row in session.execute(stmt).mappings()]

    def apply_update(self, collection_id: int, changes: CollectionUpdate) -> int:
        """Run one UPDATE for the given changes and return the matched row count."""
        with self.pool.Session() as session:
            result = session.execute(changes.statement(collection_id))
            session.commit()
            return result.rowcount


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    firebase_user_id = Column(String(128), nullable=False, unique=True)
    email = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class CollectionRow(Base):
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uid = Column(String(128), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    url = Column(Text, nullable=False)
    method = Column(String(16), nullable=False)
    headers = Column(Text, nullable=True)
    params = Column(Text, nullable=True)
    body = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


def create_tables(pool: DatabasePool) -> None:
    """CREATE TABLE IF NOT EXISTS for both tables; not a migration tool."""
    Base.metadata.create_all(pool.engine)
