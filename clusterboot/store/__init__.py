from enum import Enum
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from .errors import (
    AlreadyExistsError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
)

__all__ = [
    "AlreadyExistsError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "Record",
    "RecordKind",
    "StoreClient",
    "StoreError",
    "UnauthorizedError",
]


class RecordKind(str, Enum):
    CONFIG_MAP = "ConfigMap"
    SECRET = "Secret"


class Record(BaseModel):
    """A named key-value object as persisted by a store."""

    kind: RecordKind = Field(description="The kind of record")
    name: str = Field(description="The record name, unique per kind and namespace")
    namespace: str = Field(description="The namespace holding the record")
    type: Optional[str] = Field(
        default=None, description="Optional type tag (e.g. for secrets)"
    )
    data: Optional[dict[str, str]] = Field(
        default=None, description="String to string payload"
    )
    resource_version: Optional[int] = Field(
        default=None,
        description="Version assigned by the store, used to detect stale updates",
    )


class StoreClient(Protocol):
    """
    Minimal record store capability.

    `get` raises NotFoundError when the record is absent. Any other failure is
    raised as a different StoreError subclass so callers can tell them apart.
    """

    async def get(self, kind: RecordKind, namespace: str, name: str) -> Record: ...

    async def create(self, record: Record) -> Record: ...

    async def update(self, record: Record) -> Record: ...
