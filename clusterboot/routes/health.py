from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from clusterboot.discovery import CLUSTER_INFO_NAME, PUBLIC_NAMESPACE
from clusterboot.injectors import get_store
from clusterboot.store import RecordKind, StoreClient
from clusterboot.store.errors import NotFoundError

router = APIRouter(tags=["health"])


Status = Literal["ok", "error"]


class HealthResponse(BaseModel):
    status: Status
    """The status of the request"""
    cluster_info_published: bool
    """Whether the discovery record exists yet"""


@router.get("/health")
async def health_check(store: StoreClient = Depends(get_store)) -> HealthResponse:
    """Health check endpoint. Store failures surface as a 500."""
    try:
        await store.get(RecordKind.CONFIG_MAP, PUBLIC_NAMESPACE, CLUSTER_INFO_NAME)
    except NotFoundError:
        return HealthResponse(status="ok", cluster_info_published=False)
    return HealthResponse(status="ok", cluster_info_published=True)
