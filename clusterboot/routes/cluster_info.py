from typing import Literal

from fastapi import APIRouter, Depends
from fastapi.exceptions import HTTPException
from pydantic import BaseModel, Field

from clusterboot.discovery import CLUSTER_INFO_NAME, PUBLIC_NAMESPACE
from clusterboot.injectors import get_store
from clusterboot.store import RecordKind, StoreClient
from clusterboot.store.errors import NotFoundError

router = APIRouter(tags=["discovery"])

Status = Literal["ok", "error"]


class ClusterInfoResponse(BaseModel):
    status: Status = Field(description="The status of the request")
    name: str = Field(description="Name of the discovery record")
    namespace: str = Field(description="Namespace of the discovery record")
    data: dict[str, str] = Field(description="Published discovery fields")


@router.get("/cluster-info", response_model=ClusterInfoResponse)
async def get_cluster_info(
    store: StoreClient = Depends(get_store),
) -> ClusterInfoResponse:
    """
    Return the published cluster-info record.

    This endpoint requires no credentials so that joining nodes can discover
    the cluster before they hold any.
    """
    try:
        record = await store.get(
            RecordKind.CONFIG_MAP, PUBLIC_NAMESPACE, CLUSTER_INFO_NAME
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="cluster-info not published")

    return ClusterInfoResponse(
        status="ok",
        name=record.name,
        namespace=record.namespace,
        data=record.data or {},
    )
