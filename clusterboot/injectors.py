from fastapi import Request

from clusterboot.store import StoreClient


def get_store(request: Request) -> StoreClient:
    """Inject the record store into route handlers."""
    return request.app.state.store
