import logging
import os
from pathlib import Path
from typing import Awaitable, Callable

from clusterboot.store import Record, RecordKind, StoreClient
from clusterboot.store.errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)

CLUSTER_INFO_NAME = "cluster-info"
PUBLIC_NAMESPACE = "kube-public"
KUBECONFIG_KEY = "kubeconfig"


def read_kubeconfig(path: str | os.PathLike[str]) -> str:
    """Read a client configuration file, keeping undecodable bytes intact."""
    return Path(path).read_bytes().decode("utf-8", errors="surrogateescape")


async def publish_or_update(
    store: StoreClient, kubeconfig_path: str | os.PathLike[str]
) -> Record:
    """
    Publish the cluster-info record, creating it if it does not exist.

    Only the `kubeconfig` key is written. Any other key on an existing
    record is carried over untouched. The update carries the resource version
    that was read, so if another writer changed the record in between the
    store raises ConflictError. Nothing is retried.
    """
    kubeconfig = read_kubeconfig(kubeconfig_path)

    try:
        existing = await store.get(
            RecordKind.CONFIG_MAP, PUBLIC_NAMESPACE, CLUSTER_INFO_NAME
        )
    except NotFoundError:
        existing = None
    except StoreError as e:
        logger.error(
            "Failed to look up %s/%s: %s", PUBLIC_NAMESPACE, CLUSTER_INFO_NAME, e
        )
        raise

    if existing is None:
        logger.info(
            "Creating %s/%s with a fresh kubeconfig",
            PUBLIC_NAMESPACE,
            CLUSTER_INFO_NAME,
        )
        record = Record(
            kind=RecordKind.CONFIG_MAP,
            name=CLUSTER_INFO_NAME,
            namespace=PUBLIC_NAMESPACE,
            data={KUBECONFIG_KEY: kubeconfig},
        )
        return await _write(store.create, record)

    data = dict(existing.data or {})
    data[KUBECONFIG_KEY] = kubeconfig
    logger.info(
        "Updating %s/%s, preserving %d other key(s)",
        PUBLIC_NAMESPACE,
        CLUSTER_INFO_NAME,
        len(data) - 1,
    )
    return await _write(store.update, existing.model_copy(update={"data": data}))


async def _write(
    operation: Callable[[Record], Awaitable[Record]], record: Record
) -> Record:
    try:
        return await operation(record)
    except StoreError as e:
        logger.error("Failed to write %s/%s: %s", record.namespace, record.name, e)
        raise
