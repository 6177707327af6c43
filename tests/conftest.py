from typing import Optional

import pytest

from clusterboot.store import Record, RecordKind
from clusterboot.store.errors import NotFoundError, StoreError

TEST_KUBECONFIG = """apiVersion: v1
clusters:
- cluster:
    server: https://10.128.0.6:6443
  name: kubernetes
contexts:
- context:
    cluster: kubernetes
    user: kubernetes-admin
  name: kubernetes-admin@kubernetes
current-context: kubernetes-admin@kubernetes
kind: Config
preferences: {}
users:
- name: kubernetes-admin
"""


class RecordingStore:
    """
    Store double that answers each verb with a canned record or error and
    records every call in `actions` as (verb, record) pairs.
    """

    def __init__(
        self,
        existing: Optional[Record] = None,
        get_error: Optional[StoreError] = None,
        create_error: Optional[StoreError] = None,
        update_error: Optional[StoreError] = None,
    ):
        self.existing = existing
        self.get_error = get_error
        self.create_error = create_error
        self.update_error = update_error
        self.actions: list[tuple[str, Optional[Record]]] = []

    @property
    def verbs(self) -> list[str]:
        return [verb for verb, _ in self.actions]

    async def get(self, kind: RecordKind, namespace: str, name: str) -> Record:
        self.actions.append(("get", None))
        if self.get_error is not None:
            raise self.get_error
        if self.existing is None:
            raise NotFoundError(kind.value, namespace, name)
        return self.existing.model_copy(deep=True)

    async def create(self, record: Record) -> Record:
        self.actions.append(("create", record))
        if self.create_error is not None:
            raise self.create_error
        self.existing = record.model_copy(deep=True)
        return record

    async def update(self, record: Record) -> Record:
        self.actions.append(("update", record))
        if self.update_error is not None:
            raise self.update_error
        self.existing = record.model_copy(deep=True)
        return record


@pytest.fixture
def kubeconfig_file(tmp_path):
    path = tmp_path / "admin.conf"
    path.write_text(TEST_KUBECONFIG)
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run in a scratch directory with a throwaway sqlite database."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(
        "CLUSTERBOOT_DATABASE__URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    )
    return tmp_path
