from clusterboot.store import Record, RecordKind
from clusterboot.store.errors import AlreadyExistsError, ConflictError, NotFoundError

_Key = tuple[RecordKind, str, str]


def _key(record: Record) -> _Key:
    return (record.kind, record.namespace, record.name)


class InMemoryStore:
    """Process-local store used as the test double for StoreClient in tests."""

    def __init__(self, records: list[Record] | None = None):
        self._records: dict[_Key, Record] = {}
        self._version = 0
        for record in records or []:
            self._put(record)

    def _put(self, record: Record) -> Record:
        self._version += 1
        stored = record.model_copy(
            deep=True, update={"resource_version": self._version}
        )
        self._records[_key(stored)] = stored
        return stored.model_copy(deep=True)

    async def get(self, kind: RecordKind, namespace: str, name: str) -> Record:
        record = self._records.get((kind, namespace, name))
        if record is None:
            raise NotFoundError(kind.value, namespace, name)
        return record.model_copy(deep=True)

    async def create(self, record: Record) -> Record:
        if _key(record) in self._records:
            raise AlreadyExistsError(record.kind.value, record.namespace, record.name)
        return self._put(record)

    async def update(self, record: Record) -> Record:
        current = self._records.get(_key(record))
        if current is None:
            raise NotFoundError(record.kind.value, record.namespace, record.name)
        if (
            record.resource_version is not None
            and record.resource_version != current.resource_version
        ):
            raise ConflictError(
                record.kind.value,
                record.namespace,
                record.name,
                f"resource version {record.resource_version} is stale",
            )
        return self._put(record)
