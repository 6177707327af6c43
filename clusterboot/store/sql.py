import logging
from typing import Optional

from sqlalchemy import JSON, URL, Column, UniqueConstraint
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel import Field, SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from clusterboot.store import Record, RecordKind
from clusterboot.store.errors import AlreadyExistsError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class StoredRecord(SQLModel, table=True):
    __tablename__ = "stored_record"  # pyright: ignore[reportAssignmentType]
    __table_args__ = (UniqueConstraint("kind", "namespace", "name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    kind: str = Field(index=True, description="Record kind (ConfigMap, Secret)")
    namespace: str = Field(index=True)
    name: str = Field(index=True)
    type: Optional[str] = Field(default=None)
    data: Optional[dict[str, str]] = Field(default=None, sa_column=Column(JSON))
    resource_version: int = Field(default=1)

    def to_record(self) -> Record:
        return Record(
            kind=RecordKind(self.kind),
            name=self.name,
            namespace=self.namespace,
            type=self.type,
            data=dict(self.data) if self.data is not None else None,
            resource_version=self.resource_version,
        )


class Database:
    def __init__(self, url: str | URL):
        self.engine = create_async_engine(url, pool_pre_ping=True)
        self.async_session = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init_db(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def close(self):
        await self.engine.dispose()


def _select(kind: RecordKind, namespace: str, name: str):
    return (
        select(StoredRecord)
        .where(StoredRecord.kind == kind.value)
        .where(StoredRecord.namespace == namespace)
        .where(StoredRecord.name == name)
        .limit(1)
    )


class SqlStore:
    """Record store backed by a SQL database through SQLModel."""

    def __init__(self, database: Database):
        self.database = database

    async def get(self, kind: RecordKind, namespace: str, name: str) -> Record:
        async with self.database.async_session() as session:
            result = await session.exec(_select(kind, namespace, name))
            row = result.first()

        if row is None:
            raise NotFoundError(kind.value, namespace, name)
        return row.to_record()

    async def create(self, record: Record) -> Record:
        row = StoredRecord(
            kind=record.kind.value,
            namespace=record.namespace,
            name=record.name,
            type=record.type,
            data=dict(record.data) if record.data is not None else None,
        )

        async with self.database.async_session() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise AlreadyExistsError(
                    record.kind.value, record.namespace, record.name
                ) from e
            await session.refresh(row)

        logger.debug(
            "Created %s %s/%s", record.kind.value, record.namespace, record.name
        )
        return row.to_record()

    async def update(self, record: Record) -> Record:
        async with self.database.async_session() as session:
            result = await session.exec(
                _select(record.kind, record.namespace, record.name)
            )
            row = result.first()

            if row is None:
                raise NotFoundError(record.kind.value, record.namespace, record.name)

            if (
                record.resource_version is not None
                and record.resource_version != row.resource_version
            ):
                raise ConflictError(
                    record.kind.value,
                    record.namespace,
                    record.name,
                    f"resource version {record.resource_version} is stale "
                    f"(current {row.resource_version})",
                )

            row.type = record.type
            row.data = dict(record.data) if record.data is not None else None
            row.resource_version += 1
            session.add(row)
            await session.commit()
            await session.refresh(row)

        logger.debug(
            "Updated %s %s/%s to version %d",
            record.kind.value,
            record.namespace,
            record.name,
            row.resource_version,
        )
        return row.to_record()
