import base64
import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from clusterboot.store import Record, RecordKind, StoreClient
from clusterboot.store.errors import NotFoundError

logger = logging.getLogger(__name__)

SYSTEM_NAMESPACE = "kube-system"
SECRET_TYPE = "bootstrap.kubernetes.io/token"
SECRET_PREFIX = "bootstrap-token-"

TOKEN_ID_KEY = "token-id"
TOKEN_SECRET_KEY = "token-secret"
EXPIRATION_KEY = "expiration"
DESCRIPTION_KEY = "description"
EXTRA_GROUPS_KEY = "auth-extra-groups"
USAGE_PREFIX = "usage-"
USAGE_MARKER = b"true"

TOKEN_ID_LENGTH = 6
TOKEN_SECRET_LENGTH = 16
TOKEN_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
TOKEN_PATTERN = re.compile(r"^([a-z0-9]{6})\.([a-z0-9]{16})$")

# Expirations past the calendar range are clamped to its end
MAX_EXPIRATION = datetime.max.replace(tzinfo=timezone.utc)


class InvalidTokenError(ValueError):
    """Raised when a token string does not match the "<id>.<secret>" format."""


def format_expiration(when: datetime) -> str:
    """Render a timestamp as RFC3339 in UTC with second precision."""
    return when.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def encode_token_secret_data(
    token_id: str,
    secret: str,
    ttl: Optional[timedelta],
    usages: Iterable[str],
    description: str,
    *,
    groups: Iterable[str] = (),
) -> dict[str, bytes]:
    """
    Encode a bootstrap token into the field layout of its secret record.

    The id and secret are copied byte for byte. `expiration` is only present
    when `ttl` is positive, and is computed from the current wall-clock time;
    a ttl reaching past year 9999 is clamped to the end of that year.
    No validation happens here.
    """
    data: dict[str, bytes] = {
        TOKEN_ID_KEY: token_id.encode(),
        TOKEN_SECRET_KEY: secret.encode(),
    }

    if ttl is not None and ttl > timedelta(0):
        try:
            expiration = datetime.now(timezone.utc) + ttl
        except OverflowError:
            expiration = MAX_EXPIRATION
        data[EXPIRATION_KEY] = format_expiration(expiration).encode()

    for usage in usages:
        data[USAGE_PREFIX + usage] = USAGE_MARKER

    if description:
        data[DESCRIPTION_KEY] = description.encode()

    groups = list(groups)
    if groups:
        data[EXTRA_GROUPS_KEY] = ",".join(groups).encode()

    return data


class BootstrapToken(BaseModel):
    id: str = Field(description="Public token identifier")
    secret: str = Field(description="Secret part of the token")
    ttl: timedelta = Field(
        default=timedelta(0), description="Time to live, zero for no expiration"
    )
    usages: list[str] = Field(
        default_factory=list, description="Allowed usages, e.g. bootstrap-signing"
    )
    description: str = Field(default="", description="Free-text annotation")
    groups: list[str] = Field(
        default_factory=list, description="Extra groups the token authenticates as"
    )

    @property
    def token_string(self) -> str:
        return f"{self.id}.{self.secret}"

    @property
    def secret_name(self) -> str:
        return f"{SECRET_PREFIX}{self.id}"

    def encode(self) -> dict[str, bytes]:
        return encode_token_secret_data(
            self.id,
            self.secret,
            self.ttl,
            self.usages,
            self.description,
            groups=self.groups,
        )


def _random_string(length: int) -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def generate_token(**kwargs) -> BootstrapToken:
    """Generate a token with a random id and secret. Extra fields pass through."""
    return BootstrapToken(
        id=_random_string(TOKEN_ID_LENGTH),
        secret=_random_string(TOKEN_SECRET_LENGTH),
        **kwargs,
    )


def parse_token(value: str, **kwargs) -> BootstrapToken:
    """Parse an "<id>.<secret>" token string."""
    match = TOKEN_PATTERN.match(value)
    if match is None:
        raise InvalidTokenError(
            f"token {value!r} does not match {TOKEN_PATTERN.pattern}"
        )
    return BootstrapToken(id=match.group(1), secret=match.group(2), **kwargs)


def token_secret_record(token: BootstrapToken) -> Record:
    """Build the secret record for a token, with base64 encoded values."""
    return Record(
        kind=RecordKind.SECRET,
        name=token.secret_name,
        namespace=SYSTEM_NAMESPACE,
        type=SECRET_TYPE,
        data={
            key: base64.b64encode(value).decode("ascii")
            for key, value in token.encode().items()
        },
    )


def decode_secret_data(record: Record) -> dict[str, bytes]:
    """Decode the base64 values of a secret record back to raw bytes."""
    return {key: base64.b64decode(value) for key, value in (record.data or {}).items()}


async def update_or_create_token(store: StoreClient, token: BootstrapToken) -> Record:
    """
    Persist a bootstrap token, replacing an existing secret with the same id.

    Errors other than NotFoundError on the initial lookup are raised as-is.
    """
    desired = token_secret_record(token)

    try:
        existing = await store.get(RecordKind.SECRET, desired.namespace, desired.name)
    except NotFoundError:
        existing = None

    if existing is None:
        logger.info("Creating bootstrap token %s", token.id)
        return await store.create(desired)

    logger.info("Updating bootstrap token %s", token.id)
    updated = existing.model_copy(update={"type": desired.type, "data": desired.data})
    return await store.update(updated)
