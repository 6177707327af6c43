class StoreError(Exception):
    """Base class for failures reported by a record store."""

    reason = "Unknown"

    def __init__(
        self,
        kind: str,
        namespace: str,
        name: str,
        message: str | None = None,
    ):
        self.kind = kind
        self.namespace = namespace
        self.name = name
        self.message = message or self.reason
        super().__init__(f"{kind} {namespace}/{name}: {self.message}")


class NotFoundError(StoreError):
    """The requested record does not exist."""

    reason = "NotFound"


class AlreadyExistsError(StoreError):
    """A record with the same kind, namespace and name already exists."""

    reason = "AlreadyExists"


class ConflictError(StoreError):
    """The record was modified since it was read."""

    reason = "Conflict"


class UnauthorizedError(StoreError):
    """The store rejected the caller's credentials."""

    reason = "Unauthorized"


class ForbiddenError(StoreError):
    """The caller is not allowed to perform the operation."""

    reason = "Forbidden"
