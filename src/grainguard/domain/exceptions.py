"""Domain exceptions."""


class GrainGuardError(Exception):
    """Base exception for GrainGuard."""

    pass


class NotFound(GrainGuardError):
    """Requested entity does not exist or is soft-deleted."""

    def __init__(self, entity: str, identifier: object = None) -> None:
        self.entity = entity
        self.identifier = identifier
        message = f"{entity} not found"
        if identifier is not None:
            message += f": {identifier}"
        super().__init__(message)


class AlreadyExists(GrainGuardError):
    """Entity with the same identity already exists."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} already exists: {identifier}")


class DataIntegrityError(GrainGuardError):
    """Stored role hierarchy is inconsistent (missing parent or cycle)."""

    def __init__(self, role_id: object, message: str) -> None:
        self.role_id = role_id
        super().__init__(message)


class IncompatiblePermission(GrainGuardError):
    """Permission grain/securable item does not match the target role."""

    pass


class ValidationError(GrainGuardError):
    """Validation failed for input data.

    ``details`` maps a category label to the offending permission names.
    """

    def __init__(self, message: str, details: dict[str, list[str]] | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class TransientStorageError(GrainGuardError):
    """Storage call failed in a way that may succeed on retry."""

    pass


class StorageError(GrainGuardError):
    """Storage call failed after all retry attempts."""

    pass
