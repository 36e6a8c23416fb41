"""Exception classes for save-vault operations."""


class SaveVaultError(Exception):
    """Base exception for save-vault operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the entry or snapshot that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class NotFoundError(SaveVaultError):
    """Raised when an entry (or an auxiliary path of it) is unknown."""

    error_prefix = "Not found"


class SnapshotNotFoundError(SaveVaultError):
    """Raised when a snapshot identifier does not exist for an entry."""

    error_prefix = "Snapshot not found"


class DuplicateNameError(SaveVaultError):
    """Raised when an entry with the derived name already exists."""

    error_prefix = "Duplicate name"


class DuplicateSnapshotIdError(SaveVaultError):
    """Raised when a snapshot identifier is already taken for an entry."""

    error_prefix = "Duplicate snapshot id"


class InvalidPathError(SaveVaultError):
    """Raised when a source path is missing or not usable."""

    error_prefix = "Invalid path"


class InvalidSnapshotIdError(SaveVaultError):
    """Raised when a snapshot identifier is not well-formed."""

    error_prefix = "Invalid snapshot id"


class ProtectedSnapshotError(SaveVaultError):
    """Raised when deleting a snapshot inside the retention window."""

    error_prefix = "Protected snapshot"


class IOFailureError(SaveVaultError):
    """Raised when copying or writing fails during backup or restore."""

    error_prefix = "I/O failure"


class ManifestError(SaveVaultError):
    """Raised when an on-disk manifest cannot be read or is invalid."""

    error_prefix = "Manifest error"


class LockError(SaveVaultError):
    """Raised when the store lock cannot be acquired."""

    error_prefix = "Lock error"

    def __init__(
        self,
        message: str,
        target: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize lock error.

        Args:
            message: Error message describing the failure.
            target: Optional lock path.
            cause: Underlying exception, if any.

        """
        super().__init__(message, target)
        self.cause = cause
