"""JSON Schema validation for save-vault manifests.

This module validates the registry manifest, the per-entry snapshot
metadata and the per-snapshot contents manifest against bundled schemas.
"""

from functools import cache
from pathlib import Path
from typing import Any

import orjson
from jsonschema import Draft7Validator, ValidationError
from jsonschema.exceptions import best_match

from save_vault.logger import get_logger

logger = get_logger(__name__)

SCHEMA_DIR = Path(__file__).parent
REGISTRY_SCHEMA_PATH = SCHEMA_DIR / "registry.schema.json"
SNAPSHOT_METADATA_SCHEMA_PATH = SCHEMA_DIR / "snapshot_metadata.schema.json"
SNAPSHOT_CONTENTS_SCHEMA_PATH = SCHEMA_DIR / "snapshot_contents.schema.json"


class SchemaValidationError(Exception):
    """Raised when JSON schema validation fails."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        schema_type: str | None = None,
    ) -> None:
        """Initialize schema validation error.

        Args:
            message: Error message
            path: JSON path where error occurred
            schema_type: Type of schema being validated

        """
        self.path = path
        self.schema_type = schema_type
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with schema type prefix."""
        if self.schema_type:
            return f"[{self.schema_type}] {super().__str__()}"
        return super().__str__()


class ManifestValidator:
    """Validates on-disk JSON documents against bundled schemas."""

    def __init__(self) -> None:
        """Initialize validator with loaded schemas."""
        self._validators = {
            "registry": Draft7Validator(
                self._load_schema(REGISTRY_SCHEMA_PATH)
            ),
            "snapshot_metadata": Draft7Validator(
                self._load_schema(SNAPSHOT_METADATA_SCHEMA_PATH)
            ),
            "snapshot_contents": Draft7Validator(
                self._load_schema(SNAPSHOT_CONTENTS_SCHEMA_PATH)
            ),
        }

    @staticmethod
    def _load_schema(schema_path: Path) -> dict[str, Any]:
        """Load JSON schema from file.

        Raises:
            FileNotFoundError: If schema file doesn't exist
            ValueError: If schema JSON is invalid

        """
        if not schema_path.exists():
            msg = f"Schema file not found: {schema_path}"
            raise FileNotFoundError(msg)

        try:
            with schema_path.open("rb") as f:
                return orjson.loads(f.read())  # type: ignore[no-any-return]
        except orjson.JSONDecodeError as e:
            msg = f"Invalid JSON in schema file {schema_path}: {e}"
            raise ValueError(msg) from e

    @staticmethod
    def _format_validation_error(error: ValidationError) -> str:
        """Format validation error into a short user-facing message."""
        path = (
            ".".join(str(p) for p in error.absolute_path)
            if error.absolute_path
            else "root"
        )

        message = error.message
        if error.validator == "required":
            missing = (
                error.message.split("'")[1]
                if "'" in error.message
                else "unknown"
            )
            message = f"Missing required field: '{missing}'"
        elif error.validator == "type":
            actual = type(error.instance).__name__
            message = (
                f"Expected type '{error.validator_value}', got '{actual}'"
            )

        return f"{message} (at '{path}')"

    def validate(
        self, schema_type: str, document: Any, source: str | None = None
    ) -> None:
        """Validate a document against one of the bundled schemas.

        Args:
            schema_type: "registry", "snapshot_metadata" or
                "snapshot_contents"
            document: Decoded JSON document
            source: Optional file name for better error messages

        Raises:
            SchemaValidationError: If validation fails

        """
        validator = self._validators[schema_type]
        errors = list(validator.iter_errors(document))
        if not errors:
            logger.debug("%s validation passed: %s", schema_type, source)
            return

        best_error = best_match(errors)
        error_msg = self._format_validation_error(best_error)
        if source:
            error_msg = f"Invalid {source}: {error_msg}"
        path = (
            ".".join(str(p) for p in best_error.absolute_path)
            if best_error.absolute_path
            else None
        )
        raise SchemaValidationError(
            error_msg, path=path, schema_type=schema_type
        )


@cache
def get_validator() -> ManifestValidator:
    """Get the shared validator (schemas are loaded once)."""
    return ManifestValidator()


def validate_document(
    schema_type: str, document: Any, source: str | None = None
) -> None:
    """Validate a document with the shared validator.

    Raises:
        SchemaValidationError: If validation fails

    """
    get_validator().validate(schema_type, document, source)
