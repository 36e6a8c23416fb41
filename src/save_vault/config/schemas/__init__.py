"""JSON schemas for save-vault manifests."""

from save_vault.config.schemas.validator import (
    ManifestValidator,
    SchemaValidationError,
    validate_document,
)

__all__ = ["ManifestValidator", "SchemaValidationError", "validate_document"]
