"""Configuration type definitions for pathdoc settings.

This module defines the Pydantic models used to represent configuration
sections nested within the main Settings class:

- StoreConfig: delimiter, codec, indent
- BackendConfig: kind, path, verify_writes, create_missing
- TableConfig: delimiter for column-oriented projections
- LoggingConfig: level

Design decision: all types use `extra="allow"` so unknown fields are
preserved rather than silently dropped. Use `get_extra_fields()` to audit a
config for typos.
"""

import typing as _typing

import pydantic as _pydantic

import pathdoc.constants as constants

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    All config types use `extra="allow"` so unknown fields are preserved
    rather than silently dropped. Assignments are validated too, so
    command-line overrides go through the same checks as config files.
    """

    model_config = _pydantic.ConfigDict(extra="allow", validate_assignment=True)

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self, prefix: str = "") -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"store.delimter": "/"}
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


def _check_delimiter(value: str) -> str:
    if not value:
        raise ValueError("delimiter must not be empty")
    if "[" in value or "]" in value:
        raise ValueError("delimiter must not contain brackets")
    return value


# =============================================================================
# Store Settings
# =============================================================================


class StoreConfig(ConfigBase):
    """
    How records are addressed and encoded.

    YAML section: store.*
    """

    delimiter: str = constants.DEFAULT_DELIMITER
    """Path delimiter used by merge_update when none is given."""

    codec: _typing.Literal["json", "yaml"] = constants.DEFAULT_CODEC
    """Encoding of the stored collection."""

    indent: int = _pydantic.Field(default=constants.DEFAULT_INDENT, ge=0, le=16)
    """Indentation for the encoded collection."""

    @_pydantic.field_validator("delimiter")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        return _check_delimiter(value)


class BackendConfig(ConfigBase):
    """
    Where the collection blob lives.

    YAML section: backend.*
    """

    kind: _typing.Literal["file", "memory"] = "file"
    """Blob backend: a local file, or in-process memory."""

    path: str = constants.DEFAULT_STORE_FILE
    """Collection file for the file backend (relative to the working directory)."""

    verify_writes: bool = False
    """Reject saves if the collection changed since it was loaded."""

    create_missing: bool = True
    """Treat a missing collection file as empty instead of failing."""


class TableConfig(ConfigBase):
    """
    Column-oriented projections.

    YAML section: table.*
    """

    delimiter: str = constants.TABLE_DELIMITER

    @_pydantic.field_validator("delimiter")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        return _check_delimiter(value)


class LoggingConfig(ConfigBase):
    """
    Log output of the command-line tool.

    YAML section: logging.*
    """

    level: _typing.Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @_pydantic.field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: _typing.Any) -> _typing.Any:
        return value.upper() if isinstance(value, str) else value
