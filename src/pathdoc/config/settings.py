"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with PATHDOC_ prefix
3. .env file (only if PATHDOC_ENV_FILE names one)
4. Layered YAML config files merged by leaf path:
   - Project config: .pathdoc/config.yaml (highest)
   - User config: ~/.config/pathdoc/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Nested config uses double underscore delimiter:
  PATHDOC_STORE__CODEC=yaml
  PATHDOC_BACKEND__VERIFY_WRITES=true
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import pathdoc.config.sources as sources
import pathdoc.config.types as types


def _get_env_file() -> str | None:
    """Return PATHDOC_ENV_FILE if it names an existing file, else None."""
    if env_file := _os.environ.get("PATHDOC_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Find the project root directory.

    Walks up from start_path looking for a .pathdoc directory, then for a
    .git directory. Falls back to start_path itself.

    Args:
        start_path: Starting path for search. Defaults to cwd.
    """
    start = (start_path or _pathlib.Path.cwd()).resolve()
    for marker in (sources.PROJECT_CONFIG_DIR, ".git"):
        for current in (start, *start.parents):
            if (current / marker).is_dir():
                return current
    return start


class Settings(_pydantic_settings.BaseSettings):
    """
    pathdoc configuration settings.

    All settings can be overridden via environment variables with PATHDOC_ prefix.
    For nested config, use double underscore: PATHDOC_STORE__DELIMITER=/

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (PATHDOC_*)
    3. .env file
    4. Project config (.pathdoc/config.yaml)
    5. User config (~/.config/pathdoc/config.yaml)
    6. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="PATHDOC_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # PATHDOC_STORE__CODEC
        extra="allow",  # Preserve unknown fields for config auditing
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (PATHDOC_* env vars)
        3. dotenv_settings (.env file)
        4. yaml_settings (layered config.yaml files)
        5. (defaults via Field definitions), lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, find_project_root()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # Config version (for future migrations)
    # =========================================================================

    version: int = _pydantic.Field(default=1, description="Config schema version")

    # =========================================================================
    # Nested config sections
    # =========================================================================

    store: types.StoreConfig = _pydantic.Field(default_factory=types.StoreConfig)
    """Record addressing and encoding."""

    backend: types.BackendConfig = _pydantic.Field(default_factory=types.BackendConfig)
    """Where the collection is kept."""

    table: types.TableConfig = _pydantic.Field(default_factory=types.TableConfig)
    """Column-oriented projections."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Log level of the command-line tool."""

    # =========================================================================
    # Derived paths
    # =========================================================================

    @property
    def project_root(self) -> _pathlib.Path:
        """Directory whose .pathdoc/config.yaml is the project layer."""
        return find_project_root()

    # =========================================================================
    # Introspection (for config auditing)
    # =========================================================================

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Get unknown fields at the top level of Settings."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Recursively collect all extra fields from Settings and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"store.delimter": "/", "backend.kidn": "memory"}
        """
        result: dict[str, _typing.Any] = dict(self.get_extra_fields())

        for field_name in ["store", "backend", "table", "logging"]:
            nested = getattr(self, field_name, None)
            if isinstance(nested, types.ConfigBase):
                result.update(nested.collect_all_extra_fields(prefix=field_name))

        return result

    def has_extra_fields(self) -> bool:
        """Check if there are any unknown fields anywhere in the config."""
        return bool(self.collect_all_extra_fields())

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert settings to a plain dict of the known sections (for display)."""
        return self.model_dump(include={"version", "store", "backend", "table", "logging"})
