"""Custom pydantic-settings source for pathdoc configuration.

This module provides:

- LayeredYamlSettingsSource: A pydantic-settings source that loads
  configuration from layered YAML files and combines them with the leaf-path
  merge engine (pathdoc.merge).

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .pathdoc/config.yaml in project root
3. User config: ~/.config/pathdoc/config.yaml (or PATHDOC_CONFIG_DIR)
4. Built-in defaults: bundled config.yaml

Because layers are merged leaf by leaf, a user file that sets only
``store.codec`` keeps every other ``store`` key from the defaults.

Environment variables:
- PATHDOC_CONFIG_DIR: Override user config directory (default: ~/.config/pathdoc)
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import pathdoc.errors as errors
import pathdoc.merge as merge

_logger = _logging.getLogger(__name__)

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "PATHDOC_CONFIG_DIR"

PROJECT_CONFIG_DIR = ".pathdoc"
CONFIG_FILE_NAME = "config.yaml"


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads and merges layered YAML config files.

    Flow:
        1. Load each YAML file into a dict
        2. merge_into() overlays each layer on the one below
        3. Return the merged dict to pydantic-settings
        4. Pydantic validates everything (fail-fast on errors)

    Layers (lowest to highest precedence):
    1. Built-in defaults (src/pathdoc/config/defaults/config.yaml)
    2. User config (~/.config/pathdoc/config.yaml)
    3. Project config (.pathdoc/config.yaml)
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
        builtin_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Optional project root path for project-level config.
            user_config_path: Override path for user config file (for testing).
                If not provided, uses PATHDOC_CONFIG_DIR env var or default XDG path.
            builtin_config_path: Override path for builtin defaults (for testing).
                If not provided, uses the bundled defaults/config.yaml.
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._builtin_config_path = builtin_config_path
        # Layers actually loaded, highest precedence first
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._merged = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        """
        Load config files and merge them, lowest precedence first.

        Returns:
            Merged configuration as a plain dict.
        """
        # Layer 1: Built-in defaults (lowest precedence), required
        builtin_path = self._get_builtin_config_path()
        if not builtin_path.exists():
            raise errors.ConfigFileError(
                builtin_path,
                "built-in defaults not found (possible installation problem)",
            )
        merged = self._load_yaml_file(builtin_path)
        if not merged:
            raise errors.ConfigFileError(
                builtin_path,
                "built-in defaults file is empty (possible installation problem)",
            )
        layer_info: list[tuple[str, _pathlib.Path]] = [("built-in", builtin_path)]

        # Layer 2: User config, optional
        optional_layers = [("user", self._get_user_config_path())]

        # Layer 3: Project config, optional
        if self._project_root:
            optional_layers.append(("project", get_project_config_path(self._project_root)))

        for name, path in optional_layers:
            if not path.exists():
                continue
            content = self._load_yaml_file(path)
            if content:
                merged = merge.merge_into(merged, content)
                layer_info.append((name, path))
                _logger.debug("Merged %s config from %s", name, path)

        layer_info.reverse()
        self._loaded_layers = layer_info
        return merged

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """
        Get info about layers that were actually loaded.

        Returns:
            List of (layer_name, path) tuples, highest precedence first.
        """
        return list(self._loaded_layers)

    def get_layer_paths(self) -> list[tuple[str, _pathlib.Path, bool]]:
        """
        Get info about all config layers.

        Returns:
            List of (layer_name, path, exists) tuples in precedence order
            (highest first: project, user, builtin).
        """
        layers: list[tuple[str, _pathlib.Path, bool]] = []

        if self._project_root:
            project_path = get_project_config_path(self._project_root)
            layers.append(("project", project_path, project_path.exists()))

        user_path = self._get_user_config_path()
        layers.append(("user", user_path, user_path.exists()))

        builtin_path = self._get_builtin_config_path()
        layers.append(("built-in", builtin_path, builtin_path.exists()))

        return layers

    def _get_builtin_config_path(self) -> _pathlib.Path:
        """Get path to builtin defaults, respecting override."""
        if self._builtin_config_path is not None:
            return self._builtin_config_path
        return get_builtin_defaults_path()

    def _get_user_config_path(self) -> _pathlib.Path:
        """Get path to user config, respecting override and env var."""
        if self._user_config_path is not None:
            return self._user_config_path
        return get_user_config_path()

    def _load_yaml_file(
        self,
        path: _pathlib.Path,
    ) -> dict[str, _typing.Any] | None:
        """
        Load a YAML file and return its contents as a dict.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed YAML contents, or None if file is empty.

        Raises:
            ConfigFileError: If the file cannot be read, is malformed YAML,
                or contains non-dict content at the top level.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except PermissionError as e:
            raise errors.ConfigFileError(path, f"permission denied: {e}") from e
        except OSError as e:
            raise errors.ConfigFileError(path, f"cannot read file: {e}") from e

        try:
            parsed = _yaml.safe_load(content)
        except _yaml.YAMLError as e:
            raise errors.ConfigFileError(path, f"invalid YAML: {e}") from e

        if parsed is None:
            return None

        if not isinstance(parsed, dict):
            type_name = type(parsed).__name__
            raise errors.ConfigFileError(
                path,
                f"config must be a YAML mapping (dict), got {type_name}",
            )

        return parsed

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the merged layers.

        Returns:
            Tuple of (value, field_name, is_complex).
        """
        value = self._merged.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """
        Return merged config as a plain dict for Pydantic validation.

        Unknown keys are included so they end up in model_extra.
        """
        return dict(self._merged)


def get_builtin_defaults_path() -> _pathlib.Path:
    """Get the path to the built-in defaults config file."""
    return _pathlib.Path(__file__).parent / "defaults" / CONFIG_FILE_NAME


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects PATHDOC_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "pathdoc"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / CONFIG_FILE_NAME


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """Get the path to .pathdoc/config.yaml within a project."""
    return project_root / PROJECT_CONFIG_DIR / CONFIG_FILE_NAME
