"""
Main CLI entry point for pathdoc.

Provides the command-line interface using Click. Records are read from and
written to the collection named by the settings (or --store) and printed
as JSON.
"""

import contextlib as _contextlib
import json as _json
import logging as _logging
import os as _os
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.syntax as _rich_syntax
import yaml as _yaml

import pathdoc
import pathdoc.config as config
import pathdoc.config.sources as config_sources
import pathdoc.errors as errors
import pathdoc.store as store
import pathdoc.tree as tree

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


@_contextlib.contextmanager
def _reporting_errors() -> _typing.Iterator[None]:
    """Turn library errors into a one-line CLI error (exit code 1)."""
    try:
        yield
    except errors.PathdocError as e:
        raise _click.ClickException(str(e)) from e


def _configure_logging(settings: config.Settings, verbose: bool) -> None:
    level = "DEBUG" if verbose else settings.logging.level
    _logging.basicConfig(
        level=getattr(_logging, level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=_sys.stderr,
    )


def _open_store(ctx: _click.Context) -> store.DocumentStore:
    settings: config.Settings = ctx.obj["settings"]
    return store.open_store(settings)


def _parse_json(text: str, param: str) -> _typing.Any:
    try:
        return _json.loads(text)
    except _json.JSONDecodeError as e:
        raise _click.BadParameter(f"not valid JSON: {e}", param_hint=param) from e


def _parse_value(text: str) -> _typing.Any:
    """Parse a JSON value, falling back to the raw string."""
    try:
        return _json.loads(text)
    except _json.JSONDecodeError:
        return text


def _echo_json(value: _typing.Any) -> None:
    _click.echo(_json.dumps(value, indent=2, ensure_ascii=False))


_LAYER_TITLES = {
    "project": "Project config",
    "user": "User config",
    "built-in": "Built-in defaults",
}


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(pathdoc.__version__, "-V", "--version", prog_name="pathdoc")
@_click.option(
    "--store",
    "store_path",
    type=_click.Path(dir_okay=False),
    default=None,
    help="Collection file (overrides backend.path)",
)
@_click.option("--delimiter", "-d", default=None, help="Path delimiter (overrides store.delimiter)")
@_click.option(
    "--codec",
    type=_click.Choice(["json", "yaml"]),
    default=None,
    help="Collection encoding (overrides store.codec)",
)
@_click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@_click.pass_context
def cli(
    ctx: _click.Context,
    store_path: str | None,
    delimiter: str | None,
    codec: str | None,
    verbose: bool,
) -> None:
    """
    pathdoc - path-addressed documents.

    \b
    Examples:
        pathdoc add u1 '{"name": "Sally", "age": 27}'
        pathdoc merge u1 '{"age": 28}'
        pathdoc set u1 owner.name Bob
        pathdoc get u1 --flat
        echo '{"a": {"b": 1}}' | pathdoc flatten
        pathdoc config show
    """
    try:
        settings = config.Settings()
    except (errors.ConfigFileError, _pydantic.ValidationError) as e:
        raise _click.ClickException(str(e)) from e

    try:
        if store_path:
            settings.backend.kind = "file"
            settings.backend.path = store_path
        if delimiter:
            settings.store.delimiter = delimiter
        if codec:
            settings.store.codec = codec  # type: ignore[assignment]
    except _pydantic.ValidationError as e:
        raise _click.BadParameter(str(e)) from e

    _configure_logging(settings, verbose)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Record commands
# =============================================================================


@cli.command(name="ls")
@_click.option("--json", "as_json", is_flag=True, help="Print the whole collection as JSON")
@_click.pass_context
def ls_cmd(ctx: _click.Context, as_json: bool) -> None:
    """List record IDs."""
    with _reporting_errors():
        collection = _open_store(ctx).list()
    if as_json:
        _echo_json(collection)
        return
    for record_id in collection:
        _click.echo(record_id)


@cli.command()
@_click.argument("record_id")
@_click.option("--flat", is_flag=True, help="Print the record's flattened paths")
@_click.pass_context
def get(ctx: _click.Context, record_id: str, flat: bool) -> None:
    """Print one record."""
    with _reporting_errors():
        doc_store = _open_store(ctx)
        record = doc_store.get(record_id)
    if flat:
        _echo_json(tree.flatten(record, doc_store.delimiter))
    else:
        _echo_json(record)


@cli.command()
@_click.argument("record_id")
@_click.argument("record_json")
@_click.pass_context
def add(ctx: _click.Context, record_id: str, record_json: str) -> None:
    """Add a new record from a JSON value."""
    record = _parse_json(record_json, "RECORD_JSON")
    with _reporting_errors():
        _, stored = _open_store(ctx).add(record_id, record)
    _echo_json(stored)


@cli.command()
@_click.argument("record_id")
@_click.argument("record_json")
@_click.option("--new-id", default=None, help="Store the record under this ID instead")
@_click.pass_context
def edit(ctx: _click.Context, record_id: str, record_json: str, new_id: str | None) -> None:
    """Replace a record wholesale."""
    record = _parse_json(record_json, "RECORD_JSON")
    with _reporting_errors():
        stored = _open_store(ctx).edit(record_id, record, new_id)
    _echo_json(stored)


@cli.command()
@_click.argument("record_id")
@_click.argument("delta_json")
@_click.option("--new-id", default=None, help="Store the merged record under this ID instead")
@_click.pass_context
def merge(ctx: _click.Context, record_id: str, delta_json: str, new_id: str | None) -> None:
    """Merge a JSON delta into a record by leaf path."""
    delta = _parse_json(delta_json, "DELTA_JSON")
    with _reporting_errors():
        merged = _open_store(ctx).merge_update(record_id, delta, new_id=new_id)
    _echo_json(merged)


@cli.command(name="set")
@_click.argument("record_id")
@_click.argument("path")
@_click.argument("value")
@_click.pass_context
def set_cmd(ctx: _click.Context, record_id: str, path: str, value: str) -> None:
    """Merge a single VALUE at PATH into a record.

    VALUE is parsed as JSON when it can be, otherwise stored as a string.
    """
    with _reporting_errors():
        merged = _open_store(ctx).merge_field(record_id, path, _parse_value(value))
    _echo_json(merged)


@cli.command()
@_click.argument("record_id")
@_click.pass_context
def delete(ctx: _click.Context, record_id: str) -> None:
    """Delete a record (absent IDs are ignored)."""
    with _reporting_errors():
        doc_store = _open_store(ctx)
        try:
            removed = doc_store.pop(record_id)
        except errors.KeyNotFoundError:
            _click.echo(f"No record {record_id!r}", err=True)
            return
    _echo_json(removed)


@cli.command()
@_click.argument("source", type=_click.File("r"), default="-")
@_click.pass_context
def flatten(ctx: _click.Context, source: _typing.TextIO) -> None:
    """Print the flat path view of a JSON document (default: stdin)."""
    settings: config.Settings = ctx.obj["settings"]
    data = _parse_json(source.read(), "SOURCE")
    _echo_json(tree.flatten(data, settings.store.delimiter))


# =============================================================================
# Config commands
# =============================================================================


@cli.group(name="config")
def config_cmd() -> None:
    """Configuration commands."""


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option("--section", type=str, default=None, help="Show specific section only")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.pass_context
def config_show(
    ctx: _click.Context,
    as_json: bool,
    section: str | None,
    use_color: bool | None,
) -> None:
    """Show effective configuration from all sources.

    \b
    Examples:
        pathdoc config show                  # All settings as YAML
        pathdoc config show --section store  # One section
        pathdoc config show --json           # As JSON
    """
    settings: config.Settings = ctx.obj["settings"]
    if settings.has_extra_fields():
        for key in settings.collect_all_extra_fields():
            _click.echo(f"Warning: unknown config key {key!r}", err=True)
    data = settings.to_dict()

    if section:
        if section not in data:
            raise _click.ClickException(f"Unknown section: {section}")
        data = {section: data[section]}

    if as_json:
        _echo_json(data)
        return

    color, force_color = _should_use_color(use_color)
    _print_yaml(_yaml.safe_dump(data, sort_keys=False), color=color, force_color=force_color)


def _should_use_color(cli_flag: bool | None) -> tuple[bool, bool]:
    """Decide whether to colorize output.

    Priority: --color/--no-color, PATHDOC_CONFIG_SHOW_COLOR, NO_COLOR, then
    whether stdout is a TTY.

    Returns:
        Tuple of (color_enabled, force_color).
    """
    if cli_flag is not None:
        return (cli_flag, cli_flag)

    env_color = _os.environ.get("PATHDOC_CONFIG_SHOW_COLOR")
    if env_color is not None:
        enabled = env_color.lower() in ("1", "true", "yes", "on")
        return (enabled, enabled)

    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)

    return (_sys.stdout.isatty(), False)


def _print_yaml(yaml_text: str, *, color: bool = True, force_color: bool = False) -> None:
    """Print YAML text, optionally with syntax highlighting."""
    if not color:
        _click.echo(yaml_text, nl=False)
        return

    console = _rich_console.Console(
        force_terminal=force_color,
        no_color=False if force_color else None,
        color_system="truecolor" if force_color else "auto",
    )
    syntax = _rich_syntax.Syntax(
        yaml_text,
        "yaml",
        theme="monokai",
        background_color="default",
    )
    console.print(syntax)


@config_cmd.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Show all paths even if not found")
@_click.pass_context
def config_path(ctx: _click.Context, show_all: bool) -> None:
    """Show configuration file paths and their status.

    Layers are listed highest precedence first. An existing file that is
    empty is shown but marked as not loaded.
    """
    settings: config.Settings = ctx.obj["settings"]
    with _reporting_errors():
        source = config_sources.LayeredYamlSettingsSource(config.Settings, settings.project_root)
    loaded = {name for name, _ in source.get_loaded_layers()}

    for name, path, exists in source.get_layer_paths():
        if not (exists or show_all):
            continue
        status = "✓" if exists else "✗"
        note = " (empty, not loaded)" if exists and name not in loaded else ""
        _click.echo(f"{status} {_LAYER_TITLES[name]}: {path}{note}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="pathdoc")


if __name__ == "__main__":
    main()
