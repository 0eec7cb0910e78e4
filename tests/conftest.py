"""
Shared pytest fixtures for pathdoc tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import json as _json
import os as _os
import pathlib as _pathlib

import pytest as _pytest

import pathdoc.config as config
import pathdoc.store as store
import pathdoc.tree as tree

# Two departments of two people each
DEPARTMENTS_JSON = """
{
  "accounting": [
    {"firstName": "John", "lastName": "Doe", "age": 23},
    {"firstName": "Mary", "lastName": "Smith", "age": 32}
  ],
  "sales": [
    {"firstName": "Sally", "lastName": "Green", "age": 27},
    {"firstName": "Jim", "lastName": "Galley", "age": 41}
  ]
}
"""

# Same shape plus an empty department and a boolean per person
DEPARTMENTS_WITH_EMPTY_JSON = """
{
  "accounting": [
    {"firstName": "John", "lastName": "Doe", "age": 23, "isActive": true},
    {"firstName": "Mary", "lastName": "Smith", "age": 32, "isActive": false}
  ],
  "engineering": [],
  "sales": [
    {"firstName": "Sally", "lastName": "Green", "age": 27, "isActive": false},
    {"firstName": "Jim", "lastName": "Galley", "age": 41, "isActive": true}
  ]
}
"""


@_pytest.fixture
def departments() -> tree.Tree:
    """Tree built from DEPARTMENTS_JSON."""
    return tree.Tree.from_json(DEPARTMENTS_JSON)


@_pytest.fixture
def departments_with_empty() -> tree.Tree:
    """Tree built from DEPARTMENTS_WITH_EMPTY_JSON."""
    return tree.Tree.from_json(DEPARTMENTS_WITH_EMPTY_JSON)


@_pytest.fixture
def memory_blob() -> store.MemoryBlob:
    """Empty in-memory blob."""
    return store.MemoryBlob()


@_pytest.fixture
def memory_store(memory_blob: store.MemoryBlob) -> store.DocumentStore:
    """DocumentStore over an empty in-memory blob."""
    return store.DocumentStore(memory_blob)


@_pytest.fixture
def seeded_blob() -> store.MemoryBlob:
    """In-memory blob holding two user records."""
    collection = {
        "u1": {"name": "Sally", "age": 27, "tags": ["vip", "beta"]},
        "u2": {"name": "Jim", "age": 41, "owner": {"name": "Bob", "team": "core"}},
    }
    return store.MemoryBlob(_json.dumps(collection).encode("utf-8"))


@_pytest.fixture
def seeded_store(seeded_blob: store.MemoryBlob) -> store.DocumentStore:
    """DocumentStore over seeded_blob."""
    return store.DocumentStore(seeded_blob)


@_pytest.fixture
def isolated_config(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """
    Isolate configuration from the real user, project and environment.

    Clears PATHDOC_* variables, points the user config directory at an
    empty temp directory and runs the test from a temp project directory.

    Returns:
        The temp project directory (also the working directory).
    """
    for key in list(_os.environ):
        if key.startswith("PATHDOC_"):
            monkeypatch.delenv(key)

    user_dir = tmp_path / "user-config"
    user_dir.mkdir()
    monkeypatch.setenv("PATHDOC_CONFIG_DIR", str(user_dir))

    project = tmp_path / "project"
    project.mkdir()
    (project / ".pathdoc").mkdir()
    monkeypatch.chdir(project)
    return project


@_pytest.fixture
def clean_settings(isolated_config: _pathlib.Path) -> config.Settings:
    """
    Settings instance isolated from environment and .env file.

    This fixture ensures tests get predictable default settings.
    """
    return config.Settings.construct_without_dotenv()

