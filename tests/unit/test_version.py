"""Unit coverage for the project version helper."""

from __future__ import annotations

import tomllib
from importlib import metadata
from pathlib import Path

import pytest

from naijatax.backend import version
from naijatax.backend.version import get_project_version, read_pyproject_version

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _expected_version() -> str:
    with PYPROJECT.open("rb") as handle:
        return tomllib.load(handle)["project"]["version"]


def test_get_project_version_prefers_package_metadata(monkeypatch) -> None:
    get_project_version.cache_clear()
    monkeypatch.setattr(metadata, "version", lambda package: "9.9.9")

    assert get_project_version() == "9.9.9"
    get_project_version.cache_clear()


def test_get_project_version_falls_back_to_pyproject(monkeypatch) -> None:
    get_project_version.cache_clear()

    def raise_package_not_found(_: str) -> str:
        raise metadata.PackageNotFoundError

    monkeypatch.setattr(metadata, "version", raise_package_not_found)

    assert get_project_version() == _expected_version()
    get_project_version.cache_clear()


def test_read_pyproject_version_requires_file(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError, match="Unable to locate"):
        read_pyproject_version(tmp_path / "missing.toml")


def test_read_pyproject_version_requires_version(tmp_path: Path) -> None:
    path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "naijatax"\n', encoding="utf-8")

    with pytest.raises(RuntimeError, match="version"):
        read_pyproject_version(path)


def test_pyproject_path_points_at_repository_root() -> None:
    assert version.PYPROJECT_PATH == PYPROJECT
