"""Shared pytest fixtures for the petridish test suite."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from petridish.config.settings import get_settings


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create ``files`` (relative path -> content) under ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


def snapshot(root: Path) -> dict[str, str | bytes]:
    """Map every file/symlink under ``root`` to its content or link target."""
    result: dict[str, str | bytes] = {}
    if not root.exists():
        return result
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        for name in dirnames + filenames:
            path = current / name
            relative = path.relative_to(root).as_posix()
            if path.is_symlink():
                result[relative] = f"-> {os.readlink(path)}"
            elif path.is_file():
                result[relative] = path.read_bytes()
    return result


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.startswith("PETRIDISH_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """The end-to-end template: ``{{ project }}`` with a README and a source file."""
    root = tmp_path / "t"
    return write_tree(
        root,
        {
            "{{ project }}/README.md": "# {{ project }}\n",
            "{{ project }}/src/{{ name }}.rs": "// by {{ name }}\n",
        },
    )


@pytest.fixture
def context() -> dict[str, str]:
    return {"project": "demo", "name": "alice"}


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"
