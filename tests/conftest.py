"""Pytest bootstrap for local source imports and shared workspace fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

from app import create_app  # noqa: E402
from settings import ViewerConfig  # noqa: E402
from visibility import VisibilityPolicy  # noqa: E402

CONFIG_NAMES = ("openclaw.json", "clawdbot.json")


def make_policy(critical_only: bool = False, prefixes=(), show_backups: bool = False) -> VisibilityPolicy:
    return VisibilityPolicy(
        critical_only=critical_only,
        critical_dir_prefixes=tuple(prefixes),
        critical_root_config_names=CONFIG_NAMES,
        show_config_backups=show_backups,
    )


def make_config(root: Path, **policy_kwargs) -> ViewerConfig:
    return ViewerConfig(root=str(root), policy=make_policy(**policy_kwargs))


def write_files(root: Path, files: dict) -> None:
    """Create ``files`` (relative path -> str or bytes) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with a doc tree plus directories that are always skipped."""
    root = tmp_path / "ws"
    write_files(root, {
        "docs/readme.md": "# Readme\n\nhello\n",
        "docs/img/logo.png": b"\x89PNG\r\n\x1a\nfake",
        ".git/config": "[core]\n",
        "node_modules/pkg/index.js": "module.exports = 1;\n",
    })
    return root


@pytest.fixture
def client_for():
    """Return a factory building a Flask test client for a root and policy."""
    def _client(root: Path, **policy_kwargs):
        app = create_app(make_config(root, **policy_kwargs))
        app.testing = True
        return app.test_client()
    return _client
