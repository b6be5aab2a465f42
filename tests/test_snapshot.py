from __future__ import annotations

import json
from pathlib import Path

from conftest import make_config
from snapshot import count_entries, write_snapshot


def test_write_snapshot(workspace: Path, tmp_path: Path) -> None:
    out = tmp_path / "tree.json"
    tree = write_snapshot(make_config(workspace), str(out))
    assert json.loads(out.read_text(encoding="utf-8")) == tree
    assert count_entries(tree) == 2


def test_snapshot_respects_policy(workspace: Path, tmp_path: Path) -> None:
    out = tmp_path / "tree.json"
    tree = write_snapshot(make_config(workspace, critical_only=True, prefixes=("docs/img",)), str(out))
    assert count_entries(tree) == 1
