"""Tree listing and filename search over the workspace root."""

from __future__ import annotations

import os
from itertools import islice

from classify import classify
from settings import log
from visibility import VisibilityPolicy

SEARCH_LIMIT = 30
EXCLUDED_NAMES = {"node_modules"}


def should_exclude(name: str, is_dir: bool) -> bool:
    """node_modules and hidden directories are never walked, whatever the policy"""
    if name in EXCLUDED_NAMES:
        return True
    return is_dir and name.startswith(".")


def sort_key(entry):
    """Directories before files, then by name"""
    return (0 if entry[1] else 1, entry[0])


def list_entries(directory):
    """Return sorted ``(name, is_dir)`` pairs for one directory level.

    Symlinks are not followed when deciding whether an entry is a directory.
    OSError propagates to the caller.
    """
    with os.scandir(directory) as it:
        entries = [(e.name, e.is_dir(follow_symlinks=False)) for e in it]
    entries = [e for e in entries if not should_exclude(*e)]
    entries.sort(key=sort_key)
    return entries


def rel_posix(path, root) -> str:
    return os.path.relpath(path, root).replace(os.sep, "/")


def build_tree(directory, root, policy: VisibilityPolicy):
    """Build the pruned directory tree of visible, supported files.

    Directories are only included when something below them survives, so an
    ancestor of a critical prefix shows up only if that prefix has content.
    """
    tree = []
    config_names = policy.critical_root_config_names

    for name, is_dir in list_entries(directory):
        path = os.path.join(directory, name)
        rel_path = rel_posix(path, root)

        if not policy.is_visible(rel_path, is_dir, name):
            log(f"Hidden by policy: {rel_path}", "DEBUG")
            continue

        if is_dir:
            children = build_tree(path, root, policy)
            if children:
                tree.append({
                    "name": name,
                    "path": rel_path,
                    "type": "dir",
                    "children": children,
                })
            continue

        category = classify(name, config_names)
        if category is not None:
            tree.append({
                "name": name,
                "path": rel_path,
                "type": "file",
                "category": category,
            })

    return tree


def iter_matches(directory, root, query: str, policy: VisibilityPolicy):
    """Lazily yield ``{path, category}`` for visible files whose path contains ``query``."""
    config_names = policy.critical_root_config_names

    for name, is_dir in list_entries(directory):
        path = os.path.join(directory, name)
        rel_path = rel_posix(path, root)

        if not policy.is_visible(rel_path, is_dir, name):
            continue

        if is_dir:
            yield from iter_matches(path, root, query, policy)
            continue

        category = classify(name, config_names)
        if category is not None and query in rel_path.lower():
            yield {"path": rel_path, "category": category}


def search(root, query, policy: VisibilityPolicy, limit: int = SEARCH_LIMIT):
    """Case-insensitive substring search over relative file paths.

    Returns at most ``limit`` results in traversal order. An empty query
    returns ``[]`` without reading the filesystem.
    """
    query = str(query or "").lower().strip()
    if not query:
        return []
    return list(islice(iter_matches(root, root, query, policy), limit))
