#!/usr/bin/env python3
import json
import sys

from settings import ViewerConfig, log
from walker import build_tree

TREE_DATA = "tree.json"


def count_entries(tree):
    """Number of files in a pruned tree"""
    total = 0
    for entry in tree:
        if entry["type"] == "dir":
            total += count_entries(entry["children"])
        else:
            total += 1
    return total


def write_snapshot(config: ViewerConfig, outfile: str = TREE_DATA):
    """Build the pruned tree for ``config`` and dump it to ``outfile`` as JSON"""
    log(f"Scanning '{config.root}'...")
    tree = build_tree(config.root, config.root, config.policy)

    with open(outfile, "w", encoding="utf-8") as f:
        json.dump(tree, f, indent=2, ensure_ascii=False)
    log(f"Wrote file tree → {outfile} ({count_entries(tree)} files)")
    return tree


def main():
    outfile = sys.argv[1] if len(sys.argv) > 1 else TREE_DATA

    try:
        write_snapshot(ViewerConfig.from_env(), outfile)
    except OSError as e:
        log(f"Failed to write {outfile}: {e}", "ERROR")
        sys.exit(1)


if __name__ == "__main__":
    main()
