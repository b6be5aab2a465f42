"""Relative path normalization and the critical-only visibility policy.

A single ``VisibilityPolicy`` covers both modes: with ``critical_only`` off
everything is visible, with it on only the allow-listed directory prefixes
(and the root config files) are.
"""

from __future__ import annotations

from dataclasses import dataclass


def normalize_rel_path(rel_path) -> str:
    """Canonical "/"-separated form with no leading ``./`` or ``/`` and no trailing ``/``.

    ``None`` and ``""`` both normalize to ``""``, which stands for the root.
    """
    p = str(rel_path or "").replace("\\", "/")
    if p.startswith("./"):
        p = p[2:]
    elif p.startswith("/"):
        p = p[1:]
    return p.rstrip("/")


def is_same_or_descendant(path: str, prefix: str) -> bool:
    """True if ``path`` is ``prefix`` or lies below it (whole segments only)."""
    return path == prefix or path.startswith(f"{prefix}/")


def is_ancestor(path: str, prefix: str) -> bool:
    """True if ``path`` is ``prefix`` or one of the directories above it."""
    return prefix == path or prefix.startswith(f"{path}/")


def root_config_kind(filename, config_names) -> tuple[bool, bool]:
    """Return ``(is_primary, is_backup)`` for a root-level config file name."""
    lower = str(filename or "").lower()
    for base in config_names:
        base = base.lower()
        if lower == base:
            return True, False
        if lower.startswith(f"{base}."):
            return False, True
    return False, False


def is_backup_config(filename, config_names) -> bool:
    return root_config_kind(filename, config_names)[1]


@dataclass(frozen=True)
class VisibilityPolicy:
    critical_only: bool = False
    critical_dir_prefixes: tuple[str, ...] = ()
    critical_root_config_names: tuple[str, ...] = ()
    show_config_backups: bool = False

    def __post_init__(self):
        # Prefixes are compared against normalized paths, so store them that way.
        object.__setattr__(
            self,
            "critical_dir_prefixes",
            tuple(p for p in (normalize_rel_path(x) for x in self.critical_dir_prefixes) if p),
        )
        object.__setattr__(self, "critical_root_config_names", tuple(self.critical_root_config_names))

    def is_visible(self, rel_path, is_dir: bool, filename) -> bool:
        if not self.critical_only:
            return True

        p = normalize_rel_path(rel_path)
        if not p:
            return True

        if is_dir:
            # Ancestors stay visible so deeper critical content can be reached.
            return any(
                is_ancestor(p, prefix) or is_same_or_descendant(p, prefix)
                for prefix in self.critical_dir_prefixes
            )

        if "/" not in p:
            is_primary, is_backup = root_config_kind(filename, self.critical_root_config_names)
            if is_primary:
                return True
            if is_backup:
                return self.show_config_backups

        return any(is_same_or_descendant(p, prefix) for prefix in self.critical_dir_prefixes)
