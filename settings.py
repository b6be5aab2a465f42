"""Load viewer configuration from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from datetime import datetime

from dotenv import load_dotenv

from visibility import VisibilityPolicy

# Curated paths that are operationally important.
DEFAULT_CRITICAL_DIR_PREFIXES = (
    "workspace",
    "hooks",
    "cron",
    "subagents",
    "logs",
    "identity",
    "devices",
    "canvas",
    "agents/main/agent",
    "agents/main/qmd",
    "agents/main/sessions",
)
DEFAULT_CRITICAL_ROOT_CONFIG_NAMES = ("openclaw.json", "clawdbot.json")
DEFAULT_PORT = 3500


def log(msg, level="INFO"):
    """Timestamped log line; DEBUG only when VIEWER_DEBUG is on"""
    if level == "DEBUG" and not _env_flag("VIEWER_DEBUG"):
        return
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] [{level}] {msg}", flush=True)


def _env_flag(name: str, default: str = "false") -> bool:
    return str(os.getenv(name, default)).strip().lower() == "true"


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class ViewerConfig:
    root: str
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    app_name: str = "Workspace Viewer"
    policy: VisibilityPolicy = field(default_factory=VisibilityPolicy)

    @property
    def critical_only(self) -> bool:
        return self.policy.critical_only

    @classmethod
    def from_env(cls) -> "ViewerConfig":
        """Build the process-wide config. Read once at startup."""
        load_dotenv()

        root = os.getenv("WORKSPACE_ROOT") or os.getcwd()
        try:
            port = int(os.getenv("PORT", str(DEFAULT_PORT)))
        except ValueError as e:
            raise ValueError(f"PORT must be an integer: {e}") from e

        policy = VisibilityPolicy(
            critical_only=_env_flag("CRITICAL_ONLY"),
            critical_dir_prefixes=_env_list(
                "CRITICAL_DIR_PREFIXES", DEFAULT_CRITICAL_DIR_PREFIXES
            ),
            critical_root_config_names=_env_list(
                "CRITICAL_ROOT_CONFIG_NAMES", DEFAULT_CRITICAL_ROOT_CONFIG_NAMES
            ),
            show_config_backups=_env_flag("SHOW_CONFIG_BACKUPS"),
        )
        return cls(
            root=os.path.abspath(root),
            port=port,
            host=os.getenv("HOST", "0.0.0.0"),
            app_name=os.getenv("APP_NAME", "Workspace Viewer"),
            policy=policy,
        )

    def with_overrides(self, root: str | None = None, port: int | None = None) -> "ViewerConfig":
        changes = {}
        if root:
            changes["root"] = os.path.abspath(root)
        if port is not None:
            changes["port"] = port
        return replace(self, **changes)
