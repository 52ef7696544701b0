"""Application runtime configuration and its defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Dict, List

from .hooks import HookCatalog

ROOT_MARKER = "pyproject.toml"


@dataclass
class ProviderConfig:
    """How to start a provider wrapper command."""

    id: str
    command: str
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    startup_timeout: timedelta = timedelta(0)


@dataclass
class Config:
    """The application runtime configuration."""

    providers: Dict[str, ProviderConfig] = field(default_factory=dict)
    session_persistence_enabled: bool = False
    session_db_path: str = ""
    session_persistence_warning: str = ""
    builtin_hooks_dir: str = ""
    builtin_skills_dir: str = ""
    builtin_hooks: HookCatalog = field(default_factory=HookCatalog)
    builtin_hooks_load_error: str = ""


def default_config() -> Config:
    """Return the in-memory default configuration."""
    root = resolve_builtin_assets_root()
    timeout = timedelta(seconds=10)
    return Config(
        providers={
            "codex": ProviderConfig(id="codex", command="codex", startup_timeout=timeout),
            "cursor": ProviderConfig(
                id="cursor", command="open-pilot-cursor-wrapper", startup_timeout=timeout
            ),
        },
        session_persistence_enabled=True,
        session_db_path="",
        builtin_hooks_dir=os.path.join(root, "hooks", "builtin"),
        builtin_skills_dir=os.path.join(root, "skills", "builtin"),
    )


def resolve_builtin_assets_root() -> str:
    """Find the project root holding the built-in assets."""
    here = os.path.dirname(os.path.abspath(__file__))
    return choose_builtin_assets_root(resolve_builtin_assets_root_from(here), os.getcwd)


def choose_builtin_assets_root(caller_root: str, getwd: Callable[[], str]) -> str:
    """Prefer ``caller_root`` if it is a project root, else search up from the working directory."""
    if _has_root_marker(caller_root):
        return os.path.normpath(caller_root)
    try:
        wd = getwd()
    except OSError:
        return "."
    return resolve_builtin_assets_root_from(wd)


def _has_root_marker(root: str) -> bool:
    root = root.strip()
    if not root:
        return False
    return os.path.isfile(os.path.join(os.path.normpath(root), ROOT_MARKER))


def _parent(path: str) -> str:
    return os.path.dirname(path) or "."


def resolve_builtin_assets_root_from(start: str) -> str:
    """Walk up from ``start`` to the nearest directory with a root marker; fall back to ``start``."""
    start = start.strip()
    if not start:
        return "."
    current = os.path.normpath(start)
    while True:
        if os.path.isfile(os.path.join(current, ROOT_MARKER)):
            return current
        parent = _parent(current)
        if parent == current:
            return os.path.normpath(start)
        current = parent