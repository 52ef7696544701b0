"""Built-in hook definitions: a small YAML-like file format, validation and catalog lookup."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field, replace
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, List, Optional, Union

DEFAULT_HOOK_TIMEOUT = timedelta(seconds=30)

_MAX_DURATION_NS = 2**63 - 1
_UNIT_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_BLOCK_KEYS = ("triggers", "execute", "env")


class HookError(ValueError):
    """Raised when hook files cannot be read, parsed or validated."""


class HookTrigger(str, Enum):
    """Events that can start a hook."""

    SESSION_STARTED = "session.started"
    REPO_SELECTED = "repo.selected"
    PROVIDER_CODEX_SELECTED = "provider.codex.selected"
    DEVELOPMENT_WORK_COMPLETE = "development.work.complete"


Trigger = Union[HookTrigger, str]


@dataclass
class HookDefinition:
    """One hook as declared in a hook file."""

    version: int = 0
    id: str = ""
    description: str = ""
    triggers: List[Trigger] = field(default_factory=list)
    execute: List[str] = field(default_factory=list)
    timeout: timedelta = timedelta(0)
    env: Optional[Dict[str, str]] = None
    source_path: str = ""


@dataclass
class HookCatalog:
    """An ordered collection of hook definitions."""

    hooks: List[HookDefinition] = field(default_factory=list)

    def hooks_for(self, trigger: Trigger) -> List[HookDefinition]:
        """Return the hooks that fire on ``trigger``, in catalog order."""
        return [hook for hook in self.hooks if trigger in hook.triggers]


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _as_trigger(text: str) -> Trigger:
    try:
        return HookTrigger(text)
    except ValueError:
        return text


def _extension(name: str) -> str:
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``45s``, ``1h30m`` or ``1.5s``."""
    s = text
    sign = 1
    if s and s[0] in "+-":
        if s[0] == "-":
            sign = -1
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {_quote(text)}")

    total = Decimal(0)
    pos = 0
    while pos < len(s):
        match = _DURATION_COMPONENT.match(s, pos)
        if match is None:
            raise ValueError(f"invalid duration {_quote(text)}")
        try:
            total += Decimal(match.group(1)) * _UNIT_NS[match.group(2)]
        except InvalidOperation as exc:
            raise ValueError(f"invalid duration {_quote(text)}") from exc
        pos = match.end()

    nanoseconds = int(total)
    if nanoseconds > _MAX_DURATION_NS:
        raise ValueError(f"invalid duration {_quote(text)}")
    return timedelta(microseconds=sign * (nanoseconds // 1000))


def _unquote_scalar(text: str) -> str:
    s = text.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in "\"'":
        return s[1:-1]
    return s


def _parse_top_level_line(line: str) -> tuple[str, str]:
    key, sep, value = line.partition(":")
    if not sep:
        raise HookError("expected key: value")
    key = key.strip()
    if not key:
        raise HookError("empty key")
    return key, value.strip()


def _parse_list_item(line: str) -> str:
    if not line.startswith("- "):
        raise HookError("expected list item")
    return line[2:].strip()


def _parse_map_item(line: str) -> tuple[str, str]:
    key, sep, value = line.partition(":")
    if not sep:
        raise HookError("expected map item key: value")
    key = key.strip()
    if not key:
        raise HookError("empty map key")
    return key, value.strip()


def parse_hook_yaml(raw: str) -> HookDefinition:
    """Parse the restricted YAML subset used by hook files."""
    version = 0
    hook_id = ""
    description = ""
    timeout = timedelta(0)
    triggers: List[Trigger] = []
    execute: List[str] = []
    env: Dict[str, str] = {}
    section = ""

    for line_no, line in enumerate(raw.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        if "\t" in line:
            raise HookError(f"line {line_no}: tabs are not supported")

        indent = len(line) - len(line.lstrip(" "))
        trimmed = line.strip()
        if trimmed.startswith("#"):
            continue

        try:
            if indent == 0:
                section = ""
                key, value = _parse_top_level_line(trimmed)
                if key == "version":
                    number = _unquote_scalar(value)
                    if not _INTEGER.fullmatch(number):
                        raise HookError("invalid version")
                    version = int(number)
                elif key in ("id", "description", "timeout"):
                    if not value:
                        raise HookError(f"{key} requires a value")
                    if key == "id":
                        hook_id = _unquote_scalar(value)
                    elif key == "description":
                        description = _unquote_scalar(value)
                    else:
                        try:
                            timeout = parse_duration(_unquote_scalar(value))
                        except ValueError as exc:
                            raise HookError("invalid timeout") from exc
                elif key in _BLOCK_KEYS:
                    if value:
                        raise HookError(f"{key} must be a block")
                    section = key
                else:
                    raise HookError(f"unknown key {_quote(key)}")
                continue

            if section == "triggers":
                triggers.append(_as_trigger(_unquote_scalar(_parse_list_item(trimmed))))
            elif section == "execute":
                execute.append(_unquote_scalar(_parse_list_item(trimmed)))
            elif section == "env":
                env_key, env_value = _parse_map_item(trimmed)
                env[env_key] = _unquote_scalar(env_value)
            else:
                raise HookError("unexpected indentation")
        except HookError as exc:
            raise HookError(f"line {line_no}: {exc}") from exc

    return HookDefinition(
        version=version,
        id=hook_id,
        description=description,
        triggers=triggers,
        execute=execute,
        timeout=timeout if timeout > timedelta(0) else DEFAULT_HOOK_TIMEOUT,
        env=env or None,
    )


def validate_hook(hook: HookDefinition) -> None:
    """Raise :class:`HookError` if ``hook`` is not a usable definition."""
    if hook.version != 1:
        raise HookError("version must be 1")
    if not hook.id.strip():
        raise HookError("id is required")
    if not hook.triggers:
        raise HookError("triggers is required")
    for trigger in hook.triggers:
        try:
            HookTrigger(trigger)
        except ValueError:
            raise HookError(f"unsupported trigger {_quote(str(getattr(trigger, 'value', trigger)))}") from None
    if not hook.execute:
        raise HookError("execute is required")
    for index, command in enumerate(hook.execute):
        if not command.strip():
            raise HookError(f"execute[{index}] cannot be empty")


def load_hook_file(path: str) -> HookDefinition:
    """Read, parse and validate a single hook file."""
    try:
        with open(path, encoding="utf-8") as handle:
            data = handle.read()
    except OSError as exc:
        raise HookError(f"read hook file {path}: {exc}") from exc
    try:
        hook = parse_hook_yaml(data)
    except HookError as exc:
        raise HookError(f"parse hook file {path}: {exc}") from exc
    hook = replace(hook, source_path=path)
    try:
        validate_hook(hook)
    except HookError as exc:
        raise HookError(f"invalid hook file {path}: {exc}") from exc
    return hook


def load_builtin_hooks(directory: str) -> HookCatalog:
    """Load every ``.yaml``/``.yml`` hook file in ``directory``, sorted by name."""
    if not directory.strip():
        raise HookError("hooks directory is required")
    try:
        with os.scandir(directory) as scan:
            entries = sorted(scan, key=lambda entry: entry.name)
    except OSError as exc:
        raise HookError(f"read hooks directory: {exc}") from exc

    catalog = HookCatalog()
    seen: Dict[str, str] = {}
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            continue
        if _extension(entry.name).lower() not in (".yaml", ".yml"):
            continue
        path = os.path.join(directory, entry.name)
        hook = load_hook_file(path)
        if hook.id in seen:
            raise HookError(f"duplicate hook id {_quote(hook.id)} in {seen[hook.id]} and {path}")
        seen[hook.id] = path
        catalog.hooks.append(hook)
    return catalog