"""Tab completion and suggestions for slash commands and repository paths."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Tuple

_SUBCOMMANDS = {
    "/hooks": ("run",),
    "/provider": ("status", "use"),
    "/session": ("add-repo", "delete", "list", "new", "repo", "repos", "use"),
}
_PROVIDER_IDS = ("codex", "cursor")
_ADD_REPO_PREFIX = "/session add-repo "
_SUGGESTION_LIMIT = 15


@dataclass
class CompletionOptions:
    """Dynamic values that completion can offer besides the fixed commands."""

    session_names: List[str] = field(default_factory=list)
    repo_ids: List[str] = field(default_factory=list)


def _root_suggestions() -> List[str]:
    return sorted(_SUBCOMMANDS)


def _base_suggestions() -> Iterator[str]:
    for root, subcommands in _SUBCOMMANDS.items():
        yield root
        for sub in subcommands:
            yield f"{root} {sub}"
    for provider in _PROVIDER_IDS:
        yield f"/provider use {provider}"
    yield "/session repo use"


def _sort_and_dedupe(values: Iterable[str]) -> List[str]:
    return sorted(set(values))


def split_tokens(text: str) -> Tuple[List[str], bool]:
    """Split ``text`` into words; also report whether it ends with a space."""
    stripped = text.lstrip(" \t")
    return stripped.split(), stripped.endswith(" ")


def _first_matching_index(options: Sequence[str], prefix: str) -> int:
    if not prefix:
        return 0
    return next((i for i, option in enumerate(options) if option.startswith(prefix)), 0)


def _is_path_context(context: Sequence[str]) -> bool:
    return list(context) == ["/session", "add-repo"]


def _token_options(context: Sequence[str], current: str, options: CompletionOptions) -> List[str]:
    depth = len(context)
    if depth == 0:
        return _root_suggestions()
    if depth == 1:
        return list(_SUBCOMMANDS.get(context[0], ()))
    if depth == 2:
        head = (context[0], context[1])
        if head == ("/provider", "use"):
            return list(_PROVIDER_IDS)
        if head in (("/session", "use"), ("/session", "delete")):
            return sorted(options.session_names)
        if head == ("/session", "repo"):
            return ["use"]
        if head == ("/session", "add-repo"):
            return path_completion_options(current)
    if depth == 3 and tuple(context) == ("/session", "repo", "use"):
        return sorted(options.repo_ids)
    return []


def _go_dir(path: str) -> str:
    parent = os.path.dirname(path)
    return os.path.normpath(parent) if parent else "."


def _sort_key(candidate: str) -> Tuple[int, str, str]:
    return len(candidate.encode("utf-8")), candidate.lower(), candidate


def _read_dir_matches(search_dir: str, output_base: str, prefix: str, absolute: bool) -> List[str]:
    try:
        with os.scandir(search_dir) as scan:
            entries = list(scan)
    except OSError:
        return []

    prefix_lower = prefix.lower()
    show_hidden = prefix.startswith(".")
    double_sep = os.sep * 2
    matches = []
    for entry in entries:
        name = entry.name
        if name.startswith(".") and not show_hidden:
            continue
        if not name.lower().startswith(prefix_lower):
            continue
        candidate = output_base + name
        if absolute and candidate.startswith(double_sep):
            candidate = os.sep + candidate[2:]
        if entry.is_dir(follow_symlinks=False):
            candidate += os.sep
        matches.append(candidate)
    return sorted(matches, key=_sort_key)


def path_completion_options(current: str) -> List[str]:
    """List filesystem entries that complete the partial path ``current``."""
    try:
        wd = os.getcwd()
    except OSError:
        return []

    if current == "":
        return _read_dir_matches(wd, "", "", False)

    absolute = current.startswith(os.sep)
    if current.endswith(os.sep):
        dir_part, prefix = current, ""
    else:
        dir_part, prefix = _go_dir(current), os.path.basename(current)

    if absolute:
        search_dir = os.path.normpath(dir_part or os.sep)
        output_base = dir_part or os.sep
        if output_base == ".":
            output_base = os.sep
        if not output_base.endswith(os.sep):
            output_base += os.sep
        return _read_dir_matches(search_dir, output_base, prefix, True)

    if dir_part in (".", ""):
        search_dir = wd
        output_base = "./" if current.startswith("." + os.sep) else ""
    else:
        search_dir = os.path.normpath(os.path.join(wd, dir_part))
        output_base = dir_part if dir_part.endswith(os.sep) else dir_part + os.sep
    return _read_dir_matches(search_dir, output_base, prefix, False)


class AutocompleteEngine:
    """Completes one word at a time, cycling through options on repeated use."""

    def __init__(self) -> None:
        self._context_key = ""
        self._options: List[str] = []
        self._index = 0

    def reset(self) -> None:
        """Forget the current completion cycle."""
        self._context_key = ""
        self._options = []
        self._index = 0

    def apply(self, text: str, options: CompletionOptions) -> str:
        """Return ``text`` with its last word completed, or unchanged if nothing fits."""
        raw = text.lstrip(" \t")
        if not raw.startswith("/"):
            return text
        tokens, trailing = split_tokens(raw)
        if not tokens:
            return text
        if trailing:
            tokens.append("")
        context, current = tokens[:-1], tokens[-1]

        choices = _token_options(context, current, options)
        if not choices:
            return text

        key = "\x00".join(context) + "\x00" + current
        if key != self._context_key or choices != self._options:
            self._context_key = key
            self._options = choices
            self._index = _first_matching_index(choices, current)

        if self._index >= len(self._options):
            self._index = 0
        chosen = self._options[self._index]
        self._index = (self._index + 1) % len(self._options)

        completed = " ".join([*context, chosen])
        return completed if _is_path_context(context) else completed + " "

    def suggestions(self, text: str, options: CompletionOptions) -> List[str]:
        """Return the full commands that match what has been typed so far."""
        raw = text.lstrip(" \t")
        if not raw.startswith("/"):
            return []

        if raw.startswith(_ADD_REPO_PREFIX):
            paths = path_completion_options(raw[len(_ADD_REPO_PREFIX):])[:_SUGGESTION_LIMIT]
            return [_ADD_REPO_PREFIX + path for path in paths]

        candidates = list(_base_suggestions())
        for name in options.session_names:
            candidates.append(f"/session use {name}")
            candidates.append(f"/session delete {name}")
        candidates.extend(f"/session repo use {repo_id}" for repo_id in options.repo_ids)

        return _sort_and_dedupe(c for c in candidates if raw == "/" or c.startswith(raw))