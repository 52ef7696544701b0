# openpilot

Building blocks for a terminal front end that drives coding agents:

- `openpilot.hooks`: read hook definitions from a directory of small
  YAML-like files, validate them and look them up by trigger.
- `openpilot.config`: runtime configuration defaults for providers and the
  location of built-in hook and skill assets.
- `openpilot.autocomplete`: tab completion and suggestions for slash
  commands such as `/session use <name>`, with filesystem path completion
  for `/session add-repo`.
- `openpilot.display`: terminal text helpers for a transcript view —
  display width, hard wrapping that keeps indentation, divider lines,
  OSC 8 hyperlinks and function-key mapping.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

## Hooks

A hook file looks like this:

```yaml
version: 1
id: ensure-main-up-to-date
triggers:
  - session.started
execute:
  - git fetch --prune
timeout: 45s
env:
  GIT_TERMINAL_PROMPT: "0"
```

Only a small subset of YAML is understood: top-level `key: value` lines
(`version`, `id`, `description`, `timeout`), the blocks `triggers` and
`execute` as `- item` lists, and `env` as a block of `key: value` pairs.
Comments start with `#`; tabs are rejected. Values may be wrapped in single
or double quotes.

`version` must be `1`; `id`, at least one trigger and at least one
non-empty `execute` entry are required. The supported triggers are the
members of `HookTrigger`: `session.started`, `repo.selected`,
`provider.codex.selected` and `development.work.complete`. `timeout` is a
duration such as `45s`, `1h30m` or `1.5s` (see `parse_duration`) and
defaults to 30 seconds.

```python
from openpilot.hooks import HookTrigger, load_builtin_hooks

catalog = load_builtin_hooks("hooks/builtin")
for hook in catalog.hooks_for(HookTrigger.SESSION_STARTED):
    print(hook.id, hook.execute, hook.timeout)
```

`load_builtin_hooks` reads every `.yaml`/`.yml` file in the directory in
name order. A missing directory, an unreadable or malformed file, an
unknown key, an unsupported trigger or a duplicate id raises `HookError`
(a `ValueError`), with the file path and line number in the message.
`load_hook_file`, `parse_hook_yaml` and `validate_hook` work on a single
file, a string and a `HookDefinition` respectively.

## Configuration

```python
from openpilot.config import default_config

cfg = default_config()
cfg.providers["codex"].command      # "codex"
cfg.providers["cursor"].command     # "open-pilot-cursor-wrapper"
cfg.builtin_hooks_dir               # "<root>/hooks/builtin"
```

Both providers get a 10-second startup timeout. The asset root is the
nearest directory holding a `pyproject.toml`, searched upward from the
package's own location and then from the working directory
(`resolve_builtin_assets_root`, `choose_builtin_assets_root`,
`resolve_builtin_assets_root_from`). `default_config` does not load the
hooks; call `load_builtin_hooks(cfg.builtin_hooks_dir)` yourself.

## Autocompletion

```python
from openpilot.autocomplete import AutocompleteEngine, CompletionOptions

engine = AutocompleteEngine()
engine.apply("/pro", CompletionOptions())              # "/provider "
engine.apply("/provider use c", CompletionOptions())   # "/provider use codex "
engine.suggestions("/session u", CompletionOptions(session_names=["demo"]))
```

`apply` completes one word at a time. Pressing tab repeatedly on the same
input cycles through the candidates; call `reset()` when the input
changes. Path completions after `/session add-repo` get no trailing space,
directories end with a path separator, hidden entries appear only when the
typed prefix starts with a dot, and matching ignores case.
`suggestions` returns sorted full commands, or up to 15 path completions
after `/session add-repo `.

## Display helpers

```python
from openpilot.display import wrap_transcript_lines, render_divider_line

wrap_transcript_lines(["[pilot] a long line ...", "[[pilot-divider:Hooks 0/1]]"], 40)
render_divider_line("Hooks 0/1", 30)
```

`wrap_transcript_lines` hard-wraps each line to the width while keeping
its leading spaces on every continuation line, and turns
`[[pilot-divider:Title]]` tokens into a centred rule (`═` for
"Development Work Complete", `─` otherwise). `display_width` ignores ANSI
escape sequences and counts wide characters as two cells.
`osc8_link(label, url)` builds a terminal hyperlink; `can_use_osc8()`
returns `False` when `OPEN_PILOT_DISABLE_OSC8=1` or `TERM=dumb`.
`function_key_index("F3")` returns `2`.

## What it does not do

There is no interactive terminal screen, no command to start, no session
storage and no running of providers: hooks are loaded and validated but
never executed, and the display helpers only produce plain strings without
colour styling.

## Running the tests

```
pip install .[test]
pytest
```