from datetime import timedelta

import pytest

from openpilot.hooks import (
    DEFAULT_HOOK_TIMEOUT,
    HookCatalog,
    HookDefinition,
    HookError,
    HookTrigger,
    load_builtin_hooks,
    load_hook_file,
    parse_duration,
    parse_hook_yaml,
    validate_hook,
)


def write_hook_file(directory, name, content):
    path = directory / name
    path.write_text(content.strip() + "\n", encoding="utf-8")
    return path


def test_load_builtin_hooks_parses_valid_file(tmp_path):
    write_hook_file(tmp_path, "a.yaml", """
version: 1
id: ensure-main-up-to-date
triggers:
  - session.started
execute:
  - git fetch --prune
timeout: 45s
env:
  GIT_TERMINAL_PROMPT: "0"
""")
    catalog = load_builtin_hooks(str(tmp_path))
    assert len(catalog.hooks) == 1
    hook = catalog.hooks[0]
    assert hook.id == "ensure-main-up-to-date"
    assert hook.triggers == [HookTrigger.SESSION_STARTED]
    assert hook.execute == ["git fetch --prune"]
    assert hook.timeout == timedelta(seconds=45)
    assert hook.env == {"GIT_TERMINAL_PROMPT": "0"}
    assert hook.source_path == str(tmp_path / "a.yaml")


def test_load_builtin_hooks_rejects_repo_added_trigger(tmp_path):
    write_hook_file(tmp_path, "a.yaml", """
version: 1
id: repo-added-hook
triggers:
  - repo.added
execute:
  - echo ok
""")
    with pytest.raises(HookError, match="unsupported trigger"):
        load_builtin_hooks(str(tmp_path))


@pytest.mark.parametrize(
    "trigger_text, expected",
    [
        ("provider.codex.selected", HookTrigger.PROVIDER_CODEX_SELECTED),
        ("repo.selected", HookTrigger.REPO_SELECTED),
        ("development.work.complete", HookTrigger.DEVELOPMENT_WORK_COMPLETE),
    ],
)
def test_load_builtin_hooks_parses_supported_triggers(tmp_path, trigger_text, expected):
    write_hook_file(tmp_path, "a.yaml", f"""
version: 1
id: some-hook
triggers:
  - {trigger_text}
execute:
  - echo ok
""")
    catalog = load_builtin_hooks(str(tmp_path))
    assert len(catalog.hooks) == 1
    assert catalog.hooks[0].triggers[0] is expected


def test_load_builtin_hooks_rejects_duplicate_id(tmp_path):
    content = """
version: 1
id: duplicate-id
triggers:
  - session.started
execute:
  - echo ok
"""
    write_hook_file(tmp_path, "a.yaml", content)
    write_hook_file(tmp_path, "b.yaml", content)
    with pytest.raises(HookError, match="duplicate hook id"):
        load_builtin_hooks(str(tmp_path))


def test_load_builtin_hooks_rejects_unsupported_trigger(tmp_path):
    write_hook_file(tmp_path, "a.yaml", """
version: 1
id: invalid-trigger
triggers:
  - prompt.before_send
execute:
  - echo ok
""")
    with pytest.raises(HookError, match="unsupported trigger"):
        load_builtin_hooks(str(tmp_path))


def test_load_builtin_hooks_rejects_missing_required_fields(tmp_path):
    write_hook_file(tmp_path, "a.yaml", """
version: 1
id: missing-fields
""")
    with pytest.raises(HookError, match="triggers is required"):
        load_builtin_hooks(str(tmp_path))


def test_load_builtin_hooks_rejects_invalid_timeout(tmp_path):
    write_hook_file(tmp_path, "a.yaml", """
version: 1
id: bad-timeout
triggers:
  - session.started
execute:
  - echo ok
timeout: nope
""")
    with pytest.raises(HookError, match="invalid timeout"):
        load_builtin_hooks(str(tmp_path))


def test_load_builtin_hooks_rejects_empty_execute_entry(tmp_path):
    write_hook_file(tmp_path, "a.yaml", """
version: 1
id: empty-command
triggers:
  - session.started
execute:
  -
""")
    with pytest.raises(HookError, match="cannot be empty|expected list item"):
        load_builtin_hooks(str(tmp_path))


def test_load_builtin_hooks_requires_directory():
    with pytest.raises(HookError, match="hooks directory is required"):
        load_builtin_hooks("   ")


def test_load_builtin_hooks_missing_directory(tmp_path):
    with pytest.raises(HookError, match="read hooks directory"):
        load_builtin_hooks(str(tmp_path / "absent"))


def test_load_builtin_hooks_skips_other_files_and_dirs_and_sorts(tmp_path):
    body = "version: 1\nid: {id}\ntriggers:\n  - session.started\nexecute:\n  - echo ok\n"
    (tmp_path / "b.YML").write_text(body.format(id="second"), encoding="utf-8")
    (tmp_path / "a.yaml").write_text(body.format(id="first"), encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not a hook", encoding="utf-8")
    (tmp_path / "sub.yaml").mkdir()
    catalog = load_builtin_hooks(str(tmp_path))
    assert [hook.id for hook in catalog.hooks] == ["first", "second"]


def test_load_hook_file_missing_file(tmp_path):
    with pytest.raises(HookError, match="read hook file"):
        load_hook_file(str(tmp_path / "missing.yaml"))


def test_load_hook_file_wraps_parse_error(tmp_path):
    path = write_hook_file(tmp_path, "a.yaml", "version: 1\nbogus: x")
    with pytest.raises(HookError, match=r"parse hook file .*line 2: unknown key \"bogus\""):
        load_hook_file(str(path))


def test_parse_hook_yaml_defaults_and_quotes():
    hook = parse_hook_yaml(
        "# comment\nversion: '1'\nid: \"quoted-id\"\ndescription: 'Says hi'\n"
        "triggers:\n  - \"session.started\"\nexecute:\n  - echo hi\n"
    )
    assert hook.version == 1
    assert hook.id == "quoted-id"
    assert hook.description == "Says hi"
    assert hook.triggers == ["session.started"]
    assert hook.timeout == DEFAULT_HOOK_TIMEOUT
    assert hook.env is None


def test_parse_hook_yaml_zero_timeout_uses_default():
    hook = parse_hook_yaml("timeout: 0s\n")
    assert hook.timeout == timedelta(seconds=30)


@pytest.mark.parametrize(
    "raw, message",
    [
        ("version: 1\n\tid: x", "line 2: tabs are not supported"),
        ("version: one", "line 1: invalid version"),
        ("id:", "line 1: id requires a value"),
        ("description:", "line 1: description requires a value"),
        ("timeout:", "line 1: timeout requires a value"),
        ("triggers: session.started", "line 1: triggers must be a block"),
        ("  - orphan", "line 1: unexpected indentation"),
        ("just text", "line 1: expected key: value"),
        (": value", "line 1: empty key"),
        ("env:\n  novalue", "line 2: expected map item key: value"),
        ("env:\n  : x", "line 2: empty map key"),
        ("execute:\n  echo", "line 2: expected list item"),
    ],
)
def test_parse_hook_yaml_errors(raw, message):
    with pytest.raises(HookError) as info:
        parse_hook_yaml(raw)
    assert str(info.value) == message


def test_section_ends_at_next_top_level_key():
    hook = parse_hook_yaml("execute:\n  - a\nid: x\ntriggers:\n  - repo.selected\n")
    assert hook.execute == ["a"]
    assert hook.id == "x"
    assert hook.triggers == [HookTrigger.REPO_SELECTED]


@pytest.mark.parametrize(
    "hook, message",
    [
        (HookDefinition(version=2, id="x", triggers=["session.started"], execute=["a"]), "version must be 1"),
        (HookDefinition(version=1, id=" ", triggers=["session.started"], execute=["a"]), "id is required"),
        (HookDefinition(version=1, id="x", triggers=["session.started"]), "execute is required"),
        (
            HookDefinition(version=1, id="x", triggers=["session.started"], execute=["a", "  "]),
            "execute[1] cannot be empty",
        ),
    ],
)
def test_validate_hook_errors(hook, message):
    with pytest.raises(HookError) as info:
        validate_hook(hook)
    assert str(info.value) == message


def test_hooks_for_filters_by_trigger():
    a = HookDefinition(id="a", triggers=[HookTrigger.SESSION_STARTED])
    b = HookDefinition(id="b", triggers=[HookTrigger.REPO_SELECTED, HookTrigger.SESSION_STARTED])
    c = HookDefinition(id="c", triggers=[HookTrigger.REPO_SELECTED])
    catalog = HookCatalog(hooks=[a, b, c])
    assert [h.id for h in catalog.hooks_for(HookTrigger.SESSION_STARTED)] == ["a", "b"]
    assert [h.id for h in catalog.hooks_for("repo.selected")] == ["b", "c"]
    assert catalog.hooks_for(HookTrigger.DEVELOPMENT_WORK_COMPLETE) == []


@pytest.mark.parametrize(
    "text, expected",
    [
        ("45s", timedelta(seconds=45)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(milliseconds=1500)),
        ("300ms", timedelta(milliseconds=300)),
        ("-2m", timedelta(minutes=-2)),
        ("+5s", timedelta(seconds=5)),
        ("0", timedelta(0)),
        ("250us", timedelta(microseconds=250)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "nope", "1", "5x", "s", "-"])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration(text)