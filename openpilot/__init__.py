"""Hook file loading, runtime config defaults, slash-command autocompletion and transcript text helpers."""

__version__ = "0.1.0"

__all__ = ["autocomplete", "config", "display", "hooks"]