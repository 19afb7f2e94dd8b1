"""Interactive classifier prompt, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .runner import classify_source
from .types import RealtypeError
from .utils import debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/help": ("Show the accepted literal forms", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
}

_HELP = """\
Enter one JavaScript literal per line, for example:
  [true, 8, 'home', [1, 2], {age: 20}, () => {}, undefined, null]
  [NaN, -Infinity, new Date(), /../, new Set(), new Map(), Symbol('id'), 11n]
  new String('12')"""


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _handle_slash(line: str) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/help":
        print(_HELP)
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ["REALTYPE_DEBUG_PY_TRACE"] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop("REALTYPE_DEBUG_PY_TRACE", None)
        elif arg == "":
            if debug_py_trace_enabled():
                os.environ.pop("REALTYPE_DEBUG_PY_TRACE", None)
            else:
                os.environ["REALTYPE_DEBUG_PY_TRACE"] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def handle_line(text: str) -> None:
    """Process one submitted line: slash command or literal to classify."""
    text = _normalize(text)
    if not text.strip():
        return

    if _handle_slash(text):
        return

    try:
        print(classify_source(text))
    except RealtypeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            print("\nPython traceback:", file=sys.stderr)
            traceback.print_exc()


def repl() -> None:
    """Interactive read-classify-print loop with prompt_toolkit."""
    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print("realtype repl: Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        handle_line(text)


def main() -> None:
    repl()


if __name__ == "__main__":
    main()
