"""Console assertion reporting with grouped sections."""

from __future__ import annotations

import sys
from typing import Dict, List, Optional, TextIO

from .types import UNDEFINED, JsArray, JsValue, to_value
from .utils import flatten_once, render, strict_equals


def deep_equal(a: object, b: object) -> bool:
    """Array-aware strict equality.

    Two arrays must have the same length; after flattening each one level,
    the first `len(a)` positions are compared with strict equality and a
    missing position reads as undefined. Nesting shape is not compared, and
    positions past the outer length are never inspected. Anything else falls
    back to strict equality.
    """
    memo: Dict[int, JsValue] = {}
    lhs = to_value(a, memo)
    rhs = to_value(b, memo)

    if isinstance(lhs, JsArray) and isinstance(rhs, JsArray):
        if len(lhs.items) != len(rhs.items):
            return False

        first = flatten_once(lhs)
        second = flatten_once(rhs)

        for i in range(len(lhs.items)):
            x = first[i] if i < len(first) else UNDEFINED
            y = second[i] if i < len(second) else UNDEFINED
            if not strict_equals(x, y):
                return False
        return True

    return strict_equals(lhs, rhs)


class Reporter:
    """Writes one line per assertion, grouped under `# name` section headers.

    The open section lives on the instance; assertion lines inside a section
    are indented by `indent`.
    """

    def __init__(self, stream: Optional[TextIO] = None, indent: str = "  "):
        self.stream = stream if stream is not None else sys.stdout
        self.indent = indent
        self.current_section: Optional[str] = None
        self.passed = 0
        self.failed = 0
        self.failures: List[str] = []

    def _emit(self, line: str) -> None:
        prefix = self.indent if self.current_section is not None else ""
        self.stream.write(f"{prefix}{line}\n")

    def section(self, name: str) -> None:
        self.close()
        self.stream.write(f"# {name}\n")
        self.current_section = name

    def close(self) -> None:
        if self.current_section is None:
            return
        self.current_section = None
        self.stream.write("\n")

    def check(self, description: str, actual: object, expected: object) -> bool:
        if deep_equal(actual, expected):
            self.passed += 1
            self._emit(f"[PASS] {description}")
            return True

        self.failed += 1
        self.failures.append(description)
        self._emit(
            f"[FAIL] {description}: expected {render(expected)}, got {render(actual)}"
        )
        return False

    def error(self, description: str, exc: BaseException) -> None:
        """Record a check whose actual value could not be computed."""
        self.failed += 1
        self.failures.append(description)
        self._emit(f"[FAIL] {description}: {type(exc).__name__}: {exc}")

    def note(self, text: str) -> None:
        self._emit(f"[INFO] {text}")

    @property
    def total(self) -> int:
        return self.passed + self.failed

    def summary(self) -> List[str]:
        return [f"Total cases: {self.total}", f"Failures: {self.failed}"]
