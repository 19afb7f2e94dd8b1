"""
sanity_check.py: regression driver for the realtype classifier.

The suite walks the classifier one function at a time:
1. Basic (`typeof`) labels for single values and whole arrays.
2. Real labels, uniqueness and counting over the same inputs.
3. The positional comparison used by the reporter itself.

Inputs are written as JavaScript literals and read through the literal reader,
or given directly as Python values. Every check prints one line; the script
exits non-zero on failure only when run with --strict.
"""

from __future__ import annotations

import io
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

BASE_DIR = Path(__file__).resolve().parent
SRC_DIR = (BASE_DIR / "src").resolve()
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from realtype.classify import (
    all_same_basic_type,
    all_unique_real_types,
    basic_type_of,
    basic_types_of,
    count_real_types,
    real_types_of,
)
from realtype.reader import read_value, read_values
from realtype.report import Reporter, deep_equal
from realtype.types import UNDEFINED

# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Check:
    """One assertion: the actual value is computed lazily when the suite runs."""
    section: str
    description: str
    actual: Callable[[], object]
    expected: object

CHECKS: List[Check] = []

def check(section: str, description: str, actual: Callable[[], object], expected: object) -> None:
    CHECKS.append(Check(section, description, actual, expected))

KNOWN_TYPES = """[
    true,
    8,
    'home',
    [1, 2, 3],
    { age: 20 },
    () => {},
    undefined,
    null,
    NaN,
    +Infinity,
    new Date(),
    /../,
    new Set(),
    new Map(),
    Symbol('id'),
    11n,
]"""

# ---------------------------------------------------------------------------
# basic_type_of
# ---------------------------------------------------------------------------

BASIC = "basic_type_of"

check(BASIC, "Boolean", lambda: basic_type_of(True), "boolean")
check(BASIC, "Number", lambda: basic_type_of(123), "number")
check(BASIC, "Number", lambda: basic_type_of(float("nan")), "number")
check(BASIC, "String", lambda: basic_type_of("whoo"), "string")
check(BASIC, "Array", lambda: basic_type_of([]), "object")
check(BASIC, "Object", lambda: basic_type_of({}), "object")
check(BASIC, "Function", lambda: basic_type_of(lambda: None), "function")
check(BASIC, "Undefined", lambda: basic_type_of(UNDEFINED), "undefined")
check(BASIC, "Null", lambda: basic_type_of(None), "object")
check(BASIC, "Symbol literal", lambda: basic_type_of(read_value("Symbol('id')")), "symbol")
check(BASIC, "BigInt literal", lambda: basic_type_of(read_value("11n")), "bigint")

# ---------------------------------------------------------------------------
# all_same_basic_type
# ---------------------------------------------------------------------------

SAME = "all_same_basic_type"

check(SAME, "All values are numbers", lambda: all_same_basic_type([11, 12, 13]), True)
check(SAME, "All values are strings", lambda: all_same_basic_type(["11", "12", "13"]), True)
check(
    SAME,
    "All values are strings but wait",
    lambda: all_same_basic_type(read_values("['11', new String('12'), '13']")),
    False,
)
check(
    SAME,
    "Values like a number",
    lambda: all_same_basic_type([123, float("nan"), float("inf")]),
    True,
)
check(SAME, "Values like an object", lambda: all_same_basic_type([{}]), True)
check(SAME, "Nothing to compare", lambda: all_same_basic_type([]), True)

# ---------------------------------------------------------------------------
# basic_types_of vs real_types_of
# ---------------------------------------------------------------------------

VERSUS = "basic_types_of vs real_types_of"

check(
    VERSUS,
    "Check basic types",
    lambda: basic_types_of(read_values(KNOWN_TYPES)),
    [
        "boolean",
        "number",
        "string",
        "object",
        "object",
        "function",
        "undefined",
        "object",
        "number",
        "number",
        "object",
        "object",
        "object",
        "object",
        "symbol",
        "bigint",
    ],
)

check(
    VERSUS,
    "Check real types",
    lambda: real_types_of(read_values(KNOWN_TYPES)),
    [
        "boolean",
        "number",
        "string",
        "array",
        "object",
        "function",
        "undefined",
        "null",
        "NaN",
        "Infinity",
        "date",
        "regexp",
        "set",
        "map",
        "symbol",
        "bigint",
    ],
)

check(
    VERSUS,
    "Native Python values classify like their literals",
    lambda: real_types_of([True, 8, "home", (1, 2), {"age": 20}, None, float("-inf")]),
    ["boolean", "number", "string", "array", "object", "null", "Infinity"],
)

# ---------------------------------------------------------------------------
# all_unique_real_types
# ---------------------------------------------------------------------------

UNIQUE = "all_unique_real_types"

check(UNIQUE, "All value types in the array are unique", lambda: all_unique_real_types([True, 123, "123"]), True)
check(UNIQUE, "Two values have the same type", lambda: all_unique_real_types([True, 123, "123" == 123]), False)
check(UNIQUE, "There are no repeated types in the known types", lambda: all_unique_real_types(read_values(KNOWN_TYPES)), True)
check(
    UNIQUE,
    "Some values have the same type",
    lambda: all_unique_real_types(read_values("[Boolean(0), 123, false, Boolean('')]")),
    False,
)
check(UNIQUE, "All value types in the array are unique", lambda: all_unique_real_types([1, "1"]), True)
check(UNIQUE, "Empty input is unique", lambda: all_unique_real_types([]), True)

# ---------------------------------------------------------------------------
# count_real_types
# ---------------------------------------------------------------------------

COUNT = "count_real_types"

check(
    COUNT,
    "Count unique types of array items",
    lambda: count_real_types([True, None, True, False, {}]),
    [["boolean", 3], ["null", 1], ["object", 1]],
)
check(
    COUNT,
    "Counted unique types are sorted",
    lambda: count_real_types([{}, None, True, True, False]),
    [["boolean", 3], ["null", 1], ["object", 1]],
)
check(
    COUNT,
    "All unique types are sorted",
    lambda: count_real_types(read_values("[[], '123', null, { type: 'number' }, 5]")),
    [["array", 1], ["null", 1], ["number", 1], ["object", 1], ["string", 1]],
)
check(
    COUNT,
    "Special numbers sort before lowercase labels",
    lambda: count_real_types([float("nan"), 1, float("inf"), float("nan")]),
    [["Infinity", 1], ["NaN", 2], ["number", 1]],
)

# ---------------------------------------------------------------------------
# deep_equal
# ---------------------------------------------------------------------------

EQUAL = "deep_equal"

check(EQUAL, "Identical copies are equal", lambda: deep_equal(["a", 1, None], ["a", 1, None]), True)
check(EQUAL, "Lengths must match", lambda: deep_equal([1, 2], [1, 2, 3]), False)
check(EQUAL, "NaN never equals itself", lambda: deep_equal(float("nan"), float("nan")), False)
check(EQUAL, "Objects compare by identity", lambda: deep_equal({}, {}), False)
check(
    EQUAL,
    "Only the first positions of the flattened arrays are compared",
    lambda: deep_equal([[1, 2], [3, 4]], [[1, 2], [3, 5]]),
    True,
)

# ---------------------------------------------------------------------------
# Suite execution
# ---------------------------------------------------------------------------

class SanitySuite:
    """Runs the registered checks section by section and emits a text report."""
    def __init__(self, filters: Optional[Sequence[str]] = None):
        self.filters = list(filters) if filters else []
        self.checks = [c for c in CHECKS if self._matches_filter(c.section)]

    def _matches_filter(self, name: str) -> bool:
        if not self.filters:
            return True
        return any(token in name for token in self.filters)

    def execute(self) -> Tuple[str, int]:
        out = io.StringIO()
        reporter = Reporter(out)
        if self.filters:
            reporter.note(f"filters: {', '.join(self.filters)} ({len(self.checks)}/{len(CHECKS)} checks)")
        for item in self.checks:
            if reporter.current_section != item.section:
                reporter.section(item.section)
            try:
                actual = item.actual()
            except Exception as exc:
                reporter.error(item.description, exc)
                continue
            reporter.check(item.description, actual, item.expected)
        reporter.close()
        lines = out.getvalue().splitlines()
        lines.extend(reporter.summary())
        return "\n".join(lines), reporter.failed

# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

def _selected_filters(argv: Sequence[str]) -> List[str]:
    env = os.getenv("SANITY_FILTER")
    filters: List[str] = []
    if env:
        filters.extend([tok.strip() for tok in env.split(",") if tok.strip()])
    if argv:
        filters.extend(list(argv))
    return filters

def run(argv: Sequence[str] = ()) -> Tuple[str, int]:
    suite = SanitySuite(filters=_selected_filters(argv))
    return suite.execute()

def main(argv: Sequence[str]) -> int:
    strict = False
    report_path: Optional[Path] = None
    filters: List[str] = []
    it = iter(argv)

    for token in it:
        if token == "--strict":
            strict = True
            continue

        if token.startswith("--report="):
            report_path = Path(token.split("=", 1)[1])
            continue

        if token == "--report":
            try:
                report_path = Path(next(it))
            except StopIteration:
                raise SystemExit("--report flag requires a path") from None
            continue

        filters.append(token)

    report, failures = run(filters)
    if report_path is not None:
        report_path.write_text(report + "\n", encoding="utf-8")
    print(report)
    return 1 if strict and failures else 0

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
