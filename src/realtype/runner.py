from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .classify import (
    all_same_basic_type,
    all_unique_real_types,
    basic_type_of,
    basic_types_of,
    count_real_types,
    real_type_of,
    real_types_of,
)
from .reader import read_value
from .types import JsArray, JsValue, RealtypeError
from .utils import debug_py_trace_enabled, render


def describe(value: JsValue) -> List[str]:
    lines = [
        f"value: {render(value)}",
        f"basic: {basic_type_of(value)}",
        f"real: {real_type_of(value)}",
    ]

    # Arrays are also reported item by item.
    if isinstance(value, JsArray):
        counts = ", ".join(f"{label}={n}" for label, n in count_real_types(value))
        lines.extend([
            f"item basic types: [{', '.join(basic_types_of(value))}]",
            f"item real types: [{', '.join(real_types_of(value))}]",
            f"counts: {counts or '-'}",
            f"same basic type: {'yes' if all_same_basic_type(value) else 'no'}",
            f"unique real types: {'yes' if all_unique_real_types(value) else 'no'}",
        ])

    return lines


def classify_source(src: str) -> str:
    return "\n".join(describe(read_value(src)))


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into literal text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as the literal itself.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data.strip():
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg


def main(argv: Optional[List[str]] = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    arg = None

    for token in args:
        if token in ("-h", "--help"):
            print("usage: realtype [LITERAL | PATH | -]")
            return

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    source = _load_source(arg)

    try:
        print(classify_source(source))
    except RealtypeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        raise SystemExit(1) from None

if __name__ == "__main__":
    main()
