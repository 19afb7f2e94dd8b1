from __future__ import annotations

import os
from typing import List

from .types import (
    JsValue,
    JsUndefined,
    JsNull,
    JsBool,
    JsNumber,
    JsBigInt,
    JsString,
    JsArray,
    to_value,
)


def debug_py_trace_enabled() -> bool:
    """Check whether Python tracebacks should accompany reported errors."""
    return os.getenv("REALTYPE_DEBUG_PY_TRACE", "").lower() in {"1", "true", "yes"}


def strict_equals(lhs: JsValue, rhs: JsValue) -> bool:
    """`===` on the value model: primitives by value, everything else by identity."""
    match (lhs, rhs):
        case (JsUndefined(), JsUndefined()) | (JsNull(), JsNull()):
            return True
        # NaN fails float equality on its own; +0 and -0 compare equal.
        case (JsNumber(value=a), JsNumber(value=b)):
            return a == b
        case (
            (JsBool(value=a), JsBool(value=b))
            | (JsString(value=a), JsString(value=b))
            | (JsBigInt(value=a), JsBigInt(value=b))
        ):
            return a == b
        case _:
            return lhs is rhs


def flatten_once(arr: JsArray) -> List[JsValue]:
    """Merge directly nested arrays into their parent, one level deep."""
    out: List[JsValue] = []

    for item in arr.items:
        if isinstance(item, JsArray):
            out.extend(item.items)
        else:
            out.append(item)

    return out


def render(value: object) -> str:
    """JavaScript-style display text for any value."""
    return repr(to_value(value))
