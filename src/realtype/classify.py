"""Basic (`typeof`) and real type classification over the value model.

Every function here is total: inputs are coerced with `to_value`, which never
raises, and each value-model variant maps onto exactly one label.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, List, Tuple

from .types import (
    ARRAY,
    BIGINT,
    BOOLEAN,
    DATE,
    FUNCTION,
    INFINITY,
    MAP,
    NAN,
    NULL,
    NUMBER,
    OBJECT,
    REGEXP,
    SET,
    STRING,
    SYMBOL,
    UNDEFINED_LABEL,
    JsArray,
    JsBigInt,
    JsBool,
    JsBoxed,
    JsDate,
    JsFunction,
    JsMap,
    JsNull,
    JsNumber,
    JsObject,
    JsRegExp,
    JsSet,
    JsString,
    JsSymbol,
    JsUndefined,
    to_value,
)

TypeCount = List[Tuple[str, int]]


def _items(values: Iterable[object]) -> List[object]:
    if isinstance(values, (JsArray, JsSet)):
        return list(values.items)
    return list(values)


def basic_type_of(value: object) -> str:
    match to_value(value):
        case JsUndefined():
            return UNDEFINED_LABEL
        case JsBool():
            return BOOLEAN
        case JsNumber():
            return NUMBER
        case JsBigInt():
            return BIGINT
        case JsString():
            return STRING
        case JsSymbol():
            return SYMBOL
        case JsFunction():
            return FUNCTION
        case JsNull() | JsArray() | JsObject() | JsBoxed() | JsDate() | JsRegExp() | JsSet() | JsMap():
            return OBJECT
    return OBJECT  # pragma: no cover - the match above is exhaustive


def basic_types_of(values: Iterable[object]) -> List[str]:
    return [basic_type_of(v) for v in _items(values)]


def all_same_basic_type(values: Iterable[object]) -> bool:
    """True when every item shares one basic type; vacuously true when empty."""
    types = basic_types_of(values)
    if not types:
        return True

    first = types[0]
    return all(t == first for t in types)


def real_type_of(value: object) -> str:
    """Refine `basic_type_of`: numbers split into number/NaN/Infinity and
    objects into array/null/date/regexp/set/map/object.

    Arm order is the tie-break order: array before null before the
    structural kinds.
    """
    v = to_value(value)
    match v:
        case JsNumber(value=n) if math.isnan(n):
            return NAN
        case JsNumber(value=n) if math.isinf(n):
            return INFINITY
        case JsArray():
            return ARRAY
        case JsNull():
            return NULL
        case JsDate():
            return DATE
        case JsRegExp():
            return REGEXP
        case JsSet():
            return SET
        case JsMap():
            return MAP
        case _:
            return basic_type_of(v)


def real_types_of(values: Iterable[object]) -> List[str]:
    return [real_type_of(v) for v in _items(values)]


def all_unique_real_types(values: Iterable[object]) -> bool:
    """True when no two items share a real type."""
    types = real_types_of(values)
    return len(set(types)) == len(types)


def count_real_types(values: Iterable[object]) -> TypeCount:
    """Occurrences per real type as (label, count) pairs sorted by label."""
    counts = Counter(real_types_of(values))
    return sorted(counts.items(), key=lambda pair: pair[0])


__all__ = [
    "TypeCount",
    "basic_type_of",
    "basic_types_of",
    "all_same_basic_type",
    "real_type_of",
    "real_types_of",
    "all_unique_real_types",
    "count_real_types",
]
