from __future__ import annotations

import datetime as _dt
import decimal
import math
import numbers
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from reprlib import recursive_repr
from typing import Dict, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

# ---------- Type labels ----------

BOOLEAN = "boolean"
NUMBER = "number"
STRING = "string"
OBJECT = "object"
FUNCTION = "function"
UNDEFINED_LABEL = "undefined"
SYMBOL = "symbol"
BIGINT = "bigint"

ARRAY = "array"
NULL = "null"
NAN = "NaN"
INFINITY = "Infinity"
DATE = "date"
REGEXP = "regexp"
SET = "set"
MAP = "map"

BASIC_LABELS = frozenset(
    {BOOLEAN, NUMBER, STRING, OBJECT, FUNCTION, UNDEFINED_LABEL, SYMBOL, BIGINT}
)
REAL_LABELS = frozenset(
    {
        BOOLEAN,
        NUMBER,
        NAN,
        INFINITY,
        STRING,
        OBJECT,
        ARRAY,
        NULL,
        DATE,
        REGEXP,
        SET,
        MAP,
        FUNCTION,
        UNDEFINED_LABEL,
        SYMBOL,
        BIGINT,
    }
)

# ---------- Value model ----------

@dataclass
class JsUndefined:
    def __repr__(self) -> str:
        return "undefined"

@dataclass
class JsNull:
    def __repr__(self) -> str:
        return "null"

@dataclass
class JsBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

def _number_text(v: float) -> str:
    """Number::toString: shortest round-trip digits, exponent outside 1e-7..1e21."""
    if v == 0:
        return "0"
    sign = "-" if v < 0 else ""

    mant, _, exp = repr(abs(v)).partition("e")
    whole, _, frac = mant.partition(".")
    combined = whole + frac
    digits = combined.lstrip("0")
    # n: position of the decimal point relative to the first significant digit
    n = len(whole) + int(exp or 0) - (len(combined) - len(digits))
    digits = digits.rstrip("0")
    k = len(digits)

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits

    e = n - 1
    tail = "." + digits[1:] if k > 1 else ""
    return f"{sign}{digits[0]}{tail}e{'+' if e >= 0 else '-'}{abs(e)}"

@dataclass
class JsNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        if math.isnan(v):
            return "NaN"
        if math.isinf(v):
            return "Infinity" if v > 0 else "-Infinity"
        return _number_text(v)

@dataclass
class JsBigInt:
    value: int
    def __repr__(self) -> str:
        return f"{self.value}n"

@dataclass
class JsString:
    value: str
    def __repr__(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"

# Symbols, functions and every object kind compare by identity.

@dataclass(eq=False)
class JsSymbol:
    description: Optional[str] = None
    def __repr__(self) -> str:
        return f"Symbol({self.description if self.description is not None else ''})"

@dataclass(eq=False)
class JsArray:
    items: List['JsValue'] = field(default_factory=list)
    @recursive_repr("[Circular]")
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass(eq=False)
class JsObject:
    slots: Dict[str, 'JsValue'] = field(default_factory=dict)
    # Foreign Python object this value stands for, if any (display only).
    source: Optional[object] = None
    @recursive_repr("[Circular]")
    def __repr__(self) -> str:
        if self.source is not None and not self.slots:
            return f"<{type(self.source).__name__}>"
        if not self.slots:
            return "{}"

        pairs = []

        for k, v in self.slots.items():
            pairs.append(f"{k}: {repr(v)}")

        return "{ " + ", ".join(pairs) + " }"

@dataclass(eq=False)
class JsBoxed:
    """Primitive wrapped by `new String(...)` and friends: typeof is object."""
    primitive: 'JsValue'
    @recursive_repr("[Circular]")
    def __repr__(self) -> str:
        kind = {JsString: "String", JsNumber: "Number", JsBool: "Boolean"}.get(
            type(self.primitive), "Object"
        )
        return f"[{kind}: {repr(self.primitive)}]"

@dataclass(eq=False)
class JsFunction:
    source: str = "() => {}"
    def __repr__(self) -> str:
        return f"[Function: {self.source}]"

@dataclass(eq=False)
class JsDate:
    moment: Optional[_dt.datetime] = None  # None is an invalid date
    def __repr__(self) -> str:
        if self.moment is None:
            return "Invalid Date"
        return self.moment.isoformat()

@dataclass(eq=False)
class JsRegExp:
    pattern: str
    flags: str = ""
    def __repr__(self) -> str:
        return f"/{self.pattern}/{self.flags}"

@dataclass(eq=False)
class JsSet:
    items: List['JsValue'] = field(default_factory=list)
    @recursive_repr("[Circular]")
    def __repr__(self) -> str:
        return f"Set({len(self.items)}) {{" + ", ".join(repr(x) for x in self.items) + "}"

@dataclass(eq=False)
class JsMap:
    entries: List[Tuple['JsValue', 'JsValue']] = field(default_factory=list)
    @recursive_repr("[Circular]")
    def __repr__(self) -> str:
        pairs = ", ".join(f"{k!r} => {v!r}" for k, v in self.entries)
        return f"Map({len(self.entries)}) {{{pairs}}}"

JsValue: TypeAlias = (
    JsUndefined
    | JsNull
    | JsBool
    | JsNumber
    | JsBigInt
    | JsString
    | JsSymbol
    | JsArray
    | JsObject
    | JsBoxed
    | JsFunction
    | JsDate
    | JsRegExp
    | JsSet
    | JsMap
)

_JS_VALUE_TYPES: Tuple[type, ...] = (
    JsUndefined,
    JsNull,
    JsBool,
    JsNumber,
    JsBigInt,
    JsString,
    JsSymbol,
    JsArray,
    JsObject,
    JsBoxed,
    JsFunction,
    JsDate,
    JsRegExp,
    JsSet,
    JsMap,
)

UNDEFINED = JsUndefined()

def is_js_value(value: object) -> TypeGuard[JsValue]:
    return isinstance(value, _JS_VALUE_TYPES)

# ---------- Boundary coercion ----------

_RE_FLAGS = (
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
)

def _regexp_flags(pattern: re.Pattern) -> str:
    return "".join(ch for bit, ch in _RE_FLAGS if pattern.flags & bit)

def _number(value: object) -> JsValue:
    if isinstance(value, decimal.Decimal) and value.is_nan():
        return JsNumber(math.nan)
    try:
        return JsNumber(float(value))
    except OverflowError:
        if isinstance(value, numbers.Integral):
            return JsBigInt(int(value))
        return JsNumber(math.inf if value > 0 else -math.inf)

def to_value(value: object, memo: Optional[Dict[int, JsValue]] = None) -> JsValue:
    """Map an arbitrary Python object onto the value model.

    Never raises. `memo` maps id() of already converted containers to their
    values so that shared and self-referencing structures keep their identity;
    pass the same dict to convert several objects consistently.
    """
    if is_js_value(value):
        return value
    if value is None:
        return JsNull()
    if isinstance(value, bool):
        return JsBool(value)
    if isinstance(value, (numbers.Real, decimal.Decimal)):
        return _number(value)
    if isinstance(value, str):
        return JsString(value)

    if memo is None:
        memo = {}
    key = id(value)
    if key in memo:
        return memo[key]

    if isinstance(value, (list, tuple)):
        arr = JsArray()
        memo[key] = arr
        arr.items = [to_value(item, memo) for item in value]
        return arr

    if isinstance(value, dict):
        obj = JsObject()
        memo[key] = obj
        obj.slots = {str(k): to_value(v, memo) for k, v in value.items()}
        return obj

    if isinstance(value, Mapping):
        mp = JsMap()
        memo[key] = mp
        mp.entries = [(to_value(k, memo), to_value(v, memo)) for k, v in value.items()]
        return mp

    if isinstance(value, (set, frozenset)):
        st = JsSet()
        memo[key] = st
        st.items = [to_value(item, memo) for item in value]
        return st

    result: JsValue
    if isinstance(value, _dt.datetime):
        result = JsDate(value)
    elif isinstance(value, _dt.date):
        result = JsDate(_dt.datetime(value.year, value.month, value.day))
    elif isinstance(value, re.Pattern):
        pattern = value.pattern
        if isinstance(pattern, bytes):
            pattern = pattern.decode("latin-1")
        result = JsRegExp(pattern, _regexp_flags(value))
    elif callable(value):
        result = JsFunction(getattr(value, "__qualname__", type(value).__name__))
    else:
        result = JsObject(source=value)

    memo[key] = result
    return result

# ---------- Exceptions ----------

class RealtypeError(Exception):
    pass

class ReadError(RealtypeError):
    """Literal text could not be turned into a value."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class LiteralSyntaxError(ReadError):
    pass

class LiteralValueError(ReadError):
    """Well-formed literal naming an unknown binding or carrying bad arguments."""
