"""Built-in functions and constructors the literal reader can call.

Registered by name via `register_call` / `register_constructor`; each takes the
already-read argument values and returns a fresh value.
"""

from __future__ import annotations

import datetime as _dt
import math
import re
from typing import Callable, Dict, List, Tuple

from .types import (
    UNDEFINED,
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
    JsValue,
    LiteralValueError,
)
from .utils import strict_equals

BuiltinFn = Callable[[List[JsValue]], JsValue]

CALLS: Dict[str, BuiltinFn] = {}
CONSTRUCTORS: Dict[str, BuiltinFn] = {}

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\Z")
_PREFIXED_RE = re.compile(r"0[xX][0-9a-fA-F]+\Z|0[bB][01]+\Z|0[oO][0-7]+\Z")
_REGEXP_FLAGS = set("dgimsuyv")

# Holes are materialized as undefined items, so lengths are capped well below 2**32.
MAX_ARRAY_LENGTH = 1_000_000

def register_call(name: str):
    def dec(fn: BuiltinFn):
        CALLS[name] = fn
        return fn

    return dec

def register_constructor(name: str):
    def dec(fn: BuiltinFn):
        CONSTRUCTORS[name] = fn
        return fn

    return dec

def is_prefixed_integer(text: str) -> bool:
    return _PREFIXED_RE.match(text) is not None

def prefixed_to_float(text: str) -> float:
    try:
        return float(int(text, 0))
    except OverflowError:
        return math.inf

def _arg(args: List[JsValue], index: int) -> JsValue:
    return args[index] if len(args) > index else UNDEFINED

# ---------- Conversions ----------

def to_boolean(value: JsValue) -> bool:
    match value:
        case JsUndefined() | JsNull():
            return False
        case JsBool(value=b):
            return b
        case JsNumber(value=n):
            return not (n == 0 or math.isnan(n))
        case JsBigInt(value=i):
            return i != 0
        case JsString(value=s):
            return s != ""
        case _:
            return True

def to_number(value: JsValue) -> float:
    match value:
        case JsUndefined():
            return math.nan
        case JsNull():
            return 0.0
        case JsBool(value=b):
            return 1.0 if b else 0.0
        case JsNumber(value=n):
            return n
        case JsBigInt(value=i):
            try:
                return float(i)
            except OverflowError:
                return math.inf if i > 0 else -math.inf
        case JsString(value=s):
            return string_to_number(s)
        case JsBoxed(primitive=p):
            return to_number(p)
        case JsArray(items=[]):
            return 0.0
        case JsArray(items=[only]):
            return string_to_number(to_string(only))
        case JsDate(moment=m) if m is not None:
            return _epoch_millis(m)
        case JsSymbol():
            raise LiteralValueError("Cannot convert a Symbol value to a number")
        case _:
            return math.nan

def string_to_number(s: str) -> float:
    s = s.strip()
    if not s:
        return 0.0
    if is_prefixed_integer(s):
        return prefixed_to_float(s)
    if s in {"Infinity", "+Infinity"}:
        return math.inf
    if s == "-Infinity":
        return -math.inf
    if _DECIMAL_RE.match(s):
        return float(s)
    return math.nan

def to_string(value: JsValue) -> str:
    match value:
        case JsUndefined():
            return "undefined"
        case JsNull():
            return "null"
        case JsString(value=s):
            return s
        case JsBigInt(value=i):
            return str(i)
        case JsBool() | JsNumber():
            return repr(value)
        case JsBoxed(primitive=p):
            return to_string(p)
        case JsArray(items=items):
            return ",".join(
                "" if isinstance(x, (JsUndefined, JsNull)) else to_string(x) for x in items
            )
        case JsFunction(source=src):
            return src
        case JsRegExp() | JsDate():
            return repr(value)
        case JsSymbol():
            raise LiteralValueError("Cannot convert a Symbol value to a string")
        case JsMap():
            return "[object Map]"
        case JsSet():
            return "[object Set]"
        case _:
            return "[object Object]"

def _epoch_millis(moment: _dt.datetime) -> float:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.timestamp() * 1000.0

def _same_value_zero(a: JsValue, b: JsValue) -> bool:
    if isinstance(a, JsNumber) and isinstance(b, JsNumber):
        if math.isnan(a.value) and math.isnan(b.value):
            return True
    return strict_equals(a, b)

def _iterable_items(value: JsValue, what: str) -> List[JsValue]:
    match value:
        case JsUndefined() | JsNull():
            return []
        case JsArray(items=items) | JsSet(items=items):
            return list(items)
        case JsString(value=s):
            return [JsString(ch) for ch in s]
        case JsMap(entries=entries):
            return [JsArray([k, v]) for k, v in entries]
    raise LiteralValueError(f"{what} argument is not iterable: {value!r}")

# ---------- Plain calls ----------

@register_call("Symbol")
def std_symbol(args: List[JsValue]) -> JsSymbol:
    desc = _arg(args, 0)
    return JsSymbol(None if isinstance(desc, JsUndefined) else to_string(desc))

@register_call("String")
def std_string(args: List[JsValue]) -> JsString:
    # Only the explicit call renders symbols; implicit conversion rejects them.
    if args and isinstance(args[0], JsSymbol):
        return JsString(repr(args[0]))
    return JsString(to_string(args[0]) if args else "")

@register_call("Number")
def std_number(args: List[JsValue]) -> JsNumber:
    return JsNumber(to_number(args[0]) if args else 0.0)

@register_call("Boolean")
def std_boolean(args: List[JsValue]) -> JsBool:
    return JsBool(to_boolean(_arg(args, 0)))

@register_call("BigInt")
def std_bigint(args: List[JsValue]) -> JsBigInt:
    arg = _arg(args, 0)
    match arg:
        case JsBigInt(value=i):
            return JsBigInt(i)
        case JsBool(value=b):
            return JsBigInt(int(b))
        case JsNumber(value=n) if math.isfinite(n) and n.is_integer():
            return JsBigInt(int(n))
        case JsString(value=s):
            text = s.strip() or "0"
            if is_prefixed_integer(text):
                return JsBigInt(int(text, 0))
            if re.fullmatch(r"[+-]?\d+", text):
                return JsBigInt(int(text))
    raise LiteralValueError(f"Cannot convert {arg!r} to a BigInt")

# ---------- Constructors (also callable without `new` where JS allows it) ----------

@register_constructor("Date")
def std_date(args: List[JsValue]) -> JsDate:
    if not args:
        return JsDate(_dt.datetime.now())

    if len(args) == 1:
        arg = args[0]
        if isinstance(arg, JsString):
            try:
                return JsDate(_dt.datetime.fromisoformat(arg.value.strip().replace("Z", "+00:00")))
            except ValueError:
                return JsDate(None)
        if isinstance(arg, JsDate):
            return JsDate(arg.moment)
        millis = to_number(arg)
        if not math.isfinite(millis):
            return JsDate(None)
        try:
            return JsDate(_dt.datetime.fromtimestamp(millis / 1000.0, tz=_dt.timezone.utc))
        except (OverflowError, OSError, ValueError):
            return JsDate(None)

    parts = [to_number(a) for a in args[:7]]
    if not all(math.isfinite(p) for p in parts):
        return JsDate(None)

    # year, month (0-based), then day/hour/minute/second/millisecond
    year, month, *rest = (int(p) for p in parts)
    day, hour, minute, second, millis = (rest + [1, 0, 0, 0, 0][len(rest):])[:5]
    try:
        return JsDate(_dt.datetime(year, month + 1, day, hour, minute, second, millis * 1000))
    except (ValueError, OverflowError):
        return JsDate(None)

@register_call("RegExp")
@register_constructor("RegExp")
def std_regexp(args: List[JsValue]) -> JsRegExp:
    source = _arg(args, 0)
    flags_arg = _arg(args, 1)

    if isinstance(source, JsRegExp):
        pattern = source.pattern
        flags = source.flags
    else:
        pattern = "" if isinstance(source, JsUndefined) else to_string(source)
        flags = ""

    if not isinstance(flags_arg, JsUndefined):
        flags = to_string(flags_arg)

    check_regexp_flags(flags)
    return JsRegExp(pattern or "(?:)", flags)

def check_regexp_flags(flags: str) -> None:
    if set(flags) - _REGEXP_FLAGS or len(set(flags)) != len(flags):
        raise LiteralValueError(f"Invalid regular expression flags '{flags}'")

@register_constructor("Set")
def std_set(args: List[JsValue]) -> JsSet:
    items: List[JsValue] = []
    for item in _iterable_items(_arg(args, 0), "Set"):
        if not any(_same_value_zero(item, seen) for seen in items):
            items.append(item)
    return JsSet(items)

@register_constructor("Map")
def std_map(args: List[JsValue]) -> JsMap:
    entries: List[Tuple[JsValue, JsValue]] = []
    for entry in _iterable_items(_arg(args, 0), "Map"):
        if not isinstance(entry, JsArray):
            raise LiteralValueError(f"Iterator value {entry!r} is not an entry object")
        key = _arg(entry.items, 0)
        val = _arg(entry.items, 1)
        for i, (existing, _) in enumerate(entries):
            if _same_value_zero(existing, key):
                entries[i] = (existing, val)
                break
        else:
            entries.append((key, val))
    return JsMap(entries)

@register_call("Array")
@register_constructor("Array")
def std_array(args: List[JsValue]) -> JsArray:
    if len(args) == 1 and isinstance(args[0], JsNumber):
        n = args[0].value
        if not (n >= 0 and n.is_integer() and n < 2**32):
            raise LiteralValueError("Invalid array length")
        if n > MAX_ARRAY_LENGTH:
            raise LiteralValueError(
                f"Array length {int(n)} exceeds the supported maximum of {MAX_ARRAY_LENGTH}"
            )
        return JsArray([UNDEFINED for _ in range(int(n))])
    return JsArray(list(args))

@register_constructor("Object")
def std_object(args: List[JsValue]) -> JsObject:
    return JsObject()

@register_constructor("String")
def std_boxed_string(args: List[JsValue]) -> JsBoxed:
    return JsBoxed(JsString(to_string(args[0]) if args else ""))

@register_constructor("Number")
def std_boxed_number(args: List[JsValue]) -> JsBoxed:
    return JsBoxed(std_number(args))

@register_constructor("Boolean")
def std_boxed_boolean(args: List[JsValue]) -> JsBoxed:
    return JsBoxed(std_boolean(args))
