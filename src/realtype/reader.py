"""Read JavaScript literal text into the value model.

Only literals are understood: primitives, array and object literals, regex
literals, function expressions (kept as opaque source text), `Symbol(...)` and
the handful of built-in constructors whose instances the classifier
distinguishes. There is no operator evaluation beyond unary signs on numbers.
"""

from __future__ import annotations

import math
import re
from functools import lru_cache
from typing import List, Optional, Tuple

from lark import Lark, Token, Transformer, Tree, UnexpectedInput
from lark.exceptions import UnexpectedCharacters, UnexpectedToken, VisitError
from lark.visitors import v_args

from .stdlib import (
    CALLS,
    CONSTRUCTORS,
    check_regexp_flags,
    is_prefixed_integer,
    prefixed_to_float,
)
from .types import (
    UNDEFINED,
    JsArray,
    JsBigInt,
    JsBool,
    JsFunction,
    JsNull,
    JsNumber,
    JsObject,
    JsRegExp,
    JsString,
    JsValue,
    LiteralSyntaxError,
    LiteralValueError,
    ReadError,
)

GRAMMAR = r'''
?start: value

?value: SIGN value                          -> signed
      | atom

?atom: NUMBER                               -> number
     | BIGINT                               -> bigint
     | STRING                               -> string
     | REGEX                                -> regex
     | FUNC                                 -> function
     | array
     | object
     | IDENT                                -> name
     | IDENT "(" [args] ")"                 -> call
     | "new" IDENT ["(" [args] ")"]         -> construct
     | "(" value ")"

array: "[" [_items] "]"
_items: value ("," value)* [","]
args: value ("," value)*

object: "{" [_fields] "}"
_fields: field ("," field)* [","]
field: key ":" value
?key: IDENT | STRING | NUMBER

SIGN: "+" | "-"

BIGINT.3: /(?:0[xX][0-9a-fA-F]+|0[bB][01]+|0[oO][0-7]+|\d+)n/
NUMBER: /0[xX][0-9a-fA-F]+|0[bB][01]+|0[oO][0-7]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?/
STRING: /'(?:\\.|[^'\\\n])*'|"(?:\\.|[^"\\\n])*"/
REGEX: /\/(?:\\.|\[(?:\\.|[^\]\\\n])*\]|[^\/\\\n\[*])(?:\\.|\[(?:\\.|[^\]\\\n])*\]|[^\/\\\n\[])*\/[dgimsuyv]*/

// Bodies are opaque; nested braces are not supported.
FUNC.2: /(?:function\b\s*[A-Za-z_$]*\s*\([^()]*\)\s*\{[^{}]*\}|(?:\([^()]*\)|[A-Za-z_$][A-Za-z0-9_$]*)\s*=>\s*(?:\{[^{}]*\}|[^,\]\}\)\n{][^,\]\}\)\n]*))/

IDENT: /[A-Za-z_$][A-Za-z0-9_$]*/

%import common.WS
%ignore WS
'''

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)", re.DOTALL)


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(
        GRAMMAR,
        parser="lalr",
        start="start",
        maybe_placeholders=False,
        propagate_positions=True,
    )


def _unescape(body: str) -> str:
    def sub(m: re.Match) -> str:
        esc = m.group(1)
        if esc.startswith("u{"):
            code = int(esc[2:-1], 16)
            if code > 0x10FFFF:
                raise LiteralSyntaxError("Undefined Unicode code-point")
            return chr(code)
        if esc[0] in "ux" and len(esc) > 1:
            return chr(int(esc[1:], 16))
        return _ESCAPES.get(esc, esc)

    return _ESCAPE_RE.sub(sub, body)


def _parse_int(text: str) -> int:
    return int(text, 0) if is_prefixed_integer(text) else int(text)


def _parse_number(text: str) -> float:
    if is_prefixed_integer(text):
        return prefixed_to_float(text)
    return float(text)


def _position(tok: Optional[Token]) -> Tuple[Optional[int], Optional[int]]:
    if tok is None:
        return None, None
    return getattr(tok, "line", None), getattr(tok, "column", None)


def _node_position(node: object) -> Tuple[Optional[int], Optional[int]]:
    if isinstance(node, Token):
        return _position(node)
    if isinstance(node, Tree) and not node.meta.empty:
        return node.meta.line, node.meta.column
    return None, None


_NAMES = {
    "true": lambda: JsBool(True),
    "false": lambda: JsBool(False),
    "null": JsNull,
    "undefined": lambda: UNDEFINED,
    "NaN": lambda: JsNumber(math.nan),
    "Infinity": lambda: JsNumber(math.inf),
}


@v_args(inline=True)
class LiteralBuilder(Transformer):
    """Build fresh value-model instances from a parse tree."""

    def number(self, tok: Token) -> JsNumber:
        return JsNumber(_parse_number(str(tok)))

    def bigint(self, tok: Token) -> JsBigInt:
        digits = str(tok)[:-1]
        return JsBigInt(_parse_int(digits))

    def string(self, tok: Token) -> JsString:
        return JsString(_unescape(str(tok)[1:-1]))

    def regex(self, tok: Token) -> JsRegExp:
        text = str(tok)
        end = text.rindex("/")
        flags = text[end + 1:]
        self._invoke(lambda _: check_regexp_flags(flags), tok, [])
        return JsRegExp(text[1:end], flags)

    def function(self, tok: Token) -> JsFunction:
        return JsFunction(str(tok).strip())

    def array(self, *items: JsValue) -> JsArray:
        return JsArray(list(items))

    def args(self, *items: JsValue) -> List[JsValue]:
        return list(items)

    def field(self, key: Token, value: JsValue) -> Tuple[str, JsValue]:
        if key.type == "STRING":
            return _unescape(str(key)[1:-1]), value
        if key.type == "NUMBER":
            return repr(JsNumber(_parse_number(str(key)))), value
        return str(key), value

    def object(self, *fields: Tuple[str, JsValue]) -> JsObject:
        return JsObject(dict(fields))

    def name(self, tok: Token) -> JsValue:
        factory = _NAMES.get(str(tok))
        if factory is None:
            line, col = _position(tok)
            raise LiteralValueError(f"{tok} is not defined", line, col)
        return factory()

    def call(self, tok: Token, args: Optional[List[JsValue]] = None) -> JsValue:
        fn = CALLS.get(str(tok))
        if fn is None:
            line, col = _position(tok)
            raise LiteralValueError(f"{tok} is not a known function", line, col)
        return self._invoke(fn, tok, args or [])

    def construct(self, tok: Token, args: Optional[List[JsValue]] = None) -> JsValue:
        ctor = CONSTRUCTORS.get(str(tok))
        if ctor is None:
            line, col = _position(tok)
            raise LiteralValueError(f"{tok} is not a constructor", line, col)
        return self._invoke(ctor, tok, args or [])

    def signed(self, sign: Token, operand: JsValue) -> JsValue:
        match operand:
            case JsNumber(value=n):
                return JsNumber(-n if sign == "-" else n)
            case JsBigInt(value=i) if sign == "-":
                return JsBigInt(-i)
        line, col = _position(sign)
        raise LiteralValueError(f"unary {sign} needs a number, got {operand!r}", line, col)

    @staticmethod
    def _invoke(fn, tok: Token, args: List[JsValue]) -> JsValue:
        try:
            return fn(args)
        except LiteralValueError as exc:
            if exc.line is None:
                exc.line, exc.column = _position(tok)
            raise


def _syntax_error(exc: UnexpectedInput) -> LiteralSyntaxError:
    line = getattr(exc, "line", None)
    col = getattr(exc, "column", None)
    if isinstance(exc, UnexpectedCharacters):
        return LiteralSyntaxError(f"unexpected character {exc.char!r}", line, col)
    if isinstance(exc, UnexpectedToken):
        if exc.token.type == "$END":
            return LiteralSyntaxError("unexpected end of input", line, col)
        return LiteralSyntaxError(f"unexpected {str(exc.token)!r}", line, col)
    return LiteralSyntaxError("invalid literal", line, col)


def read_value(source: str) -> JsValue:
    """Parse one literal expression and build its value.

    Raises LiteralSyntaxError on malformed text and LiteralValueError on
    unknown names or bad constructor arguments.
    """
    try:
        tree = _parser().parse(source)
    except UnexpectedInput as exc:
        raise _syntax_error(exc) from None

    try:
        return LiteralBuilder().transform(tree)
    except VisitError as exc:
        orig = exc.orig_exc
        line, col = _node_position(exc.obj)
        if isinstance(orig, ReadError):
            if orig.line is None:
                orig.line, orig.column = line, col
            raise orig from None
        raise LiteralValueError(f"{type(orig).__name__}: {orig}", line, col) from orig


def read_values(source: str) -> List[JsValue]:
    """Parse an array literal and return its items; any other literal is a
    one-item list."""
    value = read_value(source)
    if isinstance(value, JsArray):
        return list(value.items)
    return [value]
