from __future__ import annotations

import datetime
import re
from collections import ChainMap, OrderedDict
from decimal import Decimal
from fractions import Fraction

import pytest

from realtype.classify import (
    all_same_basic_type,
    all_unique_real_types,
    basic_type_of,
    basic_types_of,
    count_real_types,
    real_type_of,
    real_types_of,
)
from tests.support.harness import (
    UNDEFINED,
    JsArray,
    JsBigInt,
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
    read_values,
    verify_labels,
)


class Opaque:
    pass


LABEL_CASES = [
    pytest.param(True, "boolean", "boolean", id="bool"),
    pytest.param(0, "number", "number", id="int-zero"),
    pytest.param(-2.5, "number", "number", id="float"),
    pytest.param(float("nan"), "number", "NaN", id="nan"),
    pytest.param(float("inf"), "number", "Infinity", id="pos-inf"),
    pytest.param(float("-inf"), "number", "Infinity", id="neg-inf"),
    pytest.param(10**400, "bigint", "bigint", id="int-overflows-float"),
    pytest.param(Fraction(10**400, 3), "number", "Infinity", id="fraction-overflows-float"),
    pytest.param(Decimal("1.5"), "number", "number", id="decimal"),
    pytest.param(Decimal("NaN"), "number", "NaN", id="decimal-nan"),
    pytest.param(Decimal("sNaN"), "number", "NaN", id="decimal-signaling-nan"),
    pytest.param(Decimal("-Infinity"), "number", "Infinity", id="decimal-neg-inf"),
    pytest.param(Decimal("1e400"), "number", "Infinity", id="decimal-beyond-float"),
    pytest.param("x", "string", "string", id="str"),
    pytest.param("", "string", "string", id="empty-str"),
    pytest.param(None, "object", "null", id="none-is-null"),
    pytest.param(UNDEFINED, "undefined", "undefined", id="undefined"),
    pytest.param([], "object", "array", id="list"),
    pytest.param((1, 2), "object", "array", id="tuple"),
    pytest.param([[1], [2]], "object", "array", id="nested-list"),
    pytest.param({}, "object", "object", id="dict"),
    pytest.param(OrderedDict(a=1), "object", "object", id="dict-subclass"),
    pytest.param(ChainMap({"a": 1}), "object", "map", id="mapping"),
    pytest.param({1, 2}, "object", "set", id="set"),
    pytest.param(frozenset(), "object", "set", id="frozenset"),
    pytest.param(datetime.datetime(2024, 1, 1), "object", "date", id="datetime"),
    pytest.param(datetime.date(2024, 1, 1), "object", "date", id="date"),
    pytest.param(re.compile("a+", re.I), "object", "regexp", id="pattern"),
    pytest.param(len, "function", "function", id="builtin"),
    pytest.param(lambda: None, "function", "function", id="lambda"),
    pytest.param(Opaque, "function", "function", id="class-is-callable"),
    pytest.param(Opaque(), "object", "object", id="opaque-instance"),
    pytest.param(b"bytes", "object", "object", id="bytes"),
    pytest.param(1j, "object", "object", id="complex"),
    pytest.param(JsSymbol("id"), "symbol", "symbol", id="symbol"),
    pytest.param(JsBigInt(11), "bigint", "bigint", id="bigint"),
    pytest.param(JsBoxed(JsString("12")), "object", "object", id="boxed-string"),
    pytest.param(JsBoxed(JsNumber(float("nan"))), "object", "object", id="boxed-nan"),
    pytest.param(JsFunction(), "function", "function", id="js-function"),
    pytest.param(JsDate(None), "object", "date", id="invalid-date"),
    pytest.param(JsRegExp(".."), "object", "regexp", id="js-regexp"),
    pytest.param(JsSet(), "object", "set", id="js-set"),
    pytest.param(JsMap(), "object", "map", id="js-map"),
    pytest.param(JsNull(), "object", "null", id="js-null"),
    pytest.param(JsObject(), "object", "object", id="js-object"),
    pytest.param(JsArray(), "object", "array", id="js-array"),
]


@pytest.mark.parametrize("value, basic, real", LABEL_CASES)
def test_labels(value: object, basic: str, real: str) -> None:
    verify_labels(value, basic, real)


def test_basic_types_preserve_length_and_order() -> None:
    values = [1, "a", None, [], lambda: 0, UNDEFINED]
    types = basic_types_of(values)
    assert len(types) == len(values)
    assert types == ["number", "string", "object", "object", "function", "undefined"]


def test_sequence_functions_accept_js_arrays_and_sets() -> None:
    arr = JsArray([JsNumber(1.0), JsNull()])
    assert real_types_of(arr) == ["number", "null"]
    assert basic_types_of(JsSet([JsString("a")])) == ["string"]


def test_sequence_functions_accept_generators() -> None:
    assert real_types_of(x for x in (1, None)) == ["number", "null"]


def test_self_referencing_list_is_an_array() -> None:
    loop: list = []
    loop.append(loop)
    assert real_type_of(loop) == "array"
    assert real_types_of(loop) == ["array"]


SAME_CASES = [
    pytest.param([11, 12, 13], True, id="numbers"),
    pytest.param(["11", "12", "13"], True, id="strings"),
    pytest.param([123, float("nan"), float("inf")], True, id="number-like"),
    pytest.param([{}], True, id="single"),
    pytest.param([], True, id="empty-is-vacuous"),
    pytest.param([None, {}, []], True, id="object-category"),
    pytest.param([1, "1"], False, id="mixed"),
    pytest.param(["11", JsBoxed(JsString("12"))], False, id="boxed-string"),
]


@pytest.mark.parametrize("values, expected", SAME_CASES)
def test_all_same_basic_type(values: list, expected: bool) -> None:
    assert all_same_basic_type(values) is expected


UNIQUE_CASES = [
    pytest.param([], True, id="empty-is-vacuous"),
    pytest.param([True, 1, "x"], True, id="three-kinds"),
    pytest.param([True, 1, False], False, id="two-booleans"),
    pytest.param([1, float("nan"), float("inf")], True, id="number-refinements"),
    pytest.param([None, {}, []], True, id="object-refinements"),
    pytest.param([float("inf"), float("-inf")], False, id="both-infinities"),
]


@pytest.mark.parametrize("values, expected", UNIQUE_CASES)
def test_all_unique_real_types(values: list, expected: bool) -> None:
    assert all_unique_real_types(values) is expected


COUNT_CASES = [
    pytest.param(
        [True, None, True, True, {}],
        [("boolean", 3), ("null", 1), ("object", 1)],
        id="booleans-null-object",
    ),
    pytest.param(
        [[], "123", None, {}, 5],
        [("array", 1), ("null", 1), ("number", 1), ("object", 1), ("string", 1)],
        id="five-kinds",
    ),
    pytest.param(
        [float("nan"), "a", float("inf"), float("nan")],
        [("Infinity", 1), ("NaN", 2), ("string", 1)],
        id="uppercase-labels-first",
    ),
    pytest.param([], [], id="empty"),
]


@pytest.mark.parametrize("values, expected", COUNT_CASES)
def test_count_real_types(values: list, expected: list) -> None:
    assert count_real_types(values) == expected


def test_count_real_types_is_sorted_and_sums_to_length() -> None:
    values = read_values(
        "[true, 8, 'home', [1], {}, () => {}, undefined, null, NaN, -Infinity,"
        " new Date(), /x/g, new Set(), new Map(), Symbol(), 11n, 9, null]"
    )
    counts = count_real_types(values)
    labels = [label for label, _ in counts]
    assert labels == sorted(labels)
    assert sum(n for _, n in counts) == len(values)
    assert dict(counts)["null"] == 2
    assert dict(counts)["number"] == 2


def test_grouping_order_does_not_change_counts() -> None:
    forward = [{}, None, True, True, False]
    assert count_real_types(forward) == count_real_types(list(reversed(forward)))


def test_numbers_are_always_number_at_basic_level() -> None:
    assert {basic_type_of(v) for v in (1, float("nan"), float("-inf"))} == {"number"}
