from __future__ import annotations

import pytest

from realtype.report import Reporter, deep_equal
from realtype.utils import flatten_once, render, strict_equals
from tests.support.harness import (
    UNDEFINED,
    JsArray,
    JsNull,
    JsNumber,
    JsObject,
    JsString,
    JsSymbol,
    assert_lines,
    read_value,
    report_lines,
)

SHARED = {"k": 1}

EQUAL_CASES = [
    pytest.param(1, 1, True, id="numbers"),
    pytest.param(1, 1.0, True, id="int-float"),
    pytest.param(0.0, -0.0, True, id="signed-zero"),
    pytest.param(float("nan"), float("nan"), False, id="nan"),
    pytest.param("a", "a", True, id="strings"),
    pytest.param("1", 1, False, id="no-coercion"),
    pytest.param(True, 1, False, id="bool-is-not-number"),
    pytest.param(None, None, True, id="null"),
    pytest.param(None, UNDEFINED, False, id="null-vs-undefined"),
    pytest.param({}, {}, False, id="distinct-objects"),
    pytest.param(SHARED, SHARED, True, id="same-object"),
    pytest.param([], [], True, id="empty-arrays"),
    pytest.param(["a", 1, None], ["a", 1, None], True, id="identical-copy"),
    pytest.param(["a", 1], ["a", 2], False, id="changed-element"),
    pytest.param([1, 2], [1, 2, 3], False, id="length-mismatch"),
    pytest.param([[1, 2], [3]], [[1], [2, 3]], True, id="nesting-shape-ignored"),
    pytest.param([[1, 2], [3, 4]], [[1, 2], [3, 5]], True, id="only-outer-length-positions"),
    pytest.param([[1, 2], [3, 4]], [[1, 9], [3, 4]], False, id="difference-within-window"),
    pytest.param([[1]], [1], True, id="flattened-singleton"),
    pytest.param([[]], [UNDEFINED], True, id="missing-position-is-undefined"),
    pytest.param([[[1]]], [[[1]]], False, id="second-level-by-identity"),
    pytest.param([SHARED], [SHARED], True, id="shared-element"),
    pytest.param([float("nan")], [float("nan")], False, id="nan-element"),
    pytest.param([1], 1, False, id="array-vs-scalar"),
    pytest.param(("boolean", 3), ["boolean", 3], True, id="tuple-vs-list"),
]


@pytest.mark.parametrize("a, b, expected", EQUAL_CASES)
def test_deep_equal(a: object, b: object, expected: bool) -> None:
    assert deep_equal(a, b) is expected


def test_deep_equal_on_js_values() -> None:
    sym = JsSymbol("x")
    assert deep_equal(sym, sym)
    assert not deep_equal(JsSymbol("x"), JsSymbol("x"))
    obj = JsObject()
    assert deep_equal(JsArray([obj]), JsArray([obj]))
    assert not deep_equal(read_value("[{}]"), read_value("[{}]"))


def test_self_referencing_arrays_do_not_recurse() -> None:
    loop: list = [1]
    loop.append(loop)
    assert deep_equal(loop, loop)
    assert render(loop) == "[1, [Circular]]"


def test_strict_equals_by_kind() -> None:
    assert strict_equals(JsString("a"), JsString("a"))
    assert strict_equals(JsNull(), JsNull())
    assert not strict_equals(JsNull(), UNDEFINED)
    assert not strict_equals(JsNumber(1.0), JsString("1"))


def test_flatten_once_merges_one_level() -> None:
    inner = JsArray([JsNumber(2.0)])
    deep = JsArray([inner])
    flat = flatten_once(JsArray([JsNumber(1.0), inner, deep]))
    assert flat == [JsNumber(1.0), JsNumber(2.0), inner]


def test_pass_and_fail_lines(reporter) -> None:
    rep, out = reporter
    rep.section("count_real_types")
    assert rep.check("copy passes", [["boolean", 3]], [["boolean", 3]])
    assert not rep.check("changed element fails", ["a", "b"], ["a", "c"])
    rep.close()

    assert_lines(
        out,
        [
            "# count_real_types",
            "  [PASS] copy passes",
            "  [FAIL] changed element fails: expected ['a', 'c'], got ['a', 'b']",
            "",
        ],
    )
    assert (rep.passed, rep.failed, rep.total) == (1, 1, 2)
    assert rep.failures == ["changed element fails"]


def test_failure_renders_special_values(reporter) -> None:
    rep, out = reporter
    rep.check("specials", [float("nan"), None, UNDEFINED], [float("-inf"), True, "x"])
    assert report_lines(out) == [
        "[FAIL] specials: expected [-Infinity, true, 'x'], got [NaN, null, undefined]"
    ]


def test_sections_close_previous_group(reporter) -> None:
    rep, out = reporter
    rep.close()
    rep.section("first")
    rep.check("one", 1, 1)
    rep.section("second")
    rep.check("two", 2, 2)
    rep.close()

    assert_lines(
        out,
        [
            "# first",
            "  [PASS] one",
            "",
            "# second",
            "  [PASS] two",
            "",
        ],
    )
    assert rep.current_section is None


def test_assertions_keep_running_after_failures(reporter) -> None:
    rep, out = reporter
    for i in range(3):
        rep.check(f"case {i}", i, 0)

    lines = report_lines(out)
    assert len(lines) == 3
    assert lines[0].startswith("[PASS]")
    assert all(line.startswith("[FAIL]") for line in lines[1:])


def test_error_lines_name_the_exception(reporter) -> None:
    rep, out = reporter
    rep.section("errors")
    rep.error("boom", ValueError("bad input"))
    rep.note("informational")

    assert report_lines(out) == [
        "# errors",
        "  [FAIL] boom: ValueError: bad input",
        "  [INFO] informational",
    ]
    assert rep.summary() == ["Total cases: 1", "Failures: 1"]


def test_reporter_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    rep = Reporter()
    rep.check("stdout", 1, 1)
    assert capsys.readouterr().out == "[PASS] stdout\n"
