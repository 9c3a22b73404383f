import pytest

from onecode.exercises.parser import FailedTest, parse_test_output


def test_parse_mixed_report() -> None:
    raw = (
        "Passed:10:TestCase1\n"
        "Failed:TestCase2:Number do not exist!\n"
        "Hint:Please check your logic\n"
        "Failed:TestCase3:Please handle empty list\n"
        "Hint:When numbers is empty, output should be 'False'"
    )
    outcome = parse_test_output(raw)

    assert outcome.passed_count == 1
    assert outcome.failed_count == 2
    assert outcome.total_points == 10
    assert outcome.total_test_cases == 3
    assert outcome.failed_tests == [
        FailedTest("TestCase2", "Number do not exist!"),
        FailedTest("TestCase3", "Please handle empty list"),
    ]


@pytest.mark.parametrize("raw", ["", None, "garbage", "\n\n", "Passed:\nFailed", "::::"])
def test_parse_degenerate_input_is_all_zero(raw) -> None:
    outcome = parse_test_output(raw)
    assert outcome.passed_count == 0
    assert outcome.failed_count == 0
    assert outcome.total_points == 0
    assert outcome.failed_tests == []


def test_hint_keeps_embedded_colons() -> None:
    outcome = parse_test_output("Failed:T1:expected a:b:c got c:b:a")
    assert outcome.failed_tests[0].hint == "expected a:b:c got c:b:a"


def test_empty_hint_is_none() -> None:
    outcome = parse_test_output("Failed:T1:\nFailed:T2")
    assert [t.hint for t in outcome.failed_tests] == [None, None]
    assert [t.test_name for t in outcome.failed_tests] == ["T1", "T2"]


def test_points_are_summed_and_bad_points_skipped() -> None:
    outcome = parse_test_output("Passed:4:a\r\nPassed:6:b\r\nPassed:x:c\nPassed:5")
    assert outcome.passed_count == 3
    assert outcome.total_points == 15


def test_failed_test_serialization() -> None:
    assert FailedTest("T", None).to_dict() == {"testName": "T", "hint": None}


@pytest.mark.parametrize("sep", ["\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029"])
def test_only_line_feed_separates_lines(sep) -> None:
    outcome = parse_test_output(f"Passed:5:t1{sep}Failed:t2:x\nFailed:t3:use a{sep}newline here")
    assert (outcome.passed_count, outcome.failed_count, outcome.total_points) == (1, 1, 5)
    assert outcome.failed_tests == [FailedTest("t3", f"use a{sep}newline here")]


@pytest.mark.parametrize("points", ["-5", "+5", "1_000", "\u00b2", " ", "5.0"])
def test_points_must_be_unsigned_digits(points) -> None:
    outcome = parse_test_output(f"Passed:10:ok\nPassed:{points}:odd")
    assert outcome.passed_count == 1
    assert outcome.total_points == 10
