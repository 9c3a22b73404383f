"""
Parser for the execution service's line oriented test report

    Passed:<points>:<testName>
    Failed:<testName>:<hint, may contain colons, may be empty>

Lines are split on LF only. Every other line is ignored, as is a Passed
line whose points are not an unsigned integer. parse_test_output never raises.
"""

from dataclasses import dataclass, field
from typing import List, Optional

PASSED_PREFIX = "Passed:"
FAILED_PREFIX = "Failed:"


@dataclass(frozen=True)
class FailedTest:
    test_name: str
    hint: Optional[str] = None

    def to_dict(self) -> dict:
        return {"testName": self.test_name, "hint": self.hint}


@dataclass
class TestOutcome:
    passed_count: int = 0
    failed_count: int = 0
    total_points: int = 0
    failed_tests: List[FailedTest] = field(default_factory=list)

    @property
    def total_test_cases(self) -> int:
        return self.passed_count + self.failed_count


def parse_test_output(raw: Optional[str]) -> TestOutcome:
    outcome = TestOutcome()
    if not raw:
        return outcome

    for line in raw.split("\n"):
        line = line.rstrip("\r")

        if line.startswith(PASSED_PREFIX):
            parts = line[len(PASSED_PREFIX):].split(":", 1)
            points_text = parts[0].strip()
            if not (points_text.isascii() and points_text.isdigit()):
                continue
            points = int(points_text)
            outcome.passed_count += 1
            outcome.total_points += points

        elif line.startswith(FAILED_PREFIX):
            parts = line[len(FAILED_PREFIX):].split(":", 1)
            test_name = parts[0]
            hint = parts[1] if len(parts) > 1 and parts[1] else None
            outcome.failed_count += 1
            outcome.failed_tests.append(FailedTest(test_name=test_name, hint=hint))

    return outcome
