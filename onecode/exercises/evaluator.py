"""
Submission evaluator

decode -> run on the execution service -> parse -> score -> record.

Compile errors never count as an attempt: no activity row, no record
write, no cache invalidation. Completed exercises are read-only from then
on and keep returning their stored score.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from onecode.core.cache import CacheStore, total_points_key
from onecode.core.errors import AlreadyProcessed, Conflict
from onecode.core.messages import ERROR_MESSAGES
from onecode.exercises.codec import combine_code_with_tests, decode_code, encode_code
from onecode.exercises.compiler import ExecutionClient
from onecode.exercises.parser import FailedTest, TestOutcome, parse_test_output
from onecode.exercises.records import CompletionRecord, CompletionRecordManager
from onecode.exercises.service import ExerciseService, ExerciseTests

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    failed_count: int = 0
    passed_count: int = 0
    failed_tests: List[FailedTest] = field(default_factory=list)
    error: Optional[str] = None
    points: int = 0
    is_completed: bool = False

    @classmethod
    def from_outcome(cls, outcome: TestOutcome, points: int, is_completed: bool) -> "SubmissionResult":
        return cls(
            failed_count=outcome.failed_count,
            passed_count=outcome.passed_count,
            failed_tests=list(outcome.failed_tests),
            points=points,
            is_completed=is_completed,
        )

    def to_dict(self) -> dict:
        return {
            "failedCount": self.failed_count,
            "passedCount": self.passed_count,
            "failedTests": [t.to_dict() for t in self.failed_tests],
            "error": self.error,
            "points": self.points,
            "isCompleted": self.is_completed,
        }


def score(total_points: int, max_points: int) -> tuple:
    """(points_earned, is_completed) for one run"""
    return min(total_points, max_points), total_points >= max_points


class SubmissionEvaluator:
    def __init__(
        self,
        exercises: ExerciseService,
        records: CompletionRecordManager,
        compiler: ExecutionClient,
        cache: CacheStore,
    ):
        self._exercises = exercises
        self._records = records
        self._compiler = compiler
        self._cache = cache

    async def evaluate(self, exercise_id: str, user_id: str, user_code: str) -> SubmissionResult:
        user_source = decode_code(user_code)

        meta = await self._exercises.get_exercise_tests(exercise_id)
        tests_source = decode_code(meta.tests)

        payload = encode_code(combine_code_with_tests(user_source, tests_source))
        execution = await self._compiler.run(payload, meta.language)

        if execution.error is not None:
            logger.info("[SUBMISSION] Compile error for user %s exercise %s", user_id, exercise_id)
            return SubmissionResult(error=execution.error)

        outcome = parse_test_output(execution.output)

        existing = await self._records.read(user_id, exercise_id)
        if existing is not None and existing.is_completed:
            logger.info("[SUBMISSION] Exercise %s already completed by %s", exercise_id, user_id)
            return SubmissionResult.from_outcome(outcome, existing.points_earned, True)

        await self._exercises.create_user_activity(user_id, exercise_id, meta.language)

        points, is_completed, wrote = await self._save(user_id, exercise_id, user_code, meta, outcome, existing)
        if wrote:
            await self._cache.invalidate(total_points_key(user_id))

        logger.info(
            "[SUBMISSION] user=%s exercise=%s passed=%s failed=%s points=%s completed=%s",
            user_id, exercise_id, outcome.passed_count, outcome.failed_count, points, is_completed,
        )
        return SubmissionResult.from_outcome(outcome, points, is_completed)

    async def _save(
        self,
        user_id: str,
        exercise_id: str,
        user_code: str,
        meta: ExerciseTests,
        outcome: TestOutcome,
        existing: Optional[CompletionRecord],
    ) -> tuple:
        """
        Create or update the completion record.
        Returns (points_earned, is_completed, wrote).
        """
        points, is_completed = score(outcome.total_points, meta.max_points)

        if existing is None:
            try:
                await self._records.create(user_id, exercise_id, meta.track_id, user_code, is_completed, points)
                return points, is_completed, True
            except AlreadyProcessed:
                logger.warning("[SUBMISSION] Concurrent first submission for %s/%s, re-reading", user_id, exercise_id)
                existing = await self._records.read(user_id, exercise_id)
                if existing is None:
                    raise Conflict(ERROR_MESSAGES["unable_to_create_activity"])
                if existing.is_completed:
                    return existing.points_earned, True, False

        # never lower a score already earned on an open record
        points = max(points, existing.points_earned)
        try:
            await self._records.update(user_id, exercise_id, user_code, is_completed, points)
            return points, is_completed, True
        except AlreadyProcessed:
            latest = await self._records.read(user_id, exercise_id)
            if latest is not None and latest.is_completed:
                return latest.points_earned, True, False
            raise Conflict(ERROR_MESSAGES["unable_to_create_activity"])
