from typing import List, Optional

from pydantic import BaseModel, field_validator


class SubmitExerciseRequest(BaseModel):
    code: str  # base64

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        if not v or not v.strip():
            raise ValueError("code must not be empty")
        if len(v) > 200 * 1024:
            raise ValueError("Source code too large (max 200KB encoded)")
        return v.strip()


class FailedTestResponse(BaseModel):
    testName: str
    hint: Optional[str] = None


class SubmissionResponse(BaseModel):
    failedCount: int
    passedCount: int
    failedTests: List[FailedTestResponse] = []
    error: Optional[str] = None
    points: int
    isCompleted: bool
