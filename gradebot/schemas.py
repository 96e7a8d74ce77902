"""
Pydantic schemas for autograder test results.

The autograding reporter hands results over as base64-encoded JSON; these
models validate that payload before any result is computed from it.
"""
import base64
import binascii
import json
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

from .errors import DecodeError


class TestResult(BaseModel):
    """Outcome of a single autograder test."""

    name: str = Field(..., description="Test name")
    status: str = Field(..., description="Test status, e.g. 'pass' or 'fail'")
    score: Optional[float] = Field(None, description="Points awarded")
    test_code: Optional[str] = Field(None, description="Command or code that ran")
    filename: Optional[str] = None
    line_no: Optional[int] = None
    duration: Optional[int] = Field(None, description="Run time in milliseconds")


class TestResults(BaseModel):
    """Full autograder report."""

    version: int = Field(..., description="Report format version")
    status: str = Field(..., description="Overall status")
    max_score: Optional[float] = None
    tests: List[TestResult] = Field(default_factory=list)

    def pairs(self) -> List[Tuple[str, str]]:
        """(test name, status) for every test, in report order."""
        return [(test.name, test.status) for test in self.tests]


def decode_test_results(payload: str) -> TestResults:
    """
    Decode a base64 JSON test report.

    Raises:
        DecodeError: If the payload is not base64, not UTF-8 JSON, or does
            not match the report schema
    """
    try:
        raw = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Test results are not valid base64: {e}") from e

    try:
        data = json.loads(raw.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Test results are not valid JSON: {e}") from e

    try:
        return TestResults.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Test results do not match the report format: {e}") from e
