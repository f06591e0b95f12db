"""Outcome events recorded during reconciliation and the records built from them."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from axe_baseline.models.scan_result import ScanFinding


class CheckKind(str, Enum):
    UNEXPECTED_VIOLATION = "unexpected_violation"
    BASELINE_MISSING = "baseline_missing"
    BASELINE_TOTAL_COUNT = "baseline_total_count"
    BASELINE_SELECTOR_COUNT = "baseline_selector_count"
    BASELINE_SELECTOR_SET = "baseline_selector_set"

    @property
    def is_baseline(self) -> bool:
        return self is not CheckKind.UNEXPECTED_VIOLATION


class OutcomeEvent(BaseModel):
    """One atomic check result. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    check_name: str
    kind: CheckKind
    failed: bool
    context: dict[str, Any] = Field(default_factory=dict)
    finding: Optional[ScanFinding] = None  # set for unexpected violations only


class Verdict(BaseModel):
    passed: bool
    failed_count: int = 0
    baseline_failed_count: int = 0
    message: str = ""


class TestRunRecord(BaseModel):
    """Everything one test recorded, consumed by the report builder."""
    __test__ = False  # not a pytest test class

    test_name: str
    url: str = ""
    events: list[OutcomeEvent] = Field(default_factory=list)
    failure_message: Optional[str] = None

    @property
    def violation_count(self) -> int:
        return sum(1 for e in self.events if e.finding is not None)
