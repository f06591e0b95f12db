"""Scan result data structures produced by the normalizer."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Impact(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SERIOUS = "serious"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, value: object) -> "Impact":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class AffectedNode(BaseModel):
    """One DOM node a rule reported on."""
    targets: list[str] = Field(default_factory=list)
    html: str = ""
    failure_summary: str = ""

    @property
    def headline(self) -> str:
        return self.failure_summary.split("\n", 1)[0]

    @property
    def sub_points(self) -> list[str]:
        lines = self.failure_summary.split("\n")[1:]
        return [line for line in lines if line.strip()]


class ScanFinding(BaseModel):
    """One rule-level violation or needs-review item."""
    rule_id: str
    impact: Impact = Impact.UNKNOWN
    description: str = ""
    help: str = ""
    help_url: str = ""
    tags: list[str] = Field(default_factory=list)
    nodes: list[AffectedNode] = Field(default_factory=list)
    errors_by_selector: dict[str, int] = Field(default_factory=dict)

    def total_errors(self) -> int:
        return sum(self.errors_by_selector.values())


class ScanResult(BaseModel):
    violations: list[ScanFinding] = Field(default_factory=list)
    needs_review: list[ScanFinding] = Field(default_factory=list)

    @staticmethod
    def find(findings: list[ScanFinding], rule_id: str) -> Optional[ScanFinding]:
        """Return the first finding for ``rule_id`` or None."""
        for finding in findings:
            if finding.rule_id == rule_id:
                return finding
        return None
