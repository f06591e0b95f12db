"""Report view-model builder — shapes run records for rendering."""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from axe_baseline.models.outcome import OutcomeEvent, TestRunRecord
from axe_baseline.models.scan_result import AffectedNode, ScanFinding

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class FixSummary(BaseModel):
    highlight: str = ""
    items: list[str] = Field(default_factory=list)


class NodeView(BaseModel):
    index: int
    target_nodes: str = ""
    html: str = ""
    fix_summaries: list[FixSummary] = Field(default_factory=list)


class ViolationView(BaseModel):
    index: int
    id: str
    help: str = ""
    help_url: str = ""
    wcag: str = ""
    description: str = ""
    impact: str = ""
    tags: list[str] = Field(default_factory=list)
    nodes: list[NodeView] = Field(default_factory=list)


class CheckView(BaseModel):
    name: str
    failed: bool
    context: dict[str, Any] = Field(default_factory=dict)


class TestSectionView(BaseModel):
    __test__ = False

    name: str
    anchor_id: str
    url: str = ""
    fail_message: Optional[str] = None
    violations_summary: str = ""
    violations: list[ViolationView] = Field(default_factory=list)
    checks: list[CheckView] = Field(default_factory=list)


class ReportViewModel(BaseModel):
    tests: list[TestSectionView] = Field(default_factory=list)

    @property
    def total_violations(self) -> int:
        return sum(len(t.violations) for t in self.tests)


def anchor_id(test_name: str, index: int) -> str:
    """Derive a URL fragment from a test name; ``index`` is 1-based."""
    anchor = _NON_ALNUM.sub("-", test_name.lower()).rstrip("-")
    return anchor or f"test-{index}"


def wcag_from_tags(tags: Iterable[str]) -> str:
    return ", ".join(tags)


def build_fix_summary(node: AffectedNode) -> FixSummary:
    return FixSummary(highlight=node.headline, items=node.sub_points)


def build_violation(index: int, finding: ScanFinding) -> ViolationView:
    nodes = [
        NodeView(
            index=i,
            target_nodes=", ".join(node.targets),
            html=node.html,
            fix_summaries=[build_fix_summary(node)],
        )
        for i, node in enumerate(finding.nodes, 1)
    ]
    return ViolationView(
        index=index,
        id=finding.rule_id,
        help=finding.help,
        help_url=finding.help_url,
        wcag=wcag_from_tags(finding.tags),
        description=finding.description,
        impact=finding.impact.value,
        tags=list(finding.tags),
        nodes=nodes,
    )


def _check_view(event: OutcomeEvent) -> CheckView:
    return CheckView(name=event.check_name, failed=event.failed, context=dict(event.context))


def build_report_view_model(records: Iterable[TestRunRecord]) -> ReportViewModel:
    """Build the consolidated document for every recorded test, in run order."""
    sections = []
    used_anchors: set[str] = set()

    for index, record in enumerate(records, 1):
        findings = [e.finding for e in record.events if e.finding is not None]
        violations = [build_violation(i, f) for i, f in enumerate(findings, 1)]

        base = anchor = anchor_id(record.test_name, index)
        suffix = index
        while anchor in used_anchors:
            anchor = f"{base}-{suffix}"
            suffix += 1
        used_anchors.add(anchor)

        sections.append(TestSectionView(
            name=record.test_name,
            anchor_id=anchor,
            url=record.url,
            fail_message=record.failure_message,
            violations_summary=f"Found {len(violations)} violations",
            violations=violations,
            checks=[_check_view(e) for e in record.events],
        ))

    return ReportViewModel(tests=sections)
