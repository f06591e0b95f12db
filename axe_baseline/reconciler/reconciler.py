"""Baseline reconciler — compares scan findings against declared expectations.

Events are produced in a fixed order: one event per unexpected violation in
scan order, then the baseline checks in declaration order (selectors in
declaration order). A mismatch never stops the walk, so every declared and
every actual finding ends up in the trace.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from axe_baseline.models.baseline import PerSelectorCount, TotalCount
from axe_baseline.models.outcome import CheckKind, OutcomeEvent
from axe_baseline.models.scan_result import ScanFinding, ScanResult

from .check_names import format_check_name

logger = logging.getLogger(__name__)


@dataclass
class Reconciliation:
    events: list[OutcomeEvent] = field(default_factory=list)
    # Baseline entries that never matched or did not reconcile exactly
    residual: dict[str, TotalCount | PerSelectorCount] = field(default_factory=dict)

    @property
    def failed_events(self) -> list[OutcomeEvent]:
        return [e for e in self.events if e.failed]


def _event(
    kind: CheckKind,
    rule_id: str,
    failed: bool,
    context: dict[str, Any],
    finding: ScanFinding | None = None,
) -> OutcomeEvent:
    return OutcomeEvent(
        check_name=format_check_name(kind, rule_id),
        kind=kind,
        failed=failed,
        context=context,
        finding=finding,
    )


def reconcile(
    violations: list[ScanFinding],
    baseline: Mapping[str, TotalCount | PerSelectorCount],
    needs_review: list[ScanFinding],
) -> Reconciliation:
    """Walk violations and baseline expectations and record every check."""
    remaining: dict[str, TotalCount | PerSelectorCount] = dict(baseline)
    result = Reconciliation()

    for finding in violations:
        if finding.rule_id in baseline:
            continue
        result.events.append(_event(
            CheckKind.UNEXPECTED_VIOLATION,
            finding.rule_id,
            True,
            {"rule": finding.rule_id, "nodes": len(finding.nodes)},
            finding=finding,
        ))

    for rule_id, entry in baseline.items():
        finding = ScanResult.find(needs_review, rule_id)

        if finding is None:
            result.events.append(_event(
                CheckKind.BASELINE_MISSING, rule_id, True, {"rule": rule_id},
            ))
            continue

        if isinstance(entry, TotalCount):
            actual = finding.total_errors()
            failed = actual != entry.count
            result.events.append(_event(
                CheckKind.BASELINE_TOTAL_COUNT,
                rule_id,
                failed,
                {"rule": rule_id, "expected_count": entry.count, "actual_count": actual},
            ))
            if not failed:
                del remaining[rule_id]
            continue

        unmatched: dict[str, int] = {}
        for selector, expected in entry.counts.items():
            # A declared selector the scan did not report counts as zero occurrences
            actual = finding.errors_by_selector.get(selector, 0)
            failed = actual != expected
            result.events.append(_event(
                CheckKind.BASELINE_SELECTOR_COUNT,
                rule_id,
                failed,
                {
                    "rule": rule_id,
                    "selector": selector,
                    "expected_count": expected,
                    "actual_count": actual,
                },
            ))
            if failed:
                unmatched[selector] = expected

        expected_selectors = list(entry.counts)
        actual_selectors = list(finding.errors_by_selector)
        sets_differ = set(expected_selectors) != set(actual_selectors)
        result.events.append(_event(
            CheckKind.BASELINE_SELECTOR_SET,
            rule_id,
            sets_differ,
            {
                "rule": rule_id,
                "expected_selectors": expected_selectors,
                "actual_selectors": actual_selectors,
                "missing_selectors": [s for s in expected_selectors if s not in finding.errors_by_selector],
                "extra_selectors": [s for s in actual_selectors if s not in entry.counts],
            },
        ))

        if unmatched or sets_differ:
            remaining[rule_id] = PerSelectorCount(counts=unmatched)
        else:
            del remaining[rule_id]

    result.residual = remaining
    logger.debug("Reconciled %d events (%d failed), %d baseline entries unmatched",
                 len(result.events), len(result.failed_events), len(result.residual))
    return result
