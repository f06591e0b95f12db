"""Aggregation of outcome events into a single verdict per test."""

from __future__ import annotations

from typing import Iterable

from axe_baseline.models.outcome import OutcomeEvent, Verdict


def aggregate(events: Iterable[OutcomeEvent]) -> Verdict:
    """Fail iff any event failed.

    Baseline-category failures are part of the same failed set; they are only
    called out separately in the message.
    """
    failed = [e for e in events if e.failed]
    if not failed:
        return Verdict(passed=True)

    baseline_failed = sum(1 for e in failed if e.kind.is_baseline)
    message = f"{len(failed)} accessibility issues found"
    if baseline_failed:
        message += f", {baseline_failed} baseline violations not met"
    return Verdict(
        passed=False,
        failed_count=len(failed),
        baseline_failed_count=baseline_failed,
        message=message,
    )
