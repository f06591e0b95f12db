"""Human-readable labels for outcome events."""

from __future__ import annotations

from axe_baseline.models.outcome import CheckKind

_LABELS = {
    CheckKind.BASELINE_MISSING: "accessibility issue from baseline",
    CheckKind.BASELINE_TOTAL_COUNT: "number of found nodes equals number from baseline",
    CheckKind.BASELINE_SELECTOR_COUNT: "number of found nodes for selector equals number from baseline",
    CheckKind.BASELINE_SELECTOR_SET: "number of found nodes equals number from baseline",
}


def format_check_name(kind: CheckKind, rule_id: str) -> str:
    if kind is CheckKind.UNEXPECTED_VIOLATION:
        return f"accessibility test {rule_id[:1].upper()}{rule_id[1:]} does not fail"
    return _LABELS[kind]
