"""Tests for the baseline reconciler and the check name formatter."""

import pytest

from axe_baseline.models.baseline import PerSelectorCount, TotalCount, parse_baseline
from axe_baseline.models.outcome import CheckKind
from axe_baseline.reconciler.check_names import format_check_name
from axe_baseline.reconciler.reconciler import reconcile
from axe_baseline.reconciler.verdict import aggregate

from conftest import make_finding


class TestCheckNames:
    """Tests for format_check_name()."""

    def test_unexpected_violation_capitalizes_rule(self):
        name = format_check_name(CheckKind.UNEXPECTED_VIOLATION, "color-contrast")
        assert name == "accessibility test Color-contrast does not fail"

    def test_baseline_labels_mention_baseline(self):
        for kind in CheckKind:
            if kind.is_baseline:
                assert "baseline" in format_check_name(kind, "label")

    def test_selector_label(self):
        name = format_check_name(CheckKind.BASELINE_SELECTOR_COUNT, "label")
        assert name == "number of found nodes for selector equals number from baseline"


class TestUnexpectedViolations:
    """Violations without a baseline entry."""

    def test_one_failed_event_per_finding_in_order(self):
        violations = [make_finding("region"), make_finding("color-contrast"), make_finding("image-alt")]
        result = reconcile(violations, {}, [])
        assert [e.context["rule"] for e in result.events] == ["region", "color-contrast", "image-alt"]
        assert all(e.failed for e in result.events)
        assert all(e.kind is CheckKind.UNEXPECTED_VIOLATION for e in result.events)

    def test_event_carries_finding(self):
        finding = make_finding("color-contrast")
        result = reconcile([finding], {}, [])
        assert result.events[0].finding == finding

    def test_no_baseline_single_violation(self):
        result = reconcile([make_finding("color-contrast")], {}, [])
        assert len(result.events) == 1
        assert result.events[0].check_name == "accessibility test Color-contrast does not fail"
        verdict = aggregate(result.events)
        assert verdict.passed is False
        assert verdict.message == "1 accessibility issues found"

    def test_baselined_violation_is_not_reported(self):
        baseline = parse_baseline({"region": 1})
        result = reconcile([make_finding("region")], baseline, [make_finding("region", {"#a": 1})])
        assert all(e.kind is not CheckKind.UNEXPECTED_VIOLATION for e in result.events)


class TestTotalCount:
    """Baseline entries declared as a total count."""

    def test_matching_total_passes(self):
        baseline = parse_baseline({"label": 1})
        result = reconcile([], baseline, [make_finding("label", {"#a": 1})])
        assert len(result.events) == 1
        event = result.events[0]
        assert event.kind is CheckKind.BASELINE_TOTAL_COUNT
        assert event.failed is False
        assert aggregate(result.events).passed is True
        assert result.residual == {}

    def test_total_sums_all_selectors(self):
        baseline = parse_baseline({"label": 5})
        result = reconcile([], baseline, [make_finding("label", {"#a": 2, ".b": 3})])
        assert result.events[0].failed is False
        assert result.events[0].context["actual_count"] == 5

    def test_mismatched_total_fails(self):
        baseline = parse_baseline({"label": 3})
        result = reconcile([], baseline, [make_finding("label", {"#a": 1})])
        event = result.events[0]
        assert event.failed is True
        assert event.context == {"rule": "label", "expected_count": 3, "actual_count": 1}
        assert result.residual == {"label": TotalCount(count=3)}


class TestPerSelectorCount:
    """Baseline entries declared per selector."""

    def test_event_count_is_selectors_plus_one(self):
        baseline = parse_baseline({"aria-allowed-role": {".footer": 2, ".header": 1, "#nav": 0}})
        finding = make_finding("aria-allowed-role", {".footer": 2, ".header": 1})
        result = reconcile([], baseline, [finding])
        kinds = [e.kind for e in result.events]
        assert kinds.count(CheckKind.BASELINE_SELECTOR_COUNT) == 3
        assert kinds.count(CheckKind.BASELINE_SELECTOR_SET) == 1
        assert kinds[-1] is CheckKind.BASELINE_SELECTOR_SET

    def test_count_mismatch_with_matching_selectors(self):
        baseline = parse_baseline({"aria-allowed-role": {".footer": 2}})
        finding = make_finding("aria-allowed-role", {".footer": 1})
        result = reconcile([], baseline, [finding])

        selector_event, set_event = result.events
        assert selector_event.failed is True
        assert selector_event.context["expected_count"] == 2
        assert selector_event.context["actual_count"] == 1
        assert set_event.failed is False
        assert aggregate(result.events).passed is False

    def test_missing_selector_counts_as_zero(self):
        baseline = parse_baseline({"label": {"#gone": 0, "#a": 1}})
        result = reconcile([], baseline, [make_finding("label", {"#a": 1})])
        gone = result.events[0]
        assert gone.context["actual_count"] == 0
        assert gone.failed is False
        # the selector sets still differ
        assert result.events[-1].failed is True
        assert result.events[-1].context["missing_selectors"] == ["#gone"]

    def test_extra_selector_fails_set_check(self):
        baseline = parse_baseline({"label": {"#a": 1}})
        result = reconcile([], baseline, [make_finding("label", {"#a": 1, "#b": 1})])
        assert result.events[0].failed is False
        assert result.events[1].failed is True
        assert result.events[1].context["extra_selectors"] == ["#b"]

    def test_selector_order_does_not_matter(self):
        baseline = parse_baseline({"label": {"#b": 1, "#a": 1}})
        result = reconcile([], baseline, [make_finding("label", {"#a": 1, "#b": 1})])
        assert not any(e.failed for e in result.events)
        assert result.residual == {}

    def test_residual_keeps_only_mismatched_selectors(self):
        baseline = parse_baseline({"label": {"#a": 1, "#b": 4}})
        result = reconcile([], baseline, [make_finding("label", {"#a": 1, "#b": 2})])
        assert result.residual == {"label": PerSelectorCount(counts={"#b": 4})}


class TestMissingBaselineFinding:
    """Declared expectations that never materialized."""

    def test_missing_rule_emits_issue_from_baseline(self):
        baseline = parse_baseline({"label": 1})
        result = reconcile([], baseline, [])
        assert len(result.events) == 1
        event = result.events[0]
        assert event.check_name == "accessibility issue from baseline"
        assert event.failed is True
        assert event.context == {"rule": "label"}
        assert "label" in result.residual

        verdict = aggregate(result.events)
        assert verdict.passed is False
        assert verdict.baseline_failed_count == 1

    def test_violation_source_is_not_used_for_baseline(self):
        baseline = parse_baseline({"label": 1})
        result = reconcile([make_finding("label")], baseline, [])
        assert [e.kind for e in result.events] == [CheckKind.BASELINE_MISSING]


class TestOrderingAndPurity:
    """Event order and idempotence."""

    def test_unexpected_events_come_first_then_declaration_order(self):
        baseline = parse_baseline({"b-rule": 1, "a-rule": {"#x": 1}})
        needs_review = [make_finding("a-rule", {"#x": 1}), make_finding("b-rule", {"#y": 1})]
        result = reconcile([make_finding("zz-rule")], baseline, needs_review)
        rules = [e.context["rule"] for e in result.events]
        assert rules == ["zz-rule", "b-rule", "a-rule", "a-rule"]

    def test_same_input_same_events(self):
        baseline = parse_baseline({"label": {"#a": 2}, "region": 3})
        violations = [make_finding("color-contrast")]
        needs_review = [make_finding("label", {"#a": 1}), make_finding("region", {"#r": 3})]

        first = reconcile(violations, baseline, needs_review)
        second = reconcile(violations, baseline, needs_review)
        assert first.events == second.events

    def test_baseline_is_not_mutated(self):
        baseline = parse_baseline({"label": 1, "region": {"#r": 1}})
        snapshot = dict(baseline)
        reconcile([], baseline, [make_finding("label", {"#a": 1}), make_finding("region", {"#r": 1})])
        assert baseline == snapshot

    def test_mismatch_does_not_stop_evaluation(self):
        baseline = parse_baseline({"first": 9, "second": 1})
        needs_review = [make_finding("first", {"#a": 1}), make_finding("second", {"#b": 1})]
        result = reconcile([make_finding("extra")], baseline, needs_review)
        assert [e.failed for e in result.events] == [True, True, False]


@pytest.mark.parametrize("count,failed", [(0, True), (1, False), (2, True)])
def test_total_count_boundaries(count, failed):
    result = reconcile([], parse_baseline({"label": count}), [make_finding("label", {"#a": 1})])
    assert result.events[0].failed is failed
