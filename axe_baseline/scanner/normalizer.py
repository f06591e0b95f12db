"""Scan result normalizer — coerces raw axe output into typed findings."""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from axe_baseline.errors import MalformedResult
from axe_baseline.models.scan_result import AffectedNode, Impact, ScanFinding, ScanResult

logger = logging.getLogger(__name__)

TARGET_PATH_SEPARATOR = " >>> "


def normalize_scan_result(raw: Any) -> ScanResult:
    """Validate the top-level shape and coerce both collections.

    ``needsReview`` is preferred, ``incomplete`` (axe's own key) is accepted
    as a fallback. The input is never modified.
    """
    if not isinstance(raw, Mapping):
        raise MalformedResult(f"Axe returned invalid data: {raw!r}")
    if "violations" not in raw:
        raise MalformedResult(f"Axe returned invalid data, missing 'violations': {raw!r}")
    if "needsReview" in raw:
        needs_review = raw["needsReview"]
    elif "incomplete" in raw:
        needs_review = raw["incomplete"]
    else:
        raise MalformedResult(f"Axe returned invalid data, missing 'needsReview': {raw!r}")

    result = ScanResult(
        violations=_normalize_findings(raw["violations"], "violations"),
        needs_review=_normalize_findings(needs_review, "needsReview"),
    )
    logger.debug("Normalized %d violations and %d needs-review items",
                 len(result.violations), len(result.needs_review))
    return result


def _normalize_findings(items: Any, collection: str) -> list[ScanFinding]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise MalformedResult(f"'{collection}' must be a list, got {type(items).__name__}")
    return [_normalize_finding(item, collection) for item in items]


def _normalize_finding(item: Any, collection: str) -> ScanFinding:
    if not isinstance(item, Mapping) or not isinstance(item.get("id"), str):
        raise MalformedResult(f"Entry in '{collection}' has no rule id: {item!r}")

    nodes = [_normalize_node(n) for n in _as_list(item.get("nodes")) if isinstance(n, Mapping)]
    finding = ScanFinding(
        rule_id=item["id"],
        impact=Impact.coerce(item.get("impact")),
        description=_as_str(item.get("description")),
        help=_as_str(item.get("help")),
        help_url=_as_str(item.get("helpUrl")),
        tags=[str(t) for t in _as_list(item.get("tags"))],
        nodes=nodes,
        errors_by_selector=_normalize_errors(item["id"], item.get("errors")),
    )

    known = {t for node in finding.nodes for t in node.targets}
    unknown = [s for s in finding.errors_by_selector if s not in known]
    if unknown:
        logger.debug("Rule %s counts selectors not reported as node targets: %s",
                     finding.rule_id, unknown)
    return finding


def _normalize_node(node: Mapping[str, Any]) -> AffectedNode:
    return AffectedNode(
        targets=[coerce_target(t) for t in _as_list(node.get("target"))],
        html=_as_str(node.get("html")),
        failure_summary=_as_str(node.get("failureSummary")),
    )


def _normalize_errors(rule_id: str, errors: Any) -> dict[str, int]:
    if errors is None or errors == []:
        # an empty JS object can arrive as an empty list
        return {}
    if not isinstance(errors, Mapping):
        raise MalformedResult(f"Selector counts of rule '{rule_id}' must be a mapping: {errors!r}")
    counts = {}
    for selector, count in errors.items():
        if (
            isinstance(count, bool)
            or not isinstance(count, (int, float))
            or not math.isfinite(count)
            or count != int(count)
        ):
            raise MalformedResult(
                f"Selector count for '{selector}' of rule '{rule_id}' is not an integer: {count!r}"
            )
        counts[str(selector)] = int(count)
    return counts


def coerce_target(target: Any) -> str:
    """Flatten axe's nested (shadow DOM / iframe) target paths into one string."""
    if isinstance(target, list):
        return TARGET_PATH_SEPARATOR.join(coerce_target(t) for t in target)
    return str(target)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)
