"""Declared baseline of tolerated accessibility findings.

A baseline maps an axe rule id to exactly one of two expectations:

* an integer, the total number of occurrences summed over all selectors
  (``TotalCount``), or
* a mapping of selector to integer, the occurrences expected per selector
  (``PerSelectorCount``). The set of selectors must match exactly.

The wrapped form ``{"rule": {"count": ...}}`` is accepted as well.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, Field

from axe_baseline.errors import InvalidBaseline


class TotalCount(BaseModel):
    kind: Literal["total"] = "total"
    count: int


class PerSelectorCount(BaseModel):
    kind: Literal["per_selector"] = "per_selector"
    counts: dict[str, int] = Field(default_factory=dict)


BaselineEntry = Annotated[Union[TotalCount, PerSelectorCount], Field(discriminator="kind")]


def _check_count(rule_id: str, value: Any, selector: str | None = None) -> int:
    where = f"rule '{rule_id}'" if selector is None else f"selector '{selector}' of rule '{rule_id}'"
    # bool is an int subclass; True is not a meaningful count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidBaseline(f"Count for {where} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidBaseline(f"Count for {where} must not be negative, got {value}")
    return value


def parse_entry(rule_id: str, value: Any) -> TotalCount | PerSelectorCount:
    """Decide the variant of a single declaration."""
    if isinstance(value, Mapping) and set(value.keys()) == {"count"}:
        value = value["count"]

    if isinstance(value, Mapping):
        counts = {}
        for selector, count in value.items():
            if not isinstance(selector, str):
                raise InvalidBaseline(f"Selector of rule '{rule_id}' must be a string, got {selector!r}")
            counts[selector] = _check_count(rule_id, count, selector)
        return PerSelectorCount(counts=counts)

    return TotalCount(count=_check_count(rule_id, value))


def parse_baseline(raw: Mapping[str, Any] | None) -> dict[str, TotalCount | PerSelectorCount]:
    """Convert a user declaration into typed entries, keeping declaration order."""
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidBaseline(f"Baseline must be a mapping of rule id to expectation, got {type(raw).__name__}")

    entries: dict[str, TotalCount | PerSelectorCount] = {}
    for rule_id, value in raw.items():
        if not isinstance(rule_id, str) or not rule_id:
            raise InvalidBaseline(f"Rule id must be a non-empty string, got {rule_id!r}")
        if isinstance(value, (TotalCount, PerSelectorCount)):
            entries[rule_id] = value
        else:
            entries[rule_id] = parse_entry(rule_id, value)
    return entries


def load_baseline(path: str | Path) -> dict[str, TotalCount | PerSelectorCount]:
    """Load a baseline declaration from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Baseline file not found: {path}")
    with open(path) as f:
        data = json.load(f)
    return parse_baseline(data)
