"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest
from playwright.async_api import Page

from axe_baseline.models.config import AxeConfig
from axe_baseline.models.outcome import CheckKind, OutcomeEvent, TestRunRecord
from axe_baseline.models.scan_result import AffectedNode, Impact, ScanFinding

pytest_plugins = ["pytester"]


# ============================================================================
# Raw scan data
# ============================================================================


def make_raw_finding(
    rule_id: str = "color-contrast",
    errors: dict[str, int] | None = None,
    targets: list[Any] | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Build one rule entry the way the browser script returns it."""
    errors = {"#a": 1} if errors is None else errors
    targets = targets if targets is not None else list(errors)
    entry = {
        "id": rule_id,
        "impact": "serious",
        "description": f"Ensures {rule_id} passes",
        "help": f"Fix {rule_id}",
        "helpUrl": f"https://dequeuniversity.com/rules/axe/4.9/{rule_id}",
        "tags": ["cat.color", "wcag2aa", "wcag143"],
        "nodes": [
            {
                "target": [t],
                "html": f'<div id="{t}">text</div>',
                "failureSummary": "Fix any of the following:\n  Element has insufficient contrast\n  Use a darker colour",
            }
            for t in targets
        ],
        "errors": errors,
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def raw_scan_result() -> dict[str, Any]:
    """A provider result with one violation and one needs-review item."""
    return {
        "violations": [make_raw_finding("color-contrast", {"#a": 1})],
        "needsReview": [make_raw_finding("label", {"#email": 1, "#name": 2})],
    }


# ============================================================================
# Typed findings
# ============================================================================


def make_finding(rule_id: str = "color-contrast", errors: dict[str, int] | None = None) -> ScanFinding:
    errors = {"#a": 1} if errors is None else errors
    return ScanFinding(
        rule_id=rule_id,
        impact=Impact.SERIOUS,
        description=f"Ensures {rule_id} passes",
        help=f"Fix {rule_id}",
        help_url=f"https://dequeuniversity.com/rules/axe/4.9/{rule_id}",
        tags=["wcag2a", "wcag412"],
        nodes=[
            AffectedNode(targets=[s], html=f"<p>{s}</p>", failure_summary="Fix this:\n  first\n  second")
            for s in errors
        ],
        errors_by_selector=errors,
    )


def make_record(name: str = "tests/test_home.py::test_home", failed: bool = True) -> TestRunRecord:
    finding = make_finding()
    return TestRunRecord(
        test_name=name,
        url="https://example.com/",
        events=[
            OutcomeEvent(
                check_name="accessibility test Color-contrast does not fail",
                kind=CheckKind.UNEXPECTED_VIOLATION,
                failed=failed,
                context={"rule": "color-contrast"},
                finding=finding,
            )
        ],
        failure_message="1 accessibility issues found" if failed else None,
    )


# ============================================================================
# Configuration and mocks
# ============================================================================


@pytest.fixture
def axe_config(tmp_path: Path) -> AxeConfig:
    """Config writing reports into a temporary directory."""
    return AxeConfig(output_dir=str(tmp_path / "reports"))


@pytest.fixture
def mock_page(raw_scan_result) -> AsyncMock:
    """Create a mock Playwright page that returns ``raw_scan_result`` from axe."""
    page = AsyncMock(spec=Page)
    page.url = "https://example.com/"
    page.add_script_tag = AsyncMock()
    page.evaluate = AsyncMock(return_value=raw_scan_result)
    return page
