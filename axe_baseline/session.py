"""Per-test accessibility check — scan, reconcile, record, decide."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

from playwright.async_api import Page

from axe_baseline.errors import (
    AccessibilityViolation,
    BaselineUnmet,
    EnvironmentUnavailable,
    ScanProviderError,
)
from axe_baseline.models.baseline import parse_baseline
from axe_baseline.models.config import AxeConfig, merge_configuration, parse_patch
from axe_baseline.models.outcome import OutcomeEvent, TestRunRecord, Verdict
from axe_baseline.reconciler.reconciler import reconcile
from axe_baseline.reconciler.verdict import aggregate
from axe_baseline.scanner.normalizer import normalize_scan_result
from axe_baseline.scanner.provider import PlaywrightAxeProvider, add_review_on_fail

logger = logging.getLogger(__name__)


class TestHost(Protocol):
    """What a test framework must provide to run checks."""
    __test__ = False

    test_name: str

    def skip(self, message: str) -> None: ...

    def fail(self, message: str, verdict: Verdict | None = None) -> None: ...


class RaisingHost:
    """Host for use outside a test framework; failures surface as exceptions."""

    def __init__(self, test_name: str = "accessibility check"):
        self.test_name = test_name

    def skip(self, message: str) -> None:
        raise EnvironmentUnavailable(message)

    def fail(self, message: str, verdict: Verdict | None = None) -> None:
        if verdict is None:
            raise ScanProviderError(message)
        if verdict.baseline_failed_count:
            raise BaselineUnmet(message, verdict)
        raise AccessibilityViolation(message, verdict)


class AxeSession:
    """Accessibility checks for one test.

    Events from every ``check`` call are appended to this test's trace in
    order; the trace becomes a ``TestRunRecord`` for the run report.
    """

    def __init__(
        self,
        host: TestHost,
        config: AxeConfig | None = None,
        provider: Optional[PlaywrightAxeProvider] = None,
    ):
        self.host = host
        self.config = config or AxeConfig()
        self.provider = provider or PlaywrightAxeProvider(self.config.axe_javascript)
        self.events: list[OutcomeEvent] = []
        self.url = ""
        self.failure_message: str | None = None

    def build_configuration(
        self, baseline: Mapping[str, Any], axe_configuration: Mapping[str, Any] | None
    ) -> dict[str, Any]:
        """Merge module and call configuration, then flag baselined rules for review."""
        configuration = merge_configuration({}, self.config.configuration_patch())
        if axe_configuration:
            configuration = merge_configuration(configuration, parse_patch(dict(axe_configuration)))
        return add_review_on_fail(baseline, configuration)

    async def check(
        self,
        page: Page | None,
        baseline: Mapping[str, Any] | None = None,
        run_options: dict[str, Any] | None = None,
        axe_configuration: dict[str, Any] | None = None,
    ) -> Verdict | None:
        """Scan ``page`` and compare the findings against ``baseline``.

        Returns the verdict, or None when the host swallowed a skip or a
        scan failure instead of raising.
        """
        if page is None:
            self.host.skip("No browser page available for accessibility checks")
            return None

        entries = parse_baseline(baseline)
        configuration = self.build_configuration(entries, axe_configuration)

        try:
            raw = await self.provider.scan(page, run_options, configuration)
            result = normalize_scan_result(raw)
        except ScanProviderError as e:
            logger.error("Accessibility scan failed for %s: %s", self.host.test_name, e)
            self.failure_message = str(e)
            self.host.fail(str(e))
            return None

        reconciliation = reconcile(result.violations, entries, result.needs_review)
        self.url = page.url
        self.events.extend(reconciliation.events)

        verdict = aggregate(reconciliation.events)
        logger.info("%s: %d checks, %d failed on %s", self.host.test_name,
                    len(reconciliation.events), verdict.failed_count, self.url)
        if not verdict.passed:
            self.failure_message = verdict.message
            self.host.fail(verdict.message, verdict)
        return verdict

    def to_record(self) -> TestRunRecord | None:
        """Build this test's record, or None if nothing was recorded."""
        if not self.events:
            return None
        return TestRunRecord(
            test_name=self.host.test_name,
            url=self.url,
            events=list(self.events),
            failure_message=self.failure_message,
        )
