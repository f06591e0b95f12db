"""Exception hierarchy for accessibility checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from axe_baseline.models.outcome import Verdict


class AxeBaselineError(Exception):
    """Base class for all errors raised by this package."""


class EnvironmentUnavailable(AxeBaselineError):
    """No browser page is available to scan; the test should be skipped."""


class ScanProviderError(AxeBaselineError):
    """The scan could not be executed in the browser."""


class MalformedResult(ScanProviderError):
    """The scan provider returned a structurally invalid result."""


class AccessibilityViolation(AxeBaselineError):
    """One or more unexpected or baseline-mismatched findings."""

    def __init__(self, message: str, verdict: Verdict | None = None):
        super().__init__(message)
        self.verdict = verdict


class BaselineUnmet(AccessibilityViolation):
    """At least one declared baseline expectation did not reconcile."""


class InvalidBaseline(ValueError):
    """A baseline declaration has an unsupported shape."""
