"""Playwright scan provider — injects axe-core into a page and runs it."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Iterable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from axe_baseline.errors import ScanProviderError

logger = logging.getLogger(__name__)

# Runs inside the page. Every target selector is re-queried so the count
# reflects all matching elements, not just the node axe reported.
AXE_SCAN_SCRIPT = """
async ({ configure, runOptions }) => {
    if (configure && Object.keys(configure).length) {
        axe.configure(configure);
    }
    const results = await axe.run(document, runOptions || {});
    const selectorOf = (target) => Array.isArray(target) ? target.join(' >>> ') : String(target);
    const countErrors = (items) => (items || []).map((item) => {
        const errors = {};
        (item.nodes || []).forEach((node) => {
            (node.target || []).forEach((target) => {
                const selector = selectorOf(target);
                try {
                    errors[selector] = document.querySelectorAll(selector).length;
                } catch (e) {
                    errors[selector] = 0;
                }
            });
        });
        return { ...item, errors };
    });
    return {
        violations: countErrors(results.violations),
        needsReview: countErrors(results.incomplete),
    };
}
"""


def is_remote_script(source: str) -> bool:
    return source.startswith(("http://", "https://", "//"))


def add_review_on_fail(baseline: Iterable[str], configuration: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``configuration`` that flags every baselined rule ``reviewOnFail``.

    Flagged rules are reported by axe as incomplete instead of as violations,
    which is where the reconciler looks for baselined findings.
    """
    configured = copy.deepcopy(configuration)
    rules = configured.setdefault("rules", [])
    for rule_id in baseline:
        for rule in rules:
            if isinstance(rule, dict) and rule.get("id") == rule_id:
                rule["reviewOnFail"] = True
                break
        else:
            rules.append({"id": rule_id, "reviewOnFail": True})
    return configured


class PlaywrightAxeProvider:
    """Runs axe-core inside a Playwright page and returns the raw result."""

    def __init__(self, script_source: str):
        self.script_source = script_source.replace('"', "")

    async def inject(self, page: Page) -> None:
        """Load axe-core into the page from a URL or a local file."""
        try:
            if is_remote_script(self.script_source):
                await page.add_script_tag(url=self.script_source)
            else:
                path = Path(self.script_source)
                if not path.exists():
                    raise ScanProviderError(f"Could not load axe-core script: {path} not found")
                await page.add_script_tag(path=str(path))
        except PlaywrightError as e:
            raise ScanProviderError(f"Could not load axe-core script: {e}") from e

    async def scan(
        self,
        page: Page,
        run_options: dict[str, Any] | None = None,
        configuration: dict[str, Any] | None = None,
    ) -> Any:
        """Inject axe, configure it, run it and return ``{violations, needsReview}``.

        The returned value is not validated here; that is the normalizer's job.
        """
        logger.debug("Injecting axe-core from %s", self.script_source)
        await self.inject(page)

        logger.debug("Running axe on %s", page.url)
        try:
            return await page.evaluate(
                AXE_SCAN_SCRIPT,
                {"configure": configuration or {}, "runOptions": run_options or {}},
            )
        except PlaywrightError as e:
            raise ScanProviderError(f"Axe could not be executed: {e}") from e
