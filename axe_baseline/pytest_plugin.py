"""pytest integration — the ``axe`` fixture and the end-of-run report."""

from __future__ import annotations

import logging

import pytest

from axe_baseline.models.config import AxeConfig
from axe_baseline.models.outcome import Verdict
from axe_baseline.reporter.reporter import RunReporter
from axe_baseline.session import AxeSession

logger = logging.getLogger(__name__)

reporter_key = pytest.StashKey[RunReporter]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("axe-baseline", "accessibility checks with axe-core")
    group.addoption("--axe-config", default=None, help="Path to a JSON axe-baseline config file")
    group.addoption("--axe-report", default=None, help="Report file (relative paths go under the output dir)")


def pytest_configure(config: pytest.Config) -> None:
    config_path = config.getoption("--axe-config", default=None)
    axe_config = AxeConfig.load(config_path) if config_path else AxeConfig()
    report = config.getoption("--axe-report", default=None)
    if report:
        axe_config.report_filename = report
    config.stash[reporter_key] = RunReporter(axe_config)


class PytestHost:
    """Maps skip and fail onto pytest outcomes."""

    def __init__(self, test_name: str):
        self.test_name = test_name

    def skip(self, message: str) -> None:
        pytest.skip(message)

    def fail(self, message: str, verdict: Verdict | None = None) -> None:
        pytest.fail(message, pytrace=False)


@pytest.fixture
def axe(request: pytest.FixtureRequest):
    """Accessibility checks for the current test: ``await axe.check(page, baseline)``."""
    reporter = request.config.stash[reporter_key]
    session = AxeSession(PytestHost(request.node.nodeid), reporter.config)
    yield session
    reporter.add(session.to_record())


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    reporter = session.config.stash.get(reporter_key, None)
    if reporter is None or not reporter.records:
        return
    for fmt, path in reporter.generate_reports().items():
        logger.info("Accessibility %s report written to %s", fmt, path)
