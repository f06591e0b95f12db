"""Run-level report orchestration."""

from __future__ import annotations

import logging
from pathlib import Path

from axe_baseline.models.config import AxeConfig
from axe_baseline.models.outcome import TestRunRecord

from .html_report import generate_html_report
from .json_report import generate_json_report
from .view_model import ReportViewModel, build_report_view_model

logger = logging.getLogger(__name__)


class RunReporter:
    """Collects test records during a run and writes the consolidated report."""

    def __init__(self, config: AxeConfig | None = None):
        self.config = config or AxeConfig()
        self._records: list[TestRunRecord] = []

    @property
    def records(self) -> tuple[TestRunRecord, ...]:
        return tuple(self._records)

    def add(self, record: TestRunRecord | None) -> None:
        """Append a finished test's record; records without events are ignored."""
        if record is None or not record.events:
            return
        self._records.append(record)

    def resolve_report_path(self) -> Path:
        """Absolute report paths are used verbatim, relative ones go under ``output_dir``."""
        path = Path(self.config.report_filename)
        if path.is_absolute():
            return path
        return Path(self.config.output_dir) / path

    def build_view_model(self) -> ReportViewModel:
        return build_report_view_model(self._records)

    def generate_reports(self) -> dict[str, str]:
        """Generate all configured report formats. Returns format -> file path."""
        view_model = self.build_view_model()
        html_path = self.resolve_report_path()
        generated = {}

        if "html" in self.config.report_formats:
            generate_html_report(view_model, html_path)
            generated["html"] = str(html_path)
            logger.info("HTML report: %s", html_path)

        if "json" in self.config.report_formats:
            path = html_path.with_suffix(".json")
            generate_json_report(view_model, path)
            generated["json"] = str(path)
            logger.info("JSON report: %s", path)

        return generated
