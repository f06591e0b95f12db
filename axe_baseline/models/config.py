"""Configuration models for accessibility checks."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_AXE_JAVASCRIPT = "https://unpkg.com/axe-core/axe.min.js"
DEFAULT_REPORT_FILENAME = "axe-baseline-report.html"
UNSET_MARKER = "__unset__"


class _Unset:
    """Patch value that removes the key it is assigned to."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


def parse_patch(value: Any) -> Any:
    """Replace every ``"__unset__"`` string inside a JSON value with ``UNSET``."""
    if isinstance(value, str) and value == UNSET_MARKER:
        return UNSET
    if isinstance(value, dict):
        return {k: parse_patch(v) for k, v in value.items()}
    if isinstance(value, list):
        return [parse_patch(v) for v in value]
    return value


def merge_configuration(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``patch`` onto ``base`` and return a new mapping.

    Mappings present on both sides merge recursively, everything else in the
    patch replaces the base value, and ``UNSET`` removes the key. Neither
    argument is modified.
    """
    merged = dict(base)
    for key, value in patch.items():
        if value is UNSET:
            merged.pop(key, None)
            continue
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = merge_configuration(current, value)
        else:
            merged[key] = _strip_unset(value)
    return merged


def _strip_unset(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _strip_unset(v) for k, v in value.items() if v is not UNSET}
    if isinstance(value, list):
        return [_strip_unset(v) for v in value if v is not UNSET]
    return value


class AxeConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Scanner
    axe_javascript: str = Field(default=DEFAULT_AXE_JAVASCRIPT, alias="axeJavascript")
    axe_configure: dict[str, Any] = Field(default_factory=dict, alias="axeConfigure")

    # Reporting
    report_filename: str = Field(default=DEFAULT_REPORT_FILENAME, alias="reportFilename")
    output_dir: str = Field(default="./a11y-reports", alias="outputDir")
    report_formats: list[str] = Field(default_factory=lambda: ["html"], alias="reportFormats")

    @field_validator("axe_javascript", mode="before")
    @classmethod
    def strip_quotes(cls, v: str) -> str:
        if isinstance(v, str):
            return v.replace('"', "")
        return v

    @classmethod
    def load(cls, path: str | Path) -> "AxeConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(by_alias=True), f, indent=2)

    def configuration_patch(self) -> dict[str, Any]:
        """Scanner configuration with ``"__unset__"`` markers turned into ``UNSET``."""
        return parse_patch(self.axe_configure)
