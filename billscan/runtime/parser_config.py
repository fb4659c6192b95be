"""Runtime loader for extraction settings."""

from __future__ import annotations

import tomllib
from dataclasses import fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any

from billscan.receipt.ocr_parser.common import ExtractionConfig
from billscan.runtime.logging import get_logger
from billscan.runtime.paths import get_paths

logger = get_logger(__name__)

_TUNABLE_FIELDS = {f.name: f for f in fields(ExtractionConfig) if f.name != "stop_terms"}


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def _coerce_setting(name: str, value: Any) -> Any:
    default = getattr(ExtractionConfig(), name)
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ValueError(f"[extraction] {name} must be true or false, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"[extraction] {name} must be a number, got {value!r}")
    if isinstance(default, int):
        if value != int(value):
            raise ValueError(f"[extraction] {name} must be a whole number, got {value!r}")
        return int(value)
    return float(value)


def build_extraction_config(config: dict[str, Any], base: ExtractionConfig | None = None) -> ExtractionConfig:
    """
    Apply a parsed TOML document on top of ``base`` (defaults when omitted).

    Recognized tables:
        [extraction]  scalar overrides for ExtractionConfig fields
        [noise]       ``stop_terms`` replaces the vocabulary,
                      ``extra_stop_terms`` extends it
    """
    result = base if base is not None else ExtractionConfig()

    extraction = config.get("extraction", {})
    unknown = sorted(set(extraction) - set(_TUNABLE_FIELDS))
    if unknown:
        raise ValueError(f"Unknown [extraction] settings: {', '.join(unknown)}")
    overrides = {name: _coerce_setting(name, value) for name, value in extraction.items()}
    if overrides:
        result = replace(result, **overrides)

    noise = config.get("noise", {})
    stop_terms = tuple(str(term) for term in noise.get("stop_terms", result.stop_terms))
    extra_terms = tuple(str(term) for term in noise.get("extra_stop_terms", ()))
    if stop_terms != result.stop_terms or extra_terms:
        result = replace(result, stop_terms=stop_terms + extra_terms)

    return result


@lru_cache(maxsize=4)
def load_extraction_config(config_path: str | None = None) -> ExtractionConfig:
    """
    Load extraction settings from the project TOML file.

    Args:
        config_path: Optional TOML path override. If None, uses
            ``BILLSCAN_CONFIG`` or ``<project>/config/billscan.toml``.
    """
    path = Path(config_path) if config_path is not None else get_paths().extraction_config
    config = _load_toml(path)
    if config:
        logger.debug("Loaded extraction settings from %s", path)
    return build_extraction_config(config)
