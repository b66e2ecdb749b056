from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "api_url": "http://localhost:3001",
    "session_file": "~/.finance_client/session.json",
    "timeout": 10,
    "suggestions": {
        "delay_ms": 500,
        "min_length": 3,
    },
    "exchange": {
        "base": "BRL",
        "symbols": "USD,EUR,GBP",
    },
    "reports": {
        "trend_months": 6,
    },
}

CONFIG_PATH = Path("~/.finance_client/config.yaml")


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def _apply_env(config: Dict[str, object]) -> Dict[str, object]:
    if os.environ.get("FINANCE_API_URL"):
        config["api_url"] = os.environ["FINANCE_API_URL"]
    if os.environ.get("FINANCE_SESSION_FILE"):
        config["session_file"] = os.environ["FINANCE_SESSION_FILE"]
    if os.environ.get("FINANCE_SUGGEST_DELAY_MS"):
        suggestions = dict(config.get("suggestions") or {})  # type: ignore[arg-type]
        suggestions["delay_ms"] = int(os.environ["FINANCE_SUGGEST_DELAY_MS"])
        config["suggestions"] = suggestions
    return config


def load_config(path: Path | str | None = None) -> Dict[str, object]:
    target = Path(path or CONFIG_PATH).expanduser()
    data: Dict[str, object] = {}
    if target.exists():
        with target.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    return _apply_env(_merge_defaults(data, DEFAULT_CONFIG))


def save_config(config: Dict[str, object], path: Path | str | None = None) -> None:
    target = Path(path or CONFIG_PATH).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config, fp, sort_keys=False)


def session_path(config: Dict[str, object]) -> Path:
    return Path(str(config["session_file"])).expanduser()


def suggestion_delay(config: Dict[str, object]) -> float:
    suggestions = config.get("suggestions") or {}
    return int(suggestions.get("delay_ms", 500)) / 1000.0  # type: ignore[union-attr]


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("FINANCE_LOG_LEVEL", "WARNING")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
