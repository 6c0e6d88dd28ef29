from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List
from urllib.parse import urlparse

import yaml

from ..models import CompetitorConfig


class ConfigError(Exception):
    """Raised when ``competitors.yaml`` is missing or malformed."""


REQUIRED_FIELDS = ("name", "base_url", "listing_path", "article_selector", "title_selector")
SELECTOR_FIELDS = ("article_selector", "title_selector", "description_selector", "date_selector")


def _absolute_url(entry: Dict[str, Any], key: str) -> str:
    candidate = str(entry[key]).strip()
    parts = urlparse(candidate)
    if parts.scheme in ("http", "https") and parts.netloc:
        return candidate
    raise ConfigError(f"{entry.get('name')}: {key} must be an absolute http(s) URL, got '{candidate}'")


def _is_str_mapping(value: object) -> bool:
    return isinstance(value, dict) and all(isinstance(k, str) and isinstance(v, str) for k, v in value.items())


def _validate_competitor_dict(entry: Dict[str, Any]) -> None:
    """Check one competitor mapping.

    Besides the required fields, an entry may set ``description_selector``,
    ``date_selector``, ``feed_url``, ``headers`` (str to str) and ``enabled``.
    """
    absent = [key for key in REQUIRED_FIELDS if key not in entry]
    if absent:
        raise ConfigError(f"Missing required fields {absent} for competitor {entry.get('name', '?')}")

    name = entry["name"]
    _absolute_url(entry, "base_url")
    if entry.get("feed_url") is not None:
        _absolute_url(entry, "feed_url")

    path = str(entry["listing_path"]).strip()
    if path and path[0] != "/":
        raise ConfigError(f"{name}: listing_path '{path}' must be rooted at '/'")

    for key in SELECTOR_FIELDS:
        selector = entry.get(key)
        if selector is None:
            continue
        if not isinstance(selector, str) or not selector.strip():
            raise ConfigError(f"{name}: {key} must be a non-empty CSS selector")

    if not isinstance(entry.get("enabled", True), bool):
        raise ConfigError(f"{name}: enabled must be true or false")
    if entry.get("headers") is not None and not _is_str_mapping(entry["headers"]):
        raise ConfigError(f"{name}: headers must map header names to string values")


def _coerce_competitor(entry: Dict[str, Any]) -> CompetitorConfig:
    return CompetitorConfig(
        name=str(entry["name"]).strip(),
        base_url=str(entry["base_url"]).strip().rstrip("/"),
        listing_path=str(entry["listing_path"]).strip(),
        article_selector=entry["article_selector"].strip(),
        title_selector=entry["title_selector"].strip(),
        description_selector=entry.get("description_selector"),
        date_selector=entry.get("date_selector"),
        feed_url=entry.get("feed_url"),
        headers=dict(entry.get("headers") or {}),
        enabled=entry.get("enabled", True),
    )


def load_competitors_config(path: Path | str) -> List[CompetitorConfig]:
    """Read the ``competitors`` list from a YAML file.

    Other top-level keys are ignored. Disabled competitors are included;
    callers filter on ``enabled``.
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        document = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"{config_path}: invalid YAML: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigError(f"{config_path}: expected a mapping at the top level")
    entries = document.get("competitors") or []
    if not isinstance(entries, list):
        raise ConfigError(f"{config_path}: 'competitors' must be a list")

    loaded: Dict[str, CompetitorConfig] = {}
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"{config_path}: competitor #{position} is not a mapping")
        _validate_competitor_dict(entry)
        competitor = _coerce_competitor(entry)
        if competitor.name in loaded:
            raise ConfigError(f"Duplicate competitor name: {competitor.name}")
        loaded[competitor.name] = competitor
    return list(loaded.values())
