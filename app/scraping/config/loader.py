"""
Environment + JSON config loader for mapped scraping.
"""

from __future__ import annotations

import json
import os
import re
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

from db.config import load_env_files

from app.scraping.config.models import (
    ACTION_SCRAPE_HTML,
    ACTION_SCRAPE_JSON,
    DebugOptions,
    RequestOptions,
    ScraperDefinition,
    ScraperTypeConfig,
    ScrapingSettings,
)
from app.scraping.errors import ScraperConfigurationError
from app.scraping.mapping.models import (
    AttributeMapping,
    FeetToCmStep,
    LbToKgStep,
    MappedRecordConfig,
    MappedScraperConfig,
    MapStep,
    ParseDateStep,
    PostProcessStep,
    ReplaceStep,
    SubScrapeStep,
)
from app.scraping.replacements import ReplacementRule

ALLOWED_ACTIONS = {ACTION_SCRAPE_JSON, ACTION_SCRAPE_HTML}

# Nested record configs each record kind may declare.
RECORD_CHILDREN: dict[str, dict[str, dict]] = {
    "performer": {"tags": {}},
    "scene": {"tags": {}, "performers": {"tags": {}}, "studio": {}, "movies": {"studio": {}}},
    "gallery": {"tags": {}, "performers": {"tags": {}}, "studio": {}},
    "movie": {"studio": {}},
}

SINGLE_LOOKUPS = ("performer_by_name", "performer_by_fragment", "scene_by_fragment", "gallery_by_fragment")
URL_LOOKUPS = ("performer_by_url", "scene_by_url", "gallery_by_url", "movie_by_url")


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_config_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


@lru_cache(maxsize=1)
def get_scraping_settings() -> ScrapingSettings:
    """
    Return cached scraper settings from environment variables.
    """

    load_env_files()
    config_path = _get_str_env("SCRAPER_CONFIG_PATH", "app/scraping/config/scrapers.json")
    return ScrapingSettings(
        config_path=str(_resolve_config_path(config_path)),
        user_agent=_get_str_env(
            "SCRAPER_USER_AGENT",
            "Mozilla/5.0 (X11; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/115.0",
        ),
        timeout_seconds=max(1.0, _get_float_env("SCRAPER_TIMEOUT_SECONDS", 60.0)),
        max_retries=max(0, _get_int_env("SCRAPER_MAX_RETRIES", 0)),
        backoff_initial_seconds=max(
            0.1,
            _get_float_env("SCRAPER_BACKOFF_INITIAL_SECONDS", 0.5),
        ),
        backoff_multiplier=max(1.0, _get_float_env("SCRAPER_BACKOFF_MULTIPLIER", 2.0)),
        proxy_url=_get_str_env("SCRAPER_PROXY_URL", "") or None,
    )


def load_scraper_definitions(*, config_path: str) -> list[ScraperDefinition]:
    """
    Load scraper definitions from a JSON file.
    """

    path = _resolve_config_path(config_path)
    if not path.exists():
        raise ScraperConfigurationError(f"Scraper config file not found: {path}")

    try:
        raw_data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ScraperConfigurationError(f"Scraper config file is not valid JSON: {path}") from exc

    scrapers = raw_data.get("scrapers", []) if isinstance(raw_data, dict) else None
    if not isinstance(scrapers, list):
        raise ScraperConfigurationError("Invalid scraper config: 'scrapers' must be a list.")

    definitions = [parse_scraper_definition(entry) for entry in scrapers]
    seen: set[str] = set()
    for definition in definitions:
        if definition.id in seen:
            raise ScraperConfigurationError(f"Duplicate scraper id '{definition.id}'.")
        seen.add(definition.id)
    return definitions


def parse_scraper_definition(entry: object) -> ScraperDefinition:
    """
    Normalize one raw scraper entry into an immutable definition.
    """

    raw = _normalized_keys(_require_dict(entry, "scraper"))
    name = _optional_str(raw.get("name"))
    if name is None:
        raise ScraperConfigurationError("Invalid scraper config: 'name' is required.")
    scraper_id = _optional_str(raw.get("id")) or name

    lookups: dict[str, Any] = {}
    for key in SINGLE_LOOKUPS:
        if raw.get(key) is not None:
            lookups[key] = _parse_type_config(raw[key], path=f"{scraper_id}.{key}")
    for key in URL_LOOKUPS:
        value = raw.get(key)
        if value is None:
            continue
        entries = value if isinstance(value, list) else [value]
        lookups[key] = tuple(
            _parse_type_config(item, path=f"{scraper_id}.{key}[{index}]")
            for index, item in enumerate(entries)
        )

    return ScraperDefinition(
        id=scraper_id,
        name=name,
        json_scrapers=_parse_mapped_scrapers(raw.get("json_scrapers"), path=f"{scraper_id}.json_scrapers"),
        html_scrapers=_parse_mapped_scrapers(raw.get("html_scrapers"), path=f"{scraper_id}.html_scrapers"),
        request=_parse_request_options(raw.get("request")),
        debug=DebugOptions(
            print_html=_optional_bool(_normalized_keys(raw.get("debug") or {}).get("print_html"), False)
        ),
        **lookups,
    )


def _parse_type_config(entry: object, *, path: str) -> ScraperTypeConfig:
    raw = _normalized_keys(_require_dict(entry, path))
    action = snake_case(str(raw.get("action", "")).strip())
    if action not in ALLOWED_ACTIONS:
        allowed = ", ".join(sorted(ALLOWED_ACTIONS))
        raise ScraperConfigurationError(
            f"Unknown action='{action}' at {path}. Allowed actions: {allowed}."
        )
    scraper = _optional_str(raw.get("scraper"))
    if scraper is None:
        raise ScraperConfigurationError(f"Invalid scraper config at {path}: 'scraper' is required.")

    url_patterns = raw.get("url", [])
    if isinstance(url_patterns, str):
        url_patterns = [url_patterns]
    if not isinstance(url_patterns, list):
        raise ScraperConfigurationError(f"Invalid scraper config at {path}: 'url' must be a list.")

    return ScraperTypeConfig(
        action=action,
        scraper=scraper,
        query_url=_optional_str(raw.get("query_url")),
        query_url_replace=_parse_rules(raw.get("query_url_replace"), path=f"{path}.query_url_replace"),
        url_replace=_parse_rules(raw.get("url_replace"), path=f"{path}.url_replace"),
        url=tuple(item.strip() for item in url_patterns if isinstance(item, str) and item.strip()),
    )


def _parse_mapped_scrapers(entry: object, *, path: str) -> MappingProxyType:
    if entry is None:
        return MappingProxyType({})

    parsed: dict[str, MappedScraperConfig] = {}
    for name, value in _require_dict(entry, path).items():
        raw = _normalized_keys(_require_dict(value, f"{path}.{name}"))
        unknown = set(raw) - {"common", *RECORD_CHILDREN}
        if unknown:
            raise ScraperConfigurationError(
                f"Unknown keys at {path}.{name}: {', '.join(sorted(unknown))}."
            )
        common = _require_dict(raw.get("common") or {}, f"{path}.{name}.common")
        records = {
            kind: _parse_record(raw[kind], children=children, path=f"{path}.{name}.{kind}")
            for kind, children in RECORD_CHILDREN.items()
            if raw.get(kind) is not None
        }
        parsed[name] = MappedScraperConfig(
            common=MappingProxyType({str(key): str(val) for key, val in common.items()}),
            **records,
        )
    return MappingProxyType(parsed)


def _parse_record(entry: object, *, children: dict[str, dict], path: str) -> MappedRecordConfig:
    attributes: list[AttributeMapping] = []
    nested: dict[str, MappedRecordConfig] = {}
    seen: set[str] = set()

    for key, value in _require_dict(entry, path).items():
        name = snake_case(str(key).strip())
        if not name:
            raise ScraperConfigurationError(f"Empty field name at {path}.")
        if name in seen:
            raise ScraperConfigurationError(f"Duplicate field '{name}' at {path}.")
        seen.add(name)

        if name in children:
            nested[name] = _parse_record(value, children=children[name], path=f"{path}.{key}")
        else:
            attributes.append(_parse_attribute(name, value, path=f"{path}.{key}"))

    return MappedRecordConfig(attributes=tuple(attributes), **nested)


def _parse_attribute(name: str, entry: object, *, path: str) -> AttributeMapping:
    if isinstance(entry, str):
        return AttributeMapping(name=name, selector=entry.strip())

    raw = _normalized_keys(_require_dict(entry, path))
    return AttributeMapping(
        name=name,
        selector=str(raw.get("selector") or "").strip(),
        fixed=_fixed_value(raw.get("fixed"), path=f"{path}.fixed"),
        concat=_optional_separator(raw.get("concat")),
        split=_optional_separator(raw.get("split")),
        post_process=_parse_post_process(raw.get("post_process"), path=f"{path}.post_process"),
    )


def _parse_post_process(entry: object, *, path: str) -> tuple[PostProcessStep, ...]:
    if entry is None:
        return ()
    if not isinstance(entry, list):
        raise ScraperConfigurationError(f"Invalid post_process at {path}: expected a list.")

    steps: list[PostProcessStep] = []
    for index, item in enumerate(entry):
        item_path = f"{path}[{index}]"
        for action, value in _normalized_keys(_require_dict(item, item_path)).items():
            if action == "replace":
                steps.append(ReplaceStep(rules=_parse_rules(value, path=f"{item_path}.replace")))
            elif action == "sub_scraper":
                steps.append(
                    SubScrapeStep(attribute=_parse_attribute("sub_scraper", value, path=f"{item_path}.sub_scraper"))
                )
            elif action == "parse_date":
                date_format = _optional_str(value)
                if date_format is None:
                    raise ScraperConfigurationError(f"Invalid parse_date format at {item_path}.")
                steps.append(ParseDateStep(date_format=date_format))
            elif action == "map":
                mapping = _require_dict(value, f"{item_path}.map")
                steps.append(
                    MapStep(mapping=MappingProxyType({str(k): str(v) for k, v in mapping.items()}))
                )
            elif action == "feet_to_cm":
                if _optional_bool(value, False):
                    steps.append(FeetToCmStep())
            elif action == "lb_to_kg":
                if _optional_bool(value, False):
                    steps.append(LbToKgStep())
            else:
                raise ScraperConfigurationError(f"Unknown post_process action '{action}' at {item_path}.")
    return tuple(steps)


def _parse_rules(entry: object, *, path: str) -> tuple[ReplacementRule, ...]:
    if entry is None:
        return ()
    if not isinstance(entry, list):
        raise ScraperConfigurationError(f"Invalid replacement rules at {path}: expected a list.")

    rules: list[ReplacementRule] = []
    for index, item in enumerate(entry):
        raw = _require_dict(item, f"{path}[{index}]")
        regex = raw.get("regex")
        if not isinstance(regex, str) or not regex:
            raise ScraperConfigurationError(f"Invalid replacement at {path}[{index}]: 'regex' is required.")
        rules.append(ReplacementRule.compile(regex, str(raw.get("with") or "")))
    return tuple(rules)


def _parse_request_options(entry: object) -> RequestOptions:
    if entry is None:
        return RequestOptions()
    raw = _normalized_keys(_require_dict(entry, "request"))
    return RequestOptions(
        headers=MappingProxyType(_string_pairs(raw.get("headers"))),
        cookies=MappingProxyType(_string_pairs(raw.get("cookies"))),
    )


def snake_case(key: str) -> str:
    """
    Normalize `queryURLReplace` / `EyeColor` style keys to snake_case.
    """

    key = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", key)
    key = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", key)
    return key.replace("-", "_").lower()


def _normalized_keys(entry: dict) -> dict[str, Any]:
    return {snake_case(str(key).strip()): value for key, value in entry.items()}


def _require_dict(entry: object, path: str) -> dict:
    if not isinstance(entry, dict):
        raise ScraperConfigurationError(f"Invalid scraper config at {path}: expected an object.")
    return entry


def _string_pairs(entry: object) -> dict[str, str]:
    if not isinstance(entry, dict):
        return {}

    normalized: dict[str, str] = {}
    for key, value in entry.items():
        if not isinstance(key, str) or not isinstance(value, str):
            continue
        if key.strip():
            normalized[key.strip()] = value.strip()
    return normalized


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _fixed_value(value: object, *, path: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ScraperConfigurationError(f"Invalid fixed value at {path}: expected a string or number.")


def _optional_separator(value: object) -> str | None:
    if not isinstance(value, str) or value == "":
        return None
    return value


def _optional_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default
