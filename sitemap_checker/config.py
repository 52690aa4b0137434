import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Any

logger = logging.getLogger(__name__)

CONFIG_FILE_PATH = "config.json"

SEQUENTIAL = "sequential"
RANDOM = "random"
TRAVERSAL_ORDERS = (SEQUENTIAL, RANDOM)

# Bounds are exclusive: 0 < concurrency < 15, delay > 250
MIN_CONCURRENCY = 0
MAX_CONCURRENCY = 15
MIN_REQUEST_DELAY_MS = 250

DEFAULTS: Dict[str, Any] = {
    "sitemap_url": "",
    "concurrency_limit": 5,
    "request_delay_ms": 1000,
    "traversal_order": SEQUENTIAL,
    "user_agent": None,
    "timeout": None,
    "non200_file": "non200-urls.json",
    "all_file": "parsed-urls.json",
}


@dataclass(frozen=True)
class RunConfig:
    """Settings fixed for the duration of one run."""
    sitemap_url: str
    concurrency_limit: int
    request_delay_ms: int
    traversal_order: str = SEQUENTIAL

    @property
    def request_delay_seconds(self) -> float:
        return self.request_delay_ms / 1000


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number.is_integer():
        return None
    return int(number)


def is_valid_sitemap_url(value: Any) -> bool:
    return isinstance(value, str) and value.strip().startswith("http")


def is_valid_concurrency(value: Any) -> bool:
    number = _as_int(value)
    return number is not None and MIN_CONCURRENCY < number < MAX_CONCURRENCY


def is_valid_delay(value: Any) -> bool:
    number = _as_int(value)
    return number is not None and number > MIN_REQUEST_DELAY_MS


def is_valid_order(value: Any) -> bool:
    return isinstance(value, str) and value.strip() in TRAVERSAL_ORDERS


def build_run_config(values: Dict[str, Any]) -> Optional[RunConfig]:
    """Builds a RunConfig, logging every invalid field. Returns None if any is invalid."""
    checks = [
        ("sitemap_url", is_valid_sitemap_url, "must start with 'http'"),
        ("concurrency_limit", is_valid_concurrency,
         f"must be an integer > {MIN_CONCURRENCY} and < {MAX_CONCURRENCY}"),
        ("request_delay_ms", is_valid_delay, f"must be an integer > {MIN_REQUEST_DELAY_MS}"),
        ("traversal_order", is_valid_order, f"must be one of {', '.join(TRAVERSAL_ORDERS)}"),
    ]

    valid = True
    for key, validator, message in checks:
        if not validator(values.get(key)):
            logger.error(f"Invalid {key} {values.get(key)!r}: {message}")
            valid = False

    if not valid:
        return None

    return RunConfig(
        sitemap_url=values["sitemap_url"].strip(),
        concurrency_limit=_as_int(values["concurrency_limit"]),
        request_delay_ms=_as_int(values["request_delay_ms"]),
        traversal_order=values["traversal_order"].strip(),
    )


def load_config(path: str = CONFIG_FILE_PATH) -> Optional[Dict[str, Any]]:
    """Loads optional defaults from config.json. Returns None when missing or invalid."""
    if not os.path.exists(path):
        logger.info(f"No configuration file at {path}, using built-in defaults")
        return None
    try:
        with open(path, 'r') as f:
            config_data = json.load(f)
        logger.info(f"Successfully loaded configuration from {path}")
        if not validate_config(config_data):
            return None
        return config_data
    except json.JSONDecodeError as e:
        logger.error(f"Error decoding JSON from {path}: {e}")
        return None
    except OSError as e:
        logger.error(f"Could not read {path}: {e}")
        return None


def validate_config(config: Dict[str, Any]) -> bool:
    """Validates the structure and content of the configuration file."""
    if not isinstance(config, dict):
        logger.error("Configuration must be a dictionary.")
        return False

    unknown = [key for key in config if key not in DEFAULTS]
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {unknown}")

    field_checks = {
        "sitemap_url": is_valid_sitemap_url,
        "concurrency_limit": is_valid_concurrency,
        "request_delay_ms": is_valid_delay,
        "traversal_order": is_valid_order,
    }
    for key, validator in field_checks.items():
        if key in config and not validator(config[key]):
            logger.error(f"Invalid value for '{key}' in configuration: {config[key]!r}")
            return False

    if "timeout" in config and config["timeout"] is not None:
        if not isinstance(config["timeout"], (int, float)) or config["timeout"] <= 0:
            logger.error("'timeout' must be a positive number of seconds.")
            return False

    for key in ("user_agent", "non200_file", "all_file"):
        if key in config and (not isinstance(config[key], str) or not config[key].strip()):
            logger.error(f"'{key}' must be a non-empty string.")
            return False

    logger.info("Configuration validation successful.")
    return True


def merge_defaults(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Built-in defaults overlaid with whatever config.json provides."""
    merged = dict(DEFAULTS)
    if config:
        merged.update({k: v for k, v in config.items() if k in DEFAULTS})
    return merged
