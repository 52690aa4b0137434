"""
Interactive configuration prompts.

Each question is repeated until its validator accepts the answer. An empty
answer takes the default shown in parentheses; questions without a default
are marked with '*'.
"""

import logging
from typing import Any, Callable, Dict, Optional

from sitemap_checker.config import (
    MAX_CONCURRENCY,
    MIN_CONCURRENCY,
    MIN_REQUEST_DELAY_MS,
    TRAVERSAL_ORDERS,
    is_valid_concurrency,
    is_valid_delay,
    is_valid_order,
    is_valid_sitemap_url,
)

logger = logging.getLogger(__name__)

InputFunc = Callable[[str], str]


def ask(question: str, default: Any = None, input_func: InputFunc = input) -> str:
    if default not in (None, ""):
        prompt = f"{question} ({default}): "
    else:
        prompt = f"{question}*: "
    answer = input_func(prompt).strip()
    if not answer and default is not None:
        return str(default)
    return answer


def validate_ask(
    question: str,
    default: Any,
    validator: Callable[[str], bool],
    input_func: InputFunc = input,
) -> str:
    while True:
        answer = ask(question, default, input_func)
        if validator(answer):
            return answer
        logger.debug(f"Rejected answer {answer!r} for: {question}")


def ask_configurations(
    defaults: Dict[str, Any],
    provided: Optional[Dict[str, Any]] = None,
    input_func: InputFunc = input,
) -> Dict[str, Any]:
    """
    Ask for every run setting not already provided (e.g. on the command line).

    Provided values that fail validation are logged and asked for again.
    """
    provided = provided or {}
    questions = [
        ("sitemap_url", "Enter the URL of the sitemap", is_valid_sitemap_url),
        ("concurrency_limit",
         f"Enter the concurrency limit (must be > {MIN_CONCURRENCY} and < {MAX_CONCURRENCY})",
         is_valid_concurrency),
        ("request_delay_ms",
         f"Enter the request delay in ms (must be > {MIN_REQUEST_DELAY_MS})",
         is_valid_delay),
        ("traversal_order",
         f"Enter the traversal order ({'/'.join(reversed(TRAVERSAL_ORDERS))})",
         is_valid_order),
    ]

    values = {}
    for key, question, validator in questions:
        value = provided.get(key)
        if value is not None:
            if validator(value):
                values[key] = value
                continue
            logger.error(f"Invalid value for {key}: {value!r}")
        values[key] = validate_ask(question, defaults.get(key), validator, input_func)
    return values


def ask_save_results(
    defaults: Dict[str, Any],
    input_func: InputFunc = input,
) -> Optional[Dict[str, str]]:
    """Ask whether to save, then for both filenames. Returns None when declined."""
    answer = ask("Do you want to save the results? (Y/n)", "Y", input_func)
    if answer.lower() != "y":
        return None

    non200_file = validate_ask(
        "Enter the filename to save non-200 URLs", defaults.get("non200_file"), bool, input_func
    )
    all_file = validate_ask(
        "Enter the filename to save parsed URLs", defaults.get("all_file"), bool, input_func
    )
    return {"non200_file": non200_file, "all_file": all_file}
