"""
Startup checks for environment variables.

main.py calls validate_environment() once, after logging is configured.
Problems are logged as warnings; in production the ones that would make
the service silently wrong (unknown quote provider, Alpha Vantage demo
key) abort startup instead. CORS origins are checked separately by
cors_config.setup_cors().
"""

import logging
import os
from typing import List

logger = logging.getLogger(__name__)

VALID_ENVIRONMENTS = {"development", "staging", "production", "test"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_QUOTE_PROVIDERS = {"yahoo", "alphavantage"}

# name -> (parser, minimum)
NUMERIC_VARS = {
    "CORS_MAX_AGE": (int, 0),
    "QUOTE_CACHE_TTL": (int, 0),
    "QUOTE_MAX_CONCURRENCY": (int, 1),
    "QUOTE_REQUEST_TIMEOUT": (float, 0),
    "FALLBACK_JITTER": (float, 0),
    "MAX_QUESTION_LENGTH": (int, 1),
}


def _check_environment_value(env: str, warnings: List[str]) -> None:
    if env not in VALID_ENVIRONMENTS:
        warnings.append(
            f"ENVIRONMENT={env!r} is not a recognized value. "
            f"Expected one of: {', '.join(sorted(VALID_ENVIRONMENTS))}"
        )


def _check_numeric_vars(warnings: List[str]) -> None:
    """Set numeric variables must parse and respect their minimum; unset ones use defaults."""
    for name, (parse, minimum) in NUMERIC_VARS.items():
        raw = os.getenv(name)
        if raw is None:
            continue
        try:
            value = parse(raw)
        except ValueError:
            warnings.append(f"{name}={raw!r} is not a valid {parse.__name__}")
            continue
        if value < minimum:
            warnings.append(f"{name}={value} is below minimum ({minimum})")


def _check_log_level(warnings: List[str]) -> None:
    raw = os.getenv("LOG_LEVEL")
    if raw is not None and raw.upper() not in VALID_LOG_LEVELS:
        warnings.append(
            f"LOG_LEVEL={raw!r} is not a valid log level. "
            f"Expected one of: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )


def _check_quote_provider(env: str, warnings: List[str], errors: List[str]) -> None:
    """An unknown provider is always an error; the Alpha Vantage demo key only in production."""
    provider = os.getenv("QUOTE_PROVIDER", "yahoo").lower()
    if provider not in VALID_QUOTE_PROVIDERS:
        errors.append(
            f"QUOTE_PROVIDER={provider!r} is not supported. "
            f"Expected one of: {', '.join(sorted(VALID_QUOTE_PROVIDERS))}"
        )
        return

    if provider == "alphavantage" and os.getenv("ALPHA_VANTAGE_API_KEY", "demo") == "demo":
        message = "ALPHA_VANTAGE_API_KEY is the public demo key; most tickers will use fallback data"
        (errors if env == "production" else warnings).append(message)


def _check_chat_key(warnings: List[str]) -> None:
    if not os.getenv("GEMINI_API_KEY"):
        warnings.append("GEMINI_API_KEY is not set; chat replies will use the fallback message")


def validate_environment() -> List[str]:
    """
    Run every check and return the problems found (empty when clean).

    Raises:
        RuntimeError: In production, when any check reported an error
    """
    env = os.getenv("ENVIRONMENT", "development").lower()
    warnings: List[str] = []
    errors: List[str] = []

    _check_environment_value(env, warnings)
    _check_numeric_vars(warnings)
    _check_log_level(warnings)
    _check_quote_provider(env, warnings, errors)
    _check_chat_key(warnings)

    for message in warnings:
        logger.warning(message)

    if errors and env == "production":
        for message in errors:
            logger.error(message)
        raise RuntimeError(
            "Environment validation failed in production:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    for message in errors:
        logger.warning(message)

    problems = warnings + errors
    if problems:
        logger.info(f"Environment validation complete: {len(problems)} problem(s)")
    else:
        logger.info("Environment validation passed")
    return problems
