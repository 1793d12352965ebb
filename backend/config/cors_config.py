"""
CORS Configuration for Portfolio Mirror

Environment-based CORS settings for the browser frontend.
"""

import os
import logging
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logger = logging.getLogger(__name__)

# Vite dev server and common local ports
DEFAULT_DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:8080",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8080",
    "http://127.0.0.1:3000",
]


def _split_env_list(name: str, default: str = '*') -> List[str]:
    raw = os.getenv(name, default)
    if raw.strip() == '*':
        return ['*']
    return [item.strip() for item in raw.split(',') if item.strip()]


def is_production() -> bool:
    """True when ENVIRONMENT is production (or prod)"""
    env = os.getenv('ENVIRONMENT', 'development').lower()
    return env in ('production', 'prod')


def get_cors_origins() -> List[str]:
    """
    Allowed origins from CORS_ORIGINS (comma-separated).

    Falls back to local development origins when unset.
    """
    origins = _split_env_list('CORS_ORIGINS', default='')
    if origins:
        logger.debug(f"CORS origins: {origins}")
        return origins

    logger.warning(
        "CORS_ORIGINS not configured - using default localhost origins. "
        "Set CORS_ORIGINS environment variable for production!"
    )
    return list(DEFAULT_DEV_ORIGINS)


def get_cors_settings() -> dict:
    """
    CORS middleware keyword arguments.

    Environment Variables:
        CORS_ORIGINS: Allowed origins (comma-separated)
        CORS_ALLOW_CREDENTIALS: Allow credentials (default: false)
        CORS_ALLOW_METHODS: Allowed HTTP methods (default: GET,POST,OPTIONS)
        CORS_MAX_AGE: Preflight cache duration in seconds (default: 600)
    """
    try:
        max_age = int(os.getenv('CORS_MAX_AGE', '600'))
    except ValueError:
        max_age = 600
        logger.warning("Invalid CORS_MAX_AGE value, using default: 600")

    return {
        'allow_origins': get_cors_origins(),
        'allow_credentials': os.getenv('CORS_ALLOW_CREDENTIALS', 'false').lower() == 'true',
        'allow_methods': _split_env_list('CORS_ALLOW_METHODS', default='GET,POST,OPTIONS'),
        'allow_headers': _split_env_list('CORS_ALLOW_HEADERS'),
        'expose_headers': ['X-Request-ID'],
        'max_age': max_age,
    }


def setup_cors(app: FastAPI) -> None:
    """
    Add CORS middleware to the application.

    Raises:
        ValueError: In production with wildcard, empty or malformed origins
    """
    settings = get_cors_settings()
    origins = settings['allow_origins']

    if is_production():
        if '*' in origins or not origins:
            error_msg = (
                "SECURITY ERROR: Wildcard CORS origins not allowed in production! "
                "Set CORS_ORIGINS environment variable to specific domains."
            )
            logger.critical(error_msg)
            raise ValueError(error_msg)

        for origin in origins:
            if not origin.startswith(('http://', 'https://')):
                raise ValueError(f"Invalid origin format: {origin}. Must start with http:// or https://")

    app.add_middleware(CORSMiddleware, **settings)
    logger.info(f"CORS configured - Origins: {len(origins)}, Credentials: {settings['allow_credentials']}")
