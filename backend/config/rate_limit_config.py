"""
Request rate limits (slowapi)

Mirror, analyze and chat fan out to the quote provider or the text
generator, so they get a tighter budget than the cheap routes. Clients
are keyed by their X-Client-ID header when they send one, else by IP,
and each route is counted separately.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

load_dotenv()

logger = logging.getLogger(__name__)

RATE_LIMIT_ENABLED = os.getenv('RATE_LIMIT_ENABLED', 'true').lower() == 'true'
# memory:// is per-process; point at redis:// when running several workers
RATE_LIMIT_STORAGE_URL = os.getenv('RATE_LIMIT_STORAGE_URL', 'memory://')
RATE_LIMIT_STRATEGY = os.getenv('RATE_LIMIT_STRATEGY', 'fixed-window')

DEFAULT_RATE_LIMIT = os.getenv('DEFAULT_RATE_LIMIT', '100/minute')
EXPENSIVE_RATE_LIMIT = os.getenv('EXPENSIVE_RATE_LIMIT', '20/minute')


def get_identifier(request: Request) -> str:
    """X-Client-ID (truncated to 100 chars) if present, else the remote address."""
    client_id = request.headers.get('X-Client-ID')
    if client_id:
        return f"client:{client_id[:100]}"
    return get_remote_address(request)


def get_rate_limit_key(request: Request) -> str:
    return f"{get_identifier(request)}:{request.url.path}"


limiter = Limiter(
    key_func=get_rate_limit_key,
    storage_uri=RATE_LIMIT_STORAGE_URL,
    strategy=RATE_LIMIT_STRATEGY,
    enabled=RATE_LIMIT_ENABLED,
    headers_enabled=True,
)


class RateLimits:
    """
    Limit strings for ``@limiter.limit(...)``.

    Routes using them must accept ``request: Request`` and
    ``response: Response`` so slowapi can read the key and set headers.
    """

    # warnings, single quote
    PUBLIC_API = DEFAULT_RATE_LIMIT
    # mirror, analyze, chat
    EXPENSIVE = EXPENSIVE_RATE_LIMIT
    # usage count and history
    READ_ONLY = '500/minute'
    # usage increments
    WRITE = '50/minute'


def get_rate_limit_config() -> dict:
    return {
        'enabled': RATE_LIMIT_ENABLED,
        'storage_url': RATE_LIMIT_STORAGE_URL,
        'strategy': RATE_LIMIT_STRATEGY,
        'limits': {
            'default': RateLimits.PUBLIC_API,
            'expensive': RateLimits.EXPENSIVE,
            'read_only': RateLimits.READ_ONLY,
            'write': RateLimits.WRITE,
        },
    }


def log_rate_limit_config() -> None:
    config = get_rate_limit_config()
    if not config['enabled']:
        logger.warning("Rate limiting DISABLED - not recommended for production")
        return

    limits = config['limits']
    logger.info(
        f"Rate limiting enabled ({config['strategy']}, {config['storage_url']}): "
        f"default {limits['default']}, expensive {limits['expensive']}, "
        f"reads {limits['read_only']}, writes {limits['write']}"
    )
