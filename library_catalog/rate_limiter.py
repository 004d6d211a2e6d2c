from slowapi import Limiter
from slowapi.util import get_remote_address

from library_catalog.config import settings


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    headers_enabled=True,
    enabled=settings.RATE_LIMIT_ENABLED
)
