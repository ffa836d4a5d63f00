"""
Login rate limiter — fixed-window counter keyed by client IP.

Counting and storage come from slowapi / limits; point
``RATE_LIMIT_STORAGE_URI`` at Redis when running more than one worker so
every process shares the same counters.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    strategy="fixed-window",
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    headers_enabled=True,
)

LOGIN_RATE_LIMIT = settings.login_rate_limit
