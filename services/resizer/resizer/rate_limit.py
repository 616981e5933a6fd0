"""
Global slowapi rate limiter.

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at Redis
when running several workers. Disabled in development.
"""
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[os.getenv("RATE_LIMIT", "120/minute")],
    storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", "memory://"),
    enabled=os.getenv("ENV_NAME", "development") != "development",
)
