"""Rate limiting using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Keyed on client IP; applied to public endpoints that call out to GitHub.
limiter = Limiter(key_func=get_remote_address)


def reset_limiter() -> None:
    """Clear all recorded hits. Used in tests to isolate rate limit state."""
    limiter.reset()
