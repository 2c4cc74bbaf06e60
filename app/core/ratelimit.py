from slowapi import Limiter
from slowapi.util import get_remote_address

# One limiter per process: the route decorators bind to this instance at import.
# create_app() sets `enabled` from RATE_LIMIT_ENABLED, so the most recently
# created app decides for every app in the process.
limiter = Limiter(key_func=get_remote_address)
