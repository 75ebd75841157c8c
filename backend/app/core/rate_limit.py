from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Credential endpoints only. Disabled unless ENABLE_RATE_LIMITING is set.
limiter = Limiter(key_func=get_remote_address, enabled=settings.ENABLE_RATE_LIMITING)
