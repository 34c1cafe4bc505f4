from slowapi import Limiter
from slowapi.util import get_remote_address
from ..config import settings

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)

def default_limit() -> str:
    return f"{settings.RATE_LIMIT_PER_MINUTE}/minute"

# Более строгий лимит для логина (защита от брутфорса)
LOGIN_LIMIT = "10/minute"
