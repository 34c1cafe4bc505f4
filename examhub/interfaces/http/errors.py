from contextlib import contextmanager

import structlog
from fastapi import HTTPException

from ...application.errors import ProfileError
from ...infrastructure.metrics import internal_errors_total

logger = structlog.get_logger(__name__)


@contextmanager
def translate_errors(operation: str, public_message: str):
    """Maps use case failures onto HTTP responses.

    Known failures keep their status and message. Anything else is logged
    with its traceback and reported as a 500 carrying only `public_message`.
    """
    try:
        yield
    except ProfileError as e:
        if e.status_code >= 500:
            logger.exception(f"{operation}_failed", error=e.message)
            internal_errors_total.labels(operation=operation).inc()
            raise HTTPException(status_code=e.status_code, detail=public_message)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except HTTPException:
        raise
    except Exception:
        logger.exception(f"{operation}_failed")
        internal_errors_total.labels(operation=operation).inc()
        raise HTTPException(status_code=500, detail=public_message)
