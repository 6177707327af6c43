import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = id(request)
        client = request.client.host if request.client else "unknown"

        logger.info(
            f"Request started | id={request_id} | method={request.method} | "
            f"path={request.url.path} | client={client}"
        )

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed | id={request_id} | path={request.url.path} | "
                f"error={e} | duration={process_time:.3f}s",
                exc_info=True,
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            f"Request completed | id={request_id} | path={request.url.path} | "
            f"status={response.status_code} | duration={process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response
