import uvicorn
import time
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from shake_reporter.api.bug_reports import router as bug_reports_router
from shake_reporter.core.config import LOG_DIR, LOG_LEVEL, STUB_HOST, STUB_PORT
from shake_reporter.utils.logging_config import setup_logging

logger = logging.getLogger("main")


# Logging is configured when the server starts, not on import
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(level=LOG_LEVEL, log_dir=LOG_DIR)
    yield


app = FastAPI(title="ShakeReporter Dev Backend", lifespan=lifespan)

# ---------------------------------------------------------------------------
# Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"
        logger.info("Incoming: %s %s from %s", request.method, request.url.path, client_host)

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                "Request failed: %s %s after %.2fms - Error: %s",
                request.method, request.url.path, process_time, e,
            )
            raise
        process_time = (time.time() - start_time) * 1000
        logger.info(
            "Outgoing: %s %s - Status: %d - Time: %.2fms",
            request.method, request.url.path, response.status_code, process_time,
        )
        return response

app.add_middleware(LoggingMiddleware)

# Health endpoint
@app.get("/health")
async def health_check():
    return {"status": "ok"}

app.include_router(bug_reports_router)

if __name__ == "__main__":
    uvicorn.run("main:app", host=STUB_HOST, port=STUB_PORT, reload=True)
