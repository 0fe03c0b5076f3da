"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    SHAKE_REPORTER_APP_ID        — identifier sent as appId
    SHAKE_REPORTER_API_ENDPOINT  — base URL of the bug report API
    SHAKE_REPORTER_AUTH_TOKEN    — optional static bearer token
    STUB_REQUIRED_TOKEN          — dev stub backend: bearer token it demands (unset = open)
    STUB_HOST / STUB_PORT        — dev stub backend bind address (default: 127.0.0.1:8000)
    LOG_LEVEL                    — logging level name for main.py (default: INFO)
    LOG_DIR                      — directory for the dated log file, empty disables it (default: logs)
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from shake_reporter.client.bug_report_client import AuthTokenProvider

load_dotenv()

SHAKE_REPORTER_APP_ID = os.getenv("SHAKE_REPORTER_APP_ID")
SHAKE_REPORTER_API_ENDPOINT = os.getenv("SHAKE_REPORTER_API_ENDPOINT")
SHAKE_REPORTER_AUTH_TOKEN = os.getenv("SHAKE_REPORTER_AUTH_TOKEN")

STUB_REQUIRED_TOKEN = os.getenv("STUB_REQUIRED_TOKEN")
STUB_HOST = os.getenv("STUB_HOST", "127.0.0.1")
STUB_PORT = int(os.getenv("STUB_PORT", 8000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")


def static_token_provider(token: Optional[str]) -> AuthTokenProvider:
    """Wrap a fixed token as an async provider."""
    async def provider() -> Optional[str]:
        return token or None
    return provider


@dataclass(frozen=True)
class ReporterConfiguration:
    """
    Configuration for ShakeReporter.

    app_id               — unique identifier for your app (e.g. "myapp")
    api_endpoint         — base URL of the bug report API (e.g. "https://api.example.com/api/v1")
    auth_token_provider  — optional async callable returning the current auth token
    """
    app_id: str
    api_endpoint: str
    auth_token_provider: Optional[AuthTokenProvider] = None

    @classmethod
    def from_env(cls) -> "ReporterConfiguration":
        if not SHAKE_REPORTER_APP_ID:
            raise ValueError("SHAKE_REPORTER_APP_ID is not set")
        if not SHAKE_REPORTER_API_ENDPOINT:
            raise ValueError("SHAKE_REPORTER_API_ENDPOINT is not set")
        provider = (
            static_token_provider(SHAKE_REPORTER_AUTH_TOKEN)
            if SHAKE_REPORTER_AUTH_TOKEN
            else None
        )
        return cls(
            app_id=SHAKE_REPORTER_APP_ID,
            api_endpoint=SHAKE_REPORTER_API_ENDPOINT,
            auth_token_provider=provider,
        )
