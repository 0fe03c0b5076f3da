"""
Bug Report Client
=================
Asynchronous client for POST {endpoint}/bug-reports.

Flow per submit() call:
    1. Serialize the request (EncodingError, before any I/O)
    2. Await the auth token provider, if one is configured; a token that
       cannot be sent as a header value is an EncodingError, before any I/O
    3. POST the JSON body with an optional Bearer header
    4. Map the HTTP outcome to BugReportResponse or a BugReportError

Status Mapping:
    - 200 / 201 → body must decode as BugReportResponse, else DecodingError
    - anything else → ServerError(body.error) when the body decodes and
      carries an error string, otherwise HttpError(status)
    - success: false on 200/201 is returned as-is, never raised

Concurrency:
    The client keeps no per-call state. Each call opens and closes its own
    httpx.AsyncClient, so one instance may serve concurrent submissions.
    Cancelling the calling task aborts the token fetch or the in-flight
    request and closes the connection.

No retries and no timeout override; httpx defaults apply.
"""
import logging
from typing import Awaitable, Callable, Optional

import httpx
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from shake_reporter.client.errors import (
    DecodingError,
    EncodingError,
    HttpError,
    InvalidResponseError,
    ServerError,
    TransportError,
)
from shake_reporter.core.constants import (
    BUG_REPORTS_PATH,
    JSON_CONTENT_TYPE,
    SUCCESS_STATUS_CODES,
)
from shake_reporter.models.bug_report import BugReportRequest, BugReportResponse

logger = logging.getLogger(__name__)

AuthTokenProvider = Callable[[], Awaitable[Optional[str]]]

_FORBIDDEN_HEADER_CHARS = ("\r", "\n", "\0")


class BugReportClient:
    """
    Submits bug reports to a single backend endpoint.

    Usage:
        client = BugReportClient("https://api.example.com/api/v1", get_token)
        response = await client.submit(request)
    """

    def __init__(
        self,
        endpoint: str,
        auth_token_provider: Optional[AuthTokenProvider] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._endpoint = endpoint[:-1] if endpoint.endswith("/") else endpoint
        self._auth_token_provider = auth_token_provider
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def url(self) -> str:
        return f"{self._endpoint}{BUG_REPORTS_PATH}"

    async def _auth_headers(self) -> dict[str, str]:
        if self._auth_token_provider is None:
            return {}
        token = await self._auth_token_provider()
        if not token:
            logger.debug("Auth token provider returned nothing, sending unauthenticated")
            return {}

        # Header values go out as ASCII and must stay on one line
        value = f"Bearer {token}"
        try:
            value.encode("ascii")
        except UnicodeEncodeError as e:
            logger.warning("Auth token contains non-ASCII characters, cannot send it")
            raise EncodingError() from e
        if any(ch in value for ch in _FORBIDDEN_HEADER_CHARS):
            logger.warning("Auth token contains line breaks or NUL, cannot send it")
            raise EncodingError()
        return {"Authorization": value}

    async def submit(self, report: BugReportRequest) -> BugReportResponse:
        """
        Send one bug report.

        Parameters
        ----------
        report : BugReportRequest
            Payload to submit.

        Returns
        -------
        BugReportResponse
            Decoded server response for a 200 or 201 status.

        Raises
        ------
        BugReportError
            One of the subclasses in shake_reporter.client.errors.
        """
        try:
            body = report.to_json()
        except (PydanticSerializationError, TypeError, ValueError) as e:
            logger.warning("Could not encode bug report for %s: %s", report.app_id, e)
            raise EncodingError() from e

        headers = {"Content-Type": JSON_CONTENT_TYPE}
        headers.update(await self._auth_headers())

        logger.info(
            "Submitting bug report: app=%s priority=%s screenshot=%s",
            report.app_id,
            report.priority.value,
            report.screenshot_base64 is not None,
        )
        try:
            async with httpx.AsyncClient(transport=self._transport) as http:
                resp = await http.post(self.url, content=body, headers=headers)
        except httpx.LocalProtocolError as e:
            logger.warning("Outgoing bug report request was malformed: %s", e)
            raise EncodingError() from e
        except httpx.RemoteProtocolError as e:
            logger.warning("Unusable response from %s: %s", self.url, e)
            raise InvalidResponseError() from e
        except httpx.RequestError as e:
            logger.warning("Bug report transport failure for %s: %s", self.url, e)
            raise TransportError(e) from e

        return self._handle_response(resp)

    def _handle_response(self, resp: httpx.Response) -> BugReportResponse:
        status = resp.status_code
        if not 100 <= status <= 599:
            logger.warning("Bug report server returned invalid status %d", status)
            raise InvalidResponseError()

        if status in SUCCESS_STATUS_CODES:
            try:
                parsed = BugReportResponse.model_validate_json(resp.content)
            except ValidationError as e:
                logger.warning("Bug report response (HTTP %d) did not decode: %s", status, e)
                raise DecodingError(status) from e
            logger.info(
                "Bug report accepted: HTTP %d success=%s id=%s",
                status,
                parsed.success,
                parsed.bug_report.id if parsed.bug_report else None,
            )
            return parsed

        # Error status: a server-supplied message beats the raw status code
        try:
            parsed = BugReportResponse.model_validate_json(resp.content)
        except ValidationError:
            parsed = None

        if parsed is not None and parsed.error is not None:
            logger.warning("Bug report rejected: HTTP %d: %s", status, parsed.error)
            raise ServerError(parsed.error)

        logger.warning("Bug report rejected: HTTP %d", status)
        raise HttpError(status)
