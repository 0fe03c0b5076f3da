"""
Shake Reporter
==============
Report submission flow behind the shake-to-report form.

Steps:
    1. Guard: trimmed description must reach MIN_DESCRIPTION_LENGTH
    2. Assemble BugReportRequest from form input, device info and screenshot
    3. Submit through BugReportClient
    4. Turn the response or error into a SubmissionOutcome for display

The client raises on every transport/status failure; this layer is the
caller that decides what the user sees, so it converts BugReportError
into a failed outcome carrying the error's message.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from shake_reporter.client.bug_report_client import BugReportClient
from shake_reporter.client.errors import BugReportError
from shake_reporter.core.config import ReporterConfiguration
from shake_reporter.core.constants import (
    MIN_DESCRIPTION_LENGTH,
    SUCCESS_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
)
from shake_reporter.models.bug_report import (
    BugReportInfo,
    BugReportPriority,
    BugReportRequest,
)
from shake_reporter.models.device_info import DeviceInfo
from shake_reporter.utils.screenshot import encode_screenshot

logger = logging.getLogger(__name__)


@dataclass
class SubmissionOutcome:
    """What the form shows after a submit attempt."""
    success: bool
    message: str
    bug_report: Optional[BugReportInfo] = None


class ShakeReporter:
    """
    Submits form input as a bug report.

    Usage:
        reporter = ShakeReporter(ReporterConfiguration("myapp", "https://api.example.com"))
        outcome = await reporter.submit("Crash on save", BugReportPriority.HIGH)
    """

    def __init__(
        self,
        configuration: ReporterConfiguration,
        device_info_provider: Optional[Callable[[], DeviceInfo]] = None,
        client: Optional[BugReportClient] = None,
    ) -> None:
        self.configuration = configuration
        self.device_info_provider = device_info_provider
        self.client = client or BugReportClient(
            configuration.api_endpoint,
            configuration.auth_token_provider,
        )

    @staticmethod
    def can_submit(description: str) -> bool:
        return len(description.strip()) >= MIN_DESCRIPTION_LENGTH

    def build_request(
        self,
        description: str,
        priority: BugReportPriority = BugReportPriority.MEDIUM,
        screenshot_jpeg: Optional[bytes] = None,
        screen_name: Optional[str] = None,
    ) -> BugReportRequest:
        if not self.can_submit(description):
            raise ValueError(
                f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
            )

        device = self.device_info_provider() if self.device_info_provider else DeviceInfo()
        return BugReportRequest(
            app_id=self.configuration.app_id,
            description=description.strip(),
            priority=priority,
            screenshot_base64=encode_screenshot(screenshot_jpeg),
            app_version=device.app_version,
            build_number=device.build_number,
            ios_version=device.os_version,
            device_model=device.device_model,
            screen_name=screen_name,
        )

    async def submit(
        self,
        description: str,
        priority: BugReportPriority = BugReportPriority.MEDIUM,
        screenshot_jpeg: Optional[bytes] = None,
        screen_name: Optional[str] = None,
    ) -> SubmissionOutcome:
        request = self.build_request(description, priority, screenshot_jpeg, screen_name)

        try:
            response = await self.client.submit(request)
        except BugReportError as e:
            logger.warning("Bug report submission failed: %s", e)
            return SubmissionOutcome(success=False, message=str(e))

        if response.success:
            return SubmissionOutcome(
                success=True,
                message=SUCCESS_MESSAGE,
                bug_report=response.bug_report,
            )
        return SubmissionOutcome(
            success=False,
            message=response.error or UNKNOWN_ERROR_MESSAGE,
            bug_report=response.bug_report,
        )
