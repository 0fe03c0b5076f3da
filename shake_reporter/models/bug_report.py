"""
Bug Report Models
=================
Pydantic models for the bug report wire contract.

Request fields (JSON name in brackets):
    app_id              — [appId] identifier of the reporting app
    description         — [description] trimmed by the caller
    priority            — [priority] low / medium / high
    screenshot_base64   — [screenshotBase64] base64 JPEG, optional
    app_version         — [appVersion] optional
    build_number        — [buildNumber] optional
    ios_version         — [iosVersion] OS version of the device, optional
    device_model        — [deviceModel] optional
    screen_name         — [screenName] optional

Optional fields that are None are omitted from the JSON body, never sent
as null.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BugReportPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return _PRIORITY_COLORS[self]


_PRIORITY_COLORS = {
    BugReportPriority.LOW: "green",
    BugReportPriority.MEDIUM: "orange",
    BugReportPriority.HIGH: "red",
}


class BugReportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    app_id: str = Field(alias="appId")
    description: str
    priority: BugReportPriority
    screenshot_base64: Optional[str] = Field(default=None, alias="screenshotBase64")
    app_version: Optional[str] = Field(default=None, alias="appVersion")
    build_number: Optional[str] = Field(default=None, alias="buildNumber")
    ios_version: Optional[str] = Field(default=None, alias="iosVersion")
    device_model: Optional[str] = Field(default=None, alias="deviceModel")
    screen_name: Optional[str] = Field(default=None, alias="screenName")

    def to_json(self) -> bytes:
        """Serialize to the UTF-8 JSON body sent to the server."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


class BugReportInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    status: str
    is_duplicate: Optional[bool] = Field(default=None, alias="isDuplicate")
    canonical_id: Optional[str] = Field(default=None, alias="canonicalId")


class BugReportResponse(BaseModel):
    """
    Response body of POST /bug-reports.

    `success`, `bug_report` and `error` are not cross-validated: a server
    may set both or neither, and callers inspect them directly.
    """
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    bug_report: Optional[BugReportInfo] = Field(default=None, alias="bugReport")
    error: Optional[str] = None
