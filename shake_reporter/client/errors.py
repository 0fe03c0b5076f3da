"""
Bug Report Errors
=================
Every failure of BugReportClient.submit surfaces as one of these.
str(error) is a message suitable for showing to the user.

    EncodingError         — request could not be serialized (payload bug)
    TransportError        — no response at all (DNS, connection, timeout)
    InvalidResponseError  — something came back but it was not usable HTTP
    ServerError           — error status with a server-supplied message
    HttpError             — error status without a usable message
    DecodingError         — 200/201 whose body does not match the contract
"""


class BugReportError(Exception):
    """Base class for bug report submission failures."""


class EncodingError(BugReportError):
    def __init__(self) -> None:
        super().__init__("Failed to encode bug report")


class TransportError(BugReportError):
    def __init__(self, cause: Exception) -> None:
        super().__init__("Could not reach the bug report server")
        self.cause = cause


class InvalidResponseError(BugReportError):
    def __init__(self) -> None:
        super().__init__("Invalid response from server")


class ServerError(BugReportError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class HttpError(BugReportError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"Server returned error code {status_code}")
        self.status_code = status_code


class DecodingError(BugReportError):
    def __init__(self, status_code: int) -> None:
        super().__init__("Failed to decode server response")
        self.status_code = status_code
