"""
Report Fingerprint Utility
==========================
Stable signature used by the dev stub backend to flag duplicate reports.

Signature:
    app_id + description (lower-cased, whitespace collapsed)
    Two reports with the same wording from the same app collide,
    regardless of priority, screenshot or device metadata.
"""
import hashlib

from shake_reporter.models.bug_report import BugReportRequest


def normalize_description(description: str) -> str:
    return " ".join(description.lower().split())


def generate_report_signature(report: BugReportRequest) -> str:
    """
    Generate a deterministic signature for a bug report.

    Parameters
    ----------
    report : BugReportRequest
        The report to fingerprint.

    Returns
    -------
    str
        16-character hex signature.
    """
    raw = f"{report.app_id}:{normalize_description(report.description)}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]
