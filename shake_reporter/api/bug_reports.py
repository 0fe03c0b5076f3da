"""
POST /bug-reports
=================
Development stub of the bug report backend. Speaks the same wire contract
as the production API so the client can be exercised locally and in tests.

Behaviour:
    - Body must decode as BugReportRequest, else 400 with the validation error
    - Trimmed description shorter than MIN_DESCRIPTION_LENGTH → 400 "description too short"
    - STUB_REQUIRED_TOKEN set → missing or wrong Bearer token is 401 "unauthorized"
    - Accepted → 201; repeated signatures are flagged isDuplicate with canonicalId

Reports live in memory only.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from shake_reporter.core import config
from shake_reporter.core.constants import BUG_REPORTS_PATH, MIN_DESCRIPTION_LENGTH
from shake_reporter.models.bug_report import (
    BugReportInfo,
    BugReportRequest,
    BugReportResponse,
)
from shake_reporter.utils.report_fingerprint import generate_report_signature

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bug Reports"])


@dataclass
class StoredBugReport:
    info: BugReportInfo
    request: BugReportRequest
    signature: str


class BugReportStore:
    """In-memory report store with duplicate detection by signature."""

    def __init__(self) -> None:
        self._reports: Dict[str, StoredBugReport] = {}
        self._canonical: Dict[str, str] = {}

    def add(self, report: BugReportRequest) -> BugReportInfo:
        signature = generate_report_signature(report)
        report_id = str(uuid.uuid4())[:12]
        canonical_id = self._canonical.get(signature)

        if canonical_id is None:
            self._canonical[signature] = report_id
            info = BugReportInfo(id=report_id, status="open", is_duplicate=False)
        else:
            info = BugReportInfo(
                id=report_id,
                status="duplicate",
                is_duplicate=True,
                canonical_id=canonical_id,
            )

        self._reports[report_id] = StoredBugReport(info=info, request=report, signature=signature)
        return info

    def get(self, report_id: str) -> Optional[StoredBugReport]:
        return self._reports.get(report_id)

    def all(self) -> List[StoredBugReport]:
        return list(self._reports.values())

    def clear(self) -> None:
        self._reports.clear()
        self._canonical.clear()


store = BugReportStore()


def _failure(status_code: int, message: str) -> JSONResponse:
    body = BugReportResponse(success=False, error=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.post(BUG_REPORTS_PATH)
async def create_bug_report(request: Request):
    if config.STUB_REQUIRED_TOKEN:
        if request.headers.get("authorization") != f"Bearer {config.STUB_REQUIRED_TOKEN}":
            logger.info("Rejected bug report: missing or wrong bearer token")
            return _failure(401, "unauthorized")

    raw = await request.body()
    try:
        report = BugReportRequest.model_validate_json(raw)
    except ValidationError as e:
        logger.info("Rejected malformed bug report: %d error(s)", e.error_count())
        return _failure(400, f"invalid bug report: {e.errors()[0]['msg']}")

    if len(report.description.strip()) < MIN_DESCRIPTION_LENGTH:
        return _failure(400, "description too short")

    info = store.add(report)
    logger.info(
        "Stored bug report %s for %s (status=%s)", info.id, report.app_id, info.status
    )
    body = BugReportResponse(success=True, bug_report=info)
    return JSONResponse(
        status_code=201,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )
