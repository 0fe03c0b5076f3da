"""
Constants
Wire-contract paths, headers and user-facing strings shared across the package.
"""
BUG_REPORTS_PATH = "/bug-reports"
JSON_CONTENT_TYPE = "application/json"
SUCCESS_STATUS_CODES = (200, 201)

# Submit is disabled below this many characters of trimmed description
MIN_DESCRIPTION_LENGTH = 5

SUCCESS_MESSAGE = "Your bug report has been submitted. We'll look into it!"
UNKNOWN_ERROR_MESSAGE = "Unknown error"
