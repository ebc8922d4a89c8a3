"""Success/failure classification shared by the async and blocking paths."""

from __future__ import annotations

# Any status at or above this is an application-level failure
FAILURE_STATUS_THRESHOLD = 300


def is_success(status_code: int, error: str | None = None) -> bool:
    """
    Classify a completed request.

    Args:
        status_code: HTTP status code (0 if no response was received)
        error: Transport error description, if the transport failed

    Returns:
        True only if there was no transport error and the status is below 300
    """
    if error is not None:
        return False
    return 0 < status_code < FAILURE_STATUS_THRESHOLD
