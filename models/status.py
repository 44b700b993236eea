"""
Request lifecycle: the `status` string and the legacy numeric `my_status`
code that the dispatch UI filters on. Both are stored; this module keeps
them consistent and reports pairs that disagree.
"""
import enum
import logging
from typing import Optional, Tuple

from utils.errors import ValidationError

logger = logging.getLogger(__name__)


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in_transit"
    COMPLETED = "completed"

    @property
    def code(self) -> int:
        return STATUS_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "RequestStatus":
        for status, value in STATUS_CODES.items():
            if value == code:
                return status
        raise ValueError(f"unknown my_status code {code!r}")


STATUS_CODES = {
    RequestStatus.PENDING: 0,
    RequestStatus.ASSIGNED: 1,
    RequestStatus.IN_TRANSIT: 2,
    RequestStatus.COMPLETED: 3,
}

COMPLETED_CODE = STATUS_CODES[RequestStatus.COMPLETED]


def integrity_warning(status: Optional[str], my_status: Optional[int]) -> Optional[str]:
    """Describe a status/my_status pair that do not denote the same stage."""
    try:
        expected = RequestStatus(status).code
    except ValueError:
        return f"status {status!r} is not a known request status"
    if my_status != expected:
        return f"status {status!r} expects my_status {expected}, got {my_status!r}"
    return None


def resolve_status(
    status: Optional[str],
    my_status: Optional[int],
    *,
    status_given: bool,
    my_status_given: bool,
) -> Tuple[Optional[str], Optional[int]]:
    """
    Validate the status fields of a partial update and fill in the one the
    caller left out. Returns (status, my_status); an element is None when
    neither field was supplied.
    """
    if status_given:
        try:
            status = RequestStatus(status).value
        except ValueError:
            raise ValidationError("Invalid status", error=f"unknown status {status!r}")
    if my_status_given:
        try:
            RequestStatus.from_code(my_status)
        except ValueError:
            raise ValidationError("Invalid status", error=f"unknown myStatus {my_status!r}")

    if status_given and my_status_given:
        warning = integrity_warning(status, my_status)
        if warning:
            logger.warning("Request status mismatch: %s", warning)
        return status, my_status
    if status_given:
        return status, RequestStatus(status).code
    if my_status_given:
        return RequestStatus.from_code(my_status).value, my_status
    return None, None
