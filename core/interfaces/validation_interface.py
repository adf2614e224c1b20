"""
Validation Interface Module.

Defines the check-in decision vocabulary shared by the time-window
classifier, the status gate and the verification service.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.interfaces.appointment_lookup_interface import AppointmentRecord


class TimeStatus:
    """Time-window buckets for a check-in attempt."""
    EARLY = "early"
    VALID = "valid"
    LATE = "late"
    EXPIRED = "expired"


class ReasonCode:
    """Outcome codes of a check-in validation."""
    OK = "ok"
    INVALID_PAYLOAD = "invalid_payload"
    DEPARTMENT_MISMATCH = "department_mismatch"
    TOO_EARLY = "too_early"
    LATE = "late"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    LOOKUP_FAILED = "lookup_failed"


@dataclass
class ValidationResult:
    """
    Result of validating one scanned appointment pass.

    Created fresh per scan, shown to the operator, then discarded.

    Attributes:
        admitted: True only for ReasonCode.OK
        reasonCode: One of ReasonCode values
        message: Human-readable explanation for the operator
        appointment: Authoritative record (None if it was never fetched)
        timeStatus: One of TimeStatus values, None if not computed
        departmentMatch: Whether the pass department matches the terminal
    """
    admitted: bool
    reasonCode: str
    message: str
    appointment: Optional[AppointmentRecord] = None
    timeStatus: Optional[str] = None
    departmentMatch: bool = False

    def toDict(self) -> Dict[str, Any]:
        """Serialize for audit and debug output."""
        return {
            "admitted": self.admitted,
            "reasonCode": self.reasonCode,
            "message": self.message,
            "appointment": self.appointment.toDict() if self.appointment else None,
            "timeStatus": self.timeStatus,
            "departmentMatch": self.departmentMatch
        }
