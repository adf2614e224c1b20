"""
Appointment Status Gate.

Rejects appointments whose authoritative status alone rules out a
check-in, before any timing or department checks are considered.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from core.interfaces.appointment_lookup_interface import (
    AppointmentRecord,
    AppointmentStatus
)
from core.interfaces.validation_interface import ReasonCode


logger = logging.getLogger(__name__)


@dataclass
class GateDecision:
    """
    Disqualification produced by the status gate.

    Attributes:
        reasonCode: ReasonCode.CANCELLED or ReasonCode.COMPLETED
        message: Operator-facing explanation
    """
    reasonCode: str
    message: str


class StatusGate:
    """
    Status-based disqualification of appointment records.

    cancelled and completed appointments are rejected outright;
    pending and confirmed appointments defer to the time/department checks.
    """

    _DISQUALIFYING: Dict[str, GateDecision] = {
        AppointmentStatus.CANCELLED: GateDecision(
            reasonCode=ReasonCode.CANCELLED,
            message="This appointment has been cancelled."
        ),
        AppointmentStatus.COMPLETED: GateDecision(
            reasonCode=ReasonCode.COMPLETED,
            message="This appointment has already been completed."
        ),
    }

    @classmethod
    def check(cls, record: AppointmentRecord) -> Optional[GateDecision]:
        """
        Check whether the record's status disqualifies check-in.

        Args:
            record: Authoritative appointment record

        Returns:
            GateDecision if disqualified, None otherwise
        """
        status = (record.status or "").strip().lower()

        decision = cls._DISQUALIFYING.get(status)
        if decision is not None:
            return decision

        if status not in AppointmentStatus.ALL:
            logger.warning(
                f"[{record.bookingReference}] Unknown appointment status "
                f"'{record.status}', not treated as disqualifying"
            )
        return None
