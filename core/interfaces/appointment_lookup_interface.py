"""
Appointment Lookup Interface Module.

Defines the authoritative appointment record owned by the booking system
and the read-only lookup used to fetch it by booking reference.

Follows:
- ISP: Only one read operation
- DIP: The verification service depends on this abstraction, not on HTTP
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


class AppointmentStatus:
    """Appointment status values as stored by the booking system."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    ALL = [PENDING, CONFIRMED, CANCELLED, COMPLETED]


@dataclass
class AppointmentRecord:
    """
    Authoritative appointment record (read-only here).

    Attributes:
        bookingReference: Booking reference, matches AppointmentPass.reference
        citizenName: Citizen name on the booking
        serviceType: Booked service
        date: Scheduled date (YYYY-MM-DD)
        time: Scheduled time (HH:MM)
        status: One of AppointmentStatus values
        department: Department on file (may differ from a stale pass)
    """
    bookingReference: str
    citizenName: str = ""
    serviceType: str = ""
    date: str = ""
    time: str = ""
    status: str = AppointmentStatus.PENDING
    department: str = ""

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> "AppointmentRecord":
        """
        Build a record from the booking API JSON.

        The API serializes dates as ISO strings, sometimes with a time
        component ("2025-08-15T00:00:00.000Z"); only the date part is kept.
        """
        rawDate = str(data.get("date") or "")
        return cls(
            bookingReference=str(data.get("bookingReference") or ""),
            citizenName=str(data.get("citizenName") or ""),
            serviceType=str(data.get("serviceType") or ""),
            date=rawDate.split("T")[0],
            time=str(data.get("time") or ""),
            status=str(data.get("status") or AppointmentStatus.PENDING).lower(),
            department=str(data.get("department") or "")
        )

    def toDict(self) -> Dict[str, Any]:
        """Serialize the record for display and audit output."""
        return asdict(self)


@dataclass
class LookupResponse:
    """
    Response of an appointment lookup.

    Attributes:
        success: False for "not found" and other business-level refusals
        message: Backend message, if any
        data: The appointment record when success is True
    """
    success: bool
    message: str = ""
    data: Optional[AppointmentRecord] = None


class AppointmentLookupError(Exception):
    """Raised when the booking system cannot be reached or answers garbage."""


class IAppointmentLookup(ABC):
    """
    Interface for the read-only appointment lookup.

    Implementations must report "reference not found" as a non-success
    LookupResponse and raise AppointmentLookupError for transport failures.
    """

    @abstractmethod
    async def findByReference(self, reference: str) -> LookupResponse:
        """
        Fetch the authoritative record for a booking reference.

        Args:
            reference: Booking reference from the appointment pass

        Returns:
            LookupResponse with the record on success

        Raises:
            AppointmentLookupError: On network/transport/protocol failure
        """
        pass

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to release."""
        return None
