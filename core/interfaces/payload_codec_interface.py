"""
Payload Codec Interface Module.

Defines the appointment pass data class embedded in QR codes and the
interface for turning scanned text into a pass (and back).

Follows the Interface Segregation Principle (ISP) from SOLID.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class AppointmentPass:
    """
    Appointment pass decoded from a QR code. Untrusted input.

    Attributes:
        reference: Booking reference (lookup key into the booking system)
        citizenName: Citizen name printed on the pass
        serviceType: Requested service
        department: Free-text department label at pass-generation time
        date: Scheduled date (YYYY-MM-DD)
        time: Scheduled time (HH:MM, 24h)
        agentName: Assigned agent
        officeName: Office where the appointment takes place
        verificationMarker: Opaque issuer marker (usually a verification URL)
        generatedAt: ISO timestamp of pass creation
    """
    reference: str
    citizenName: str
    serviceType: str
    department: str
    date: str
    time: str
    agentName: str = ""
    officeName: str = ""
    verificationMarker: str = ""
    generatedAt: str = ""


class IPayloadCodec(ABC):
    """
    Interface for the appointment pass codec.

    decode() never raises: malformed content is reported as None so the
    caller can show an "invalid QR" message and accept the next scan.
    """

    @abstractmethod
    def decode(self, rawText: str) -> Optional[AppointmentPass]:
        """
        Decode scanned QR text into an appointment pass.

        Args:
            rawText: Raw text delivered by the scan adapter

        Returns:
            AppointmentPass if well-formed, None otherwise
        """
        pass

    @abstractmethod
    def encode(self, appointmentPass: AppointmentPass) -> str:
        """
        Encode an appointment pass into QR text.

        Args:
            appointmentPass: Pass to serialize

        Returns:
            str: QR payload text
        """
        pass
