"""
Appointment Pass Codec.

Converts the JSON text embedded in appointment pass QR codes into
AppointmentPass objects and back.

Wire format (compact JSON object, short keys):
    {"ref": "GV-001", "name": "...", "service": "...", "dept": "...",
     "date": "2025-08-15", "time": "09:00", "agent": "...", "office": "...",
     "verify": "https://.../verify-appointment?ref=GV-001",
     "generated": "2025-08-01T10:00:00+00:00"}

When a signing secret is configured, passes carry an extra "sig" field:
hex HMAC-SHA256 over the canonical JSON of the pass fields. Passes with
a missing or wrong signature are then rejected before any lookup.
"""

import hmac
import json
import hashlib
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.appointment.time_window import parseScheduledInstant
from core.interfaces.payload_codec_interface import AppointmentPass, IPayloadCodec


# attribute name -> wire key
FIELD_KEYS = {
    "reference": "ref",
    "citizenName": "name",
    "serviceType": "service",
    "department": "dept",
    "date": "date",
    "time": "time",
    "agentName": "agent",
    "officeName": "office",
    "verificationMarker": "verify",
    "generatedAt": "generated",
}

REQUIRED_KEYS = ("ref", "date", "time", "dept")
SIGNATURE_KEY = "sig"


class AppointmentPassCodec(IPayloadCodec):
    """
    JSON codec for appointment pass QR payloads.

    decode() returns None for anything that is not a complete pass with
    a real calendar date-time; it never raises and never returns a
    partially filled pass.
    """

    def __init__(
        self,
        signingSecret: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize AppointmentPassCodec.

        Args:
            signingSecret: Shared HMAC secret. None disables signing and
                signature verification.
            logger: Logger instance for debug output
        """
        self._secret = signingSecret.encode("utf-8") if signingSecret else None
        self._logger = logger or logging.getLogger(__name__)

    @property
    def isSigningEnabled(self) -> bool:
        """Check if passes are signed and verified."""
        return self._secret is not None

    def decode(self, rawText: str) -> Optional[AppointmentPass]:
        """
        Decode scanned QR text into an appointment pass.

        Args:
            rawText: Raw QR content

        Returns:
            AppointmentPass if valid, None otherwise
        """
        if not isinstance(rawText, str) or not rawText.strip():
            self._logger.warning("Empty QR payload")
            return None

        try:
            data = json.loads(rawText)
        except ValueError as e:
            self._logger.warning(f"QR payload is not valid JSON: {e}")
            return None

        if not isinstance(data, dict):
            self._logger.warning("QR payload is not a JSON object")
            return None

        for key in REQUIRED_KEYS:
            value = data.get(key)
            if not isinstance(value, str) or not value.strip():
                self._logger.warning(f"QR payload missing required field '{key}'")
                return None

        fields = {
            attr: self._textField(data.get(key))
            for attr, key in FIELD_KEYS.items()
        }

        try:
            parseScheduledInstant(fields["date"], fields["time"])
        except ValueError:
            self._logger.warning(
                f"QR payload has invalid schedule: "
                f"date='{fields['date']}', time='{fields['time']}'"
            )
            return None

        if self._secret is not None and not self._verifySignature(data):
            self._logger.warning(
                f"[{fields['reference']}] QR payload signature missing or invalid"
            )
            return None

        appointmentPass = AppointmentPass(**fields)
        self._logger.debug(
            f"QR parsed: ref={appointmentPass.reference}, "
            f"dept={appointmentPass.department}, "
            f"date={appointmentPass.date}, time={appointmentPass.time}"
        )
        return appointmentPass

    def encode(self, appointmentPass: AppointmentPass) -> str:
        """
        Encode an appointment pass into compact JSON QR text.

        Fills generatedAt with the current UTC time when empty.

        Args:
            appointmentPass: Pass to serialize

        Returns:
            str: QR payload text
        """
        data: Dict[str, Any] = {
            key: getattr(appointmentPass, attr)
            for attr, key in FIELD_KEYS.items()
        }
        if not data["generated"]:
            data["generated"] = datetime.now(timezone.utc).isoformat()

        if self._secret is not None:
            data[SIGNATURE_KEY] = self._sign(data)

        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))

    def _sign(self, data: Dict[str, Any]) -> str:
        """Compute the hex HMAC-SHA256 over the canonical pass fields."""
        canonical = json.dumps(
            {key: self._textField(data.get(key)) for key in FIELD_KEYS.values()},
            ensure_ascii=False,
            sort_keys=True,
            separators=(",", ":")
        )
        return hmac.new(self._secret, canonical.encode("utf-8"), hashlib.sha256).hexdigest()

    def _verifySignature(self, data: Dict[str, Any]) -> bool:
        """Check the "sig" field against the expected signature."""
        signature = data.get(SIGNATURE_KEY)
        if not isinstance(signature, str) or not signature:
            return False
        return hmac.compare_digest(signature, self._sign(data))

    @staticmethod
    def _textField(value: Any) -> str:
        """Coerce an optional wire value to a stripped string."""
        if value is None:
            return ""
        return str(value).strip()
