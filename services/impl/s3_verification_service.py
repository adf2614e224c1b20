"""
S3 Verification Service Implementation.

Step 3 of check-in: decide whether the citizen holding a scanned pass
may proceed to reception.

Checks run in a fixed order and the first disqualifier wins:
    1. pass decoding            -> invalid_payload
    2. appointment lookup       -> lookup_failed
    3. appointment status       -> cancelled / completed
    4. department               -> department_mismatch
    5. time window              -> too_early / late / expired
    6. otherwise                -> ok

Follows:
- SRP: Only decides admit/reject, never mutates the appointment
- DIP: Depends on IPayloadCodec and IAppointmentLookup abstractions
"""

import time
from datetime import datetime
from typing import Optional, Tuple

from core.appointment import (
    AppointmentPassCodec,
    DepartmentMatcher,
    StatusGate,
    classifyTimeWindow
)
from core.interfaces.appointment_lookup_interface import (
    AppointmentLookupError,
    AppointmentRecord,
    IAppointmentLookup
)
from core.interfaces.payload_codec_interface import AppointmentPass, IPayloadCodec
from core.interfaces.validation_interface import ReasonCode, TimeStatus, ValidationResult
from services.interfaces.verification_service_interface import IVerificationService
from services.interfaces.base_service_interface import BaseService


MSG_INVALID_PAYLOAD = (
    "Invalid QR code format. Please ensure this is a valid GovLink appointment QR code."
)
MSG_LOOKUP_REFUSED = "Appointment verification failed"
MSG_LOOKUP_ERROR = "Failed to validate appointment. Please try again or contact reception."
MSG_DEPARTMENT_MISMATCH = "This appointment is for {payloadDepartment}, not {terminalDepartment}"
MSG_TOO_EARLY = (
    "Too early! Please arrive no more than 1 hour before your appointment ({time})"
)
MSG_LATE = "You are late! Your appointment was at {time}. Please contact reception."
MSG_EXPIRED = "This appointment has expired. Your appointment was at {time} on {date}."
MSG_OK = "Valid appointment! You may proceed to reception."

# time status -> (reason code, message template)
_TIME_REJECTIONS = {
    TimeStatus.EARLY: (ReasonCode.TOO_EARLY, MSG_TOO_EARLY),
    TimeStatus.LATE: (ReasonCode.LATE, MSG_LATE),
    TimeStatus.EXPIRED: (ReasonCode.EXPIRED, MSG_EXPIRED),
}


class S3VerificationService(IVerificationService, BaseService):
    """
    Step 3: Verification Service Implementation.

    verify() always resolves to a ValidationResult. Lookup failures and
    unexpected errors surface as lookup_failed so the terminal can show
    a message and accept the next scan.
    """

    SERVICE_NAME = "s3_verification"

    def __init__(
        self,
        lookup: IAppointmentLookup,
        terminalDepartment: str = "",
        signingSecret: Optional[str] = None,
        codec: Optional[IPayloadCodec] = None,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S3VerificationService.

        Args:
            lookup: Read-only appointment lookup.
            terminalDepartment: Department served by this terminal.
            signingSecret: Shared HMAC secret for signed passes (None disables).
            codec: Pre-built pass codec; built from signingSecret when omitted.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._lookup = lookup
        self._codec: IPayloadCodec = codec or AppointmentPassCodec(
            signingSecret=signingSecret,
            logger=self._logger
        )
        self._terminalDepartment = terminalDepartment

        if not terminalDepartment:
            self._logger.warning(
                "No terminal department configured, every pass will be a department mismatch"
            )

        self._logger.info(
            f"S3VerificationService initialized "
            f"(department='{terminalDepartment}', "
            f"signedPasses={signingSecret is not None or codec is not None})"
        )

    @property
    def terminalDepartment(self) -> str:
        return self._terminalDepartment

    async def verify(
        self,
        rawText: str,
        terminalDepartment: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> ValidationResult:
        """
        Validate raw QR text against the booking system.

        Args:
            rawText: Raw QR text from the scan step.
            terminalDepartment: Department served by this terminal
                (defaults to the configured department).
            now: Current time (defaults to the local wall clock).

        Returns:
            ValidationResult: Always returned, never raises.
        """
        startTime = time.time()
        department = self._terminalDepartment if terminalDepartment is None else terminalDepartment

        try:
            result, reference = await self._evaluate(rawText, department, now)
        except Exception as e:
            self._logger.error(f"Unexpected error while verifying pass: {e}", exc_info=True)
            result = self._reject(ReasonCode.LOOKUP_FAILED, MSG_LOOKUP_ERROR)
            reference = "unknown"

        processingTimeMs = self._measureTime(startTime)
        self._logger.info(
            f"[{reference}] {result.reasonCode} "
            f"(admitted={result.admitted}, timeStatus={result.timeStatus}, "
            f"departmentMatch={result.departmentMatch}, time={processingTimeMs:.2f}ms)"
        )
        self._saveDebugJson(self._newFrameId("verify"), {"reference": reference, **result.toDict()})
        return result

    async def _evaluate(
        self,
        rawText: str,
        terminalDepartment: str,
        now: Optional[datetime]
    ) -> Tuple[ValidationResult, str]:
        appointmentPass = self._codec.decode(rawText)
        if appointmentPass is None:
            return self._reject(ReasonCode.INVALID_PAYLOAD, MSG_INVALID_PAYLOAD), "invalid"

        reference = appointmentPass.reference

        try:
            response = await self._lookup.findByReference(reference)
        except AppointmentLookupError as e:
            self._logger.error(f"[{reference}] Lookup failed: {e}")
            return self._reject(ReasonCode.LOOKUP_FAILED, MSG_LOOKUP_ERROR), reference

        if not response.success or response.data is None:
            self._logger.warning(f"[{reference}] Lookup refused: {response.message or 'no record'}")
            return self._reject(
                ReasonCode.LOOKUP_FAILED,
                response.message or MSG_LOOKUP_REFUSED
            ), reference

        return self._decide(appointmentPass, response.data, terminalDepartment, now), reference

    def _decide(
        self,
        appointmentPass: AppointmentPass,
        record: AppointmentRecord,
        terminalDepartment: str,
        now: Optional[datetime]
    ) -> ValidationResult:
        # Department and schedule come from the pass, not the record
        departmentMatch = DepartmentMatcher.isMatch(appointmentPass.department, terminalDepartment)
        timeStatus = classifyTimeWindow(appointmentPass.date, appointmentPass.time, now)

        def build(admitted: bool, reasonCode: str, message: str) -> ValidationResult:
            return ValidationResult(
                admitted=admitted,
                reasonCode=reasonCode,
                message=message,
                appointment=record,
                timeStatus=timeStatus,
                departmentMatch=departmentMatch
            )

        gate = StatusGate.check(record)
        if gate is not None:
            return build(False, gate.reasonCode, gate.message)

        if not departmentMatch:
            return build(False, ReasonCode.DEPARTMENT_MISMATCH, MSG_DEPARTMENT_MISMATCH.format(
                payloadDepartment=appointmentPass.department,
                terminalDepartment=terminalDepartment
            ))

        if timeStatus in _TIME_REJECTIONS:
            reasonCode, template = _TIME_REJECTIONS[timeStatus]
            return build(False, reasonCode, template.format(
                time=appointmentPass.time,
                date=appointmentPass.date
            ))

        return build(True, ReasonCode.OK, MSG_OK)

    @staticmethod
    def _reject(reasonCode: str, message: str) -> ValidationResult:
        return ValidationResult(admitted=False, reasonCode=reasonCode, message=message)

    async def aclose(self) -> None:
        """Release the lookup's network resources."""
        await self._lookup.aclose()
