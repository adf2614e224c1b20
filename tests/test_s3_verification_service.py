import json
from datetime import datetime, timedelta

import httpx
import pytest

from core.interfaces.appointment_lookup_interface import (
    AppointmentLookupError,
    AppointmentStatus
)
from core.interfaces.validation_interface import ReasonCode, TimeStatus
from core.lookup import HttpAppointmentLookup
from services.impl.s3_verification_service import S3VerificationService
from tests.conftest import FakeLookup, SCHEDULED_AT, encodePass, makePass, makeRecord


TERMINAL_DEPARTMENT = "Immigration Department"
ON_TIME = datetime(2025, 8, 15, 9, 10)


def makeService(lookup, **kwargs) -> S3VerificationService:
    kwargs.setdefault("terminalDepartment", TERMINAL_DEPARTMENT)
    return S3VerificationService(lookup=lookup, **kwargs)


class TestScenarios:

    async def test_a_valid_appointment_is_admitted(self, fakeLookup, rawPass):
        result = await makeService(fakeLookup).verify(rawPass, now=ON_TIME)

        assert result.admitted
        assert result.reasonCode == ReasonCode.OK
        assert result.timeStatus == TimeStatus.VALID
        assert result.departmentMatch
        assert result.message == "Valid appointment! You may proceed to reception."
        assert result.appointment.bookingReference == "GV-001"

    async def test_b_too_early(self, fakeLookup, rawPass):
        result = await makeService(fakeLookup).verify(rawPass, now=datetime(2025, 8, 15, 7, 30))

        assert not result.admitted
        assert result.reasonCode == ReasonCode.TOO_EARLY
        assert result.timeStatus == TimeStatus.EARLY
        assert result.message == (
            "Too early! Please arrive no more than 1 hour before your appointment (09:00)"
        )

    async def test_c_department_mismatch(self, fakeLookup, rawPass):
        result = await makeService(fakeLookup, terminalDepartment="Land Registry").verify(
            rawPass, now=ON_TIME
        )

        assert not result.admitted
        assert result.reasonCode == ReasonCode.DEPARTMENT_MISMATCH
        assert not result.departmentMatch
        assert result.message == "This appointment is for Immigration, not Land Registry"

    async def test_d_unknown_reference(self, fakeLookup):
        raw = encodePass(makePass(reference="GV-999"))

        result = await makeService(fakeLookup).verify(raw, now=ON_TIME)

        assert not result.admitted
        assert result.reasonCode == ReasonCode.LOOKUP_FAILED
        assert result.message == "Appointment not found"
        assert result.appointment is None
        assert fakeLookup.calls == ["GV-999"]


class TestEvaluationOrder:

    async def test_invalid_payload_skips_lookup(self, fakeLookup):
        result = await makeService(fakeLookup).verify("not a govlink pass", now=ON_TIME)

        assert result.reasonCode == ReasonCode.INVALID_PAYLOAD
        assert result.message.startswith("Invalid QR code format.")
        assert result.appointment is None
        assert result.timeStatus is None
        assert not result.departmentMatch
        assert fakeLookup.calls == []

    async def test_cancelled_on_time_is_rejected(self, rawPass):
        lookup = FakeLookup({"GV-001": makeRecord(status=AppointmentStatus.CANCELLED)})

        result = await makeService(lookup).verify(rawPass, now=ON_TIME)

        assert not result.admitted
        assert result.reasonCode == ReasonCode.CANCELLED
        assert result.message == "This appointment has been cancelled."
        assert result.timeStatus == TimeStatus.VALID
        assert result.appointment.status == AppointmentStatus.CANCELLED

    async def test_completed_is_rejected(self, rawPass):
        lookup = FakeLookup({"GV-001": makeRecord(status=AppointmentStatus.COMPLETED)})

        result = await makeService(lookup).verify(rawPass, now=ON_TIME)

        assert result.reasonCode == ReasonCode.COMPLETED

    async def test_status_checked_before_department(self, rawPass):
        lookup = FakeLookup({"GV-001": makeRecord(status=AppointmentStatus.CANCELLED)})

        result = await makeService(lookup, terminalDepartment="Land Registry").verify(
            rawPass, now=ON_TIME
        )

        assert result.reasonCode == ReasonCode.CANCELLED
        assert not result.departmentMatch

    async def test_department_checked_before_time(self, fakeLookup, rawPass):
        result = await makeService(fakeLookup, terminalDepartment="Land Registry").verify(
            rawPass, now=datetime(2025, 8, 15, 7, 30)
        )

        assert result.reasonCode == ReasonCode.DEPARTMENT_MISMATCH
        assert result.timeStatus == TimeStatus.EARLY

    async def test_pending_appointment_is_admitted(self, rawPass):
        lookup = FakeLookup({"GV-001": makeRecord(status=AppointmentStatus.PENDING)})

        result = await makeService(lookup).verify(rawPass, now=ON_TIME)

        assert result.admitted

    async def test_department_taken_from_pass_not_record(self, rawPass):
        lookup = FakeLookup({"GV-001": makeRecord(department="Land Registry")})

        result = await makeService(lookup).verify(rawPass, now=ON_TIME)

        assert result.admitted
        assert result.departmentMatch


class TestTimeWindowOutcomes:

    async def test_late(self, fakeLookup, rawPass):
        result = await makeService(fakeLookup).verify(rawPass, now=SCHEDULED_AT + timedelta(minutes=30))

        assert result.reasonCode == ReasonCode.LATE
        assert result.timeStatus == TimeStatus.LATE
        assert result.message == "You are late! Your appointment was at 09:00. Please contact reception."

    async def test_expired(self, fakeLookup, rawPass):
        result = await makeService(fakeLookup).verify(rawPass, now=SCHEDULED_AT + timedelta(hours=3))

        assert result.reasonCode == ReasonCode.EXPIRED
        assert result.message == (
            "This appointment has expired. Your appointment was at 09:00 on 2025-08-15."
        )

    async def test_grace_period_edge_is_admitted(self, fakeLookup, rawPass):
        result = await makeService(fakeLookup).verify(rawPass, now=SCHEDULED_AT + timedelta(minutes=15))
        assert result.admitted


class TestFailureHandling:

    async def test_lookup_error_is_reported(self, rawPass):
        lookup = FakeLookup({"GV-001": AppointmentLookupError("connection refused")})

        result = await makeService(lookup).verify(rawPass, now=ON_TIME)

        assert result.reasonCode == ReasonCode.LOOKUP_FAILED
        assert result.message == (
            "Failed to validate appointment. Please try again or contact reception."
        )
        assert result.appointment is None

    async def test_unexpected_error_never_escapes(self, rawPass):
        lookup = FakeLookup({"GV-001": RuntimeError("bug in lookup")})

        result = await makeService(lookup).verify(rawPass, now=ON_TIME)

        assert not result.admitted
        assert result.reasonCode == ReasonCode.LOOKUP_FAILED


class TestConfiguration:

    async def test_department_override_per_call(self, fakeLookup, rawPass):
        service = makeService(fakeLookup, terminalDepartment="Land Registry")

        result = await service.verify(rawPass, terminalDepartment="Immigration", now=ON_TIME)

        assert result.admitted

    async def test_signed_passes_required_when_secret_configured(self, fakeLookup):
        service = makeService(fakeLookup, signingSecret="s3cret")

        unsigned = await service.verify(encodePass(), now=ON_TIME)
        signed = await service.verify(encodePass(signingSecret="s3cret"), now=ON_TIME)

        assert unsigned.reasonCode == ReasonCode.INVALID_PAYLOAD
        assert signed.admitted
        assert fakeLookup.calls == ["GV-001"]

    async def test_debug_json_written(self, fakeLookup, rawPass, tmp_path):
        service = makeService(fakeLookup, debugBasePath=str(tmp_path), debugEnabled=True)

        await service.verify(rawPass, now=ON_TIME)

        files = list((tmp_path / "s3_verification").glob("verify_*.json"))
        assert len(files) == 1
        saved = json.loads(files[0].read_text(encoding="utf-8"))
        assert saved["reference"] == "GV-001"
        assert saved["reasonCode"] == ReasonCode.OK

    async def test_aclose_closes_lookup(self, fakeLookup):
        await makeService(fakeLookup).aclose()
        assert fakeLookup.closed


async def test_end_to_end_over_http(rawPass):
    def handler(request):
        if request.url.params["ref"] != "GV-001":
            return httpx.Response(404, json={"success": False, "message": "Appointment not found"})
        return httpx.Response(200, json={"success": True, "appointment": {
            "bookingReference": "GV-001",
            "date": "2025-08-15T00:00:00.000Z",
            "time": "09:00",
            "status": "confirmed"
        }})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    service = makeService(HttpAppointmentLookup("http://booking.test", client=client))

    admitted = await service.verify(rawPass, now=ON_TIME)
    unknown = await service.verify(encodePass(makePass(reference="GV-999")), now=ON_TIME)

    assert admitted.admitted
    assert admitted.appointment.date == "2025-08-15"
    assert unknown.reasonCode == ReasonCode.LOOKUP_FAILED
    await client.aclose()


@pytest.mark.parametrize("minutesAfter, reasonCode", [
    (-61, ReasonCode.TOO_EARLY),
    (-60, ReasonCode.OK),
    (-15, ReasonCode.OK),
    (120, ReasonCode.LATE),
    (121, ReasonCode.EXPIRED),
])
async def test_reason_codes_follow_time_window(fakeLookup, rawPass, minutesAfter, reasonCode):
    result = await makeService(fakeLookup).verify(rawPass, now=SCHEDULED_AT + timedelta(minutes=minutesAfter))
    assert result.reasonCode == reasonCode
