import json
import asyncio
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

import cv2
import numpy as np
import pytest

from core.appointment.payload_codec import AppointmentPassCodec
from core.interfaces.appointment_lookup_interface import (
    AppointmentRecord,
    AppointmentStatus,
    IAppointmentLookup,
    LookupResponse
)
from core.interfaces.camera_interface import CameraInfo, ICameraCapture
from core.interfaces.payload_codec_interface import AppointmentPass
from core.interfaces.qr_detector_interface import IQrDetector, QrDetectionResult


SCHEDULED_DATE = "2025-08-15"
SCHEDULED_TIME = "09:00"
SCHEDULED_AT = datetime(2025, 8, 15, 9, 0)


class FakeLookup(IAppointmentLookup):
    """In-memory lookup. Unknown references answer "Appointment not found"."""

    def __init__(self, records: Optional[Dict[str, Union[AppointmentRecord, Exception]]] = None):
        self.records = dict(records or {})
        self.calls: List[str] = []
        self.closed = False
        # When set, lookups wait for it before answering
        self.gate: Optional[asyncio.Event] = None

    async def findByReference(self, reference: str) -> LookupResponse:
        self.calls.append(reference)
        if self.gate is not None:
            await self.gate.wait()

        entry = self.records.get(reference)
        if entry is None:
            return LookupResponse(success=False, message="Appointment not found")
        if isinstance(entry, Exception):
            raise entry
        return LookupResponse(success=True, data=entry)

    async def aclose(self) -> None:
        self.closed = True


def makePass(**overrides) -> AppointmentPass:
    fields = dict(
        reference="GV-001",
        citizenName="Nimal Perera",
        serviceType="Passport Renewal",
        department="Immigration",
        date=SCHEDULED_DATE,
        time=SCHEDULED_TIME,
        agentName="K. Silva",
        officeName="Colombo Head Office",
        verificationMarker="https://govlink.lk/verify-appointment?ref=GV-001",
        generatedAt="2025-08-01T10:00:00+00:00",
    )
    fields.update(overrides)
    return AppointmentPass(**fields)


def makeRecord(**overrides) -> AppointmentRecord:
    fields = dict(
        bookingReference="GV-001",
        citizenName="Nimal Perera",
        serviceType="Passport Renewal",
        date=SCHEDULED_DATE,
        time=SCHEDULED_TIME,
        status=AppointmentStatus.CONFIRMED,
        department="Immigration",
    )
    fields.update(overrides)
    return AppointmentRecord(**fields)


def encodePass(appointmentPass: Optional[AppointmentPass] = None, signingSecret: Optional[str] = None) -> str:
    return AppointmentPassCodec(signingSecret=signingSecret).encode(appointmentPass or makePass())


@pytest.fixture
def fakeLookup() -> FakeLookup:
    return FakeLookup({"GV-001": makeRecord()})


@pytest.fixture
def rawPass() -> str:
    return encodePass()


@pytest.fixture
def configFile(tmp_path):
    """Write a minimal terminal config and return its path."""
    def _write(**sections) -> str:
        config = {
            "terminal": {
                "terminalId": "test-terminal",
                "department": "Immigration Department",
                "recentScanCapacity": 5,
                "cameraPollIntervalSeconds": 0.0
            },
            "s2_qr_scan": {"backend": "zxing"},
            "lookup": {"baseUrl": "http://booking.test", "timeoutSeconds": 1.0},
            "audit": {"enabled": False, "filePath": str(tmp_path / "audit" / "checkins.jsonl")},
            "presenter": {"autoClearSeconds": 0, "colorOutput": False},
            "debug": {"enabled": False, "basePath": str(tmp_path / "debug")}
        }
        for name, values in sections.items():
            config.setdefault(name, {}).update(values)

        path = tmp_path / "application_config.json"
        path.write_text(json.dumps(config), encoding="utf-8")
        return str(path)

    return _write


class StubQrDetector(IQrDetector):
    """Returns a fixed text for every image (None means "no QR code")."""

    def __init__(self, text: Optional[str] = None):
        self.text = text
        self.images: List[np.ndarray] = []

    def detect(self, image: np.ndarray) -> Optional[QrDetectionResult]:
        self.images.append(image)
        if self.text is None:
            return None
        return QrDetectionResult(
            text=self.text,
            polygon=[(0, 0), (10, 0), (10, 10), (0, 10)],
            rect=(0, 0, 10, 10),
            confidence=1.0,
            backend="stub"
        )


class FakeCamera(ICameraCapture):
    """Camera delivering a fixed number of frames, then disconnecting."""

    def __init__(self, frameCount: int = 3, canOpen: bool = True):
        self.frameCount = frameCount
        self.canOpen = canOpen
        self.opened = False
        self.reads = 0

    def listAvailableCameras(self) -> List[CameraInfo]:
        return [CameraInfo(index=0, name="Fake camera")]

    def open(self, cameraIndex: int, width: int = 1280, height: int = 720) -> bool:
        self.opened = self.canOpen
        return self.opened

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        if not self.opened:
            return (False, None)
        self.reads += 1
        if self.reads > self.frameCount:
            self.opened = False
            return (False, None)
        return (True, np.zeros((48, 64, 3), dtype=np.uint8))

    def release(self) -> None:
        self.opened = False

    def isOpened(self) -> bool:
        return self.opened


def encodeImage(image: Optional[np.ndarray] = None) -> bytes:
    """PNG bytes of an image (a blank one by default)."""
    if image is None:
        image = np.full((48, 64, 3), 255, dtype=np.uint8)
    ok, buffer = cv2.imencode(".png", image)
    assert ok
    return buffer.tobytes()
