import asyncio
import io
import json
from datetime import datetime

import pytest

from core.interfaces.validation_interface import ReasonCode
from services.interfaces.scan_service_interface import ScanFailure, UploadedImageSource
from terminal.checkin_orchestrator import CheckinOrchestrator
from terminal.result_presenter import ResultPresenter
from tests.conftest import (
    FakeCamera,
    FakeLookup,
    StubQrDetector,
    encodeImage,
    encodePass,
    makePass,
    makeRecord
)


ON_TIME = datetime(2025, 8, 15, 9, 10)


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def makeOrchestrator(configFile, fakeLookup, output):
    def _make(detectorText=None, camera=None, lookup=None, **configSections):
        return CheckinOrchestrator(
            configFile(**configSections),
            lookup=lookup or fakeLookup,
            qrDetector=StubQrDetector(detectorText),
            cameraCapture=camera or FakeCamera(),
            presenter=ResultPresenter(stream=output, autoClearSeconds=0, colorOutput=False)
        )
    return _make


async def test_valid_scan_is_presented(makeOrchestrator, rawPass, output):
    orchestrator = makeOrchestrator()

    result = await orchestrator.handleRawScan(rawPass, now=ON_TIME)

    assert result.admitted
    assert orchestrator.lastResult is result
    assert orchestrator.presenter.current is result
    assert "Check-in approved" in output.getvalue()


async def test_repeated_scan_is_ignored(makeOrchestrator, fakeLookup, rawPass):
    orchestrator = makeOrchestrator()

    first = await orchestrator.handleRawScan(rawPass, now=ON_TIME)
    second = await orchestrator.handleRawScan(rawPass, now=ON_TIME)

    assert first is not None
    assert second is None
    assert fakeLookup.calls == ["GV-001"]

    orchestrator.resetRecentScans()
    assert await orchestrator.handleRawScan(rawPass, now=ON_TIME) is not None


async def test_rejected_scans_are_also_deduplicated(makeOrchestrator, fakeLookup):
    orchestrator = makeOrchestrator()

    assert (await orchestrator.handleRawScan("garbage")).reasonCode == ReasonCode.INVALID_PAYLOAD
    assert await orchestrator.handleRawScan("garbage") is None


async def test_empty_scan_is_ignored(makeOrchestrator, fakeLookup):
    assert await makeOrchestrator().handleRawScan("") is None
    assert fakeLookup.calls == []


async def test_other_pass_validates_while_one_is_pending(makeOrchestrator, fakeLookup, rawPass, output):
    fakeLookup.records["GV-002"] = makeRecord(bookingReference="GV-002")
    other = encodePass(makePass(reference="GV-002"))
    orchestrator = makeOrchestrator(detectorText=other)
    fakeLookup.gate = asyncio.Event()

    pending = asyncio.create_task(orchestrator.handleRawScan(rawPass, now=ON_TIME))
    await asyncio.sleep(0)
    assert orchestrator.isValidating

    upload = asyncio.create_task(orchestrator.scanSource(
        UploadedImageSource(data=encodeImage(), fileName="other.png"),
        now=ON_TIME
    ))
    for _ in range(200):
        if len(fakeLookup.calls) == 2:
            break
        await asyncio.sleep(0.01)
    assert orchestrator.isValidating

    fakeLookup.gate.set()
    first = await pending
    outcome, uploaded = await upload

    assert first.admitted
    assert outcome.success
    assert uploaded is not None and uploaded.admitted
    assert sorted(fakeLookup.calls) == ["GV-001", "GV-002"]
    assert output.getvalue().count("Check-in approved") == 2
    assert not orchestrator.isValidating


async def test_same_pass_not_validated_twice_while_pending(makeOrchestrator, fakeLookup, rawPass):
    orchestrator = makeOrchestrator()
    fakeLookup.gate = asyncio.Event()

    pending = asyncio.create_task(orchestrator.handleRawScan(rawPass, now=ON_TIME))
    await asyncio.sleep(0)

    # Even with the recent-scan list cleared, the pending payload is not re-run
    orchestrator.resetRecentScans()
    assert await orchestrator.handleRawScan(rawPass, now=ON_TIME) is None

    fakeLookup.gate.set()
    assert (await pending).admitted
    assert fakeLookup.calls == ["GV-001"]


async def test_result_after_stop_is_discarded(makeOrchestrator, fakeLookup, rawPass, output):
    orchestrator = makeOrchestrator()
    fakeLookup.gate = asyncio.Event()

    pending = asyncio.create_task(orchestrator.handleRawScan(rawPass, now=ON_TIME))
    await asyncio.sleep(0)
    orchestrator.stop()
    fakeLookup.gate.set()

    assert await pending is None
    assert orchestrator.lastResult is None
    assert orchestrator.presenter.current is None
    assert output.getvalue() == ""


async def test_department_override(makeOrchestrator, configFile, fakeLookup, rawPass):
    orchestrator = CheckinOrchestrator(
        configFile(),
        terminalDepartment="Land Registry",
        lookup=fakeLookup,
        qrDetector=StubQrDetector(),
        cameraCapture=FakeCamera(),
        presenter=ResultPresenter(stream=io.StringIO(), autoClearSeconds=0)
    )

    result = await orchestrator.handleRawScan(rawPass, now=ON_TIME)

    assert result.reasonCode == ReasonCode.DEPARTMENT_MISMATCH


async def test_audit_entries_written(makeOrchestrator, tmp_path, rawPass):
    auditPath = tmp_path / "audit.jsonl"
    orchestrator = makeOrchestrator(audit={"enabled": True, "filePath": str(auditPath)})

    await orchestrator.handleRawScan(rawPass, now=ON_TIME)
    await orchestrator.handleRawScan("garbage", now=ON_TIME)

    lines = auditPath.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["terminalId"] == "test-terminal"
    assert first["result"]["reasonCode"] == ReasonCode.OK
    assert json.loads(lines[1])["result"]["reasonCode"] == ReasonCode.INVALID_PAYLOAD


class TestUploads:

    async def test_uploaded_image_is_validated(self, makeOrchestrator, rawPass):
        orchestrator = makeOrchestrator(detectorText=rawPass)

        outcome, result = await orchestrator.scanSource(
            UploadedImageSource(data=encodeImage(), fileName="pass.png"),
            now=ON_TIME
        )

        assert outcome.success
        assert outcome.frameId.startswith("upload_")
        assert result.admitted

    async def test_not_an_image(self, makeOrchestrator, output):
        orchestrator = makeOrchestrator(detectorText="unused")

        outcome, result = await orchestrator.scanSource(
            UploadedImageSource(data=b"%PDF-1.7 not an image", fileName="pass.pdf")
        )

        assert outcome.failure == ScanFailure.INVALID_IMAGE
        assert result is None
        assert "Please upload a valid image file" in output.getvalue()

    async def test_image_without_qr_code(self, makeOrchestrator, output):
        orchestrator = makeOrchestrator()

        outcome, result = await orchestrator.scanSource(
            UploadedImageSource(data=encodeImage(), fileName="blank.png")
        )

        assert outcome.failure == ScanFailure.NO_QR_FOUND
        assert result is None
        assert "Could not detect a valid QR code" in output.getvalue()


class TestCamera:

    async def test_camera_loop_validates_once(self, configFile, output):
        now = datetime.now()
        raw = encodePass(makePass(date=now.strftime("%Y-%m-%d"), time=now.strftime("%H:%M")))
        lookup = FakeLookup({"GV-001": makeRecord()})
        camera = FakeCamera(frameCount=4)
        orchestrator = CheckinOrchestrator(
            configFile(),
            lookup=lookup,
            qrDetector=StubQrDetector(raw),
            cameraCapture=camera,
            presenter=ResultPresenter(stream=output, autoClearSeconds=0, colorOutput=False)
        )

        result = await orchestrator.runCamera(cameraIndex=0, pollIntervalSeconds=0)

        assert result.admitted
        assert lookup.calls == ["GV-001"]
        assert camera.reads == 5
        assert not orchestrator.isRunning
        assert not orchestrator.cameraService.isOpened()

    async def test_camera_unavailable(self, makeOrchestrator, fakeLookup, output):
        orchestrator = makeOrchestrator(camera=FakeCamera(canOpen=False))

        assert await orchestrator.runCamera(cameraIndex=0, pollIntervalSeconds=0) is None
        assert "camera not available" in output.getvalue()
        assert fakeLookup.calls == []

    async def test_stop_ends_camera_loop(self, makeOrchestrator):
        orchestrator = makeOrchestrator(camera=FakeCamera(frameCount=10_000))

        task = asyncio.create_task(orchestrator.runCamera(cameraIndex=0, pollIntervalSeconds=0.01))
        await asyncio.sleep(0.05)
        assert orchestrator.isRunning
        orchestrator.stop()

        assert await asyncio.wait_for(task, timeout=2) is None
        assert not orchestrator.isRunning


async def test_shutdown_closes_lookup(makeOrchestrator, fakeLookup):
    orchestrator = makeOrchestrator()

    await orchestrator.shutdown()

    assert fakeLookup.closed
