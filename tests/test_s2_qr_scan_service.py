import numpy as np
import pytest

from core.interfaces.qr_detector_interface import toGrayscale
from core.qr import createQrDetector, getSupportedQrBackends, isQrBackendAvailable
from services.impl.s1_camera_service import S1CameraService
from services.impl.s2_qr_scan_service import S2QrScanService
from services.interfaces.scan_service_interface import (
    CameraSource,
    ScanFailure,
    UploadedImageSource
)
from tests.conftest import FakeCamera, StubQrDetector, encodeImage, encodePass


def makeCameraService(camera: FakeCamera) -> S1CameraService:
    return S1CameraService(cameraCapture=camera)


class TestUploads:

    def test_decodes_uploaded_image(self):
        detector = StubQrDetector("payload")
        service = S2QrScanService(qrDetector=detector)

        outcome = service.decode(UploadedImageSource(data=encodeImage(), fileName="pass.png"))

        assert outcome.success
        assert outcome.rawText == "payload"
        assert outcome.failure is None
        assert detector.images[0].shape == (48, 64, 3)

    @pytest.mark.parametrize("data", [b"", b"GIF89a broken", b"plain text"])
    def test_invalid_image(self, data):
        detector = StubQrDetector("payload")
        service = S2QrScanService(qrDetector=detector)

        outcome = service.decode(UploadedImageSource(data=data))

        assert not outcome.success
        assert outcome.failure == ScanFailure.INVALID_IMAGE
        assert detector.images == []

    def test_oversized_upload(self):
        service = S2QrScanService(qrDetector=StubQrDetector("payload"), maxUploadBytes=16)

        outcome = service.decode(UploadedImageSource(data=encodeImage()))

        assert outcome.failure == ScanFailure.INVALID_IMAGE

    def test_no_qr_found(self, tmp_path):
        service = S2QrScanService(
            qrDetector=StubQrDetector(None),
            debugBasePath=str(tmp_path),
            debugEnabled=True
        )

        outcome = service.decode(UploadedImageSource(data=encodeImage()))

        assert outcome.failure == ScanFailure.NO_QR_FOUND
        assert list((tmp_path / "s2_qr_scan").glob("no_qr_upload_*.png"))


class TestCamera:

    def test_decodes_camera_frame(self):
        cameraService = makeCameraService(FakeCamera())
        assert cameraService.openCamera(0)

        outcome = S2QrScanService(qrDetector=StubQrDetector("payload")).decode(
            CameraSource(cameraService)
        )

        assert outcome.success
        assert outcome.frameId.startswith("frame_")

    def test_camera_not_open(self):
        outcome = S2QrScanService(qrDetector=StubQrDetector("payload")).decode(
            CameraSource(makeCameraService(FakeCamera()))
        )

        assert outcome.failure == ScanFailure.CAMERA_UNAVAILABLE

    def test_camera_disconnects(self):
        cameraService = makeCameraService(FakeCamera(frameCount=0))
        cameraService.openCamera(0)

        outcome = S2QrScanService(qrDetector=StubQrDetector("payload")).decode(
            CameraSource(cameraService)
        )

        assert outcome.failure == ScanFailure.CAMERA_UNAVAILABLE


def test_rejects_unknown_source():
    with pytest.raises(TypeError):
        S2QrScanService(qrDetector=StubQrDetector()).decode("pass.png")


class TestFactory:

    def test_supported_backends(self):
        assert getSupportedQrBackends() == ["zxing", "pyzbar"]
        assert not isQrBackendAvailable("wechat")

    def test_invalid_backend(self):
        with pytest.raises(ValueError):
            createQrDetector(backend="wechat")

    def test_detectors_read_grayscale(self):
        colour = np.zeros((8, 10, 3), dtype=np.uint8)
        gray = np.zeros((8, 10), dtype=np.uint8)

        assert toGrayscale(colour).shape == (8, 10)
        assert toGrayscale(gray) is gray


@pytest.mark.parametrize("backend", ["zxing", "pyzbar"])
def test_real_decoder_reads_generated_pass(backend):
    qrcode = pytest.importorskip("qrcode")
    if not isQrBackendAvailable(backend):
        pytest.skip(f"{backend} not installed")
    try:
        detector = createQrDetector(backend=backend)
    except ImportError as e:
        pytest.skip(str(e))

    raw = encodePass()
    image = qrcode.make(raw, border=4).convert("L")
    pixels = np.array(image, dtype=np.uint8)
    pixels = np.stack([pixels] * 3, axis=-1)

    outcome = S2QrScanService(qrDetector=detector).decode(
        UploadedImageSource(data=encodeImage(pixels), fileName="pass.png")
    )

    assert outcome.success
    assert outcome.rawText == raw
