"""
S2 QR Scan Service Implementation.

Step 2 of check-in: decode QR text from the camera or an uploaded image.
Creates the QR detector from the core layer using the factory pattern.

Follows:
- SRP: Only handles QR scanning
- DIP: Depends on IQrDetector abstraction (interface)
- Factory Pattern: Uses createQrDetector() for backend selection
"""

import time
from typing import Optional

import cv2
import numpy as np

from core.interfaces.qr_detector_interface import IQrDetector
from core.qr import createQrDetector
from services.interfaces.scan_service_interface import (
    IScanService,
    ScanSource,
    CameraSource,
    UploadedImageSource,
    ScanOutcome,
    ScanFailure
)
from services.interfaces.base_service_interface import BaseService


class S2QrScanService(IScanService, BaseService):
    """
    Step 2: QR Scan Service Implementation.

    Camera sources are read through the camera service; uploaded images
    are decoded from their bytes with cv2.imdecode. Both paths end in the
    same IQrDetector, so the verification step only ever sees raw text.
    """

    SERVICE_NAME = "s2_qr_scan"

    def __init__(
        self,
        backend: str = "zxing",
        zxingTryRotate: bool = True,
        zxingTryDownscale: bool = True,
        maxUploadBytes: int = 10 * 1024 * 1024,
        qrDetector: Optional[IQrDetector] = None,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S2QrScanService.

        Args:
            backend: QR decoding backend ("zxing" or "pyzbar").
            zxingTryRotate: (ZXing) Try rotated barcodes (90/270 degrees).
            zxingTryDownscale: (ZXing) Try downscaled versions for better detection.
            maxUploadBytes: Uploads larger than this are rejected as invalid images.
            qrDetector: Pre-built detector; skips the factory when given.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._qrDetector: IQrDetector = qrDetector or createQrDetector(
            backend=backend,
            zxingTryRotate=zxingTryRotate,
            zxingTryDownscale=zxingTryDownscale
        )
        self._maxUploadBytes = maxUploadBytes

        self._logger.info(
            f"S2QrScanService initialized "
            f"(backend={backend if qrDetector is None else type(qrDetector).__name__}, "
            f"maxUploadBytes={maxUploadBytes})"
        )

    def decode(self, source: ScanSource) -> ScanOutcome:
        """
        Decode QR text from a scan source.

        Args:
            source: CameraSource or UploadedImageSource.

        Returns:
            ScanOutcome with the raw text or a ScanFailure reason.

        Raises:
            TypeError: If source is neither a camera nor an upload source.
        """
        if isinstance(source, CameraSource):
            return self._decodeCamera(source)
        if isinstance(source, UploadedImageSource):
            return self._decodeUpload(source)
        raise TypeError(f"Unsupported scan source: {type(source).__name__}")

    def _decodeCamera(self, source: CameraSource) -> ScanOutcome:
        startTime = time.time()
        frame = source.cameraService.captureFrame()

        if not frame.success or frame.image is None:
            failure = (
                ScanFailure.CAMERA_UNAVAILABLE
                if not frame.cameraAvailable
                else ScanFailure.NO_QR_FOUND
            )
            return ScanOutcome(
                success=False,
                failure=failure,
                frameId=frame.frameId,
                processingTimeMs=self._measureTime(startTime)
            )

        return self._detect(frame.image, frame.frameId, startTime)

    def _decodeUpload(self, source: UploadedImageSource) -> ScanOutcome:
        startTime = time.time()
        frameId = self._newFrameId("upload")
        label = source.fileName or "<upload>"

        if not source.data or len(source.data) > self._maxUploadBytes:
            self._logger.warning(
                f"[{frameId}] Rejected upload {label} ({len(source.data or b'')} bytes)"
            )
            return ScanOutcome(
                success=False,
                failure=ScanFailure.INVALID_IMAGE,
                frameId=frameId,
                processingTimeMs=self._measureTime(startTime)
            )

        buffer = np.frombuffer(source.data, dtype=np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)

        if image is None:
            self._logger.warning(f"[{frameId}] {label} is not a readable image")
            return ScanOutcome(
                success=False,
                failure=ScanFailure.INVALID_IMAGE,
                frameId=frameId,
                processingTimeMs=self._measureTime(startTime)
            )

        self._logger.info(f"[{frameId}] Decoding uploaded image {label}")
        return self._detect(image, frameId, startTime)

    def _detect(self, image: np.ndarray, frameId: str, startTime: float) -> ScanOutcome:
        result = self._qrDetector.detect(image)
        processingTimeMs = self._measureTime(startTime)

        if result is None or not result.text:
            self._logger.debug(f"[{frameId}] No QR code found ({processingTimeMs:.2f}ms)")
            self._saveDebugImage(frameId, image, prefix="no_qr")
            return ScanOutcome(
                success=False,
                failure=ScanFailure.NO_QR_FOUND,
                frameId=frameId,
                processingTimeMs=processingTimeMs
            )

        self._logTiming(frameId, processingTimeMs)
        self._saveDebugJson(frameId, {
            "backend": result.backend,
            "text": result.text,
            "rect": result.rect,
            "polygon": result.polygon
        })

        return ScanOutcome(
            success=True,
            rawText=result.text,
            frameId=frameId,
            processingTimeMs=processingTimeMs
        )
