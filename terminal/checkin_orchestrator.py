"""
Check-in Orchestrator Module.

Wires the reception terminal together and runs one terminal session.
Creates ConfigService and initializes all services with proper parameters.

Check-in Steps:
1. S1 Camera: Capture frames from the reception camera
2. S2 QR Scan: Decode QR text from a camera frame or uploaded image
3. S3 Verification: Validate the pass against the booking system

Follows:
- SRP: Only handles session orchestration
- DIP: Services receive parameters, not the config service
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional, Set, Tuple

from core.interfaces.appointment_lookup_interface import IAppointmentLookup
from core.interfaces.audit_sink_interface import IAuditSink
from core.interfaces.camera_interface import ICameraCapture
from core.interfaces.qr_detector_interface import IQrDetector
from core.interfaces.validation_interface import ValidationResult
from core.lookup import HttpAppointmentLookup
from core.writer import LocalAuditWriter
from services.impl.config_service import ConfigService
from services.impl.s1_camera_service import S1CameraService
from services.impl.s2_qr_scan_service import S2QrScanService
from services.impl.s3_verification_service import S3VerificationService
from services.interfaces.scan_service_interface import (
    CameraSource,
    ScanFailure,
    ScanOutcome,
    ScanSource,
    UploadedImageSource
)
from terminal.recent_scan_buffer import RecentScanBuffer
from terminal.result_presenter import ResultPresenter


class CheckinOrchestrator:
    """
    Orchestrates one reception terminal session.

    Responsibilities:
    - Initialize ConfigService
    - Create the step services with parameters from config
    - Deduplicate scans and keep at most one validation in flight per payload
    - Present, audit and hand back each validation result
    """

    def __init__(
        self,
        configPath: str = "config/application_config.json",
        terminalDepartment: Optional[str] = None,
        lookup: Optional[IAppointmentLookup] = None,
        qrDetector: Optional[IQrDetector] = None,
        cameraCapture: Optional[ICameraCapture] = None,
        presenter: Optional[ResultPresenter] = None
    ):
        """
        Initialize the check-in orchestrator.

        Args:
            configPath: Path to the application configuration file.
            terminalDepartment: Overrides the configured terminal department.
            lookup: Appointment lookup (defaults to HttpAppointmentLookup from config).
            qrDetector: QR detector (defaults to the configured backend).
            cameraCapture: Camera implementation (defaults to OpenCVCamera).
            presenter: Operator output (defaults to stdout presenter from config).
        """
        self._logger = logging.getLogger(__name__)

        self._configService = ConfigService(configPath)
        self._logger.info("ConfigService initialized")

        self._terminalId = self._configService.getTerminalId()
        self._terminalDepartment = (
            terminalDepartment
            if terminalDepartment is not None
            else self._configService.getTerminalDepartment()
        )

        debugBasePath = self._configService.getDebugBasePath()
        debugEnabled = self._configService.isDebugEnabled()

        self._initializeServices(debugBasePath, debugEnabled, lookup, qrDetector, cameraCapture)

        self._recentScans = RecentScanBuffer(self._configService.getRecentScanCapacity())
        self._presenter = presenter or ResultPresenter(
            autoClearSeconds=self._configService.getAutoClearSeconds(),
            colorOutput=self._configService.isColorOutputEnabled()
        )
        self._auditSink: Optional[IAuditSink] = None
        if self._configService.isAuditEnabled():
            self._auditSink = LocalAuditWriter(self._configService.getAuditFilePath())

        # Session state
        self._generation = 0
        self._pendingScans: Set[str] = set()
        self._running = False
        self._lastResult: Optional[ValidationResult] = None

        self._logger.info(
            f"CheckinOrchestrator initialized "
            f"(terminal={self._terminalId}, department='{self._terminalDepartment}')"
        )

    def _initializeServices(
        self,
        debugBasePath: str,
        debugEnabled: bool,
        lookup: Optional[IAppointmentLookup],
        qrDetector: Optional[IQrDetector],
        cameraCapture: Optional[ICameraCapture]
    ) -> None:
        """
        Initialize the step services with parameters from config.

        Following DIP: Services receive parameters, not IConfigService.
        """
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S1 Camera Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s1CameraService = S1CameraService(
            frameWidth=self._configService.getFrameWidth(),
            frameHeight=self._configService.getFrameHeight(),
            maxCameraSearch=self._configService.getMaxCameraSearch(),
            maxReadFailures=self._configService.getMaxReadFailures(),
            cameraCapture=cameraCapture,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S2 QR Scan Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s2QrScanService = S2QrScanService(
            backend=self._configService.getQrBackend(),
            zxingTryRotate=self._configService.getZxingTryRotate(),
            zxingTryDownscale=self._configService.getZxingTryDownscale(),
            maxUploadBytes=self._configService.getMaxUploadBytes(),
            qrDetector=qrDetector,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S3 Verification Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        if lookup is None:
            lookup = HttpAppointmentLookup(
                baseUrl=self._configService.getLookupBaseUrl(),
                verifyPath=self._configService.getLookupVerifyPath(),
                timeoutSeconds=self._configService.getLookupTimeout(),
                apiToken=self._configService.getLookupApiToken()
            )

        self._s3VerificationService = S3VerificationService(
            lookup=lookup,
            terminalDepartment=self._terminalDepartment,
            signingSecret=self._configService.getSigningSecret(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Service Getters
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @property
    def configService(self) -> ConfigService:
        return self._configService

    @property
    def cameraService(self) -> S1CameraService:
        """Get Step 1: Camera service."""
        return self._s1CameraService

    @property
    def qrScanService(self) -> S2QrScanService:
        """Get Step 2: QR scan service."""
        return self._s2QrScanService

    @property
    def verificationService(self) -> S3VerificationService:
        """Get Step 3: Verification service."""
        return self._s3VerificationService

    @property
    def presenter(self) -> ResultPresenter:
        return self._presenter

    @property
    def recentScans(self) -> RecentScanBuffer:
        return self._recentScans

    @property
    def isValidating(self) -> bool:
        """True while any validation is waiting for the booking system."""
        return bool(self._pendingScans)

    @property
    def isRunning(self) -> bool:
        return self._running

    @property
    def lastResult(self) -> Optional[ValidationResult]:
        """Most recent result shown to the operator."""
        return self._lastResult

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Scan Handling
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def handleRawScan(
        self,
        rawText: str,
        now: Optional[datetime] = None
    ) -> Optional[ValidationResult]:
        """
        Validate one raw scan and present the outcome.

        A payload that is already being validated, or that repeats one of
        the recent payloads, is ignored. Different passes from the camera
        and from uploads validate independently. A result that arrives
        after stop() is discarded.

        Args:
            rawText: Raw QR text from the scanner.
            now: Current time (defaults to the local wall clock).

        Returns:
            ValidationResult, or None if the scan was ignored or discarded.
        """
        if not rawText:
            return None

        if rawText in self._pendingScans:
            self._logger.info("Same pass is already being validated, scan ignored")
            return None

        if not self._recentScans.register(rawText):
            self._logger.debug("Duplicate scan ignored")
            return None

        generation = self._generation
        self._pendingScans.add(rawText)
        try:
            result = await self._s3VerificationService.verify(
                rawText,
                terminalDepartment=self._terminalDepartment,
                now=now
            )
        finally:
            self._pendingScans.discard(rawText)

        if generation != self._generation:
            self._logger.info(f"Discarding stale result ({result.reasonCode}) after session stop")
            return None

        self._lastResult = result
        self._presenter.show(result)
        self._recordAudit(result)
        return result

    async def scanSource(
        self,
        source: ScanSource,
        now: Optional[datetime] = None
    ) -> Tuple[ScanOutcome, Optional[ValidationResult]]:
        """
        Decode a scan source and validate the QR text it contains.

        Args:
            source: CameraSource or UploadedImageSource.
            now: Current time (defaults to the local wall clock).

        Returns:
            Tuple of the scan outcome and the validation result
            (None if nothing was decoded or the scan was ignored).
        """
        outcome = await asyncio.to_thread(self._s2QrScanService.decode, source)

        if not outcome.success:
            # Camera frames without a QR code are routine while polling
            if isinstance(source, UploadedImageSource) or outcome.failure != ScanFailure.NO_QR_FOUND:
                self._logger.warning(f"[{outcome.frameId}] Scan failed: {outcome.failure}")
                self._presenter.showScanFailure(outcome)
            return outcome, None

        return outcome, await self.handleRawScan(outcome.rawText, now=now)

    async def runCamera(
        self,
        cameraIndex: Optional[int] = None,
        pollIntervalSeconds: Optional[float] = None
    ) -> Optional[ValidationResult]:
        """
        Scan the camera continuously until stop() is called.

        Args:
            cameraIndex: Camera to open (defaults to the configured index).
            pollIntervalSeconds: Delay between frames (defaults to config).

        Returns:
            The last result shown during the session, if any.
        """
        index = self._configService.getCameraIndex() if cameraIndex is None else cameraIndex
        interval = (
            self._configService.getCameraPollInterval()
            if pollIntervalSeconds is None
            else pollIntervalSeconds
        )

        if not self._s1CameraService.openCamera(index):
            self._presenter.showScanFailure(
                ScanOutcome(success=False, failure=ScanFailure.CAMERA_UNAVAILABLE)
            )
            return None

        self._running = True
        source = CameraSource(self._s1CameraService)
        self._logger.info(f"Scanning with camera {index} every {interval:.2f}s")

        try:
            while self._running:
                outcome, _ = await self.scanSource(source)
                if outcome.failure == ScanFailure.CAMERA_UNAVAILABLE:
                    break
                await asyncio.sleep(interval)
        finally:
            self._running = False
            self._s1CameraService.closeCamera()

        return self._lastResult

    def stop(self) -> None:
        """
        End the current scanning session.

        Results of validations still in flight are discarded when they
        arrive, and the screen is cleared.
        """
        self._running = False
        self._generation += 1
        self._presenter.dismiss()
        self._logger.info("Scanning session stopped")

    def resetRecentScans(self) -> None:
        """Forget recent scans so the same pass can be validated again."""
        self._recentScans.clear()

    def _recordAudit(self, result: ValidationResult) -> None:
        if self._auditSink is None:
            return
        self._auditSink.record(result, self._terminalId, datetime.now())

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Debug Control
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def setDebugEnabled(self, enabled: bool) -> None:
        """
        Enable or disable debug mode for all services.

        Args:
            enabled: True to enable debug output for all services.
        """
        self._configService.setDebugEnabled(enabled)
        self._s1CameraService.setDebugEnabled(enabled)
        self._s2QrScanService.setDebugEnabled(enabled)
        self._s3VerificationService.setDebugEnabled(enabled)
        self._logger.info(f"Debug mode {'enabled' if enabled else 'disabled'} for all services")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Lifecycle Management
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def shutdown(self) -> None:
        """
        Stop scanning and release the camera and HTTP client.

        Call this when the terminal is closing.
        """
        self._logger.info("Shutting down CheckinOrchestrator...")
        self.stop()
        self._s1CameraService.closeCamera()
        await self._s3VerificationService.aclose()
        self._logger.info("CheckinOrchestrator shutdown complete")
