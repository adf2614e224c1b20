"""
S1 Camera Service Implementation.

Step 1 of check-in: capture frames from the reception camera.
Creates and manages the OpenCV camera from the core layer.

Follows:
- SRP: Only handles camera operations
- DIP: Depends on ICameraCapture abstraction (interface)
"""

import time
from typing import List, Optional

from core.interfaces.camera_interface import ICameraCapture, CameraInfo
from core.camera.opencv_camera import OpenCVCamera
from services.interfaces.camera_service_interface import (
    ICameraService,
    CameraFrame
)
from services.interfaces.base_service_interface import BaseService


class S1CameraService(ICameraService, BaseService):
    """
    Step 1: Camera Service Implementation.

    Captures frames for the QR scan step and tags each with a frameId.
    A frame captured while no camera is open is reported with
    cameraAvailable=False so the scan step can tell "no camera" apart
    from "no QR code in view".
    """

    SERVICE_NAME = "s1_camera"

    def __init__(
        self,
        frameWidth: int = 1280,
        frameHeight: int = 720,
        maxCameraSearch: int = 4,
        maxReadFailures: int = 30,
        cameraCapture: Optional[ICameraCapture] = None,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S1CameraService.

        Args:
            frameWidth: Default frame width.
            frameHeight: Default frame height.
            maxCameraSearch: Maximum number of camera indices to search.
            maxReadFailures: Failed reads in a row before the camera counts as lost.
            cameraCapture: Camera implementation (defaults to OpenCVCamera).
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._cameraCapture: ICameraCapture = cameraCapture or OpenCVCamera(
            maxCameraSearch=maxCameraSearch,
            maxReadFailures=maxReadFailures
        )

        self._frameWidth = frameWidth
        self._frameHeight = frameHeight
        self._currentCameraIndex: Optional[int] = None

        self._logger.info(
            f"S1CameraService initialized "
            f"(frameSize={frameWidth}x{frameHeight}, maxCameraSearch={maxCameraSearch})"
        )

    def captureFrame(self) -> CameraFrame:
        """Capture a single frame from the open camera."""
        startTime = time.time()
        frameId = self._newFrameId("frame")

        if self._currentCameraIndex is None or not self._cameraCapture.isOpened():
            self._logger.warning(f"[{frameId}] No camera is open")
            return CameraFrame(
                image=None,
                frameId=frameId,
                success=False,
                cameraAvailable=False,
                processingTimeMs=self._measureTime(startTime)
            )

        success, frame = self._cameraCapture.read()

        if not success or frame is None:
            self._logger.warning(f"[{frameId}] Failed to capture frame")
            return CameraFrame(
                image=None,
                frameId=frameId,
                success=False,
                cameraAvailable=self._cameraCapture.isOpened(),
                processingTimeMs=self._measureTime(startTime)
            )

        processingTimeMs = self._measureTime(startTime)
        self._logger.debug(f"[{frameId}] Frame captured in {processingTimeMs:.2f}ms")

        return CameraFrame(
            image=frame,
            frameId=frameId,
            success=True,
            processingTimeMs=processingTimeMs
        )

    def getAvailableCameras(self) -> List[CameraInfo]:
        """List all available camera devices."""
        return self._cameraCapture.listAvailableCameras()

    def openCamera(
        self,
        index: int,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> bool:
        """Open a camera device, using the configured frame size by default."""
        if self._currentCameraIndex is not None:
            self.closeCamera()

        width = width or self._frameWidth
        height = height or self._frameHeight

        if not self._cameraCapture.open(index, width, height):
            self._logger.error(f"Failed to open camera {index}")
            return False

        self._currentCameraIndex = index
        self._frameWidth = width
        self._frameHeight = height
        return True

    def closeCamera(self) -> None:
        """Close the current camera device."""
        if self._currentCameraIndex is not None:
            self._cameraCapture.release()
            self._logger.info(f"Camera {self._currentCameraIndex} closed")
            self._currentCameraIndex = None

    def isOpened(self) -> bool:
        """Check if a camera is currently open."""
        return self._currentCameraIndex is not None and self._cameraCapture.isOpened()

    def getCurrentCameraIndex(self) -> Optional[int]:
        return self._currentCameraIndex
