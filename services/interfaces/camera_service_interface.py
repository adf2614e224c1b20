"""
Camera Service Interface Module.

Defines the interface for the reception camera (Step 1 of check-in).
Responsible for capturing frames and tagging each with a frame identifier.

Follows:
- SRP: Only handles camera operations
- ISP: Minimal interface for camera functionality
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional
import numpy as np

from core.interfaces.camera_interface import CameraInfo


@dataclass
class CameraFrame:
    """
    Result of a frame capture operation.

    Attributes:
        image: Captured frame as numpy array (BGR format), None on failure.
        frameId: Identifier for this frame (e.g., "frame_20251218_024810_535").
        success: Whether the capture was successful.
        cameraAvailable: False when no camera is open or the device vanished.
        processingTimeMs: Time taken to capture the frame.
    """
    image: Optional[np.ndarray]
    frameId: str
    success: bool
    cameraAvailable: bool = True
    processingTimeMs: float = 0.0


class ICameraService(ABC):
    """
    Interface for camera operations (Step 1).

    Handles camera device management and frame capture for the
    QR scan step.
    """

    @abstractmethod
    def captureFrame(self) -> CameraFrame:
        """
        Capture a single frame from the camera.

        Returns:
            CameraFrame: Captured frame with metadata.
        """
        pass

    @abstractmethod
    def getAvailableCameras(self) -> List[CameraInfo]:
        """
        List all available camera devices.

        Returns:
            List[CameraInfo]: Available cameras with index and name.
        """
        pass

    @abstractmethod
    def openCamera(
        self,
        index: int,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> bool:
        """
        Open a camera device.

        Args:
            index: Camera device index.
            width: Desired frame width (service default when None).
            height: Desired frame height (service default when None).

        Returns:
            bool: True if camera opened successfully.
        """
        pass

    @abstractmethod
    def closeCamera(self) -> None:
        """Close the current camera device."""
        pass

    @abstractmethod
    def isOpened(self) -> bool:
        """
        Check if a camera is currently open.

        Returns:
            bool: True if camera is open and ready.
        """
        pass
