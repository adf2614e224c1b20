"""
OpenCV Camera Implementation

Implements ICameraCapture using OpenCV's VideoCapture for the
reception terminal's pass scanner camera.
Follows SRP: Only handles camera capture operations.
"""

import logging
from typing import List, Tuple, Optional
import numpy as np
import cv2

from core.interfaces.camera_interface import ICameraCapture, CameraInfo


logger = logging.getLogger(__name__)


class OpenCVCamera(ICameraCapture):
    """
    Camera capture implementation using OpenCV VideoCapture.

    Keeps the driver buffer at a single frame so the scanner always
    decodes what is currently held in front of the lens.
    """

    def __init__(self, maxCameraSearch: int = 4, maxReadFailures: int = 30):
        """
        Initialize OpenCVCamera.

        Args:
            maxCameraSearch: Maximum number of camera indices to probe.
            maxReadFailures: Consecutive failed reads after which the
                device counts as lost. VideoCapture.isOpened() stays True
                after a USB camera is unplugged.
        """
        self._capture: Optional[cv2.VideoCapture] = None
        self._cameraIndex: int = -1
        self._maxCameraSearch = maxCameraSearch
        self._maxReadFailures = max(1, maxReadFailures)
        self._consecutiveReadFailures = 0

    def listAvailableCameras(self) -> List[CameraInfo]:
        """
        List camera devices by probing indices 0..maxCameraSearch-1.

        Returns:
            List[CameraInfo]: Cameras that opened and delivered a frame.
        """
        cameras = []

        for index in range(self._maxCameraSearch):
            probe = cv2.VideoCapture(index)
            try:
                if probe.isOpened():
                    ret, _ = probe.read()
                    if ret:
                        cameras.append(CameraInfo(index=index, name=f"Camera {index}"))
            except Exception as e:
                logger.debug(f"Error probing camera {index}: {e}")
            finally:
                probe.release()

        if not cameras:
            logger.warning("No cameras found on this terminal")
        else:
            logger.info(f"Found {len(cameras)} camera(s)")

        return cameras

    def open(self, cameraIndex: int, width: int = 1280, height: int = 720) -> bool:
        """
        Open a camera device by its index.

        Args:
            cameraIndex: The index of the camera to open.
            width: Desired frame width.
            height: Desired frame height.

        Returns:
            bool: True if camera opened successfully.
        """
        if self._capture is not None:
            self.release()

        try:
            capture = cv2.VideoCapture(cameraIndex)
        except Exception as e:
            logger.error(f"Error opening camera {cameraIndex}: {e}")
            return False

        if not capture.isOpened():
            logger.error(f"Camera {cameraIndex} unavailable (not connected or permission denied)")
            capture.release()
            return False

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self._capture = capture
        self._cameraIndex = cameraIndex
        self._consecutiveReadFailures = 0
        logger.info(f"Camera {cameraIndex} opened ({width}x{height})")
        return True

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """
        Read a frame from the opened camera.

        Returns:
            Tuple[bool, Optional[np.ndarray]]: Success flag and frame.
        """
        if self._capture is None or not self._capture.isOpened():
            return (False, None)

        try:
            ret, frame = self._capture.read()
        except Exception as e:
            logger.error(f"Error reading frame: {e}")
            ret, frame = False, None

        if ret:
            self._consecutiveReadFailures = 0
            return (True, frame)

        self._consecutiveReadFailures += 1
        if self._consecutiveReadFailures == self._maxReadFailures:
            logger.error(
                f"Camera {self._cameraIndex} lost after "
                f"{self._consecutiveReadFailures} failed reads"
            )
        return (False, None)

    def release(self) -> None:
        """Release the camera device and free resources."""
        if self._capture is None:
            return

        try:
            self._capture.release()
            logger.info(f"Camera {self._cameraIndex} released")
        except Exception as e:
            logger.error(f"Error releasing camera: {e}")
        finally:
            self._capture = None
            self._cameraIndex = -1

    def isOpened(self) -> bool:
        """
        Check if a camera is currently opened.

        Returns:
            bool: True if camera is opened and still delivering frames.
        """
        return (
            self._capture is not None
            and self._capture.isOpened()
            and self._consecutiveReadFailures < self._maxReadFailures
        )

    def getCameraIndex(self) -> int:
        """Get the current camera index, or -1 if no camera is opened."""
        return self._cameraIndex

    def getConsecutiveReadFailures(self) -> int:
        """Get the number of failed reads since the last good frame."""
        return self._consecutiveReadFailures
