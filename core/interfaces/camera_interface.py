"""
Camera capture contract for the pass scanner.

A terminal normally has one USB or built-in camera aimed at the counter
where citizens hold up their appointment pass.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple, Optional
import numpy as np


@dataclass
class CameraInfo:
    """A probed camera device."""
    index: int
    name: str

    def __str__(self) -> str:
        return self.name


class ICameraCapture(ABC):
    """Device-level capture. Frames are BGR numpy arrays."""

    @abstractmethod
    def listAvailableCameras(self) -> List[CameraInfo]:
        """Probe devices and return the ones that deliver frames."""
        pass

    @abstractmethod
    def open(self, cameraIndex: int, width: int = 1280, height: int = 720) -> bool:
        """
        Open a device, replacing any device already open.

        Returns:
            bool: False when the device is missing or access is denied.
        """
        pass

    @abstractmethod
    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """Grab the latest frame as (ok, frame); frame is None when not ok."""
        pass

    @abstractmethod
    def release(self) -> None:
        pass

    @abstractmethod
    def isOpened(self) -> bool:
        pass
