"""
Base Service Interface Module.

Shared contract and helper base class for the check-in step services
(s1_camera, s2_qr_scan, s3_verification).

BaseService owns the per-service logger, debug artefacts written under
``<debugBasePath>/<serviceName>`` and step timing.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Any, Dict
from pathlib import Path
import logging
import json
import time

import cv2


class IBaseService(ABC):
    """Identification and debug switches common to every step service."""

    @abstractmethod
    def getServiceName(self) -> str:
        """Name used for the logger and the debug sub-directory."""
        pass

    @abstractmethod
    def setDebugEnabled(self, enabled: bool) -> None:
        pass

    @abstractmethod
    def isDebugEnabled(self) -> bool:
        pass


class BaseService(IBaseService):

    def __init__(
        self,
        serviceName: str,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Args:
            serviceName: Step name, e.g. "s2_qr_scan".
            debugBasePath: Root directory for debug artefacts.
            debugEnabled: Write debug artefacts from the start.
        """
        self._serviceName = serviceName
        self._debugDir = Path(debugBasePath) / serviceName
        self._debugEnabled = debugEnabled
        self._logger = logging.getLogger(serviceName)

        if debugEnabled:
            self._debugDir.mkdir(parents=True, exist_ok=True)

    def getServiceName(self) -> str:
        return self._serviceName

    def setDebugEnabled(self, enabled: bool) -> None:
        self._debugEnabled = enabled
        if enabled:
            self._debugDir.mkdir(parents=True, exist_ok=True)
        self._logger.info(f"Debug {'enabled' if enabled else 'disabled'}")

    def isDebugEnabled(self) -> bool:
        return self._debugEnabled

    @staticmethod
    def _newFrameId(prefix: str = "frame") -> str:
        """
        Timestamp identifier such as ``frame_20251218_024810_535``.

        Correlates log lines with debug files. Prefixes in use: "frame"
        (camera), "upload" (image files), "verify" (verification records).
        """
        now = datetime.now()
        return f"{prefix}_{now:%Y%m%d_%H%M%S}_{now.microsecond // 1000:03d}"

    def _debugPath(self, frameId: str, prefix: str, extension: str) -> Path:
        name = f"{prefix}_{frameId}" if prefix else frameId
        return self._debugDir / f"{name}.{extension}"

    def _saveDebugImage(self, frameId: str, image: Any, prefix: str = "") -> Optional[str]:
        """Write a PNG of ``image``; returns its path, or None when skipped or failed."""
        if not self._debugEnabled or image is None:
            return None

        path = self._debugPath(frameId, prefix, "png")
        try:
            cv2.imwrite(str(path), image)
        except Exception as e:
            self._logger.warning(f"[{frameId}] Failed to save debug image: {e}")
            return None

        self._logger.debug(f"[{frameId}] Saved debug image: {path}")
        return str(path)

    def _saveDebugJson(self, frameId: str, data: Dict, prefix: str = "") -> Optional[str]:
        """Write ``data`` as indented JSON; returns its path, or None when skipped or failed."""
        if not self._debugEnabled:
            return None

        path = self._debugPath(frameId, prefix, "json")
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
        except (OSError, TypeError, ValueError) as e:
            self._logger.warning(f"[{frameId}] Failed to save debug JSON: {e}")
            return None

        self._logger.debug(f"[{frameId}] Saved debug JSON: {path}")
        return str(path)

    def _logTiming(self, frameId: str, processingTimeMs: float) -> None:
        self._logger.info(f"[{frameId}] Processing time: {processingTimeMs:.2f}ms")

    def _measureTime(self, startTime: float) -> float:
        """Milliseconds since ``startTime`` (a time.time() value)."""
        return (time.time() - startTime) * 1000
