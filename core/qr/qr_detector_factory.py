"""
QR Detector Factory Module.

Builds the configured decoder backend (``s2_qr_scan.backend``).

Follows:
- OCP: a new backend is one entry in _BACKEND_MODULES plus a builder
- DIP: callers only see IQrDetector
"""

import importlib
import logging
from typing import List

from core.interfaces.qr_detector_interface import IQrDetector


logger = logging.getLogger(__name__)


# backend name -> third-party module that must be importable
_BACKEND_MODULES = {
    "zxing": "zxingcpp",
    "pyzbar": "pyzbar.pyzbar",
}

_INSTALL_HINTS = {
    "zxing": "pip install zxing-cpp",
    "pyzbar": "pip install pyzbar (and the system zbar library)",
}


def createQrDetector(
    backend: str = "zxing",
    zxingTryRotate: bool = True,
    zxingTryDownscale: bool = True
) -> IQrDetector:
    """
    Create the QR decoder for a backend name.

    Args:
        backend: "zxing" (default) or "pyzbar", case-insensitive.
        zxingTryRotate: (zxing) Also scan rotated frames.
        zxingTryDownscale: (zxing) Also scan downscaled frames.

    Returns:
        IQrDetector: Ready-to-use decoder.

    Raises:
        ValueError: Unknown backend name.
        ImportError: Backend library is not installed.
    """
    name = backend.lower().strip()

    if name not in _BACKEND_MODULES:
        errorMsg = (
            f"Invalid QR backend: '{backend}'. "
            f"Supported backends: {getSupportedQrBackends()}"
        )
        logger.error(errorMsg)
        raise ValueError(errorMsg)

    try:
        if name == "pyzbar":
            from core.qr.pyzbar_qr_detector import PyzbarQrDetector
            return PyzbarQrDetector()

        from core.qr.zxing_qr_detector import ZxingQrDetector
        return ZxingQrDetector(
            tryRotate=zxingTryRotate,
            tryDownscale=zxingTryDownscale
        )

    except ImportError as e:
        errorMsg = f"QR backend '{name}' is not installed. Install with: {_INSTALL_HINTS[name]}"
        logger.error(f"{errorMsg} ({e})")
        raise ImportError(errorMsg) from e


def getSupportedQrBackends() -> List[str]:
    """Backend names accepted by createQrDetector, default first."""
    return list(_BACKEND_MODULES)


def isQrBackendAvailable(backend: str) -> bool:
    """True when the backend's library can be imported."""
    moduleName = _BACKEND_MODULES.get(backend.lower().strip())
    if moduleName is None:
        return False
    try:
        importlib.import_module(moduleName)
        return True
    except ImportError:
        return False
