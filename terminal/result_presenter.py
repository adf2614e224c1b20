"""
Result Presenter Module.

Prints check-in decisions for the reception operator and clears them
again after a few seconds so the screen is ready for the next citizen.

Follows:
- SRP: Only handles operator output
"""

import asyncio
import logging
import sys
from typing import Dict, List, Optional, TextIO, Tuple

from core.interfaces.validation_interface import ReasonCode, ValidationResult
from services.interfaces.scan_service_interface import ScanFailure, ScanOutcome


logger = logging.getLogger(__name__)


ANSI_COLORS: Dict[str, str] = {
    "green": "\033[32m",
    "yellow": "\033[33m",
    "orange": "\033[38;5;208m",
    "red": "\033[31m",
}
ANSI_RESET = "\033[0m"

# reason code -> (icon, colour); anything else is a plain rejection
_STYLES: Dict[str, Tuple[str, str]] = {
    ReasonCode.OK: ("✅", "green"),
    ReasonCode.TOO_EARLY: ("⏰", "yellow"),
    ReasonCode.LATE: ("⏳", "orange"),
    ReasonCode.DEPARTMENT_MISMATCH: ("🏢", "red"),
}
_DEFAULT_STYLE: Tuple[str, str] = ("❌", "red")

SCAN_FAILURE_MESSAGES: Dict[str, str] = {
    ScanFailure.INVALID_IMAGE: "Please upload a valid image file (PNG, JPG, JPEG, etc.)",
    ScanFailure.NO_QR_FOUND: (
        "Could not detect a valid QR code in the uploaded image. "
        "Please ensure the image contains a clear, well-lit QR code."
    ),
    ScanFailure.CAMERA_UNAVAILABLE: "Camera permission denied or camera not available",
}


class ResultPresenter:
    """
    Text presenter for validation results.

    Keeps the result currently on screen and drops it after
    autoClearSeconds using the running event loop's timer.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        autoClearSeconds: float = 10.0,
        colorOutput: bool = True
    ):
        """
        Initialize ResultPresenter.

        Args:
            stream: Output stream (defaults to stdout).
            autoClearSeconds: Seconds a result stays on screen; 0 disables.
            colorOutput: Whether to wrap the headline in ANSI colour codes.
        """
        self._stream = stream or sys.stdout
        self._autoClearSeconds = autoClearSeconds
        self._colorOutput = colorOutput
        self._current: Optional[ValidationResult] = None
        self._clearHandle: Optional[asyncio.TimerHandle] = None

    @property
    def current(self) -> Optional[ValidationResult]:
        """Result currently on screen, None once cleared."""
        return self._current

    @staticmethod
    def style(result: ValidationResult) -> Tuple[str, str]:
        """
        Pick the icon and colour for a result.

        Args:
            result: Validation result.

        Returns:
            Tuple[str, str]: (icon, colour name)
        """
        if result.admitted:
            return _STYLES[ReasonCode.OK]
        return _STYLES.get(result.reasonCode, _DEFAULT_STYLE)

    def render(self, result: ValidationResult) -> str:
        """Format a result as operator-facing text."""
        icon, colour = self.style(result)
        title = "Check-in approved" if result.admitted else "Check-in failed"
        headline = f"{icon} {title}"
        if self._colorOutput:
            headline = f"{ANSI_COLORS[colour]}{headline}{ANSI_RESET}"

        lines: List[str] = [headline, result.message]

        appointment = result.appointment
        if appointment is not None:
            lines.append("Appointment details:")
            lines.append(f"  Reference: {appointment.bookingReference}")
            lines.append(f"  Name:      {appointment.citizenName}")
            lines.append(f"  Service:   {appointment.serviceType}")
            lines.append(f"  Date/Time: {appointment.date} {appointment.time}")
            lines.append(f"  Status:    {appointment.status}")

        return "\n".join(lines)

    def show(self, result: ValidationResult) -> None:
        """
        Display a result and schedule it to clear.

        Args:
            result: Validation result to display.
        """
        self._cancelAutoClear()
        self._current = result
        self._stream.write(self.render(result) + "\n\n")
        self._stream.flush()
        self._scheduleAutoClear()

    def showScanFailure(self, outcome: ScanOutcome) -> None:
        """Display why an operator-initiated scan produced no QR text."""
        message = SCAN_FAILURE_MESSAGES.get(outcome.failure, "Could not read the QR code.")
        headline = f"{_DEFAULT_STYLE[0]} Scan failed"
        if self._colorOutput:
            headline = f"{ANSI_COLORS[_DEFAULT_STYLE[1]]}{headline}{ANSI_RESET}"
        self._stream.write(f"{headline}\n{message}\n\n")
        self._stream.flush()

    def dismiss(self) -> None:
        """Clear the current result and cancel any pending auto-clear."""
        self._cancelAutoClear()
        self._current = None

    def _scheduleAutoClear(self) -> None:
        if self._autoClearSeconds <= 0:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, result will stay until dismissed")
            return
        self._clearHandle = loop.call_later(self._autoClearSeconds, self._autoClear)

    def _autoClear(self) -> None:
        self._clearHandle = None
        self._current = None
        logger.debug("Result cleared")

    def _cancelAutoClear(self) -> None:
        if self._clearHandle is not None:
            self._clearHandle.cancel()
            self._clearHandle = None
