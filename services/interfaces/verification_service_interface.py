"""
Verification Service Interface Module.

Defines the interface for validating scanned appointment passes
(Step 3 of check-in).

Follows:
- SRP: Only decides admit/reject for one scan
- DIP: Terminal orchestration depends on this abstraction
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from core.interfaces.validation_interface import ValidationResult


class IVerificationService(ABC):
    """
    Interface for appointment pass verification (Step 3).
    """

    @abstractmethod
    async def verify(
        self,
        rawText: str,
        terminalDepartment: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> ValidationResult:
        """
        Validate raw QR text against the booking system.

        Args:
            rawText: Raw QR text from the scan step.
            terminalDepartment: Department served by this terminal
                (defaults to the configured department).
            now: Current time (defaults to the local wall clock).

        Returns:
            ValidationResult: Always returned, never raises.
        """
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release the lookup's network resources."""
        pass
