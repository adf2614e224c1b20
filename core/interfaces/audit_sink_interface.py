"""
Audit Sink Interface Module

Defines the abstract interface for recording check-in decisions.
Follows ISP: Only contains methods related to audit recording.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from core.interfaces.validation_interface import ValidationResult


class IAuditSink(ABC):
    """
    Abstract interface for audit recording.

    Implementations should persist each validation outcome together with
    the time and the terminal that produced it (local file, remote log, ...).
    """

    @abstractmethod
    def record(
        self,
        result: ValidationResult,
        terminalId: str,
        timestamp: datetime
    ) -> bool:
        """
        Record one validation outcome.

        Args:
            result: Validation result shown to the operator.
            terminalId: Identifier of the reception terminal.
            timestamp: When the result was produced.

        Returns:
            bool: True if recorded successfully, False otherwise.
        """
        pass
