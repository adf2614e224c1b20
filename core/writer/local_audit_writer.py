"""
Local Audit Writer Implementation

Implements IAuditSink by appending JSON lines to a local file.
Follows SRP: Only handles audit persistence.
"""

import os
import json
import logging
import threading
from datetime import datetime

from core.interfaces.audit_sink_interface import IAuditSink
from core.interfaces.validation_interface import ValidationResult


logger = logging.getLogger(__name__)


class LocalAuditWriter(IAuditSink):
    """
    Audit sink writing one JSON object per line to the local filesystem.

    Automatically creates the parent directory if it doesn't exist.
    """

    def __init__(self, filePath: str = "output/audit/checkins.jsonl"):
        """
        Initialize LocalAuditWriter.

        Args:
            filePath: Destination JSON-lines file.
        """
        self._filePath = filePath
        self._lock = threading.Lock()

    @property
    def filePath(self) -> str:
        """Get the audit file path."""
        return self._filePath

    def record(
        self,
        result: ValidationResult,
        terminalId: str,
        timestamp: datetime
    ) -> bool:
        """
        Append a validation result to the audit file.

        Args:
            result: Validation result to record.
            terminalId: Identifier of the reception terminal.
            timestamp: When the result was produced.

        Returns:
            bool: True if the line was written.
        """
        entry = {
            "timestamp": timestamp.isoformat(),
            "terminalId": terminalId,
            "result": result.toDict()
        }

        try:
            directory = os.path.dirname(self._filePath)
            if directory:
                os.makedirs(directory, exist_ok=True)

            line = json.dumps(entry, ensure_ascii=False)
            with self._lock:
                with open(self._filePath, 'a', encoding='utf-8') as f:
                    f.write(line + "\n")

            logger.debug(f"Audit entry written to {self._filePath}")
            return True

        except Exception as e:
            logger.error(f"Error writing audit entry to {self._filePath}: {e}")
            return False
