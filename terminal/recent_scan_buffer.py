"""
Recent Scan Buffer Module.

Remembers the last few raw QR payloads seen by a terminal session so a
pass held in front of the camera is validated once, not on every frame.
"""

import threading
from collections import deque


class RecentScanBuffer:
    """
    Bounded FIFO of recently accepted raw scans.

    Owned by one terminal session. The camera loop and operator uploads
    may register scans concurrently, so check-and-append is atomic.
    """

    def __init__(self, capacity: int = 5):
        """
        Initialize RecentScanBuffer.

        Args:
            capacity: Number of recent scans remembered.

        Raises:
            ValueError: If capacity is less than 1.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")

        self._capacity = capacity
        self._recent: deque[str] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def register(self, rawText: str) -> bool:
        """
        Record a scan unless it is already in the window.

        Args:
            rawText: Raw QR text as delivered by the scanner.

        Returns:
            bool: True if the scan is new and should be validated,
                False if it duplicates a recent scan.
        """
        with self._lock:
            if rawText in self._recent:
                return False
            self._recent.append(rawText)
            return True

    def clear(self) -> None:
        """Forget all recent scans."""
        with self._lock:
            self._recent.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._recent)

    def __contains__(self, rawText: object) -> bool:
        with self._lock:
            return rawText in self._recent
