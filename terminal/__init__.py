"""Reception terminal session package."""

from terminal.recent_scan_buffer import RecentScanBuffer
from terminal.result_presenter import ResultPresenter
from terminal.checkin_orchestrator import CheckinOrchestrator

__all__ = [
    'RecentScanBuffer',
    'ResultPresenter',
    'CheckinOrchestrator'
]
