"""Appointment check-in rules module."""

from core.appointment.payload_codec import AppointmentPassCodec
from core.appointment.time_window import classifyTimeWindow, parseScheduledInstant
from core.appointment.department_matcher import DepartmentMatcher
from core.appointment.status_gate import StatusGate, GateDecision

__all__ = [
    'AppointmentPassCodec',
    'classifyTimeWindow',
    'parseScheduledInstant',
    'DepartmentMatcher',
    'StatusGate',
    'GateDecision'
]
