"""Appointment lookup module."""

from core.lookup.http_appointment_lookup import HttpAppointmentLookup

__all__ = ['HttpAppointmentLookup']
