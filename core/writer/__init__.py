"""Audit writer module."""

from core.writer.local_audit_writer import LocalAuditWriter

__all__ = ['LocalAuditWriter']
