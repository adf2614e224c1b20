"""Core interfaces module."""
