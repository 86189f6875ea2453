"""Timing engines."""
