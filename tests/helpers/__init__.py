"""Test helper utilities for admin notifier tests."""

from .transport import RecordingTransport

__all__ = ["RecordingTransport"]
