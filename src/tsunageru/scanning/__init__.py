"""Scan session management for decoded person/location codes."""

from .scan_session import ScanController, ScanSession

__all__ = ["ScanController", "ScanSession"]
