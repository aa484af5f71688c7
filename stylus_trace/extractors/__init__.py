"""Data extraction utilities for raw traces."""

from .hostio_extractor import HostIoStats, HostIoType, extract_hostio_events

__all__ = ["HostIoStats", "HostIoType", "extract_hostio_events"]
