#!/usr/bin/env python3
"""
Error types for hostkeep.
Every failure surfaced to a caller is one of these.
"""

from typing import Optional


class HostkeepError(Exception):
    """Base class for all hostkeep errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidHostname(HostkeepError, ValueError):
    """Hostname is empty or not a valid DNS-style name."""


class InvalidAddress(HostkeepError, ValueError):
    """Address is not an IPv4 or IPv6 literal."""


class NotFound(HostkeepError, LookupError):
    """No entry matches the requested hostname."""

    def __init__(self, hostname: str):
        super().__init__(f"{hostname} not found in hosts file")
        self.hostname = hostname


class MalformedImport(HostkeepError, ValueError):
    """JSON import document is not a valid list of entries."""

    def __init__(self, message: str, index: Optional[int] = None):
        if index is not None:
            message = f"entry {index}: {message}"
        super().__init__(message)
        self.index = index


class ReadFailed(HostkeepError):
    """Hosts file exists but could not be read."""


class WriteFailed(HostkeepError):
    """Serialized hosts file could not be committed to disk."""


class InvalidCommand(HostkeepError):
    """Unrecognized top-level command."""

    def __init__(self, command: str):
        super().__init__(f"invalid command: {command}")
        self.command = command
