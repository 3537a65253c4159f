#!/usr/bin/env python3
"""
Data models for hostkeep.
Provides the Entry value type and the two kinds of line a hosts file is made of.
"""

import re
import ipaddress
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple, Union

from errors import InvalidAddress, InvalidHostname

logger = logging.getLogger(__name__)

# Letters, digits and hyphens, not starting or ending with a hyphen
LABEL_PATTERN = re.compile(r'^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?$')


class Family(Enum):
    """IP address family of an entry."""
    IPV4 = "ipv4"
    IPV6 = "ipv6"


class ValidationResult(NamedTuple):
    """Result of validation operation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str] = []


def validate_address(address: str) -> ValidationResult:
    """IPv4 and IPv6 literal validation, including IPv6 zone ids."""
    errors = []
    warnings = []

    if not address:
        errors.append("IP address cannot be empty")
        return ValidationResult(False, errors, warnings)

    try:
        ip_obj = ipaddress.ip_address(address)
    except ValueError as e:
        errors.append(f"Invalid IP address '{address}': {e}")
        return ValidationResult(False, errors, warnings)

    if ip_obj.is_multicast:
        warnings.append(f"Multicast IP {address} detected")
    elif ip_obj.is_link_local:
        warnings.append(f"Link-local IP {address} detected")

    return ValidationResult(True, errors, warnings)


def validate_hostname(hostname: str) -> ValidationResult:
    """RFC-compliant hostname validation."""
    errors = []
    warnings = []

    if not hostname:
        errors.append("Hostname cannot be empty")
        return ValidationResult(False, errors, warnings)

    if len(hostname) > 253:
        errors.append(f"Hostname too long: {len(hostname)} > 253 characters")

    # A fully-qualified name may end in a dot
    if hostname.endswith('.'):
        hostname = hostname[:-1]

    for i, label in enumerate(hostname.split('.')):
        if not label:
            errors.append(f"Empty label in hostname at position {i}")
            continue

        if len(label) > 63:
            errors.append(f"Label '{label}' too long: {len(label)} > 63 characters")
        elif not LABEL_PATTERN.match(label):
            if label.startswith('-'):
                errors.append(f"Label '{label}' cannot start with hyphen")
            elif label.endswith('-'):
                errors.append(f"Label '{label}' cannot end with hyphen")
            elif '_' in label:
                errors.append(f"Label '{label}' contains underscore (not RFC compliant)")
            else:
                errors.append(f"Label '{label}' contains invalid characters")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings
    )


@dataclass(frozen=True)
class Entry:
    """
    One hostname to address binding.

    Construction validates both fields and raises InvalidHostname or
    InvalidAddress. Two entries occupy the same slot when their lowercased
    hostnames and address families match; see is_duplicate_of().
    """

    hostname: str
    address: str
    enabled: bool = True

    def __post_init__(self):
        result = validate_hostname(self.hostname)
        if not result.is_valid:
            raise InvalidHostname(f"invalid hostname '{self.hostname}': {'; '.join(result.errors)}")

        result = validate_address(self.address)
        if not result.is_valid:
            raise InvalidAddress(f"invalid address '{self.address}': {'; '.join(result.errors)}")
        for warning in result.warnings:
            logger.debug(warning)

    @property
    def family(self) -> Family:
        if ipaddress.ip_address(self.address).version == 4:
            return Family.IPV4
        return Family.IPV6

    @property
    def key(self) -> Tuple[str, Family]:
        """Identity used for uniqueness: (lowercased hostname, family)."""
        return (self.hostname.lower(), self.family)

    def is_duplicate_of(self, other: 'Entry') -> bool:
        """Check if both entries occupy the same (hostname, family) slot."""
        return self.key == other.key

    def with_address(self, address: str) -> 'Entry':
        return replace(self, address=address)

    def with_enabled(self, enabled: bool) -> 'Entry':
        return replace(self, enabled=enabled)

    def to_dict(self) -> dict:
        return {
            'hostname': self.hostname,
            'address': self.address,
            'enabled': self.enabled,
        }

    def __str__(self) -> str:
        state = "on" if self.enabled else "off"
        return f"{self.hostname} -> {self.address} ({state})"


@dataclass(frozen=True)
class EntryLine:
    """
    A structured line holding a single entry.

    line_number is the 1-based physical line the entry was parsed from, or
    None for entries added after parsing. Entries parsed from the same
    physical line share a line_number and are rendered back onto one line.
    """

    entry: Entry
    line_number: Optional[int] = None
    comment: Optional[str] = None

    def replace_entry(self, entry: Entry) -> 'EntryLine':
        return replace(self, entry=entry)


@dataclass(frozen=True)
class PassthroughLine:
    """Any line that is not entry syntax: comments, blanks, malformed content."""

    text: str
    line_number: Optional[int] = None


Line = Union[EntryLine, PassthroughLine]
