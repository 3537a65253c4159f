#!/usr/bin/env python3
"""
Hosts file parser.

Turns raw file text into an ordered list of lines. Lines that look like
``<address> <hostname> [<hostname>...]`` become one EntryLine per hostname;
everything else is kept verbatim as a PassthroughLine. Parsing never fails.
"""

import logging
from typing import List, Optional, Tuple

from models import (
    Entry, EntryLine, Line, PassthroughLine, validate_address, validate_hostname
)

logger = logging.getLogger(__name__)

DISABLE_MARKER = '#'
COMMENT_MARKER = '#'


def split_physical_lines(text: str) -> List[str]:
    """Split text on newlines, dropping terminators (both LF and CRLF)."""
    if not text:
        return []

    lines = text.split('\n')
    if lines[-1] == '':
        lines.pop()

    return [line[:-1] if line.endswith('\r') else line for line in lines]


def _split_comment(body: str) -> Tuple[str, Optional[str]]:
    if COMMENT_MARKER not in body:
        return body, None
    body, comment = body.split(COMMENT_MARKER, 1)
    return body.strip(), comment.strip() or None


def parse_line(raw: str, line_number: Optional[int] = None) -> List[Line]:
    """Parse a single physical line (without its terminator)."""
    passthrough = [PassthroughLine(raw, line_number)]

    body = raw.strip()
    if not body:
        return passthrough

    enabled = True
    if body.startswith(DISABLE_MARKER):
        enabled = False
        body = body[len(DISABLE_MARKER):].strip()

    body, comment = _split_comment(body)

    tokens = body.split()
    if len(tokens) < 2:
        return passthrough

    address, hostnames = tokens[0], tokens[1:]
    if not validate_address(address).is_valid:
        return passthrough
    if not all(validate_hostname(hostname).is_valid for hostname in hostnames):
        return passthrough

    lines: List[Line] = []
    seen = set()
    for hostname in hostnames:
        if hostname.lower() in seen:
            continue
        seen.add(hostname.lower())
        lines.append(EntryLine(Entry(hostname, address, enabled), line_number, comment))

    return lines


def parse_lines(text: str) -> List[Line]:
    """Parse a whole hosts file into its ordered line representation."""
    lines: List[Line] = []

    for line_number, raw in enumerate(split_physical_lines(text), 1):
        lines.extend(parse_line(raw, line_number))

    logger.debug(f"Parsed {len(lines)} lines from hosts file")
    return lines
