#!/usr/bin/env python3
"""
Serializers for hosts data.

Renders parsed lines back to hosts file text using the configured line
terminator, and converts entries to and from the JSON export format.
"""

import json
import logging
from typing import Iterable, List, Sequence

from config import LineFormat
from errors import HostkeepError, MalformedImport
from models import Entry, EntryLine, Line, PassthroughLine

logger = logging.getLogger(__name__)

TERMINATORS = {
    LineFormat.UNIX: '\n',
    LineFormat.WINDOWS: '\r\n',
}

JSON_FIELDS = {
    'hostname': str,
    'address': str,
    'enabled': bool,
}


def render_entry_group(group: Sequence[EntryLine]) -> str:
    """Render entry lines sharing an address, state and comment as one line."""
    first = group[0]
    hostnames = ' '.join(line.entry.hostname for line in group)
    text = f"{first.entry.address}\t{hostnames}"
    if not first.entry.enabled:
        text = f"# {text}"
    if first.comment:
        text = f"{text} # {first.comment}"
    return text


def _joins_group(group: List[EntryLine], line: EntryLine) -> bool:
    first = group[0]
    return (line.line_number is not None
            and line.line_number == first.line_number
            and line.entry.address == first.entry.address
            and line.entry.enabled == first.entry.enabled
            and line.comment == first.comment)


def render_lines(lines: Iterable[Line]) -> List[str]:
    """
    Render lines to text without terminators.

    Passthrough lines come back verbatim. Consecutive entry lines that were
    parsed from the same physical line and still agree on address, enabled
    state and comment are joined back into one line; appended entries always
    get a line of their own.
    """
    rendered: List[str] = []
    group: List[EntryLine] = []

    for line in lines:
        if isinstance(line, EntryLine):
            if group and _joins_group(group, line):
                group.append(line)
                continue
            if group:
                rendered.append(render_entry_group(group))
            group = [line]
        elif isinstance(line, PassthroughLine):
            if group:
                rendered.append(render_entry_group(group))
                group = []
            rendered.append(line.text)
        else:
            raise TypeError(f"unexpected line type: {type(line).__name__}")

    if group:
        rendered.append(render_entry_group(group))

    return rendered


def render(lines: Iterable[Line], line_format: LineFormat) -> str:
    """Render lines to hosts file text, each line terminated."""
    terminator = TERMINATORS[line_format]
    return ''.join(text + terminator for text in render_lines(lines))


def dump_json(entries: Iterable[Entry]) -> str:
    """Export entries as an ordered JSON array of hostname/address/enabled objects."""
    return json.dumps([entry.to_dict() for entry in entries], indent=2) + '\n'


def load_json(text: str) -> List[Entry]:
    """
    Parse the JSON export format into entries.

    The whole document is validated before anything is returned; any missing
    field, wrong type or invalid hostname/address raises MalformedImport.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedImport(f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedImport("expected a JSON array of entries")

    entries = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedImport("expected an object", index)

        for field, field_type in JSON_FIELDS.items():
            if field not in item:
                raise MalformedImport(f"missing field '{field}'", index)
            if not isinstance(item[field], field_type):
                raise MalformedImport(
                    f"field '{field}' must be {field_type.__name__}", index
                )

        try:
            entries.append(Entry(item['hostname'], item['address'], item['enabled']))
        except HostkeepError as e:
            raise MalformedImport(e.message, index) from e

    logger.debug(f"Loaded {len(entries)} entries from JSON")
    return entries
