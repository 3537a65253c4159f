#!/usr/bin/env python3
"""
In-memory model of a hosts file.

HostsModel owns the ordered parsed lines plus an index from
(lowercased hostname, family) to the positions of matching entry lines.
Every public operation validates first, builds the new line list, and only
then swaps it in and rebuilds the index, so a failed operation leaves the
model untouched.
"""

import ipaddress
import logging
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Tuple

from config import LineFormat
from errors import NotFound
from formatter import load_json, render
from hosts_parser import parse_lines
from models import Entry, EntryLine, Family, Line

logger = logging.getLogger(__name__)

IndexKey = Tuple[str, Family]


def same_address(left: str, right: str) -> bool:
    return ipaddress.ip_address(left) == ipaddress.ip_address(right)


class HostsModel:
    """Ordered hosts file lines with a lookup index by hostname and family."""

    def __init__(self, lines: Iterable[Line] = ()):
        self._lines: List[Line] = list(lines)
        self._index: Dict[IndexKey, List[int]] = {}
        self._rebuild_index()

    @classmethod
    def from_text(cls, text: str) -> 'HostsModel':
        return cls(parse_lines(text))

    @classmethod
    def from_entries(cls, entries: Iterable[Entry]) -> 'HostsModel':
        """Build a model by applying entries in order; later duplicates win."""
        model = cls()
        for entry in entries:
            model.apply_entry(entry)
        return model

    @classmethod
    def from_json(cls, text: str) -> 'HostsModel':
        """Import the JSON export format. Raises MalformedImport, all-or-nothing."""
        return cls.from_entries(load_json(text))

    @property
    def lines(self) -> Tuple[Line, ...]:
        return tuple(self._lines)

    def _rebuild_index(self) -> None:
        index: Dict[IndexKey, List[int]] = defaultdict(list)
        for position, line in enumerate(self._lines):
            if isinstance(line, EntryLine):
                index[line.entry.key].append(position)
        self._index = dict(index)
        logger.debug(f"Index rebuilt: {len(self._index)} hostname/family keys")

    def _commit(self, lines: List[Line]) -> None:
        self._lines = lines
        self._rebuild_index()

    def _positions(self, hostname: str) -> List[int]:
        """Positions of all entry lines for hostname, any family, in file order."""
        positions = []
        for family in Family:
            positions.extend(self._index.get((hostname.lower(), family), []))
        return sorted(positions)

    def add(self, hostname: str, address: str) -> None:
        """
        Add or overwrite the enabled entry for hostname in address's family.

        An existing enabled entry for the same slot gets the new address (any
        further enabled duplicates of that slot are dropped). Otherwise a
        disabled entry with the same address is re-enabled, and failing that
        a new entry is appended at the end of the file.
        """
        entry = Entry(hostname, address)
        lines = list(self._lines)
        positions = self._index.get(entry.key, [])
        enabled = [p for p in positions if lines[p].entry.enabled]

        if enabled:
            first = enabled[0]
            lines[first] = lines[first].replace_entry(lines[first].entry.with_address(address))
            for position in reversed(enabled[1:]):
                del lines[position]
            logger.debug(f"Updated {hostname} -> {address}")
        else:
            disabled = [p for p in positions if same_address(lines[p].entry.address, address)]
            if disabled:
                lines[disabled[0]] = lines[disabled[0]].replace_entry(
                    lines[disabled[0]].entry.with_enabled(True)
                )
                logger.debug(f"Re-enabled {hostname} -> {address}")
            else:
                lines.append(EntryLine(entry))
                logger.debug(f"Appended {hostname} -> {address}")

        self._commit(lines)

    def _add_disabled(self, entry: Entry) -> None:
        lines = list(self._lines)
        matching = [
            p for p in self._index.get(entry.key, [])
            if same_address(lines[p].entry.address, entry.address)
        ]

        if matching:
            lines[matching[0]] = lines[matching[0]].replace_entry(
                lines[matching[0]].entry.with_enabled(False)
            )
        else:
            lines.append(EntryLine(entry.with_enabled(False)))

        self._commit(lines)

    def apply_entry(self, entry: Entry) -> None:
        """Apply an imported entry: Add semantics if enabled, else track it disabled."""
        if entry.enabled:
            self.add(entry.hostname, entry.address)
        else:
            self._add_disabled(entry)

    def merge(self, other: 'HostsModel') -> None:
        """Apply every entry of other, in order, on top of this model."""
        staged = HostsModel(self._lines)
        for entry in other.entries():
            staged.apply_entry(entry)
        self._commit(staged._lines)

    def remove(self, hostname: str) -> None:
        """Remove every entry for hostname, both families. Missing hostname is a no-op."""
        doomed = set(self._positions(hostname))
        if not doomed:
            logger.debug(f"Nothing to remove for {hostname}")
            return

        self._commit([line for p, line in enumerate(self._lines) if p not in doomed])
        logger.debug(f"Removed {len(doomed)} entries for {hostname}")

    def enable(self, hostname: str) -> None:
        """
        Enable hostname. Raises NotFound if it has no entries.

        Per family, a slot that already has an enabled entry is left alone;
        otherwise its last disabled entry is enabled, so at most one entry
        per family ends up active.
        """
        if not self.has(hostname):
            raise NotFound(hostname)

        lines = list(self._lines)
        for family in Family:
            positions = self._index.get((hostname.lower(), family), [])
            if not positions or any(lines[p].entry.enabled for p in positions):
                continue
            last = positions[-1]
            lines[last] = lines[last].replace_entry(lines[last].entry.with_enabled(True))

        self._commit(lines)

    def disable(self, hostname: str) -> None:
        """Disable every entry for hostname. Raises NotFound if it has no entries."""
        positions = self._positions(hostname)
        if not positions:
            raise NotFound(hostname)

        lines = list(self._lines)
        for p in positions:
            lines[p] = lines[p].replace_entry(lines[p].entry.with_enabled(False))

        self._commit(lines)

    def has(self, hostname: str) -> bool:
        """True if any entry, enabled or not, exists for hostname."""
        return bool(self._positions(hostname))

    def entries(self) -> Iterator[Entry]:
        """Entries in file order, disabled ones included."""
        for line in self._lines:
            if isinstance(line, EntryLine):
                yield line.entry

    def __iter__(self) -> Iterator[Entry]:
        return self.entries()

    def reformat(self) -> None:
        """Normalize entry lines by rendering and re-parsing. A fixed point."""
        self._commit(parse_lines(render(self._lines, LineFormat.UNIX)))

    def conflicts(self) -> List[IndexKey]:
        """Slots holding more than one enabled entry, as found in the parsed file."""
        return [
            key for key, positions in self._index.items()
            if sum(1 for p in positions if self._lines[p].entry.enabled) > 1
        ]

    def render(self, line_format: LineFormat) -> str:
        return render(self._lines, line_format)

    def __repr__(self) -> str:
        return f"HostsModel(lines={len(self._lines)}, keys={len(self._index)})"
