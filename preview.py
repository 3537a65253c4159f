#!/usr/bin/env python3
"""
Line-level diff between the current hosts file and its replacement.
Used by preview mode to report what a command would change.
"""

import difflib
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence


class ChangeKind(Enum):
    """Kind of change for a diffed line."""
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


@dataclass(frozen=True)
class DiffLine:
    """One reported change. old is None for ADDED, new is None for REMOVED."""
    kind: ChangeKind
    old: Optional[str] = None
    new: Optional[str] = None


def compute_diff(original: Sequence[str], updated: Sequence[str]) -> List[DiffLine]:
    """
    Compare two sequences of rendered lines by content.

    Changes are reported in file order; within a replaced block, paired lines
    become CHANGED and any surplus on either side is REMOVED or ADDED.
    """
    original = tuple(original)
    updated = tuple(updated)
    changes: List[DiffLine] = []

    matcher = difflib.SequenceMatcher(a=original, b=updated, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == 'equal':
            continue

        old_block = original[i1:i2]
        new_block = updated[j1:j2]
        paired = min(len(old_block), len(new_block))

        for old, new in zip(old_block[:paired], new_block[:paired]):
            changes.append(DiffLine(ChangeKind.CHANGED, old, new))
        for old in old_block[paired:]:
            changes.append(DiffLine(ChangeKind.REMOVED, old=old))
        for new in new_block[paired:]:
            changes.append(DiffLine(ChangeKind.ADDED, new=new))

    return changes


def format_report(changes: Sequence[DiffLine]) -> str:
    """Human readable report: "-" for old content, "+" for new content."""
    if not changes:
        return "No changes\n"

    out = []
    for change in changes:
        if change.old is not None:
            out.append(f"- {change.old}")
        if change.new is not None:
            out.append(f"+ {change.new}")
    return '\n'.join(out) + '\n'
