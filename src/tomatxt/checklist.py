"""
Checkbox markup inside note content.

A checklist item is one line of the form ``- [ ] text`` or ``- [x] text``
(``*`` is accepted as the list marker, the ``x`` is case-insensitive, and the
line may be indented). Everything here is a pure function of the content
string: the note store decides when to call them and persists the results.

Items are identified by their literal text only. When two lines carry the same
text, they are told apart by their order among same-text lines.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .models import NoteEntity

_CHECKBOX_RE = re.compile(r"^(?P<head>\s*[-*]\s*\[)(?P<mark>[ xX])(?P<tail>\])(?P<rest>.*)$")


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class ChecklistItem:
    """One parsed checkbox line."""

    text: str
    completed: bool


@dataclass
class ReconcilePlan:
    """
    Diff between a parent's stored children and its parsed checklist.

    - keep: (child, new position, item) for children matched to an item
    - create: (position, item) for items with no matching child
    - delete: children whose text no longer appears in the checklist
    """

    keep: List[Tuple[NoteEntity, int, ChecklistItem]] = field(default_factory=list)
    create: List[Tuple[int, ChecklistItem]] = field(default_factory=list)
    delete: List[NoteEntity] = field(default_factory=list)

    @property
    def updates(self) -> List[Tuple[NoteEntity, int, ChecklistItem]]:
        """Matched children whose stored position or done flag is stale."""
        return [
            (child, position, item)
            for child, position, item in self.keep
            if child["position"] != position or child["is_done"] != item.completed
        ]

    @property
    def is_noop(self) -> bool:
        return not (self.create or self.delete or self.updates)


def _match_line(line: str) -> Optional[re.Match]:
    m = _CHECKBOX_RE.match(line)
    if m is None or not m.group("rest").strip():
        return None
    return m


def _item_from_match(m: re.Match) -> ChecklistItem:
    return ChecklistItem(text=m.group("rest").strip(), completed=m.group("mark") in "xX")


def _checkbox_line_indexes(lines: Sequence[str]) -> List[int]:
    return [i for i, line in enumerate(lines) if _match_line(line) is not None]


# PUBLIC_INTERFACE
def parse(content: str) -> List[ChecklistItem]:
    """Return the checklist items of ``content`` in line order."""
    return [item for _, item in parse_with_positions(content)]


# PUBLIC_INTERFACE
def parse_with_positions(content: str) -> List[Tuple[int, ChecklistItem]]:
    """Return ``(line_index, item)`` pairs for every checkbox line of ``content``."""
    pairs: List[Tuple[int, ChecklistItem]] = []
    for i, line in enumerate(content.split("\n")):
        m = _match_line(line)
        if m is not None:
            pairs.append((i, _item_from_match(m)))
    return pairs


# PUBLIC_INTERFACE
def plan(children: Sequence[NoteEntity], items: Sequence[ChecklistItem]) -> ReconcilePlan:
    """
    Match stored children to parsed items by text.

    Each item takes the first still-unmatched child with the same title, in the
    children's stored order, so same-text items pair up positionally. Items
    left without a child are created; children left without an item are
    deleted.
    """
    result = ReconcilePlan()
    available = list(children)
    for position, item in enumerate(items):
        match_index = next(
            (i for i, child in enumerate(available) if child["title"] == item.text), None
        )
        if match_index is None:
            result.create.append((position, item))
        else:
            result.keep.append((available.pop(match_index), position, item))
    result.delete = available
    return result


# PUBLIC_INTERFACE
def find_item(content: str, text: str, done: bool) -> Optional[int]:
    """
    Return the checklist index of ``text`` to set to ``done``.

    Prefers the first occurrence whose marker differs from ``done``; when every
    occurrence already matches, the first occurrence is returned. ``None`` when
    the text does not appear.
    """
    first: Optional[int] = None
    for index, item in enumerate(parse(content)):
        if item.text != text:
            continue
        if item.completed != done:
            return index
        if first is None:
            first = index
    return first


def _rewrite(content: str, index: int, rewrite) -> str:
    lines = content.split("\n")
    line_indexes = _checkbox_line_indexes(lines)
    if not 0 <= index < len(line_indexes):
        raise IndexError(f"checklist has no item {index}")
    target = line_indexes[index]
    replacement = rewrite(lines[target], _match_line(lines[target]))
    if replacement is None:
        del lines[target]
    else:
        lines[target] = replacement
    return "\n".join(lines)


# PUBLIC_INTERFACE
def set_item_status(content: str, index: int, done: bool) -> str:
    """Flip the marker of the ``index``-th checkbox line, keeping the rest of the line."""

    def rewrite(line: str, m: re.Match) -> str:
        mark = "x" if done else " "
        if (m.group("mark") in "xX") == done:
            mark = m.group("mark")
        return f"{m.group('head')}{mark}{m.group('tail')}{m.group('rest')}"

    return _rewrite(content, index, rewrite)


# PUBLIC_INTERFACE
def rename_item(content: str, index: int, text: str) -> str:
    """Replace the text of the ``index``-th checkbox line."""

    def rewrite(line: str, m: re.Match) -> str:
        eol = "\r" if line.endswith("\r") else ""
        return f"{m.group('head')}{m.group('mark')}{m.group('tail')} {text.strip()}{eol}"

    return _rewrite(content, index, rewrite)


# PUBLIC_INTERFACE
def remove_item(content: str, index: int) -> str:
    """Drop the ``index``-th checkbox line."""
    return _rewrite(content, index, lambda line, m: None)


# PUBLIC_INTERFACE
def strip_checkboxes(content: str) -> str:
    """Return ``content`` without its checkbox lines, trimmed."""
    return "\n".join(line for line in content.split("\n") if _match_line(line) is None).strip()


# PUBLIC_INTERFACE
def progress(items: Sequence[ChecklistItem]) -> Tuple[int, float]:
    """Return the number of completed items and the completed percentage."""
    if not items:
        return 0, 0.0
    done = sum(1 for item in items if item.completed)
    return done, done / len(items) * 100.0
