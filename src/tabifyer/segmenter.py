#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Whitespace-run column segmenter.

``pdftotext -table`` renders a table as space-aligned text: no column
boundary survives extraction, only runs of spaces. This module recovers the
columns of a single line with one left-to-right scan:

- a single space is part of a field (``"New York"`` stays one value);
- a run of two or more spaces ends the field that precedes it;
- the end of the line closes whatever field is open.

Only the ASCII space is treated as a separator. Tabs and any other
characters are field content.

Examples
--------
    >>> segment("Name  Age  City")
    ['Name', 'Age', 'City']
    >>> segment("  New York   10001 ")
    ['New York', '10001']
    >>> [(f.start, f.end) for f in segment_fields("ab  c")]
    [(0, 1), (4, 4)]

"""

from __future__ import annotations

from dataclasses import dataclass

from tabifyer.constants import SPACE_CHAR


@dataclass(frozen=True)
class Field:
    """One column value located inside a line.

    Parameters
    ----------
    start : int
        Index of the first character of the field.
    end : int
        Index of the last character of the field (inclusive).
    text : str
        ``line[start:end + 1]``; begins and ends with a non-space character.

    """

    start: int
    end: int
    text: str

    def __len__(self) -> int:
        return self.end - self.start + 1


class _ScanState:
    """Per-call scan state; a fresh instance is created for every line."""

    __slots__ = ("field_open", "first_letter", "last_letter", "last_space")

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.field_open = False
        self.first_letter = -1
        self.last_letter = -1
        self.last_space = -1

    def at_second_space(self) -> bool:
        # exactly one space sits between the last letter and the space just seen
        return self.last_space == self.last_letter + 2


def segment_fields(line: str) -> list[Field]:
    """Split a line into fields located by their character offsets.

    Parameters
    ----------
    line : str
        One line of space-aligned text, without its line terminator.

    Returns
    -------
    list[Field]
        Fields in left-to-right order. Empty and all-space lines yield an
        empty list.

    """
    fields: list[Field] = []
    state = _ScanState()
    last_index = len(line) - 1

    for index, char in enumerate(line):
        if char == SPACE_CHAR:
            state.last_space = index
        else:
            state.last_letter = index
            if not state.field_open:
                state.field_open = True
                state.first_letter = index

        if state.field_open and (state.at_second_space() or index == last_index):
            fields.append(
                Field(
                    start=state.first_letter,
                    end=state.last_letter,
                    text=line[state.first_letter : state.last_letter + 1],
                )
            )
            state.reset()

    return fields


def segment(line: str) -> list[str]:
    """Split a line into its field strings.

    Convenience wrapper around :func:`segment_fields` for callers that only
    need the text of each column.
    """
    return [field.text for field in segment_fields(line)]


__all__ = ["Field", "segment", "segment_fields"]
