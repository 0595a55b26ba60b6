"""Exception tables and line number tables of method code."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field

from classreader.positions import LineNumber, ProgramCounter


@dataclass(frozen=True)
class ExceptionTableEntry:
    """A handler covering program counters from start_pc (inclusive) to end_pc (exclusive)."""

    start_pc: ProgramCounter
    end_pc: ProgramCounter
    handler_pc: ProgramCounter
    catch_class: str | None = None

    def __contains__(self, pc: ProgramCounter) -> bool:
        return self.start_pc <= pc < self.end_pc


@dataclass
class ExceptionTable:
    """Exception table of a method's code."""

    entries: list[ExceptionTableEntry] = field(default_factory=list)

    def lookup(self, pc: ProgramCounter) -> list[ExceptionTableEntry]:
        """Return the entries covering pc, in table order."""
        return [entry for entry in self.entries if pc in entry]


@dataclass(frozen=True)
class LineNumberTableEntry:
    program_counter: ProgramCounter
    line_number: LineNumber


@dataclass
class LineNumberTable:
    """Maps program counters to source lines; entries are kept sorted by program counter."""

    entries: list[LineNumberTableEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.entries = sorted(self.entries, key=lambda entry: entry.program_counter)

    def lookup_pc(self, pc: ProgramCounter) -> LineNumber:
        """Return the line of the last entry starting at or before pc."""
        position = bisect.bisect_right(
            self.entries, pc, key=lambda entry: entry.program_counter
        )
        if position == 0:
            raise LookupError(f"no line number for program counter {pc}")
        return self.entries[position - 1].line_number