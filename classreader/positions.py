"""Program counters, source line numbers and raw attributes."""

from __future__ import annotations

from dataclasses import dataclass

_U16_MAX = 0xFFFF


def _check_u16(kind: str, value: int) -> None:
    if not 0 <= value <= _U16_MAX:
        raise ValueError(f"{kind} out of range: {value}")


@dataclass(frozen=True, order=True)
class ProgramCounter:
    """Address of an instruction in the bytecode of a method."""

    value: int

    def __post_init__(self) -> None:
        _check_u16("program counter", self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class LineNumber:
    """A line number in the source code."""

    value: int

    def __post_init__(self) -> None:
        _check_u16("line number", self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Attribute:
    """A raw attribute of a class, field, method or code block."""

    name: str = ""
    data: bytes = b""

    def __str__(self) -> str:
        return f"{self.name} (data = {len(self.data)} bytes)"