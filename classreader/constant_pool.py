"""The constant pool of a class file."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from classreader.errors import InvalidConstantPoolIndexError

_F32 = struct.Struct(">f")


def _to_f32(value: float) -> float:
    try:
        return _F32.unpack(_F32.pack(value))[0]
    except OverflowError:
        raise ValueError(f"value out of range for a float constant: {value}") from None


def _plain_decimal(text: str) -> str:
    """Render a number without exponent and without a trailing fractional zero."""
    rendered = format(Decimal(text), "f")
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return rendered


def _format_float(value: float, single: bool) -> str:
    """Shortest round-tripping decimal form of a float, never in exponent notation."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if single:
        packed = _F32.pack(value)
        text = repr(value)
        for precision in range(1, 10):
            candidate = f"{value:.{precision}g}"
            if _F32.pack(float(candidate)) == packed:
                text = candidate
                break
    else:
        text = repr(value)
    return _plain_decimal(text)


@dataclass(frozen=True)
class Utf8Entry:
    value: str


@dataclass(frozen=True)
class IntegerEntry:
    value: int


@dataclass(frozen=True)
class FloatEntry:
    """A single-precision constant; the value is rounded to 32-bit precision."""

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _to_f32(self.value))


@dataclass(frozen=True)
class LongEntry:
    value: int


@dataclass(frozen=True)
class DoubleEntry:
    value: float


@dataclass(frozen=True)
class ClassReference:
    name_index: int


@dataclass(frozen=True)
class StringReference:
    string_index: int


@dataclass(frozen=True)
class FieldReference:
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class MethodReference:
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class InterfaceMethodReference:
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class NameAndTypeDescriptor:
    name_index: int
    descriptor_index: int


ConstantPoolEntry = Union[
    Utf8Entry,
    IntegerEntry,
    FloatEntry,
    LongEntry,
    DoubleEntry,
    ClassReference,
    StringReference,
    FieldReference,
    MethodReference,
    InterfaceMethodReference,
    NameAndTypeDescriptor,
]

_PAIR_KINDS = {
    FieldReference: "FieldReference",
    MethodReference: "MethodReference",
    InterfaceMethodReference: "InterfaceMethodReference",
}


class _Tombstone:
    """Fills the unused second slot of a long or double constant."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<unused slot>"


_TOMBSTONE = _Tombstone()


class ConstantPool:
    """Constants of a class, addressed by 1-based indexes.

    Long and double constants take two slots; the second cannot be accessed.
    """

    def __init__(self) -> None:
        self._slots: list[ConstantPoolEntry | _Tombstone] = []

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"ConstantPool({self._slots!r})"

    def add(self, entry: ConstantPoolEntry) -> None:
        """Append an entry, taking a second slot for longs and doubles."""
        self._slots.append(entry)
        if isinstance(entry, (LongEntry, DoubleEntry)):
            self._slots.append(_TOMBSTONE)

    def get(self, index: int) -> ConstantPoolEntry:
        """Return the entry at a 1-based index."""
        if index < 1 or index > len(self._slots):
            raise InvalidConstantPoolIndexError(index)
        entry = self._slots[index - 1]
        if isinstance(entry, _Tombstone):
            raise InvalidConstantPoolIndexError(index)
        return entry

    def text_of(self, index: int) -> str:
        """Resolve an entry, following references, into plain text."""
        entry = self.get(index)
        if isinstance(entry, Utf8Entry):
            return entry.value
        if isinstance(entry, (IntegerEntry, LongEntry)):
            return str(entry.value)
        if isinstance(entry, FloatEntry):
            return _format_float(entry.value, single=True)
        if isinstance(entry, DoubleEntry):
            return _format_float(entry.value, single=False)
        if isinstance(entry, ClassReference):
            return self.text_of(entry.name_index)
        if isinstance(entry, StringReference):
            return self.text_of(entry.string_index)
        if isinstance(entry, NameAndTypeDescriptor):
            return f"{self.text_of(entry.name_index)}: {self.text_of(entry.descriptor_index)}"
        return f"{self.text_of(entry.class_index)}.{self.text_of(entry.name_and_type_index)}"

    def describe(self, index: int) -> str:
        """Describe an entry and, recursively, the entries it refers to."""
        entry = self.get(index)
        if isinstance(entry, Utf8Entry):
            return f'String: "{entry.value}"'
        if isinstance(entry, IntegerEntry):
            return f"Integer: {entry.value}"
        if isinstance(entry, FloatEntry):
            return f"Float: {_format_float(entry.value, single=True)}"
        if isinstance(entry, LongEntry):
            return f"Long: {entry.value}"
        if isinstance(entry, DoubleEntry):
            return f"Double: {_format_float(entry.value, single=False)}"
        if isinstance(entry, ClassReference):
            return f"ClassReference: {entry.name_index} => ({self.describe(entry.name_index)})"
        if isinstance(entry, StringReference):
            return (
                f"StringReference: {entry.string_index} => "
                f"({self.describe(entry.string_index)})"
            )
        if isinstance(entry, NameAndTypeDescriptor):
            first, second, kind = entry.name_index, entry.descriptor_index, "NameAndTypeDescriptor"
        else:
            first, second = entry.class_index, entry.name_and_type_index
            kind = _PAIR_KINDS[type(entry)]
        return (
            f"{kind}: {first}, {second} => "
            f"({self.describe(first)}), ({self.describe(second)})"
        )

    def __str__(self) -> str:
        lines = [f"Constant pool: (size: {len(self._slots)})"]
        for index, slot in enumerate(self._slots, start=1):
            if isinstance(slot, _Tombstone):
                continue
            lines.append(f"    {index}, {self.describe(index)}")
        return "\n".join(lines) + "\n"