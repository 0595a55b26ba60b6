"""Access flags of classes, fields and methods."""

from __future__ import annotations

import enum
from typing import TypeVar


class ClassAccessFlags(enum.IntFlag):
    """Flags of a class."""

    PUBLIC = 0x0001
    FINAL = 0x0010
    SUPER = 0x0020
    INTERFACE = 0x0200
    ABSTRACT = 0x0400
    SYNTHETIC = 0x1000
    ANNOTATION = 0x2000
    ENUM = 0x4000


class FieldFlags(enum.IntFlag):
    """Flags of a class field."""

    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    VOLATILE = 0x0040
    TRANSIENT = 0x0080
    SYNTHETIC = 0x1000
    ENUM = 0x4000


class MethodFlags(enum.IntFlag):
    """Flags of a class method."""

    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    SYNCHRONIZED = 0x0020
    BRIDGE = 0x0040
    VARARGS = 0x0080
    NATIVE = 0x0100
    ABSTRACT = 0x0400
    STRICT = 0x0800
    SYNTHETIC = 0x1000


_F = TypeVar("_F", bound=enum.IntFlag)


def flags_from_bits(flag_type: type[_F], bits: int) -> _F:
    """Build flags from raw bits, raising ValueError if any bit is unknown."""
    known = 0
    for member in flag_type:
        known |= member.value
    if bits & ~known:
        raise ValueError(f"invalid {flag_type.__name__} bits: {bits:#x}")
    return flag_type(bits)