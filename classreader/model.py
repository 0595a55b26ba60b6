"""Fields, methods and the class file as a whole."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field

from classreader.constant_pool import ConstantPool
from classreader.descriptors import (
    BaseType,
    FieldType,
    MethodDescriptor,
    PrimitiveType,
)
from classreader.errors import InvalidClassDataError
from classreader.flags import ClassAccessFlags, FieldFlags, MethodFlags
from classreader.instruction import parse_instructions
from classreader.positions import Attribute
from classreader.tables import ExceptionTable, LineNumberTable
from classreader.version import DEFAULT_VERSION, ClassFileVersion

_F32 = struct.Struct(">f")

_INT_LIKE = frozenset(
    {BaseType.INT, BaseType.SHORT, BaseType.CHAR, BaseType.BYTE, BaseType.BOOLEAN}
)


def _format_flags(flags: enum.IntFlag) -> str:
    names = [member.name for member in type(flags) if member.value & flags.value]
    return " | ".join(names) if names else "(empty)"


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _format_strings(values: list[str]) -> str:
    return "[" + ", ".join(f'"{value}"' for value in values) + "]"


class ConstantKind(enum.Enum):
    """Kinds of constant value a field may carry."""

    INT = "Int"
    FLOAT = "Float"
    LONG = "Long"
    DOUBLE = "Double"
    STRING = "String"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FieldConstantValue:
    """The constant value of a final field; floats are kept at 32-bit precision."""

    kind: ConstantKind
    value: int | float | str

    def __post_init__(self) -> None:
        if self.kind is ConstantKind.FLOAT:
            try:
                rounded = _F32.unpack(_F32.pack(self.value))[0]
            except OverflowError:
                raise ValueError(
                    f"value out of range for a float constant: {self.value}"
                ) from None
            object.__setattr__(self, "value", rounded)

    def __str__(self) -> str:
        if self.kind is ConstantKind.STRING:
            return f'{self.kind}("{self.value}")'
        return f"{self.kind}({self.value})"


@dataclass
class ClassFileField:
    """A field of a class."""

    flags: FieldFlags
    name: str
    type_descriptor: FieldType
    constant_value: FieldConstantValue | None = None
    deprecated: bool = False

    def __str__(self) -> str:
        constant = "None" if self.constant_value is None else f"Some({self.constant_value})"
        suffix = " (deprecated)" if self.deprecated else ""
        return (
            f"{_format_flags(self.flags)} {self.name}: {self.type_descriptor} "
            f"constant {constant}{suffix}"
        )


@dataclass
class ClassFileMethodCode:
    """Code of a method: limits, raw bytecode, and tables."""

    max_stack: int = 0
    max_locals: int = 0
    code: bytes = b""
    exception_table: ExceptionTable = field(default_factory=ExceptionTable)
    line_number_table: LineNumberTable | None = None
    attributes: list[Attribute] = field(default_factory=list)

    def __str__(self) -> str:
        lines = [
            f"max_stack = {self.max_stack}, max_locals = {self.max_locals}, "
            f"exception_table = {self.exception_table!r}, "
            f"line_number_table: {self.line_number_table!r}, "
            f"attributes = {[str(a) for a in self.attributes]}, instructions:"
        ]
        try:
            instructions = parse_instructions(self.code)
        except InvalidClassDataError:
            lines.append(f"    unparseable code: {list(self.code)}")
        else:
            lines.extend(
                f"    {address:3} {instruction}" for address, instruction in instructions
            )
        return "\n".join(lines) + "\n"


@dataclass
class ClassFileMethod:
    """A method of a class."""

    flags: MethodFlags
    name: str
    type_descriptor: str
    parsed_type_descriptor: MethodDescriptor
    attributes: list[Attribute] = field(default_factory=list)
    code: ClassFileMethodCode | None = None
    deprecated: bool = False
    thrown_exceptions: list[str] = field(default_factory=list)

    def is_static(self) -> bool:
        return bool(self.flags & MethodFlags.STATIC)

    def is_native(self) -> bool:
        return bool(self.flags & MethodFlags.NATIVE)

    def is_void(self) -> bool:
        return self.parsed_type_descriptor.return_type is None

    def returns(self, expected_type: FieldType) -> bool:
        """Whether the method returns expected_type; small integral types count as int."""
        return_type = self.parsed_type_descriptor.return_type
        if isinstance(return_type, PrimitiveType) and return_type.base in _INT_LIKE:
            return expected_type == PrimitiveType(BaseType.INT)
        return return_type == expected_type

    def __str__(self) -> str:
        suffix = " (deprecated)" if self.deprecated else ""
        text = (
            f"{_format_flags(self.flags)} {self.name}: {self.parsed_type_descriptor}"
            f"{suffix} throws {_format_strings(self.thrown_exceptions)}\n"
        )
        if self.code is not None:
            text += f"  code: {self.code}\n"
        return text + f"  raw_attributes: {[str(a) for a in self.attributes]}"


@dataclass
class ClassFile:
    """The content of a .class file."""

    version: ClassFileVersion = DEFAULT_VERSION
    constants: ConstantPool = field(default_factory=ConstantPool, compare=False)
    flags: ClassAccessFlags = ClassAccessFlags(0)
    name: str = ""
    superclass: str | None = None
    interfaces: list[str] = field(default_factory=list)
    fields: list[ClassFileField] = field(default_factory=list)
    methods: list[ClassFileMethod] = field(default_factory=list)
    deprecated: bool = False
    source_file: str | None = None

    def __str__(self) -> str:
        text = f"Class {self.name} "
        if self.superclass is not None:
            text += f"(extends {self.superclass}) "
        text += f"version: {self.version}\n"
        text += str(self.constants)
        text += (
            f"flags: {_format_flags(self.flags)}, "
            f"deprecated: {_format_bool(self.deprecated)}\n"
        )
        text += f"interfaces: {_format_strings(self.interfaces)}\n"
        text += "fields:\n"
        text += "".join(f"  - {f}\n" for f in self.fields)
        text += "methods:\n"
        text += "".join(f"  - {m}\n" for m in self.methods)
        return text