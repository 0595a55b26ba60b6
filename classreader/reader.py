"""Reading class files from raw bytes."""

from __future__ import annotations

import enum
import logging
import os
import struct
from typing import Callable, TypeVar

from classreader.buffer import Buffer
from classreader.constant_pool import (
    ClassReference,
    ConstantPool,
    ConstantPoolEntry,
    DoubleEntry,
    FieldReference,
    FloatEntry,
    IntegerEntry,
    InterfaceMethodReference,
    LongEntry,
    MethodReference,
    NameAndTypeDescriptor,
    StringReference,
    Utf8Entry,
)
from classreader.descriptors import MethodDescriptor, parse_field_type
from classreader.errors import (
    BufferError,
    InvalidClassDataError,
    InvalidConstantPoolIndexError,
)
from classreader.flags import ClassAccessFlags, FieldFlags, MethodFlags, flags_from_bits
from classreader.model import (
    ClassFile,
    ClassFileField,
    ClassFileMethod,
    ClassFileMethodCode,
    ConstantKind,
    FieldConstantValue,
)
from classreader.positions import Attribute, LineNumber, ProgramCounter
from classreader.tables import (
    ExceptionTable,
    ExceptionTableEntry,
    LineNumberTable,
    LineNumberTableEntry,
)
from classreader.version import ClassFileVersion

_LOG = logging.getLogger(__name__)

_MAGIC = 0xCAFEBABE
_U16 = struct.Struct(">H")

_F = TypeVar("_F", bound=enum.IntFlag)


def _first(attributes: list[Attribute], name: str) -> Attribute | None:
    return next((attr for attr in attributes if attr.name == name), None)


def _is_deprecated(attributes: list[Attribute]) -> bool:
    return any(attr.name == "Deprecated" for attr in attributes)


class _ClassFileReader:
    """Reads one class file; supports the class format without generics."""

    def __init__(self, data: bytes) -> None:
        self._buffer = Buffer(data)
        self._constants = ConstantPool()

    def read(self) -> ClassFile:
        self._check_magic_number()
        version = self._read_version()
        self._read_constants()
        flags = self._read_flags(
            ClassAccessFlags, lambda bits: f"invalid class flags: {bits}"
        )
        name = self._read_class_reference()
        superclass = self._read_optional_class_reference()
        interfaces = [
            self._read_class_reference() for _ in range(self._buffer.read_u16())
        ]
        fields = [self._read_field() for _ in range(self._buffer.read_u16())]
        methods = [self._read_method() for _ in range(self._buffer.read_u16())]
        class_attributes = self._read_attributes(self._buffer)
        return ClassFile(
            version=version,
            constants=self._constants,
            flags=flags,
            name=name,
            superclass=superclass,
            interfaces=interfaces,
            fields=fields,
            methods=methods,
            deprecated=_is_deprecated(class_attributes),
            source_file=self._source_file(class_attributes),
        )

    def _check_magic_number(self) -> None:
        if self._buffer.read_u32() != _MAGIC:
            raise InvalidClassDataError("invalid magic number")

    def _read_version(self) -> ClassFileVersion:
        minor = self._buffer.read_u16()
        major = self._buffer.read_u16()
        return ClassFileVersion.from_numbers(major, minor)

    def _read_constants(self) -> None:
        count = self._buffer.read_u16()
        if count == 0:
            raise InvalidClassDataError("invalid constant pool count: 0")
        index = 1
        while index < count:
            tag = self._buffer.read_u8()
            entry = self._read_constant(tag, index - 1)
            self._constants.add(entry)
            # long and double constants take up two slots in the pool
            index += 2 if isinstance(entry, (LongEntry, DoubleEntry)) else 1

    def _read_constant(self, tag: int, position: int) -> ConstantPoolEntry:
        buf = self._buffer
        match tag:
            case 1:
                return Utf8Entry(buf.read_utf8(buf.read_u16()))
            case 3:
                return IntegerEntry(buf.read_i32())
            case 4:
                return FloatEntry(buf.read_f32())
            case 5:
                return LongEntry(buf.read_i64())
            case 6:
                return DoubleEntry(buf.read_f64())
            case 7:
                return ClassReference(buf.read_u16())
            case 8:
                return StringReference(buf.read_u16())
            case 9:
                return FieldReference(buf.read_u16(), buf.read_u16())
            case 10:
                return MethodReference(buf.read_u16(), buf.read_u16())
            case 11:
                return InterfaceMethodReference(buf.read_u16(), buf.read_u16())
            case 12:
                return NameAndTypeDescriptor(buf.read_u16(), buf.read_u16())
        _LOG.warning("invalid entry in constant pool at index %d tag %d", position, tag)
        raise InvalidClassDataError(f"Unknown constant type: 0x{tag:X}")

    def _read_flags(self, flag_type: type[_F], describe: Callable[[int], str]) -> _F:
        bits = self._buffer.read_u16()
        try:
            return flags_from_bits(flag_type, bits)
        except ValueError:
            raise InvalidClassDataError(describe(bits)) from None

    def _read_class_reference(self) -> str:
        return self._constants.text_of(self._buffer.read_u16())

    def _read_optional_class_reference(self) -> str | None:
        index = self._buffer.read_u16()
        return None if index == 0 else self._constants.text_of(index)

    def _read_field(self) -> ClassFileField:
        flags = self._read_flags(FieldFlags, lambda bits: f"invalid field flags: {bits:#x}")
        name = self._constants.text_of(self._buffer.read_u16())
        type_descriptor = parse_field_type(self._constants.text_of(self._buffer.read_u16()))
        attributes = self._read_attributes(self._buffer)
        return ClassFileField(
            flags=flags,
            name=name,
            type_descriptor=type_descriptor,
            constant_value=self._constant_value(attributes),
            deprecated=_is_deprecated(attributes),
        )

    def _constant_value(self, attributes: list[Attribute]) -> FieldConstantValue | None:
        attr = _first(attributes, "ConstantValue")
        if attr is None:
            return None
        if len(attr.data) != _U16.size:
            raise InvalidClassDataError("invalid attribute of type ConstantValue")
        (index,) = _U16.unpack(attr.data)
        entry = self._constants.get(index)
        match entry:
            case StringReference(string_index=string_index):
                return FieldConstantValue(
                    ConstantKind.STRING, self._constants.text_of(string_index)
                )
            case IntegerEntry(value=value):
                return FieldConstantValue(ConstantKind.INT, value)
            case FloatEntry(value=value):
                return FieldConstantValue(ConstantKind.FLOAT, value)
            case LongEntry(value=value):
                return FieldConstantValue(ConstantKind.LONG, value)
            case DoubleEntry(value=value):
                return FieldConstantValue(ConstantKind.DOUBLE, value)
        raise InvalidClassDataError(f"invalid type for ConstantValue: {entry!r}")

    def _read_method(self) -> ClassFileMethod:
        flags = self._read_flags(
            MethodFlags, lambda bits: f"invalid method flags: {bits:#x}"
        )
        name = self._constants.text_of(self._buffer.read_u16())
        type_descriptor = self._constants.text_of(self._buffer.read_u16())
        parsed = MethodDescriptor.parse(type_descriptor)
        attributes = self._read_attributes(self._buffer)
        if flags & (MethodFlags.NATIVE | MethodFlags.ABSTRACT):
            code = None
        else:
            code = self._code(attributes, name)
        return ClassFileMethod(
            flags=flags,
            name=name,
            type_descriptor=type_descriptor,
            parsed_type_descriptor=parsed,
            attributes=attributes,
            code=code,
            deprecated=_is_deprecated(attributes),
            thrown_exceptions=self._thrown_exceptions(attributes),
        )

    def _code(self, attributes: list[Attribute], name: str) -> ClassFileMethodCode:
        attr = _first(attributes, "Code")
        if attr is None:
            raise InvalidClassDataError(f"method {name} is missing code attribute")
        buf = Buffer(attr.data)
        max_stack = buf.read_u16()
        max_locals = buf.read_u16()
        code = buf.read_bytes(buf.read_u32())
        exception_table = self._read_exception_table(buf)
        code_attributes = self._read_attributes(buf)
        return ClassFileMethodCode(
            max_stack=max_stack,
            max_locals=max_locals,
            code=code,
            exception_table=exception_table,
            line_number_table=self._line_number_table(code_attributes),
            attributes=code_attributes,
        )

    def _read_exception_table(self, buf: Buffer) -> ExceptionTable:
        entries = []
        for _ in range(buf.read_u16()):
            start_pc = buf.read_u16()
            end_pc = buf.read_u16()
            handler_pc = buf.read_u16()
            catch_index = buf.read_u16()
            catch_class = None if catch_index == 0 else self._constants.text_of(catch_index)
            entries.append(
                ExceptionTableEntry(
                    ProgramCounter(start_pc),
                    ProgramCounter(end_pc),
                    ProgramCounter(handler_pc),
                    catch_class,
                )
            )
        return ExceptionTable(entries)

    def _line_number_table(self, attributes: list[Attribute]) -> LineNumberTable | None:
        attr = _first(attributes, "LineNumberTable")
        if attr is None:
            return None
        buf = Buffer(attr.data)
        entries = []
        for _ in range(buf.read_u16()):
            pc = buf.read_u16()
            line = buf.read_u16()
            entries.append(LineNumberTableEntry(ProgramCounter(pc), LineNumber(line)))
        return LineNumberTable(entries)

    def _thrown_exceptions(self, attributes: list[Attribute]) -> list[str]:
        attr = _first(attributes, "Exceptions")
        if attr is None:
            return []
        buf = Buffer(attr.data)
        return [self._constants.text_of(buf.read_u16()) for _ in range(buf.read_u16())]

    def _source_file(self, attributes: list[Attribute]) -> str | None:
        attr = _first(attributes, "SourceFile")
        if attr is None:
            return None
        if len(attr.data) != _U16.size:
            raise InvalidClassDataError("invalid SourceFile attribute")
        (index,) = _U16.unpack(attr.data)
        entry = self._constants.get(index)
        if not isinstance(entry, Utf8Entry):
            raise InvalidClassDataError("invalid SourceFile attribute")
        return entry.value

    def _read_attributes(self, buf: Buffer) -> list[Attribute]:
        attributes = []
        for _ in range(buf.read_u16()):
            name = self._constants.text_of(buf.read_u16())
            data = buf.read_bytes(buf.read_u32())
            attributes.append(Attribute(name, data))
        return attributes


def read_buffer(data: bytes) -> ClassFile:
    """Read a class from the bytes of a .class file."""
    try:
        return _ClassFileReader(data).read()
    except BufferError as err:
        raise InvalidClassDataError(err.class_file_message) from err
    except InvalidConstantPoolIndexError as err:
        raise InvalidClassDataError(str(err), err) from err


def read_class_file(path: str | os.PathLike[str]) -> ClassFile:
    """Read a class from a .class file on disk."""
    with open(path, "rb") as handle:
        return read_buffer(handle.read())