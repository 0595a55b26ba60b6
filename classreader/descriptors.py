"""Field types and method descriptors in their internal JVM form."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from classreader.errors import InvalidTypeDescriptorError


class BaseType(enum.Enum):
    """Primitive types, keyed by their descriptor character."""

    BYTE = "B"
    CHAR = "C"
    DOUBLE = "D"
    FLOAT = "F"
    INT = "I"
    LONG = "J"
    SHORT = "S"
    BOOLEAN = "Z"

    def __str__(self) -> str:
        return self.name.capitalize()


class FieldType:
    """Type of a field or of a method parameter."""

    __slots__ = ()


@dataclass(frozen=True)
class PrimitiveType(FieldType):
    base: BaseType

    def __str__(self) -> str:
        return str(self.base)


@dataclass(frozen=True)
class ObjectType(FieldType):
    class_name: str

    def __str__(self) -> str:
        return self.class_name


@dataclass(frozen=True)
class ArrayType(FieldType):
    component: FieldType

    def __str__(self) -> str:
        return f"{self.component}[]"


def _parse_from(descriptor: str, pos: int) -> tuple[FieldType, int]:
    """Parse one field type starting at pos; return it and the position after it."""
    dimensions = 0
    while pos < len(descriptor) and descriptor[pos] == "[":
        dimensions += 1
        pos += 1
    if pos >= len(descriptor):
        raise InvalidTypeDescriptorError(descriptor)

    char = descriptor[pos]
    pos += 1
    element: FieldType
    if char == "L":
        end = descriptor.find(";", pos)
        if end < 0:
            raise InvalidTypeDescriptorError(descriptor)
        element = ObjectType(descriptor[pos:end])
        pos = end + 1
    else:
        try:
            element = PrimitiveType(BaseType(char))
        except ValueError:
            raise InvalidTypeDescriptorError(descriptor) from None

    for _ in range(dimensions):
        element = ArrayType(element)
    return element, pos


def parse_field_type(descriptor: str) -> FieldType:
    """Parse a complete field type descriptor such as ``[Ljava/lang/String;``."""
    parsed, pos = _parse_from(descriptor, 0)
    if pos != len(descriptor):
        raise InvalidTypeDescriptorError(descriptor)
    return parsed


@dataclass
class MethodDescriptor:
    """Parameter types and return type of a method; a None return type is void."""

    parameters: list[FieldType] = field(default_factory=list)
    return_type: FieldType | None = None

    @classmethod
    def parse(cls, descriptor: str) -> MethodDescriptor:
        """Parse a method descriptor such as ``(Ljava/lang/String;I)[J``."""
        if not descriptor.startswith("("):
            raise InvalidTypeDescriptorError(descriptor)
        pos = 1
        parameters: list[FieldType] = []
        while True:
            if pos >= len(descriptor):
                raise InvalidTypeDescriptorError(descriptor)
            if descriptor[pos] == ")":
                break
            parameter, pos = _parse_from(descriptor, pos)
            parameters.append(parameter)
        pos += 1

        if pos >= len(descriptor):
            raise InvalidTypeDescriptorError(descriptor)
        if descriptor[pos] == "V":
            return cls(parameters, None)
        return_type, pos = _parse_from(descriptor, pos)
        if pos != len(descriptor):
            raise InvalidTypeDescriptorError(descriptor)
        return cls(parameters, return_type)

    def num_arguments(self) -> int:
        return len(self.parameters)

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        result = "void" if self.return_type is None else str(self.return_type)
        return f"({params}) -> {result}"