"""Exceptions raised while reading class files."""

from __future__ import annotations


class _ValueEquality:
    """Makes exceptions compare equal when their type and arguments match."""

    args: tuple

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class ClassReaderError(_ValueEquality, Exception):
    """Base class of every error raised while reading a class file."""


class InvalidConstantPoolIndexError(_ValueEquality, LookupError):
    """An attempt was made to access a constant pool entry that does not exist."""

    def __init__(self, index: int) -> None:
        super().__init__(index)
        self.index = index

    def __str__(self) -> str:
        return f"invalid constant pool index: {self.index}"


class InvalidClassDataError(ClassReaderError):
    """The class file is malformed."""

    def __init__(
        self, message: str, cause: InvalidConstantPoolIndexError | None = None
    ) -> None:
        super().__init__(message, cause)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"invalid class file: {self.message}"


class UnsupportedVersionError(ClassReaderError):
    """The class file declares a version this reader does not know."""

    def __init__(self, major: int, minor: int) -> None:
        super().__init__(major, minor)
        self.major = major
        self.minor = minor

    def __str__(self) -> str:
        return f"unsupported class file version {self.major}.{self.minor}"


class InvalidTypeDescriptorError(ClassReaderError):
    """A field or method type descriptor could not be parsed."""

    def __init__(self, descriptor: str) -> None:
        super().__init__(descriptor)
        self.descriptor = descriptor

    def __str__(self) -> str:
        return f"invalid type descriptor: {self.descriptor}"


class BufferError(_ValueEquality, Exception):  # noqa: A001
    """Base class of errors raised while reading raw data from a buffer."""

    description = "buffer error"
    class_file_message = "invalid buffer data"

    def __init__(self) -> None:
        super().__init__(self.description)

    def __str__(self) -> str:
        return self.description


class UnexpectedEndOfDataError(BufferError):
    """The buffer ended before the requested data could be read."""

    description = "unexpected end of data"
    class_file_message = "unexpected end of class file"


class InvalidCesu8StringError(BufferError):
    """The bytes are not a valid Java modified UTF-8 string."""

    description = "invalid cesu8 string"
    class_file_message = "invalid cesu8 string"