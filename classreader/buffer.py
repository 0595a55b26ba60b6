"""Big-endian reader over a byte sequence."""

from __future__ import annotations

import struct

from classreader.errors import InvalidCesu8StringError, UnexpectedEndOfDataError

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")


def decode_java_cesu8(data: bytes) -> str:
    """Decode Java's modified UTF-8 (CESU-8 with an encoded NUL) into a string."""
    raw = bytes(data).replace(b"\xc0\x80", b"\x00")
    try:
        with_surrogates = raw.decode("utf-8", "surrogatepass")
        if any(ord(char) > 0xFFFF for char in with_surrogates):
            raise InvalidCesu8StringError()
        return with_surrogates.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeError as err:
        raise InvalidCesu8StringError() from err


class Buffer:
    """Reads big-endian values from a byte sequence, advancing a position."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    def _advance(self, size: int) -> bytes:
        end = self._position + size
        if size < 0 or end > len(self._data):
            raise UnexpectedEndOfDataError()
        chunk = self._data[self._position:end]
        self._position = end
        return chunk

    def _unpack(self, layout: struct.Struct):
        return layout.unpack(self._advance(layout.size))[0]

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_i64(self) -> int:
        return self._unpack(_I64)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def read_f64(self) -> float:
        return self._unpack(_F64)

    def read_utf8(self, length: int) -> str:
        return decode_java_cesu8(self._advance(length))

    def read_bytes(self, length: int) -> bytes:
        return self._advance(length)

    def has_more_data(self) -> bool:
        return self._position < len(self._data)