import pytest

from classreader.errors import (
    BufferError as ReaderBufferError,
    ClassReaderError,
    InvalidCesu8StringError,
    InvalidClassDataError,
    InvalidConstantPoolIndexError,
    InvalidTypeDescriptorError,
    UnexpectedEndOfDataError,
    UnsupportedVersionError,
)


def test_invalid_class_data_message():
    err = InvalidClassDataError("invalid magic number")
    assert str(err) == "invalid class file: invalid magic number"
    assert err.message == "invalid magic number"
    assert err.cause is None


def test_invalid_class_data_keeps_cause():
    cause = InvalidConstantPoolIndexError(7)
    err = InvalidClassDataError(str(cause), cause)
    assert err.cause is cause
    assert err.__cause__ is cause
    assert err.message == str(cause)


def test_constant_pool_index_error_message():
    err = InvalidConstantPoolIndexError(5)
    assert str(err) == "invalid constant pool index: 5"
    assert err.index == 5
    assert isinstance(err, LookupError)


def test_unsupported_version_message():
    err = UnsupportedVersionError(99, 65535)
    assert str(err) == "unsupported class file version 99.65535"
    assert (err.major, err.minor) == (99, 65535)


def test_invalid_type_descriptor_message():
    err = InvalidTypeDescriptorError("W")
    assert str(err) == "invalid type descriptor: W"
    assert err.descriptor == "W"


def test_errors_compare_by_value():
    assert UnsupportedVersionError(99, 1) == UnsupportedVersionError(99, 1)
    assert UnsupportedVersionError(99, 1) != UnsupportedVersionError(99, 2)
    assert InvalidTypeDescriptorError("x") != InvalidClassDataError("x")
    assert hash(InvalidConstantPoolIndexError(3)) == hash(InvalidConstantPoolIndexError(3))


@pytest.mark.parametrize(
    "cls, expected",
    [
        (InvalidClassDataError, "invalid class file: bad"),
        (InvalidTypeDescriptorError, "invalid type descriptor: bad"),
    ],
)
def test_reader_errors_share_base(cls, expected):
    err = cls("bad")
    assert isinstance(err, ClassReaderError)
    assert str(err) == expected


def test_unsupported_version_shares_base():
    err = UnsupportedVersionError(1, 2)
    assert isinstance(err, ClassReaderError)
    assert str(err) == "unsupported class file version 1.2"


def test_buffer_errors_messages():
    assert str(UnexpectedEndOfDataError()) == "unexpected end of data"
    assert str(InvalidCesu8StringError()) == "invalid cesu8 string"
    assert UnexpectedEndOfDataError.class_file_message == "unexpected end of class file"
    assert isinstance(InvalidCesu8StringError(), ReaderBufferError)
    assert UnexpectedEndOfDataError() == UnexpectedEndOfDataError()