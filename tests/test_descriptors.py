import pytest

from classreader.descriptors import (
    ArrayType,
    BaseType,
    MethodDescriptor,
    ObjectType,
    PrimitiveType,
    parse_field_type,
)
from classreader.errors import InvalidTypeDescriptorError


@pytest.mark.parametrize("descriptor", ["", "W", "Ljava/lang/String", "["])
def test_cannot_parse_invalid_field_types(descriptor):
    with pytest.raises(InvalidTypeDescriptorError) as info:
        parse_field_type(descriptor)
    assert info.value.descriptor == descriptor


def test_cannot_parse_trailing_characters():
    with pytest.raises(InvalidTypeDescriptorError):
        parse_field_type("II")


@pytest.mark.parametrize(
    "descriptor, base",
    [
        ("B", BaseType.BYTE),
        ("C", BaseType.CHAR),
        ("D", BaseType.DOUBLE),
        ("F", BaseType.FLOAT),
        ("I", BaseType.INT),
        ("J", BaseType.LONG),
        ("S", BaseType.SHORT),
        ("Z", BaseType.BOOLEAN),
    ],
)
def test_can_parse_primitive_descriptors(descriptor, base):
    assert parse_field_type(descriptor) == PrimitiveType(base)


def test_can_parse_object_descriptors():
    assert parse_field_type("Lrjvm/Test;") == ObjectType("rjvm/Test")


def test_can_parse_array_descriptors():
    assert parse_field_type("[I") == ArrayType(PrimitiveType(BaseType.INT))
    assert parse_field_type("[Ljava/lang/String;") == ArrayType(
        ObjectType("java/lang/String")
    )
    assert parse_field_type("[[D") == ArrayType(
        ArrayType(PrimitiveType(BaseType.DOUBLE))
    )


def test_can_format_base_type():
    assert str(parse_field_type("J")) == "Long"


def test_can_format_object():
    assert str(parse_field_type("Ljava/lang/String;")) == "java/lang/String"


def test_can_format_array():
    assert str(parse_field_type("[I")) == "Int[]"


@pytest.mark.parametrize("descriptor", ["", "J", "(J)", "()JJ", "(W)V", "(I"])
def test_cannot_parse_invalid_method_descriptors(descriptor):
    with pytest.raises(InvalidTypeDescriptorError) as info:
        MethodDescriptor.parse(descriptor)
    assert info.value.descriptor == descriptor


def test_can_parse_primitives():
    assert MethodDescriptor.parse("(JI)D") == MethodDescriptor(
        [PrimitiveType(BaseType.LONG), PrimitiveType(BaseType.INT)],
        PrimitiveType(BaseType.DOUBLE),
    )


def test_can_parse_no_args_void_return():
    assert MethodDescriptor.parse("()V") == MethodDescriptor([], None)


def test_can_parse_arrays_objects():
    assert MethodDescriptor.parse("(Ljava/lang/String;I)[J") == MethodDescriptor(
        [ObjectType("java/lang/String"), PrimitiveType(BaseType.INT)],
        ArrayType(PrimitiveType(BaseType.LONG)),
    )


def test_can_format_void_to_void():
    assert str(MethodDescriptor.parse("()V")) == "() -> void"


def test_can_format_parameters_to_return_type():
    assert (
        str(MethodDescriptor.parse("(Ljava/lang/String;I)[J"))
        == "(java/lang/String, Int) -> Long[]"
    )


def test_can_get_num_arguments():
    assert MethodDescriptor.parse("(Ljava/lang/String;I)[J").num_arguments() == 2