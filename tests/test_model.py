import pytest

from classreader.constant_pool import Utf8Entry
from classreader.descriptors import (
    ArrayType,
    BaseType,
    MethodDescriptor,
    ObjectType,
    PrimitiveType,
    parse_field_type,
)
from classreader.flags import ClassAccessFlags, FieldFlags, MethodFlags
from classreader.model import (
    ClassFile,
    ClassFileField,
    ClassFileMethod,
    ClassFileMethodCode,
    ConstantKind,
    FieldConstantValue,
)
from classreader.positions import Attribute
from classreader.version import ClassFileVersion


def make_method(descriptor, flags=MethodFlags(0), code=None, **kwargs):
    return ClassFileMethod(
        flags=flags,
        name="m",
        type_descriptor=descriptor,
        parsed_type_descriptor=MethodDescriptor.parse(descriptor),
        code=code,
        **kwargs,
    )


def test_float_constant_is_rounded_to_single_precision():
    value = FieldConstantValue(ConstantKind.FLOAT, 20.23)
    assert value.value == pytest.approx(20.23, rel=1e-6)
    assert value.value != 20.23
    assert value == FieldConstantValue(ConstantKind.FLOAT, 20.23)


def test_double_constant_keeps_precision():
    assert FieldConstantValue(ConstantKind.DOUBLE, 20.23).value == 20.23


def test_field_equality_and_format():
    field = ClassFileField(
        flags=FieldFlags.PUBLIC | FieldFlags.STATIC | FieldFlags.FINAL,
        name="A_STRING",
        type_descriptor=ObjectType("java/lang/String"),
        constant_value=FieldConstantValue(ConstantKind.STRING, "2023"),
    )
    same = ClassFileField(
        FieldFlags.PUBLIC | FieldFlags.STATIC | FieldFlags.FINAL,
        "A_STRING",
        parse_field_type("Ljava/lang/String;"),
        FieldConstantValue(ConstantKind.STRING, "2023"),
        False,
    )
    assert field == same
    assert str(field) == (
        'PUBLIC | STATIC | FINAL A_STRING: java/lang/String constant Some(String("2023"))'
    )


def test_deprecated_field_format():
    field = ClassFileField(FieldFlags(0), "x", PrimitiveType(BaseType.INT), deprecated=True)
    assert str(field).endswith("constant None (deprecated)")


def test_static_and_native():
    method = make_method("()V", flags=MethodFlags.STATIC | MethodFlags.NATIVE)
    assert method.is_static()
    assert method.is_native()
    plain = make_method("()V", flags=MethodFlags.PUBLIC)
    assert not plain.is_static()
    assert not plain.is_native()


def test_is_void():
    assert make_method("()V").is_void()
    assert not make_method("()I").is_void()


@pytest.mark.parametrize("descriptor", ["()I", "()S", "()C", "()B", "()Z"])
def test_small_integral_types_return_int(descriptor):
    method = make_method(descriptor)
    assert method.returns(PrimitiveType(BaseType.INT))
    assert not method.returns(PrimitiveType(BaseType.LONG))


def test_returns_exact_types():
    method = make_method("()[Ljava/lang/String;")
    assert method.returns(ArrayType(ObjectType("java/lang/String")))
    assert not method.returns(ObjectType("java/lang/String"))
    assert make_method("()D").returns(PrimitiveType(BaseType.DOUBLE))
    assert not make_method("()V").returns(PrimitiveType(BaseType.INT))


def test_code_lists_instructions():
    code = ClassFileMethodCode(max_stack=1, max_locals=1, code=b"\x2a\xb1")
    lines = str(code).splitlines()
    assert lines[0].startswith("max_stack = 1, max_locals = 1,")
    assert lines[1:] == ["      0 Aload_0", "      1 Return"]


def test_code_reports_unparseable_bytecode():
    code = ClassFileMethodCode(code=b"\xff")
    assert "unparseable code: [255]" in str(code)


def test_method_format():
    method = make_method(
        "(I)V",
        flags=MethodFlags.PUBLIC,
        code=ClassFileMethodCode(code=b"\xb1"),
        deprecated=True,
        thrown_exceptions=["java/lang/IllegalStateException"],
        attributes=[Attribute("Code", b"\x00\x01")],
    )
    text = str(method)
    lines = text.splitlines()
    assert lines[0] == (
        'PUBLIC m: (Int) -> void (deprecated) throws ["java/lang/IllegalStateException"]'
    )
    assert lines[1].startswith("  code: max_stack = 0")
    assert lines[-1] == "  raw_attributes: ['Code (data = 2 bytes)']"


def test_class_file_defaults():
    class_file = ClassFile()
    assert class_file.version is ClassFileVersion.JDK8
    assert class_file.flags == ClassAccessFlags(0)
    assert class_file.superclass is None
    assert class_file.fields == [] and class_file.methods == []


def test_class_file_format():
    class_file = ClassFile(
        version=ClassFileVersion.JDK6,
        flags=ClassAccessFlags.PUBLIC | ClassAccessFlags.SUPER,
        name="rjvm/Complex",
        superclass="java/lang/Object",
        interfaces=["java/lang/Cloneable"],
        fields=[ClassFileField(FieldFlags.PRIVATE, "real", PrimitiveType(BaseType.DOUBLE))],
    )
    class_file.constants.add(Utf8Entry("hey"))
    text = str(class_file)
    assert text.startswith("Class rjvm/Complex (extends java/lang/Object) version: JDK6\n")
    assert '    1, String: "hey"\n' in text
    assert "flags: PUBLIC | SUPER, deprecated: false\n" in text
    assert 'interfaces: ["java/lang/Cloneable"]\n' in text
    assert "  - PRIVATE real: Double constant None\n" in text
    assert text.endswith("methods:\n")