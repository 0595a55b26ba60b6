# classreader

A pure-Python reader for JVM `.class` files. It turns a class file into plain Python objects. These
hold the version, constant pool, access flags, fields, methods, and the exception and line number
tables. It can also decode method bytecode into a list of instructions.

It needs nothing beyond the standard library.

It accepts class files with major versions 45 to 66, which is JDK 1.1 to JDK 22. It covers the core
of the format. Generic signatures and the newer constant pool entry kinds, such as method handles
and invokedynamic entries, are not supported. A class that uses them is rejected.

## Reading a class

```python
from classreader.reader import read_buffer, read_class_file

class_file = read_class_file("Complex.class")
# or, from bytes already in memory:
# class_file = read_buffer(data)

print(class_file.name)          # e.g. "example/Complex"
print(class_file.superclass)    # e.g. "java/lang/Object", or None
print(class_file.interfaces)    # e.g. ["java/lang/Cloneable", "java/io/Serializable"]
print(class_file.version)       # e.g. JDK6  (a ClassFileVersion member)
print(class_file.flags)         # a ClassAccessFlags value
print(class_file.source_file)   # e.g. "Complex.java", or None
print(class_file.deprecated)    # True if the class has a Deprecated attribute

for field in class_file.fields:
    print(field.flags, field.name, field.type_descriptor, field.constant_value)

for method in class_file.methods:
    print(method.flags, method.name, method.type_descriptor, method.thrown_exceptions)
```

`print(class_file)` prints a readable dump of the whole class. The dump includes the constant pool
and the decoded bytecode of every method.

## Fields

Each `ClassFileField` has these members:

- `flags`: a `FieldFlags` value;
- `name`;
- `type_descriptor`: a parsed `FieldType`;
- `deprecated`;
- `constant_value`.

`constant_value` is set only for fields that carry a `ConstantValue` attribute. It is a
`FieldConstantValue` with a `kind`, one of the `ConstantKind` members INT, FLOAT, LONG, DOUBLE or
STRING, and a `value`. Float constants are kept at 32-bit precision.

## Methods and their code

```python
from classreader.descriptors import BaseType, PrimitiveType
from classreader.positions import ProgramCounter

method = class_file.methods[0]
method.is_static()
method.is_native()
method.is_void()
method.returns(PrimitiveType(BaseType.INT))   # byte, short, char and boolean count as int
method.parsed_type_descriptor                 # a MethodDescriptor

code = method.code            # None for native and abstract methods
print(code.max_stack, code.max_locals)

if code.line_number_table is not None:
    # the line of the last entry at or before the address; LookupError if there is none
    print(code.line_number_table.lookup_pc(ProgramCounter(4)))

handlers = code.exception_table.lookup(ProgramCounter(0))   # entries covering the address
```

An exception table entry covers addresses from `start_pc`, inclusive, to `end_pc`, exclusive. Its
`catch_class` is `None` for a catch-all handler.

## Bytecode

```python
from classreader.instruction import parse_instruction, parse_instructions

for address, instruction in parse_instructions(code.code):
    print(address, instruction)     # e.g. "0 Aload_0"

instruction, next_address = parse_instruction(code.code, 0)
print(instruction.opcode, instruction.operands)
```

An `Instruction` has an `Opcode` and a tuple of operands. Branch instructions carry the absolute
target address rather than the relative offset. `newarray` carries a `NewArrayType`.

`tableswitch`, `lookupswitch`, `wide`, `goto_w` and `jsr_w` are not decoded. Bytecode that holds
any of them raises `InvalidClassDataError`, and so does bytecode that is truncated or malformed.

## Type descriptors

```python
from classreader.descriptors import MethodDescriptor, parse_field_type

print(parse_field_type("[Ljava/lang/String;"))   # java/lang/String[]

descriptor = MethodDescriptor.parse("(Ljava/lang/String;I)[J")
print(descriptor)                  # (java/lang/String, Int) -> Long[]
print(descriptor.num_arguments())  # 2
```

A field type is one of three kinds:

- a `PrimitiveType` holding a `BaseType`;
- an `ObjectType` holding a class name;
- an `ArrayType` holding a component type.

A `MethodDescriptor` whose `return_type` is `None` returns void.

## Constant pool

```python
from classreader.constant_pool import ClassReference, ConstantPool, Utf8Entry

pool = ConstantPool()
pool.add(Utf8Entry("java/lang/Object"))
pool.add(ClassReference(1))
print(pool.text_of(2))    # java/lang/Object
print(pool.describe(2))   # ClassReference: 1 => (String: "java/lang/Object")
```

Indexes are 1-based, as in the class file format. Long and double entries take two slots. Looking
up the second slot, index 0, or an index past the end raises `InvalidConstantPoolIndexError`.

## Errors

`read_buffer` and `read_class_file` report bad input by raising a subclass of
`classreader.errors.ClassReaderError`:

- `InvalidClassDataError` for malformed or truncated data, a bad magic number, unknown flag bits,
  unknown constant kinds, a missing `Code` attribute and invalid constant pool indexes;
- `UnsupportedVersionError` for a class file version outside the supported range;
- `InvalidTypeDescriptorError` for a field or method descriptor that cannot be parsed.

`read_class_file` can also raise the usual `OSError` when the file cannot be opened.

```python
from classreader.errors import ClassReaderError
from classreader.reader import read_buffer

try:
    read_buffer(b"\x00\x01\x02\x03")
except ClassReaderError as error:
    print(error)   # invalid class file: invalid magic number
```

Some pieces raise their own errors when used directly:

- `classreader.buffer.Buffer` raises `UnexpectedEndOfDataError` or `InvalidCesu8StringError`;
- `ConstantPool.get` raises `InvalidConstantPoolIndexError`, which is a `LookupError`.

## What it does not do

This package is a library only. It has these limits:

- it has no command-line tool;
- it does not execute or verify bytecode;
- it does not resolve or load other classes;
- it cannot write or modify class files.