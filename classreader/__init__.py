"""Reader and disassembler for JVM class files: parsing, descriptors and bytecode decoding."""

__version__ = "0.1.0"

__all__ = [
    "buffer",
    "constant_pool",
    "descriptors",
    "errors",
    "flags",
    "instruction",
    "model",
    "positions",
    "reader",
    "tables",
    "version",
]