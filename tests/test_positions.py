import pytest

from classreader.positions import Attribute, LineNumber, ProgramCounter


def test_program_counters_are_ordered():
    assert ProgramCounter(0) < ProgramCounter(4)
    assert sorted([ProgramCounter(9), ProgramCounter(2)]) == [
        ProgramCounter(2),
        ProgramCounter(9),
    ]
    assert ProgramCounter(3) == ProgramCounter(3)


def test_line_numbers_are_ordered_and_hashable():
    assert LineNumber(9) < LineNumber(10)
    assert {LineNumber(5), LineNumber(5)} == {LineNumber(5)}


def test_str_is_the_value():
    assert str(ProgramCounter(42)) == str(42)
    assert str(LineNumber(28)) == str(28)


@pytest.mark.parametrize("value", [-1, 0x10000])
def test_out_of_range(value):
    with pytest.raises(ValueError):
        ProgramCounter(value)
    with pytest.raises(ValueError):
        LineNumber(value)


def test_bounds_are_accepted():
    assert ProgramCounter(0xFFFF).value == 0xFFFF
    assert LineNumber(0).value == 0


def test_attribute_str():
    attribute = Attribute("Code", b"\x00\x01\x02")
    assert str(attribute) == "Code (data = 3 bytes)"


def test_attribute_equality_and_default():
    assert Attribute("Deprecated", b"") == Attribute("Deprecated", b"")
    assert Attribute() == Attribute("", b"")
    assert Attribute("A", b"x") != Attribute("A", b"y")