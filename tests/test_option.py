import struct
from enum import Enum

import pytest

from enginekit.option import OptionFlag, OptionKind, sentinel_for


class Slot(Enum):
    A = 0
    B = 1
    Invalid = 0xFFFF


class NoInvalid(Enum):
    A = 0


def test_integer_sentinels_are_type_maxima():
    assert sentinel_for(OptionKind.U32) == 0xFFFFFFFF
    assert sentinel_for(OptionKind.U16) < sentinel_for(OptionKind.U32)
    assert sentinel_for(OptionKind.U8) < sentinel_for(OptionKind.U16)
    assert sentinel_for(OptionKind.USIZE) == 2**64 - 1


def test_float_sentinels():
    assert sentinel_for(OptionKind.F64) == float(0x7FFDB6DB6DB6DB6D)
    f32 = sentinel_for(OptionKind.F32)
    assert struct.unpack("<f", struct.pack("<f", f32))[0] == f32
    assert abs(f32 - 0x7FEDB6DB) < 1024


def test_enum_sentinel_is_invalid_member():
    assert sentinel_for(Slot) is Slot.Invalid


def test_enum_without_invalid_is_rejected():
    with pytest.raises(TypeError):
        sentinel_for(NoInvalid)
    with pytest.raises(TypeError):
        sentinel_for(int)


def test_default_is_empty():
    opt = OptionFlag(OptionKind.U32)
    assert not opt
    assert opt.has_value() is False
    with pytest.raises(ValueError):
        opt.value()


def test_value_or_returns_default_when_empty():
    opt = OptionFlag(OptionKind.U32)
    assert opt.value_or(7) == 7
    opt.set(3)
    assert opt.value_or(7) == 3


def test_set_and_reset_round_trip():
    opt = OptionFlag(OptionKind.U16, 42)
    assert opt.has_value()
    assert opt.value() == 42
    opt.reset()
    assert not opt.has_value()
    opt.set(9)
    assert opt.value() == 9
    opt.set(None)
    assert not opt


def test_storing_sentinel_means_empty():
    opt = OptionFlag(OptionKind.U8, sentinel_for(OptionKind.U8))
    assert not opt.has_value()


def test_integer_range_checked():
    with pytest.raises(ValueError):
        OptionFlag(OptionKind.U8, 256)
    with pytest.raises(ValueError):
        OptionFlag(OptionKind.U32, -1)
    with pytest.raises(TypeError):
        OptionFlag(OptionKind.U32, 1.5)


def test_f32_values_are_rounded_to_single_precision():
    opt = OptionFlag(OptionKind.F32, 0.1)
    assert opt.value() == struct.unpack("<f", struct.pack("<f", 0.1))[0]
    assert opt.value() != 0.1


def test_f64_values_keep_precision():
    opt = OptionFlag(OptionKind.F64, 0.1)
    assert opt.value() == 0.1


def test_enum_kind():
    opt = OptionFlag(Slot, Slot.B)
    assert opt.value() is Slot.B
    opt.set(Slot.Invalid)
    assert not opt
    with pytest.raises(TypeError):
        opt.set(1)


def test_comparisons_false_when_empty():
    opt = OptionFlag(OptionKind.U32)
    assert not (opt == 0)
    assert not (opt < 10)
    assert not (opt <= 10)
    assert not (opt > 0)
    assert not (opt >= 0)
    assert opt != 0


def test_comparisons_with_value():
    opt = OptionFlag(OptionKind.U32, 5)
    assert opt == 5
    assert opt < 6
    assert opt <= 5
    assert opt > 4
    assert opt >= 5
    assert not (opt != 5)


def test_equality_between_options():
    assert OptionFlag(OptionKind.U32, 5) == OptionFlag(OptionKind.U32, 5)
    assert OptionFlag(OptionKind.U32) == OptionFlag(OptionKind.U32)
    assert not (OptionFlag(OptionKind.U32, 5) == OptionFlag(OptionKind.U32))


def test_swap_exchanges_values():
    a = OptionFlag(OptionKind.U32, 1)
    b = OptionFlag(OptionKind.U32, 2)
    a.swap(b)
    assert a.value() == 2
    assert b.value() == 1


def test_swap_with_empty_moves_emptiness():
    a = OptionFlag(OptionKind.U32, 1)
    b = OptionFlag(OptionKind.U32)
    a.swap(b)
    assert not a
    assert b.value() == 1


def test_swap_rejects_other_kind():
    with pytest.raises(ValueError):
        OptionFlag(OptionKind.U32, 1).swap(OptionFlag(OptionKind.U16, 1))