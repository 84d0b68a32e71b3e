import struct

import numpy as np
import pytest

from helpers import hxa_bytes as hb
from libhxa import UnexpectedEndOfData, parse_hxa
from libhxa.reader import _Bin, load_array, read_name

CASES = [
    (np.int32, "<i", [0, 1, -1, 2**31 - 1, -(2**31)]),
    (np.float32, "<f", [0.0, -1.5, 3.25, float("inf"), 1e-30]),
    (np.float64, "<d", [0.0, -1.5, 1e300, float("-inf"), 2.0**-1074]),
    (np.int64, "<q", [0, -1, 2**63 - 1, -(2**63)]),
    (np.uint32, "<I", [0, 1, 2**32 - 1]),
]


def _packed(fmt, values, pad=0):
    return b"\xaa" * pad + b"".join(struct.pack(fmt, v) for v in values)


@pytest.mark.parametrize("dtype, fmt, values", CASES)
@pytest.mark.parametrize("pad", [0, 1, 3])
def test_little_and_big_paths_agree(dtype, fmt, values, pad):
    data = _packed(fmt, values, pad)
    results = []
    for byteorder in ("little", "big"):
        b = _Bin(memoryview(data))
        b.read(pad)
        arr = load_array(b, dtype, len(values), byteorder=byteorder)
        assert b.remaining() == 0
        assert arr.dtype == np.dtype(dtype)
        assert arr.dtype.isnative
        assert arr.flags.aligned
        results.append(arr)
    np.testing.assert_array_equal(results[0], results[1])
    np.testing.assert_array_equal(results[0], np.array(values, dtype=dtype))


def test_nan_survives_both_paths():
    data = struct.pack("<2f", float("nan"), 1.0)
    little = load_array(_Bin(memoryview(data)), np.float32, 2, byteorder="little")
    big = load_array(_Bin(memoryview(data)), np.float32, 2, byteorder="big")
    assert np.isnan(little[0]) and np.isnan(big[0])
    assert little[1] == big[1] == 1.0


def test_zero_count():
    b = _Bin(memoryview(b""))
    for byteorder in ("little", "big"):
        arr = load_array(b, np.float64, 0, byteorder=byteorder)
        assert arr.size == 0


def test_short_buffer():
    b = _Bin(memoryview(struct.pack("<i", 5)))
    with pytest.raises(UnexpectedEndOfData) as exc:
        load_array(b, np.int32, 2)
    assert exc.value.needed == 8
    assert exc.value.available == 4


def test_document_decodes_identically_on_both_paths():
    data = hb.document(
        3,
        hb.quad_and_triangle()[12:],
        hb.meta_node_record([hb.meta_double("d", [1.5, -2.5]), hb.meta_int64("i", [-7])]),
    )
    little = parse_hxa(data, byteorder="little")
    big = parse_hxa(data, byteorder="big")

    g_l, g_b = little.nodes[0].geometry, big.nodes[0].geometry
    for st_l, st_b in zip(
        (g_l.vertex_stack, g_l.corner_stack, g_l.edge_stack, g_l.face_stack),
        (g_b.vertex_stack, g_b.corner_stack, g_b.edge_stack, g_b.face_stack),
    ):
        for a, b in zip(st_l, st_b):
            assert a.data.dtype == b.data.dtype
            np.testing.assert_array_equal(a.data, b.data)

    for a, b in zip(little.nodes[1].metadata, big.nodes[1].metadata):
        np.testing.assert_array_equal(a.value, b.value)


def test_scalar_reads_are_little_endian():
    data = (
        b"\x80"
        + struct.pack("<hHiIqQfd", -2, 0xBEEF, -3, 0xDEADBEEF, -4, 2**64 - 1, 0.5, -0.25)
    )
    b = _Bin(memoryview(data))
    assert b.s8() == -128
    assert b.s16() == -2
    assert b.u16() == 0xBEEF
    assert b.s32() == -3
    assert b.u32() == 0xDEADBEEF
    assert b.s64() == -4
    assert b.u64() == 2**64 - 1
    assert b.f32() == 0.5
    assert b.f64() == -0.25
    assert b.remaining() == 0


def test_read_name():
    b = _Bin(memoryview(hb.name("uv") + hb.name("")))
    assert read_name(b) == "uv"
    assert read_name(b) == ""
    assert b.remaining() == 0


@pytest.mark.parametrize(
    "dtype, fmt, bits",
    [
        (np.float32, "<I", [0x7F800001, 0xFFBFFFFF, 0x80000000]),
        (np.float64, "<Q", [0x7FF0000000000001, 0xFFF7FFFFFFFFFFFF]),
    ],
)
def test_float_bits_are_preserved_on_both_paths(dtype, fmt, bits):
    data = _packed(fmt, bits)
    little = load_array(_Bin(memoryview(data)), dtype, len(bits), byteorder="little")
    big = load_array(_Bin(memoryview(data)), dtype, len(bits), byteorder="big")
    assert little.dtype == big.dtype == np.dtype(dtype)
    assert little.tobytes() == big.tobytes()
    unsigned = np.uint32 if dtype is np.float32 else np.uint64
    assert little.tobytes() == np.array(bits, dtype=unsigned).tobytes()
