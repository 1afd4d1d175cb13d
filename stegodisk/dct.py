"""Integer 8x8 forward and inverse discrete cosine transforms (slow, accurate variant)."""

from __future__ import annotations

from typing import Sequence

DCTSIZE = 8
DCTSIZE2 = DCTSIZE * DCTSIZE
CONST_BITS = 13
PASS1_BITS = 2

FIX_0_298631336 = 2446
FIX_0_390180644 = 3196
FIX_0_541196100 = 4433
FIX_0_765366865 = 6270
FIX_0_899976223 = 7373
FIX_1_175875602 = 9633
FIX_1_501321110 = 12299
FIX_1_847759065 = 15137
FIX_1_961570560 = 16069
FIX_2_053119869 = 16819
FIX_2_562915447 = 20995
FIX_3_072711026 = 25172


def _descale(x: int, n: int) -> int:
    """Shift right by ``n`` bits, rounding to nearest."""
    return (x + (1 << (n - 1))) >> n


def _to_short(value: float) -> int:
    """Truncate towards zero and wrap into a signed 16-bit integer."""
    return ((int(value) + 0x8000) & 0xFFFF) - 0x8000


def range_limit(x: int) -> int:
    """Shift a centred sample back to 0..255, clamping at the ends."""
    return min(255, max(0, x + 128))


def _check_length(values: Sequence[float], what: str) -> None:
    if len(values) != DCTSIZE2:
        raise ValueError(f"{what} must hold {DCTSIZE2} values, got {len(values)}")


def _odd_part(t0: int, t1: int, t2: int, t3: int) -> tuple[int, int, int, int]:
    """Shared odd-part rotation; returns the four combined odd terms."""
    z1 = t0 + t3
    z2 = t1 + t2
    z3 = t0 + t2
    z4 = t1 + t3
    z5 = (z3 + z4) * FIX_1_175875602

    t0 *= FIX_0_298631336
    t1 *= FIX_2_053119869
    t2 *= FIX_3_072711026
    t3 *= FIX_1_501321110
    z1 *= -FIX_0_899976223
    z2 *= -FIX_2_562915447
    z3 = z3 * -FIX_1_961570560 + z5
    z4 = z4 * -FIX_0_390180644 + z5

    return t0 + z1 + z3, t1 + z2 + z4, t2 + z2 + z3, t3 + z1 + z4


def _fdct_1d(v: Sequence[int]) -> list[int]:
    """One-dimensional forward pass.

    Outputs 0 and 4 are unscaled; the others are scaled by 2**CONST_BITS.
    """
    tmp0, tmp7 = v[0] + v[7], v[0] - v[7]
    tmp1, tmp6 = v[1] + v[6], v[1] - v[6]
    tmp2, tmp5 = v[2] + v[5], v[2] - v[5]
    tmp3, tmp4 = v[3] + v[4], v[3] - v[4]

    tmp10, tmp13 = tmp0 + tmp3, tmp0 - tmp3
    tmp11, tmp12 = tmp1 + tmp2, tmp1 - tmp2

    z1 = (tmp12 + tmp13) * FIX_0_541196100
    out2 = z1 + tmp13 * FIX_0_765366865
    out6 = z1 + tmp12 * -FIX_1_847759065

    out7, out5, out3, out1 = _odd_part(tmp4, tmp5, tmp6, tmp7)

    return [tmp10 + tmp11, out1, out2, out3, tmp10 - tmp11, out5, out6, out7]


def forward_dct(block: Sequence[float]) -> list[int]:
    """Transform 64 row-major samples into 64 row-major DCT coefficients.

    Samples are truncated to integers first. The results are scaled up by
    a factor of 8 relative to a true DCT.
    """
    _check_length(block, "block")
    data = [int(value) for value in block]

    rows: list[list[int]] = []
    for r in range(DCTSIZE):
        raw = _fdct_1d(data[r * DCTSIZE : (r + 1) * DCTSIZE])
        rows.append(
            [
                value << PASS1_BITS
                if index in (0, 4)
                else _descale(value, CONST_BITS - PASS1_BITS)
                for index, value in enumerate(raw)
            ]
        )

    out = [0] * DCTSIZE2
    for c in range(DCTSIZE):
        raw = _fdct_1d([rows[r][c] for r in range(DCTSIZE)])
        for r, value in enumerate(raw):
            shift = PASS1_BITS if r in (0, 4) else CONST_BITS + PASS1_BITS
            out[r * DCTSIZE + c] = _descale(value, shift)
    return out


def _idct_1d(d: Sequence[int]) -> list[int]:
    """One-dimensional inverse pass; results are scaled by 2**CONST_BITS."""
    z2, z3 = d[2], d[6]
    z1 = (z2 + z3) * FIX_0_541196100
    tmp2 = z1 + z3 * -FIX_1_847759065
    tmp3 = z1 + z2 * FIX_0_765366865

    tmp0 = (d[0] + d[4]) << CONST_BITS
    tmp1 = (d[0] - d[4]) << CONST_BITS

    tmp10, tmp13 = tmp0 + tmp3, tmp0 - tmp3
    tmp11, tmp12 = tmp1 + tmp2, tmp1 - tmp2

    o0, o1, o2, o3 = _odd_part(d[7], d[5], d[3], d[1])

    return [
        tmp10 + o3,
        tmp11 + o2,
        tmp12 + o1,
        tmp13 + o0,
        tmp13 - o0,
        tmp12 - o1,
        tmp11 - o2,
        tmp10 - o3,
    ]


def inverse_dct(
    coefficients: Sequence[float], quant_table: Sequence[float]
) -> list[int]:
    """Dequantize 64 row-major coefficients and return 64 samples in 0..255."""
    _check_length(coefficients, "coefficients")
    _check_length(quant_table, "quant_table")
    coefs = [_to_short(value) for value in coefficients]
    quant = [int(value) for value in quant_table]

    workspace = [0] * DCTSIZE2
    for c in range(DCTSIZE):
        column = [coefs[r * DCTSIZE + c] * quant[r * DCTSIZE + c] for r in range(DCTSIZE)]
        if not any(column[1:]):
            values = [column[0] << PASS1_BITS] * DCTSIZE
        else:
            values = [
                _descale(value, CONST_BITS - PASS1_BITS) for value in _idct_1d(column)
            ]
        for r, value in enumerate(values):
            workspace[r * DCTSIZE + c] = value

    out: list[int] = []
    for r in range(DCTSIZE):
        row = workspace[r * DCTSIZE : (r + 1) * DCTSIZE]
        if not any(row[1:]):
            out.extend([range_limit(_descale(row[0], PASS1_BITS + 3))] * DCTSIZE)
        else:
            out.extend(
                range_limit(_descale(value, CONST_BITS + PASS1_BITS + 3))
                for value in _idct_1d(row)
            )
    return out