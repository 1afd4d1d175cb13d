import pytest

from stegodisk.dct import forward_dct, inverse_dct, range_limit


def _smooth_block():
    return [(r * 8 + c * 5) - 60 for r in range(8) for c in range(8)]


@pytest.mark.parametrize(
    "value, expected", [(-128, 0), (0, 128), (127, 255), (-300, 0), (500, 255)]
)
def test_range_limit(value, expected):
    assert range_limit(value) == expected


def test_forward_of_zero_block_is_zero():
    assert forward_dct([0] * 64) == [0] * 64


@pytest.mark.parametrize("level", [-50, 1, 37])
def test_forward_of_constant_block_has_only_dc(level):
    out = forward_dct([level] * 64)
    assert out[0] == 64 * level
    assert out[1:] == [0] * 63


def test_forward_truncates_inputs():
    block = _smooth_block()
    fractional = [v + 0.7 if v >= 0 else v - 0.7 for v in block]
    assert forward_dct(fractional) == forward_dct(block)


def test_forward_constant_shift_changes_only_dc():
    block = _smooth_block()
    base = forward_dct(block)
    shifted = forward_dct([v + 10 for v in block])
    assert shifted[1:] == base[1:]
    assert shifted[0] > base[0]


def test_forward_rejects_wrong_length():
    with pytest.raises(ValueError):
        forward_dct([0] * 63)


def test_inverse_of_zero_coefficients_is_mid_grey():
    assert inverse_dct([0] * 64, [1] * 64) == [128] * 64


def test_inverse_dc_only_is_flat():
    coefs = [0] * 64
    coefs[0] = 80
    out = inverse_dct(coefs, [1] * 64)
    assert len(set(out)) == 1
    assert out[0] > 128


def test_inverse_clamps_to_sample_range():
    coefs = [0] * 64
    coefs[0] = 30000
    assert inverse_dct(coefs, [1] * 64) == [255] * 64
    coefs[0] = -30000
    assert inverse_dct(coefs, [1] * 64) == [0] * 64


def test_inverse_applies_quant_table():
    coefs = [0] * 64
    coefs[0], coefs[1], coefs[8], coefs[9] = 20, -3, 4, 2
    quant = [2] * 64
    doubled = [2 * c for c in coefs]
    assert inverse_dct(coefs, quant) == inverse_dct(doubled, [1] * 64)


def test_round_trip_recovers_block():
    block = _smooth_block()
    coefs = [round(v / 8) for v in forward_dct(block)]
    restored = inverse_dct(coefs, [1] * 64)
    assert all(0 <= v <= 255 for v in restored)
    assert all(abs(r - (b + 128)) <= 2 for r, b in zip(restored, block))


def test_inverse_rejects_wrong_lengths():
    with pytest.raises(ValueError):
        inverse_dct([0] * 64, [1] * 10)
    with pytest.raises(ValueError):
        inverse_dct([0] * 65, [1] * 64)