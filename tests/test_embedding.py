import pytest

from stegodisk.embedding import (
    EmbedResult,
    SelectionMethod,
    embed_message,
    generate_message,
    select_positions,
    selection_scores,
    sort_with_indices,
)
from stegodisk.quantization import (
    compute_capacity,
    compute_qmatrix,
    contributing_pairs,
)

PAIRS = contributing_pairs()


def _tables():
    qm1 = [[1] * 8 for _ in range(8)]
    qm2 = [[1] * 8 for _ in range(8)]
    qm1[0][0] = 5
    qm2[0][0] = 10
    return qm1, qm2


def _blocks(*dcs):
    return [[[dc] + [0] * 63 for dc in dcs]]


def _raw(*blocks):
    return [[list(block) for block in blocks]]


def _raw_block(dc=0.0, **modes):
    block = [0.0] * 64
    block[0] = dc
    for key, value in modes.items():
        block[int(key[1:])] = value
    return block


def test_generate_message_takes_shorter_length():
    assert generate_message(5, 3) == [-1, -1, -1]
    assert generate_message(2, 10) == [-1, -1]


def test_sort_with_indices_is_stable():
    values, order = sort_with_indices([3.0, 1.0, 2.0, 1.0])
    assert values == [1.0, 1.0, 2.0, 3.0]
    assert order == [1, 3, 2, 0]


def test_select_positions_marks_lowest():
    selection = select_positions([0.3, -1.0, 0.1], 2)
    assert selection == [0.0, 1.0, 1.0]
    assert sum(selection) == 2


def test_select_positions_rejects_long_message():
    with pytest.raises(ValueError):
        select_positions([0.0], 2)


def test_method_aliases():
    assert SelectionMethod.from_name("PQt") is SelectionMethod.TEXTURE
    assert SelectionMethod.from_name("dct energy") is SelectionMethod.DCT_ENERGY
    with pytest.raises(ValueError):
        SelectionMethod.from_name("unknown")


def test_midpoint_scores():
    qm1, qm2 = _tables()
    d1 = _blocks(3, 4)
    capacity, _ = compute_capacity(qm1, qm2, d1, PAIRS)
    d2raw = _raw(_raw_block(23.0), _raw_block(0.0))
    scores = selection_scores("pq", qm1, qm2, PAIRS, d1, d2raw, None, capacity)
    assert len(scores) == capacity == 1
    assert 0.0 <= scores[0] <= 0.5
    assert scores[0] == pytest.approx(0.2)


def test_capacity_too_small_raises():
    qm1, qm2 = _tables()
    d1 = _blocks(3, 5)
    d2raw = _raw(_raw_block(), _raw_block())
    with pytest.raises(ValueError):
        selection_scores("pq", qm1, qm2, PAIRS, d1, d2raw, None, 1)


def _image():
    image = []
    for row in range(8):
        left = [100] * 8
        right = [(row + col) % 2 * 50 for col in range(8)]
        image.append(left + right)
    return image


def test_texture_scores_prefer_textured_blocks():
    qm1, qm2 = _tables()
    d1 = _blocks(3, 5)
    scores = selection_scores(
        SelectionMethod.TEXTURE, qm1, qm2, PAIRS, d1, None, _image(), 2
    )
    assert scores[0] == -1.0
    assert scores[1] < scores[0]
    assert selection_scores("texture", qm1, qm2, PAIRS, d1, None, _image(), 2) == scores


def test_inverse_texture_leaves_zero_scores():
    qm1, qm2 = _tables()
    d1 = _blocks(3, 5)
    scores = selection_scores("-pqt", qm1, qm2, PAIRS, d1, None, _image(), 2)
    assert scores == [0.0, 0.0]


def test_texture_needs_image():
    qm1, qm2 = _tables()
    with pytest.raises(ValueError):
        selection_scores("pqt", qm1, qm2, PAIRS, _blocks(3), None, None, 1)


def test_dct_energy_orders_by_energy():
    qm1, qm2 = _tables()
    d1 = _blocks(3, 7)
    scores = selection_scores("pqe", qm1, qm2, PAIRS, d1, None, None, 2)
    assert scores[1] < scores[0] < 0


def test_embed_without_selection_requantizes():
    qm1, qm2 = _tables()
    d1 = _blocks(3)
    d2raw = _raw(_raw_block(23.0, m1=2.6, m2=-1.2))
    result = embed_message(qm1, qm2, PAIRS, d1, [0.0], [], d2raw, "AC-DC")
    assert isinstance(result, EmbedResult)
    assert result.changes == 0
    assert result.coefficients[0][0][1] == 3.0
    assert result.coefficients[0][0][2] == -1.0
    assert result.zeros + result.nonzeros == 64


def test_embedded_symbol_changes_coefficient():
    qm1, qm2 = _tables()
    d1 = _blocks(3)
    d2raw = _raw(_raw_block(23.0))
    minus = embed_message(qm1, qm2, PAIRS, d1, [1.0], [-1], d2raw, "AC-DC")
    plus = embed_message(qm1, qm2, PAIRS, d1, [1.0], [1], d2raw, "AC-DC")
    assert minus.coefficients[0][0][0] != plus.coefficients[0][0][0]
    assert minus.coefficients[0][0][0] == int(minus.coefficients[0][0][0])


def test_nonzero_spec_controls_dc_counting():
    qm1, qm2 = _tables()
    d1 = _blocks(4)
    d2raw = _raw(_raw_block(50.0))
    with_dc = embed_message(qm1, qm2, PAIRS, d1, [], [], d2raw, "DC-DC")
    without_dc = embed_message(qm1, qm2, PAIRS, d1, [], [], d2raw, "AC-DC")
    assert with_dc.nonzeros == 1
    assert without_dc.nonzeros == 0
    assert without_dc.zeros == 64


def test_short_selection_raises():
    qm1, qm2 = _tables()
    with pytest.raises(ValueError):
        embed_message(qm1, qm2, PAIRS, _blocks(3), [], [], _raw(_raw_block()), "AC-DC")


def test_pipeline_changes_bounded_by_message():
    qm1 = compute_qmatrix(85)
    qm2 = compute_qmatrix(70)
    d1 = [[[(b * 7 + k * 3) % 11 - 5 for k in range(64)] for b in range(3)]]
    d2raw = [[[float((b * 13 + k * 5) % 40 - 20) for k in range(64)] for b in range(3)]]
    capacity, _ = compute_capacity(qm1, qm2, d1, PAIRS)
    message = generate_message(capacity, capacity // 2 + 1)
    scores = selection_scores("pq", qm1, qm2, PAIRS, d1, d2raw, None, capacity)
    selection = select_positions(scores, len(message))
    result = embed_message(qm1, qm2, PAIRS, d1, selection, message, d2raw, "AC-DC")
    assert result.changes <= len(message)
    assert result.zeros + result.nonzeros == 3 * 64
    assert len(result.coefficients[0]) == 3