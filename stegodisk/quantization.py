"""Quantization tables, block layout and capacity helpers for 8x8 DCT planes."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .dct import DCTSIZE, DCTSIZE2, forward_dct, inverse_dct

_log = logging.getLogger(__name__)

MAX_QUANT_STEP = 121

# Default luminance quantization table for 50 % quality.
Q50 = (
    (16, 11, 10, 16, 24, 40, 51, 61),
    (12, 12, 14, 19, 26, 58, 60, 55),
    (14, 13, 16, 24, 40, 57, 69, 56),
    (14, 17, 22, 29, 51, 87, 80, 62),
    (18, 22, 37, 56, 68, 109, 103, 77),
    (24, 35, 55, 64, 81, 104, 113, 92),
    (49, 64, 78, 87, 103, 121, 120, 101),
    (72, 92, 95, 98, 112, 100, 103, 99),
)


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def compute_qmatrix(quality: int) -> list[list[int]]:
    """Return the 8x8 quantization table for a JPEG quality, clamped to 1..100."""
    quality = min(100, max(1, quality))
    if quality >= 50:
        factor = 2 * (1 - quality / 100.0)
        return [[max(1, _round_half_away(q * factor)) for q in row] for row in Q50]
    return [[min(255, _round_half_away(q * 50.0 / quality)) for q in row] for row in Q50]


def contributing_pairs() -> dict[tuple[int, int], int]:
    """Map each contributing pair of quantization steps (q1, q2) to its even step.

    A pair q1 < q2 below the maximal step contributes when q2 / gcd(q1, q2)
    is even; that ratio is the value stored for the pair.
    """
    pairs: dict[tuple[int, int], int] = {}
    for q1 in range(2, MAX_QUANT_STEP):
        for q2 in range(q1 + 1, MAX_QUANT_STEP):
            ratio = q2 // math.gcd(q1, q2)
            if ratio % 2 == 0:
                pairs[(q1, q2)] = ratio
    return pairs


def plane_to_blocks(
    plane: Sequence[Sequence[float]], height: int, width: int
) -> list[list[list[int]]]:
    """Split a plane into 8x8 blocks, each flattened column by column.

    Values are truncated to integers; rows and columns that do not fill
    a whole block are dropped.
    """
    block_rows = height // DCTSIZE
    block_cols = width // DCTSIZE
    return [
        [
            [
                int(plane[i * DCTSIZE + m][j * DCTSIZE + n])
                for n in range(DCTSIZE)
                for m in range(DCTSIZE)
            ]
            for j in range(block_cols)
        ]
        for i in range(block_rows)
    ]


def blocks_to_plane(blocks: Sequence[Sequence[Sequence[float]]]) -> list[list[float]]:
    """Reassemble column-major flattened 8x8 blocks into a plane."""
    block_rows = len(blocks)
    block_cols = len(blocks[0]) if block_rows else 0
    plane = [[0.0] * (block_cols * DCTSIZE) for _ in range(block_rows * DCTSIZE)]
    for i, block_row in enumerate(blocks):
        for j, block in enumerate(block_row[:block_cols]):
            for n in range(DCTSIZE):
                for m in range(DCTSIZE):
                    plane[i * DCTSIZE + m][j * DCTSIZE + n] = block[n * DCTSIZE + m]
    return plane


def _flatten_table(table: Sequence[Sequence[float]], what: str) -> list[float]:
    flat = [value for row in table for value in row]
    if len(table) != DCTSIZE or len(flat) != DCTSIZE2:
        raise ValueError(f"{what} must be an 8x8 table")
    return flat


def decompress_image(
    blocks: Sequence[Sequence[Sequence[int]]], qmatrix: Sequence[Sequence[int]]
) -> list[list[float]]:
    """Dequantize and inverse-transform quantized DCT blocks into a spatial plane."""
    quant = _flatten_table(qmatrix, "qmatrix")
    block_rows = len(blocks)
    block_cols = len(blocks[0]) if block_rows else 0
    plane = [[0.0] * (block_cols * DCTSIZE) for _ in range(block_rows * DCTSIZE)]
    for i, block_row in enumerate(blocks):
        for j, block in enumerate(block_row[:block_cols]):
            if len(block) != DCTSIZE2:
                raise ValueError(f"block ({i}, {j}) must hold {DCTSIZE2} coefficients")
            coefs = [block[c * DCTSIZE + r] for r in range(DCTSIZE) for c in range(DCTSIZE)]
            samples = inverse_dct(coefs, quant)
            for r in range(DCTSIZE):
                plane[i * DCTSIZE + r][j * DCTSIZE : (j + 1) * DCTSIZE] = [
                    float(value) for value in samples[r * DCTSIZE : (r + 1) * DCTSIZE]
                ]
    return plane


def count_nonzero(blocks: Sequence[Sequence[Sequence[int]]], start: int, end: int) -> int:
    """Count non-zero coefficients with index in ``start..end`` (inclusive) of every block."""
    if not 0 <= start <= end < DCTSIZE2:
        raise ValueError(f"invalid coefficient range {start}..{end}")
    return sum(
        1
        for block_row in blocks
        for block in block_row
        for value in block[start : end + 1]
        if value != 0
    )


def compute_capacity(
    qm1: Sequence[Sequence[int]],
    qm2: Sequence[Sequence[int]],
    blocks: Sequence[Sequence[Sequence[int]]],
    pairs: dict[tuple[int, int], int],
) -> tuple[int, int]:
    """Return (embedding capacity, number of non-zero coefficients).

    A coefficient adds to the capacity when its mode uses a contributing
    pair of steps and it is a non-zero contributing multiple of that pair.
    """
    capacity = 0
    for i in range(DCTSIZE):
        for j in range(DCTSIZE):
            step = pairs.get((qm1[j][i], qm2[j][i]), 0)
            if step == 0 or step % 2:
                continue
            start = step // 2
            mode = i * DCTSIZE + j
            capacity += sum(
                1
                for block_row in blocks
                for block in block_row
                if block[mode] != 0 and abs(block[mode] - start) % step == 0
            )
    nonzero = sum(
        1 for block_row in blocks for block in block_row for value in block if value != 0
    )
    _log.info("Capacity: %d", capacity)
    _log.info("Nonzero coefs of image: %d", nonzero)
    return capacity, nonzero


def quantized_dct(
    block: Sequence[Sequence[float]], qf: Sequence[Sequence[float]]
) -> list[list[float]]:
    """Transform an 8x8 spatial block and divide each coefficient by its step."""
    samples = _flatten_table(block, "block")
    steps = _flatten_table(qf, "qf")
    out = forward_dct([value - 128 for value in samples])
    return [
        [out[r * DCTSIZE + c] / (steps[r * DCTSIZE + c] * 8) for c in range(DCTSIZE)]
        for r in range(DCTSIZE)
    ]


def compute_dct_blocks(image: Sequence[Sequence[float]]) -> list[list[list[float]]]:
    """Return unquantized DCT coefficients of every whole 8x8 block, column-major."""
    if not image or not image[0]:
        raise ValueError("image must not be empty")
    block_rows = len(image) // DCTSIZE
    block_cols = len(image[0]) // DCTSIZE
    ones = [[1.0] * DCTSIZE for _ in range(DCTSIZE)]
    result: list[list[list[float]]] = []
    for i in range(block_rows):
        row_blocks = []
        for j in range(block_cols):
            block = [
                [float(v) for v in row[j * DCTSIZE : (j + 1) * DCTSIZE]]
                for row in image[i * DCTSIZE : (i + 1) * DCTSIZE]
            ]
            coefs = quantized_dct(block, ones)
            row_blocks.append(
                [coefs[n][m] for m in range(DCTSIZE) for n in range(DCTSIZE)]
            )
        result.append(row_blocks)
    return result