"""Selection of embedding positions and message embedding for double-compressed DCT planes."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence

from .dct import DCTSIZE, DCTSIZE2
from .quantization import plane_to_blocks

_log = logging.getLogger(__name__)


class SelectionMethod(Enum):
    """Ways of ranking contributing coefficients for embedding."""

    MIDPOINT = "pq"
    TEXTURE = "pqt"
    INVERSE_TEXTURE = "-pqt"
    DCT_ENERGY = "pqe"

    @classmethod
    def from_name(cls, name: str) -> "SelectionMethod":
        """Return the method known under ``name`` or one of its aliases."""
        try:
            return _METHOD_NAMES[name]
        except KeyError:
            raise ValueError(f"unknown selection method {name!r}") from None


_METHOD_NAMES = {
    "midpoint": SelectionMethod.MIDPOINT,
    "pq": SelectionMethod.MIDPOINT,
    "PQ": SelectionMethod.MIDPOINT,
    "texture": SelectionMethod.TEXTURE,
    "pqt": SelectionMethod.TEXTURE,
    "PQt": SelectionMethod.TEXTURE,
    "-pqt": SelectionMethod.INVERSE_TEXTURE,
    "dct energy": SelectionMethod.DCT_ENERGY,
    "pqe": SelectionMethod.DCT_ENERGY,
    "PQe": SelectionMethod.DCT_ENERGY,
}


@dataclass
class EmbedResult:
    """Coefficients after embedding, with change and zero counters."""

    coefficients: list[list[list[float]]]
    changes: int
    zeros: int
    nonzeros: int


def _round(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating towards zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _mode_steps(qm1, qm2, pairs) -> list[tuple[int, int, int]]:
    """Return (q1, q2, step) for each of the 64 modes; step is 0 if not contributing."""
    steps = []
    for k in range(DCTSIZE2):
        q1 = qm1[k % DCTSIZE][k // DCTSIZE]
        q2 = qm2[k % DCTSIZE][k // DCTSIZE]
        step = pairs.get((q1, q2), 0)
        if step % 2:
            step = 0
        steps.append((q1, q2, step))
    return steps


def _is_multiple(coefficient: int, step: int) -> bool:
    """True if ``coefficient`` is a contributing multiple for an even ``step``."""
    return (int(coefficient) - step // 2) % step == 0


def _grid(blocks) -> tuple[int, int]:
    rows = len(blocks)
    return rows, (len(blocks[0]) if rows else 0)


def generate_message(capacity: int, length: int) -> list[int]:
    """Return a message of ``min(capacity, length)`` symbols, all -1."""
    return [-1] * max(0, min(capacity, length))


def sort_with_indices(values: Sequence[float]) -> tuple[list[float], list[int]]:
    """Stable ascending sort; returns the sorted values and their original indices."""
    order = sorted(range(len(values)), key=values.__getitem__)
    return [values[i] for i in order], order


def _texture_energy(block: Sequence[int]) -> float:
    energy = 0.0
    for k in range(0, DCTSIZE, 2):
        for l in range(0, DCTSIZE, 2):
            values = (
                block[k * DCTSIZE + l],
                block[k * DCTSIZE + l + 1],
                block[(k + 1) * DCTSIZE + l],
                block[(k + 1) * DCTSIZE + l + 1],
            )
            energy += max(values) - min(values)
    return energy


def _midpoint_scores(steps, d1, d2raw) -> Iterator[float]:
    rows, cols = _grid(d1)
    for k, (_, q2, step) in enumerate(steps):
        if not step:
            continue
        for i in range(rows):
            for j in range(cols):
                if _is_multiple(d1[i][j][k], step):
                    scaled = d2raw[i][j][k] / float(q2)
                    yield abs(abs(scaled - _round(scaled)) - 0.5)


def _energy_scores(steps, d1, energies, negate: bool) -> Iterator[float]:
    rows, cols = _grid(d1)
    for k, (_, _, step) in enumerate(steps):
        if not step:
            continue
        for i in range(rows):
            for j in range(cols):
                if _is_multiple(d1[i][j][k], step):
                    energy = energies[i][j]
                    score = -energy - 1 if negate else energy + 1
                    if score < 0:
                        yield score


def selection_scores(method, qm1, qm2, pairs, d1, d2raw, image, capacity) -> list[float]:
    """Score every contributing multiple of ``d1``; lower scores are embedded first.

    The result holds ``capacity`` entries; positions not reached keep 0.
    """
    if isinstance(method, str):
        method = SelectionMethod.from_name(method)
    steps = _mode_steps(qm1, qm2, pairs)
    rows, cols = _grid(d1)

    if method is SelectionMethod.MIDPOINT:
        if d2raw is None:
            raise ValueError("the midpoint method needs the raw coefficients")
        values = _midpoint_scores(steps, d1, d2raw)
    elif method is SelectionMethod.DCT_ENERGY:
        energies = [
            [float(sum(v * v for v in d1[i][j][:DCTSIZE2])) for j in range(cols)]
            for i in range(rows)
        ]
        values = _energy_scores(steps, d1, energies, negate=True)
    else:
        if image is None or not image:
            raise ValueError("texture methods need the decompressed image")
        texture = plane_to_blocks(image, len(image), len(image[0]))
        energies = [
            [_texture_energy(texture[i][j]) for j in range(cols)] for i in range(rows)
        ]
        values = _energy_scores(
            steps, d1, energies, negate=method is SelectionMethod.TEXTURE
        )

    scores = [0.0] * capacity
    for index, value in enumerate(values):
        if index >= capacity:
            raise ValueError(f"more contributing multiples than capacity {capacity}")
        scores[index] = value
    return scores


def select_positions(scores: Sequence[float], message_length: int) -> list[float]:
    """Mark with 1.0 the ``message_length`` lowest-scoring positions, others 0.0."""
    if message_length > len(scores):
        raise ValueError(
            f"message of {message_length} symbols exceeds {len(scores)} positions"
        )
    _, order = sort_with_indices(scores)
    selection = [0.0] * len(scores)
    for index in order[:message_length]:
        selection[index] = 1.0
    return selection


def _requantize(raw: float, q1: int, q2: int) -> float:
    value = float(_round(raw))
    if abs(q2 * value - q1 * _round(q2 * value / q1)) == q2 // 2:
        value += _sign(int(raw - value))
    return value


def embed_message(qm1, qm2, pairs, d1, selection, message, d2raw, nonzero_spec) -> EmbedResult:
    """Embed ``message`` into the selected contributing multiples of ``d1``.

    All other coefficients are requantized from ``d2raw`` with the second table.
    """
    steps = _mode_steps(qm1, qm2, pairs)
    rows, cols = _grid(d1)
    result = [
        [[float(v) for v in d1[i][j][:DCTSIZE2]] for j in range(cols)]
        for i in range(rows)
    ]
    count_dc = nonzero_spec in ("DC-DC", "DC-AC")
    changes = zeros = nonzeros = 0
    bit = -1
    multiple = -1

    for k, (q1, q2, step) in enumerate(steps):
        for i in range(rows):
            for j in range(cols):
                raw = d2raw[i][j][k] / q2
                if not step:
                    value = float(_round(raw))
                elif not _is_multiple(d1[i][j][k], step):
                    value = _requantize(raw, q1, q2)
                else:
                    multiple += 1
                    if multiple >= len(selection):
                        raise ValueError("selection is shorter than the contributing multiples")
                    if selection[multiple] == 1:
                        bit += 1
                        if bit >= len(message):
                            raise ValueError("message is shorter than the selection")
                        coef = int(d1[i][j][k])
                        value = float(
                            _cdiv(
                                coef * q1 + _cdiv(_sign(coef) * message[bit] * q2, 2),
                                q2,
                            )
                        )
                        cover = _round(raw)
                        if abs(q2 * cover - q1 * _cdiv(q2 * cover, q1)) == q2 // 2:
                            cover += _sign(int(raw - cover))
                        if value != cover:
                            changes += 1
                    else:
                        value = _requantize(raw, q1, q2)
                result[i][j][k] = value
                if value and (count_dc or k > 0):
                    nonzeros += 1
                else:
                    zeros += 1

    _log.info("Message embedded: changes %d, zeros %d, nonzeros %d", changes, zeros, nonzeros)
    return EmbedResult(result, changes, zeros, nonzeros)