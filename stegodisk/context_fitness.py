"""Selection of grayscale pixels whose neighbourhood hides a changed LSB."""

from __future__ import annotations

from itertools import combinations
from typing import Sequence


def check_subbox(subbox: Sequence[int]) -> bool:
    """Return True if at most one pair of the four values is equal."""
    equal_pairs = sum(1 for a, b in combinations(subbox[:4], 2) if a == b)
    return equal_pairs <= 1


def _subboxes(box: Sequence[int], centre: int):
    return (
        (box[0], box[1], box[3], centre),
        (box[1], box[2], centre, box[5]),
        (box[3], centre, box[6], box[7]),
        (centre, box[5], box[7], box[8]),
    )


def check_box(box: Sequence[int]) -> bool:
    """Return True if a 3x3 box stays valid with either value of the centre LSB."""
    centre = box[4] & 0xFE
    return all(
        all(check_subbox(sub) for sub in _subboxes(box, value))
        for value in (centre, centre | 0x01)
    )


class ContextFitness:
    """Picks the centres of 3x3 pixel tiles that are safe to modify."""

    def __init__(self, width: int, height: int, grayscale: bool) -> None:
        self.width = width
        self.height = height
        self.grayscale = grayscale
        self.selected_positions: tuple[int, ...] = ()
        self._source: bytes | None = None

    def select_bytes(self, data) -> bytes:
        """Return the bytes at the selected positions of ``data``."""
        source = bytes(data)
        if not self.grayscale:
            self._source = source
            return source
        if len(source) < self.width * self.height:
            raise ValueError(
                f"image holds {len(source)} bytes, "
                f"{self.width * self.height} are needed"
            )
        width = self.width
        positions = []
        for row in range(1, 3 * (self.height // 3), 3):
            for col in range(1, 3 * (width // 3), 3):
                index = row * width + col
                box = [
                    source[index + dy * width + dx]
                    for dy in (-1, 0, 1)
                    for dx in (-1, 0, 1)
                ]
                if check_box(box):
                    positions.append(index)
        self.selected_positions = tuple(positions)
        self._source = source
        return bytes(source[i] for i in positions)

    def insert_bytes(self, data) -> bytes:
        """Return the last selected image with ``data`` written back at the selected positions."""
        payload = bytes(data)
        if not self.grayscale:
            return payload
        if self._source is None:
            raise ValueError("select_bytes must be called before insert_bytes")
        if len(payload) < len(self.selected_positions):
            raise ValueError(
                f"{len(payload)} bytes given, "
                f"{len(self.selected_positions)} are needed"
            )
        result = bytearray(self._source)
        for position, value in zip(self.selected_positions, payload):
            result[position] = value
        return bytes(result)