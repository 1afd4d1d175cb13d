# stegodisk

Pure-Python building blocks for hiding data in image carriers. The package
has no runtime dependencies.

- `stegodisk.context_fitness` – picks the pixels of a grayscale bitmap whose
  least significant bit can change without standing out in their 3x3
  neighbourhood.
- `stegodisk.dct` – an integer 8x8 forward and inverse discrete cosine
  transform (the slow, accurate fixed-point variant).
- `stegodisk.quantization` – JPEG quantization tables, contributing pairs of
  quantization steps, 8x8 block layout and capacity counting.
- `stegodisk.embedding` – ranking of candidate coefficients and embedding of a
  message into a second JPEG compression.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Context fitness

```python
from stegodisk.context_fitness import ContextFitness

fitness = ContextFitness(width, height, grayscale=True)
selected = fitness.select_bytes(pixels)   # bytes at the usable positions
# ... change the LSBs of `selected` ...
image = fitness.insert_bytes(selected)    # the pixels with `selected` written back
```

For a grayscale image the centre of every whole 3x3 tile is tested with
`check_box`: the tile must stay valid whichever value the centre's LSB takes,
where each of its four 2x2 sub-boxes passes `check_subbox` (at most one pair of
its four values is equal). The chosen indices are kept in
`fitness.selected_positions`. `select_bytes` raises `ValueError` if the data is
shorter than `width * height`; `insert_bytes` raises `ValueError` if it is
called before `select_bytes` or is given fewer bytes than were selected.

When `grayscale` is false every byte is usable: `select_bytes` returns the data
as it is and `insert_bytes` returns what it is given.

## DCT

```python
from stegodisk.dct import forward_dct, inverse_dct, range_limit

coefs = forward_dct(samples)          # 64 row-major values -> 64 integers
pixels = inverse_dct(coefs, quant)    # dequantize and invert; values in 0..255
```

`forward_dct` truncates its input to integers and returns coefficients scaled
by 8 relative to a true DCT. `inverse_dct` multiplies each coefficient by the
matching entry of the 64-entry quantization table, adds 128 and clamps to
0..255 (`range_limit`). Both raise `ValueError` unless given exactly 64 values.

## Quantization

- `compute_qmatrix(quality)` – the 8x8 luminance table for a JPEG quality,
  clamped to 1..100 and scaled from the standard 50 % table.
- `contributing_pairs()` – a dict mapping `(q1, q2)` with `2 <= q1 < q2 < 121`
  to `q2 // gcd(q1, q2)` for the pairs where that ratio is even.
- `plane_to_blocks(plane, height, width)` / `blocks_to_plane(blocks)` – split a
  plane into 8x8 blocks flattened column by column, and put them back.
- `decompress_image(blocks, qmatrix)` – inverse-transform quantized blocks into
  a spatial plane.
- `count_nonzero(blocks, start, end)` – count non-zero coefficients with index
  in `start..end` inclusive.
- `compute_capacity(qm1, qm2, blocks, pairs)` – returns
  `(capacity, nonzero_count)` and logs both.
- `quantized_dct(block, qf)` and `compute_dct_blocks(image)` – DCT of 8x8
  spatial blocks, divided by a step table or left unquantized.

## Embedding

```python
from stegodisk.quantization import (
    blocks_to_plane, compute_capacity, compute_dct_blocks, compute_qmatrix,
    contributing_pairs, count_nonzero, decompress_image, plane_to_blocks,
)
from stegodisk.embedding import (
    embed_message, generate_message, select_positions, selection_scores,
)

qm1, qm2 = compute_qmatrix(85), compute_qmatrix(70)
pairs = contributing_pairs()

d1 = plane_to_blocks(coefficient_plane, height, width)   # first compression
image = decompress_image(d1, qm1)
d2raw = compute_dct_blocks(image)                          # unquantized second DCT

capacity, _ = compute_capacity(qm1, qm2, d1, pairs)
length = round(count_nonzero(d1, 1, 63) * 0.1)
message = generate_message(capacity, length)

scores = selection_scores("pqt", qm1, qm2, pairs, d1, d2raw, image, capacity)
selection = select_positions(scores, len(message))
result = embed_message(qm1, qm2, pairs, d1, selection, message, d2raw, "AC-DC")

stego_plane = blocks_to_plane(result.coefficients)
print(result.changes, result.zeros, result.nonzeros)
```

`SelectionMethod` names the ranking: `MIDPOINT` (`"midpoint"`, `"pq"`, `"PQ"`),
`TEXTURE` (`"texture"`, `"pqt"`, `"PQt"`), `INVERSE_TEXTURE` (`"-pqt"`) and
`DCT_ENERGY` (`"dct energy"`, `"pqe"`, `"PQe"`); `SelectionMethod.from_name`
resolves these names and raises `ValueError` for others. Lower scores are
embedded first; `select_positions` marks the `message_length` lowest with 1.0
using the stable sort of `sort_with_indices`.

`generate_message(capacity, length)` returns `min(capacity, length)` symbols,
all `-1`. `embed_message` returns an `EmbedResult` with the new coefficients
and the counts of changes against the cover, zeros and non-zeros; with
`nonzero_spec` `"DC-DC"` or `"DC-AC"` the DC coefficient counts as a non-zero,
otherwise it does not.

## What the package does not do

It does not read or write image files: JPEG coefficients, bitmaps and pixels
go in and come out as Python lists and bytes. It has no data encoders for
carrier bits, no virtual storage spread over many carrier files, no keys or
permutations, and no command-line program.