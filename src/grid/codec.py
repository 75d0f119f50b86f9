"""Run-length codec for grid row results.

Encoded sequences are flattened (value, count) pairs:
    [0, 3, 5, 4] <-> [0, 0, 0, 5, 5, 5, 5]

Deterministic, pure functions.
"""

from collections.abc import Iterable, Sequence
from itertools import groupby

from src.grid.errors import MalformedGridError


def decode_rle(encoded: Sequence[int]) -> list[int]:
    """Expand flattened (value, count) pairs into the full result sequence.

    Zero counts contribute nothing. Nothing is returned for malformed input.

    Raises:
        MalformedGridError: If the input has odd length or a negative count.
    """
    if len(encoded) % 2:
        msg = f"Run-length encoding has odd length {len(encoded)}."
        raise MalformedGridError(msg)

    decoded: list[int] = []
    for idx in range(0, len(encoded), 2):
        value, count = encoded[idx], encoded[idx + 1]
        if count < 0:
            msg = f"Run-length encoding has negative count {count} at pair {idx // 2}."
            raise MalformedGridError(msg)
        decoded.extend([value] * count)
    return decoded


def encode_rle(values: Iterable[int]) -> list[int]:
    """Greedily encode values into minimal (value, count) runs."""
    encoded: list[int] = []
    for value, run in groupby(values):
        encoded.extend((value, sum(1 for _ in run)))
    return encoded
