from dataclasses import dataclass
from typing import Sequence

from xor_sleuth.models.byte_sequence import ByteSequence

# Relative frequencies of a-z followed by space in English text.
ENGLISH_CHAR_FREQUENCIES = (
    0.0653, 0.0126, 0.0223, 0.0328, 0.1027, 0.0198, 0.0162, 0.0498, 0.0567, 0.0010, 0.0056, 0.0332, 0.0203, 0.0517,
    0.0616, 0.0150, 0.0008, 0.0499, 0.0532, 0.0752, 0.0228, 0.0080, 0.0170, 0.0014, 0.0143, 0.0005, 0.1823,
)

SPACE_INDEX = 26


def symbol_index(byte_value: int) -> int | None:
    """ Map a byte to its frequency table slot, folding case. None for anything else. """
    if 65 <= byte_value <= 90:
        return byte_value - 65
    if 97 <= byte_value <= 122:
        return byte_value - 97
    if byte_value == 32:
        return SPACE_INDEX
    return None


@dataclass(frozen=True, slots=True)
class Score:
    """Distance from English (lower is better) and share of letters and spaces."""

    distance: float
    letter_ratio: float


class FrequencyScorer:

    def __init__(self, frequencies: Sequence[float] = ENGLISH_CHAR_FREQUENCIES):
        if len(frequencies) != 27:
            raise ValueError(f"Frequency table must have 27 entries (a-z and space), got {len(frequencies)}")
        self.__frequencies = tuple(frequencies)

    @property
    def frequencies(self) -> tuple[float, ...]:
        return self.__frequencies

    def score(self, seq: ByteSequence) -> Score:
        """
        Sum of squared deviations between observed byte counts and the counts
        expected of English text of the same length. Bytes that are neither
        letters nor spaces count against the candidate by their raw occurrences.
        """
        n = len(seq)
        if n == 0:
            return Score(0.0, 0.0)

        counts = [0] * 256
        for b in seq.bytes:
            counts[b] += 1

        distance = 0.0
        letters = 0
        for byte_value in range(256):
            diff = float(counts[byte_value])
            j = symbol_index(byte_value)
            if j is not None:
                letters += counts[byte_value]
                diff -= self.__frequencies[j] * n
            distance += diff * diff

        return Score(distance, letters / n)
