"""
Single-byte XOR key recovery.

Events are logged through structlog. Callers that have not configured
structlog (see xor_sleuth.log.configure_logging) get its default stdout output.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import structlog

from xor_sleuth.models.byte_sequence import ByteSequence
from xor_sleuth.scoring import FrequencyScorer, Score

log = structlog.get_logger()

DEFAULT_MIN_LETTER_RATIO = 0.7
KEY_SPACE = range(256)


class NoValidCandidateError(LookupError):

    def __init__(self, min_letter_ratio: Optional[float] = None, ciphertext_count: int = 1):
        if min_letter_ratio is None:
            message = "No candidate to choose from"
        elif ciphertext_count == 1:
            message = f"No key byte produced a plaintext with letter ratio above {min_letter_ratio}"
        else:
            message = (
                f"None of {ciphertext_count} ciphertexts produced a plaintext with letter ratio above {min_letter_ratio}"
            )
        super().__init__(message)
        self.min_letter_ratio = min_letter_ratio
        self.ciphertext_count = ciphertext_count


@dataclass(frozen=True, slots=True)
class Candidate:
    """One key guess and the plaintext it decrypts to."""

    key: int
    score: Score
    plaintext: ByteSequence

    @property
    def distance(self) -> float:
        return self.score.distance

    @property
    def letter_ratio(self) -> float:
        return self.score.letter_ratio


def try_key(ciphertext: ByteSequence, key: int, scorer: FrequencyScorer) -> Candidate:
    keystream = ByteSequence.repeat(key, len(ciphertext))
    plaintext = ByteSequence.xor(ciphertext, keystream)
    return Candidate(key, scorer.score(plaintext), plaintext)


def score_candidates(
    ciphertext: ByteSequence,
    scorer: Optional[FrequencyScorer] = None,
    workers: Optional[int] = None,
) -> List[Candidate]:
    """Decrypt and score the ciphertext under every key byte, in ascending key order."""
    scorer = scorer or FrequencyScorer()

    if workers is None or workers <= 1:
        return [try_key(ciphertext, key, scorer) for key in KEY_SPACE]

    # Executor.map yields in submission order, so key order survives the fan-out.
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda key: try_key(ciphertext, key, scorer), KEY_SPACE))


def filter_candidates(candidates: Iterable[Candidate], min_letter_ratio: float = DEFAULT_MIN_LETTER_RATIO) -> List[Candidate]:
    return [c for c in candidates if c.letter_ratio > min_letter_ratio]


def select_best(candidates: Iterable[Candidate]) -> Candidate:
    """
    Smallest distance wins. Only a strictly smaller distance replaces the
    current best, so on a tie the earlier (lower key) candidate is kept.
    """
    best = None
    for candidate in candidates:
        if best is None or candidate.distance < best.distance:
            best = candidate
    if best is None:
        raise NoValidCandidateError()
    return best


def attack_single_byte_xor(
    ciphertext: ByteSequence,
    min_letter_ratio: float = DEFAULT_MIN_LETTER_RATIO,
    *,
    scorer: Optional[FrequencyScorer] = None,
    workers: Optional[int] = None,
) -> Candidate:
    """
    Recover the key byte of a single-byte XOR ciphertext.

    Every key is tried; plaintexts whose letter ratio is not above
    min_letter_ratio are discarded before comparing distances. Raises
    NoValidCandidateError when nothing survives the gate.
    """
    if not 0.0 <= min_letter_ratio <= 1.0:
        raise ValueError(f"min_letter_ratio must be between 0 and 1, got {min_letter_ratio}")

    candidates = score_candidates(ciphertext, scorer, workers)
    survivors = filter_candidates(candidates, min_letter_ratio)
    if not survivors:
        raise NoValidCandidateError(min_letter_ratio)

    best = select_best(survivors)
    log.info(
        "attack complete",
        survivors=len(survivors),
        key=best.key,
        distance=round(best.distance, 4),
        letter_ratio=round(best.letter_ratio, 4),
    )
    return best


def detect_single_byte_xor(
    ciphertexts: Sequence[ByteSequence],
    min_letter_ratio: float = DEFAULT_MIN_LETTER_RATIO,
    *,
    workers: Optional[int] = None,
    on_progress: Optional[Callable[[int], None]] = None,
) -> Tuple[int, Candidate]:
    """
    Find which ciphertext was single-byte XOR encrypted English. Returns
    (index, candidate); the first line wins a tie. on_progress is called with
    each index once that line has been scored.
    """
    best_index = -1
    best = None
    rejected = 0
    for index, ciphertext in enumerate(ciphertexts):
        try:
            candidate = attack_single_byte_xor(ciphertext, min_letter_ratio, workers=workers)
        except NoValidCandidateError:
            rejected += 1
        else:
            if best is None or candidate.distance < best.distance:
                best_index, best = index, candidate
        if on_progress is not None:
            on_progress(index)

    if best is None:
        raise NoValidCandidateError(min_letter_ratio, len(ciphertexts))

    log.info("ciphertext detected", index=best_index, key=best.key, rejected=rejected)
    return best_index, best
