import pytest
from xor_sleuth.models.byte_sequence import ByteSequence
from xor_sleuth.scoring import ENGLISH_CHAR_FREQUENCIES, FrequencyScorer, Score, symbol_index

FLAT_TABLE = [0.0] * 27


class TestSymbolIndex:
    """Test suite for mapping bytes onto the frequency table"""

    def test_letters_fold_case(self):
        """Test upper and lower case share a slot"""
        assert symbol_index(ord("a")) == 0
        assert symbol_index(ord("A")) == 0
        assert symbol_index(ord("z")) == 25
        assert symbol_index(ord("Z")) == 25

    def test_space(self):
        """Test space has its own slot"""
        assert symbol_index(32) == 26

    def test_other_bytes(self):
        """Test punctuation, digits, controls and high bytes have no slot"""
        for b in (0, 10, ord("0"), ord("@"), ord("["), ord("`"), ord("{"), 127, 200):
            assert symbol_index(b) is None


class TestFrequencyTable:
    """Test suite for the English frequency table"""

    def test_shape(self):
        """Test the table covers a-z and space"""
        assert len(ENGLISH_CHAR_FREQUENCIES) == 27
        assert all(0.0 <= f <= 1.0 for f in ENGLISH_CHAR_FREQUENCIES)

    def test_sums_to_about_one(self):
        """Test the table is close to a probability distribution"""
        assert sum(ENGLISH_CHAR_FREQUENCIES) == pytest.approx(1.0, abs=0.01)

    def test_space_and_e_are_most_common(self):
        """Test space then e lead the table"""
        ranked = sorted(range(27), key=lambda i: ENGLISH_CHAR_FREQUENCIES[i], reverse=True)
        assert ranked[:2] == [26, 4]


class TestFrequencyScorer:
    """Test suite for FrequencyScorer"""

    def test_invalid_table(self):
        """Test a table of the wrong size is rejected"""
        with pytest.raises(ValueError, match="27 entries"):
            FrequencyScorer([0.1] * 26)

    def test_frequencies_property(self):
        """Test the default table is exposed read-only"""
        assert FrequencyScorer().frequencies == ENGLISH_CHAR_FREQUENCIES

    def test_empty_sequence(self):
        """Test an empty sequence scores zero on both axes"""
        assert FrequencyScorer().score(ByteSequence(b"")) == Score(0.0, 0.0)

    def test_flat_table_counts_squares(self):
        """Test the distance is the sum of squared counts when nothing is expected"""
        score = FrequencyScorer(FLAT_TABLE).score(ByteSequence(b"aab!"))
        assert score.distance == 6.0
        assert score.letter_ratio == 0.75

    def test_single_space(self):
        """Test the distance of a lone space against the English table"""
        score = FrequencyScorer().score(ByteSequence(b" "))
        letters = sum(f * f for f in ENGLISH_CHAR_FREQUENCIES[:26])
        expected = (1 - ENGLISH_CHAR_FREQUENCIES[26]) ** 2 + 2 * letters
        assert score.distance == pytest.approx(expected)
        assert score.letter_ratio == 1.0

    def test_non_letters_penalized_by_count(self):
        """Test a non-letter adds its raw count to the distance"""
        scorer = FrequencyScorer()
        plain = scorer.score(ByteSequence(b"e"))
        noisy = scorer.score(ByteSequence(b"#"))
        letters = sum(f * f for f in ENGLISH_CHAR_FREQUENCIES[:26]) * 2 + ENGLISH_CHAR_FREQUENCIES[26] ** 2
        assert noisy.distance == pytest.approx(1 + letters)
        assert plain.distance < noisy.distance
        assert noisy.letter_ratio == 0.0

    def test_case_insensitive_distance(self):
        """Test case folding gives the same distance either way"""
        scorer = FrequencyScorer()
        lower = scorer.score(ByteSequence(b"hello world"))
        upper = scorer.score(ByteSequence(b"HELLO WORLD"))
        assert lower.distance == pytest.approx(upper.distance)
        assert lower.letter_ratio == upper.letter_ratio == 1.0

    def test_letter_ratio(self):
        """Test letters and spaces count towards the ratio, punctuation does not"""
        score = FrequencyScorer().score(ByteSequence(b"Hello, World"))
        assert score.letter_ratio == pytest.approx(11 / 12)

    def test_english_beats_gibberish(self):
        """Test English text scores closer than a scrambled version"""
        scorer = FrequencyScorer()
        english = ByteSequence(b"the quick brown fox jumps over the lazy dog")
        noise = ByteSequence(bytes(b ^ 0x13 for b in english.bytes))
        assert scorer.score(english).distance < scorer.score(noise).distance

    def test_deterministic(self):
        """Test scoring is a pure function of the input bytes"""
        scorer = FrequencyScorer()
        seq = ByteSequence(b"Cooking MC's like a pound of bacon")
        assert scorer.score(seq) == scorer.score(seq)
        assert FrequencyScorer().score(seq) == scorer.score(seq)
