from random import Random

import pytest

from pwsieve.alphabet import Constraint, ConfigurationError, DIGITS, LOWER, UPPER
from pwsieve.generator import CharPoolGenerator, DictionaryGenerator, ClassMixGenerator

WORDS = ("correct", "horse", "battery", "staple")
PAIRS = {a + b for a in WORDS for b in WORDS}


class TestCharPool:

    def test_lengths_and_alphabet(self):
        gen = CharPoolGenerator(3, 6, rng=Random(1))
        lengths = set()
        for _ in range(500):
            pw = gen.next()
            assert 3 <= len(pw) <= 6
            assert all(c in LOWER for c in pw)
            lengths.add(len(pw))
        assert lengths == {3, 4, 5, 6}

    def test_custom_pool(self):
        gen = CharPoolGenerator(20, 20, pool='xy')
        pw = gen.next()
        assert len(pw) == 20
        assert set(pw) <= {'x', 'y'}
        assert gen.pool == 'xy'

    def test_seeded(self):
        gen1 = CharPoolGenerator(5, 10, rng=Random(42))
        gen2 = CharPoolGenerator(5, 10, rng=Random(42))
        assert [gen1.next() for _ in range(5)] == [gen2.next() for _ in range(5)]

    def test_iter(self):
        gen = CharPoolGenerator(4, 4)
        it = iter(gen)
        assert len(next(it)) == 4
        assert len(next(it)) == 4

    def test_errors(self):
        with pytest.raises(ConfigurationError):
            CharPoolGenerator(1, 5, pool='')
        with pytest.raises(ConfigurationError):
            CharPoolGenerator(6, 5)
        with pytest.raises(ConfigurationError):
            CharPoolGenerator(-1, 5)


class TestDictionary:

    def test_joined_words(self):
        gen = DictionaryGenerator(WORDS, num_words=3, joiner='-', rng=Random(3))
        for _ in range(20):
            parts = gen.next().split('-')
            assert len(parts) == 3
            assert all(p in WORDS for p in parts)

    def test_pepper(self):
        gen = DictionaryGenerator(WORDS, num_upper=2, num_digits=1, num_special=1,
                                  symbols='!@#', rng=Random(4))
        for _ in range(20):
            pw = gen.next()
            assert sum(c.isupper() for c in pw) == 2
            assert sum(c.isdigit() for c in pw) == 1
            assert sum(c in '!@#' for c in pw) == 1
            letters = ''.join(c for c in pw if c.isalpha()).lower()
            assert letters in PAIRS

    def test_min_length(self):
        gen = DictionaryGenerator(WORDS, num_words=1, min_length=30)
        pw = gen.next()
        assert len(pw) >= 30
        assert pw.isalpha()

    def test_max_length(self):
        # two words may reach 14, a third one would overflow
        gen = DictionaryGenerator(WORDS, num_words=1, min_length=15, max_length=16,
                                  rng=Random(6))
        for _ in range(50):
            pw = gen.next()
            assert len(pw) <= 16
            assert pw.isalpha()

    def test_more_upper_than_letters(self):
        gen = DictionaryGenerator(['ab'], num_words=1, num_upper=5)
        assert gen.next() == 'AB'

    def test_errors(self):
        with pytest.raises(ConfigurationError, match="word list is empty"):
            DictionaryGenerator([])
        with pytest.raises(ConfigurationError, match="word list is empty"):
            DictionaryGenerator(['', ''])
        with pytest.raises(ConfigurationError, match="no symbols configured"):
            DictionaryGenerator(WORDS, num_special=1)
        with pytest.raises(ConfigurationError):
            DictionaryGenerator(WORDS, num_digits=-1)
        with pytest.raises(ConfigurationError):
            DictionaryGenerator(WORDS, min_length=10, max_length=5)


class TestClassMix:

    def test_chars(self):
        gen = ClassMixGenerator(tuple(Constraint), 12, 20, '!@#', rng=Random(7))
        alphabet = set(LOWER + UPPER + DIGITS + '!@#')
        for _ in range(50):
            pw = gen.next()
            assert len(pw) == 12
            assert set(pw) <= alphabet

    def test_single_class(self):
        gen = ClassMixGenerator(['number'], 6, 6)
        pw = gen.next()
        assert len(pw) == 6
        assert all(c in DIGITS for c in pw)

    def test_no_classes(self):
        pw = ClassMixGenerator((), 8, 8).next()
        assert len(pw) == 8
        assert all(c in LOWER for c in pw)

    def test_words(self):
        gen = ClassMixGenerator([Constraint.LOWER, Constraint.UPPER], 10, 20,
                                words=WORDS, rng=Random(5))
        for _ in range(20):
            pw = gen.next()
            assert 10 <= len(pw) <= 14
            assert pw.lower() in PAIRS

    def test_upper_word(self):
        pw = ClassMixGenerator([Constraint.UPPER], 5, 5, words=['horse']).next()
        assert pw == 'Horse'

    def test_no_word_fits(self):
        gen = ClassMixGenerator([Constraint.LOWER], 3, 5, words=['toolongword'])
        assert gen.next() == ''

    def test_max_length_required(self):
        with pytest.raises(ConfigurationError, match="max length is required"):
            ClassMixGenerator([Constraint.LOWER], 5, None, words=WORDS)

    def test_errors(self):
        with pytest.raises(ConfigurationError, match="no symbols configured"):
            ClassMixGenerator([Constraint.SYMBOL], 5, 5, '')
        with pytest.raises(ConfigurationError, match="word list is empty"):
            ClassMixGenerator([Constraint.LOWER], 5, 5, words=[])
        with pytest.raises(ConfigurationError):
            ClassMixGenerator([Constraint.LOWER], 5, 4)
