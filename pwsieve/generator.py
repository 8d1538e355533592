# generator
# (candidate password generators)
#

from bisect import bisect_right
from random import SystemRandom

from .alphabet import Constraint, ConfigurationError, resolve_symbols, DIGITS, LOWER

random = SystemRandom()

NUM_WORDS = 2


def _check_length_range(min_length, max_length):
    if min_length < 0:
        raise ConfigurationError(f"min length {min_length} is negative")
    if max_length is not None and min_length > max_length:
        raise ConfigurationError(
            f"min length {min_length} is greater than max length {max_length}")


def _check_count(name, value):
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")


def _check_words(words) -> tuple:
    words = tuple(w for w in words if w)
    if not words:
        raise ConfigurationError("word list is empty")
    return words


class CandidateGenerator:

    """Produces one candidate password per `next()` call.

    Generators don't remember previous candidates. The only state
    is the random source, `SystemRandom` unless `rng` is given.
    Give each thread its own `rng` when seeding for reproducibility.

    """

    def __init__(self, rng=None):
        self._rng = rng if rng is not None else random

    def next(self) -> str:
        raise NotImplementedError

    def __iter__(self):
        while True:
            yield self.next()


class CharPoolGenerator(CandidateGenerator):

    """Random characters drawn from a fixed pool.

    The pool is lowercase letters by default. Such candidates
    can't ever contain digits, symbols or uppercase letters,
    use `alphabet.build_pool` to get a pool with the required classes.

    """

    def __init__(self, min_length: int, max_length: int, pool: str = LOWER, rng=None):
        CandidateGenerator.__init__(self, rng)
        _check_length_range(min_length, max_length)
        if not pool:
            raise ConfigurationError("character pool is empty")
        self._min_length = min_length
        self._max_length = max_length
        self._pool = pool

    @property
    def pool(self) -> str:
        return self._pool

    def next(self) -> str:
        length = self._rng.randint(self._min_length, self._max_length)
        return ''.join(self._rng.choice(self._pool) for _ in range(length))


class DictionaryGenerator(CandidateGenerator):

    """Random passphrase, based on dictionary words.

    The passphrase is peppered by making some letters uppercase,
    by adding some digits and special symbol characters at random positions.

    """

    def __init__(self, words, num_words: int = NUM_WORDS, joiner: str = '',
                 min_length: int = 0, max_length: int = None,
                 num_upper: int = 0, num_digits: int = 0, num_special: int = 0,
                 symbols: str = '', rng=None):
        """
        :param words: Word list to choose from (with replacement)
        :param num_words:  Use at least this many random words as basis
        :param joiner: Put this string between the words
        :param min_length: Add more words to achieve at least this length
        :param max_length: Don't add more words beyond this length
        :param num_upper:  Convert this many letters to uppercase
        :param num_digits: Add this many digits
        :param num_special: Add this many special symbols from `symbols`

        """
        CandidateGenerator.__init__(self, rng)
        self._words = _check_words(words)
        _check_length_range(min_length, max_length)
        for name, value in (('num_words', num_words), ('num_upper', num_upper),
                            ('num_digits', num_digits), ('num_special', num_special)):
            _check_count(name, value)
        self._num_words = num_words
        self._joiner = joiner
        self._min_length = min_length
        self._max_length = max_length
        self._num_upper = num_upper
        self._num_digits = num_digits
        self._num_special = num_special
        self._symbols = resolve_symbols(symbols, required=num_special > 0)

    @property
    def words(self) -> tuple:
        return self._words

    def _add_words(self, charlist):
        reserved = self._num_digits + self._num_special
        while len(charlist) + reserved < self._min_length:
            word = self._rng.choice(self._words)
            if charlist:
                word = self._joiner + word
            if (self._max_length is not None
                    and len(charlist) + len(word) + reserved > self._max_length):
                break
            charlist += list(word)

    def _insert(self, charlist, alphabet, count):
        for _ in range(count):
            ch = self._rng.choice(alphabet)
            i = self._rng.randint(0, len(charlist))
            charlist.insert(i, ch)

    def next(self) -> str:
        rng = self._rng
        # Choose random words and join them
        charlist = list(self._joiner.join(rng.choice(self._words)
                                          for _ in range(self._num_words)))
        # Add more words up to min length
        self._add_words(charlist)
        # Make some letters uppercase
        indices = [i for i, c in enumerate(charlist) if c in LOWER]
        for i in rng.sample(indices, min(self._num_upper, len(indices))):
            charlist[i] = charlist[i].upper()
        self._insert(charlist, DIGITS, self._num_digits)
        self._insert(charlist, self._symbols, self._num_special)
        return ''.join(charlist)


class ClassMixGenerator(CandidateGenerator):

    """Mix of characters from randomly chosen required classes.

    Each step picks one of the `required` classes and appends a digit,
    a symbol, or a chunk of letters in the chosen case, until the
    candidate reaches `min_length`.

    Letter chunks are single letters, or whole words when `words` are given.
    A word's first letter is converted to the chosen case. Only words
    which still fit into `max_length` are drawn. When none fits,
    the candidate is returned short and gets rejected.

    """

    def __init__(self, required, min_length: int, max_length: int,
                 symbols: str = '', words=None, rng=None):
        CandidateGenerator.__init__(self, rng)
        if max_length is None:
            raise ConfigurationError("max length is required")
        _check_length_range(min_length, max_length)
        active = {c if isinstance(c, Constraint) else Constraint.parse(c)
                  for c in required}
        self._classes = tuple(c for c in Constraint if c in active) or (Constraint.LOWER,)
        self._min_length = min_length
        self._max_length = max_length
        self._symbols = resolve_symbols(symbols, Constraint.SYMBOL in active)
        self._words = self._word_lengths = None
        if words is not None:
            words = sorted(_check_words(words), key=len)
            self._words = tuple(words)
            self._word_lengths = tuple(len(w) for w in words)

    def _pick_word(self, room):
        n = bisect_right(self._word_lengths, room)
        if n == 0:
            return None
        return self._words[self._rng.randrange(n)]

    def _letters(self, current_length, lowercase):
        if self._words is None:
            word = self._rng.choice(LOWER)
        else:
            word = self._pick_word(self._max_length - current_length)
            if not word:
                return None
        first = word[0].lower() if lowercase else word[0].upper()
        return first + word[1:]

    def next(self) -> str:
        rng = self._rng
        s = ''
        while len(s) < self._min_length:
            cls = rng.choice(self._classes)
            if cls is Constraint.NUMBER:
                s += rng.choice(DIGITS)
            elif cls is Constraint.SYMBOL:
                s += rng.choice(self._symbols)
            else:
                chunk = self._letters(len(s), cls is Constraint.LOWER)
                if chunk is None:
                    break
                s += chunk
        return s
