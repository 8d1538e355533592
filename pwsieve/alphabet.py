# alphabet
# (character classes, symbol policy)
#

import string
from enum import Enum

LOWER = string.ascii_lowercase
UPPER = string.ascii_uppercase
DIGITS = string.digits

# Offered by the command line as default for --symbols.
# The core never falls back to it, the caller must pass symbols explicitly.
SYMBOLS = '-_/[]{}()*&^%$#@.!?=+:;|~'


class ConfigurationError(ValueError):

    """Invalid generator or constraint configuration.

    Raised when the objects are constructed, before any sampling.

    """


class Constraint(Enum):

    """Character class predicate.

    Definition order is the evaluation order.

    """

    NUMBER = 'number'
    SYMBOL = 'symbol'
    LOWER = 'lower'
    UPPER = 'upper'

    @classmethod
    def parse(cls, name: str) -> 'Constraint':
        """Look up constraint by name, case-insensitive.

        Accepts also the long names `lower-case-letter`, `upper-case-letter`.

        """
        key = name.strip().lower().replace('_', '-')
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            choices = ', '.join(c.value for c in cls)
            raise ConfigurationError(
                f"unknown constraint {name!r} (choose from {choices})") from None

    def alphabet(self, symbols: str = '') -> str:
        """Characters satisfying this class."""
        if self is Constraint.SYMBOL:
            return symbols
        return {
            Constraint.NUMBER: DIGITS,
            Constraint.LOWER: LOWER,
            Constraint.UPPER: UPPER,
        }[self]


_ALIASES = {
    'numbers': 'number',
    'digit': 'number',
    'symbols': 'symbol',
    'lowercase': 'lower',
    'lower-case-letter': 'lower',
    'uppercase': 'upper',
    'upper-case-letter': 'upper',
}


def resolve_symbols(configured_symbols: str, required: bool) -> str:
    """Validate the symbol alphabet and return it normalized.

    Duplicate characters are dropped, the order of first occurrences is kept.

    :param configured_symbols: Characters to be considered symbols
    :param required: The HasSymbol predicate is active
    :returns: The symbol alphabet, may be empty when not `required`
    :raises ConfigurationError: on invalid characters, or empty
                                alphabet when symbols are `required`

    """
    symbols = ''
    for c in configured_symbols or '':
        if not c.isascii() or not c.isprintable() or c.isspace():
            raise ConfigurationError(f"invalid symbol character {c!r}")
        if c.isalnum():
            raise ConfigurationError(f"letter or digit {c!r} can't be a symbol")
        if c not in symbols:
            symbols += c
    if required and not symbols:
        raise ConfigurationError("no symbols configured")
    return symbols


def build_pool(classes, symbols: str = '') -> str:
    """Join alphabets of `classes` into a single character pool.

    The classes are taken in the fixed evaluation order,
    regardless of the order in which they were passed.

    """
    selected = set(classes)
    if Constraint.SYMBOL in selected:
        symbols = resolve_symbols(symbols, required=True)
    return ''.join(c.alphabet(symbols) for c in Constraint if c in selected)
