# ConstraintSet
# (predicates a password must satisfy)
#

from enum import Enum

from .alphabet import Constraint, ConfigurationError, resolve_symbols, DIGITS, LOWER, UPPER

LENGTH = 'length'


class ClassFlag(Enum):
    UNSET = 'unset'
    REQUIRED = 'required'
    EXCLUDED = 'excluded'


def _as_constraints(names):
    if isinstance(names, (str, Constraint)):
        names = (names,)
    return [n if isinstance(n, Constraint) else Constraint.parse(n)
            for n in names or ()]


def class_flags(require=(), exclude=()) -> dict:
    """Build the per-class flags from required and excluded names.

    :raises ConfigurationError: if a class is both required and excluded

    """
    flags = {c: ClassFlag.UNSET for c in Constraint}
    for c in _as_constraints(require):
        flags[c] = ClassFlag.REQUIRED
    for c in _as_constraints(exclude):
        if flags[c] is ClassFlag.REQUIRED:
            raise ConfigurationError(
                f"{c.value!r} can't be both required and excluded")
        flags[c] = ClassFlag.EXCLUDED
    return flags


def resolve_classes(require=(), exclude=()) -> tuple:
    """Resolve required and excluded classes to the active predicate set.

    When nothing is explicitly required, every class that is not
    excluded becomes required. With no flags at all, that means all four.

    :returns: Active constraints, in evaluation order

    """
    flags = class_flags(require, exclude)
    if ClassFlag.REQUIRED not in flags.values():
        return tuple(c for c in Constraint if flags[c] is ClassFlag.UNSET)
    return tuple(c for c in Constraint if flags[c] is ClassFlag.REQUIRED)


class Evaluation:

    """Outcome of evaluating a candidate against a ConstraintSet.

    `failed` lists names of failed predicates in evaluation order,
    `length` is the last one when present.

    """

    __slots__ = ('_failed',)

    def __init__(self, failed=()):
        self._failed = tuple(failed)

    @property
    def failed(self) -> tuple:
        return self._failed

    @property
    def length_ok(self) -> bool:
        return LENGTH not in self._failed

    @property
    def passed(self) -> bool:
        return not self._failed

    def __bool__(self):
        return self.passed

    def __eq__(self, other):
        if not isinstance(other, Evaluation):
            return NotImplemented
        return self._failed == other._failed

    def __hash__(self):
        return hash(self._failed)

    def __repr__(self):
        return f'Evaluation(failed={list(self._failed)!r})'


class ConstraintSet:

    """Conjunction of character class predicates and the length bound.

    Immutable. Configuration errors are raised here, in the constructor,
    so that sampling never starts with an invalid set.

    """

    __slots__ = ('_required', '_min_length', '_max_length', '_symbols')

    def __init__(self, required=tuple(Constraint), min_length: int = 0,
                 max_length: int = None, symbols: str = ''):
        """
        :param required: Active class predicates (names or Constraint)
        :param min_length: Minimal accepted length
        :param max_length: Maximal accepted length (default: `min_length`)
        :param symbols: Symbol alphabet, must not be empty when
                        the SYMBOL predicate is required

        """
        if max_length is None:
            max_length = min_length
        if min_length < 0:
            raise ConfigurationError(f"min length {min_length} is negative")
        if min_length > max_length:
            raise ConfigurationError(
                f"min length {min_length} is greater than max length {max_length}")
        active = set(_as_constraints(required))
        self._required = tuple(c for c in Constraint if c in active)
        self._min_length = min_length
        self._max_length = max_length
        self._symbols = resolve_symbols(symbols, Constraint.SYMBOL in active)

    @classmethod
    def from_flags(cls, require=(), exclude=(), min_length: int = 0,
                   max_length: int = None, symbols: str = ''):
        """Create from required/excluded classes, see `resolve_classes`."""
        return cls(resolve_classes(require, exclude), min_length, max_length, symbols)

    @property
    def required(self) -> tuple:
        return self._required

    @property
    def min_length(self) -> int:
        return self._min_length

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def symbols(self) -> str:
        return self._symbols

    def __repr__(self):
        return (f'ConstraintSet(required={[c.value for c in self._required]!r}, '
                f'min_length={self._min_length}, max_length={self._max_length}, '
                f'symbols={self._symbols!r})')

    def check(self, constraint: Constraint, candidate: str) -> bool:
        """Evaluate single class predicate on `candidate`."""
        if constraint is Constraint.NUMBER:
            return any(c in DIGITS for c in candidate)
        if constraint is Constraint.SYMBOL:
            return any(c in self._symbols for c in candidate)
        if constraint is Constraint.LOWER:
            return any(c in LOWER for c in candidate)
        if constraint is Constraint.UPPER:
            return any(c in UPPER for c in candidate)
        raise TypeError(f"not a constraint: {constraint!r}")

    def length_in_range(self, candidate: str) -> bool:
        return self._min_length <= len(candidate) <= self._max_length

    def evaluate(self, candidate: str) -> Evaluation:
        """Evaluate active predicates on `candidate`.

        Inactive classes are never checked. The length is always checked.

        """
        failed = [c.value for c in self._required if not self.check(c, candidate)]
        if not self.length_in_range(candidate):
            failed.append(LENGTH)
        return Evaluation(failed)

    def accepts(self, candidate: str) -> bool:
        return self.evaluate(candidate).passed
