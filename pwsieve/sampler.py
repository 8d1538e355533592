# sampler
# (rejection sampling of candidate passwords)
#

import logging

from .alphabet import ConfigurationError

log = logging.getLogger(__name__)

MAX_ATTEMPTS = 1000
ATTEMPTS_EXHAUSTED = 'attempts-exhausted'


class RejectionReport:

    """Rejected candidate with the names of predicates it failed."""

    __slots__ = ('candidate', 'failed')

    def __init__(self, candidate: str, failed):
        self.candidate = candidate
        self.failed = tuple(failed)

    def __eq__(self, other):
        if not isinstance(other, RejectionReport):
            return NotImplemented
        return (self.candidate, self.failed) == (other.candidate, other.failed)

    def __repr__(self):
        return f'RejectionReport({self.candidate!r}, {list(self.failed)!r})'


class AttemptsExhausted(RuntimeError):

    def __init__(self, attempts, reports=()):
        RuntimeError.__init__(
            self, f"Could not find a satisfactory password in {attempts} tries")
        self.attempts = attempts
        self.reports = tuple(reports)


class Success:

    ok = True
    kind = None

    def __init__(self, password: str, attempts: int):
        self.password = password
        self.attempts = attempts

    def unwrap(self) -> str:
        return self.password

    def __repr__(self):
        return f'Success(attempts={self.attempts})'


class Failure:

    """No candidate passed within the attempt budget.

    This is a terminal result of a `sample` call. Calling `sample` again,
    possibly with adjusted configuration, is up to the caller.

    """

    ok = False
    kind = ATTEMPTS_EXHAUSTED

    def __init__(self, attempts: int, reports=()):
        self.attempts = attempts
        self.reports = tuple(reports)

    def unwrap(self):
        raise AttemptsExhausted(self.attempts, self.reports)

    def __repr__(self):
        return f'Failure(attempts={self.attempts}, reports={len(self.reports)})'


def sample(generator, constraints, max_attempts: int = MAX_ATTEMPTS, debug: bool = False):
    """Generate candidates until one satisfies `constraints`.

    :param generator: Candidate generator (see `generator` module)
    :param constraints: The ConstraintSet to be satisfied
    :param max_attempts: Generate at most this many candidates
    :param debug: Collect a RejectionReport for each rejected candidate
    :returns: Success with the password, or Failure after `max_attempts`

    """
    if max_attempts < 0:
        raise ConfigurationError(f"max attempts must not be negative, got {max_attempts}")
    reports = []
    for attempt in range(1, max_attempts + 1):
        candidate = generator.next()
        result = constraints.evaluate(candidate)
        if result.passed:
            return Success(candidate, attempt)
        if debug:
            log.debug("Rejecting %r: length %d (%d..%d), failed %s",
                      candidate, len(candidate),
                      constraints.min_length, constraints.max_length,
                      ', '.join(result.failed))
            reports.append(RejectionReport(candidate, result.failed))
    log.info("No satisfactory password in %d tries", max_attempts)
    return Failure(max_attempts, reports)


def sample_many(make_generator, constraints, count: int,
                max_attempts: int = MAX_ATTEMPTS, debug: bool = False) -> list:
    """Run `count` independent samplings.

    `make_generator` is called for each of them, so every sampling
    gets its own generator.
    Stops at first Failure, which is the last item of returned list.

    """
    outcomes = []
    for _ in range(count):
        outcome = sample(make_generator(), constraints, max_attempts, debug)
        outcomes.append(outcome)
        if not outcome.ok:
            break
    return outcomes
