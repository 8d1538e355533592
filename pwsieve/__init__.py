from .alphabet import Constraint, ConfigurationError, resolve_symbols, build_pool
from .constraints import ClassFlag, ConstraintSet, Evaluation, resolve_classes
from .generator import CharPoolGenerator, DictionaryGenerator, ClassMixGenerator
from .sampler import AttemptsExhausted, Failure, RejectionReport, Success, sample, sample_many

__all__ = (
    'Constraint', 'ConfigurationError', 'resolve_symbols', 'build_pool',
    'ClassFlag', 'ConstraintSet', 'Evaluation', 'resolve_classes',
    'CharPoolGenerator', 'DictionaryGenerator', 'ClassMixGenerator',
    'AttemptsExhausted', 'Failure', 'RejectionReport', 'Success', 'sample', 'sample_many',
)
