import os
import sys
import argparse
import configparser
import logging
from pathlib import Path

from blessed import Terminal
import pyperclip

from . import alphabet, sampler
from .alphabet import ConfigurationError
from .constraints import ConstraintSet
from .generator import CharPoolGenerator, ClassMixGenerator, DictionaryGenerator, NUM_WORDS
from .sampler import AttemptsExhausted, sample_many
from .wordlist import DATA_DIR, load_wordlist

log = logging.getLogger(__name__)

ENV_PREFIX = 'PWSIEVE_'
DEFAULTS = {
    'min': 10,
    'max': 20,
    'require': '',
    'exclude': '',
    'symbols': alphabet.SYMBOLS,
    'tries': sampler.MAX_ATTEMPTS,
    'debug': False,
    'language': 'en',
    'wordlist': None,
}
CONFIG_TYPES = {
    'min': int,
    'max': int,
    'tries': int,
}


class Config:

    def __init__(self, config_file=None):
        self._values = {}
        if config_file is not None:
            self.load(config_file)

    def load(self, config_file):
        config_file = Path(config_file).expanduser()
        log.debug("Loading config %r", str(config_file))
        config = configparser.ConfigParser(interpolation=None)
        try:
            config.read(config_file, encoding='utf-8')
        except configparser.Error as e:
            raise ConfigurationError(f"invalid config {str(config_file)!r}: {e}") from None
        for section in config.sections():
            if section != 'pwsieve':
                print(f"WARNING: unknown section {section!r} in config {str(config_file)!r}",
                      file=sys.stderr)
                continue
            section = config[section]
            for key in section:
                if key not in DEFAULTS:
                    print(f"WARNING: unknown key [{section.name!r}] {key!r} "
                          f"in config {str(config_file)!r}", file=sys.stderr)
                    continue
                if key == 'debug':
                    try:
                        self._values[key] = section.getboolean(key)
                    except ValueError as e:
                        raise ConfigurationError(
                            f"invalid config {str(config_file)!r}: {e}") from None
                else:
                    self._values[key] = section[key]

    def get(self, key, default=None):
        return self._values.get(key, default)


def _convert(key, value):
    if key == 'debug' and isinstance(value, str):
        try:
            return configparser.ConfigParser.BOOLEAN_STATES[value.strip().lower()]
        except KeyError:
            raise ConfigurationError(f"invalid value for {key!r}: {value!r}") from None
    convert = CONFIG_TYPES.get(key)
    if convert is not None and isinstance(value, str):
        try:
            return convert(value)
        except ValueError:
            raise ConfigurationError(f"invalid value for {key!r}: {value!r}") from None
    return value


def _split_names(values) -> list:
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    return [name.strip() for value in values for name in value.split(',') if name.strip()]


def resolve_options(args, config, environ=None) -> dict:
    """Merge command line `args`, environment, `config` and built-in defaults.

    The first one which has the value set wins, in that order.
    Environment variables have the names upper-cased, prefixed with PWSIEVE_.

    """
    environ = os.environ if environ is None else environ
    options = {}
    for key, default in DEFAULTS.items():
        value = getattr(args, key, None)
        if value is None or value == []:
            value = environ.get(ENV_PREFIX + key.upper())
        if value is None:
            value = config.get(key)
        if value is None:
            value = default
        options[key] = _convert(key, value)
    options['require'] = _split_names(options['require'])
    options['exclude'] = _split_names(options['exclude'])
    return options


def build_constraints(options) -> ConstraintSet:
    return ConstraintSet.from_flags(
        require=options['require'], exclude=options['exclude'],
        min_length=options['min'], max_length=options['max'],
        symbols=options['symbols'])


def make_chars_generator(options, constraints, pool=None):
    if pool is not None:
        return CharPoolGenerator(constraints.min_length, constraints.max_length, pool)
    return ClassMixGenerator(constraints.required, constraints.min_length,
                             constraints.max_length, constraints.symbols)


def make_dict_generator(options, constraints, passphrase=False, words=NUM_WORDS,
                        joiner='', upper=1, digits=1, special=1):
    wordlist = load_wordlist(options['wordlist'], options['language'])
    if not passphrase:
        return ClassMixGenerator(constraints.required, constraints.min_length,
                                 constraints.max_length, constraints.symbols,
                                 words=wordlist)
    return DictionaryGenerator(wordlist, num_words=words, joiner=joiner,
                               min_length=constraints.min_length,
                               max_length=constraints.max_length,
                               num_upper=upper, num_digits=digits,
                               num_special=special if constraints.symbols else 0,
                               symbols=constraints.symbols)


def _copy(text):
    """Wraps copy-to-clipboard function to allow overriding."""
    pyperclip.copy(text)


def print_rejections(reports, file=None):
    file = file or sys.stderr
    term = Terminal(stream=file)
    print(term.bold(f"Rejected {len(reports)} candidates:"), file=file)
    for n, report in enumerate(reports, 1):
        print(term.bold(f'[{n}]'), term.yellow(repr(report.candidate)),
              term.red(', '.join(report.failed)), file=file)


def run(make_generator, options, count=1, copy=False, **generator_args):
    if count < 1:
        raise ConfigurationError(f"count must be positive, got {count}")
    constraints = build_constraints(options)
    generator = make_generator(options, constraints, **generator_args)
    outcomes = sample_many(lambda: generator, constraints, count,
                           options['tries'], options['debug'])
    passwords = []
    for outcome in outcomes:
        if outcome.ok:
            log.debug("Found password in %d tries", outcome.attempts)
            passwords.append(outcome.password)
    for password in passwords:
        print(password)
    if not outcomes[-1].ok:
        outcomes[-1].unwrap()
    if copy and passwords:
        try:
            _copy(passwords[-1])
            print("(copied to clipboard)", file=sys.stderr)
        except pyperclip.PyperclipException as e:
            print(f"WARNING: can't copy to clipboard: {e}", file=sys.stderr)
    return passwords


def parse_args(argv=None):
    """Process command line args."""
    ap = argparse.ArgumentParser(prog="pwsieve",
                                 description="Generate random password satisfying constraints",
                                 formatter_class=argparse.RawTextHelpFormatter)
    ap.add_argument('-c', '--config', dest='config_file',
                    default=DATA_DIR / 'pwsieve.conf',
                    help="config file (default: %(default)s)")
    ap.add_argument('--min', type=int,
                    help=f"minimal length of the password (default: {DEFAULTS['min']})")
    ap.add_argument('--max', type=int,
                    help=f"maximal length of the password (default: {DEFAULTS['max']})")
    ap.add_argument('--require', action='append', metavar='CLASS',
                    help="require this character class: number, symbol, lower, upper\n"
                         "(repeatable or comma-separated; if none, all are required)")
    ap.add_argument('--exclude', action='append', metavar='CLASS',
                    help="exclude this character class")
    ap.add_argument('--symbols',
                    help="characters valid as symbols (default: %s)"
                         % DEFAULTS['symbols'].replace('%', '%%'))
    ap.add_argument('--tries', type=int,
                    help=f"give up after this many candidates (default: {DEFAULTS['tries']})")
    ap.add_argument('--debug', action='store_true', default=None,
                    help="log and report rejected candidates")
    ap.add_argument('-n', '--count', type=int, default=1,
                    help="number of passwords to generate (default: %(default)s)")
    ap.add_argument('--copy', action='store_true',
                    help="copy the (last) password to clipboard")

    # Sub-commands
    sp = ap.add_subparsers()
    ap_chars = sp.add_parser("chars",
                             help="pick the letters randomly from a-z (default)")
    ap_chars.set_defaults(make_generator=make_chars_generator)
    ap_chars.add_argument('--pool',
                          help="draw all characters from POOL instead of\n"
                               "mixing the required classes")
    ap_dict = sp.add_parser("dict",
                            help="pick the letters by sampling dictionary words")
    ap_dict.set_defaults(make_generator=make_dict_generator)
    ap_dict.add_argument('--language',
                         help=f"aspell dictionary language (default: {DEFAULTS['language']})")
    ap_dict.add_argument('--wordlist',
                         help="read words from this file instead")
    ap_dict.add_argument('--passphrase', action='store_true',
                         help="join whole words and pepper them with\n"
                              "uppercase letters, digits and symbols")
    ap_dict.add_argument('-w', dest='words', type=int, default=NUM_WORDS,
                         help="passphrase: number of words to concatenate "
                              "(default: %(default)s)")
    ap_dict.add_argument('-u', dest='upper', type=int, default=1,
                         help="passphrase: number of letters to make uppercase "
                              "(default: %(default)s)")
    ap_dict.add_argument('-d', dest='digits', type=int, default=1,
                         help="passphrase: number of digits to add "
                              "(default: %(default)s)")
    ap_dict.add_argument('-s', dest='special', type=int, default=1,
                         help="passphrase: number of special symbols to add "
                              "(default: %(default)s)")
    ap_dict.add_argument('--joiner', default='',
                         help="passphrase: string between the words")

    args = ap.parse_args(args=argv)

    if 'make_generator' not in args:
        ap_chars.parse_args([], namespace=args)

    return args


def main(argv=None, environ=None):
    """Main program

    :param argv: Used in tests. Default is sys.argv
    :param environ: Used in tests. Default is os.environ
    :return: Exit status

    """
    args = parse_args(argv)
    common = {key: getattr(args, key) for key in DEFAULTS if hasattr(args, key)}
    generator_args = {key: value for key, value in vars(args).items()
                      if key not in DEFAULTS}
    make_generator = generator_args.pop('make_generator')
    config_file = generator_args.pop('config_file')
    count = generator_args.pop('count')
    copy = generator_args.pop('copy')
    options = {}
    try:
        options = resolve_options(argparse.Namespace(**common), Config(config_file), environ)
        logging.basicConfig(level=logging.DEBUG if options['debug'] else logging.WARNING,
                            format='%(levelname)s %(name)s: %(message)s')
        run(make_generator, options, count, copy, **generator_args)
    except ConfigurationError as e:
        print(f"pwsieve: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"pwsieve: can't load word list: {e}", file=sys.stderr)
        return 2
    except AttemptsExhausted as e:
        print(f"pwsieve: {e}", file=sys.stderr)
        if options.get('debug'):
            print_rejections(e.reports)
        return 1
    return 0
