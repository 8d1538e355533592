# wordlist
# (dictionary words for passphrases)
#

import functools
import logging
from pathlib import Path
from subprocess import Popen, PIPE

log = logging.getLogger(__name__)

DATA_DIR = Path('~/.pwsieve')

# Prefer system wordlist, fallback to cached web download
# See: https://en.wikipedia.org/wiki/Words_(Unix)
WORDLIST_SYSTEM_PATH = Path('/usr/share/dict/words')
WORDLIST_CACHE_PATH = (DATA_DIR / 'words').expanduser()
WORDLIST_WEB_URL = 'https://users.cs.duke.edu/~ola/ap/linuxwords'


def filter_wordlist(words, min_length: int = None, max_length: int = None) -> tuple:
    """Strip the words, drop empty ones, duplicates and those containing "'".

    Optionally keep only words with length in `min_length`..`max_length`.

    """
    result = {}
    for w in words:
        w = w.strip()
        if not w or "'" in w:
            continue
        if min_length is not None and len(w) < min_length:
            continue
        if max_length is not None and len(w) > max_length:
            continue
        result[w] = None
    return tuple(result)


def _read_lines(path) -> list:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read().split()


def load_aspell(language: str) -> tuple:
    """Dump aspell master dictionary for `language`, with expanded affixes.

    Equivalent command: aspell -d <language> dump master | aspell -l <language> expand

    :raises FileNotFoundError: aspell is not installed
    :raises OSError: aspell failed, e.g. the dictionary is not installed

    """
    dump = Popen(['aspell', '-d', language, 'dump', 'master'], stdout=PIPE, stderr=PIPE)
    expand = Popen(['aspell', '-l', language, 'expand'],
                   stdin=dump.stdout, stdout=PIPE, stderr=PIPE)
    dump.stdout.close()
    outs, errs = expand.communicate()
    dump_errs = dump.stderr.read()
    dump.stderr.close()
    if dump.wait() != 0:
        raise OSError(dump_errs.decode(errors='replace').strip())
    if expand.returncode != 0:
        raise OSError(errs.decode(errors='replace').strip())
    return filter_wordlist(outs.decode('utf-8', errors='replace').split())


@functools.lru_cache(maxsize=None)
def load_wordlist(path=None, language: str = None) -> tuple:
    """Load and return a word list.

    :param path: Read words from this file, don't try other sources
    :param language: Try aspell dictionary for this language first

    """
    if path is not None:
        return filter_wordlist(_read_lines(Path(path).expanduser()))
    # Try aspell
    if language:
        try:
            words = load_aspell(language)
            if words:
                return words
            log.warning("aspell dictionary %r is empty", language)
        except FileNotFoundError:
            log.info("aspell not found, falling back to system word list")
    # Try system dict/words
    try:
        return filter_wordlist(_read_lines(WORDLIST_SYSTEM_PATH))
    except FileNotFoundError:
        pass
    # Try cached downloaded words
    try:
        return filter_wordlist(_read_lines(WORDLIST_CACHE_PATH))
    except FileNotFoundError:
        pass
    # Try web download
    import urllib.request
    log.info("Downloading word list from %s", WORDLIST_WEB_URL)
    with urllib.request.urlopen(WORDLIST_WEB_URL) as f:
        content = f.read()
    WORDLIST_CACHE_PATH.parent.mkdir(0o700, exist_ok=True)
    with open(WORDLIST_CACHE_PATH, 'wb') as f:
        f.write(content)
    return filter_wordlist(content.decode('utf-8').split())
