import io
import os
import sys
import urllib.request
from pathlib import Path

import pytest

from pwsieve import wordlist


@pytest.fixture(autouse=True)
def clear_cache():
    wordlist.load_wordlist.cache_clear()  # clear lru_cache
    yield
    wordlist.load_wordlist.cache_clear()


def _check_wordlist(words):
    for word in words:
        assert isinstance(word, str)
        assert len(word) > 0
        assert "'" not in word
    assert len(set(words)) == len(words), "no duplicate words"


def test_filter_wordlist():
    words = ["it's\n", " apple \n", "", "apple", "pear", "fig"]
    assert wordlist.filter_wordlist(words) == ("apple", "pear", "fig")
    assert wordlist.filter_wordlist(words, min_length=4) == ("apple", "pear")
    assert wordlist.filter_wordlist(words, max_length=4) == ("pear", "fig")


def test_path_wordlist(tmp_path):
    path = tmp_path / 'words.txt'
    path.write_text("zebra\nyak\nit's\nyak\n", encoding='utf-8')
    assert wordlist.load_wordlist(str(path)) == ("zebra", "yak")


def test_path_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        wordlist.load_wordlist(str(tmp_path / 'missing'))


@pytest.mark.skipif(not wordlist.WORDLIST_SYSTEM_PATH.exists(),
                    reason=f"missing {str(wordlist.WORDLIST_SYSTEM_PATH)}")
def test_sys_wordlist():
    words = wordlist.load_wordlist()
    _check_wordlist(words)
    assert len(words) > 1000, "enough words for password generator"


def test_web_wordlist(monkeypatch, tmp_path):
    cache_path = tmp_path / 'words'
    monkeypatch.setattr(wordlist, 'WORDLIST_SYSTEM_PATH', Path('/does/not/exist'))
    monkeypatch.setattr(wordlist, 'WORDLIST_CACHE_PATH', cache_path)
    monkeypatch.setattr(urllib.request, 'urlopen',
                        lambda url: io.BytesIO(b"alpha\nbeta\nit's\n"))
    assert not cache_path.exists()
    assert wordlist.load_wordlist() == ("alpha", "beta")  # downloaded and saved
    assert cache_path.exists()

    def no_network(url):
        raise AssertionError("should be loaded from cache")

    monkeypatch.setattr(urllib.request, 'urlopen', no_network)
    wordlist.load_wordlist.cache_clear()
    assert wordlist.load_wordlist() == ("alpha", "beta")  # loaded from disk cache


def test_aspell(monkeypatch):
    monkeypatch.setattr(wordlist, 'load_aspell', lambda language: ("hola", "adios"))
    assert wordlist.load_wordlist(language='es') == ("hola", "adios")


def test_aspell_missing(monkeypatch, tmp_path):
    def missing(language):
        raise FileNotFoundError('aspell')

    system_path = tmp_path / 'words'
    system_path.write_text("one\ntwo\n", encoding='utf-8')
    monkeypatch.setattr(wordlist, 'load_aspell', missing)
    monkeypatch.setattr(wordlist, 'WORDLIST_SYSTEM_PATH', system_path)
    assert wordlist.load_wordlist(language='en') == ("one", "two")


FAKE_ASPELL = """#!/bin/sh
# aspell -d <lang> dump master | aspell -l <lang> expand
case "$3" in
    dump)
        if [ "$2" = "xx" ]; then
            echo "No word lists can be found for the language \\"xx\\"." >&2
            exit 1
        fi
        printf 'horse\\nit'"'"'s\\nstaple\\n'
        ;;
    expand)
        cat
        ;;
esac
"""


@pytest.fixture()
def fake_aspell(monkeypatch, tmp_path):
    script = tmp_path / 'aspell'
    script.write_text(FAKE_ASPELL, encoding='utf-8')
    script.chmod(0o755)
    monkeypatch.setenv('PATH', str(tmp_path) + os.pathsep + os.environ.get('PATH', ''))
    return script


@pytest.mark.skipif(sys.platform == 'win32', reason="needs /bin/sh")
def test_load_aspell(fake_aspell):
    assert wordlist.load_aspell('en') == ("horse", "staple")


@pytest.mark.skipif(sys.platform == 'win32', reason="needs /bin/sh")
def test_load_aspell_failed(fake_aspell):
    with pytest.raises(OSError, match="No word lists can be found"):
        wordlist.load_aspell('xx')
