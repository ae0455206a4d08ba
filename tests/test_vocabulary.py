from __future__ import annotations

import pytest

from core.layout import LayoutMap
from core.vocabulary import Vocabulary, VocabularyError, load_vocabulary, normalize_token


def test_load_vocabulary_ignores_blank_lines(tmp_path) -> None:
    path = tmp_path / "words.txt"
    path.write_text("привет\r\nмир\n\n  \nДом\n", encoding="utf-8")

    vocabulary = load_vocabulary(str(path))

    assert len(vocabulary) == 3
    assert vocabulary.is_known("привет")
    assert vocabulary.is_known("мир")
    assert vocabulary.is_known("дом")
    assert not vocabulary.is_known("")


def test_load_vocabulary_missing_file_is_fatal(tmp_path) -> None:
    with pytest.raises(VocabularyError):
        load_vocabulary(str(tmp_path / "missing.txt"))


def test_membership_is_exact() -> None:
    vocabulary = Vocabulary(["hello"])
    assert vocabulary.is_known("hello")
    assert not vocabulary.is_known("hell")
    assert not vocabulary.is_known("Hello")


def test_normalize_token_remaps_before_stripping_punctuation() -> None:
    layout = LayoutMap(",.", "бю")
    # "," is a letter on the target layout and must survive.
    assert normalize_token(",!", layout, "!,.") == "б"
    assert normalize_token("HI!", layout, "!") == "hi"
