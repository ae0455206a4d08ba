from __future__ import annotations

from core.config import DetectorConfig, LayoutConfig
from core.detector import MismatchDetector
from core.layout import LayoutMap
from core.models import Exempt, Ratio
from core.vocabulary import Vocabulary


def _default_detector(words: list[str]) -> MismatchDetector:
    layout = LayoutMap.from_config(LayoutConfig())
    return MismatchDetector(Vocabulary(words), layout, DetectorConfig())


def test_native_characters_exempt_text() -> None:
    detector = _default_detector(["привет"])
    assert isinstance(detector.score("ghbdtn ж"), Exempt)
    assert isinstance(detector.score("привет"), Exempt)
    assert not detector.score("ghbdtn я").exceeds(0.0)


def test_empty_and_whitespace_score_zero() -> None:
    detector = _default_detector(["привет"])
    for text in ("", "   \t\n"):
        score = detector.score(text)
        assert isinstance(score, Ratio)
        assert score.total == 0
        assert score.value == 0.0


def test_remapped_tokens_match_vocabulary() -> None:
    layout = LayoutMap("q", "e")
    config = DetectorConfig(native_chars="ß", punctuation="!,")
    detector = MismatchDetector(Vocabulary(["hello", "world"]), layout, config)

    score = detector.score("hqllo, world!")

    assert score == Ratio(matched=2, total=2)
    assert score.value == 1.0


def test_partial_match_ratio() -> None:
    detector = _default_detector(["привет"])
    score = detector.score("ghbdtn hello there")
    assert score == Ratio(matched=1, total=3)
    assert not score.exceeds(0.4)


def test_punctuation_keys_remap_into_letters() -> None:
    detector = _default_detector(["как", "дела"])
    # "&" remaps to "?", which is then stripped.
    score = detector.score("rfr ltkf&")
    assert score.value == 1.0


def test_threshold_is_strict() -> None:
    assert not Ratio(matched=2, total=5).exceeds(0.4)
    assert Ratio(matched=1, total=2).exceeds(0.4)
