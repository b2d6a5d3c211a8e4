# tests/test_fuzzy_corrector.py

from docchat.application.fuzzy_corrector import Vocabulary, bounded_levenshtein
from docchat.domain.models import Chunk


def test_levenshtein_single_edit():
    assert bounded_levenshtein("refnd", "refund") == 1
    assert bounded_levenshtein("refund", "refund") == 0


def test_levenshtein_length_gap_exits_early():
    assert bounded_levenshtein("abc", "abcdef", max_distance=2) == 3


def test_levenshtein_reports_over_threshold():
    assert bounded_levenshtein("kitten", "sitting", max_distance=2) > 2
    assert bounded_levenshtein("kitten", "sitting", max_distance=5) == 3


def test_vocabulary_from_chunks_keeps_tokens_longer_than_one():
    vocabulary = Vocabulary.from_chunks([
        Chunk(1, "The refund Policy, a 30-day window"),
        Chunk(2, "Refund again"),
    ])

    assert "policy" in vocabulary
    assert "30" in vocabulary
    assert "a" not in vocabulary
    assert list(vocabulary) == ["the", "refund", "policy", "30", "day", "window", "again"]


def test_correct_repairs_small_typo():
    vocabulary = Vocabulary(["refund"])
    assert vocabulary.correct("refnd") == "refund"


def test_correct_leaves_distant_terms_alone():
    vocabulary = Vocabulary(["refund"])
    assert vocabulary.correct("xyz") == "xyz"
    assert vocabulary.correct("rebates") == "rebates"


def test_correct_is_noop_for_known_short_and_numeric_terms():
    vocabulary = Vocabulary(["refund", "rfds", "1refund"])
    assert vocabulary.correct("refund") == "refund"
    assert vocabulary.correct("rfd") == "rfd"
    assert vocabulary.correct("1refnd") == "1refnd"


def test_correct_only_considers_same_first_letter():
    vocabulary = Vocabulary(["efund"])
    assert vocabulary.correct("refund") == "refund"


def test_ties_follow_vocabulary_order():
    assert Vocabulary(["carts", "cards"]).correct("carls") == "carts"
    assert Vocabulary(["cards", "carts"]).correct("carls") == "cards"


def test_empty_vocabulary_returns_term():
    vocabulary = Vocabulary()
    assert len(vocabulary) == 0
    assert vocabulary.correct("refnd") == "refnd"
