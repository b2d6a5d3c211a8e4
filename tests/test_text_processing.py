# tests/test_text_processing.py

import pytest

from docchat.application.text_processing import (
    chunk_text,
    extract_bullet_like_lines,
    extract_key_sentences,
    make_excerpt,
    tokenize,
)
from docchat.domain.models import Chunk


# ── Chunker ───────────────────────────────────────────────────────────────────

def test_empty_input_yields_no_chunks():
    assert chunk_text("") == []
    assert chunk_text("   \n\t ") == []


def test_newline_only_input_terminates():
    assert chunk_text("\n\n\n\n", max_chars=1) == []


def test_single_character_input():
    assert chunk_text("a") == [Chunk(1, "a")]


def test_input_within_max_chars_is_one_chunk():
    text = "a" * 500 + "\n" + "b" * 500
    chunks = chunk_text(text, max_chars=2500)
    assert chunks == [Chunk(1, text)]


def test_cuts_on_late_newline_and_trims():
    block = "x" * 500 + "  \n"
    text = block * 10
    chunks = chunk_text(text, max_chars=2500)

    assert len(chunks) > 1
    assert all(len(c.text) <= 2500 for c in chunks)
    assert not chunks[0].text.endswith((" ", "\n"))
    assert [c.page_number for c in chunks] == list(range(1, len(chunks) + 1))


def test_concatenation_reconstructs_logical_text():
    text = ("paragraph " * 60 + "\n") * 12
    chunks = chunk_text(text, max_chars=2500)

    def squash(s: str) -> str:
        return "".join(s.split())

    assert squash("".join(c.text for c in chunks)) == squash(text)


def test_early_newline_is_not_a_boundary():
    text = "a" * 100 + "\n" + "b" * 3000
    chunks = chunk_text(text, max_chars=2500)

    assert len(chunks[0].text) == 2500
    assert len(chunks) == 2


def test_text_without_newlines_is_sliced_evenly():
    chunks = chunk_text("y" * 6000, max_chars=2500)
    assert [len(c.text) for c in chunks] == [2500, 2500, 1000]
    assert [c.page_number for c in chunks] == [1, 2, 3]


def test_first_page_offsets_numbering():
    chunks = chunk_text("hello", first_page=4)
    assert chunks == [Chunk(4, "hello")]


def test_invalid_max_chars_raises():
    with pytest.raises(ValueError):
        chunk_text("text", max_chars=0)


# ── Tokenizer ─────────────────────────────────────────────────────────────────

def test_tokenize_lowercases_and_deduplicates():
    assert tokenize("Refund, REFUND policy; a 30-day window") == [
        "refund", "policy", "30", "day", "window",
    ]


# ── Answer helpers ────────────────────────────────────────────────────────────

def test_extract_bullet_like_lines():
    text = (
        "• First point here\n"
        "short\n"
        "- Second point here\n"
        "This is a sentence. With dots."
    )
    assert extract_bullet_like_lines(text, 7) == ["• First point here", "- Second point here"]


def test_extract_bullet_like_lines_respects_max():
    text = "\n".join(f"* bullet number {i}" for i in range(10))
    assert len(extract_bullet_like_lines(text, 4)) == 4


def test_extract_key_sentences():
    text = "Short one. This sentence is definitely long enough to count! Tiny?"
    assert extract_key_sentences(text, 5) == ["This sentence is definitely long enough to count."]


def test_extract_key_sentences_truncates_long_sentences():
    sentences = extract_key_sentences("w" * 400 + ".", 5)
    assert sentences == ["w" * 220 + "."]


def test_make_excerpt():
    assert make_excerpt("line one\nline two", 900) == "line one line two"
    assert make_excerpt("a" * 1000, 900) == "a" * 900 + " ..."
    assert make_excerpt("   ", 900) == ""
