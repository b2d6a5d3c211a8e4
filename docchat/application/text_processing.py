# docchat/application/text_processing.py

from typing import List

from docchat.domain.models import Chunk


DEFAULT_MAX_CHARS_PER_CHUNK = 2500

# A newline this far into a slice is a good enough boundary to cut on.
MIN_BOUNDARY_OFFSET = 400

BULLET_MARKERS = ("•", "-", "*")


def chunk_text(text: str, max_chars: int = DEFAULT_MAX_CHARS_PER_CHUNK, first_page: int = 1) -> List[Chunk]:
    """
    Split extracted text into bounded, boundary-aware chunks numbered from
    `first_page`. Shared by every document reader so retrieval behaves the
    same regardless of where the text came from.
    """
    if max_chars < 1:
        raise ValueError("max_chars must be at least 1.")

    clean = (text or "").replace("\r", "").strip()
    chunks: List[Chunk] = []
    page_number = first_page
    offset = 0

    while offset < len(clean):
        take = min(max_chars, len(clean) - offset)
        piece = clean[offset:offset + take]

        # The final slice is taken whole.
        cut = piece.rfind("\n") if offset + take < len(clean) else -1
        if cut > MIN_BOUNDARY_OFFSET:
            piece = piece[:cut].rstrip()
            take = cut

        if piece.strip():
            chunks.append(Chunk(page_number=page_number, text=piece))
            page_number += 1

        offset += max(1, take)

    return chunks


def tokenize(text: str) -> List[str]:
    """
    Lower-cased runs of letters/digits, length > 1, distinct,
    in order of first occurrence.
    """
    tokens: dict[str, None] = {}
    current: List[str] = []

    for char in text or "":
        if char.isalnum():
            current.append(char.lower())
            continue
        if current:
            _add_token(tokens, "".join(current))
            current = []
    if current:
        _add_token(tokens, "".join(current))

    return list(tokens)


def _add_token(tokens: dict, token: str) -> None:
    if len(token) > 1:
        tokens.setdefault(token, None)


# ─── Answer text helpers ──────────────────────────────────────────────────────

def extract_bullet_like_lines(text: str, max_lines: int) -> List[str]:
    """Lines that start with a bullet marker or read like a heading."""
    result: List[str] = []
    if not text or not text.strip():
        return result

    for raw_line in text.replace("\r", "\n").split("\n"):
        line = raw_line.strip()
        if len(line) < 6:
            continue

        if line.startswith(BULLET_MARKERS) or _looks_like_heading(line):
            result.append(_clean_line(line))
            if len(result) >= max_lines:
                break

    return result


def extract_key_sentences(text: str, max_sentences: int) -> List[str]:
    result: List[str] = []
    if not text or not text.strip():
        return result

    flat = text.replace("\r", " ").replace("\n", " ")
    for part in flat.replace("?", ".").replace("!", ".").split("."):
        sentence = part.strip()
        if len(sentence) < 25:
            continue
        if len(sentence) > 220:
            sentence = sentence[:220].strip()

        result.append(sentence + ".")
        if len(result) >= max_sentences:
            break

    return result


def make_excerpt(text: str, max_chars: int) -> str:
    if not text or not text.strip():
        return ""
    flat = text.replace("\r", " ").replace("\n", " ").strip()
    if len(flat) <= max_chars:
        return flat
    return flat[:max_chars].strip() + " ..."


def _looks_like_heading(line: str) -> bool:
    return 10 <= len(line) <= 70 and "." not in line


def _clean_line(line: str) -> str:
    return line.replace("\t", " ").replace("  ", " ").strip()
