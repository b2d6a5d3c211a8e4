# docchat/application/intent_classifier.py

from typing import Optional

from docchat.domain.models import IntentKind, QueryIntent


HELP_COMMANDS = frozenset({"help", "/help", "?", "commands"})
FIND_PREFIX = "find:"
SUMMARY_WORDS = ("summary", "summarize", "gist", "overview")
EXTRACT_PHRASES = ("show page", "open page", "what is on page")

FOLLOW_UP_EXACT = frozenset({"explain more", "tell me more", "more"})
FOLLOW_UP_PHRASES = ("explain that", "what about that", "what do you mean", "elaborate")


def classify_intent(text: str) -> QueryIntent:
    """
    Map raw user text to exactly one intent. Rules are checked in order:
    help, find:, summary (page or whole document), page extraction, general.
    """
    original = (text or "").strip()
    lower = original.lower()

    if lower in HELP_COMMANDS:
        return QueryIntent(IntentKind.HELP)

    if lower.startswith(FIND_PREFIX):
        keyword = original[len(FIND_PREFIX):].strip()
        return QueryIntent(IntentKind.FIND, keyword=keyword)

    page = find_page_number(lower)

    if any(word in lower for word in SUMMARY_WORDS):
        if page is not None:
            return QueryIntent(IntentKind.SUMMARIZE_PAGE, page=page)
        return QueryIntent(IntentKind.SUMMARIZE_DOCUMENT)

    if page is not None and (lower.startswith("page ") or any(p in lower for p in EXTRACT_PHRASES)):
        return QueryIntent(IntentKind.EXTRACT_PAGE, page=page)

    return QueryIntent(IntentKind.GENERAL)


def find_page_number(lower: str) -> Optional[int]:
    """Digits right after the first "page " in the text; None if absent or zero."""
    index = lower.find("page ")
    if index < 0:
        return None

    index += len("page ")
    digits = []
    while index < len(lower) and "0" <= lower[index] <= "9":
        digits.append(lower[index])
        index += 1

    if not digits:
        return None
    page = int("".join(digits))
    return page if page > 0 else None


def is_follow_up(text: str) -> bool:
    lower = (text or "").strip().lower()
    return lower in FOLLOW_UP_EXACT or any(p in lower for p in FOLLOW_UP_PHRASES)
