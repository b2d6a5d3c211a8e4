# docchat/infrastructure/lexical_services.py

from typing import List

import httpx

from docchat.domain.interfaces import SpellCheckPort, SynonymPort
from docchat.domain.models import CapabilityResult, Err, FailureKind, Ok


DATAMUSE_URL = "https://api.datamuse.com/words"
LANGUAGETOOL_URL = "https://api.languagetool.org/v2/check"


class DatamuseThesaurus(SynonymPort):
    """Synonyms from Datamuse (`rel_syn`)."""

    def __init__(
        self,
        url: str = DATAMUSE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def lookup(self, word: str, max_count: int) -> CapabilityResult[List[str]]:
        params = {"rel_syn": word, "max": max_count}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, params=params)
        except httpx.RequestError as error:
            return Err(FailureKind.NETWORK, str(error))

        if response.status_code != 200:
            return Err(FailureKind.STATUS, f"HTTP {response.status_code}")

        try:
            entries = response.json()
            words = [
                entry["word"].strip()
                for entry in entries
                if isinstance(entry, dict) and isinstance(entry.get("word"), str) and entry["word"].strip()
            ]
        except (ValueError, TypeError) as error:
            return Err(FailureKind.PARSE, str(error))

        return Ok(words)


class LanguageToolSpellChecker(SpellCheckPort):
    """
    Spell check via LanguageTool. The first suggested replacement of each
    match is applied, from the end of the text backwards so offsets stay valid.
    """

    def __init__(
        self,
        url: str = LANGUAGETOOL_URL,
        language: str = "en-US",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._language = language
        self._timeout = timeout
        self._transport = transport

    async def check(self, text: str) -> CapabilityResult[str]:
        form = {"text": text, "language": self._language}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, data=form)
        except httpx.RequestError as error:
            return Err(FailureKind.NETWORK, str(error))

        if response.status_code != 200:
            return Err(FailureKind.STATUS, f"HTTP {response.status_code}")

        try:
            matches = response.json().get("matches") or []
            return Ok(apply_replacements(text, matches))
        except (ValueError, TypeError, AttributeError, KeyError) as error:
            return Err(FailureKind.PARSE, str(error))


def apply_replacements(text: str, matches: list) -> str:
    usable = [
        m for m in matches
        if isinstance(m, dict) and m.get("replacements")
    ]
    usable.sort(key=lambda m: int(m.get("offset", -1)), reverse=True)

    corrected = text
    for match in usable:
        replacement = match["replacements"][0].get("value") or ""
        if not replacement.strip():
            continue
        offset = int(match.get("offset", -1))
        length = int(match.get("length", 0))
        if offset >= 0 and offset + length <= len(corrected):
            corrected = corrected[:offset] + replacement + corrected[offset + length:]
    return corrected
