"""
String helpers that work on code points rather than bytes.
"""

from __future__ import annotations

import base64
import re
import secrets
import unicodedata
from typing import Iterable, Optional

# Word_Break MidLetter, MidNumLet and Single_Quote code points: ":", "·", ".", quotes and their variants.
_WORD_BREAK_IGNORABLE = frozenset(
    "\u0027\u002e\u003a\u00b7\u0387\u055f\u05f4\u2018\u2019\u2024\u2027"
    "\ufe13\ufe52\ufe55\uff07\uff0e\uff1a"
)
_IGNORABLE_CATEGORIES = frozenset({"Mn", "Me", "Cf", "Lm", "Sk"})
_UNSAFE_TOKEN_CHARS = str.maketrans("", "", "/+=")


def substring(text: str, start: int, length: Optional[int] = None) -> str:
    """
    Code-point substring. Negative ``start`` counts from the end; negative
    ``length`` stops that many characters before the end.
    """
    size = len(text)
    if start < 0:
        start = max(size + start, 0)
    if length is None:
        return text[start:]
    end = size + length if length < 0 else start + length
    return text[start:end] if end > start else ""


def contains(text: str, needles: str | Iterable[str]) -> bool:
    if isinstance(needles, str):
        needles = [needles]
    return any(needle in text for needle in needles)


def length(text: str | bytes, encoding: str = "utf-8") -> int:
    """Number of code points; bytes are decoded with ``encoding`` first."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode(encoding, errors="replace")
    return len(text)


def _is_case_ignorable(char: str) -> bool:
    return char in _WORD_BREAK_IGNORABLE or unicodedata.category(char) in _IGNORABLE_CATEGORIES


def _is_cased(char: str) -> bool:
    return unicodedata.category(char) in ("Lu", "Ll", "Lt") or char.lower() != char.upper()


def title(text: str) -> str:
    """
    Title-case every word: ``"hello_world"`` -> ``"Hello_World"``,
    ``"HelloWorld"`` -> ``"Helloworld"``, ``"hello.world"`` -> ``"Hello.world"``.

    A word starts at the first character after anything uncased; case-ignorable
    characters (".", ":", apostrophes, combining marks) do not end a word.
    """
    in_word = False
    out = []
    for char in text:
        out.append(char.lower() if in_word else char.title())
        if not _is_case_ignorable(char):
            in_word = _is_cased(char)
    return "".join(out)


def convert_encoding(
    data: bytes | str,
    to: str = "utf-8",
    from_: str = "gb2312",
    errors: str = "replace",
) -> bytes:
    """
    Transcode ``data`` from the ``from_`` charset to the ``to`` charset.

    ``str`` input is already decoded, so only the encode step applies.
    Unknown charset names raise LookupError.
    """
    text = data if isinstance(data, str) else bytes(data).decode(from_, errors=errors)
    return text.encode(to, errors=errors)


def random_token(length: int = 16) -> str:
    """``length`` characters from [A-Za-z0-9], drawn from ``secrets``."""
    token = ""
    while len(token) < length:
        size = length - len(token)
        chunk = base64.b64encode(secrets.token_bytes(size)).decode("ascii")
        token += chunk.translate(_UNSAFE_TOKEN_CHARS)[:size]
    return token


def ensure_suffix(text: str, suffix: str) -> str:
    """Collapse any trailing run of ``suffix`` into exactly one: ``"a!!!"`` -> ``"a!"``."""
    if not suffix:
        return text
    # "$" also matches just before a single final newline, which stays in place.
    return re.sub(f"(?:{re.escape(suffix)})+$", "", text) + suffix


def char_at(text: str, index: int) -> Optional[str]:
    size = len(text)
    if index < -size or index > size - 1:
        return None
    return text[index]
