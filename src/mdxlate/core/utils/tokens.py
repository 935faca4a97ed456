"""Protection markers, snippet token ids, and reserved-keyword wrapping"""

import re
from typing import Iterable


PROTECT_OPEN = "<notranslate>"
PROTECT_CLOSE = "</notranslate>"

RESERVED_WORDS = ("id:", "title:", "description:")

# Category prefixes; each category keeps its own counter.
CODE_PREFIX = "cx_spt_"
TABLE_PREFIX = "tz_spt_"
TRAILING_TABLE_PREFIX = "tl_spt_"
TAB_ITEM_PREFIX = "TabItem_"
TABS_PREFIX = "Tabs_"
ADMONITION_PREFIX = "admonition_"

_MARKER_RE = re.compile(re.escape(PROTECT_OPEN) + r"(.*?)" + re.escape(PROTECT_CLOSE), re.DOTALL)
_SPLIT_RE = re.compile(r"(" + re.escape(PROTECT_OPEN) + r".*?" + re.escape(PROTECT_CLOSE) + r")", re.DOTALL)


def make_token(name: str) -> str:
    """Wrap an identifier in the protection marker pair."""
    return f"{PROTECT_OPEN}{name}{PROTECT_CLOSE}"


HEADER_TOKEN = make_token("meta_header")


def has_marker(text: str) -> bool:
    return PROTECT_OPEN in text or PROTECT_CLOSE in text


_TOKEN_NAME_RE = re.compile(
    r"meta_header|(?:"
    + "|".join(re.escape(p) for p in (
        CODE_PREFIX, TABLE_PREFIX, TRAILING_TABLE_PREFIX, TAB_ITEM_PREFIX, TABS_PREFIX, ADMONITION_PREFIX,
    ))
    + r")\d+"
)


def check_reserved_words(words: Iterable[str]) -> list[str]:
    """Return words as a list; ValueError for a word that would wrap into a snippet token."""
    words = list(words)
    for word in words:
        if has_marker(word):
            raise ValueError(f"Reserved word {word!r} must not contain protection markers")
        if _TOKEN_NAME_RE.fullmatch(word):
            raise ValueError(f"Reserved word {word!r} collides with a snippet token name")
    return words


def protect_keywords(text: str, words: Iterable[str] = RESERVED_WORDS) -> str:
    """Wrap each literal occurrence of every word in markers.

    Text already inside a marker pair (snippet tokens, wrapped words) is
    never touched, so wrapping twice is the same as wrapping once.
    """
    for word in words:
        if not word:
            continue
        parts = _SPLIT_RE.split(text)
        parts[::2] = [p.replace(word, make_token(word)) for p in parts[::2]]
        text = "".join(parts)
    return text


def unprotect_keywords(text: str, words: Iterable[str] = RESERVED_WORDS) -> str:
    """Remove marker wrapping around every reserved word (all occurrences)."""
    for word in words:
        if word:
            text = text.replace(make_token(word), word)
    return text


def find_markers(text: str, context: int = 30) -> list[tuple[str, str]]:
    """Return (inner_id, excerpt) for each leftover marker, paired or stray."""
    found = []
    for m in _MARKER_RE.finditer(text):
        found.append((m.group(1), _excerpt(text, m.start(), m.end(), context)))
    remainder = _MARKER_RE.sub("", text)
    for marker in (PROTECT_OPEN, PROTECT_CLOSE):
        start = remainder.find(marker)
        while start != -1:
            found.append(("", _excerpt(remainder, start, start + len(marker), context)))
            start = remainder.find(marker, start + len(marker))
    return found


def _excerpt(text: str, start: int, end: int, context: int) -> str:
    return text[max(0, start - context):end + context]
