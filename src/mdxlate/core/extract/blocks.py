"""Structural pattern scanners: code fences, pipe tables, tab markup, admonitions.

Each scanner reads the unmodified source document and returns the
(start, end) offsets of its matches in scan order. The `*_spans` functions
feed the masker; the plain-named ones return the matched texts.
"""

import re
from typing import Iterable


ADMONITION_KINDS = (
    'note', 'tip', 'info', 'warning', 'danger', 'caution',
    'sharedCloudDanger', 'starterNote', 'privateCloudNote',
)

CODE_BLOCK_RE = re.compile(r'```.*?```', re.DOTALL)
TABLE_LINE_RE = re.compile(r'^\s*\|')
TAB_ITEM_RE = re.compile(r'^[ \t]*<TabItem\s+.*$', re.MULTILINE)
TABS_RE = re.compile(r'^[ \t]*<Tabs\s+.*$', re.MULTILINE)

Span = tuple[int, int]


def _spans(pattern: re.Pattern, source: str) -> list[Span]:
    return [m.span() for m in pattern.finditer(source)]


def code_block_spans(source: str) -> list[Span]:
    return _spans(CODE_BLOCK_RE, source)


def code_blocks(source: str) -> list[str]:
    """Triple-backtick blocks including the language tag, fences inclusive."""
    return [source[s:e] for s, e in code_block_spans(source)]


def table_run_spans(source: str) -> list[tuple[int, int, bool]]:
    """Maximal runs of `|`-led lines as (start, end, trailing).

    end stops before the newline closing the last line; trailing is True
    for a run still open at end of document.
    """
    runs: list[tuple[int, int, bool]] = []
    start = end = None
    offset = 0
    for line in source.split('\n'):
        if TABLE_LINE_RE.match(line):
            if start is None:
                start = offset
            end = offset + len(line)
        elif start is not None:
            runs.append((start, end, False))
            start = None
        offset += len(line) + 1
    if start is not None:
        runs.append((start, end, True))
    return runs


def table_runs(source: str) -> list[tuple[str, bool]]:
    """Maximal runs of `|`-led lines as (joined_text, trailing)."""
    return [(source[s:e], trailing) for s, e, trailing in table_run_spans(source)]


def tab_item_spans(source: str) -> list[Span]:
    return _spans(TAB_ITEM_RE, source)


def tab_items(source: str) -> list[str]:
    return [source[s:e] for s, e in tab_item_spans(source)]


def tab_container_spans(source: str) -> list[Span]:
    return _spans(TABS_RE, source)


def tab_containers(source: str) -> list[str]:
    return [source[s:e] for s, e in tab_container_spans(source)]


def admonition_pattern(kinds: Iterable[str] = ADMONITION_KINDS) -> re.Pattern:
    """Compile the `:::<kind> ... :::` matcher; longest kind names tried first."""
    names = sorted({k for k in kinds if k}, key=len, reverse=True)
    if not names:
        raise ValueError("At least one admonition kind is required")
    alternation = '|'.join(re.escape(k) for k in names)
    return re.compile(rf'^([ \t]*):::({alternation})(.*?):::$', re.MULTILINE | re.DOTALL)


def admonition_spans(source: str, kinds: Iterable[str] = ADMONITION_KINDS) -> list[Span]:
    return _spans(admonition_pattern(kinds), source)


def admonitions(source: str, kinds: Iterable[str] = ADMONITION_KINDS) -> list[str]:
    """Admonition blocks with indentation and kind keyword preserved."""
    return [source[s:e] for s, e in admonition_spans(source, kinds)]
