"""Mask protected regions of a document behind placeholder tokens.

Passes run in a fixed order: header -> code -> tables -> tab markup ->
admonitions -> reserved keywords. Every structural pass scans the immutable
source and claims (start, end) spans; a span overlapping one claimed by an
earlier pass is dropped. The masked text is rendered once from the claimed
spans, so each token lands where its content was found.
"""

import logging
from typing import Iterable

from mdxlate.core.errors import FormatError
from mdxlate.core.extract import blocks
from mdxlate.core.extract.frontmatter import check_frontmatter, match_header
from mdxlate.core.models import MaskedDoc, Snippet
from mdxlate.core.utils.tokens import (
    ADMONITION_PREFIX,
    CODE_PREFIX,
    HEADER_TOKEN,
    RESERVED_WORDS,
    TAB_ITEM_PREFIX,
    TABLE_PREFIX,
    TABS_PREFIX,
    TRAILING_TABLE_PREFIX,
    check_reserved_words,
    has_marker,
    make_token,
    protect_keywords,
)


logger = logging.getLogger(__name__)


class _Masker:
    """Collects non-overlapping source spans and renders the masked text once.

    `source` is never modified; each accepted span is replaced by its token
    at exactly the offsets where it was found.
    """

    def __init__(self, source: str):
        self.source = source
        self.spans: list[tuple[int, int, str]] = []
        self.snippets: list[Snippet] = []
        self.skipped = 0

    def mask(self, span: tuple[int, int], token: str) -> bool:
        """Claim span for token.

        Returns False, emitting nothing, when the span is empty or overlaps
        one claimed by an earlier pass (e.g. a table inside a fenced block).
        """
        start, end = span
        if start >= end or any(start < e and s < end for s, e, _ in self.spans):
            self.skipped += 1
            return False
        self.spans.append((start, end, token))
        self.snippets.append(Snippet(id=token, code=self.source[start:end]))
        return True

    def mask_series(self, spans: list[tuple[int, int]], prefix: str) -> None:
        index = 0
        for span in spans:
            if self.mask(span, make_token(f"{prefix}{index}")):
                index += 1

    def render(self) -> str:
        parts = []
        cursor = 0
        for start, end, token in sorted(self.spans):
            parts.append(self.source[cursor:start])
            parts.append(token)
            cursor = end
        parts.append(self.source[cursor:])
        return "".join(parts)


def extract(
    raw: str,
    reserved_words: Iterable[str] = RESERVED_WORDS,
    admonition_kinds: Iterable[str] = blocks.ADMONITION_KINDS,
    ) -> MaskedDoc:
    """Return the masked document and its ordered snippet list.

    Raises FormatError for missing/malformed front matter or when the
    document already contains protection markers, and ValueError for a
    reserved word that would collide with a snippet token.
    """
    reserved_words = check_reserved_words(reserved_words)
    check_frontmatter(raw)
    if has_marker(raw):
        raise FormatError("Document already contains protection markers")

    m = _Masker(raw)

    header = match_header(m.source)
    if header is None:
        raise FormatError("Front matter block not found at document start")
    m.mask(header.span(), HEADER_TOKEN)

    m.mask_series(blocks.code_block_spans(m.source), CODE_PREFIX)

    table_index = 0
    for start, end, trailing in blocks.table_run_spans(m.source):
        prefix = TRAILING_TABLE_PREFIX if trailing else TABLE_PREFIX
        if m.mask((start, end), make_token(f"{prefix}{table_index}")):
            table_index += 1

    m.mask_series(blocks.tab_item_spans(m.source), TAB_ITEM_PREFIX)
    m.mask_series(blocks.tab_container_spans(m.source), TABS_PREFIX)
    m.mask_series(blocks.admonition_spans(m.source, admonition_kinds), ADMONITION_PREFIX)

    masked = protect_keywords(m.render(), reserved_words)
    logger.debug("Masked %d snippet(s), %d overlapping match(es) skipped", len(m.snippets), m.skipped)
    return MaskedDoc(text=masked, snippets=m.snippets)
