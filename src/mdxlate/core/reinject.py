"""Restore snippet tokens after translation and validate the round trip"""

import logging
from typing import Iterable

from mdxlate.core.errors import CorruptHeaderError, LeakedMarkerError
from mdxlate.core.models import Snippet
from mdxlate.core.utils.paths import ASSET_PREFIX, rewrite_asset_paths
from mdxlate.core.utils.tokens import RESERVED_WORDS, find_markers, unprotect_keywords


logger = logging.getLogger(__name__)


def inject_snippets(text: str, snippets: Iterable[Snippet]) -> tuple[str, list[str]]:
    """Replace every occurrence of each token with its content.

    Plain str.replace: neither token nor content is interpreted as a pattern.
    Returns (text, ids_of_tokens_that_never_appeared).
    """
    missing = []
    for snippet in snippets:
        if snippet.id not in text:
            missing.append(snippet.id)
            continue
        text = text.replace(snippet.id, snippet.code)
    return text, missing


def validate(text: str, missing: list[str] = ()) -> None:
    """Raise CorruptHeaderError / LeakedMarkerError when the restored text is damaged."""
    stripped = text.strip()
    if not stripped.startswith('---'):
        raise CorruptHeaderError(
            "corrupt header, must start with ---",
            excerpt=stripped[:40],
        )

    leaked = find_markers(text)
    if leaked:
        inner, excerpt = leaked[0]
        raise LeakedMarkerError(
            f"{len(leaked)} protection marker(s) left after reinjection",
            snippet_id=inner or None,
            excerpt=excerpt,
        )

    if missing:
        raise LeakedMarkerError(
            f"{len(missing)} snippet token(s) missing from translated text",
            snippet_id=", ".join(missing),
        )


def reinject(
    text: str,
    snippets: Iterable[Snippet],
    reserved_words: Iterable[str] = RESERVED_WORDS,
    ) -> str:
    """Restore snippets, unwrap reserved keywords, and validate the result."""
    restored, missing = inject_snippets(text, snippets)
    restored = unprotect_keywords(restored, reserved_words)
    validate(restored, missing)
    return restored


def finalize(text: str, asset_prefix: str = ASSET_PREFIX, asset_depth: int = 2) -> str:
    """Rewrite static asset links relative to the build output location."""
    return rewrite_asset_paths(text, asset_prefix, asset_depth)
