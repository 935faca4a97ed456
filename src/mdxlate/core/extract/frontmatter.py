"""Front-matter precondition checks and header block location"""

import re
from typing import Optional

from mdxlate.core.errors import FormatError


# Anchored at document start; leading blank lines belong to the header block.
HEADER_RE = re.compile(
    r'\A(?:[ \t\r]*\n)*[ \t]*---[ \t\r]*\n(.*?)^[ \t]*---[ \t\r]*$',
    re.MULTILINE | re.DOTALL,
)
HEADER_LINE_RE = re.compile(r'^[a-zA-Z0-9_-]+:\s?.*$')


def check_frontmatter(text: str) -> None:
    """Raise FormatError unless text opens with a well-formed `---` header and has a body."""
    content = (text or '').strip()
    if not content:
        raise FormatError("Content is empty")

    lines = content.split('\n')
    if lines[0].strip() != '---':
        raise FormatError("File must start with ---")

    close = next((i for i, line in enumerate(lines) if i > 0 and line.strip() == '---'), None)
    if close is None:
        raise FormatError("File must contain a second --- on a new line")

    if not '\n'.join(lines[close + 1:]).strip():
        raise FormatError("File must have text after the second ---")

    for line in lines[1:close]:
        if line.strip() and not HEADER_LINE_RE.match(line):
            raise FormatError(f'Headers must follow the "headerName: headerValue" format: {line.strip()!r}')


def match_header(text: str) -> Optional[re.Match]:
    """Return the leading `---` ... `---` block, or None."""
    return HEADER_RE.match(text)
