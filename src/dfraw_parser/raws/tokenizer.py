"""
Tokenizer for bracket-tagged raw text.

Turns raw file text into a lazy stream of ``[KEY:VALUE]`` tokens. Values are
left exactly as written; splitting on ':' belongs to the tag rule that
consumes the token.
"""

import re
from typing import Iterator, NamedTuple, Optional, Tuple

# Keys exclude ']' so a stray closing bracket never widens a tag: the match
# is always the nearest complete bracket pair.
RAW_TOKEN_RE = re.compile(r"\[(?P<key>[^\[\]:]+):?(?P<value>[^\]\[]*)\]")


class Token(NamedTuple):
    """A single tag occurrence."""
    key: str
    value: str
    line: int = 0


def tokenize(text: str, first_line: int = 1) -> Iterator[Token]:
    """Yield every tag in ``text`` from left to right.

    Args:
        text: Raw file content (or part of it)
        first_line: Line number of the first line of ``text``

    Yields:
        Token for each ``[KEY]`` or ``[KEY:VALUE]`` tag
    """
    line = first_line
    position = 0
    for match in RAW_TOKEN_RE.finditer(text):
        line += text.count("\n", position, match.start())
        position = match.start()
        yield Token(match.group("key"), match.group("value"), line)


def split_header(text: str) -> Tuple[Optional[str], str, int]:
    """Split off the filename header line of a raw file.

    The first line names the file unless it already holds a tag.

    Returns:
        (header or None, remaining text, line number the remaining text starts at)
    """
    first, newline, rest = text.partition("\n")
    header = first.lstrip("\ufeff").strip()
    if not header or "[" in header:
        return None, text, 1
    return header, rest if newline else "", 2
